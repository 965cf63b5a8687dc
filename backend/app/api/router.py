"""
Router that serializes responses by field name.

Models store their primary key under the ``_id`` alias so that
``model_dump(by_alias=True)`` writes Mongo documents directly. API clients
should see ``id`` instead, so every route is registered with
``response_model_by_alias=False``.
"""

from typing import Any

from fastapi import APIRouter
from fastapi.routing import APIRoute


class FieldNameAPIRoute(APIRoute):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs["response_model_by_alias"] = False
        super().__init__(*args, **kwargs)


class CustomAPIRouter(APIRouter):
    """APIRouter whose routes emit ``id`` rather than ``_id``."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("route_class", FieldNameAPIRoute)
        super().__init__(*args, **kwargs)
