import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import Body, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from jose import JWTError
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError

from app.api import deps
from app.api.router import CustomAPIRouter
from app.core import security
from app.core.metrics import auth_login_attempts_total, auth_signups_total
from app.db.mongodb import get_database
from app.models.user import User
from app.repositories import UserRepository
from app.schemas.auth import LogoutResponse
from app.schemas.token import Token, TokenPayload
from app.schemas.user import UserMe, UserSignup
from app.services.profiles import ProfileService, normalize_username

router = CustomAPIRouter()
logger = logging.getLogger(__name__)


def _issue_tokens(user_id: str) -> dict:
    return {
        "access_token": security.create_access_token(user_id),
        "refresh_token": security.create_refresh_token(user_id),
        "token_type": "bearer",
    }


def _forbidden(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


@router.post("/signup", response_model=UserMe, status_code=status.HTTP_201_CREATED, summary="Register a new user")
async def signup(
    user_in: UserSignup,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """
    Create an account and its profile. A username is generated from the
    full name when none is given.
    """
    user_repo = UserRepository(db)
    profile_service = ProfileService(db)

    if await user_repo.exists_by_email(user_in.email):
        auth_signups_total.labels(status="rejected").inc()
        raise HTTPException(status_code=400, detail="An account with this email already exists")

    if user_in.username:
        if not await profile_service.is_username_available(user_in.username):
            auth_signups_total.labels(status="rejected").inc()
            raise HTTPException(status_code=400, detail="Username is already taken")
        username = user_in.username
    else:
        username = await profile_service.generate_unique_username(user_in.full_name)

    new_user = User(
        username=username,
        email=user_in.email,
        full_name=user_in.full_name,
        hashed_password=security.get_password_hash(user_in.password),
    )
    await user_repo.create(new_user)
    auth_signups_total.labels(status="success").inc()
    logger.info(f"New user signed up: {new_user.id} ({username})")
    return new_user


@router.post("/login/access-token", response_model=Token, summary="Login to get access token")
async def login_access_token(
    db: AsyncIOMotorDatabase = Depends(get_database),
    form_data: OAuth2PasswordRequestForm = Depends(),
) -> Any:
    """
    OAuth2 password login. The `username` form field takes either the
    account email or the username (a leading `@` is ignored).
    """
    user_repo = UserRepository(db)
    login = form_data.username.strip()
    if "@" in login and not login.startswith("@"):
        user = await user_repo.get_by_email(login)
    else:
        user = await user_repo.get_by_username(normalize_username(login))

    if not user or not security.verify_password(form_data.password, user.hashed_password):
        auth_login_attempts_total.labels(status="failed").inc()
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        auth_login_attempts_total.labels(status="inactive").inc()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")

    auth_login_attempts_total.labels(status="success").inc()
    return _issue_tokens(user.id)


@router.post("/login/refresh-token", response_model=Token, summary="Refresh access token")
async def refresh_token(
    refresh_token: str = Body(..., embed=True, description="The refresh token obtained during login"),
    db: AsyncIOMotorDatabase = Depends(get_database)
) -> Any:
    """Exchange a refresh token for a new token pair."""
    try:
        payload = security.decode_token(refresh_token)
        token_data = TokenPayload(**payload)
    except (JWTError, ValidationError):
        raise _forbidden("Could not validate credentials")

    if token_data.type != security.TOKEN_TYPE_REFRESH:
        raise _forbidden("Invalid token type")

    user = await UserRepository(db).get_by_id(token_data.sub)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    if security.is_revoked(payload, user.last_logout_at):
        raise _forbidden("Token revoked")

    return _issue_tokens(user.id)


@router.post("/logout", response_model=LogoutResponse, summary="Logout user")
async def logout(
    current_user: User = Depends(deps.get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database)
) -> Any:
    """Revoke every token issued to the current user so far."""
    await UserRepository(db).update(current_user.id, {"last_logout_at": datetime.now(timezone.utc)})
    logger.info(f"User {current_user.id} logged out")
    return {"message": "Successfully logged out"}
