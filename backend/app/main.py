from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.cache import cache_service
from app.core.exceptions import TeamUpError, teamup_exception_handler
from app.core.metrics import PrometheusMiddleware, metrics_endpoint
from app.db.mongodb import connect_to_mongo, close_mongo_connection
from app.core.init_db import init_db
from app.api.v1.endpoints import (
    auth,
    feed,
    invitations,
    messages,
    notifications,
    stats,
    teams,
    users,
    verification,
)
from app.api import health

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
    TeamUp API for finding teammates and forming teams for hackathons and projects.

    ## Features
    * **Profiles & Discovery**: Unique usernames, skills and roles, search for people who are still available.
    * **Team Formation**: Create teams, invite people or request to join, capacity-checked membership.
    * **Workspace**: Shared task list and activity log for every team.
    * **Messaging & Notifications**: Direct conversations and in-app notifications.
    * **Activity Feed**: User posts plus automatic team events.
    * **Skill Verification**: GitHub account linking and AI certificate analysis.

    """,
    version="0.1.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
)

app.add_middleware(PrometheusMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_BASE_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_exception_handler(TeamUpError, teamup_exception_handler)
app.add_route("/metrics", metrics_endpoint, include_in_schema=False)


@app.on_event("startup")
async def startup_event():
    await connect_to_mongo()
    await init_db()


@app.on_event("shutdown")
async def shutdown_event():
    await cache_service.close()
    await close_mongo_connection()


app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(auth.router, prefix=f"{settings.API_V1_STR}", tags=["auth"])
app.include_router(users.router, prefix=f"{settings.API_V1_STR}/users", tags=["users"])
app.include_router(teams.router, prefix=f"{settings.API_V1_STR}/teams", tags=["teams"])
app.include_router(invitations.router, prefix=f"{settings.API_V1_STR}/invitations", tags=["invitations"])
app.include_router(notifications.router, prefix=f"{settings.API_V1_STR}/notifications", tags=["notifications"])
app.include_router(feed.router, prefix=f"{settings.API_V1_STR}/feed", tags=["feed"])
app.include_router(messages.router, prefix=f"{settings.API_V1_STR}/conversations", tags=["messages"])
app.include_router(verification.router, prefix=f"{settings.API_V1_STR}/verification", tags=["verification"])
app.include_router(stats.router, prefix=f"{settings.API_V1_STR}/stats", tags=["stats"])


@app.get("/")
async def root():
    return {"message": "Welcome to TeamUp API"}
