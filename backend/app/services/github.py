import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.cache import CacheKeys, cache_service
from app.core.config import settings
from app.core.constants import (
    GITHUB_MAX_ANALYZED_REPOS,
    GITHUB_REPOS_PER_PAGE,
    LANGUAGE_SKILL_MAP,
    VERIFICATION_SOURCE_GITHUB,
)
from app.core.exceptions import (
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    ValidationFailedError,
)
from app.core.http_utils import InstrumentedAsyncClient
from app.core.metrics import verifications_total
from app.models.user import GitHubStats, User
from app.repositories.users import UserRepository

logger = logging.getLogger(__name__)

_GITHUB_API_TIMEOUT = 10.0
_SERVICE_NAME = "github"

_USERNAME = r"[a-zA-Z0-9](?:[a-zA-Z0-9-]*[a-zA-Z0-9])?"
_BARE_USERNAME_RE = re.compile(rf"^{_USERNAME}$")
_PROFILE_URL_RE = re.compile(rf"github\.com/({_USERNAME})")
_REPOSITORIES_URL_RE = re.compile(rf"^https://github\.com/({_USERNAME})\?tab=repositories$")


def extract_github_username(value: str) -> Optional[str]:
    """Accept a bare username or any github.com profile URL."""
    value = value.strip()
    if _BARE_USERNAME_RE.match(value):
        return value
    match = _PROFILE_URL_RE.search(value)
    if match:
        return match.group(1)
    return None


def parse_repositories_url(url: str) -> Optional[str]:
    """Username from a ``https://github.com/<user>?tab=repositories`` URL."""
    match = _REPOSITORIES_URL_RE.match(url.strip())
    return match.group(1) if match else None


def languages_to_skills(languages: List[str]) -> List[str]:
    """Map lowercase language names to skills, keeping first-seen order."""
    skills: Dict[str, None] = {}
    for language in languages:
        mapped = LANGUAGE_SKILL_MAP.get(language)
        if mapped:
            for skill in mapped:
                skills.setdefault(skill, None)
        else:
            skills.setdefault(language[:1].upper() + language[1:], None)
    return list(skills)


class GitHubService:
    """
    Read-only GitHub REST API operations.

    Public endpoints are called anonymously; endpoints that need the user's
    identity take the OAuth access token the client obtained.
    """

    def __init__(self, api_url: Optional[str] = None):
        self.api_url = (api_url or settings.GITHUB_API_URL).rstrip("/")

    def _get_auth_headers(self, access_token: Optional[str] = None) -> Dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    def _api_client(self, access_token: Optional[str] = None) -> InstrumentedAsyncClient:
        return InstrumentedAsyncClient(
            _SERVICE_NAME,
            timeout=_GITHUB_API_TIMEOUT,
            base_url=self.api_url,
            headers=self._get_auth_headers(access_token),
        )

    async def _api_get(
        self,
        endpoint: str,
        access_token: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        async with self._api_client(access_token) as client:
            return await client.get(endpoint, params=params)

    async def get_authenticated_login(self, access_token: str) -> str:
        """Login of the account that owns the access token."""
        response = await self._api_get("/user", access_token=access_token)
        if response.status_code != 200:
            logger.error(f"GitHub GET /user failed: {response.status_code}")
            raise ExternalServiceError(
                "Failed to fetch GitHub user info",
                service=_SERVICE_NAME,
                upstream_status=response.status_code,
            )
        return response.json()["login"]

    async def fetch_github_stats(self, username: str, access_token: str) -> GitHubStats:
        response = await self._api_get(f"/users/{username}", access_token=access_token)
        if response.status_code != 200:
            logger.error(f"GitHub stats for {username} failed: {response.status_code}")
            raise ExternalServiceError(
                f"Failed to fetch GitHub stats: {response.status_code}",
                service=_SERVICE_NAME,
                upstream_status=response.status_code,
            )

        data = response.json()
        return GitHubStats(
            public_repos=data.get("public_repos") or 0,
            followers=data.get("followers") or 0,
            following=data.get("following") or 0,
        )

    async def analyze_github_profile(self, username: str) -> Dict[str, Any]:
        """
        Infer skills from the languages of a user's public repositories.

        Results are cached per username in Redis.
        """
        return await cache_service.get_or_fetch(
            CacheKeys.github_profile_analysis(username),
            lambda: self._fetch_profile_analysis(username),
            ttl_seconds=settings.GITHUB_ANALYSIS_CACHE_TTL,
        )

    async def _fetch_profile_analysis(self, username: str) -> Dict[str, Any]:
        response = await self._api_get(
            f"/users/{username}/repos",
            params={"per_page": GITHUB_REPOS_PER_PAGE, "sort": "updated"},
        )
        if response.status_code == 404:
            raise NotFoundError("GitHub user not found")
        if response.status_code != 200:
            raise ExternalServiceError(
                "Failed to fetch GitHub repositories",
                service=_SERVICE_NAME,
                upstream_status=response.status_code,
            )

        languages: Dict[str, None] = {}
        repositories = []
        for repo in response.json():
            language = repo.get("language")
            if not language:
                continue
            languages.setdefault(language.lower(), None)
            repositories.append({"name": repo["name"], "languages": [language]})

        return {
            "username": username,
            "profile_url": f"https://github.com/{username}",
            "inferred_skills": languages_to_skills(list(languages)),
            "repositories": repositories[:GITHUB_MAX_ANALYZED_REPOS],
        }


class GitHubVerificationService:
    """
    Verifies that a user owns the GitHub account they claim.

    The client completes the OAuth flow and hands over the access token; the
    account behind the token must match the profile URL the user entered.
    """

    def __init__(self, db: AsyncIOMotorDatabase, github: Optional[GitHubService] = None):
        self.users = UserRepository(db)
        self.github = github or GitHubService()

    async def verify_github_account(self, user_id: str, profile_url: str, access_token: str) -> User:
        if not profile_url.strip():
            raise ValidationFailedError("Please enter your GitHub profile URL")

        url_username = parse_repositories_url(profile_url)
        if not url_username:
            raise ValidationFailedError("URL must be in format: https://github.com/username?tab=repositories")

        login = await self.github.get_authenticated_login(access_token)
        if login.lower() != url_username.lower():
            verifications_total.labels(source=VERIFICATION_SOURCE_GITHUB, result="rejected").inc()
            raise ValidationFailedError(
                f'GitHub account mismatch. You authenticated as "{login}" but provided URL for "{url_username}".'
            )

        linked = await self.users.find_many(
            {
                "github_username": {"$regex": f"^{re.escape(login)}$", "$options": "i"},
                "_id": {"$ne": user_id},
            },
            limit=1,
        )
        if linked:
            verifications_total.labels(source=VERIFICATION_SOURCE_GITHUB, result="rejected").inc()
            raise ConflictError("This GitHub account is already linked to another TeamUp user")

        stats = await self.github.fetch_github_stats(login, access_token)

        now = datetime.now(timezone.utc)
        user = await self.users.update(
            user_id,
            {
                "github_verified": True,
                "github_username": login,
                "github_profile_url": f"https://github.com/{login}",
                "github_verified_at": now,
                "github_stats": stats.model_dump(),
                "updated_at": now,
            },
        )
        verifications_total.labels(source=VERIFICATION_SOURCE_GITHUB, result="verified").inc()
        logger.info(f"User {user_id} verified GitHub account {login}")
        return user
