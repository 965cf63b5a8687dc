from typing import Optional

from fastapi import Depends, Query
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.api import deps
from app.api.router import CustomAPIRouter
from app.api.v1.helpers.responses import RESP_400, RESP_404, RESP_409, RESP_502
from app.core.exceptions import ValidationFailedError
from app.db.mongodb import get_database
from app.models.user import User
from app.schemas.auth import MessageResponse
from app.schemas.verification import (
    CertificateAnalysisRequest,
    CertificateAnalysisResponse,
    GitHubAnalysisResponse,
    GitHubVerificationRequest,
    GitHubVerificationResponse,
    SkillVerificationResponse,
)
from app.services.certificates import CertificateService
from app.services.github import GitHubService, GitHubVerificationService, extract_github_username
from app.services.verification import SkillVerificationService

router = CustomAPIRouter()


@router.post(
    "/github",
    response_model=GitHubVerificationResponse,
    responses={**RESP_400, **RESP_409, **RESP_502},
)
async def verify_github(
    verification_in: GitHubVerificationRequest,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Link a GitHub account to the current user.

    The client runs the GitHub OAuth flow and passes the resulting access
    token together with the repositories URL of the account being claimed.
    """
    user = await GitHubVerificationService(db).verify_github_account(
        current_user.id, verification_in.profile_url, verification_in.access_token
    )
    return {
        "github_username": user.github_username,
        "github_profile_url": user.github_profile_url,
        "github_stats": user.github_stats,
    }


@router.get(
    "/github/analyze",
    response_model=GitHubAnalysisResponse,
    responses={**RESP_400, **RESP_404, **RESP_502},
)
async def analyze_github(
    username: str = Query(..., description="GitHub username or profile URL"),
    current_user: User = Depends(deps.get_current_active_user),
):
    """Infer skills from the languages of a GitHub user's public repositories."""
    github_username = extract_github_username(username)
    if not github_username:
        raise ValidationFailedError("Invalid GitHub username or profile URL")
    return await GitHubService().analyze_github_profile(github_username)


@router.post(
    "/certificate",
    response_model=CertificateAnalysisResponse,
    responses={**RESP_502},
)
async def analyze_certificate(
    certificate_in: CertificateAnalysisRequest,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Read a course certificate image. When the name on the certificate
    matches the profile, the matched skills are recorded as verified.
    """
    return await CertificateService(db).analyze_certificate(
        current_user.id,
        certificate_in.image_base64,
        profile_name=current_user.display_name,
        profile_skills=[skill.name for skill in current_user.skills],
    )


@router.get("/skills/me", response_model=Optional[SkillVerificationResponse])
async def read_my_skill_verification(
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """The current verified skill set, or null when there is none."""
    return await SkillVerificationService(db).get_skill_verification(current_user.id)


@router.delete("/skills/me", response_model=MessageResponse)
async def invalidate_my_skill_verification(
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    count = await SkillVerificationService(db).invalidate_skill_verification(current_user.id, "manual")
    return {"message": f"Invalidated {count} skill verification(s)"}
