"""
Certificate analysis with Gemini.

The certificate image is sent to the Gemini ``generateContent`` endpoint
together with an extraction prompt. The model answers with a JSON document
holding the name printed on the certificate and the course topics.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.config import settings
from app.core.constants import VERIFICATION_SOURCE_CERTIFICATE
from app.core.exceptions import ExternalServiceError
from app.core.http_utils import InstrumentedAsyncClient
from app.core.metrics import verifications_total
from app.services.verification import SkillVerificationService

logger = logging.getLogger(__name__)

_GEMINI_TIMEOUT = 60.0
_SERVICE_NAME = "gemini"

_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)

CERTIFICATE_PROMPT = """
Analyze the certificate image and extract:
1. Person's full name
2. Course or certification topics

Compare extracted name with: "{profile_name}"
Names should match even if order differs.

Return ONLY valid JSON in this exact format:
{{
  "extractedName": "Full Name",
  "courseTopics": ["Topic 1", "Topic 2"],
  "nameMatch": true,
  "reason": "Short explanation"
}}"""


def build_request_body(image_base64: str, profile_name: str) -> Dict[str, Any]:
    return {
        "contents": [
            {
                "parts": [
                    {"text": CERTIFICATE_PROMPT.format(profile_name=profile_name)},
                    {"inline_data": {"mime_type": "image/jpeg", "data": image_base64}},
                ]
            }
        ],
        "generationConfig": {"temperature": 0.3, "maxOutputTokens": 1024},
    }


def parse_model_answer(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Pull the JSON answer out of a generateContent response."""
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        raise ExternalServiceError("Gemini returned no content", service=_SERVICE_NAME)

    text = _CODE_FENCE_RE.sub("", text.strip())
    try:
        answer = json.loads(text)
    except json.JSONDecodeError:
        logger.error(f"Gemini answer is not valid JSON: {text[:200]}")
        raise ExternalServiceError("Gemini returned an unreadable answer", service=_SERVICE_NAME)

    if not isinstance(answer, dict):
        raise ExternalServiceError("Gemini returned an unreadable answer", service=_SERVICE_NAME)
    return answer


def clean_topics(value: Any) -> List[str]:
    """Non-empty string topics from the model answer. Anything else is dropped."""
    if not isinstance(value, list):
        return []
    return [t.strip() for t in value if isinstance(t, str) and t.strip()]


def match_skills(profile_skills: List[str], course_topics: List[str]) -> List[str]:
    """Profile skills named as a whole word in at least one course topic."""
    topics = [t.lower() for t in course_topics]
    matched = []
    for skill in profile_skills:
        needle = skill.strip().lower()
        if not needle:
            continue
        word = re.compile(rf"(?<!\w){re.escape(needle)}(?!\w)")
        if any(word.search(topic) for topic in topics):
            matched.append(skill)
    return matched


class CertificateService:
    def __init__(self, db: AsyncIOMotorDatabase, api_key: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.verification_service = SkillVerificationService(db)

    @property
    def endpoint(self) -> str:
        return f"{settings.GEMINI_API_URL.rstrip('/')}/models/{settings.GEMINI_MODEL}:generateContent"

    async def _generate(self, body: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise ExternalServiceError("Gemini API key not configured", service=_SERVICE_NAME)

        async with InstrumentedAsyncClient(_SERVICE_NAME, timeout=_GEMINI_TIMEOUT) as client:
            response = await client.post(self.endpoint, params={"key": self.api_key}, json=body)

        if response.status_code != 200:
            logger.error(f"Gemini returned {response.status_code}: {response.text[:200]}")
            raise ExternalServiceError(
                "Certificate analysis request failed",
                service=_SERVICE_NAME,
                upstream_status=response.status_code,
            )
        return response.json()

    async def analyze_certificate(
        self,
        user_id: str,
        image_base64: str,
        profile_name: str,
        profile_skills: List[str],
    ) -> Dict[str, Any]:
        """
        Extract the name and topics from a certificate image.

        A matching name records a certificate SkillVerification for the user.
        """
        answer = parse_model_answer(await self._generate(build_request_body(image_base64, profile_name)))

        course_topics = clean_topics(answer.get("courseTopics"))
        result = {
            "extracted_name": answer.get("extractedName") or "",
            "course_topics": course_topics,
            "inferred_skills": match_skills(profile_skills, course_topics),
            "name_match": bool(answer.get("nameMatch")),
            "reason": answer.get("reason") or "",
        }

        if result["name_match"]:
            await self.verification_service.create_skill_verification(
                user_id,
                VERIFICATION_SOURCE_CERTIFICATE,
                verified_skills=result["inferred_skills"],
                extracted_name=result["extracted_name"],
                course_topics=course_topics,
                name_match=True,
                reason=result["reason"],
            )
        else:
            verifications_total.labels(source=VERIFICATION_SOURCE_CERTIFICATE, result="rejected").inc()
            logger.info(f"Certificate name mismatch for user {user_id}: {result['reason']}")

        return result
