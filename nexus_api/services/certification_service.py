import logging
from datetime import date
from typing import Any, Dict

from nexus_api.config import LOOKUP_CACHE_TTL
from nexus_api.schemas.lookup import Certification
from nexus_api.services.errors import InvalidPlatformError, UpstreamError


logger = logging.getLogger(__name__)

PLATFORMS = ("coursera", "microsoft", "aws", "udemy", "linkedin-learning")
MAX_ID_LENGTH = 500

COURSERA_VERIFY_URL = "https://www.coursera.org/account/accomplishments/verify/{id}"
MICROSOFT_CREDENTIALS_URL = "https://learn.microsoft.com/api/credentials/{id}"
AWS_VERIFY_URL = "https://aws.amazon.com/verification"


def _is_url(value: str) -> bool:
    return value.startswith("http")


class CertificationService:
    """Resolve a credential id on a learning platform into a Certification.

    Only coursera and microsoft are checked over the network; the other
    platforms have no public API and return an unverified stub. Network
    failures never propagate: they produce an unverified record with a
    note telling the user how to verify manually, and are not cached.
    """

    def __init__(self, cache, http_client, ttl: int = LOOKUP_CACHE_TTL) -> None:
        self._cache = cache
        self._http = http_client
        self._ttl = ttl

    async def fetch_certification(self, platform: str, credential_id: str) -> Certification:
        platform = (platform or "").strip().lower()
        if platform not in PLATFORMS:
            raise InvalidPlatformError("Invalid platform")
        sanitized = (credential_id or "").strip()[:MAX_ID_LENGTH]

        if platform == "coursera":
            return await self._fetch_coursera(sanitized)
        if platform == "microsoft":
            return await self._fetch_microsoft(sanitized)
        if platform == "aws":
            return self._aws_stub(sanitized)
        if platform == "udemy":
            return self._udemy_stub(sanitized)
        return self._linkedin_stub(sanitized)

    async def _fetch_coursera(self, credential_id: str) -> Certification:
        url = credential_id if _is_url(credential_id) else COURSERA_VERIFY_URL.format(id=credential_id)

        async def verify() -> Dict[str, Any]:
            await self._http.get_text(url)
            return Certification(
                platform="coursera",
                certificate_name="Certificate",
                issuer="Coursera",
                completion_date=date.today().isoformat(),
                credential_id=credential_id,
                credential_url=url,
                verified=True,
            ).model_dump()

        try:
            data = await self._cache.get_or_compute(f"coursera_{credential_id}", verify, ttl=self._ttl)
        except UpstreamError as exc:
            logger.warning("Coursera verification failed for %s: %s", credential_id, exc)
            return Certification(
                platform="coursera",
                certificate_name="Certificate",
                issuer="Coursera",
                credential_id=credential_id,
                credential_url=COURSERA_VERIFY_URL.format(id=credential_id),
                verified=False,
                notes="Visit URL to manually verify",
            )
        return Certification(**data)

    async def _fetch_microsoft(self, credential_id: str) -> Certification:
        url = credential_id if _is_url(credential_id) else MICROSOFT_CREDENTIALS_URL.format(id=credential_id)

        async def verify() -> Dict[str, Any]:
            body = await self._http.get_json(url)
            body = body if isinstance(body, dict) else {}
            return Certification(
                platform="microsoft",
                certificate_name=body.get("title") or "Microsoft Certificate",
                issuer="Microsoft",
                completion_date=body.get("completionDate") or "",
                credential_id=credential_id,
                credential_url=url,
                verified=True,
            ).model_dump()

        try:
            data = await self._cache.get_or_compute(f"microsoft_{credential_id}", verify, ttl=self._ttl)
        except UpstreamError as exc:
            logger.warning("Microsoft credential lookup failed for %s: %s", credential_id, exc)
            return Certification(
                platform="microsoft",
                certificate_name="Microsoft Certificate",
                issuer="Microsoft",
                credential_id=credential_id,
                credential_url=url,
                verified=False,
                notes="Verify at learn.microsoft.com",
            )
        return Certification(**data)

    @staticmethod
    def _aws_stub(credential_id: str) -> Certification:
        return Certification(
            platform="aws",
            certificate_name="AWS Certificate",
            issuer="Amazon Web Services",
            credential_id=credential_id,
            credential_url=credential_id if _is_url(credential_id) else AWS_VERIFY_URL,
            verified=False,
            notes="Verify at aws.amazon.com/verification",
        )

    @staticmethod
    def _udemy_stub(credential_id: str) -> Certification:
        return Certification(
            platform="udemy",
            certificate_name="Udemy Certificate",
            issuer="Udemy",
            credential_id=credential_id,
            credential_url=credential_id if _is_url(credential_id) else "",
            verified=False,
            notes="No public API. Upload certificate manually",
        )

    @staticmethod
    def _linkedin_stub(credential_id: str) -> Certification:
        return Certification(
            platform="linkedin-learning",
            certificate_name="LinkedIn Learning Certificate",
            issuer="LinkedIn Learning",
            credential_id=credential_id,
            credential_url=credential_id if _is_url(credential_id) else "",
            verified=False,
            notes="Share certificate URL from LinkedIn profile",
        )
