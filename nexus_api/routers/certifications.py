from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from nexus_api.services.certification_service import CertificationService
from nexus_api.services.errors import ServiceError
from nexus_api.utils.cache import get_cache
from nexus_api.utils.dependencies import as_http_exception
from nexus_api.utils.http_client import get_http_client


router = APIRouter(prefix="/api/certifications", tags=["lookup"])


def get_certification_service(cache = Depends(get_cache), http = Depends(get_http_client)) -> CertificationService:
    return CertificationService(cache, http)


@router.get("/fetch")
async def fetch_certification(platform: Optional[str] = None, id: Optional[str] = None, service: CertificationService = Depends(get_certification_service)):
    if not platform or not id:
        raise HTTPException(status_code=400, detail="Platform and ID required")
    try:
        cert = await service.fetch_certification(platform, id)
    except ServiceError as exc:
        raise as_http_exception(exc)
    return cert
