from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from nexus_api.services.skill_service import SkillService
from nexus_api.utils.cache import get_cache
from nexus_api.utils.http_client import get_http_client


router = APIRouter(prefix="/api/skills", tags=["lookup"])

MAX_QUERY_LENGTH = 100


def get_skill_service(cache = Depends(get_cache), http = Depends(get_http_client)) -> SkillService:
    return SkillService(cache, http)


@router.get("/search")
async def search_skills(q: Optional[str] = None, service: SkillService = Depends(get_skill_service)):
    if not q:
        raise HTTPException(status_code=400, detail="Query required")
    skills = await service.search_skills(q.strip()[:MAX_QUERY_LENGTH])
    return {"skills": skills}
