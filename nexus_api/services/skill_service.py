import logging
from typing import Any, Dict, List

from nexus_api.config import LOOKUP_CACHE_TTL
from nexus_api.schemas.lookup import Skill
from nexus_api.services.errors import UpstreamError


logger = logging.getLogger(__name__)

MAX_RESULTS = 20
ESCO_SEARCH_URL = "https://ec.europa.eu/esco/api/search"

TECH_SKILLS = [
    "React", "ReactJS", "React.js", "Angular", "Vue", "Vue.js", "JavaScript", "TypeScript",
    "Python", "Java", "C", "C++", "C#", "Go", "Rust", "Swift", "Kotlin", "PHP", "Ruby",
    "Node.js", "Express.js", "Next.js", "Nest.js", "Django", "Flask", "Spring Boot",
    "MongoDB", "PostgreSQL", "MySQL", "Redis", "Elasticsearch", "DynamoDB",
    "AWS", "Azure", "GCP", "Docker", "Kubernetes", "Jenkins", "CI/CD", "DevOps",
    "Git", "GitHub", "GitLab", "REST API", "GraphQL", "Microservices", "OAuth", "JWT",
    "HTML", "CSS", "Tailwind CSS", "Bootstrap", "SASS", "Webpack", "Vite",
    "Redux", "MobX", "Zustand", "Jest", "Cypress", "Selenium", "Playwright",
    "SQL", "NoSQL", "Firebase", "Supabase", "Linux", "Bash", "PowerShell",
    "Machine Learning", "TensorFlow", "PyTorch", "Scikit-learn", "Pandas", "NumPy",
    "Data Science", "Data Analysis", "Big Data", "Tableau", "Power BI",
]
_TECH_SKILLS_LOWER = {s.lower() for s in TECH_SKILLS}


class SkillService:

    def __init__(self, cache, http_client, ttl: int = LOOKUP_CACHE_TTL) -> None:
        self._cache = cache
        self._http = http_client
        self._ttl = ttl

    async def search_skills(self, query: str) -> List[Skill]:
        normalized = (query or "").strip()
        if not normalized:
            return []
        lower = normalized.lower()

        combined: Dict[str, Skill] = {}
        for name in TECH_SKILLS:
            if lower in name.lower():
                combined.setdefault(name.lower(), Skill(id=name, name=name))
        for skill in await self._fetch_esco(normalized):
            combined.setdefault(skill.name.lower(), skill)

        def rank(skill: Skill):
            name = skill.name.lower()
            return (
                name != lower,
                not name.startswith(lower),
                name not in _TECH_SKILLS_LOWER,
                name,
                skill.name,
            )

        return sorted(combined.values(), key=rank)[:MAX_RESULTS]

    async def _fetch_esco(self, query: str) -> List[Skill]:
        async def fetch() -> List[Dict[str, Any]]:
            body = await self._http.get_json(
                ESCO_SEARCH_URL, params={"type": "skill", "text": query, "language": "en"}
            )
            body = body if isinstance(body, dict) else {}
            results = (body.get("_embedded") or {}).get("results") or []
            return [
                {"id": item.get("uri") or item["title"], "name": item["title"]}
                for item in results
                if isinstance(item, dict) and item.get("title")
            ]

        try:
            data = await self._cache.get_or_compute(f"esco_{query}", fetch, ttl=self._ttl)
        except UpstreamError as exc:
            logger.warning("ESCO skill search failed for %r: %s", query, exc)
            return []
        return [Skill(**item) for item in data]
