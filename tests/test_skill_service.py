from nexus_api.services.skill_service import MAX_RESULTS, SkillService
from fakes import FakeHttp


def esco(*titles):
    return {"_embedded": {"results": [{"uri": f"http://data.europa.eu/esco/skill/{i}", "title": t} for i, t in enumerate(titles)]}}


async def test_blank_query_returns_nothing_without_calls(cache):
    http = FakeHttp(json=esco("React"))
    service = SkillService(cache, http)

    assert await service.search_skills("") == []
    assert await service.search_skills("   ") == []
    assert http.calls == []


async def test_exact_match_ranks_first(cache):
    http = FakeHttp(json=esco("use React framework", "Reactive programming"))
    names = [s.name for s in await SkillService(cache, http).search_skills("react")]

    assert names[0] == "React"
    assert names.index("React") < names.index("React.js")
    assert names.index("React.js") < names.index("use React framework")


async def test_ranking_order(cache):
    http = FakeHttp(json=esco("Pythonic design", "apply python", "Python"))
    names = [s.name for s in await SkillService(cache, http).search_skills("python")]

    # exact, then prefix, then substring
    assert names == ["Python", "Pythonic design", "apply python"]


async def test_curated_entry_wins_on_duplicate_name(cache):
    http = FakeHttp(json=esco("docker"))
    skills = await SkillService(cache, http).search_skills("Docker")

    assert len(skills) == 1
    assert skills[0].id == "Docker"


async def test_curated_before_external_then_alphabetical(cache):
    http = FakeHttp(json=esco("Java EE", "JavaFX"))
    names = [s.name for s in await SkillService(cache, http).search_skills("jav")]

    assert names == ["Java", "JavaScript", "Java EE", "JavaFX"]


async def test_esco_failure_falls_back_to_curated(cache, upstream_down):
    names = [s.name for s in await SkillService(cache, upstream_down).search_skills("vue")]

    assert names == ["Vue", "Vue.js"]


async def test_esco_results_are_cached_per_query(cache):
    http = FakeHttp(json=esco("Kubernetes administration"))
    service = SkillService(cache, http)

    await service.search_skills("kube")
    await service.search_skills("kube")
    await service.search_skills("helm")

    assert [c["params"]["text"] for c in http.calls] == ["kube", "helm"]


async def test_results_are_capped(cache):
    http = FakeHttp(json=esco(*[f"skill {i:02d}" for i in range(40)]))
    skills = await SkillService(cache, http).search_skills("skill")

    assert len(skills) == MAX_RESULTS
