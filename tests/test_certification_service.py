from datetime import date

import pytest

from nexus_api.services.certification_service import CertificationService
from nexus_api.services.errors import InvalidPlatformError, UpstreamError, ValidationError
from fakes import FakeHttp


async def test_unknown_platform_fails_without_outbound_call(cache):
    http = FakeHttp()
    service = CertificationService(cache, http)

    with pytest.raises(InvalidPlatformError):
        await service.fetch_certification("unknown-platform", "x")
    assert http.calls == []


def test_invalid_platform_is_a_validation_error():
    assert issubclass(InvalidPlatformError, ValidationError)
    assert InvalidPlatformError.status_code == 400


async def test_aws_returns_unverified_stub_without_network(cache):
    http = FakeHttp()
    cert = await CertificationService(cache, http).fetch_certification("aws", "ABC123")

    assert cert.verified is False
    assert cert.issuer == "Amazon Web Services"
    assert cert.credential_id == "ABC123"
    assert "verif" in cert.notes.lower()
    assert http.calls == []


@pytest.mark.parametrize("platform, issuer", [("udemy", "Udemy"), ("linkedin-learning", "LinkedIn Learning")])
async def test_platforms_without_api_are_stubs(cache, platform, issuer):
    http = FakeHttp()
    cert = await CertificationService(cache, http).fetch_certification(platform, "https://example.com/cert/1")

    assert cert.verified is False
    assert cert.issuer == issuer
    assert cert.credential_url == "https://example.com/cert/1"
    assert cert.notes
    assert http.calls == []


async def test_platform_is_case_insensitive_and_id_is_sanitised(cache):
    http = FakeHttp()
    cert = await CertificationService(cache, http).fetch_certification("AWS", "  " + "a" * 600 + "  ")

    assert cert.platform == "aws"
    assert cert.credential_id == "a" * 500


async def test_coursera_success_is_verified_and_cached(cache):
    http = FakeHttp(text="<html>certificate</html>")
    service = CertificationService(cache, http)

    first = await service.fetch_certification("coursera", "XYZ789")
    second = await service.fetch_certification("coursera", "XYZ789")

    assert first.verified is True
    assert first.credential_url == "https://www.coursera.org/account/accomplishments/verify/XYZ789"
    assert first.completion_date == date.today().isoformat()
    assert second == first
    assert len(http.calls) == 1


async def test_coursera_uses_given_url(cache):
    http = FakeHttp(text="ok")
    url = "https://coursera.org/share/abc"
    cert = await CertificationService(cache, http).fetch_certification("coursera", url)

    assert http.calls[0]["url"] == url
    assert cert.credential_url == url


async def test_coursera_failure_degrades_and_is_not_cached(cache, upstream_down):
    service = CertificationService(cache, upstream_down)

    cert = await service.fetch_certification("coursera", "XYZ789")
    await service.fetch_certification("coursera", "XYZ789")

    assert cert.verified is False
    assert cert.completion_date == ""
    assert cert.notes == "Visit URL to manually verify"
    assert len(upstream_down.calls) == 2


async def test_microsoft_reads_title_and_date(cache):
    http = FakeHttp(json={"title": "Azure Fundamentals", "completionDate": "2024-05-01"})
    cert = await CertificationService(cache, http).fetch_certification("microsoft", "MS-1")

    assert cert.verified is True
    assert cert.certificate_name == "Azure Fundamentals"
    assert cert.completion_date == "2024-05-01"
    assert http.calls[0]["url"] == "https://learn.microsoft.com/api/credentials/MS-1"


async def test_microsoft_defaults_when_body_has_no_fields(cache):
    http = FakeHttp(json=["unexpected"])
    cert = await CertificationService(cache, http).fetch_certification("microsoft", "MS-2")

    assert cert.verified is True
    assert cert.certificate_name == "Microsoft Certificate"


async def test_microsoft_failure_degrades(cache):
    http = FakeHttp(error=UpstreamError("timeout"))
    cert = await CertificationService(cache, http).fetch_certification("microsoft", "MS-1")

    assert cert.verified is False
    assert cert.notes == "Verify at learn.microsoft.com"
