"""Tests for the Search Console / Indexing API client.

``respx`` patches ``httpx`` so no request leaves the process.
"""

from __future__ import annotations

import json

import httpx
import pytest
import respx

from indexer.config import Settings
from indexer.errors import TransportError
from indexer.gsc.api import (
    INSPECT_URL,
    METADATA_URL,
    PUBLISH_URL,
    SearchConsoleClient,
    convert_to_site_url,
    parse_coverage_state,
)

SITE = "sc-domain:example.com"
PAGE = "https://example.com/post"


@pytest.fixture(autouse=True)
def no_backoff(monkeypatch):
    monkeypatch.setattr("indexer.gsc.transport.settings.retry_base_delay", 0.0)
    monkeypatch.setattr("indexer.gsc.transport.settings.retry_max", 1)


def _inspection(state: str | None) -> dict:
    result: dict = {"inspectionResult": {"indexStatusResult": {}}}
    if state is not None:
        result["inspectionResult"]["indexStatusResult"]["coverageState"] = state
    return result


# ---------------------------------------------------------------------------
# convert_to_site_url
# ---------------------------------------------------------------------------

class TestConvertToSiteUrl:
    def test_bare_domain_becomes_domain_property(self) -> None:
        assert convert_to_site_url("example.com") == "sc-domain:example.com"

    def test_url_gets_trailing_slash(self) -> None:
        assert convert_to_site_url("https://example.com") == "https://example.com/"

    def test_url_with_slash_unchanged(self) -> None:
        assert convert_to_site_url("http://example.com/blog/") == "http://example.com/blog/"

    def test_domain_property_passthrough(self) -> None:
        assert convert_to_site_url("sc-domain:example.com") == "sc-domain:example.com"

    def test_strips_whitespace(self) -> None:
        assert convert_to_site_url("  example.com \n") == "sc-domain:example.com"


# ---------------------------------------------------------------------------
# inspect_url
# ---------------------------------------------------------------------------

class TestInspectUrl:
    async def test_returns_coverage_state(self) -> None:
        with respx.mock:
            route = respx.post(INSPECT_URL).mock(
                return_value=httpx.Response(200, json=_inspection("Submitted and indexed"))
            )
            async with httpx.AsyncClient() as http:
                status = await SearchConsoleClient(http, "tok", SITE).inspect_url(PAGE)

        assert status == "Submitted and indexed"
        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer tok"
        assert json.loads(request.content) == {"inspectionUrl": PAGE, "siteUrl": SITE}

    @pytest.mark.parametrize(
        ("code", "label"),
        [(403, "Forbidden"), (429, "RateLimited"), (400, "Error"), (404, "Error")],
    )
    async def test_http_failures_become_labels(self, code: int, label: str) -> None:
        with respx.mock:
            respx.post(INSPECT_URL).mock(return_value=httpx.Response(code, text="{}"))
            async with httpx.AsyncClient() as http:
                status = await SearchConsoleClient(http, "tok", SITE).inspect_url(PAGE)

        assert status == label

    async def test_missing_coverage_state_is_error(self) -> None:
        with respx.mock:
            respx.post(INSPECT_URL).mock(return_value=httpx.Response(200, json=_inspection(None)))
            async with httpx.AsyncClient() as http:
                status = await SearchConsoleClient(http, "tok", SITE).inspect_url(PAGE)

        assert status == "Error"

    @pytest.mark.parametrize(
        "body",
        [
            {"inspectionResult": None},
            {"inspectionResult": {"indexStatusResult": None}},
            {"inspectionResult": "unexpected"},
            [],
        ],
    )
    async def test_malformed_body_is_error(self, body) -> None:
        with respx.mock:
            respx.post(INSPECT_URL).mock(return_value=httpx.Response(200, json=body))
            async with httpx.AsyncClient() as http:
                status = await SearchConsoleClient(http, "tok", SITE).inspect_url(PAGE)

        assert status == "Error"

    async def test_non_json_body_is_error(self) -> None:
        with respx.mock:
            respx.post(INSPECT_URL).mock(return_value=httpx.Response(200, text="<html>oops</html>"))
            async with httpx.AsyncClient() as http:
                status = await SearchConsoleClient(http, "tok", SITE).inspect_url(PAGE)

        assert status == "Error"

    async def test_retries_follow_client_settings(self) -> None:
        cfg = Settings()
        cfg.retry_max = 0
        cfg.retry_base_delay = 0.0
        with respx.mock:
            route = respx.post(INSPECT_URL).mock(return_value=httpx.Response(503))
            async with httpx.AsyncClient() as http:
                with pytest.raises(TransportError):
                    await SearchConsoleClient(http, "tok", SITE, cfg).inspect_url(PAGE)

        assert route.call_count == 1


def test_parse_coverage_state() -> None:
    assert parse_coverage_state(json.dumps(_inspection("Submitted and indexed"))) == "Submitted and indexed"
    assert parse_coverage_state(json.dumps(_inspection(None))) is None
    assert parse_coverage_state("not json") is None


# ---------------------------------------------------------------------------
# Indexing API
# ---------------------------------------------------------------------------

class TestPublishMetadata:
    @pytest.mark.parametrize("code", [200, 404, 403, 400])
    async def test_returns_status_code(self, code: int) -> None:
        with respx.mock:
            route = respx.get(METADATA_URL).mock(return_value=httpx.Response(code, text="{}"))
            async with httpx.AsyncClient() as http:
                result = await SearchConsoleClient(http, "tok", SITE).get_publish_metadata(PAGE)

        assert result == code
        assert route.calls.last.request.url.params["url"] == PAGE

    async def test_service_disabled_is_reported(self, capsys) -> None:
        body = {
            "error": {
                "details": [
                    {
                        "reason": "SERVICE_DISABLED",
                        "metadata": {"serviceTitle": "Web Search Indexing API", "activationUrl": "https://x"},
                    }
                ]
            }
        }
        with respx.mock:
            respx.get(METADATA_URL).mock(return_value=httpx.Response(403, json=body))
            async with httpx.AsyncClient() as http:
                result = await SearchConsoleClient(http, "tok", SITE).get_publish_metadata(PAGE)

        assert result == 403
        out = capsys.readouterr().out
        assert "Web Search Indexing API is not enabled" in out
        assert "https://x" in out

    async def test_quota_exhaustion_is_reported(self, capsys) -> None:
        with respx.mock:
            respx.get(METADATA_URL).mock(return_value=httpx.Response(429, text="quota"))
            async with httpx.AsyncClient() as http:
                result = await SearchConsoleClient(http, "tok", SITE).get_publish_metadata(PAGE)

        assert result == 429
        assert "Rate limited" in capsys.readouterr().out

    async def test_not_submitted_is_silent(self, capsys) -> None:
        with respx.mock:
            respx.get(METADATA_URL).mock(return_value=httpx.Response(404, text="{}"))
            async with httpx.AsyncClient() as http:
                await SearchConsoleClient(http, "tok", SITE).get_publish_metadata(PAGE)

        assert capsys.readouterr().out == ""


class TestRequestIndexing:
    async def test_posts_url_updated(self) -> None:
        with respx.mock:
            route = respx.post(PUBLISH_URL).mock(return_value=httpx.Response(200, json={}))
            async with httpx.AsyncClient() as http:
                result = await SearchConsoleClient(http, "tok", SITE).request_indexing(PAGE)

        assert result == 200
        assert json.loads(route.calls.last.request.content) == {"url": PAGE, "type": "URL_UPDATED"}

    async def test_rate_limited_reported(self, capsys) -> None:
        with respx.mock:
            respx.post(PUBLISH_URL).mock(return_value=httpx.Response(429, text="quota"))
            async with httpx.AsyncClient() as http:
                result = await SearchConsoleClient(http, "tok", SITE).request_indexing(PAGE)

        assert result == 429
        assert "Rate limited" in capsys.readouterr().out
