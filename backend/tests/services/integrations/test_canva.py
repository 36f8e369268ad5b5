"""
Tests for adreel.services.integrations.canva

The Canva API is replaced by an httpx.MockTransport that routes on
method and path.
"""

import json

import httpx
import pytest
from unittest.mock import AsyncMock

from adreel.core import CreativeGenerationError, IntegrationError
from adreel.services.integrations.canva import (
    CanvaClient,
    CanvaCreativeGenerator,
    CanvaDesignExporter,
    format_autofill_data,
)

BASE = "https://canva.test/rest/v1"


def _transport(routes, seen=None):
    """routes: {(method, path): response or list of responses}"""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        key = (request.method, request.url.path.replace("/rest/v1", ""))
        if request.url.host == "cdn.test":
            return httpx.Response(200, content=b"video-bytes")
        response = routes[key]
        if isinstance(response, list):
            return response.pop(0)
        return response

    return httpx.MockTransport(handler)


def _client(routes, seen=None):
    return CanvaClient(BASE, transport=_transport(routes, seen))


class TestFormatAutofillData:
    def test_maps_values(self):
        formatted = format_autofill_data({
            "headline": "Summer Sale",
            "hero": "https://img.test/a/hero.JPG?w=200",
            "logo": {"type": "image", "asset_id": "A1"},
            "count": 3,
        })

        assert formatted["headline"] == {"type": "text", "text": "Summer Sale"}
        assert formatted["hero"] == {"type": "image", "asset_id": "https://img.test/a/hero.JPG?w=200"}
        assert formatted["logo"] == {"type": "image", "asset_id": "A1"}
        assert "count" not in formatted

    def test_non_image_url_is_text(self):
        assert format_autofill_data({"cta": "https://shop.test/buy"})["cta"]["type"] == "text"


@pytest.mark.asyncio
class TestCanvaClient:
    async def test_request_sends_bearer_token(self):
        seen = []
        client = _client({("GET", "/users/me"): httpx.Response(200, json={"ok": True})}, seen)

        assert await client.request("GET", "/users/me", "tok-1") == {"ok": True}
        assert seen[0].headers["Authorization"] == "Bearer tok-1"

    async def test_error_uses_api_message(self):
        client = _client({("GET", "/x"): httpx.Response(403, json={"message": "Missing scope"})})

        with pytest.raises(IntegrationError) as exc_info:
            await client.request("GET", "/x", "tok")
        assert exc_info.value.status_code == 403
        assert "Missing scope" in str(exc_info.value)

    async def test_unparseable_response(self):
        client = _client({("GET", "/x"): httpx.Response(200, content=b"<html>")})
        with pytest.raises(IntegrationError, match="parse"):
            await client.request("GET", "/x", "tok")

    async def test_wait_for_job_polls_until_done(self):
        routes = {("GET", "/exports/j1"): [
            httpx.Response(200, json={"job": {"id": "j1", "status": "in_progress"}}),
            httpx.Response(200, json={"job": {"id": "j1", "status": "success", "urls": ["u"]}}),
        ]}
        sleep = AsyncMock()

        job = await _client(routes).wait_for_job("/exports/j1", "tok", poll_interval=3, max_wait=60, sleep=sleep)

        assert job["status"] == "success"
        sleep.assert_awaited_once_with(3)

    async def test_wait_for_job_failed(self):
        routes = {("GET", "/autofills/j"): httpx.Response(
            200, json={"job": {"status": "failed", "error": {"message": "bad field"}}}
        )}
        with pytest.raises(IntegrationError, match="bad field"):
            await _client(routes).wait_for_job("/autofills/j", "tok", poll_interval=1, max_wait=10, sleep=AsyncMock())

    async def test_wait_for_job_times_out(self):
        routes = {("GET", "/autofills/j"): httpx.Response(200, json={"job": {"status": "in_progress"}})}
        with pytest.raises(IntegrationError, match="timed out"):
            await _client(routes).wait_for_job("/autofills/j", "tok", poll_interval=1, max_wait=0, sleep=AsyncMock())

    async def test_download_streams_to_disk(self, tmp_path):
        path = await _client({}).download("https://cdn.test/file.mp4", tmp_path / "out" / "file.mp4")
        assert path.read_bytes() == b"video-bytes"


@pytest.mark.asyncio
class TestCreativeGenerator:
    async def test_generate_returns_design(self):
        seen = []
        routes = {
            ("POST", "/autofills"): httpx.Response(200, json={"job": {"id": "af1", "status": "in_progress"}}),
            ("GET", "/autofills/af1"): httpx.Response(200, json={"job": {
                "id": "af1",
                "status": "success",
                "result": {"design": {"id": "DAF999", "url": "https://canva.test/d/DAF999"}},
            }}),
        }
        generator = CanvaCreativeGenerator(_client(routes, seen), sleep=AsyncMock())

        handle = await generator.generate("tok", "TPL1", {"headline": "Hi"})

        assert handle.design_id == "DAF999"
        assert handle.design_url == "https://canva.test/d/DAF999"
        assert handle.note is None
        body = json.loads(seen[0].content)
        assert body == {"brand_template_id": "TPL1", "data": {"headline": {"type": "text", "text": "Hi"}}}

    async def test_generate_failure_is_fatal_by_default(self):
        routes = {("POST", "/autofills"): httpx.Response(400, json={"message": "Template not found"})}
        generator = CanvaCreativeGenerator(_client(routes), sleep=AsyncMock())

        with pytest.raises(CreativeGenerationError, match="Template not found"):
            await generator.generate("tok", "TPL1", {})

    async def test_template_fallback(self):
        routes = {("POST", "/autofills"): httpx.Response(403, json={"message": "Autofill requires Enterprise"})}
        generator = CanvaCreativeGenerator(_client(routes), allow_template_fallback=True, sleep=AsyncMock())

        handle = await generator.generate("tok", "TPL1", {"headline": "Hi"})

        assert handle.design_id == "TPL1"
        assert handle.note
        assert handle.creative_data == {"headline": "Hi"}

    async def test_list_templates_follows_continuation(self):
        seen = []
        client = _client({
            ("GET", "/brand-templates"): [
                httpx.Response(200, json={"items": [{"id": "T1"}], "continuation": "next page"}),
                httpx.Response(200, json={"items": [{"id": "T2"}]}),
            ],
        }, seen)

        templates = await CanvaCreativeGenerator(client).list_templates("tok")

        assert [t["id"] for t in templates] == ["T1", "T2"]
        assert seen[1].url.params["continuation"] == "next page"

    async def test_get_template_fields_returns_dataset(self):
        dataset = {"headline": {"type": "text"}}
        client = _client({("GET", "/brand-templates/T1/dataset"): httpx.Response(200, json={"dataset": dataset})})

        assert await CanvaCreativeGenerator(client).get_template_fields("tok", "T1") == dataset


def test_export_body_defaults_video_quality():
    assert CanvaDesignExporter.build_export_body("D", "mp4", None) == {
        "design_id": "D", "format": {"type": "mp4", "quality": "horizontal_1080p"},
    }
    assert CanvaDesignExporter.build_export_body("D", "png", None) == {"design_id": "D", "format": {"type": "png"}}


@pytest.mark.asyncio
class TestDesignExporter:
    def _routes(self, urls):
        return {
            ("POST", "/exports"): httpx.Response(200, json={"job": {"id": "ex1", "status": "in_progress"}}),
            ("GET", "/exports/ex1"): httpx.Response(200, json={"job": {"id": "ex1", "status": "success", "urls": urls}}),
        }

    async def test_cdn_mode_returns_urls_only(self):
        exporter = CanvaDesignExporter(_client(self._routes(["https://cdn.test/a.mp4"])), sleep=AsyncMock())

        artifact = await exporter.export("tok", "DAF1")

        assert artifact.urls == ["https://cdn.test/a.mp4"]
        assert artifact.files == []

    async def test_download_mode(self, tmp_path):
        urls = ["https://cdn.test/a.mp4", "https://cdn.test/b.mp4"]
        exporter = CanvaDesignExporter(_client(self._routes(urls)), sleep=AsyncMock())

        artifact = await exporter.export("tok", "DAF1", output_dir=str(tmp_path))

        assert artifact.files == [str(tmp_path / "DAF1_1.mp4"), str(tmp_path / "DAF1_2.mp4")]

    async def test_download_single_with_filename(self, tmp_path):
        exporter = CanvaDesignExporter(_client(self._routes(["https://cdn.test/t.png"])), sleep=AsyncMock())

        artifact = await exporter.export("tok", "DAF1", format="png", output_dir=str(tmp_path), filename="DAF1_thumb.png")

        assert artifact.files == [str(tmp_path / "DAF1_thumb.png")]
