"""
Canva Connect client

Implements creative generation (brand template autofill) and design export
on top of the Canva Connect REST API. Both operations start a remote job
and poll it until it finishes.
"""

import asyncio
import re
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional
from urllib.parse import quote

import httpx

from adreel.config import CANVA_API_BASE, DEFAULT_VIDEO_QUALITY
from adreel.core import (
    CreativeGenerationError,
    IntegrationError,
    get_logger,
    sanitize_filename,
)

from .base import CreativeGenerator, CreativeHandle, DesignExporter, ExportArtifact

logger = get_logger(__name__, component="canva")

IMAGE_URL_PATTERN = re.compile(r"^https?://\S+\.(jpe?g|png|webp)(\?\S*)?$", re.IGNORECASE)
DONE_STATUSES = {"completed", "success"}

Sleep = Callable[[float], Awaitable[None]]


def format_autofill_data(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Convert plain field values into the autofill payload shape

    Image URLs become image fields, other strings become text fields and
    dicts are assumed to be formatted already. Other values are dropped.
    """
    formatted: Dict[str, Any] = {}
    for key, value in fields.items():
        if isinstance(value, str):
            if IMAGE_URL_PATTERN.match(value.strip()):
                formatted[key] = {"type": "image", "asset_id": value.strip()}
            else:
                formatted[key] = {"type": "text", "text": value}
        elif isinstance(value, dict):
            formatted[key] = value
    return formatted


def _error_message(payload: Any, status_code: int) -> str:
    if isinstance(payload, dict):
        if payload.get("message"):
            return str(payload["message"])
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return f"HTTP {status_code}"


def _job_of(payload: Dict[str, Any]) -> Dict[str, Any]:
    job = payload.get("job")
    return job if isinstance(job, dict) else payload


class CanvaClient:
    """Authenticated JSON requests against the Canva Connect API"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or CANVA_API_BASE).rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def request(
        self,
        method: str,
        endpoint: str,
        access_token: str,
        body: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }
        try:
            async with self._client() as client:
                response = await client.request(method, f"{self.base_url}{endpoint}", headers=headers, json=body)
        except httpx.HTTPError as exc:
            raise IntegrationError("canva", f"{method} {endpoint} failed: {exc}") from exc

        logger.debug(f"{method} {endpoint} -> {response.status_code}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise IntegrationError("canva", "Failed to parse Canva response", response.status_code) from exc

        if not response.is_success:
            raise IntegrationError("canva", _error_message(payload, response.status_code), response.status_code)
        return payload

    async def download(self, url: str, output_path: Path) -> Path:
        """Stream a rendered asset to disk, following CDN redirects"""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            async with self._client() as client:
                async with client.stream("GET", url, follow_redirects=True) as response:
                    response.raise_for_status()
                    with open(output_path, "wb") as f:
                        async for chunk in response.aiter_bytes():
                            f.write(chunk)
        except httpx.HTTPError as exc:
            output_path.unlink(missing_ok=True)
            raise IntegrationError("canva", f"Download failed for {output_path.name}: {exc}") from exc
        logger.info("Downloaded export", extra={"path": str(output_path)})
        return output_path

    async def wait_for_job(
        self,
        endpoint: str,
        access_token: str,
        *,
        poll_interval: float,
        max_wait: float,
        sleep: Sleep = asyncio.sleep,
    ) -> Dict[str, Any]:
        """Poll a job endpoint until it completes, fails or ``max_wait`` runs out"""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + max_wait
        while True:
            job = _job_of(await self.request("GET", endpoint, access_token))
            status = str(job.get("status", "")).lower()
            if status in DONE_STATUSES:
                return job
            if status == "failed":
                error = job.get("error") if isinstance(job.get("error"), dict) else {}
                raise IntegrationError("canva", f"Job failed: {error.get('message') or 'Unknown error'}")
            if loop.time() >= deadline:
                raise IntegrationError("canva", f"Job {endpoint} timed out after {max_wait:g} seconds")
            logger.debug("Waiting for Canva job", extra={"endpoint": endpoint, "status": status})
            await sleep(poll_interval)


class CanvaCreativeGenerator(CreativeGenerator):
    """Brand template autofill.

    With ``allow_template_fallback`` an autofill failure returns the template
    itself as the design, uncustomized, with a ``note`` saying so.
    """

    def __init__(
        self,
        client: Optional[CanvaClient] = None,
        *,
        poll_interval: float = 2.0,
        max_wait: float = 60.0,
        allow_template_fallback: bool = False,
        sleep: Sleep = asyncio.sleep,
    ):
        self.client = client or CanvaClient()
        self.poll_interval = poll_interval
        self.max_wait = max_wait
        self.allow_template_fallback = allow_template_fallback
        self._sleep = sleep

    async def list_templates(self, credential: str) -> List[Dict[str, Any]]:
        """Every brand template visible to the token, following continuations"""
        templates: List[Dict[str, Any]] = []
        continuation: Optional[str] = None
        while True:
            endpoint = "/brand-templates"
            if continuation:
                endpoint += f"?continuation={quote(continuation)}"
            page = await self.client.request("GET", endpoint, credential)
            templates.extend(page.get("items") or [])
            continuation = page.get("continuation")
            if not continuation:
                break
        logger.info("Listed brand templates", extra={"count": len(templates)})
        return templates

    async def get_template_fields(self, credential: str, template_id: str) -> Dict[str, Any]:
        payload = await self.client.request("GET", f"/brand-templates/{template_id}/dataset", credential)
        return payload.get("dataset") or {}

    async def generate(self, credential: str, template_id: str, fields: Dict[str, Any]) -> CreativeHandle:
        try:
            created = await self.client.request(
                "POST",
                "/autofills",
                credential,
                {"brand_template_id": template_id, "data": format_autofill_data(fields)},
            )
            job_id = _job_of(created).get("id")
            if not job_id:
                raise IntegrationError("canva", "Autofill response did not include a job id")

            job = await self.client.wait_for_job(
                f"/autofills/{job_id}",
                credential,
                poll_interval=self.poll_interval,
                max_wait=self.max_wait,
                sleep=self._sleep,
            )
            design = (job.get("result") or {}).get("design") or {}
            if not design.get("id"):
                raise IntegrationError("canva", "Autofill completed without a design")
        except IntegrationError as exc:
            if not self.allow_template_fallback:
                raise CreativeGenerationError(f"Autofill failed for template {template_id}: {exc}") from exc
            logger.warning(
                "Autofill unavailable, using template design directly",
                extra={"template_id": template_id, "error": str(exc)},
            )
            return CreativeHandle(
                design_id=template_id,
                design_url=f"https://www.canva.com/design/{template_id}",
                creative_data=dict(fields),
                note="Using design directly without autofill - video content not customized",
            )

        logger.info("Autofill completed", extra={"template_id": template_id, "design_id": design["id"]})
        urls = design.get("urls") or {}
        return CreativeHandle(
            design_id=design["id"],
            design_url=design.get("url") or urls.get("edit_url"),
            creative_data=dict(fields),
        )


class CanvaDesignExporter(DesignExporter):
    def __init__(
        self,
        client: Optional[CanvaClient] = None,
        *,
        poll_interval: float = 3.0,
        max_wait: float = 300.0,
        sleep: Sleep = asyncio.sleep,
    ):
        self.client = client or CanvaClient()
        self.poll_interval = poll_interval
        self.max_wait = max_wait
        self._sleep = sleep

    @staticmethod
    def build_export_body(design_id: str, format: str, quality: Optional[str]) -> Dict[str, Any]:
        export_format: Dict[str, Any] = {"type": format}
        if format == "mp4":
            export_format["quality"] = quality or DEFAULT_VIDEO_QUALITY
        elif quality is not None:
            export_format["quality"] = quality
        return {"design_id": design_id, "format": export_format}

    async def export(
        self,
        credential: str,
        design_id: str,
        *,
        format: str = "mp4",
        quality: Optional[str] = None,
        output_dir: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> ExportArtifact:
        created = await self.client.request("POST", "/exports", credential, self.build_export_body(design_id, format, quality))
        job_id = _job_of(created).get("id")
        if not job_id:
            raise IntegrationError("canva", "Export response did not include a job id")

        job = await self.client.wait_for_job(
            f"/exports/{job_id}",
            credential,
            poll_interval=self.poll_interval,
            max_wait=self.max_wait,
            sleep=self._sleep,
        )
        urls: List[str] = list((job.get("result") or {}).get("urls") or job.get("urls") or [])
        logger.info("Export completed", extra={"design_id": design_id, "format": format, "url_count": len(urls)})

        artifact = ExportArtifact(design_id=design_id, format=format, urls=urls)
        if output_dir is None:
            return artifact

        for index, url in enumerate(urls):
            name = filename if filename and len(urls) == 1 else f"{design_id}_{index + 1}.{format}"
            path = await self.client.download(url, Path(output_dir) / sanitize_filename(name))
            artifact.files.append(str(path))
        return artifact
