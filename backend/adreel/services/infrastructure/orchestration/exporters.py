"""
Export functions handed to the export job manager.

A job only needs CDN URLs, so nothing is downloaded here.
"""

from typing import Optional

from adreel.config import DEFAULT_EXPORT_FORMAT
from adreel.core import IntegrationError, get_logger
from adreel.services.integrations.base import DesignExporter

from .job_manager import ExportFn, ExportOutcome

logger = get_logger(__name__, component="export_jobs")


def create_cdn_exporter(
    exporter: DesignExporter,
    format: str = DEFAULT_EXPORT_FORMAT,
    quality: Optional[str] = None,
) -> ExportFn:
    async def export_to_cdn(credential: str, design_id: str, campaign_name: str) -> ExportOutcome:
        logger.info(
            "Exporting design to CDN",
            extra={"design_id": design_id, "campaign_name": campaign_name, "format": format},
        )
        artifact = await exporter.export(credential, design_id, format=format, quality=quality)
        if not artifact.urls:
            raise IntegrationError("canva", "No CDN URLs returned from export")
        return ExportOutcome(download_urls=list(artifact.urls))

    return export_to_cdn
