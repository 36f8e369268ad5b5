"""
Lifecycle management for the AdReel application.

``ServiceContainer`` builds every collaborator from ``Settings`` once and is
stored on ``app.state``. Startup runs the runtime checks and starts the export
job sweep; shutdown stops it, cancels in-flight exports and flushes the table.
"""

import asyncio
import os
from typing import Any, Dict, Optional

from adreel.config import Settings
from adreel.core import get_logger, parse_bool_env, run_startup_runtime_checks
from adreel.services.infrastructure.storage import ExportJobStore
from adreel.services.integrations import (
    CanvaClient,
    CanvaCreativeGenerator,
    CanvaDesignExporter,
    CreativeGenerator,
    DesignExporter,
    ElevenLabsVoiceover,
    VoiceoverSynthesizer,
)
from adreel.services.pipeline.assembly import MediaMerger
from adreel.services.pipeline.creative import CampaignOrchestrator, CreativePipeline

from .exporters import create_cdn_exporter
from .job_manager import ExportFn, ExportJobManager

logger = get_logger(__name__, service="lifecycle")


class ServiceContainer:
    def __init__(
        self,
        settings: Settings,
        *,
        generator: Optional[CreativeGenerator] = None,
        voiceover: Optional[VoiceoverSynthesizer] = None,
        exporter: Optional[DesignExporter] = None,
        merger: Optional[MediaMerger] = None,
        job_manager: Optional[ExportJobManager] = None,
    ):
        self.settings = settings

        canva = CanvaClient(settings.canva_api_base)
        self.generator = generator or CanvaCreativeGenerator(
            canva, allow_template_fallback=settings.autofill_template_fallback
        )
        self.exporter = exporter or CanvaDesignExporter(canva)
        self.voiceover = voiceover or ElevenLabsVoiceover(settings.elevenlabs_api_base)
        self.merger = merger or MediaMerger(settings.ffmpeg_binary, settings.ffprobe_binary)

        if job_manager is None:
            jobs_file = settings.export_jobs_file
            job_manager = ExportJobManager(
                ExportJobStore(jobs_file) if jobs_file else None,
                timeout_seconds=settings.export_job_timeout_seconds,
                retention_hours=settings.export_job_retention_hours,
                sweep_interval_seconds=settings.export_job_sweep_interval_seconds,
            )
        self.job_manager = job_manager

        self.runtime_report: Optional[Dict[str, Any]] = None
        self._sweep_task: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Factories

    @property
    def design_credential(self) -> Optional[str]:
        return self.settings.canva_access_token

    def create_pipeline(
        self,
        *,
        voice: Optional[str] = None,
        export_format: Optional[str] = None,
        export_quality: Optional[str] = None,
    ) -> CreativePipeline:
        return CreativePipeline(
            self.generator,
            self.voiceover,
            self.exporter,
            self.merger,
            design_credential=self.settings.canva_access_token,
            voice_credential=self.settings.elevenlabs_api_key,
            voice=voice or self.settings.voice,
            export_format=export_format or self.settings.export_format,
            export_quality=export_quality or self.settings.export_quality,
            fade_in=self.settings.merge_fade_in_seconds,
            fade_out=self.settings.merge_fade_out_seconds,
        )

    def create_orchestrator(self, pipeline: Optional[CreativePipeline] = None) -> CampaignOrchestrator:
        return CampaignOrchestrator(
            pipeline or self.create_pipeline(),
            self.settings.campaign_output_dir,
            variation_delay=self.settings.variation_delay_seconds,
        )

    def create_export_fn(self) -> ExportFn:
        return create_cdn_exporter(self.exporter, self.settings.export_format, self.settings.export_quality)

    # ------------------------------------------------------------------
    # Lifecycle

    async def startup(self) -> None:
        strict_runtime = parse_bool_env(
            os.getenv("STARTUP_STRICT_RUNTIME_CHECKS"),
            default=os.getenv("ENV", "").lower() == "production",
        )
        self.runtime_report = run_startup_runtime_checks(
            campaign_dir=self.settings.campaign_output_dir,
            data_dir=self.settings.data_dir,
            tools=(self.settings.ffmpeg_binary, self.settings.ffprobe_binary),
            strict_tools=strict_runtime,
            strict_dirs=True,
        )
        logger.info("Startup runtime checks complete", extra={"runtime_report": self.runtime_report})

        if not self.settings.canva_access_token:
            logger.warning("CANVA_ACCESS_TOKEN not configured; campaigns and exports will be rejected")
        if not self.settings.elevenlabs_api_key:
            logger.warning("ELEVENLABS_API_KEY not configured; voiceovers will be skipped")

        try:
            self.job_manager.sweep_expired()
            self._sweep_task = asyncio.create_task(self.job_manager.run_periodic_sweep())
        except Exception as exc:
            logger.error("Failed to initialize export job sweep", extra={"error": str(exc)}, exc_info=True)

    async def shutdown(self) -> None:
        if self._sweep_task:
            self._sweep_task.cancel()
            try:
                await self._sweep_task
            except asyncio.CancelledError:
                pass
            self._sweep_task = None
        await self.job_manager.shutdown()
        logger.info("Services stopped")
