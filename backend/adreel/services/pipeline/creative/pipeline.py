"""
Single-creative pipeline

Runs one variation through generate -> voiceover -> export -> thumbnail ->
merge -> verify. Only generation is fatal; every later stage degrades into
a recorded outcome and the variation keeps going with what it has.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional

from adreel.config import (
    DEFAULT_EXPORT_FORMAT,
    DEFAULT_VIDEO_QUALITY,
    MERGE_FADE_IN_SECONDS,
    MERGE_FADE_OUT_SECONDS,
    THUMBNAIL_FORMAT,
)
from adreel.core import CampaignDirs, CredentialMissingError, get_logger
from adreel.models.status import PipelineStage, StageStatus
from adreel.services.integrations.base import CreativeGenerator, DesignExporter, VoiceoverSynthesizer
from adreel.services.pipeline.assembly.ffmpeg import MediaMerger, MergeOptions

from .manifest import write_variant_error
from .results import CreativeResult, StageOutcome

logger = get_logger(__name__, component="creative_pipeline")

# Degraded stages whose failure also goes to the variant error file
ERROR_LOGGED_STAGES = frozenset({
    PipelineStage.VOICEOVER,
    PipelineStage.EXPORT,
    PipelineStage.MERGE,
    PipelineStage.VERIFY,
})


@dataclass
class StageContext:
    template_id: str
    creative_data: Mapping[str, Any]
    voiceover_script: Optional[str]
    dirs: CampaignDirs
    variant_index: int


Stage = Callable[[StageContext, CreativeResult], Awaitable[StageOutcome]]


class CreativePipeline:
    def __init__(
        self,
        generator: CreativeGenerator,
        voiceover: VoiceoverSynthesizer,
        exporter: DesignExporter,
        merger: MediaMerger,
        *,
        design_credential: Optional[str],
        voice_credential: Optional[str],
        voice: Optional[str] = None,
        export_format: str = DEFAULT_EXPORT_FORMAT,
        export_quality: str = DEFAULT_VIDEO_QUALITY,
        fade_in: float = MERGE_FADE_IN_SECONDS,
        fade_out: float = MERGE_FADE_OUT_SECONDS,
    ):
        self.generator = generator
        self.voiceover = voiceover
        self.exporter = exporter
        self.merger = merger
        self.design_credential = design_credential
        self.voice_credential = voice_credential
        self.voice = voice
        self.export_format = export_format
        self.export_quality = export_quality
        self.fade_in = fade_in
        self.fade_out = fade_out

    async def run(
        self,
        template_id: str,
        creative_data: Mapping[str, Any],
        voiceover_script: Optional[str],
        dirs: CampaignDirs,
        variant_index: int,
    ) -> CreativeResult:
        ctx = StageContext(template_id, creative_data, voiceover_script, dirs, variant_index)
        result = CreativeResult()

        outcome = result.record(await self._generate(ctx, result))
        if outcome.status is StageStatus.FAILED:
            write_variant_error(dirs.errors, variant_index, outcome.message)
            return result
        result.success = True

        stages: tuple[Stage, ...] = (
            self._voiceover_stage,
            self._export_stage,
            self._thumbnail_stage,
            self._merge_stage,
            self._verify_stage,
        )
        for stage in stages:
            outcome = result.record(await stage(ctx, result))
            if outcome.status is StageStatus.DEGRADED and outcome.stage in ERROR_LOGGED_STAGES:
                write_variant_error(dirs.errors, variant_index, f"{outcome.stage.value}: {outcome.message}")

        logger.info(
            "Creative complete",
            extra={
                "design_id": result.creative.design_id,
                "video": result.local_video_path or result.video_url,
                "degraded": result.degraded_stages,
            },
        )
        return result

    async def _generate(self, ctx: StageContext, result: CreativeResult) -> StageOutcome:
        logger.info("[1/6] Generating creative", extra={"template_id": ctx.template_id})
        try:
            if not self.design_credential:
                raise CredentialMissingError("CANVA_ACCESS_TOKEN")
            result.creative = await self.generator.generate(
                self.design_credential, ctx.template_id, dict(ctx.creative_data)
            )
        except Exception as exc:
            result.error = str(exc)
            logger.error("Creative generation failed", extra={"error": str(exc)})
            return StageOutcome.failed(PipelineStage.GENERATE, str(exc))
        return StageOutcome.ok(PipelineStage.GENERATE, result.creative.note)

    async def _voiceover_stage(self, ctx: StageContext, result: CreativeResult) -> StageOutcome:
        stage = PipelineStage.VOICEOVER
        if not ctx.voiceover_script:
            return StageOutcome.skipped(stage, "No voiceover script")
        if not self.voice_credential:
            logger.warning("[2/6] Voiceover skipped: ELEVENLABS_API_KEY not configured")
            return StageOutcome.skipped(stage, "ELEVENLABS_API_KEY not configured")

        logger.info("[2/6] Generating voiceover")
        try:
            result.voiceover = await self.voiceover.synthesize(
                self.voice_credential,
                ctx.voiceover_script,
                voice_id=self.voice,
                output_dir=str(ctx.dirs.voiceovers),
                filename_prefix=f"vo_{result.creative.design_id[-8:]}",
            )
        except Exception as exc:
            result.voiceover_error = str(exc)
            logger.error("Voiceover failed", extra={"error": str(exc)})
            return StageOutcome.degraded(stage, str(exc))
        return StageOutcome.ok(stage)

    async def _export_stage(self, ctx: StageContext, result: CreativeResult) -> StageOutcome:
        stage = PipelineStage.EXPORT
        logger.info("[3/6] Exporting video", extra={"format": self.export_format})
        try:
            export = await self.exporter.export(
                self.design_credential,
                result.creative.design_id,
                format=self.export_format,
                quality=self.export_quality,
                output_dir=str(ctx.dirs.videos),
            )
        except Exception as exc:
            result.export_error = str(exc)
            logger.error("Export failed", extra={"error": str(exc)})
            return StageOutcome.degraded(stage, str(exc))

        result.export = export
        result.video_url = export.urls[0] if export.urls else None
        result.local_video_path = export.files[0] if export.files else None
        if not export.urls and not export.files:
            result.export_error = "Export returned no video"
            return StageOutcome.degraded(stage, result.export_error)
        return StageOutcome.ok(stage)

    async def _thumbnail_stage(self, ctx: StageContext, result: CreativeResult) -> StageOutcome:
        stage = PipelineStage.THUMBNAIL
        design_id = result.creative.design_id
        logger.info("[4/6] Generating thumbnail")
        try:
            thumbnail = await self.exporter.export(
                self.design_credential,
                design_id,
                format=THUMBNAIL_FORMAT,
                output_dir=str(ctx.dirs.thumbnails),
                filename=f"{design_id}_thumb.{THUMBNAIL_FORMAT}",
            )
        except Exception as exc:
            result.thumbnail_error = str(exc)
            logger.warning("Thumbnail failed", extra={"error": str(exc)})
            return StageOutcome.degraded(stage, str(exc))

        result.thumbnail = thumbnail
        result.thumbnail_url = thumbnail.urls[0] if thumbnail.urls else None
        result.local_thumbnail_path = thumbnail.files[0] if thumbnail.files else None
        return StageOutcome.ok(stage)

    async def _merge_stage(self, ctx: StageContext, result: CreativeResult) -> StageOutcome:
        stage = PipelineStage.MERGE
        if result.voiceover is None or not result.local_video_path:
            logger.info("[5/6] Merge skipped: needs a voiceover and a downloaded video")
            return StageOutcome.skipped(stage, "Needs a voiceover and a downloaded video")
        if not await self.merger.is_available():
            logger.info("[5/6] Merge skipped: ffmpeg not available, keeping silent video")
            return StageOutcome.skipped(stage, "ffmpeg not available")

        logger.info("[5/6] Merging voiceover into video")
        options = MergeOptions(
            output_dir=str(ctx.dirs.videos),
            filename=f"{result.creative.design_id}_final.mp4",
            fade_in=self.fade_in,
            fade_out=self.fade_out,
        )
        try:
            merged = await self.merger.merge(result.local_video_path, result.voiceover.file_path, options)
        except Exception as exc:
            result.merge_error = str(exc)
            logger.error("Merge failed, silent video kept", extra={"error": str(exc)})
            return StageOutcome.degraded(stage, str(exc))

        result.apply_merge(merged)
        return StageOutcome.ok(stage)

    async def _verify_stage(self, ctx: StageContext, result: CreativeResult) -> StageOutcome:
        stage = PipelineStage.VERIFY
        if result.merged_video is None:
            return StageOutcome.skipped(stage, "No merged video")

        logger.info("[6/6] Verifying audio stream")
        try:
            check = await self.merger.verify_audio_stream(result.merged_video.output_path)
        except Exception as exc:
            result.has_audio_stream = False
            result.audio_verification_error = str(exc)
            logger.error("Audio verification failed", extra={"error": str(exc)})
            return StageOutcome.degraded(stage, str(exc))

        result.has_audio_stream = check.has_audio
        if not check.has_audio:
            result.audio_verification_error = "Merged video has no audio stream"
            logger.warning(result.audio_verification_error, extra={"path": result.merged_video.output_path})
            return StageOutcome.degraded(stage, result.audio_verification_error)
        return StageOutcome.ok(stage)
