"""
Result types for the single-creative pipeline.

``CreativeResult`` is the accumulator threaded through the stages. Each
stage reports a ``StageOutcome`` instead of raising past its own boundary,
so the manifest can say which stages degraded and why.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from adreel.models.status import PipelineStage, StageStatus
from adreel.services.integrations.base import CreativeHandle, ExportArtifact, VoiceoverArtifact
from adreel.services.pipeline.assembly.ffmpeg import MergeResult


@dataclass(frozen=True)
class Variation:
    """One creative request of a campaign; read-only once built"""
    creative_data: Mapping[str, Any] = field(default_factory=dict)
    voiceover_script: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "creative_data", MappingProxyType(dict(self.creative_data)))


@dataclass(frozen=True)
class StageOutcome:
    stage: PipelineStage
    status: StageStatus
    message: Optional[str] = None

    @classmethod
    def ok(cls, stage: PipelineStage, message: Optional[str] = None) -> "StageOutcome":
        return cls(stage, StageStatus.OK, message)

    @classmethod
    def degraded(cls, stage: PipelineStage, message: str) -> "StageOutcome":
        return cls(stage, StageStatus.DEGRADED, message)

    @classmethod
    def skipped(cls, stage: PipelineStage, message: str) -> "StageOutcome":
        return cls(stage, StageStatus.SKIPPED, message)

    @classmethod
    def failed(cls, stage: PipelineStage, message: str) -> "StageOutcome":
        return cls(stage, StageStatus.FAILED, message)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"status": self.status.value}
        if self.message:
            data["message"] = self.message
        return data


@dataclass
class CreativeResult:
    """Everything one variation produced, including the partial failures.

    ``success`` only says a design exists. After a successful merge
    ``video_url`` is cleared, ``local_video_path`` points at the merged file
    and the serialized export no longer lists the silent CDN urls.
    """
    success: bool = False
    creative: Optional[CreativeHandle] = None
    voiceover: Optional[VoiceoverArtifact] = None
    export: Optional[ExportArtifact] = None
    thumbnail: Optional[ExportArtifact] = None

    video_url: Optional[str] = None
    local_video_path: Optional[str] = None
    thumbnail_url: Optional[str] = None
    local_thumbnail_path: Optional[str] = None
    merged_video: Optional[MergeResult] = None
    final_video_path: Optional[str] = None
    has_audio_stream: bool = False

    error: Optional[str] = None
    voiceover_error: Optional[str] = None
    export_error: Optional[str] = None
    thumbnail_error: Optional[str] = None
    merge_error: Optional[str] = None
    audio_verification_error: Optional[str] = None

    stages: Dict[PipelineStage, StageOutcome] = field(default_factory=dict)

    def record(self, outcome: StageOutcome) -> StageOutcome:
        self.stages[outcome.stage] = outcome
        return outcome

    def apply_merge(self, merged: MergeResult) -> None:
        self.merged_video = merged
        self.final_video_path = merged.output_path
        self.local_video_path = merged.output_path
        self.video_url = None

    @property
    def degraded_stages(self) -> Dict[str, str]:
        return {
            stage.value: outcome.message or ""
            for stage, outcome in self.stages.items()
            if outcome.status is StageStatus.DEGRADED
        }

    def _export_dict(self) -> Optional[Dict[str, Any]]:
        if self.export is None:
            return None
        data = self.export.to_dict()
        if self.merged_video is not None:
            data.pop("urls", None)
        return data

    def to_dict(self) -> Dict[str, Any]:
        """Manifest form; unset fields are left out"""
        candidates: Dict[str, Any] = {
            "success": self.success,
            "designId": self.creative.design_id if self.creative else None,
            "designUrl": self.creative.design_url if self.creative else None,
            "creativeData": dict(self.creative.creative_data) if self.creative else None,
            "note": self.creative.note if self.creative else None,
            "voiceover": self.voiceover.to_dict() if self.voiceover else None,
            "export": self._export_dict(),
            "thumbnail": self.thumbnail.to_dict() if self.thumbnail else None,
            "videoUrl": self.video_url,
            "localVideoPath": self.local_video_path,
            "thumbnailUrl": self.thumbnail_url,
            "localThumbnailPath": self.local_thumbnail_path,
            "mergedVideo": self.merged_video.to_dict() if self.merged_video else None,
            "finalVideoPath": self.final_video_path,
            "hasAudioStream": self.has_audio_stream,
            "error": self.error,
            "voiceoverError": self.voiceover_error,
            "exportError": self.export_error,
            "thumbnailError": self.thumbnail_error,
            "mergeError": self.merge_error,
            "audioVerificationError": self.audio_verification_error,
        }
        data = {key: value for key, value in candidates.items() if value is not None}
        data["stages"] = {stage.value: outcome.to_dict() for stage, outcome in self.stages.items()}
        return data
