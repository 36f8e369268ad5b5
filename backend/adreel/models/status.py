"""
Status enumerations for export jobs and creative pipeline stages.
"""

from enum import Enum


class ExportJobStatus(str, Enum):
    """Lifecycle of an asynchronous export job."""

    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    def is_terminal(self) -> bool:
        return self in (ExportJobStatus.COMPLETED, ExportJobStatus.FAILED)

    def can_transition_to(self, target: "ExportJobStatus") -> bool:
        return target in ALLOWED_TRANSITIONS[self]


ALLOWED_TRANSITIONS = {
    ExportJobStatus.QUEUED: frozenset({ExportJobStatus.PROCESSING}),
    ExportJobStatus.PROCESSING: frozenset({ExportJobStatus.COMPLETED, ExportJobStatus.FAILED}),
    ExportJobStatus.COMPLETED: frozenset(),
    ExportJobStatus.FAILED: frozenset(),
}


class PipelineStage(str, Enum):
    """Stages of the single-creative pipeline, in execution order."""

    GENERATE = "generate"
    VOICEOVER = "voiceover"
    EXPORT = "export"
    THUMBNAIL = "thumbnail"
    MERGE = "merge"
    VERIFY = "verify"


class StageStatus(str, Enum):
    OK = "ok"
    DEGRADED = "degraded"
    SKIPPED = "skipped"
    FAILED = "failed"


__all__ = [
    "ExportJobStatus",
    "ALLOWED_TRANSITIONS",
    "PipelineStage",
    "StageStatus",
]
