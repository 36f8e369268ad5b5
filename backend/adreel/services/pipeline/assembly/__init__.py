"""Assembly - merging narration into exported videos."""

from .ffmpeg import (
    AudioStreamCheck,
    MediaMerger,
    MergeOptions,
    MergeResult,
    build_audio_filters,
    build_merge_command,
    resolve_output_path,
)

__all__ = [
    "AudioStreamCheck",
    "MediaMerger",
    "MergeOptions",
    "MergeResult",
    "build_audio_filters",
    "build_merge_command",
    "resolve_output_path",
]
