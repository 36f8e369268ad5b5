"""Remote collaborators: design generation/export (Canva) and voiceover (ElevenLabs)."""

from .base import (
    CreativeGenerator,
    CreativeHandle,
    DesignExporter,
    ExportArtifact,
    VoiceoverArtifact,
    VoiceoverSynthesizer,
)
from .canva import CanvaClient, CanvaCreativeGenerator, CanvaDesignExporter, format_autofill_data
from .elevenlabs import ElevenLabsVoiceover, estimate_duration

__all__ = [
    "CreativeGenerator",
    "CreativeHandle",
    "DesignExporter",
    "ExportArtifact",
    "VoiceoverArtifact",
    "VoiceoverSynthesizer",
    "CanvaClient",
    "CanvaCreativeGenerator",
    "CanvaDesignExporter",
    "format_autofill_data",
    "ElevenLabsVoiceover",
    "estimate_duration",
]
