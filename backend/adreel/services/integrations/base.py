"""
Base classes for remote collaborators

Defines the capability contracts the creative pipeline consumes. Concrete
clients live next to this module; tests substitute in-memory fakes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class CreativeHandle:
    """A renderable design produced from a template"""
    design_id: str
    design_url: Optional[str] = None
    creative_data: Dict[str, Any] = field(default_factory=dict)
    note: Optional[str] = None  # set when the template itself stands in for the design

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "designId": self.design_id,
            "designUrl": self.design_url,
            "creativeData": self.creative_data,
        }
        if self.note:
            data["note"] = self.note
        return data


@dataclass
class VoiceoverArtifact:
    file_path: str
    script: str
    word_count: int
    estimated_duration: float  # seconds, from the words-per-minute pace
    voice_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filePath": self.file_path,
            "script": self.script,
            "wordCount": self.word_count,
            "estimatedDuration": self.estimated_duration,
            "voiceId": self.voice_id,
        }


@dataclass
class ExportArtifact:
    design_id: str
    format: str
    urls: List[str] = field(default_factory=list)
    files: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "designId": self.design_id,
            "format": self.format,
            "urls": list(self.urls),
            "files": list(self.files),
        }


class CreativeGenerator(ABC):
    """Produces a design from a brand template and field values"""

    @abstractmethod
    async def generate(
        self,
        credential: str,
        template_id: str,
        fields: Dict[str, Any],
    ) -> CreativeHandle:
        """Create a design.

        Raises:
            CreativeGenerationError: generation failed or never completed
        """
        pass

    @abstractmethod
    async def list_templates(self, credential: str) -> List[Dict[str, Any]]:
        """Templates the credential can fill"""
        pass

    @abstractmethod
    async def get_template_fields(self, credential: str, template_id: str) -> Dict[str, Any]:
        """Autofill fields of one template, keyed by field name"""
        pass


class VoiceoverSynthesizer(ABC):
    """Turns a script into a narration audio file"""

    @abstractmethod
    async def synthesize(
        self,
        credential: str,
        text: str,
        *,
        voice_id: Optional[str] = None,
        output_dir: str,
        filename_prefix: str = "voiceover",
    ) -> VoiceoverArtifact:
        pass

    @abstractmethod
    async def list_voices(self, credential: str) -> List[Dict[str, Any]]:
        pass


class DesignExporter(ABC):
    """Renders a design to video or image.

    With ``output_dir`` the rendered files are downloaded there; without it
    only the CDN URLs are returned.
    """

    @abstractmethod
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
        pass
