from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from adreel.config import Settings
from adreel.core import clear_context, create_campaign_dirs
from adreel.services.integrations.base import (
    CreativeGenerator,
    CreativeHandle,
    DesignExporter,
    ExportArtifact,
    VoiceoverArtifact,
    VoiceoverSynthesizer,
)
from adreel.services.pipeline.assembly.ffmpeg import AudioStreamCheck, MediaMerger, MergeOptions, MergeResult


class FakeGenerator(CreativeGenerator):
    """Returns designs ``design_<n>``; set ``fail_on`` to the call numbers that should raise"""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.fail_on: set = set()

    async def generate(self, credential, template_id, fields):
        self.calls.append({"credential": credential, "template_id": template_id, "fields": fields})
        number = len(self.calls)
        if number in self.fail_on:
            raise RuntimeError(f"generation failed for call {number}")
        return CreativeHandle(
            design_id=f"design_{number:08d}",
            design_url=f"https://canva.test/design_{number}",
            creative_data=dict(fields),
        )

    async def list_templates(self, credential):
        return [{"id": "TPL", "title": "Spring promo"}]

    async def get_template_fields(self, credential, template_id):
        return {"headline": {"type": "text"}, "hero": {"type": "image"}}


class FakeVoiceover(VoiceoverSynthesizer):
    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.error: Optional[Exception] = None

    async def synthesize(self, credential, text, *, voice_id=None, output_dir, filename_prefix="voiceover"):
        self.calls.append({"text": text, "voice_id": voice_id, "prefix": filename_prefix})
        if self.error is not None:
            raise self.error
        path = Path(output_dir) / f"{filename_prefix}.mp3"
        path.write_bytes(b"ID3fake")
        words = len(text.split())
        return VoiceoverArtifact(
            file_path=str(path),
            script=text,
            word_count=words,
            estimated_duration=round(words / 150 * 60, 2),
            voice_id=voice_id,
        )

    async def list_voices(self, credential):
        return [{"voice_id": "v1", "name": "Remote"}]


class FakeExporter(DesignExporter):
    """Writes placeholder files in download mode, returns CDN urls otherwise"""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.errors: Dict[str, Exception] = {}
        self.download = True

    async def export(self, credential, design_id, *, format="mp4", quality=None, output_dir=None, filename=None):
        self.calls.append({"design_id": design_id, "format": format, "quality": quality, "output_dir": output_dir})
        if format in self.errors:
            raise self.errors[format]
        url = f"https://cdn.test/{design_id}.{format}"
        artifact = ExportArtifact(design_id=design_id, format=format, urls=[url])
        if output_dir is not None and self.download:
            path = Path(output_dir) / (filename or f"{design_id}_1.{format}")
            path.write_bytes(b"fake-media")
            artifact.files.append(str(path))
        return artifact


class FakeMerger(MediaMerger):
    def __init__(self):
        super().__init__()
        self.available = True
        self.merge_error: Optional[Exception] = None
        self.verify_error: Optional[Exception] = None
        self.has_audio = True
        self.merges: List[Dict[str, Any]] = []

    async def is_available(self) -> bool:
        return self.available

    async def merge(self, video_path, audio_path, options: Optional[MergeOptions] = None) -> MergeResult:
        self.merges.append({"video": video_path, "audio": audio_path, "options": options})
        if self.merge_error is not None:
            raise self.merge_error
        output = Path(options.output_dir) / options.filename
        output.write_bytes(b"merged")
        return MergeResult(output_path=str(output), metadata={"fadeIn": options.fade_in, "fadeOut": options.fade_out})

    async def verify_audio_stream(self, path: str) -> AudioStreamCheck:
        if self.verify_error is not None:
            raise self.verify_error
        streams = [{"index": 1, "codec_type": "audio"}] if self.has_audio else []
        return AudioStreamCheck(has_audio=self.has_audio, streams=streams)


@pytest.fixture
def fake_generator():
    return FakeGenerator()


@pytest.fixture
def fake_voiceover():
    return FakeVoiceover()


@pytest.fixture
def fake_exporter():
    return FakeExporter()


@pytest.fixture
def fake_merger():
    return FakeMerger()


@pytest.fixture
def campaign_dirs(tmp_path):
    return create_campaign_dirs(tmp_path / "campaigns", "Spring Sale", date(2026, 3, 1))


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        canva_access_token="canva-token",
        elevenlabs_api_key="eleven-key",
        campaign_output_dir=tmp_path / "campaigns",
        data_dir=tmp_path / "data",
        persist_export_jobs=False,
        variation_delay_seconds=0.0,
        batch_export_stagger_seconds=0.0,
    )


@pytest.fixture(autouse=True)
def reset_log_context():
    clear_context()
    yield
    clear_context()
