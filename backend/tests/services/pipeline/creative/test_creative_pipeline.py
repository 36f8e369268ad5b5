"""
Tests for the single-creative pipeline stage policies.

Collaborators are the in-memory fakes from conftest; each test flips one
of them into a failure mode and checks how the result degrades.
"""

from dataclasses import replace
from pathlib import Path

import pytest

from adreel.core import AudioVerificationError, IntegrationError, MergeFailedError
from adreel.models.status import PipelineStage, StageStatus
from adreel.services.pipeline.creative import CreativePipeline


@pytest.fixture
def make_pipeline(fake_generator, fake_voiceover, fake_exporter, fake_merger):
    def _make(**overrides):
        kwargs = dict(design_credential="canva-token", voice_credential="eleven-key", fade_in=0.3, fade_out=0.5)
        kwargs.update(overrides)
        return CreativePipeline(fake_generator, fake_voiceover, fake_exporter, fake_merger, **kwargs)
    return _make


def _error_file(dirs, index=1):
    return dirs.errors / f"variant_{index}.txt"


@pytest.mark.asyncio
class TestCreativePipeline:
    async def test_happy_path_merges_and_clears_cdn_url(self, make_pipeline, campaign_dirs, fake_merger):
        result = await make_pipeline().run("TPL", {"headline": "Hi"}, "Buy now", campaign_dirs, 1)

        assert result.success is True
        assert result.creative.design_id == "design_00000001"
        assert result.voiceover is not None
        assert result.final_video_path == str(campaign_dirs.videos / "design_00000001_final.mp4")
        assert result.local_video_path == result.final_video_path
        assert result.video_url is None
        assert result.has_audio_stream is True
        assert result.thumbnail_url == "https://cdn.test/design_00000001.png"
        assert result.local_thumbnail_path == str(campaign_dirs.thumbnails / "design_00000001_thumb.png")
        assert all(outcome.status is StageStatus.OK for outcome in result.stages.values())
        assert not _error_file(campaign_dirs).exists()

        options = fake_merger.merges[0]["options"]
        assert (options.fade_in, options.fade_out) == (0.3, 0.5)

    async def test_voiceover_file_prefix_uses_design_tail(self, make_pipeline, campaign_dirs, fake_voiceover):
        await make_pipeline(voice="george").run("TPL", {}, "Script", campaign_dirs, 1)

        assert fake_voiceover.calls[0]["prefix"] == "vo_00000001"
        assert fake_voiceover.calls[0]["voice_id"] == "george"

    async def test_generation_failure_is_fatal(self, make_pipeline, campaign_dirs, fake_generator, fake_exporter):
        fake_generator.fail_on = {1}

        result = await make_pipeline().run("TPL", {}, "Script", campaign_dirs, 1)

        assert result.success is False
        assert result.error == "generation failed for call 1"
        assert result.stages[PipelineStage.GENERATE].status is StageStatus.FAILED
        assert list(result.stages) == [PipelineStage.GENERATE]
        assert fake_exporter.calls == []
        assert "Error: generation failed for call 1" in _error_file(campaign_dirs).read_text()

    async def test_missing_design_credential_fails_generation(self, make_pipeline, campaign_dirs, fake_generator):
        result = await make_pipeline(design_credential=None).run("TPL", {}, None, campaign_dirs, 1)

        assert result.success is False
        assert "CANVA_ACCESS_TOKEN" in result.error
        assert fake_generator.calls == []

    async def test_no_script_skips_voiceover_and_merge(self, make_pipeline, campaign_dirs, fake_voiceover, fake_merger):
        result = await make_pipeline().run("TPL", {}, None, campaign_dirs, 1)

        assert result.success is True
        assert result.stages[PipelineStage.VOICEOVER].status is StageStatus.SKIPPED
        assert result.stages[PipelineStage.MERGE].status is StageStatus.SKIPPED
        assert result.stages[PipelineStage.VERIFY].status is StageStatus.SKIPPED
        assert fake_voiceover.calls == []
        assert fake_merger.merges == []
        assert result.video_url == "https://cdn.test/design_00000001.mp4"
        assert result.has_audio_stream is False
        assert result.to_dict()["hasAudioStream"] is False
        assert not _error_file(campaign_dirs).exists()

    async def test_missing_voice_key_skips_without_error_file(self, make_pipeline, campaign_dirs, fake_voiceover):
        result = await make_pipeline(voice_credential=None).run("TPL", {}, "Script", campaign_dirs, 1)

        assert result.stages[PipelineStage.VOICEOVER].status is StageStatus.SKIPPED
        assert fake_voiceover.calls == []
        assert not _error_file(campaign_dirs).exists()

    async def test_voiceover_failure_degrades(self, make_pipeline, campaign_dirs, fake_voiceover, fake_merger):
        fake_voiceover.error = IntegrationError("elevenlabs", "quota exceeded", 429)

        result = await make_pipeline().run("TPL", {}, "Script", campaign_dirs, 1)

        assert result.success is True
        assert result.voiceover_error == "elevenlabs: quota exceeded"
        assert result.stages[PipelineStage.VOICEOVER].status is StageStatus.DEGRADED
        assert result.stages[PipelineStage.EXPORT].status is StageStatus.OK
        assert fake_merger.merges == []
        assert "voiceover: elevenlabs: quota exceeded" in _error_file(campaign_dirs).read_text()

    async def test_unwritable_error_file_keeps_variant_successful(self, make_pipeline, campaign_dirs, fake_voiceover):
        blocker = campaign_dirs.root / "not_a_dir"
        blocker.write_text("x")
        dirs = replace(campaign_dirs, errors=blocker / "errors")
        fake_voiceover.error = IntegrationError("elevenlabs", "quota exceeded", 429)

        result = await make_pipeline().run("TPL", {}, "Script", dirs, 1)

        assert result.success is True
        assert result.stages[PipelineStage.VOICEOVER].status is StageStatus.DEGRADED
        assert result.stages[PipelineStage.MERGE].status is StageStatus.SKIPPED

    async def test_export_failure_degrades_and_skips_merge(self, make_pipeline, campaign_dirs, fake_exporter):
        fake_exporter.errors["mp4"] = IntegrationError("canva", "export job failed")

        result = await make_pipeline().run("TPL", {}, "Script", campaign_dirs, 1)

        assert result.success is True
        assert result.export_error == "canva: export job failed"
        assert result.stages[PipelineStage.THUMBNAIL].status is StageStatus.OK
        assert result.stages[PipelineStage.MERGE].status is StageStatus.SKIPPED
        assert "export: canva: export job failed" in _error_file(campaign_dirs).read_text()

    async def test_thumbnail_failure_is_logged_only(self, make_pipeline, campaign_dirs, fake_exporter):
        fake_exporter.errors["png"] = IntegrationError("canva", "png export failed")

        result = await make_pipeline().run("TPL", {}, "Script", campaign_dirs, 1)

        assert result.thumbnail_error == "canva: png export failed"
        assert result.stages[PipelineStage.THUMBNAIL].status is StageStatus.DEGRADED
        assert result.has_audio_stream is True
        assert not _error_file(campaign_dirs).exists()

    async def test_ffmpeg_unavailable_keeps_silent_video(self, make_pipeline, campaign_dirs, fake_merger):
        fake_merger.available = False

        result = await make_pipeline().run("TPL", {}, "Script", campaign_dirs, 1)

        assert result.stages[PipelineStage.MERGE].status is StageStatus.SKIPPED
        assert result.video_url == "https://cdn.test/design_00000001.mp4"
        assert result.local_video_path == str(campaign_dirs.videos / "design_00000001_1.mp4")
        assert result.final_video_path is None
        assert not _error_file(campaign_dirs).exists()

    async def test_cdn_only_export_skips_merge(self, make_pipeline, campaign_dirs, fake_exporter, fake_merger):
        fake_exporter.download = False

        result = await make_pipeline().run("TPL", {}, "Script", campaign_dirs, 1)

        assert result.stages[PipelineStage.MERGE].status is StageStatus.SKIPPED
        assert fake_merger.merges == []

    async def test_merge_failure_keeps_unmerged_result(self, make_pipeline, campaign_dirs, fake_merger):
        fake_merger.merge_error = MergeFailedError("ffmpeg exited with code 1: Invalid data", returncode=1)

        result = await make_pipeline().run("TPL", {}, "Script", campaign_dirs, 1)

        assert result.success is True
        assert result.merge_error == "ffmpeg exited with code 1: Invalid data"
        assert result.video_url == "https://cdn.test/design_00000001.mp4"
        assert Path(result.local_video_path).name == "design_00000001_1.mp4"
        assert result.stages[PipelineStage.VERIFY].status is StageStatus.SKIPPED
        assert "merge: ffmpeg exited with code 1" in _error_file(campaign_dirs).read_text()

    async def test_verification_error_assumes_no_audio(self, make_pipeline, campaign_dirs, fake_merger):
        fake_merger.verify_error = AudioVerificationError("ffprobe exited with code 1")

        result = await make_pipeline().run("TPL", {}, "Script", campaign_dirs, 1)

        assert result.has_audio_stream is False
        assert result.audio_verification_error == "ffprobe exited with code 1"
        assert result.final_video_path is not None
        assert "verify: ffprobe exited with code 1" in _error_file(campaign_dirs).read_text()

    async def test_merged_video_without_audio_degrades(self, make_pipeline, campaign_dirs, fake_merger):
        fake_merger.has_audio = False

        result = await make_pipeline().run("TPL", {}, "Script", campaign_dirs, 1)

        assert result.has_audio_stream is False
        assert result.stages[PipelineStage.VERIFY].status is StageStatus.DEGRADED

    async def test_multiple_degraded_stages_append_records(self, make_pipeline, campaign_dirs, fake_voiceover, fake_exporter):
        fake_voiceover.error = RuntimeError("tts down")
        fake_exporter.errors["mp4"] = RuntimeError("export down")

        await make_pipeline().run("TPL", {}, "Script", campaign_dirs, 3)

        text = _error_file(campaign_dirs, 3).read_text()
        assert text.count("Variant 3") == 2
        assert "Error: voiceover: tts down" in text
        assert "Error: export: export down" in text
