"""
Tests for CreativeResult serialization and the campaign manifest.
"""

import json

from adreel.models.status import PipelineStage
from adreel.services.integrations.base import CreativeHandle, ExportArtifact
from adreel.services.pipeline.assembly.ffmpeg import MergeResult
from adreel.services.pipeline.creative import (
    MANIFEST_FILENAME,
    CampaignManifest,
    CreativeResult,
    StageOutcome,
    write_variant_error,
)


class TestCreativeResult:
    def test_to_dict_omits_unset_fields(self):
        result = CreativeResult(success=True, creative=CreativeHandle("D1", "https://canva.test/D1", {"a": 1}))
        result.record(StageOutcome.ok(PipelineStage.GENERATE))
        result.record(StageOutcome.skipped(PipelineStage.VOICEOVER, "No voiceover script"))

        data = result.to_dict()

        assert data["success"] is True
        assert data["designId"] == "D1"
        assert data["creativeData"] == {"a": 1}
        assert "voiceover" not in data
        assert "mergeError" not in data
        assert data["hasAudioStream"] is False
        assert data["stages"] == {
            "generate": {"status": "ok"},
            "voiceover": {"status": "skipped", "message": "No voiceover script"},
        }

    def test_apply_merge_supersedes_cdn_url(self):
        result = CreativeResult(video_url="https://cdn.test/a.mp4", local_video_path="/v/a.mp4")

        result.apply_merge(MergeResult(output_path="/v/a_final.mp4"))

        assert result.video_url is None
        assert result.local_video_path == "/v/a_final.mp4"
        assert result.final_video_path == "/v/a_final.mp4"
        assert result.to_dict()["mergedVideo"]["outputPath"] == "/v/a_final.mp4"

    def test_merged_result_hides_silent_export_urls(self):
        result = CreativeResult(export=ExportArtifact("D1", "mp4", urls=["https://cdn.test/D1.mp4"], files=["/v/a.mp4"]))
        assert result.to_dict()["export"]["urls"] == ["https://cdn.test/D1.mp4"]

        result.apply_merge(MergeResult(output_path="/v/a_final.mp4"))

        export = result.to_dict()["export"]
        assert "urls" not in export
        assert export["files"] == ["/v/a.mp4"]

    def test_degraded_stages(self):
        result = CreativeResult()
        result.record(StageOutcome.degraded(PipelineStage.EXPORT, "boom"))
        result.record(StageOutcome.ok(PipelineStage.THUMBNAIL))
        assert result.degraded_stages == {"export": "boom"}


class TestManifest:
    def test_summary_and_write(self, tmp_path):
        manifest = CampaignManifest(campaign="Spring", template_id="TPL", directory=str(tmp_path))
        manifest.add(1, {"success": True})
        manifest.add(2, {"success": False, "error": "x"})

        path = manifest.write()

        assert path == tmp_path / MANIFEST_FILENAME
        saved = json.loads(path.read_text())
        assert saved["summary"] == {"total": 2, "successful": 1, "failed": 1}
        assert saved["creatives"][1] == {"index": 2, "success": False, "error": "x"}


class TestVariantErrors:
    def test_records_are_appended(self, tmp_path):
        write_variant_error(tmp_path, 4, "first")
        path = write_variant_error(tmp_path, 4, "second")

        records = path.read_text(encoding="utf-8").split("\n\n")
        assert path.name == "variant_4.txt"
        assert len(records) == 2
        assert records[0].startswith("Variant 4\nTimestamp: ")
        assert records[1].rstrip().endswith("Error: second")

    def test_write_failure_is_logged_not_raised(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")

        assert write_variant_error(blocker / "errors", 1, "boom") is None
