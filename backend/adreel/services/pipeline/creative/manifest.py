"""
Durable campaign records: the manifest and per-variant error files.
"""

from dataclasses import dataclass, field
from datetime import datetime, UTC
from pathlib import Path
from typing import Any, Dict, List, Optional

from adreel.core import get_logger, write_json

logger = get_logger(__name__, component="manifest")

MANIFEST_FILENAME = "campaign-manifest.json"


def write_variant_error(errors_dir: Path, variant_index: int, message: str) -> Optional[Path]:
    """Append one failure record to ``errors/variant_<index>.txt``

    Records are appended so several degraded stages of the same variant all
    stay on disk. A failed write is logged and returns None; it never changes
    the outcome of the variant.
    """
    errors_dir = Path(errors_dir)
    path = errors_dir / f"variant_{variant_index}.txt"
    timestamp = datetime.now(UTC).isoformat().replace("+00:00", "Z")
    record = f"Variant {variant_index}\nTimestamp: {timestamp}\nError: {message}\n"
    try:
        errors_dir.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            if f.tell() > 0:
                f.write("\n")
            f.write(record)
    except OSError as exc:
        logger.error(
            "Failed to write variant error file",
            extra={"path": str(path), "variant_error": message, "error": str(exc)},
        )
        return None
    return path


@dataclass
class CampaignManifest:
    campaign: str
    template_id: str
    directory: str
    creatives: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def summary(self) -> Dict[str, int]:
        successful = sum(1 for creative in self.creatives if creative.get("success"))
        return {
            "total": len(self.creatives),
            "successful": successful,
            "failed": len(self.creatives) - successful,
        }

    def add(self, index: int, entry: Dict[str, Any]) -> None:
        self.creatives.append({"index": index, **entry})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "campaign": self.campaign,
            "templateId": self.template_id,
            "directory": self.directory,
            "creatives": list(self.creatives),
            "summary": self.summary,
        }

    def write(self) -> Path:
        path = write_json(Path(self.directory) / MANIFEST_FILENAME, self.to_dict())
        logger.info("Campaign manifest saved", extra={"path": str(path), **self.summary})
        return path
