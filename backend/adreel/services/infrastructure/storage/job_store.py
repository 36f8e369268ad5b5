"""
Export job table persistence.

The table is one JSON document: an array of ``[jobId, job]`` pairs,
rewritten in full after every mutation.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple

from adreel.core import get_logger, write_json

logger = get_logger(__name__, component="job_store")

JobEntry = Tuple[str, Dict[str, Any]]


class ExportJobStore:
    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> List[JobEntry]:
        """Read the table; a missing or unreadable file yields an empty table"""
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to load export jobs", extra={"path": str(self.path), "error": str(e)})
            return []

        if not isinstance(data, list):
            logger.error("Export job table is not a list", extra={"path": str(self.path)})
            return []

        entries: List[JobEntry] = []
        for item in data:
            if (
                isinstance(item, (list, tuple))
                and len(item) == 2
                and isinstance(item[0], str)
                and isinstance(item[1], dict)
            ):
                entries.append((item[0], item[1]))
            else:
                logger.warning("Skipping malformed export job entry", extra={"entry": repr(item)[:200]})
        return entries

    def save(self, entries: Iterable[JobEntry]) -> None:
        write_json(self.path, [[job_id, job] for job_id, job in entries])
