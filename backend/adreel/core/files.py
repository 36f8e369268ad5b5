"""
File utilities - campaign directory layout and JSON persistence
"""

import json
import re
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Optional

from .security import sanitize_filename

CAMPAIGN_SUBDIRS = ("videos", "voiceovers", "thumbnails", "errors", "audio")


@dataclass(frozen=True)
class CampaignDirs:
    """Output namespace of one campaign run"""
    root: Path
    videos: Path
    voiceovers: Path
    thumbnails: Path
    errors: Path
    audio: Path


def ensure_directory(dir_path: Path) -> Path:
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def campaign_dir_name(name: str, run_date: Optional[date] = None) -> str:
    """Directory name for a campaign: ``<name>_<YYYY-MM-DD>``, whitespace to ``_``, lowercased

    Path components are stripped from the name, so the directory always sits
    directly under the output root.

    Example:
        >>> campaign_dir_name("Summer Sale", date(2024, 6, 1))
        'summer_sale_2024-06-01'
    """
    run_date = run_date or date.today()
    safe_name = sanitize_filename(name)
    return re.sub(r"\s+", "_", f"{safe_name}_{run_date.isoformat()}").lower()


def create_campaign_dirs(output_root: Path, name: str, run_date: Optional[date] = None) -> CampaignDirs:
    root = ensure_directory(Path(output_root) / campaign_dir_name(name, run_date))
    subdirs = {sub: ensure_directory(root / sub) for sub in CAMPAIGN_SUBDIRS}
    return CampaignDirs(root=root, **subdirs)


def write_json(path: Path, data: Any) -> Path:
    """Write JSON through a temp file so readers never see a half-written document"""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    tmp_path.replace(path)
    return path


def file_size_mb(path: Path) -> float:
    return round(Path(path).stat().st_size / (1024 * 1024), 2)
