"""
Runtime settings read from the environment.

``Settings.from_env()`` is called once by the service container; tests build
``Settings`` directly or pass a custom mapping.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from . import constants
from .paths import CAMPAIGN_OUTPUT_DIR, DATA_DIR


def _env_str(env: Mapping[str, str], name: str, default: Optional[str] = None) -> Optional[str]:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _env_int(env: Mapping[str, str], name: str, default: int, minimum: int) -> int:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= minimum else default


def _env_float(env: Mapping[str, str], name: str, default: float, minimum: float) -> float:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= minimum else default


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    canva_access_token: Optional[str] = None
    elevenlabs_api_key: Optional[str] = None
    canva_api_base: str = constants.CANVA_API_BASE
    elevenlabs_api_base: str = constants.ELEVENLABS_API_BASE
    voice: str = "sarah"

    export_format: str = constants.DEFAULT_EXPORT_FORMAT
    export_quality: str = constants.DEFAULT_VIDEO_QUALITY
    autofill_template_fallback: bool = False

    campaign_output_dir: Path = CAMPAIGN_OUTPUT_DIR
    data_dir: Path = DATA_DIR
    persist_export_jobs: bool = True

    export_job_timeout_seconds: float = constants.EXPORT_JOB_TIMEOUT_SECONDS
    export_job_retention_hours: float = constants.EXPORT_JOB_RETENTION_HOURS
    export_job_sweep_interval_seconds: float = constants.EXPORT_JOB_SWEEP_INTERVAL_SECONDS
    batch_export_stagger_seconds: float = constants.BATCH_EXPORT_STAGGER_SECONDS
    variation_delay_seconds: float = constants.VARIATION_DELAY_SECONDS

    merge_fade_in_seconds: float = constants.MERGE_FADE_IN_SECONDS
    merge_fade_out_seconds: float = constants.MERGE_FADE_OUT_SECONDS
    ffmpeg_binary: str = "ffmpeg"
    ffprobe_binary: str = "ffprobe"

    @property
    def export_jobs_file(self) -> Optional[Path]:
        if not self.persist_export_jobs:
            return None
        return Path(self.data_dir) / "export-jobs.json"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            canva_access_token=_env_str(env, "CANVA_ACCESS_TOKEN"),
            elevenlabs_api_key=_env_str(env, "ELEVENLABS_API_KEY"),
            canva_api_base=_env_str(env, "CANVA_API_BASE", defaults.canva_api_base).rstrip("/"),
            elevenlabs_api_base=_env_str(env, "ELEVENLABS_API_BASE", defaults.elevenlabs_api_base).rstrip("/"),
            voice=_env_str(env, "VOICE_ID", defaults.voice),
            export_format=_env_str(env, "EXPORT_FORMAT", defaults.export_format).lower(),
            export_quality=_env_str(env, "EXPORT_QUALITY", defaults.export_quality),
            autofill_template_fallback=_env_bool(env, "CANVA_AUTOFILL_FALLBACK", False),
            campaign_output_dir=Path(_env_str(env, "CAMPAIGN_OUTPUT_DIR", str(defaults.campaign_output_dir))),
            data_dir=Path(_env_str(env, "DATA_DIR", str(defaults.data_dir))),
            persist_export_jobs=_env_bool(env, "EXPORT_JOBS_PERSIST", True),
            export_job_timeout_seconds=_env_float(
                env, "EXPORT_JOB_TIMEOUT_SECONDS", defaults.export_job_timeout_seconds, 1.0
            ),
            export_job_retention_hours=_env_float(
                env, "EXPORT_JOB_RETENTION_HOURS", defaults.export_job_retention_hours, 0.0
            ),
            export_job_sweep_interval_seconds=_env_float(
                env, "EXPORT_JOB_SWEEP_INTERVAL_SECONDS", defaults.export_job_sweep_interval_seconds, 1.0
            ),
            batch_export_stagger_seconds=_env_float(
                env, "BATCH_EXPORT_STAGGER_SECONDS", defaults.batch_export_stagger_seconds, 0.0
            ),
            variation_delay_seconds=_env_float(
                env, "VARIATION_DELAY_SECONDS", defaults.variation_delay_seconds, 0.0
            ),
            merge_fade_in_seconds=_env_float(env, "MERGE_FADE_IN_SECONDS", defaults.merge_fade_in_seconds, 0.0),
            merge_fade_out_seconds=_env_float(env, "MERGE_FADE_OUT_SECONDS", defaults.merge_fade_out_seconds, 0.0),
            ffmpeg_binary=_env_str(env, "FFMPEG_BINARY", defaults.ffmpeg_binary),
            ffprobe_binary=_env_str(env, "FFPROBE_BINARY", defaults.ffprobe_binary),
        )
