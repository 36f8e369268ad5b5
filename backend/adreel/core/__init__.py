"""
Core Module - Cross-cutting concerns and shared infrastructure

Organization:
    - logging.py: Structured logging configuration and utilities
    - exceptions.py: Application exception hierarchy
    - runtime.py: Startup checks for directories and media tools
    - media.py: ffprobe duration / stream probes
    - files.py: Campaign directory layout and JSON persistence
    - security.py: Filename and job id validation
    - voice_catalog.py: Recommended narration voices

Usage:
    from adreel.core import get_logger, create_campaign_dirs
"""

from .logging import (
    setup_logging,
    get_logger,
    set_request_id,
    set_campaign_context,
    set_job_id,
    clear_context,
    LogTimer,
)

from .exceptions import (
    AdReelError,
    PipelineError,
    InfrastructureError,
    JobError,
    CreativeGenerationError,
    MediaToolError,
    MissingInputError,
    ToolUnavailableError,
    MergeFailedError,
    AudioVerificationError,
    IntegrationError,
    CredentialMissingError,
    JobNotFoundError,
    InvalidJobTransitionError,
    JobAlreadyScheduledError,
    ExportTimeoutError,
)

from .runtime import (
    MEDIA_TOOLS,
    parse_bool_env,
    missing_runtime_tools,
    assert_directory_writable,
    run_startup_runtime_checks,
)

from .media import (
    get_media_duration,
    probe_audio_streams,
)

from .files import (
    CAMPAIGN_SUBDIRS,
    CampaignDirs,
    ensure_directory,
    campaign_dir_name,
    create_campaign_dirs,
    write_json,
    file_size_mb,
)

from .security import (
    sanitize_filename,
    validate_job_id,
)

from .voice_catalog import (
    RECOMMENDED_VOICES,
    DEFAULT_VOICE,
    resolve_voice_id,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "set_request_id",
    "set_campaign_context",
    "set_job_id",
    "clear_context",
    "LogTimer",
    # Exceptions
    "AdReelError",
    "PipelineError",
    "InfrastructureError",
    "JobError",
    "CreativeGenerationError",
    "MediaToolError",
    "MissingInputError",
    "ToolUnavailableError",
    "MergeFailedError",
    "AudioVerificationError",
    "IntegrationError",
    "CredentialMissingError",
    "JobNotFoundError",
    "InvalidJobTransitionError",
    "JobAlreadyScheduledError",
    "ExportTimeoutError",
    # Runtime guards
    "MEDIA_TOOLS",
    "parse_bool_env",
    "missing_runtime_tools",
    "assert_directory_writable",
    "run_startup_runtime_checks",
    # Media
    "get_media_duration",
    "probe_audio_streams",
    # Files
    "CAMPAIGN_SUBDIRS",
    "CampaignDirs",
    "ensure_directory",
    "campaign_dir_name",
    "create_campaign_dirs",
    "write_json",
    "file_size_mb",
    # Security
    "sanitize_filename",
    "validate_job_id",
    # Voices
    "RECOMMENDED_VOICES",
    "DEFAULT_VOICE",
    "resolve_voice_id",
]
