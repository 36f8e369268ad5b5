"""
Constants configuration

API settings, remote endpoints and pipeline defaults.
"""

# API settings
API_TITLE = "AdReel API"
API_DESCRIPTION = "Generate campaign video ads from design templates with synchronized voiceover"
API_VERSION = "1.0.0"

CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
]

# Remote services
CANVA_API_BASE = "https://api.canva.com/rest/v1"
ELEVENLABS_API_BASE = "https://api.elevenlabs.io"
ELEVENLABS_MODEL_ID = "eleven_multilingual_v2"

# Export defaults
DEFAULT_EXPORT_FORMAT = "mp4"
DEFAULT_VIDEO_QUALITY = "horizontal_1080p"
THUMBNAIL_FORMAT = "png"

# Merge defaults used by the campaign pipeline
MERGE_FADE_IN_SECONDS = 0.3
MERGE_FADE_OUT_SECONDS = 0.5

# Export job manager
EXPORT_JOB_TIMEOUT_SECONDS = 120
EXPORT_JOB_RETENTION_HOURS = 24
EXPORT_JOB_SWEEP_INTERVAL_SECONDS = 3600
EXPORT_JOB_PROGRESS_PROCESSING = 10
EXPORT_JOB_LIST_LIMIT = 50

# Pacing between remote calls
VARIATION_DELAY_SECONDS = 2.0
BATCH_EXPORT_STAGGER_SECONDS = 2.0

# Narration pace used for duration estimates
WORDS_PER_MINUTE = 150

__all__ = [
    "API_TITLE",
    "API_DESCRIPTION",
    "API_VERSION",
    "CORS_ORIGINS",
    "CANVA_API_BASE",
    "ELEVENLABS_API_BASE",
    "ELEVENLABS_MODEL_ID",
    "DEFAULT_EXPORT_FORMAT",
    "DEFAULT_VIDEO_QUALITY",
    "THUMBNAIL_FORMAT",
    "MERGE_FADE_IN_SECONDS",
    "MERGE_FADE_OUT_SECONDS",
    "EXPORT_JOB_TIMEOUT_SECONDS",
    "EXPORT_JOB_RETENTION_HOURS",
    "EXPORT_JOB_SWEEP_INTERVAL_SECONDS",
    "EXPORT_JOB_PROGRESS_PROCESSING",
    "EXPORT_JOB_LIST_LIMIT",
    "VARIATION_DELAY_SECONDS",
    "BATCH_EXPORT_STAGGER_SECONDS",
    "WORDS_PER_MINUTE",
]
