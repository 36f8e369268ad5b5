"""
Core Exceptions
Standardized exception hierarchy for the application.
"""

from typing import Optional


class AdReelError(Exception):
    """Base exception for all application errors."""
    pass


class PipelineError(AdReelError):
    """Base exception for creative pipeline errors."""
    pass


class InfrastructureError(AdReelError):
    """Base exception for infrastructure errors (remote APIs, credentials, storage)."""
    pass


class JobError(AdReelError):
    """Base exception for export job bookkeeping errors."""
    pass


# --- Pipeline -----------------------------------------------------------------

class CreativeGenerationError(PipelineError):
    """The design collaborator could not produce a design from the template."""
    pass


class MediaToolError(PipelineError):
    """Base exception for ffmpeg / ffprobe failures."""
    pass


class MissingInputError(MediaToolError):
    def __init__(self, path: str, kind: str):
        self.path = str(path)
        self.kind = kind
        super().__init__(f"{kind.capitalize()} file not found: {self.path}")


class ToolUnavailableError(MediaToolError):
    def __init__(self, tool: str, reason: Optional[str] = None):
        self.tool = tool
        message = f"{tool} is not available"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MergeFailedError(MediaToolError):
    """ffmpeg exited non-zero or produced an empty file.

    ``stderr_tail`` holds only the last few hundred characters of ffmpeg's
    diagnostics so error payloads stay bounded.
    """

    def __init__(self, message: str, returncode: Optional[int] = None, stderr_tail: str = ""):
        self.returncode = returncode
        self.stderr_tail = stderr_tail
        super().__init__(message)


class AudioVerificationError(MediaToolError):
    pass


# --- Infrastructure -----------------------------------------------------------

class IntegrationError(InfrastructureError):
    """A remote API call failed or returned an unusable payload."""

    def __init__(self, service: str, message: str, status_code: Optional[int] = None):
        self.service = service
        self.status_code = status_code
        super().__init__(f"{service}: {message}")


class CredentialMissingError(InfrastructureError):
    def __init__(self, credential: str):
        self.credential = credential
        super().__init__(f"{credential} is not configured")


# --- Jobs ---------------------------------------------------------------------

class JobNotFoundError(JobError):
    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Export job not found: {job_id}")


class InvalidJobTransitionError(JobError):
    def __init__(self, job_id: str, current: str, target: str):
        self.job_id = job_id
        self.current = current
        self.target = target
        super().__init__(f"Export job {job_id} cannot move from {current} to {target}")


class JobAlreadyScheduledError(JobError):
    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Export job {job_id} already has a background task")


class ExportTimeoutError(JobError):
    def __init__(self, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Export timed out after {timeout_seconds:g} seconds")
