"""
Security utilities for identifiers and filenames coming from API callers
"""

import os
import re

from .logging import get_logger

logger = get_logger(__name__, component="security")

EXPORT_JOB_ID_PATTERN = re.compile(r"^exp_\d{10,16}_[a-f0-9]{8}$")


def sanitize_filename(filename: str) -> str:
    """
    Strip path components and unsafe characters from a filename

    Raises:
        ValueError: If nothing usable is left after sanitization

    Example:
        >>> sanitize_filename("../../etc/passwd")
        'passwd'
    """
    original = filename
    filename = os.path.basename(filename.replace("\\", "/"))
    filename = filename.replace("\x00", "").lstrip(".")
    filename = "".join(char for char in filename if 31 < ord(char) < 127)
    for char in '<>:"|?*':
        filename = filename.replace(char, "")
    filename = filename.strip()[:255]

    if not filename or filename.replace(".", "") == "":
        logger.warning("Filename sanitization resulted in empty string", extra={"original": original})
        raise ValueError("Invalid filename after sanitization")

    if filename != original:
        logger.info("Filename sanitized", extra={"original": original, "sanitized": filename})

    return filename


def validate_job_id(job_id: str) -> bool:
    """
    Check that an export job id has the ``exp_<epoch ms>_<8 hex>`` shape

    Example:
        >>> validate_job_id("exp_1718000000000_a1b2c3d4")
        True
        >>> validate_job_id("../../etc/passwd")
        False
    """
    is_valid = bool(EXPORT_JOB_ID_PATTERN.match(job_id))
    if not is_valid:
        logger.warning("Invalid export job id format", extra={"job_id_value": job_id})
    return is_valid
