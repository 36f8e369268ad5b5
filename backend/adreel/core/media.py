"""
Media utilities - ffprobe duration and stream probes
"""

import asyncio
import json
from typing import Any, Dict, List, Optional

from .exceptions import AudioVerificationError
from .logging import get_logger

logger = get_logger(__name__, component="media")


async def get_media_duration(file_path: str, ffprobe: str = "ffprobe") -> Optional[float]:
    """Get duration of a media file in seconds using ffprobe

    Returns:
        Duration in seconds, or None when the probe fails or reports nothing usable
    """
    cmd = [
        ffprobe,
        "-v", "error",
        "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1",
        str(file_path),
    ]

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, _ = await process.communicate()
        if process.returncode != 0:
            return None
        duration = float(stdout.decode().strip())
    except (OSError, ValueError) as exc:
        logger.debug("Duration probe failed", extra={"path": str(file_path), "error": str(exc)})
        return None

    return duration if duration >= 0 else None


async def probe_audio_streams(file_path: str, ffprobe: str = "ffprobe") -> List[Dict[str, Any]]:
    """List the audio streams of a media file

    Raises:
        AudioVerificationError: ffprobe could not be run or its output was unreadable
    """
    cmd = [
        ffprobe,
        "-v", "error",
        "-select_streams", "a",
        "-show_entries", "stream=index,codec_name,channels,sample_rate",
        "-of", "json",
        str(file_path),
    ]

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
    except OSError as exc:
        raise AudioVerificationError(f"Could not run {ffprobe}: {exc}") from exc

    if process.returncode != 0:
        raise AudioVerificationError(
            f"{ffprobe} exited with code {process.returncode}: {stderr.decode(errors='replace')[-500:]}"
        )

    try:
        payload = json.loads(stdout.decode() or "{}")
    except json.JSONDecodeError as exc:
        raise AudioVerificationError(f"Unreadable {ffprobe} output: {exc}") from exc

    streams = payload.get("streams") or []
    return [stream for stream in streams if isinstance(stream, dict)]
