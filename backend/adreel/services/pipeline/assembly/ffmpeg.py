"""
Audio/video merge with ffmpeg

Combines a silent exported video with a narration track: the video stream is
copied untouched, the narration is shaped by a filter chain (volume,
loudness normalization, fades) and encoded to AAC. The output is laid out
for progressive streaming and checked for an audio stream afterwards.
"""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from adreel.core import (
    LogTimer,
    MergeFailedError,
    MissingInputError,
    ToolUnavailableError,
    AudioVerificationError,
    file_size_mb,
    get_logger,
    get_media_duration,
    probe_audio_streams,
)

logger = get_logger(__name__, component="merge")

LOUDNORM_FILTER = "loudnorm=I=-16:TP=-1.5:LRA=11"
AUDIO_CODEC = "aac"
AUDIO_BITRATE = "192k"
STDERR_TAIL_CHARS = 500


@dataclass
class MergeOptions:
    """Merge parameters.

    ``output_path`` wins over ``output_dir``/``filename``. Without either the
    result lands next to the video as ``<video stem>_merged.mp4``.
    """
    output_path: Optional[str] = None
    output_dir: Optional[str] = None
    filename: Optional[str] = None
    fade_in: float = 0.5
    fade_out: float = 0.5
    volume: float = 1.0
    normalize: bool = True
    keep_original_audio: bool = False
    overwrite: bool = True


@dataclass
class MergeResult:
    output_path: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"outputPath": self.output_path, "metadata": dict(self.metadata)}


@dataclass
class AudioStreamCheck:
    has_audio: bool
    streams: List[Dict[str, Any]] = field(default_factory=list)


def _fmt_seconds(value: float) -> str:
    text = format(round(value, 3), "f").rstrip("0").rstrip(".")
    return text or "0"


def build_audio_filters(
    audio_duration: Optional[float],
    *,
    volume: float = 1.0,
    normalize: bool = True,
    fade_in: float = 0.0,
    fade_out: float = 0.0,
) -> List[str]:
    """Narration filter chain, in application order.

    Fades need the narration length, so both are dropped when the duration
    probe came back empty.
    """
    filters: List[str] = []
    if volume != 1.0:
        filters.append(f"volume={_fmt_seconds(volume)}")
    if normalize:
        filters.append(LOUDNORM_FILTER)
    if audio_duration is not None:
        if fade_in > 0:
            filters.append(f"afade=t=in:st=0:d={_fmt_seconds(fade_in)}")
        if fade_out > 0:
            start = max(0.0, audio_duration - fade_out)
            filters.append(f"afade=t=out:st={_fmt_seconds(start)}:d={_fmt_seconds(fade_out)}")
    return filters


def build_merge_command(
    video_path: str,
    audio_path: str,
    output_path: str,
    filters: List[str],
    *,
    keep_original_audio: bool = False,
    overwrite: bool = True,
    ffmpeg: str = "ffmpeg",
) -> List[str]:
    """Build the ffmpeg argument list for one merge"""
    cmd = [
        ffmpeg,
        "-y" if overwrite else "-n",
        "-i", str(video_path),
        "-i", str(audio_path),
        "-map", "0:v:0",
    ]

    chain = ",".join(filters)
    if keep_original_audio:
        if chain:
            graph = f"[1:a]{chain}[vo];[0:a][vo]amix=inputs=2:duration=first[aout]"
        else:
            graph = "[0:a][1:a]amix=inputs=2:duration=first[aout]"
        cmd += ["-filter_complex", graph, "-map", "[aout]"]
    else:
        cmd += ["-map", "1:a:0"]
        if chain:
            cmd += ["-af", chain]

    cmd += [
        "-c:v", "copy",
        "-c:a", AUDIO_CODEC,
        "-b:a", AUDIO_BITRATE,
        "-shortest",
        "-movflags", "+faststart",
        str(output_path),
    ]
    return cmd


def resolve_output_path(video_path: str, options: MergeOptions) -> Path:
    if options.output_path:
        return Path(options.output_path)
    video = Path(video_path)
    output_dir = Path(options.output_dir) if options.output_dir else video.parent
    filename = options.filename or f"{video.stem}_merged.mp4"
    return output_dir / filename


class MediaMerger:
    """Thin async wrapper around the ffmpeg / ffprobe binaries"""

    def __init__(self, ffmpeg: str = "ffmpeg", ffprobe: str = "ffprobe"):
        self.ffmpeg = ffmpeg
        self.ffprobe = ffprobe

    async def is_available(self) -> bool:
        """Probe ffmpeg with a version query"""
        try:
            process = await asyncio.create_subprocess_exec(
                self.ffmpeg, "-version",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            await process.communicate()
        except OSError:
            return False
        return process.returncode == 0

    async def merge(
        self,
        video_path: str,
        audio_path: str,
        options: Optional[MergeOptions] = None,
    ) -> MergeResult:
        """Merge ``audio_path`` into ``video_path``.

        Raises:
            MissingInputError: an input file does not exist
            ToolUnavailableError: ffmpeg could not be started
            MergeFailedError: ffmpeg failed or left an empty output
        """
        options = options or MergeOptions()

        if not Path(video_path).is_file():
            raise MissingInputError(video_path, "video")
        if not Path(audio_path).is_file():
            raise MissingInputError(audio_path, "audio")

        output_path = resolve_output_path(video_path, options)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        video_duration, audio_duration = await asyncio.gather(
            get_media_duration(video_path, self.ffprobe),
            get_media_duration(audio_path, self.ffprobe),
        )
        if audio_duration is None:
            logger.warning("Narration duration unknown, fades skipped", extra={"audio_path": str(audio_path)})

        filters = build_audio_filters(
            audio_duration,
            volume=options.volume,
            normalize=options.normalize,
            fade_in=options.fade_in,
            fade_out=options.fade_out,
        )
        cmd = build_merge_command(
            video_path,
            audio_path,
            str(output_path),
            filters,
            keep_original_audio=options.keep_original_audio,
            overwrite=options.overwrite,
            ffmpeg=self.ffmpeg,
        )

        with LogTimer(logger, f"merge {Path(video_path).name} + {Path(audio_path).name}"):
            try:
                process = await asyncio.create_subprocess_exec(
                    *cmd,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as exc:
                raise ToolUnavailableError(self.ffmpeg, str(exc)) from exc

            _, stderr = await process.communicate()

            if process.returncode != 0:
                tail = stderr.decode(errors="replace")[-STDERR_TAIL_CHARS:]
                raise MergeFailedError(
                    f"ffmpeg exited with code {process.returncode}: {tail}",
                    returncode=process.returncode,
                    stderr_tail=tail,
                )

            if not output_path.exists() or output_path.stat().st_size == 0:
                raise MergeFailedError(
                    f"ffmpeg reported success but the output is empty: {output_path}",
                    returncode=process.returncode,
                )

        metadata = {
            "videoDuration": video_duration,
            "audioDuration": audio_duration,
            "fileSizeMB": file_size_mb(output_path),
            "videoSource": str(video_path),
            "audioSource": str(audio_path),
            "fadeIn": options.fade_in,
            "fadeOut": options.fade_out,
            "keepOriginalAudio": options.keep_original_audio,
        }
        logger.info("Merged narration into video", extra={"output_path": str(output_path), **metadata})
        return MergeResult(output_path=str(output_path), metadata=metadata)

    async def verify_audio_stream(self, path: str) -> AudioStreamCheck:
        """Report whether ``path`` carries at least one audio stream.

        Raises:
            AudioVerificationError: the file is missing or could not be probed
        """
        if not Path(path).is_file():
            raise AudioVerificationError(f"File not found: {path}")
        streams = await probe_audio_streams(path, self.ffprobe)
        return AudioStreamCheck(has_audio=bool(streams), streams=streams)
