"""
ElevenLabs text-to-speech client
"""

import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

from adreel.config import ELEVENLABS_API_BASE, ELEVENLABS_MODEL_ID, WORDS_PER_MINUTE
from adreel.core import IntegrationError, get_logger, resolve_voice_id

from .base import VoiceoverArtifact, VoiceoverSynthesizer

logger = get_logger(__name__, component="elevenlabs")

DEFAULT_VOICE_SETTINGS: Dict[str, Any] = {
    "stability": 0.5,
    "similarity_boost": 0.75,
    "style": 0.0,
    "use_speaker_boost": True,
}


def estimate_duration(text: str, words_per_minute: int = WORDS_PER_MINUTE) -> tuple[int, float]:
    """Word count and spoken duration (seconds) at a steady narration pace"""
    word_count = len(text.split())
    return word_count, round(word_count / words_per_minute * 60, 2)


class ElevenLabsVoiceover(VoiceoverSynthesizer):
    def __init__(
        self,
        base_url: Optional[str] = None,
        model_id: str = ELEVENLABS_MODEL_ID,
        voice_settings: Optional[Dict[str, Any]] = None,
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or ELEVENLABS_API_BASE).rstrip("/")
        self.model_id = model_id
        self.voice_settings = {**DEFAULT_VOICE_SETTINGS, **(voice_settings or {})}
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def list_voices(self, credential: str) -> List[Dict[str, Any]]:
        async with self._client() as client:
            response = await client.get(f"{self.base_url}/v1/voices", headers={"xi-api-key": credential})
        if not response.is_success:
            raise IntegrationError("elevenlabs", f"Listing voices failed: HTTP {response.status_code}", response.status_code)
        return response.json().get("voices", [])

    async def synthesize(
        self,
        credential: str,
        text: str,
        *,
        voice_id: Optional[str] = None,
        output_dir: str,
        filename_prefix: str = "voiceover",
    ) -> VoiceoverArtifact:
        if not text or not text.strip():
            raise ValueError("Voiceover text is empty")

        voice = resolve_voice_id(voice_id)
        word_count, estimated = estimate_duration(text)
        output_path = Path(output_dir) / f"{filename_prefix}_{int(time.time() * 1000)}.mp3"
        output_path.parent.mkdir(parents=True, exist_ok=True)

        body = {
            "text": text,
            "model_id": self.model_id,
            "voice_settings": self.voice_settings,
        }
        headers = {
            "xi-api-key": credential,
            "Content-Type": "application/json",
            "Accept": "audio/mpeg",
        }

        logger.info("Generating voiceover", extra={"voice_id": voice, "chars": len(text), "words": word_count})
        try:
            async with self._client() as client:
                async with client.stream(
                    "POST",
                    f"{self.base_url}/v1/text-to-speech/{voice}",
                    headers=headers,
                    json=body,
                ) as response:
                    if not response.is_success:
                        detail = (await response.aread()).decode(errors="replace")[:300]
                        raise IntegrationError(
                            "elevenlabs",
                            f"Text-to-speech failed: HTTP {response.status_code} {detail}".strip(),
                            response.status_code,
                        )
                    with open(output_path, "wb") as f:
                        async for chunk in response.aiter_bytes():
                            f.write(chunk)
        except httpx.HTTPError as exc:
            output_path.unlink(missing_ok=True)
            raise IntegrationError("elevenlabs", f"Text-to-speech request failed: {exc}") from exc

        logger.info("Voiceover saved", extra={"path": str(output_path), "estimated_duration": estimated})
        return VoiceoverArtifact(
            file_path=str(output_path),
            script=text,
            word_count=word_count,
            estimated_duration=estimated,
            voice_id=voice,
        )
