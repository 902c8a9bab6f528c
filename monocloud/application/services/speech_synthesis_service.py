"""Speech synthesis for narration, cached by text, voice and instructions."""

from __future__ import annotations

from monocloud.application.dtos.analysis import SpeechResult, SynthesizedSpeech
from monocloud.application.interfaces.services import ISpeechSynthesizer
from monocloud.core.constants import SPEECH_DEFAULT_INSTRUCTIONS, SPEECH_DEFAULT_VOICE
from monocloud.domain.exceptions import ValidationException
from monocloud.infrastructure.cache.cache_protocol import CacheProtocol
from monocloud.infrastructure.cache.keys import speech_key
from monocloud.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class SpeechSynthesisService:
    """Synthesizes speech; identical requests are served from the cache (48h TTL typical)."""

    def __init__(
        self,
        synthesizer: ISpeechSynthesizer,
        cache: CacheProtocol | None = None,
        cache_ttl: int = 60 * 60 * 48,
    ) -> None:
        self.synthesizer = synthesizer
        self.cache = cache
        self.cache_ttl = cache_ttl

    async def synthesize(
        self,
        text: str,
        voice: str | None = None,
        instructions: str | None = None,
    ) -> SpeechResult:
        """Return audio for text; voice and instructions fall back to the narration defaults.

        Raises:
            ValidationException: If text is empty or whitespace.
        """
        if not text or not text.strip():
            raise ValidationException("Text cannot be empty or whitespace", field="text")
        voice = voice or SPEECH_DEFAULT_VOICE
        instructions = instructions or SPEECH_DEFAULT_INSTRUCTIONS

        key = speech_key(text, voice, instructions)
        if self.cache is not None:
            cached = await self.cache.get(key)
            if cached is not None:
                try:
                    speech = SynthesizedSpeech.from_dict(cached)
                    logger.debug("Using cached audio (voice=%s)", voice)
                    return SpeechResult(speech=speech, from_cache=True)
                except (KeyError, TypeError) as e:
                    logger.warning("Cached audio has unexpected shape (%s); resynthesizing", e)

        speech = await self.synthesizer.synthesize(text, voice, instructions)
        if self.cache is not None:
            await self.cache.set(key, speech.to_dict(), ttl_seconds=self.cache_ttl)
        return SpeechResult(speech=speech, from_cache=False)
