"""DTOs for AI text analysis and speech synthesis."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from monocloud.core.constants import SPEECH_CONTENT_TYPE


@dataclass(frozen=True)
class TextAnalysisResult:
    """Short natural-language analysis and whether it came from the cache."""

    text: str
    from_cache: bool


@dataclass(frozen=True)
class SynthesizedSpeech:
    """Base64-encoded audio as cached and returned to the player."""

    audio: str
    content_type: str = SPEECH_CONTENT_TYPE

    def to_dict(self) -> dict[str, Any]:
        return {"audio": self.audio, "contentType": self.content_type}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SynthesizedSpeech:
        """Rebuild from to_dict() output; a missing contentType means MP3.

        Raises:
            KeyError, TypeError: If data does not have the cached shape.
        """
        audio = data["audio"]
        if not isinstance(audio, str) or not audio:
            raise TypeError(f"audio must be a non-empty base64 string, got {type(audio).__name__}")
        return cls(audio=audio, content_type=data.get("contentType") or SPEECH_CONTENT_TYPE)


@dataclass(frozen=True)
class SpeechResult:
    speech: SynthesizedSpeech
    from_cache: bool
