"""Cache key builders. Single place for key format.

Keys are deterministic functions of the logical request, so identical
requests from any process land on the same key. Free-form inputs (text,
dependency lists) are hashed to keep keys short and separator-free.
The namespace prefix is not part of these keys; the persistent tier
client adds it.
"""

import hashlib
import json
from collections.abc import Sequence

from monocloud.core.constants import (
    ANALYSIS_KEY_DEPENDENCY_LIMIT,
    CACHE_KEY_SEP,
    CACHE_PREFIX_ANALYSIS,
    CACHE_PREFIX_REPO_DESCRIPTION,
    CACHE_PREFIX_REPOSITORY,
    CACHE_PREFIX_SPEECH,
    SPEECH_DEFAULT_INSTRUCTIONS,
    SPEECH_DEFAULT_VOICE,
)


def _digest(*parts: object) -> str:
    """SHA-256 of the canonical JSON encoding of parts."""
    canonical = json.dumps(list(parts), separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def normalize_repository(repo_url: str) -> str:
    """Lowercase and trim a repository URL or owner/name identifier.

    Raises:
        ValueError: If the identifier is empty after trimming.
    """
    normalized = repo_url.strip().lower().rstrip("/")
    if normalized.endswith(".git"):
        normalized = normalized[: -len(".git")]
    if not normalized:
        raise ValueError("Repository identifier must not be empty")
    return normalized


def repository_key(repo_url: str) -> str:
    """Cache key for a repository's dependency graph."""
    return f"{CACHE_PREFIX_REPOSITORY}{CACHE_KEY_SEP}{normalize_repository(repo_url)}"


def analysis_key(module_name: str, dependencies: Sequence[str] = ()) -> str:
    """Cache key for an AI module analysis.

    Only the first few dependencies take part, matching the context the
    analysis prompt is keyed on.
    """
    context = list(dependencies[:ANALYSIS_KEY_DEPENDENCY_LIMIT])
    return f"{CACHE_PREFIX_ANALYSIS}{CACHE_KEY_SEP}{_digest(module_name, context)}"


def repo_description_key(repo_name: str) -> str:
    """Cache key for an AI description of a whole repository."""
    return f"{CACHE_PREFIX_REPO_DESCRIPTION}{CACHE_KEY_SEP}{_digest(normalize_repository(repo_name))}"


def speech_key(
    text: str,
    voice: str = SPEECH_DEFAULT_VOICE,
    instructions: str = SPEECH_DEFAULT_INSTRUCTIONS,
) -> str:
    """Cache key for synthesized speech (text + voice + instructions)."""
    return f"{CACHE_PREFIX_SPEECH}{CACHE_KEY_SEP}{_digest(text, voice, instructions)}"
