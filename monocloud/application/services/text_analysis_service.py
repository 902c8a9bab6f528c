"""AI text analysis of modules and repositories, cached for 12 hours."""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from monocloud.application.dtos.analysis import TextAnalysisResult
from monocloud.application.interfaces.services import ITextGenerator
from monocloud.domain.exceptions import ValidationException
from monocloud.infrastructure.cache.cache_protocol import CacheProtocol
from monocloud.infrastructure.cache.keys import analysis_key, repo_description_key
from monocloud.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _normalize_package_json(package_json: str | dict[str, Any] | None) -> str:
    """Return package_json as JSON text; invalid or missing input becomes "{}"."""
    if isinstance(package_json, dict):
        return json.dumps(package_json)
    if isinstance(package_json, str):
        try:
            json.loads(package_json)
            return package_json
        except ValueError:
            logger.warning("Invalid package.json provided; analysing without it")
    return "{}"


def _is_text(value: Any) -> bool:
    return isinstance(value, str)


class TextAnalysisService:
    """Module and repository descriptions from a text generator, cached by request."""

    def __init__(
        self,
        generator: ITextGenerator,
        cache: CacheProtocol | None = None,
        cache_ttl: int = 60 * 60 * 12,
    ) -> None:
        self.generator = generator
        self.cache = cache
        self.cache_ttl = cache_ttl

    async def analyze_module(
        self,
        module_name: str,
        package_json: str | dict[str, Any] | None = None,
        dependencies: Sequence[str] = (),
    ) -> TextAnalysisResult:
        """Explain what module_name does. Key covers the name and first dependencies."""
        if not module_name or not module_name.strip():
            raise ValidationException("Module name is required", field="module_name")
        deps = list(dependencies)
        manifest = _normalize_package_json(package_json)

        async def generate() -> str:
            return await self.generator.describe_module(module_name, manifest, deps)

        return await self._cached(analysis_key(module_name, deps), generate)

    async def describe_repository(
        self,
        repo_name: str,
        stats: dict[str, object] | None = None,
    ) -> TextAnalysisResult:
        """Overview of a repository from its graph statistics (node/edge counts, module names)."""
        if not repo_name or not repo_name.strip():
            raise ValidationException("Repository name is required", field="repo_name")

        async def generate() -> str:
            return await self.generator.describe_repository(repo_name, stats or {})

        return await self._cached(repo_description_key(repo_name), generate)

    async def _cached(self, key: str, generate: Callable[[], Awaitable[str]]) -> TextAnalysisResult:
        """Serve a cached string for key, otherwise generate and store one.

        A cached value that is not a string is treated as a miss and overwritten.
        """
        if self.cache is None:
            return TextAnalysisResult(text=await generate(), from_cache=False)
        text, from_cache = await self.cache.get_or_set(
            key, generate, ttl_seconds=self.cache_ttl, validate=_is_text
        )
        return TextAnalysisResult(text=text, from_cache=from_cache)
