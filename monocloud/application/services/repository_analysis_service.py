"""Repository analysis: dependency graph per repository, cached for a day."""

from __future__ import annotations

from monocloud.application.dtos.graph import DependencyGraph, RepositoryAnalysisResult
from monocloud.application.interfaces.services import IDependencyGraphBuilder
from monocloud.domain.exceptions import ValidationException
from monocloud.infrastructure.cache.cache_protocol import CacheProtocol
from monocloud.infrastructure.cache.keys import repository_key
from monocloud.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class RepositoryAnalysisService:
    """Builds dependency graphs; uses the cache when one is provided (24h TTL typical)."""

    def __init__(
        self,
        graph_builder: IDependencyGraphBuilder,
        cache: CacheProtocol | None = None,
        cache_ttl: int = 60 * 60 * 24,
    ) -> None:
        self.graph_builder = graph_builder
        self.cache = cache
        self.cache_ttl = cache_ttl

    async def analyze(self, repo_url: str) -> RepositoryAnalysisResult:
        """Return the graph for repo_url, from cache when present."""
        try:
            key = repository_key(repo_url)
        except ValueError as e:
            raise ValidationException(str(e), field="repo_url") from e

        if self.cache is not None:
            cached = await self.cache.get(key)
            if cached is not None:
                try:
                    graph = DependencyGraph.from_dict(cached)
                    logger.debug("Using cached graph for %s", repo_url)
                    return RepositoryAnalysisResult(graph=graph, from_cache=True)
                except (KeyError, TypeError) as e:
                    logger.warning("Cached graph for %s has unexpected shape (%s); rebuilding", repo_url, e)

        graph = await self.graph_builder.build(repo_url)
        if self.cache is not None:
            await self.cache.set(key, graph.to_dict(), ttl_seconds=self.cache_ttl)
        return RepositoryAnalysisResult(graph=graph, from_cache=False)

    async def invalidate(self, repo_url: str) -> None:
        """Drop the cached graph for one repository."""
        if self.cache is not None:
            await self.cache.delete(repository_key(repo_url))
