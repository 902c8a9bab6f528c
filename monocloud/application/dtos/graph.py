"""DTOs for repository dependency graphs (cache payload of repository analysis)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class GraphNode:
    """A package in the repository; data carries manifest details (path, package.json)."""

    id: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class GraphEdge:
    """Directed dependency: source depends on target."""

    source: str
    target: str


@dataclass(frozen=True)
class DependencyGraph:
    """Named nodes and directed edges for one repository."""

    owner: str
    repo: str
    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[GraphEdge, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible form stored in the cache."""
        return {
            "owner": self.owner,
            "repo": self.repo,
            "graph": {
                "nodes": [{"id": n.id, "data": dict(n.data)} for n in self.nodes],
                "edges": [{"source": e.source, "target": e.target} for e in self.edges],
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DependencyGraph:
        """Rebuild from to_dict() output.

        Raises:
            KeyError, TypeError: If data does not have the cached shape.
        """
        graph = data["graph"]
        return cls(
            owner=data["owner"],
            repo=data["repo"],
            nodes=tuple(GraphNode(id=n["id"], data=n.get("data") or {}) for n in graph["nodes"]),
            edges=tuple(GraphEdge(source=e["source"], target=e["target"]) for e in graph["edges"]),
        )


@dataclass(frozen=True)
class RepositoryAnalysisResult:
    """Graph for a repository and whether it came from the cache."""

    graph: DependencyGraph
    from_cache: bool
