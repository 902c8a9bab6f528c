"""Application DTOs (cache payloads and service results)."""

from monocloud.application.dtos.analysis import (
    SpeechResult,
    SynthesizedSpeech,
    TextAnalysisResult,
)
from monocloud.application.dtos.graph import (
    DependencyGraph,
    GraphEdge,
    GraphNode,
    RepositoryAnalysisResult,
)

__all__ = [
    "DependencyGraph",
    "GraphEdge",
    "GraphNode",
    "RepositoryAnalysisResult",
    "SpeechResult",
    "SynthesizedSpeech",
    "TextAnalysisResult",
]
