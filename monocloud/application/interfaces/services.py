"""Interfaces (ports) for the expensive calls the cache protects.

Implementations live outside this package (GitHub manifest fetching,
OpenAI text generation and speech synthesis); services depend only on
these protocols.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from monocloud.application.dtos.analysis import SynthesizedSpeech
    from monocloud.application.dtos.graph import DependencyGraph


class IDependencyGraphBuilder(Protocol):
    """Fetches a repository's manifests and builds its dependency graph."""

    async def build(self, repo_url: str) -> DependencyGraph:
        """Return the dependency graph for repo_url."""


class ITextGenerator(Protocol):
    """Generates short natural-language analyses."""

    async def describe_module(
        self,
        module_name: str,
        package_json: str,
        dependencies: Sequence[str],
    ) -> str:
        """Explain what a module does from its manifest and dependencies."""

    async def describe_repository(self, repo_name: str, stats: dict[str, object]) -> str:
        """Describe a whole repository from graph statistics."""


class ISpeechSynthesizer(Protocol):
    """Turns text into audio."""

    async def synthesize(self, text: str, voice: str, instructions: str) -> SynthesizedSpeech:
        """Return base64 audio for text."""
