"""Application interfaces (ports) for external collaborators."""

from monocloud.application.interfaces.services import (
    IDependencyGraphBuilder,
    ISpeechSynthesizer,
    ITextGenerator,
)

__all__ = ["IDependencyGraphBuilder", "ISpeechSynthesizer", "ITextGenerator"]
