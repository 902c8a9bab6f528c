"""Application services: the cache clients (repository graphs, text analysis, speech)."""

from monocloud.application.services.repository_analysis_service import RepositoryAnalysisService
from monocloud.application.services.speech_synthesis_service import SpeechSynthesisService
from monocloud.application.services.text_analysis_service import TextAnalysisService

__all__ = [
    "RepositoryAnalysisService",
    "SpeechSynthesisService",
    "TextAnalysisService",
]
