"""AI infrastructure — Google Gemini integration."""

from cypher_converter.infrastructure.ai.gemini_client import GeminiClient, GeminiError
from cypher_converter.infrastructure.ai.text_service import GeminiTextService

__all__ = ["GeminiClient", "GeminiError", "GeminiTextService"]
