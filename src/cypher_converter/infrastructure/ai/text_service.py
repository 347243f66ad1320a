"""Gemini-backed text conversion and format detection.

Implements ``TextConversionPort``. Conversion failures surface as
``RemoteConversionError``; detection never raises and falls back to the
generic plain-text format.
"""

from __future__ import annotations

import logging

from cypher_converter.domain.errors import RemoteConversionError
from cypher_converter.domain.models.formats import FALLBACK_TEXT_FORMAT
from cypher_converter.domain.ports.text_service import TextConversionPort
from cypher_converter.infrastructure.ai.gemini_client import GeminiClient, GeminiError

logger = logging.getLogger(__name__)

_CONVERT_PROMPT = """Convert the following content from {source} to {target}.
Ensure the syntax is correct and maintain all logic/data.
Only return the converted content, no explanation.

Content:
{content}"""

_DETECT_PROMPT = """Identify the format of the following code/text snippet.
Return only the format name (e.g., 'json', 'python', 'markdown').
If you can't tell, return '{fallback}'.

Content:
{sample}"""


class GeminiTextService(TextConversionPort):
    """Best-effort converter over :class:`GeminiClient`."""

    def __init__(
        self,
        client: GeminiClient,
        *,
        conversion_temperature: float = 0.1,
        detection_temperature: float = 0.0,
    ) -> None:
        self._client = client
        self._conversion_temperature = conversion_temperature
        self._detection_temperature = detection_temperature

    def convert(self, content: str, source_format: str, target_format: str) -> str:
        prompt = _CONVERT_PROMPT.format(source=source_format, target=target_format, content=content)
        try:
            return self._client.generate_text(prompt, temperature=self._conversion_temperature)
        except GeminiError as exc:
            raise RemoteConversionError(str(exc)) from exc

    def detect(self, sample: str) -> str:
        prompt = _DETECT_PROMPT.format(fallback=FALLBACK_TEXT_FORMAT, sample=sample)
        try:
            reply = self._client.generate_text(prompt, temperature=self._detection_temperature)
        except GeminiError as exc:
            logger.warning("Format detection failed, assuming %s: %s", FALLBACK_TEXT_FORMAT, exc)
            return FALLBACK_TEXT_FORMAT
        return reply.strip().strip("'\"`.").lower() or FALLBACK_TEXT_FORMAT
