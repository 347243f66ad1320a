"""Robust wrapper for the Google Generative AI (Gemini) API.

Provides a ``GeminiClient`` that:

* Reads ``GEMINI_API_KEY`` from environment (via ``python-dotenv``).
* Implements exponential-backoff retries for rate-limit / transient errors.
* Returns plain generated text with surrounding markdown fences removed.
* Wraps all errors in a single ``GeminiError`` exception.

Usage::

    from cypher_converter.infrastructure.ai.gemini_client import GeminiClient

    client = GeminiClient()          # reads .env automatically
    text = client.generate_text(
        "Convert the following content from json to yaml ...",
        temperature=0.1,
    )
"""

from __future__ import annotations

import logging
import os
import random
import time

from dotenv import load_dotenv
from google import genai

from cypher_converter.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Custom exception
# ---------------------------------------------------------------------------


class GeminiError(Exception):
    """Raised when a Gemini API call fails after all retries."""


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_DEFAULT_MODEL = "gemini-2.5-flash"
_MAX_RETRIES = 3
_INITIAL_DELAY_S = 1.0
_MAX_DELAY_S = 30.0
_BACKOFF_BASE = 2.0
_JITTER_FACTOR = 0.5


def strip_code_fences(text: str) -> str:
    """Remove a markdown code fence wrapping the whole reply, if any."""
    text = text.strip()
    if text.startswith("```") and text.endswith("```") and "\n" in text:
        text = text.split("\n", 1)[1][:-3]
    return text.strip()


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class GeminiClient:
    """Thread-safe, retry-aware wrapper around the Google Gen AI SDK.

    Parameters
    ----------
    api_key:
        Explicit API key.  Falls back to ``GEMINI_API_KEY`` env var.
    model:
        Model identifier.  ``GEMINI_MODEL`` env var wins over it,
        then ``gemini-2.5-flash``.
    max_retries:
        Maximum attempts for transient errors.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        max_retries: int = _MAX_RETRIES,
    ) -> None:
        load_dotenv()

        self._api_key = api_key or os.environ.get("GEMINI_API_KEY", "")
        if not self._api_key:
            raise ConfigurationError(
                "GEMINI_API_KEY not found. Set it in your environment or "
                "in a .env file. Get a key at https://aistudio.google.com/apikey"
            )

        self._model = os.environ.get("GEMINI_MODEL") or model or _DEFAULT_MODEL
        self._max_retries = max_retries
        self._client = genai.Client(api_key=self._api_key)

        logger.info("GeminiClient initialized with model=%s", self._model)

    # -- Public API ----------------------------------------------------------

    def generate_text(self, prompt: str, *, temperature: float = 0.1) -> str:
        """Send *prompt* to Gemini and return the generated text.

        Raises
        ------
        GeminiError
            If all retries are exhausted, the error is not retryable, or
            the model returned no text.
        """
        return self._call_with_retry(prompt, temperature)

    @property
    def model_name(self) -> str:
        """Return the configured model identifier."""
        return self._model

    # -- Internal retry logic ------------------------------------------------

    def _call_with_retry(self, prompt: str, temperature: float) -> str:
        """Execute the API call with exponential backoff."""
        last_error: Exception | None = None
        delay = _INITIAL_DELAY_S

        for attempt in range(1, self._max_retries + 1):
            try:
                return self._make_request(prompt, temperature)
            except GeminiError:
                raise
            except Exception as exc:
                last_error = exc

                if not self._is_retryable(exc):
                    logger.error(
                        "Non-retryable Gemini error (attempt %d/%d): %s",
                        attempt,
                        self._max_retries,
                        exc,
                    )
                    raise GeminiError(f"Gemini API error (non-retryable): {exc}") from exc

                if attempt < self._max_retries:
                    jitter = random.uniform(0, delay * _JITTER_FACTOR)
                    sleep_time = min(delay + jitter, _MAX_DELAY_S)
                    logger.warning(
                        "Retryable Gemini error (attempt %d/%d), retrying in %.1fs: %s",
                        attempt,
                        self._max_retries,
                        sleep_time,
                        exc,
                    )
                    time.sleep(sleep_time)
                    delay *= _BACKOFF_BASE

        raise GeminiError(
            f"Gemini API failed after {self._max_retries} retries: {last_error}"
        ) from last_error

    def _make_request(self, prompt: str, temperature: float) -> str:
        """Execute a single API request."""
        response = self._client.models.generate_content(
            model=self._model,
            contents=prompt,
            config={"temperature": temperature},
        )

        raw_text = strip_code_fences(response.text or "")
        if not raw_text:
            raise GeminiError("Gemini returned empty response")
        return raw_text

    @staticmethod
    def _is_retryable(exc: Exception) -> bool:
        """Check whether an exception warrants a retry."""
        exc_str = str(exc).lower()
        # Rate limit or transient server errors
        if "429" in exc_str or "rate limit" in exc_str:
            return True
        if "500" in exc_str or "503" in exc_str:
            return True
        if "resource exhausted" in exc_str:
            return True
        if "service unavailable" in exc_str:
            return True
        return False
