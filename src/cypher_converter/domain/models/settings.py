"""Converter settings model.

Captures engine, storage and output preferences. The Gemini API key is
deliberately absent: it is read from the environment or ``.env``.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Sub-models by semantic category
# ---------------------------------------------------------------------------


class EngineSettings(BaseModel):
    """Remote text-service preferences."""

    model: str = Field(
        default="gemini-2.5-flash",
        description="Gemini model id. GEMINI_MODEL overrides it.",
    )
    conversion_temperature: float = Field(
        default=0.1,
        ge=0.0,
        le=2.0,
        description="Low temperature for precise conversions.",
    )
    detection_temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    detection_sample_chars: int = Field(
        default=500,
        ge=1,
        description="Characters of the source sent for format detection.",
    )
    max_retries: int = Field(default=3, ge=1, le=10)


class StorageSettings(BaseModel):
    """Where history and preferences are persisted."""

    data_dir: Path | None = Field(
        default=None,
        description="Override for the platform user-data directory.",
    )


class OutputSettings(BaseModel):
    """Result and encoder preferences."""

    file_prefix: str = Field(default="cypher-converted", min_length=1)
    font_size: int = Field(default=11, ge=6, le=24, description="PDF and DOCX body size.")
    sheet_title: str = Field(default="ConvertedData", min_length=1, max_length=31)
    max_workers: int = Field(default=4, ge=1, le=32)


# ---------------------------------------------------------------------------
# Root settings model
# ---------------------------------------------------------------------------


class ConverterSettings(BaseModel):
    """Root settings — persisted to ``settings.json``."""

    engine: EngineSettings = Field(default_factory=EngineSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)
