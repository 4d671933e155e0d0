# publicview/service/config.py

"""Application configuration using Pydantic Settings.

Manages environment variables, defaults, and validation rules.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from publicview.core.definitions import WireFormat


class Settings(BaseSettings):
    """Global application settings.

    Loads values from environment variables (prefix 'PUBLICVIEW_') or .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="PUBLICVIEW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Encoding defaults
    default_format: str = Field(
        default=WireFormat.JSON, description="Wire format used when none is requested."
    )

    pretty_print: bool = Field(
        default=False, description="Indent encoded output by default."
    )

    emit_null_for_empty: bool = Field(
        default=False,
        description="Encode empty JSON results as null instead of {}.",
    )

    xml_root_tag: Optional[str] = Field(
        default=None,
        description="Root element for top-level XML sequences and mappings.",
    )

    # Redaction
    policy_file: Optional[Path] = Field(
        default=None,
        description="YAML file listing extra hidden fields per type.",
    )

    @field_validator("default_format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Ensure the default format is supported."""
        v = v.strip().lower()
        if v not in WireFormat.ALL:
            raise ValueError(f"default_format must be one of {list(WireFormat.ALL)}")
        return v

    @field_validator("xml_root_tag")
    @classmethod
    def validate_root_tag(cls, v: Optional[str]) -> Optional[str]:
        """Treat a blank root tag as unset."""
        if v is not None and not v.strip():
            return None
        return v


# Singleton settings instance
settings = Settings()
