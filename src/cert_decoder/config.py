"""
Decoder settings, read from CERT_DECODER_* variables or a .env file and
validated by pydantic when constructed.

The decoding core never reads settings itself; the CLI and the HTTP app
pass the relevant values (strict tag checking, report layout) down.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Repository root, independent of the working directory.
_ENV_FILE = Path(__file__).parent.parent.parent / ".env"


class DecoderSettings(BaseSettings):
    """
    Root settings for the decoder's command-line and HTTP surfaces.

    Environment variables win over .env entries, which win over defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="CERT_DECODER_",
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    strict_tags: bool = Field(
        default=False,
        description="Verify every grammatically-required DER tag instead of trusting position",
    )
    log_level: str = Field(default="INFO")
    extension_value_limit: int = Field(
        default=200,
        ge=1,
        description="Extension hex values longer than this are truncated in reports",
    )
    extension_value_preview: int = Field(
        default=100,
        ge=1,
        description="Characters of a truncated extension value kept in reports",
    )
    signature_line_width: int = Field(default=60, ge=8, description="Signature hex line width in reports")

    @model_validator(mode="after")
    def check_preview_fits(self) -> DecoderSettings:
        """Reject a preview that would not actually shorten the value."""
        if self.extension_value_preview >= self.extension_value_limit:
            raise ValueError(
                "extension_value_preview must be smaller than extension_value_limit "
                f"({self.extension_value_preview} >= {self.extension_value_limit})"
            )
        return self
