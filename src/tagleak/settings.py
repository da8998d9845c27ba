"""Configuration for leak detection."""

import re
from collections.abc import Mapping
from enum import Enum
from typing import Annotated, Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from tagleak.errors import SettingsError

SETTINGS_ROUTE = "tagleak.settings"

_SKIP_URL_SEPARATORS = re.compile(r"[,\r\n]+")


class OperationMode(str, Enum):
    """How detected leaks are reported."""

    DISABLED = "disabled"
    ERRORS = "errors"
    STRICT = "strict"


def parse_skip_urls(value: str) -> list[str]:
    """Split a comma or newline separated list of paths."""
    return [url.strip() for url in _SKIP_URL_SEPARATORS.split(value) if url.strip()]


class LeakSettings(BaseSettings):
    """Leak detection settings.

    Supports environment variable overrides with the pattern
    TAGLEAK_<FIELD> (e.g. TAGLEAK_OPERATION_MODE=strict).
    """

    operation_mode: OperationMode = Field(
        default=OperationMode.DISABLED,
        description="disabled, errors (annotate the page) or strict (fail the request)",
    )
    skip_admin: bool = Field(
        default=True,
        description="Skip admin routes and pages rendered with the admin theme",
    )
    skip_urls: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="Request paths that are never checked (exact match)",
    )
    settings_route: str = Field(
        default=SETTINGS_ROUTE,
        description="Route of the page used to change these settings; never checked",
    )

    model_config = SettingsConfigDict(
        extra="ignore",
        env_prefix="TAGLEAK_",
        frozen=True,
    )

    @field_validator("skip_urls", mode="before")
    @classmethod
    def _split_skip_urls(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_skip_urls(value)
        return value

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "LeakSettings":
        """Build settings from a host key/value store.

        Unknown keys are ignored; missing or None values fall back to the
        defaults.
        """
        known = {
            key: value
            for key, value in values.items()
            if key in cls.model_fields and value is not None
        }
        try:
            return cls(**known)
        except ValidationError as e:
            raise SettingsError(str(e)) from e

    def is_skipped_url(self, path: str) -> bool:
        return path in self.skip_urls
