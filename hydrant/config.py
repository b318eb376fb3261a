"""
Configuration for Hydrant.
- Centralizes all environment-driven settings using pydantic-settings (Pydantic v2).
- Supports simple env overrides with safe defaults for local development.
- Exposes a singleton `settings`; components accept an explicit Settings
  instance and only fall back to the singleton when none is given.
"""
from __future__ import annotations

import json
from enum import Enum
from typing import Dict, Optional, Union

from pydantic import (
    Field,
    ValidationError,
    field_validator,
    AliasChoices,
)
from pydantic_settings import BaseSettings, SettingsConfigDict


class FieldType(str, Enum):
    string = "string"
    integer = "integer"
    float = "float"
    timestamp = "timestamp"
    boolean = "boolean"


DEFAULT_FIELD_TYPE_SUFFIXES: Dict[str, FieldType] = {
    "s": FieldType.string,
    "i": FieldType.integer,
    "f": FieldType.float,
    "d": FieldType.timestamp,
    "b": FieldType.boolean,
}


class Settings(BaseSettings):
    # ---- App ----
    LOG_LEVEL: str = "INFO"

    # ---- Field naming ----
    FIELD_TYPE_SUFFIXES: Union[Dict[str, FieldType], str] = Field(
        default_factory=lambda: dict(DEFAULT_FIELD_TYPE_SUFFIXES),
        validation_alias=AliasChoices("FIELD_TYPE_SUFFIXES", "field_type_suffixes"),
    )
    DYNAMIC_FIELD_SEPARATOR: str = Field(
        default=":",
        validation_alias=AliasChoices("DYNAMIC_FIELD_SEPARATOR", "dynamic_field_separator"),
    )
    ID_SEPARATOR: str = Field(
        default=" ",
        validation_alias=AliasChoices("ID_SEPARATOR", "id_separator"),
    )

    # ---- Pagination ----
    DEFAULT_PER_PAGE: int = Field(
        default=30,
        validation_alias=AliasChoices("DEFAULT_PER_PAGE", "default_per_page"),
    )
    PAGINATE_RESULTS: bool = Field(
        default=True,
        validation_alias=AliasChoices("PAGINATE_RESULTS", "paginate_results"),
    )

    # ---- Error policy ----
    SKIP_MALFORMED_FACET_ROWS: bool = Field(
        default=False,
        validation_alias=AliasChoices("SKIP_MALFORMED_FACET_ROWS", "skip_malformed_facet_rows"),
    )
    STRICT_HYDRATION: bool = Field(
        default=False,
        validation_alias=AliasChoices("STRICT_HYDRATION", "strict_hydration"),
    )

    # ---- Solr transport ----
    SOLR_URL: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SOLR_URL", "solr_url"),
    )
    SOLR_TIMEOUT: float = Field(
        default=10.0,
        validation_alias=AliasChoices("SOLR_TIMEOUT", "solr_timeout"),
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("FIELD_TYPE_SUFFIXES", mode="before")
    @classmethod
    def _parse_suffixes(cls, v: Union[str, Dict[str, str]]) -> Dict[str, str]:
        # Accepts JSON ({"s": "string"}) or CSV ("s=string,i=integer")
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return {k: t.value for k, t in DEFAULT_FIELD_TYPE_SUFFIXES.items()}
            if v.startswith("{"):
                return dict(json.loads(v))
            parsed: Dict[str, str] = {}
            for part in v.split(","):
                if "=" in part:
                    k, t = part.split("=", 1)
                    parsed[k.strip()] = t.strip()
            return parsed
        return v

    @field_validator("DEFAULT_PER_PAGE")
    @classmethod
    def _positive_per_page(cls, v: int) -> int:
        if v < 1:
            raise ValueError("DEFAULT_PER_PAGE must be positive")
        return v


# Singleton settings instance
try:
    settings = Settings()  # type: ignore[call-arg]
except ValidationError as ve:
    raise RuntimeError(f"Invalid configuration: {ve}") from ve
