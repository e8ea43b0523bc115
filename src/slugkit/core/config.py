"""Configuration schema and loading for slug generation."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from slugkit.core.errors import ConfigurationError
from slugkit.core.slug import DEFAULT_SEPARATOR, DEFAULT_SLUGGER

# Called as resolver(record, slug, separator).
UniqueResolver = Callable[..., str]

DEFAULT_REPLACEMENTS: dict[str, str] = {
    "#": "hash",
    "?": "question",
    "+": "and",
    "&": "and",
}

_SLUG_ALPHABET = re.compile(r"[a-z0-9]")


def _as_pairs(value: Any) -> Any:
    if isinstance(value, Mapping):
        return tuple(value.items())
    return value


class SlugConfig(BaseModel):
    """Immutable slug behavior configuration.

    Attributes:
        field: Name of the field holding the slug.
        source_fields: Ordered fields joined to build the slug text.
        separator: String placed between words and before numeric suffixes.
        replacements: Ordered literal substitutions applied before normalizing.
        max_length: Maximum slug length. If None, the storage column length
            is used when the repository reports one.
        slugger: Registered normalizer name ("ascii" or "unidecode" built in).
        unique: Uniqueness strategy:
            - "disabled": never check storage.
            - "default": append "<separator><n>" until storage reports no match.
            - "custom": delegate to ``resolver(record, slug, separator)``.
        resolver: Custom resolver, required when ``unique == "custom"``.
        scope: Extra equality conditions narrowing the uniqueness check.
        primary_key: Identity field excluded from the check for saved records.
        max_attempts: Suffixes to try before giving up. None means no limit.
    """

    model_config = ConfigDict(frozen=True)

    field: str = "slug"
    source_fields: tuple[str, ...] = Field(default=("title",), min_length=1)
    separator: str = DEFAULT_SEPARATOR
    replacements: tuple[tuple[str, str], ...] = Field(
        default_factory=lambda: tuple(DEFAULT_REPLACEMENTS.items())
    )
    max_length: int | None = Field(default=None, ge=1)
    slugger: str = DEFAULT_SLUGGER
    unique: Literal["disabled", "default", "custom"] = "default"
    resolver: UniqueResolver | None = None
    scope: tuple[tuple[str, Any], ...] = ()
    primary_key: str = "id"
    max_attempts: int | None = Field(default=None, ge=1)

    @field_validator("source_fields", mode="before")
    @classmethod
    def coerce_source_fields(cls, v: Any) -> Any:
        if isinstance(v, str):
            return (v,)
        return v

    @field_validator("replacements", "scope", mode="before")
    @classmethod
    def coerce_mapping(cls, v: Any) -> Any:
        return _as_pairs(v)

    @field_validator("field", "primary_key")
    @classmethod
    def validate_field_name(cls, v: str) -> str:
        if not v or not v.strip():
            msg = "Field names cannot be empty"
            raise ValueError(msg)
        return v

    @field_validator("source_fields")
    @classmethod
    def validate_source_fields(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        for name in v:
            if not name or not name.strip():
                msg = "Source field names cannot be empty"
                raise ValueError(msg)
        return v

    @field_validator("separator")
    @classmethod
    def validate_separator(cls, v: str) -> str:
        if not v:
            msg = "Separator cannot be empty"
            raise ValueError(msg)
        if _SLUG_ALPHABET.search(v):
            msg = "Separator cannot contain lowercase letters or digits"
            raise ValueError(msg)
        return v

    @field_validator("replacements")
    @classmethod
    def validate_replacements(cls, v: tuple[tuple[str, str], ...]) -> tuple[tuple[str, str], ...]:
        for key, _ in v:
            if not key:
                msg = "Replacement keys cannot be empty"
                raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def validate_consistency(self) -> SlugConfig:
        if self.field in self.source_fields:
            msg = f"Slug field '{self.field}' cannot also be a source field"
            raise ValueError(msg)
        if self.field in self.scope_conditions:
            msg = f"Scope conditions must not reference the slug field '{self.field}'"
            raise ValueError(msg)
        if self.unique == "custom" and self.resolver is None:
            msg = "unique='custom' requires a resolver"
            raise ValueError(msg)
        if self.unique != "custom" and self.resolver is not None:
            msg = f"A resolver is only used with unique='custom', got unique='{self.unique}'"
            raise ValueError(msg)
        return self

    @property
    def replacement_map(self) -> dict[str, str]:
        return dict(self.replacements)

    @property
    def scope_conditions(self) -> dict[str, Any]:
        return dict(self.scope)

    def with_overrides(self, **changes: Any) -> SlugConfig:
        """Return a new validated config with ``changes`` applied."""
        data = self.model_dump()
        data.update(changes)
        return SlugConfig.model_validate(data)


def load_config(path: str | Path) -> SlugConfig:
    """Load and validate slug configuration from a YAML file.

    Args:
        path: Path to YAML configuration file.

    Returns:
        Validated SlugConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ConfigurationError: If the file is not a YAML mapping.
        pydantic.ValidationError: If config values are invalid.
    """
    config_path = Path(path)
    if not config_path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    try:
        with config_path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Expected a mapping at the top of {config_path}",
            "Write options as 'key: value' pairs (e.g. 'separator: \"_\"').",
        )
    return SlugConfig.model_validate(data)
