"""Layered configuration for ScamShield built on pydantic-settings.

Precedence, highest first: explicit keyword arguments, ``SCAMSHIELD_*``
environment variables (``__`` separates nested sections), ``.env`` files in the
project root, then TOML files (``SCAMSHIELD_SETTINGS_FILE``,
``config/settings.local.toml``, ``config/settings.default.toml``).
"""

from __future__ import annotations

import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

ENV_VAR_NAME = "SCAMSHIELD_ENV"
SETTINGS_FILE_ENV_VAR = "SCAMSHIELD_SETTINGS_FILE"
DEFAULT_ENV = "local"
PROJECT_ROOT = Path(__file__).resolve().parents[3]
CONFIG_DIR = PROJECT_ROOT / "config"

_SECTION_CONFIG = SettingsConfigDict(extra="ignore", populate_by_name=True)


def _aliases(section: str, name: str) -> AliasChoices:
    """Accept both ``SECTION_NAME`` and ``SECTION__NAME`` spellings."""

    return AliasChoices(f"{section}_{name}".upper(), f"{section}__{name}".upper())


def _active_env(explicit_env: str | None = None) -> str:
    return (explicit_env or os.getenv(ENV_VAR_NAME) or DEFAULT_ENV).strip()


def _dotenv_files(env: str) -> list[Path]:
    candidates = (".env", f".env.{env}", ".env.local")
    return [PROJECT_ROOT / name for name in candidates if (PROJECT_ROOT / name).exists()]


def _toml_files() -> tuple[Path, ...]:
    """Existing TOML config files, most specific first."""

    files: list[Path] = []
    override = os.getenv(SETTINGS_FILE_ENV_VAR)
    if override:
        path = Path(override).expanduser()
        files.append(path if path.is_absolute() else (PROJECT_ROOT / path).resolve())
    files.extend([CONFIG_DIR / "settings.local.toml", CONFIG_DIR / "settings.default.toml"])
    return tuple(path for path in files if path.exists())


def _merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class LayeredTomlSource(PydanticBaseSettingsSource):
    """Settings source that merges TOML files, later files losing to earlier ones."""

    def __init__(self, settings_cls: type[BaseSettings], paths: tuple[Path, ...]) -> None:
        super().__init__(settings_cls)
        self.paths = paths

    def get_field_value(self, field, field_name: str):  # pragma: no cover - unused by __call__
        value = self().get(field_name)
        return value, field_name, False

    def __call__(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for path in reversed(self.paths):
            try:
                with path.open("rb") as handle:
                    data = _merge(data, tomllib.load(handle))
            except tomllib.TOMLDecodeError as exc:
                raise ValueError(f"Invalid TOML syntax in {path}") from exc
        return data


class RuntimeSettings(BaseSettings):
    model_config = _SECTION_CONFIG

    log_level: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL", "RUNTIME__LOG_LEVEL"))


class APISettings(BaseSettings):
    """HTTP surface: service key and per-client rate limit."""

    model_config = _SECTION_CONFIG

    key: str | None = Field(default=None, validation_alias=_aliases("api", "key"))
    max_requests_per_minute: int = Field(
        default=60,
        ge=1,
        validation_alias=AliasChoices("API_RATE_LIMIT", "API__MAX_REQUESTS_PER_MINUTE"),
    )


class StorageSettings(BaseSettings):
    """Which report repository to use and where it lives."""

    model_config = _SECTION_CONFIG

    repository_backend: Literal["memory", "firestore"] = Field(
        default="memory",
        validation_alias=AliasChoices("REPOSITORY_BACKEND", "STORAGE__REPOSITORY_BACKEND"),
    )
    firestore_project: str | None = Field(default=None, validation_alias=_aliases("storage", "firestore_project"))
    firestore_collection: str = Field(default="reports", validation_alias=_aliases("storage", "firestore_collection"))
    seed_sample_reports: bool = Field(default=False, validation_alias=_aliases("storage", "seed_sample_reports"))


class AnalysisSettings(BaseSettings):
    """Lookup limits for the analysis engine and report browsing."""

    model_config = _SECTION_CONFIG

    contact_result_cap: int = Field(default=10, ge=1, validation_alias=_aliases("analysis", "contact_result_cap"))
    keyword_result_limit: int = Field(default=3, ge=1, validation_alias=_aliases("analysis", "keyword_result_limit"))
    max_keyword_lookups: int = Field(default=5, ge=0, validation_alias=_aliases("analysis", "max_keyword_lookups"))
    explore_page_size: int = Field(default=10, ge=1, validation_alias=_aliases("analysis", "explore_page_size"))
    similar_limit: int = Field(default=3, ge=0, validation_alias=_aliases("analysis", "similar_limit"))
    recent_limit: int = Field(default=5, ge=1, validation_alias=_aliases("analysis", "recent_limit"))


class ObservabilitySettings(BaseSettings):
    model_config = _SECTION_CONFIG

    structured_logging: bool = Field(default=True, validation_alias=_aliases("observability", "structured_logging"))
    statsd_host: str | None = Field(default=None, validation_alias=_aliases("observability", "statsd_host"))
    statsd_port: int = Field(default=8125, validation_alias=_aliases("observability", "statsd_port"))
    statsd_prefix: str = Field(default="scamshield", validation_alias=_aliases("observability", "statsd_prefix"))
    service_name: str = Field(default="scamshield-api", validation_alias=_aliases("observability", "service_name"))


class Settings(BaseSettings):
    """Root settings object; one nested model per subsystem."""

    env: str = Field(default_factory=_active_env, validation_alias=AliasChoices("ENV", "ENVIRONMENT"))
    project_root: Path = Field(default=PROJECT_ROOT)
    runtime: RuntimeSettings = Field(default_factory=RuntimeSettings)
    api: APISettings = Field(default_factory=APISettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)
    env_files: tuple[Path, ...] = Field(default_factory=tuple, exclude=True)
    config_files: tuple[Path, ...] = Field(default_factory=tuple, exclude=True)

    model_config = SettingsConfigDict(
        env_prefix="SCAMSHIELD_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            LayeredTomlSource(settings_cls, _toml_files()),
            file_secret_settings,
        )

    @model_validator(mode="after")
    def _default_firestore_project(self) -> "Settings":
        """Fall back to ``GOOGLE_CLOUD_PROJECT`` as set on Cloud Run and by gcloud."""

        project = os.getenv("GOOGLE_CLOUD_PROJECT")
        if project and not self.storage.firestore_project:
            object.__setattr__(self, "storage", self.storage.model_copy(update={"firestore_project": project}))
        return self

    @property
    def log_level(self) -> str:
        return self.runtime.log_level

    @property
    def repository_backend(self) -> str:
        return self.storage.repository_backend

    @property
    def is_local(self) -> bool:
        return self.env.lower() == "local"


def _load_settings(env: str | None = None) -> Settings:
    resolved_env = _active_env(env)
    env_files = _dotenv_files(resolved_env)
    return Settings(
        _env_file=[str(path) for path in env_files],
        _env_file_encoding="utf-8",
        env=resolved_env,
        env_files=tuple(env_files),
        config_files=_toml_files(),
    )


@lru_cache(maxsize=1)
def get_settings(env: str | None = None) -> Settings:
    """Return cached settings for the requested environment."""

    return _load_settings(env)


def reload_settings(env: str | None = None) -> Settings:
    """Clear the cached settings and reload from disk."""

    get_settings.cache_clear()
    return get_settings(env)


__all__ = [
    "Settings",
    "get_settings",
    "reload_settings",
    "PROJECT_ROOT",
    "ENV_VAR_NAME",
]
