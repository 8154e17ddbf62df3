"""Pydantic configuration models with validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]
CacheBackend = Literal["memory", "diskcache"]

HOST_NAMES: tuple[str, ...] = ("streamp2p", "seekstreaming", "upnshare", "rpmshare")


def _normalize_path(value: Any) -> Path:
    """
    Normalize a path-like value without causing filesystem side-effects.

    This function MUST NOT create directories or files.
    """
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


class ApiEndpointConfig(BaseModel):
    """One hosting API endpoint (primary or fallback) and its credential."""

    endpoint: str = Field(description="Paginated video listing URL.")
    api_key: str = Field(default="", description="API token sent with every call.")
    header_name: str = Field(
        default="api-token",
        description="Header carrying the API token.",
    )

    @property
    def headers(self) -> dict[str, str]:
        if not self.api_key:
            return {}
        return {self.header_name: self.api_key}


class HostConfig(BaseModel):
    """Static per-host configuration (read-only at runtime)."""

    enabled: bool = Field(default=True)
    primary: ApiEndpointConfig
    fallback: ApiEndpointConfig
    embed_base: str = Field(
        description="Player URL prefix; the video id is appended.",
    )
    download_base: str = Field(
        description="Download URL prefix; '{id}&dl=1' is appended.",
    )

    @property
    def has_credentials(self) -> bool:
        return bool(self.primary.api_key)


class HostingConfig(BaseModel):
    """Video hosting providers, timeouts and index refresh policy."""

    hosts: dict[str, HostConfig] = Field(default_factory=dict)

    primary_timeout_seconds: float = Field(
        default=3.0,
        description="Per-request timeout against a primary endpoint.",
    )
    fallback_timeout_seconds: float = Field(
        default=2.0,
        description="Per-request timeout against a fallback endpoint (fail fast).",
    )
    page_timeout_seconds: float = Field(
        default=8.0,
        description="Per-page timeout used while building the index.",
    )
    resolve_deadline_seconds: float = Field(
        default=25.0,
        description="Upper bound for one on-demand resolution across all hosts.",
    )
    refresh_interval_seconds: int = Field(
        default=3600,
        description="Seconds between scheduled index rebuilds.",
    )
    build_on_startup: bool = Field(
        default=True,
        description="Kick off an index build in the background at startup.",
    )
    prefer_index: bool = Field(
        default=False,
        description="Answer fetch requests from the index when it has a hit.",
    )
    max_concurrent_requests: int = Field(
        default=16,
        description="Hosting API requests in flight at once (also the HTTP pool size).",
    )

    @field_validator(
        "primary_timeout_seconds",
        "fallback_timeout_seconds",
        "page_timeout_seconds",
        "resolve_deadline_seconds",
    )
    @classmethod
    def _validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be > 0")
        return v

    @field_validator("refresh_interval_seconds")
    @classmethod
    def _validate_interval(cls, v: int) -> int:
        if v < 60:
            raise ValueError("refresh_interval_seconds must be >= 60")
        return v

    @field_validator("max_concurrent_requests")
    @classmethod
    def _validate_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_concurrent_requests must be >= 1")
        return v

    def enabled_hosts(self) -> dict[str, HostConfig]:
        return {name: cfg for name, cfg in self.hosts.items() if cfg.enabled}


class CacheConfig(BaseModel):
    """Result cache configuration."""

    backend: CacheBackend = Field(
        default="memory",
        description="Cache backend: 'memory' (process-local) or 'diskcache'.",
    )
    directory: Path = Field(
        default=Path("./.cache/skyflix"),
        validation_alias=AliasChoices("directory", "dir"),
        description="Diskcache SQLite directory (only when backend=diskcache).",
    )
    ttl_seconds: int = Field(
        default=3600,
        description="Default TTL for cache entries (seconds).",
    )
    video_result_ttl_seconds: int = Field(
        default=600,
        description="TTL for successful on-demand video aggregates (seconds).",
    )
    max_entries: int = Field(
        default=10_000,
        description="Upper bound on entries held by the memory backend.",
    )

    @field_validator("directory", mode="before")
    @classmethod
    def _validate_dir(cls, v: Any) -> Path:
        return _normalize_path(v)

    @field_validator("ttl_seconds", "video_result_ttl_seconds")
    @classmethod
    def _validate_ttl(cls, v: int) -> int:
        if v < 0:
            raise ValueError("cache TTLs must be >= 0")
        return v

    @field_validator("max_entries")
    @classmethod
    def _validate_max_entries(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_entries must be >= 1")
        return v


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/logging/cache/cors/hosting).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="skyflix", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP client (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Default HTTP timeout in seconds for outgoing calls.",
    )
    http_user_agent: str = Field(
        default="Skyflix/0.1.0",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # CORS (YAML section: cors.origins)
    cors_origins: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices(
            "cors_origins",
            AliasPath("cors", "origins"),
        ),
        description="Origins allowed to call the API from a browser.",
    )

    cache: CacheConfig = Field(default_factory=CacheConfig)
    hosting: HostingConfig = Field(default_factory=HostingConfig)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    load.py creates EnvOverrides() to read SKYFLIX_* variables, converts the
    set values to a dict, merges it over YAML/defaults, then validates AppConfig.

    Supported env var examples:
    - SKYFLIX_LOG_LEVEL
    - SKYFLIX_CACHE_BACKEND
    - SKYFLIX_REFRESH_INTERVAL_SECONDS
    - SKYFLIX_STREAMP2P_PRIMARY_KEY / SKYFLIX_STREAMP2P_FALLBACK_ENDPOINT
    """

    model_config = SettingsConfigDict(
        env_prefix="SKYFLIX_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    cache_backend: Optional[CacheBackend] = None
    cache_dir: Optional[Path] = None
    cache_ttl_seconds: Optional[int] = None

    refresh_interval_seconds: Optional[int] = None
    build_on_startup: Optional[bool] = None
    prefer_index: Optional[bool] = None

    streamp2p_primary_key: Optional[str] = None
    streamp2p_fallback_key: Optional[str] = None
    streamp2p_primary_endpoint: Optional[str] = None
    streamp2p_fallback_endpoint: Optional[str] = None

    seekstreaming_primary_key: Optional[str] = None
    seekstreaming_fallback_key: Optional[str] = None
    seekstreaming_primary_endpoint: Optional[str] = None
    seekstreaming_fallback_endpoint: Optional[str] = None

    upnshare_primary_key: Optional[str] = None
    upnshare_fallback_key: Optional[str] = None
    upnshare_primary_endpoint: Optional[str] = None
    upnshare_fallback_endpoint: Optional[str] = None

    rpmshare_primary_key: Optional[str] = None
    rpmshare_fallback_key: Optional[str] = None
    rpmshare_primary_endpoint: Optional[str] = None
    rpmshare_fallback_endpoint: Optional[str] = None

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Any:
        if v is None:
            return None
        return _normalize_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
