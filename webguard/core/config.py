"""Centralized configuration management with environment-aware defaults.

This module implements the configuration system using Pydantic Settings,
providing type-safe configuration with validation and environment variable
support, plus the immutable header configuration consumed by the security
headers middleware.

Features:
- **Type safety**: All configuration values are validated and typed
- **Environment variables**: Supports .env files and environment overrides
- **Nested configuration**: Uses __ delimiter for complex config structures
- **Immutability**: HeaderConfig is frozen once constructed
- **Caching**: Configuration is cached for performance

Configuration sources (in order of precedence):
1. Environment variables
2. .env file in project root
3. Default values in model definitions
"""

import os
from collections.abc import Mapping
from functools import lru_cache
from types import MappingProxyType
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from webguard.core.constants import (
    DEFAULT_HSTS_MAX_AGE,
    DEFAULT_X_CONTENT_TYPE_OPTIONS,
    DEFAULT_X_FRAME_OPTIONS,
)


def _freeze_directives(
    directives: Mapping[str, tuple[str, ...]],
) -> Mapping[str, tuple[str, ...]]:
    return MappingProxyType(dict(directives))


# Read-only CSP directives: directive name -> ordered source tokens
FrozenDirectives = Annotated[
    Mapping[str, tuple[str, ...]], AfterValidator(_freeze_directives)
]


class HeaderConfig(BaseModel):
    """Security header directives applied to every response.

    An empty string (or an empty mapping for the CSP fields) omits the
    corresponding header entirely. The CSP mappings are read-only views and
    their source lists are tuples, so a constructed config cannot change.
    """

    model_config = ConfigDict(frozen=True, validate_default=True)

    x_frame_options: str = Field(
        default="",
        description="DENY, SAMEORIGIN or 'ALLOW-FROM <uri>'",
        examples=["DENY", "SAMEORIGIN", "ALLOW-FROM https://example.com"],
    )
    content_security_policy: FrozenDirectives = Field(
        default_factory=dict,
        description="CSP directive name to its ordered source tokens",
    )
    content_security_policy_report_only: FrozenDirectives = Field(
        default_factory=dict,
        description="Like content_security_policy, but only reports violations",
    )
    strict_transport_security: str = Field(
        default="",
        description="HSTS directive, only sent for hosts under the root domain",
        examples=["max-age=2592000"],
    )
    x_content_type_options: str = Field(
        default="",
        description="Disables Content-Type sniffing in browsers",
        examples=["nosniff"],
    )


DEFAULT_HEADER_CONFIG = HeaderConfig(
    x_frame_options=DEFAULT_X_FRAME_OPTIONS,
    strict_transport_security=f"max-age={DEFAULT_HSTS_MAX_AGE}",
    x_content_type_options=DEFAULT_X_CONTENT_TYPE_OPTIONS,
)


class SecurityConfig(BaseModel):
    """Security header settings loaded from the environment."""

    root_domain: str = Field(
        default="",
        description="Hosts ending with this domain receive the HSTS header",
    )
    x_frame_options: str = Field(default=DEFAULT_X_FRAME_OPTIONS)
    content_security_policy: dict[str, list[str]] = Field(default_factory=dict)
    content_security_policy_report_only: dict[str, list[str]] = Field(
        default_factory=dict
    )
    strict_transport_security: str = Field(default=f"max-age={DEFAULT_HSTS_MAX_AGE}")
    x_content_type_options: str = Field(default=DEFAULT_X_CONTENT_TYPE_OPTIONS)

    def to_header_config(self) -> HeaderConfig:
        """Build the immutable header configuration from these settings."""
        return HeaderConfig(
            x_frame_options=self.x_frame_options,
            content_security_policy=self.content_security_policy,
            content_security_policy_report_only=self.content_security_policy_report_only,
            strict_transport_security=self.strict_transport_security,
            x_content_type_options=self.x_content_type_options,
        )


class LogConfig(BaseModel):
    """Simplified logging configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_formatter_type: Literal["console", "json"] | None = Field(
        default=None,
        description="Log output formatter. Auto-detected if not specified.",
    )
    sensitive_fields: list[str] = Field(
        default_factory=lambda: [
            "password",
            "token",
            "secret",
            "api_key",
            "authorization",
        ],
        description="Field names to redact",
    )


class ObservabilityConfig(BaseModel):
    """Cloud-agnostic observability configuration."""

    enable_tracing: bool = Field(
        default=False,
        description="Enable OpenTelemetry tracing",
    )
    exporter_type: Literal["console", "otlp", "none"] = Field(
        default="console",
        description="Trace exporter type. Defaults to console for development.",
    )
    exporter_endpoint: str | None = Field(
        default=None,
        description="OTLP exporter endpoint",
    )
    trace_sample_rate: float = Field(
        default=1.0,
        ge=0.0,
        le=1.0,
        description="Trace sampling rate (0.0 to 1.0)",
    )

    @field_validator("exporter_endpoint", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: str | None) -> str | None:
        """Convert empty strings to None for nullable fields."""
        if v == "":
            return None
        return v


class Settings(BaseSettings):
    """Main settings class for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        env_nested_delimiter="__",
    )

    # Application settings
    app_name: str = Field(default="webguard", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Environment the application is running in",
    )
    debug: bool = Field(default=True, description="Debug mode flag")

    # API settings
    api_host: str = Field(default="127.0.0.1", description="API host")
    api_port: int = Field(default=8000, description="API port")

    # Logging configuration
    log_config: LogConfig = Field(
        default_factory=LogConfig, description="Logging configuration"
    )

    # Security headers configuration
    security_config: SecurityConfig = Field(
        default_factory=SecurityConfig, description="Security headers configuration"
    )

    # Observability configuration
    observability_config: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig, description="Observability configuration"
    )

    @property
    def dev_mode(self) -> bool:
        """Whether fault details may be shown to clients."""
        return self.debug and self.environment == "development"

    def model_post_init(self, __context: object) -> None:
        """Post initialization to set environment-based defaults."""
        super().model_post_init(__context)

        if self.log_config.log_formatter_type is None:
            self.log_config.log_formatter_type = self._detect_formatter()

    def _detect_formatter(self) -> Literal["console", "json"]:
        """Auto-detect log formatter based on environment."""
        # Cloud Run and AWS ingest structured logs
        if os.getenv("K_SERVICE") or os.getenv("AWS_EXECUTION_ENV"):
            return "json"

        if self.environment == "development":
            return "console"
        return "json"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
