"""Configuration contract for aclcore.

This module provides Pydantic-validated configuration for the permission
library: logging settings, the zone layout (home root, trash root), the
admin principals exempt from propagation and the path length limits.

Hosting services build an AclConfig once and derive an AclContext from it
for every operation. Direct os.environ/os.getenv usage is confined to
load_config_from_env().
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


DEFAULT_MAX_PATH_LENGTH = 1067
DEFAULT_MAX_DIR_LENGTH = 640


class AclConfig(BaseModel):
    """Configuration for permission propagation on one zone.

    The home root and trash root are protected base directories: upward
    permission walks never cross or modify them.
    """

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )
    service_name: Optional[str] = Field(
        default=None,
        description="Service name used for logger identification",
    )

    # Zone layout
    zone: str = Field(
        description="Zone (realm) name, e.g. 'tempZone'",
    )
    home: Optional[str] = Field(
        default=None,
        description="Home root collection. Defaults to /{zone}/home",
    )
    trash_base: Optional[str] = Field(
        default=None,
        description="Trash root collection. Defaults to /{zone}/trash/home",
    )

    # Principals exempt from propagation and pruning
    admin_users: list[str] = Field(
        default_factory=list,
        description="Admin principals whose grants are never touched by propagation",
    )

    # Path validation
    max_path_length: int = Field(
        default=DEFAULT_MAX_PATH_LENGTH,
        gt=0,
        description="Maximum length of a full path",
    )
    max_dir_length: int = Field(
        default=DEFAULT_MAX_DIR_LENGTH,
        gt=0,
        description="Maximum length of the directory part of a path",
    )

    @field_validator("zone")
    @classmethod
    def validate_zone(cls, v: str) -> str:
        """Zone must be a single non-empty path segment."""
        v = v.strip()
        if not v or "/" in v:
            raise ValueError("Zone must be a non-empty name without '/'")
        return v

    @field_validator("home", "trash_base")
    @classmethod
    def validate_base_dir(cls, v: Optional[str]) -> Optional[str]:
        """Base directories must be absolute; trailing slashes are dropped."""
        if v is None:
            return v
        if not v.startswith("/"):
            raise ValueError("Base directories must be absolute paths")
        return v.rstrip("/") or "/"

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    @model_validator(mode="after")
    def fill_base_dirs(self) -> "AclConfig":
        if self.home is None:
            self.home = f"/{self.zone}/home"
        if self.trash_base is None:
            self.trash_base = f"/{self.zone}/trash/home"
        if self.max_dir_length >= self.max_path_length:
            raise ValueError("max_dir_length must be smaller than max_path_length")
        return self

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",  # Prevent accidental extra fields
    }


def load_config_from_env() -> AclConfig:
    """Load configuration from environment variables.

    This is the ONLY place where os.getenv is allowed.

    Environment variables:
    - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LOG_JSON: Use JSON log format (true/false, default: false)
    - SERVICE_NAME: Service name for logging
    - ACL_ZONE: Zone name (required)
    - ACL_HOME: Home root (default: /{zone}/home)
    - ACL_TRASH_BASE: Trash root (default: /{zone}/trash/home)
    - ACL_ADMIN_USERS: Comma-separated admin principals
    - ACL_MAX_PATH_LENGTH: Maximum path length
    - ACL_MAX_DIR_LENGTH: Maximum directory length

    Returns:
        AclConfig instance with values from environment or defaults.

    Raises:
        ConfigurationError: If ACL_ZONE is missing or a value fails validation.
    """
    import os

    from pydantic import ValidationError

    from .exceptions import ConfigurationError

    zone = os.getenv("ACL_ZONE")
    if not zone:
        raise ConfigurationError("ACL_ZONE must be set")

    admins_raw = os.getenv("ACL_ADMIN_USERS", "")
    admin_users = [a.strip() for a in admins_raw.split(",") if a.strip()]

    try:
        return AclConfig(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_json=os.getenv("LOG_JSON", "false").lower() in ("true", "1", "yes"),
            service_name=os.getenv("SERVICE_NAME"),
            zone=zone,
            home=os.getenv("ACL_HOME"),
            trash_base=os.getenv("ACL_TRASH_BASE"),
            admin_users=admin_users,
            max_path_length=int(os.getenv("ACL_MAX_PATH_LENGTH", str(DEFAULT_MAX_PATH_LENGTH))),
            max_dir_length=int(os.getenv("ACL_MAX_DIR_LENGTH", str(DEFAULT_MAX_DIR_LENGTH))),
        )
    except (ValidationError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


__all__ = [
    "AclConfig",
    "DEFAULT_MAX_DIR_LENGTH",
    "DEFAULT_MAX_PATH_LENGTH",
    "LogLevel",
    "load_config_from_env",
]
