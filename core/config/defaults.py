# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for access control, control commands, server
# CREATED: 08 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides defaults for the web services layer.
These can be overridden via environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from core.contracts import AckMode


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class AccessDefaults:
    """
    Defaults for view access control.

    Requests without a caller identity are allowed to view jobs unless
    require_authentication is set. A caller identity, when present, is
    always checked against the job's view ACL.
    """
    require_authentication: bool = False

    # Where the transport layer puts the authenticated user
    remote_user_header: str = "X-Remote-User"

    # Accept ?user.name=<user> (pseudo authentication) when no header is set
    allow_user_name_param: bool = True

    @classmethod
    def from_env(cls) -> "AccessDefaults":
        """Create from environment variables."""
        return cls(
            require_authentication=_env_bool("AM_WS_REQUIRE_AUTH", False),
            remote_user_header=os.getenv("AM_WS_REMOTE_USER_HEADER", "X-Remote-User"),
            allow_user_name_param=_env_bool("AM_WS_ALLOW_USER_NAME_PARAM", True),
        )


@dataclass(frozen=True)
class ControlDefaults:
    """
    Defaults for the control (mutation) endpoints.

    The reduce-count and map-rerun commands always dispatch events.
    The callback-port command is applied directly by default; set
    callback_port_ack to "async" to dispatch it as an event instead.
    """
    callback_port_ack: AckMode = AckMode.SYNC

    # Expose /rerunmaptask/strict, which surfaces failures instead of
    # coalescing them into a FAILED token
    strict_rerun_enabled: bool = True

    @classmethod
    def from_env(cls) -> "ControlDefaults":
        """Create from environment variables."""
        return cls(
            callback_port_ack=AckMode(os.getenv("AM_WS_CALLBACK_PORT_ACK", AckMode.SYNC.value).lower()),
            strict_rerun_enabled=_env_bool("AM_WS_STRICT_RERUN", True),
        )


@dataclass(frozen=True)
class ServerDefaults:
    """Defaults for the HTTP server."""
    api_prefix: str = "/ws/v1/mapreduce"
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> "ServerDefaults":
        """Create from environment variables."""
        return cls(
            api_prefix=os.getenv("AM_WS_API_PREFIX", "/ws/v1/mapreduce"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", 8000)),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            json_logs=os.getenv("LOG_FORMAT", "").lower() == "json",
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    access: AccessDefaults = field(default_factory=AccessDefaults)
    control: ControlDefaults = field(default_factory=ControlDefaults)
    server: ServerDefaults = field(default_factory=ServerDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            access=AccessDefaults.from_env(),
            control=ControlDefaults.from_env(),
            server=ServerDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "AccessDefaults",
    "ControlDefaults",
    "ServerDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
