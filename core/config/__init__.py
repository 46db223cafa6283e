# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 08 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the web services.
"""

from core.config.defaults import (
    AccessDefaults,
    ControlDefaults,
    ServerDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "AccessDefaults",
    "ControlDefaults",
    "ServerDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
