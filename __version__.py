# ============================================================================
# VERSION - AM WEB SERVICES
# ============================================================================
"""
Version information for the AM Web Services API.

This is the single source of truth for the application version.
Updated manually for each release.
"""
# Version format: major.minor.patch.build
# Criteria for 0.2 - read endpoints and legacy control endpoints complete
__version__ = "0.2.0.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Build metadata
BUILD_DATE = "2026-10-17"

API_VERSION = "v1"
CODENAME = "AM Web Services"
