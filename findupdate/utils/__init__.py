"""
Utility helpers for findupdate.

This package provides reusable utilities used across findupdate, including:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Synchronous HTTP client
- Version comparison and extraction helpers

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from findupdate.utils.logger import (
    disable_logging,
    get_logger,
    is_logging_configured,
    setup_logging,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from findupdate.utils.console import (
    get_raw_console,
    print_error,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# HTTP utilities
# ---------------------------------------------------------------------------

from findupdate.utils.http import HTTPClient

# ---------------------------------------------------------------------------
# Version utilities
# ---------------------------------------------------------------------------

from findupdate.utils.version_utils import (
    compare_versions,
    comply_with_aosc,
    extract_versions,
    max_version,
    sort_versions,
    strip_v_prefix,
    update_warnings,
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    # Console
    "print_error",
    "print_table",
    "print_success",
    "print_warning",
    "get_raw_console",
    "reconfigure_console",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "is_logging_configured",
    # HTTP
    "HTTPClient",
    # Version utilities
    "compare_versions",
    "comply_with_aosc",
    "extract_versions",
    "max_version",
    "sort_versions",
    "strip_v_prefix",
    "update_warnings",
]
