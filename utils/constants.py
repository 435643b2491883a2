"""
Centralized constants for the peon-ping hooks system.

This module consolidates the category taxonomy, file layout, status labels
and network defaults into a single location for better maintainability
and type safety.
"""

from enum import Enum
from pathlib import Path
from typing import Dict

# Re-export HostEvent for convenience
from utils.hooks_constants import HostEvent

__all__ = [
    "Category",
    "LEGACY_CATEGORY_MAP",
    "ConfigDefaults",
    "ManifestFiles",
    "PathConstants",
    "StatusLabels",
    "NetworkConstants",
    "HTTPStatusConstants",
    "HostEvent",
    "resolve_category",
    "get_server_url",
]


class Category(Enum):
    """
    Canonical sound categories (closed set).

    Every manifest and config category key must resolve into one of these.
    """

    SESSION_START = "session.start"
    TASK_ACKNOWLEDGE = "task.acknowledge"
    TASK_COMPLETE = "task.complete"
    TASK_ERROR = "task.error"
    INPUT_REQUIRED = "input.required"
    RESOURCE_LIMIT = "resource.limit"
    USER_SPAM = "user.spam"

    def __str__(self) -> str:
        """Return the canonical category name."""
        return self.value


# Legacy manifest.json / config keys -> canonical categories
LEGACY_CATEGORY_MAP: Dict[str, Category] = {
    "greeting": Category.SESSION_START,
    "acknowledge": Category.TASK_ACKNOWLEDGE,
    "complete": Category.TASK_COMPLETE,
    "error": Category.TASK_ERROR,
    "permission": Category.INPUT_REQUIRED,
    "resource_limit": Category.RESOURCE_LIMIT,
    "annoyed": Category.USER_SPAM,
}

_CANONICAL_CATEGORIES: Dict[str, Category] = {c.value: c for c in Category}


def resolve_category(key: str, allow_legacy: bool = True):
    """
    Resolve a category key to its canonical Category.

    Args:
        key: Canonical name (e.g. "task.complete") or legacy name (e.g. "complete")
        allow_legacy: Whether legacy short names are accepted

    Returns:
        Category or None if the key does not map into the taxonomy
    """
    if not isinstance(key, str):
        return None
    category = _CANONICAL_CATEGORIES.get(key)
    if category is None and allow_legacy:
        category = LEGACY_CATEGORY_MAP.get(key)
    return category


class ConfigDefaults:
    """Documented defaults for the user configuration file."""

    ACTIVE_PACK = "peon"
    VOLUME = 0.5
    ENABLED = True
    SPAM_THRESHOLD = 3
    SPAM_WINDOW_SECONDS = 10.0


class ManifestFiles:
    """Manifest file names, in lookup order."""

    CURRENT = "openpeon.json"
    LEGACY = "manifest.json"
    SOUNDS_SUBDIR = "sounds"


class PathConstants:
    """Well-known file locations (config.py applies environment overrides)."""

    DEFAULT_PEON_DIR = Path.home() / ".config" / "opencode" / "peon-ping"
    CONFIG_FILENAME = "config.json"
    STATE_FILENAME = ".state.json"
    PAUSED_FILENAME = ".paused"
    PACKS_DIRNAME = "packs"


class StatusLabels:
    """Status text shown on the title surface."""

    READY = "ready"
    WORKING = "working"
    DONE = "done"
    ERROR = "error"
    NEEDS_APPROVAL = "needs approval"

    # Prefix for notification-worthy events
    NOTIFY_MARKER = "● "
    DEFAULT_PROJECT_NAME = "opencode"


class NetworkConstants:
    """Constants related to network operations."""

    DEFAULT_PORT = 12223
    DEFAULT_HOST = "127.0.0.1"
    LOCALHOST = "localhost"
    REQUEST_TIMEOUT_SECONDS = 5


class HTTPStatusConstants:
    """HTTP status code constants for better maintainability."""

    BAD_REQUEST = 400
    INTERNAL_SERVER_ERROR = 500


def get_server_url(
    port: int = NetworkConstants.DEFAULT_PORT, endpoint: str = ""
) -> str:
    """
    Generate server URL for API calls.

    Args:
        port: Server port number (defaults to DEFAULT_PORT)
        endpoint: API endpoint path (should start with / if provided)

    Returns:
        Complete server URL with endpoint
    """
    return f"http://{NetworkConstants.LOCALHOST}:{port}{endpoint}"
