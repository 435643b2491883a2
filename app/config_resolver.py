# User configuration for sound packs and event categories
# Reads config.json and falls back field by field to documented defaults

import json
import math
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

from utils.colored_logger import setup_logger
from utils.constants import Category, ConfigDefaults, resolve_category

logger = setup_logger(__name__)


def default_categories() -> Dict[Category, bool]:
    """Every category starts enabled."""
    return {category: True for category in Category}


@dataclass(frozen=True)
class PeonConfig:
    """User configuration, immutable for the lifetime of the process."""

    active_pack: str = ConfigDefaults.ACTIVE_PACK
    volume: float = ConfigDefaults.VOLUME
    enabled: bool = ConfigDefaults.ENABLED
    categories: Mapping[Category, bool] = field(
        default_factory=lambda: MappingProxyType(default_categories())
    )
    spam_threshold: int = ConfigDefaults.SPAM_THRESHOLD
    spam_window_seconds: float = ConfigDefaults.SPAM_WINDOW_SECONDS
    pack_rotation: Tuple[str, ...] = ()

    def is_category_enabled(self, category: Category) -> bool:
        """Missing keys default to on."""
        return self.categories.get(category, True)


def _is_number(value: Any) -> bool:
    # bool is an int subclass; true/false is never a valid number here
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _read_config_document(path: Path) -> Dict[str, Any]:
    """Read the raw JSON object, returning {} on any failure."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read config {path}, using defaults: {e}")
        return {}

    if not isinstance(document, dict):
        logger.warning(f"Config {path} is not a JSON object, using defaults")
        return {}
    return document


def _first_present(document: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in document:
            return document[key]
    return None


def _merge_categories(raw: Any) -> Dict[Category, bool]:
    """Deep-merge user category toggles over the all-enabled defaults."""
    categories = default_categories()
    if raw is None:
        return categories
    if not isinstance(raw, dict):
        logger.warning(f"Ignoring config 'categories': expected object, got {raw!r}")
        return categories

    for key, value in raw.items():
        category = resolve_category(key)
        if category is None:
            logger.debug(f"Ignoring unknown config category: {key}")
            continue
        if isinstance(value, bool):
            categories[category] = value
        elif isinstance(value, str):
            # Hand-edited configs sometimes quote booleans
            categories[category] = value.strip().lower() != "false"
        else:
            logger.warning(f"Ignoring config category {key}: not a boolean")
    return categories


def parse_config(document: Dict[str, Any]) -> PeonConfig:
    """
    Build a PeonConfig from a parsed JSON document.

    Each field is validated on its own; an invalid or missing value keeps the
    default for that field without affecting the others.

    Args:
        document: Parsed config.json contents

    Returns:
        PeonConfig with user overrides applied
    """
    values: Dict[str, Any] = {}

    active_pack = document.get("active_pack")
    if isinstance(active_pack, str) and active_pack.strip():
        values["active_pack"] = active_pack.strip()
    elif active_pack is not None:
        logger.warning(f"Ignoring config 'active_pack': {active_pack!r}")

    volume = document.get("volume")
    if _is_number(volume) and 0.0 <= volume <= 1.0:
        values["volume"] = float(volume)
    elif volume is not None:
        logger.warning(f"Ignoring config 'volume' outside [0, 1]: {volume!r}")

    enabled = document.get("enabled")
    if isinstance(enabled, bool):
        values["enabled"] = enabled
    elif enabled is not None:
        logger.warning(f"Ignoring config 'enabled': {enabled!r}")

    threshold = _first_present(document, "spam_threshold", "annoyed_threshold")
    if (
        _is_number(threshold)
        and math.isfinite(threshold)
        and threshold >= 1
        and int(threshold) == threshold
    ):
        values["spam_threshold"] = int(threshold)
    elif threshold is not None:
        logger.warning(f"Ignoring config spam threshold: {threshold!r}")

    window = _first_present(
        document, "spam_window_seconds", "annoyed_window_seconds"
    )
    if _is_number(window) and math.isfinite(window) and window > 0:
        values["spam_window_seconds"] = float(window)
    elif window is not None:
        logger.warning(f"Ignoring config spam window: {window!r}")

    rotation = document.get("pack_rotation")
    if isinstance(rotation, list):
        values["pack_rotation"] = tuple(
            name.strip() for name in rotation if isinstance(name, str) and name.strip()
        )
    elif rotation is not None:
        logger.warning("Ignoring config 'pack_rotation': expected a list")

    values["categories"] = MappingProxyType(
        _merge_categories(document.get("categories"))
    )

    return replace(PeonConfig(), **values)


def load_config(path: Path) -> PeonConfig:
    """
    Load the user configuration.

    Never raises: a missing, unreadable or malformed file yields defaults.

    Args:
        path: Location of config.json

    Returns:
        PeonConfig
    """
    peon_config = parse_config(_read_config_document(Path(path)))
    logger.info(
        f"Loaded config: pack={peon_config.active_pack}, "
        f"volume={peon_config.volume}, enabled={peon_config.enabled}, "
        f"rotation={list(peon_config.pack_rotation)}"
    )
    return peon_config
