"""
Sound pack manifest resolution.

Packs live in one directory each under the packs root. A pack ships either
an ``openpeon.json`` (current CESP schema, canonical category names) or a
``manifest.json`` (legacy schema, short category names). Whichever file is
found is wrapped in a tagged variant and normalized straight away, so nothing
downstream ever looks at the on-disk schema again.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from app.types import PackManifest, PackNotFound, SoundEntry
from utils.colored_logger import setup_logger
from utils.constants import Category, ManifestFiles, resolve_category

logger = setup_logger(__name__)


@dataclass(frozen=True)
class CurrentManifest:
    """Raw openpeon.json document."""

    document: Dict[str, Any]
    schema = ManifestFiles.CURRENT


@dataclass(frozen=True)
class LegacyManifest:
    """Raw manifest.json document."""

    document: Dict[str, Any]
    schema = ManifestFiles.LEGACY


RawManifest = Union[CurrentManifest, LegacyManifest]
ResolvedManifest = Union[PackManifest, PackNotFound]

# Lookup order: current schema wins over legacy
_MANIFEST_VARIANTS = (
    (ManifestFiles.CURRENT, CurrentManifest),
    (ManifestFiles.LEGACY, LegacyManifest),
)


def is_valid_pack_name(pack_name: str) -> bool:
    """Pack names are plain directory names, never paths."""
    return (
        isinstance(pack_name, str)
        and bool(pack_name.strip())
        and pack_name not in (".", "..")
        and "/" not in pack_name
        and "\\" not in pack_name
    )


def read_raw_manifest(pack_dir: Path) -> Optional[RawManifest]:
    """
    Read the first usable manifest file in a pack directory.

    A file that exists but is not a JSON object is skipped with a warning,
    falling through to the next schema.

    Returns:
        CurrentManifest, LegacyManifest or None
    """
    for filename, variant in _MANIFEST_VARIANTS:
        manifest_path = pack_dir / filename
        if not manifest_path.is_file():
            continue
        try:
            with open(manifest_path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Skipping unreadable manifest {manifest_path}: {e}")
            continue
        if not isinstance(document, dict):
            logger.warning(f"Skipping manifest {manifest_path}: not a JSON object")
            continue
        return variant(document)
    return None


def _normalize_file_id(raw_file: str, legacy: bool) -> str:
    """
    Make file references pack-relative.

    Legacy manifest files always live under sounds/, subdirectories
    included; current manifests carry the pack-relative path already.
    """
    file_ref = raw_file.strip().replace("\\", "/")
    if legacy:
        return f"{ManifestFiles.SOUNDS_SUBDIR}/{file_ref}"
    return file_ref


def _normalize_sounds(
    pack_name: str, key: str, raw_category: Any, legacy: bool
) -> Tuple[SoundEntry, ...]:
    sounds = raw_category.get("sounds") if isinstance(raw_category, dict) else None
    if not isinstance(sounds, list):
        return ()

    entries: List[SoundEntry] = []
    for raw in sounds:
        if not isinstance(raw, dict):
            continue
        raw_file = raw.get("file")
        if not isinstance(raw_file, str) or not raw_file.strip():
            logger.debug(f"Pack {pack_name}: skipping sound without file in {key}")
            continue
        line = raw.get("line") if legacy else raw.get("label", raw.get("line"))
        entries.append(
            SoundEntry(
                file_id=_normalize_file_id(raw_file, legacy),
                transcript_line=line if isinstance(line, str) else "",
            )
        )

    file_ids = [entry.file_id for entry in entries]
    if len(set(file_ids)) != len(file_ids):
        # Tolerated; anti-repeat cannot tell the copies apart
        logger.debug(f"Pack {pack_name}: duplicate sound files in {key}")
    return tuple(entries)


def normalize_manifest(
    pack_name: str, pack_dir: Path, raw: RawManifest
) -> PackManifest:
    """
    Translate a raw manifest into the canonical PackManifest.

    Legacy keys go through the fixed migration table. Keys that do not map
    into the taxonomy are dropped with a warning. Empty categories are left
    out, which makes them identical to absent ones.

    Args:
        pack_name: Directory name of the pack
        pack_dir: Pack directory
        raw: Tagged raw manifest

    Returns:
        PackManifest
    """
    legacy = isinstance(raw, LegacyManifest)
    raw_categories = raw.document.get("categories")
    if not isinstance(raw_categories, dict):
        logger.warning(f"Pack {pack_name}: manifest has no categories")
        raw_categories = {}

    categories: Dict[Category, Tuple[SoundEntry, ...]] = {}
    for key, raw_category in raw_categories.items():
        category = resolve_category(key, allow_legacy=legacy)
        if category is None:
            logger.warning(f"Pack {pack_name}: dropping unknown category '{key}'")
            continue
        entries = _normalize_sounds(pack_name, key, raw_category, legacy)
        if entries:
            # Two legacy keys could in theory map to one category; keep both sets
            categories[category] = categories.get(category, ()) + entries

    name = raw.document.get("name")
    display_name = raw.document.get("display_name")
    name = name if isinstance(name, str) and name else pack_name
    return PackManifest(
        name=name,
        display_name=display_name if isinstance(display_name, str) else name,
        pack_dir=pack_dir,
        schema=raw.schema,
        categories=categories,
    )


class ManifestResolver:
    """Resolve pack names to normalized manifests, cached per process."""

    def __init__(self, packs_dir: Path):
        self.packs_dir = Path(packs_dir)
        self._cache: Dict[str, PackManifest] = {}

    def resolve(self, pack_name: str) -> ResolvedManifest:
        """
        Resolve a pack by name.

        Args:
            pack_name: Directory name under the packs root

        Returns:
            PackManifest, or PackNotFound when the pack has no usable manifest
        """
        cached = self._cache.get(pack_name)
        if cached is not None:
            return cached

        if not is_valid_pack_name(pack_name):
            return PackNotFound(pack_name, "invalid pack name")

        pack_dir = self.packs_dir / pack_name
        if not pack_dir.is_dir():
            logger.info(f"Pack '{pack_name}' not installed in {self.packs_dir}")
            return PackNotFound(pack_name, "pack directory missing")

        raw = read_raw_manifest(pack_dir)
        if raw is None:
            logger.info(f"Pack '{pack_name}' has no usable manifest")
            return PackNotFound(pack_name)

        manifest = normalize_manifest(pack_name, pack_dir, raw)
        if isinstance(raw, LegacyManifest):
            logger.info(f"Pack '{pack_name}' uses legacy manifest, migrated")
        self._cache[pack_name] = manifest
        return manifest

    def clear_cache(self) -> None:
        self._cache.clear()


def list_packs(packs_dir: Path) -> List[str]:
    """Return sorted names of installed packs that carry either manifest file."""
    packs_dir = Path(packs_dir)
    if not packs_dir.is_dir():
        return []
    return sorted(
        entry.name
        for entry in packs_dir.iterdir()
        if entry.is_dir()
        and any((entry / filename).is_file() for filename, _ in _MANIFEST_VARIANTS)
    )
