"""Type definitions for the application."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, TypedDict

from utils.constants import Category


class EventData(TypedDict, total=False):
    """Represents a host event as delivered on the wire."""

    type: str  # Required
    properties: Dict[str, Any]
    # Allow arbitrary additional fields from host events


@dataclass(frozen=True)
class SoundEntry:
    """One selectable sound in a pack category."""

    file_id: str  # pack-relative path, e.g. "sounds/Hello.wav"
    transcript_line: str = ""


@dataclass(frozen=True)
class PackManifest:
    """A pack manifest normalized to the canonical category taxonomy."""

    name: str
    display_name: str
    pack_dir: Path
    schema: str  # manifest file it was read from
    categories: Mapping[Category, Tuple[SoundEntry, ...]] = field(
        default_factory=dict
    )

    def sounds_for(self, category: Category) -> Tuple[SoundEntry, ...]:
        """Sounds available for a category (empty when absent)."""
        return self.categories.get(category, ())

    def sound_path(self, entry: SoundEntry) -> Optional[Path]:
        """Absolute path of a sound, or None if it escapes the pack directory."""
        pack_root = self.pack_dir.resolve()
        candidate = (pack_root / entry.file_id).resolve()
        if candidate != pack_root and pack_root not in candidate.parents:
            return None
        return candidate


@dataclass(frozen=True)
class PackNotFound:
    """Typed outcome for a pack that has no usable manifest."""

    pack_name: str
    reason: str = "no manifest found"


@dataclass
class PeonState:
    """Durable state shared across processes through the state file."""

    last_played: Dict[str, str] = field(default_factory=dict)
    session_packs: Dict[str, str] = field(default_factory=dict)
    # Unknown top-level keys from the file, written back untouched
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SessionActivity:
    """In-memory per-session activity used for burst detection."""

    session_id: str
    prompt_timestamps: List[float] = field(default_factory=list)


@dataclass(frozen=True)
class EventAction:
    """Resolved decision for one host event, before any gating."""

    category: Optional[Category] = None
    status_label: Optional[str] = None
    notify: bool = False
    notify_message: str = ""
    marker: str = ""


@dataclass(frozen=True)
class SoundRequest:
    """Ask the delivery side to play a file."""

    path: Path
    volume: float


@dataclass(frozen=True)
class NotificationRequest:
    """Ask the delivery side to show a desktop notification."""

    message: str
    title: str


@dataclass(frozen=True)
class DispatchPlan:
    """Everything the delivery side should do for one handled event."""

    title: Optional[str] = None
    sound: Optional[SoundRequest] = None
    notification: Optional[NotificationRequest] = None
    category: Optional[Category] = None

    @property
    def is_empty(self) -> bool:
        return self.title is None and self.sound is None and self.notification is None
