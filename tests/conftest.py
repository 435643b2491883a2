"""Shared fixtures: pack directories on disk, a recording dispatcher, routers."""

from __future__ import annotations

import json
import random
from pathlib import Path
from typing import Dict, List

import pytest

from app.config_resolver import PeonConfig, parse_config
from app.dispatcher import Dispatcher
from app.event_router import EventRouter
from app.manifest_resolver import ManifestResolver
from app.pause_gate import PauseGate
from app.state_store import StateStore
from app.types import NotificationRequest, SessionActivity, SoundRequest


# ── Helpers ────────────────────────────────────────────────


def write_pack(
    packs_dir: Path,
    name: str,
    categories: Dict[str, List[str]],
    legacy: bool = False,
) -> Path:
    """Create a pack with one silent file per listed sound.

    Current packs reference "sounds/<file>" and use "label"; legacy packs
    reference bare file names and use "line".
    """
    pack_dir = packs_dir / name
    sounds_dir = pack_dir / "sounds"
    sounds_dir.mkdir(parents=True, exist_ok=True)

    manifest_categories = {}
    for key, files in categories.items():
        sounds = []
        for file_name in files:
            (sounds_dir / file_name).write_bytes(b"RIFF")
            if legacy:
                sounds.append({"file": file_name, "line": f"line {file_name}"})
            else:
                sounds.append(
                    {"file": f"sounds/{file_name}", "label": f"line {file_name}"}
                )
        manifest_categories[key] = {"sounds": sounds}

    document = {
        "name": name,
        "display_name": name.title(),
        "categories": manifest_categories,
    }
    if not legacy:
        document["cesp_version"] = "1.0"
    filename = "manifest.json" if legacy else "openpeon.json"
    (pack_dir / filename).write_text(json.dumps(document))
    return pack_dir


class RecordingDispatcher(Dispatcher):
    """Dispatcher that only records what it was asked to do."""

    def __init__(self):
        self.titles: List[str] = []
        self.sounds: List[SoundRequest] = []
        self.notifications: List[NotificationRequest] = []

    def set_title(self, title: str) -> None:
        self.titles.append(title)

    def play(self, request: SoundRequest) -> None:
        self.sounds.append(request)

    def notify(self, request: NotificationRequest) -> None:
        self.notifications.append(request)


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ── Fixtures ───────────────────────────────────────────────


@pytest.fixture
def peon_dir(tmp_path: Path) -> Path:
    path = tmp_path / "peon-ping"
    path.mkdir()
    return path


@pytest.fixture
def packs_dir(peon_dir: Path) -> Path:
    path = peon_dir / "packs"
    path.mkdir()
    return path


@pytest.fixture
def peon_pack(packs_dir: Path) -> Path:
    return write_pack(
        packs_dir,
        "peon",
        {
            "session.start": ["hello.wav", "ready.wav"],
            "task.complete": ["done.wav", "work.wav"],
            "task.error": ["oops.wav"],
            "input.required": ["what.wav", "huh.wav"],
            "user.spam": ["stop.wav", "poke.wav"],
        },
    )


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_router(peon_dir: Path, packs_dir: Path, clock: FakeClock):
    """Factory building an EventRouter over the temp peon directory."""

    def _make(peon_config: PeonConfig | dict | None = None, **kwargs) -> EventRouter:
        if peon_config is None:
            peon_config = PeonConfig()
        elif isinstance(peon_config, dict):
            peon_config = parse_config(peon_config)
        return EventRouter(
            peon_config=peon_config,
            state_store=StateStore(peon_dir / ".state.json"),
            manifest_resolver=ManifestResolver(packs_dir),
            pause_gate=PauseGate(peon_dir / ".paused"),
            project_name=kwargs.pop("project_name", "myproj"),
            session=kwargs.pop("session", SessionActivity("oc-test")),
            clock=clock,
            rng=kwargs.pop("rng", random.Random(7)),
        )

    return _make
