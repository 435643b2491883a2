# Host event -> action resolution
# Maps lifecycle events to a category, status label and notification, then
# applies the pause gate and per-category toggles to build a DispatchPlan

import random
import re
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from app.config_resolver import PeonConfig
from app.manifest_resolver import ManifestResolver
from app.pack_rotation import resolve_active_pack
from app.pause_gate import PauseGate
from app.sound_selector import pick_sound
from app.spam_detector import SpamDetector
from app.state_store import StateStore
from app.types import (
    DispatchPlan,
    EventAction,
    NotificationRequest,
    PackNotFound,
    SessionActivity,
    SoundRequest,
)
from utils.colored_logger import setup_logger
from utils.constants import Category, StatusLabels
from utils.hooks_constants import BUSY_STATUSES, HostEvent

logger = setup_logger(__name__)


def project_name_from_dir(directory: Optional[str]) -> str:
    """Derive a short project label from the working directory."""
    if not directory:
        return StatusLabels.DEFAULT_PROJECT_NAME

    # Handle both Unix "/" and Windows "\\" separators
    project = directory.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]
    project = re.sub(r"[^a-zA-Z0-9 ._-]", "", project)
    return project or StatusLabels.DEFAULT_PROJECT_NAME


def new_session_id(now: Optional[float] = None) -> str:
    """Session ids are derived once at process start."""
    now = time.time() if now is None else now
    return f"oc-{int(now * 1000)}"


def _session_status(properties: Dict[str, Any]) -> str:
    # Older hosts send "busy"; newer ones send {"type": "busy"}
    status = properties.get("status")
    if isinstance(status, dict):
        status = status.get("type")
    return status if isinstance(status, str) else ""


def _message_role(properties: Dict[str, Any]) -> str:
    role = properties.get("role")
    if role is None and isinstance(properties.get("info"), dict):
        role = properties["info"].get("role")
    return role if isinstance(role, str) else ""


def _attention(category: Category, label: str, project_name: str, text: str):
    return EventAction(
        category=category,
        status_label=label,
        notify=True,
        notify_message=f"{project_name} - {text}",
        marker=StatusLabels.NOTIFY_MARKER,
    )


def startup_action() -> EventAction:
    """Action emitted once when the process starts."""
    return EventAction(category=Category.SESSION_START, status_label=StatusLabels.READY)


def route_event(
    event: Dict[str, Any],
    project_name: str,
    spam_detector: SpamDetector,
    session: SessionActivity,
    now: float,
) -> Optional[EventAction]:
    """
    Map one host event to an EventAction.

    Only session.status (busy/running) and user message.updated events touch
    the session's burst window; every other decision depends on the event
    alone.

    Args:
        event: Host event with "type" and optional "properties"
        project_name: Label used in titles and notifications
        spam_detector: Burst detector
        session: In-memory session activity
        now: Current time in seconds since the epoch

    Returns:
        EventAction, or None when the event is ignored
    """
    event_type = event.get("type")
    properties = event.get("properties") or {}
    if not isinstance(properties, dict):
        properties = {}

    if event_type == HostEvent.SESSION_CREATED.value:
        return startup_action()

    if event_type == HostEvent.SESSION_IDLE.value:
        return _attention(
            Category.TASK_COMPLETE, StatusLabels.DONE, project_name, "Task complete"
        )

    if event_type == HostEvent.SESSION_ERROR.value:
        return _attention(
            Category.TASK_ERROR, StatusLabels.ERROR, project_name, "Error occurred"
        )

    if event_type == HostEvent.PERMISSION_ASKED.value:
        return _attention(
            Category.INPUT_REQUIRED,
            StatusLabels.NEEDS_APPROVAL,
            project_name,
            "Permission needed",
        )

    if event_type == HostEvent.SESSION_STATUS.value:
        if _session_status(properties) not in BUSY_STATUSES:
            return None
        if spam_detector.observe(session, now):
            logger.info(f"Session {session.session_id}: rapid prompts detected")
            return EventAction(
                category=Category.USER_SPAM, status_label=StatusLabels.WORKING
            )
        return EventAction(status_label=StatusLabels.WORKING)

    if event_type == HostEvent.MESSAGE_UPDATED.value:
        if _message_role(properties) == "user":
            spam_detector.observe(session, now)
        return None

    return None


class EventRouter:
    """
    Turn host events into DispatchPlans for one session.

    The pause marker is checked per event. Sound selection brackets its
    state mutation with a fresh load and a save.
    """

    def __init__(
        self,
        peon_config: PeonConfig,
        state_store: StateStore,
        manifest_resolver: ManifestResolver,
        pause_gate: PauseGate,
        project_name: str,
        session: Optional[SessionActivity] = None,
        clock: Callable[[], float] = time.time,
        rng: random.Random = None,
    ):
        self.config = peon_config
        self.state_store = state_store
        self.manifest_resolver = manifest_resolver
        self.pause_gate = pause_gate
        self.project_name = project_name
        self.clock = clock
        self.rng = rng or random.Random()
        self.session = session or SessionActivity(session_id=new_session_id(clock()))
        self.spam_detector = SpamDetector(
            peon_config.spam_threshold, peon_config.spam_window_seconds
        )

    @property
    def session_id(self) -> str:
        return self.session.session_id

    def handle_startup(self) -> DispatchPlan:
        """Plan for the process-start greeting."""
        if not self.config.enabled:
            return DispatchPlan()
        return self.plan(startup_action())

    def handle(self, event: Dict[str, Any]) -> DispatchPlan:
        """
        Resolve one host event into a DispatchPlan.

        Args:
            event: Host event with "type" and optional "properties"

        Returns:
            DispatchPlan (empty when nothing should happen)
        """
        if not self.config.enabled:
            return DispatchPlan()

        action = route_event(
            event, self.project_name, self.spam_detector, self.session, self.clock()
        )
        if action is None:
            return DispatchPlan()
        return self.plan(action)

    def plan(self, action: EventAction) -> DispatchPlan:
        """Apply the pause gate and category toggles to an action."""
        title = None
        if action.status_label:
            title = f"{action.marker}{self.project_name}: {action.status_label}"

        if action.category is None:
            return DispatchPlan(title=title)

        if not self.config.is_category_enabled(action.category):
            logger.info(f"Category {action.category} disabled in config")
            return DispatchPlan(title=title)

        if self.pause_gate.is_paused():
            logger.info(f"Paused, muting {action.category}")
            return DispatchPlan(title=title)

        sound = self.select_sound(action.category)
        notification = None
        if action.notify:
            notification = NotificationRequest(
                message=action.notify_message, title=title or self.project_name
            )
        return DispatchPlan(
            title=title,
            sound=sound,
            notification=notification,
            category=action.category,
        )

    def active_pack(self) -> str:
        """Resolve (and persist) this session's pack."""
        state = self.state_store.load()
        before = dict(state.session_packs)
        pack_name = resolve_active_pack(self.config, state, self.session_id, self.rng)
        if state.session_packs != before:
            self.state_store.save(state)
        return pack_name

    def select_sound(self, category: Category) -> Optional[SoundRequest]:
        """
        Pick a sound for the category from this session's pack.

        Returns:
            SoundRequest or None when no pack or no sound is available
        """
        state = self.state_store.load()
        before = (dict(state.last_played), dict(state.session_packs))
        pack_name = resolve_active_pack(self.config, state, self.session_id, self.rng)

        manifest = self.manifest_resolver.resolve(pack_name)
        entry = None
        if isinstance(manifest, PackNotFound):
            logger.info(f"No sound for {category}: {manifest.reason} ({pack_name})")
        else:
            entry = pick_sound(manifest, category, state, self.rng)

        if (state.last_played, state.session_packs) != before:
            self.state_store.save(state)

        if entry is None:
            return None

        path: Optional[Path] = manifest.sound_path(entry)
        if path is None:
            logger.warning(f"Pack {pack_name}: sound path escapes pack: {entry.file_id}")
            return None
        logger.info(f"Selected {entry.file_id} for {category} from pack {pack_name}")
        return SoundRequest(path=path, volume=self.config.volume)
