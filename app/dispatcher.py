"""
Delivery of DispatchPlans.

The router's contract ends at producing a DispatchPlan. A Dispatcher takes
it from there: it sets the title, starts the sound and shows the
notification. Every failure is contained here and only logged.
"""

from abc import ABC, abstractmethod

from app.types import DispatchPlan, NotificationRequest, SoundRequest
from utils.colored_logger import setup_logger
from utils.notifier import is_terminal_focused, send_notification, set_tab_title
from utils.sound_player import spawn_sound_player

logger = setup_logger(__name__)


class Dispatcher(ABC):
    """Abstract base class for DispatchPlan delivery."""

    @abstractmethod
    def set_title(self, title: str) -> None:
        """Update the status/title surface."""
        pass

    @abstractmethod
    def play(self, request: SoundRequest) -> None:
        """Start playing a sound; must not wait for it to finish."""
        pass

    @abstractmethod
    def notify(self, request: NotificationRequest) -> None:
        """Show a desktop notification; must not wait for it."""
        pass

    def deliver(self, plan: DispatchPlan) -> None:
        """
        Carry out a plan. Each step is isolated so one failure does not
        stop the others.
        """
        steps = []
        if plan.title is not None:
            steps.append(("title", self.set_title, plan.title))
        if plan.sound is not None:
            steps.append(("sound", self.play, plan.sound))
        if plan.notification is not None:
            steps.append(("notification", self.notify, plan.notification))

        for name, step, payload in steps:
            try:
                step(payload)
            except Exception as e:
                logger.warning(f"Failed to deliver {name}: {e}")


class PlatformDispatcher(Dispatcher):
    """Dispatcher that talks to the local desktop."""

    def __init__(self, tab_title_enabled: bool = True):
        self.tab_title_enabled = tab_title_enabled

    def set_title(self, title: str) -> None:
        if self.tab_title_enabled:
            set_tab_title(title)

    def play(self, request: SoundRequest) -> None:
        if not request.path.is_file():
            logger.warning(f"Sound file not found: {request.path}")
            return
        spawn_sound_player(request.path, request.volume)
        logger.info(f"Playing {request.path.name} (volume {request.volume})")

    def notify(self, request: NotificationRequest) -> None:
        if is_terminal_focused():
            logger.debug("Terminal focused, skipping notification")
            return
        if send_notification(request.message, request.title):
            logger.info(f"Notified: {request.message}")

