# Pause gate backed by a marker file
# The marker is checked on every event so pausing takes effect immediately

from pathlib import Path

from utils.colored_logger import setup_logger

logger = setup_logger(__name__)


class PauseGate:
    """Mute sounds and notifications while the marker file exists."""

    def __init__(self, marker_path: Path):
        self.marker_path = Path(marker_path)

    def is_paused(self) -> bool:
        """Never cached: every call looks at the filesystem."""
        return self.marker_path.exists()

    def pause(self) -> None:
        self.marker_path.parent.mkdir(parents=True, exist_ok=True)
        self.marker_path.touch()
        logger.info("Sounds paused")

    def resume(self) -> None:
        self.marker_path.unlink(missing_ok=True)
        logger.info("Sounds resumed")

    def toggle(self) -> bool:
        """
        Flip the pause state.

        Returns:
            bool: True if now paused
        """
        if self.is_paused():
            self.resume()
            return False
        self.pause()
        return True
