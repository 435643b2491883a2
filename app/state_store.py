# Persisted state for anti-repeat and sticky pack rotation
# Best-effort JSON file shared by every session pointed at the same peon directory

import json
from pathlib import Path
from typing import Any, Dict

from app.types import PeonState
from utils.colored_logger import setup_logger

logger = setup_logger(__name__)

LAST_PLAYED_KEY = "last_played"
SESSION_PACKS_KEY = "session_packs"


def _string_map(value: Any, key: str) -> Dict[str, str]:
    """Keep only str -> str pairs of a state section."""
    if not isinstance(value, dict):
        if value is not None:
            logger.warning(f"State section '{key}' is malformed, resetting it")
        return {}
    return {k: v for k, v in value.items() if isinstance(k, str) and isinstance(v, str)}


class StateStore:
    """
    Load and save PeonState.

    There is no locking: two processes doing read-modify-write at the same
    time can lose each other's update. The worst outcome is a repeated sound
    or a reassigned rotation pack.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> PeonState:
        """
        Read the state file.

        Returns:
            PeonState; empty when the file is missing, unreadable or corrupt
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except FileNotFoundError:
            return PeonState()
        except (OSError, ValueError) as e:
            logger.warning(f"State file {self.path} unreadable, starting fresh: {e}")
            return PeonState()

        if not isinstance(document, dict):
            logger.warning(f"State file {self.path} is not a JSON object, starting fresh")
            return PeonState()

        extra = {
            k: v
            for k, v in document.items()
            if k not in (LAST_PLAYED_KEY, SESSION_PACKS_KEY)
        }
        return PeonState(
            last_played=_string_map(document.get(LAST_PLAYED_KEY), LAST_PLAYED_KEY),
            session_packs=_string_map(
                document.get(SESSION_PACKS_KEY), SESSION_PACKS_KEY
            ),
            extra=extra,
        )

    def save(self, state: PeonState) -> bool:
        """
        Write the state file. Failures are logged, never raised.

        Returns:
            bool: True if the state was written
        """
        document = dict(state.extra)
        document[LAST_PLAYED_KEY] = state.last_played
        document[SESSION_PACKS_KEY] = state.session_packs

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
                f.write("\n")
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Failed to save state to {self.path}: {e}")
            return False
