# Process settings for the peon-ping hooks system
# Loads file locations and server settings from environment variables with sensible defaults

import os
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv
from utils.constants import NetworkConstants, PathConstants

# Project directory - where this checkout lives (.env is read from here first)
PROJECT_DIR = Path(__file__).parent

# Load .env next to the code first, then from current directory
# DON'T override existing env vars (global env takes priority)
load_dotenv(PROJECT_DIR / ".env")
load_dotenv()


def parse_bool_env(value: str, default: bool = False) -> bool:
    """
    Helper function to parse boolean environment variables consistently.

    Accepts multiple formats for better UX:
    - "true", "yes", "on", "1" → True
    - "false", "no", "off", "0" → False
    - Empty/None → default value

    Case-insensitive.
    """
    if not value:
        return default
    return value.lower() in ("true", "yes", "on", "1")


def parse_int_env(value: str, default: int) -> int:
    """Parse an integer environment variable, falling back to default on junk."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass
class Config:
    """Process settings loaded from environment variables."""

    peon_dir: Path = PathConstants.DEFAULT_PEON_DIR
    packs_dir: Path = PathConstants.DEFAULT_PEON_DIR / PathConstants.PACKS_DIRNAME
    project_dir: str = ""
    host: str = NetworkConstants.DEFAULT_HOST
    port: int = NetworkConstants.DEFAULT_PORT
    log_dir: str = ""
    set_tab_title: bool = True

    @classmethod
    def from_env(cls) -> "Config":
        """Create settings from environment variables.

        PEON_PING_DIR holds config.json, .state.json, the .paused marker and
        (unless PEON_PACKS_DIR points elsewhere) the packs/ directory.
        PEON_PROJECT_DIR is the working-directory hint from the host; it
        falls back to the current directory.
        """
        peon_dir = Path(
            os.getenv("PEON_PING_DIR", str(PathConstants.DEFAULT_PEON_DIR))
        ).expanduser()
        packs_dir = Path(
            os.getenv("PEON_PACKS_DIR", str(peon_dir / PathConstants.PACKS_DIRNAME))
        ).expanduser()

        return cls(
            peon_dir=peon_dir,
            packs_dir=packs_dir,
            project_dir=os.getenv("PEON_PROJECT_DIR", os.getcwd()),
            host=os.getenv("PEON_HOOKS_HOST", NetworkConstants.DEFAULT_HOST),
            port=parse_int_env(
                os.getenv("PEON_HOOKS_PORT"), NetworkConstants.DEFAULT_PORT
            ),
            log_dir=os.getenv("PEON_LOG_DIR", ""),
            set_tab_title=parse_bool_env(os.getenv("PEON_TAB_TITLE", "true"), True),
        )

    @property
    def config_path(self) -> Path:
        """User configuration file (JSON)."""
        return self.peon_dir / PathConstants.CONFIG_FILENAME

    @property
    def state_path(self) -> Path:
        """Persisted state file shared by all sessions."""
        return self.peon_dir / PathConstants.STATE_FILENAME

    @property
    def paused_path(self) -> Path:
        """Pause marker; its presence mutes sounds and notifications."""
        return self.peon_dir / PathConstants.PAUSED_FILENAME


config = Config.from_env()
