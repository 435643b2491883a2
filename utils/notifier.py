"""
Desktop notifications, terminal focus detection and tab titles.

Everything here is platform-specific and fire-and-forget: commands are
spawned without waiting, and a missing binary just means nothing is shown.
"""

import platform
import shutil
import subprocess
import sys
from typing import Optional, TextIO

from utils.colored_logger import setup_logger

logger = setup_logger(__name__)

# Frontmost-application names that count as "the terminal" on macOS
TERMINAL_PROCESS_NAMES = [
    "Terminal",
    "iTerm2",
    "Warp",
    "Alacritty",
    "kitty",
    "WezTerm",
    "Ghostty",
    "Hyper",
]

FOCUS_CHECK_TIMEOUT_SECONDS = 2


def _applescript_string(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def build_notification_command(message: str, title: str) -> Optional[list[str]]:
    """
    Build the notification command for the current platform.

    Returns:
        list[str] or None when the platform has no supported notifier
    """
    system = platform.system()
    if system == "Darwin":
        script = (
            f"display notification {_applescript_string(message)} "
            f"with title {_applescript_string(title)}"
        )
        return ["osascript", "-e", script]
    if system == "Linux":
        exe = shutil.which("notify-send")
        if exe:
            return [exe, title, message]
    return None


def send_notification(message: str, title: str) -> bool:
    """
    Show a desktop notification without waiting for it.

    Returns:
        bool: True if a notifier process was spawned
    """
    command = build_notification_command(message, title)
    if not command:
        logger.debug(f"No notifier available on {platform.system()}")
        return False

    subprocess.Popen(
        command,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
    )
    return True


def is_terminal_focused() -> bool:
    """
    Check whether a terminal application is frontmost.

    Only macOS can answer this; elsewhere the terminal is assumed unfocused
    so notifications are always shown.
    """
    if platform.system() != "Darwin":
        return False

    try:
        result = subprocess.run(
            [
                "osascript",
                "-e",
                'tell application "System Events" to get name of first process whose frontmost is true',
            ],
            capture_output=True,
            text=True,
            timeout=FOCUS_CHECK_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"Focus detection failed: {e}")
        return False

    frontmost = result.stdout.strip().lower()
    return any(name.lower() == frontmost for name in TERMINAL_PROCESS_NAMES)


def set_tab_title(title: str, stream: TextIO = None) -> None:
    """Write the OSC 0 escape sequence that sets the terminal tab title."""
    stream = stream or sys.stdout
    stream.write(f"\x1b]0;{title}\x07")
    stream.flush()
