#!/usr/bin/env -S uv run --script
# /// script
# requires-python = ">=3.12"
# dependencies = [
#     "pygame>=2.6.1,<3",
# ]
# ///
"""
Cross-Platform Sound Player for peon-ping hooks.

Run as a script to play one sound file (blocking) through pygame. The server
never plays audio in-process: spawn_sound_player() starts this script in a
detached child and returns immediately.
"""

import os
import subprocess
import sys
from pathlib import Path

# pygame prints a banner on import; stdout carries the tab title
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

try:
    import pygame

    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False
    pygame = None

SUPPORTED_EXTENSIONS = {".mp3", ".wav", ".ogg", ".flac"}


def clamp_volume(volume: float) -> float:
    """Clamp volume into pygame's 0.0-1.0 range."""
    return max(0.0, min(1.0, float(volume)))


def play_sound(sound_path, volume=0.5):
    """
    Play a sound file using pygame for cross-platform compatibility.

    Args:
        sound_path (str | Path): Absolute path of the sound file
        volume (float): Volume level 0.0-1.0 (default: 0.5)

    Returns:
        bool: True if sound played successfully, False otherwise
    """
    if not PYGAME_AVAILABLE:
        print(
            "[DEBUG] pygame not available - install with 'pip install pygame'",
            file=sys.stderr,
        )
        return False

    sound_path = Path(sound_path)
    if not sound_path.is_file():
        print(f"[DEBUG] Sound file not found: {sound_path}", file=sys.stderr)
        return False

    try:
        pygame.mixer.init()

        pygame.mixer.music.load(str(sound_path))
        pygame.mixer.music.set_volume(clamp_volume(volume))
        pygame.mixer.music.play()

        # Wait for playback to finish; this process is detached from the server
        while pygame.mixer.music.get_busy():
            pygame.time.wait(100)

        pygame.mixer.quit()
        return True

    except Exception as e:
        print(f"[DEBUG] Pygame audio error: {e}", file=sys.stderr)
        try:
            pygame.mixer.quit()
        except Exception:
            pass
        return False


def spawn_sound_player(sound_path: Path, volume: float) -> subprocess.Popen:
    """
    Start this script in a detached child process and return at once.

    Args:
        sound_path: Absolute path of the sound file
        volume: Volume level 0.0-1.0

    Returns:
        subprocess.Popen for the child (never waited on)

    Raises:
        OSError: if the child cannot be spawned
    """
    return subprocess.Popen(
        [
            sys.executable,
            str(Path(__file__).resolve()),
            "--volume",
            str(clamp_volume(volume)),
            str(sound_path),
        ],
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
    )


def main():
    """
    Command-line interface for sound player.

    Usage:
    - ./sound_player.py /path/to/sound.wav                # Play at default volume
    - ./sound_player.py --volume 0.3 /path/to/sound.wav   # Play with custom volume
    """
    import argparse

    parser = argparse.ArgumentParser(description="Cross-Platform Sound Player")
    parser.add_argument("sound_file", help="Path of the sound file to play")
    parser.add_argument(
        "--volume",
        "-v",
        type=float,
        default=0.5,
        help="Volume level 0.0-1.0 (default: 0.5)",
    )
    args = parser.parse_args()

    if Path(args.sound_file).suffix.lower() not in SUPPORTED_EXTENSIONS:
        print(f"[DEBUG] Unsupported sound format: {args.sound_file}", file=sys.stderr)

    if not play_sound(args.sound_file, args.volume):
        sys.exit(1)


if __name__ == "__main__":
    main()
