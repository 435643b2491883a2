#!/usr/bin/env -S uv run --script
# /// script
# requires-python = ">=3.12"
# dependencies = [
#     "requests",
#     "python-dotenv",
# ]
# ///

# peon-ping hooks entry point
# Receives host events via stdin and forwards them to the session server.
# Also handles the local --pause/--resume/--toggle/--status/--packs commands.

import json
import sys
import requests
from typing import Dict, Any
from app.manifest_resolver import list_packs
from app.pause_gate import PauseGate
from config import Config, config
from utils.colored_logger import setup_logger, configure_root_logging
from utils.constants import NetworkConstants, get_server_url

configure_root_logging()
logger = setup_logger(__name__)

LOCAL_COMMANDS = ("pause", "resume", "toggle", "status", "packs")


def read_json_from_stdin() -> Dict[Any, Any]:
    """Read and parse a host event from stdin."""
    try:
        data = sys.stdin.read()
        if not data.strip():
            raise ValueError("No data received from stdin")

        event = json.loads(data)
        if not isinstance(event, dict):
            raise ValueError("Event must be a JSON object")
        return event
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON format - {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Error reading from stdin: {e}")
        sys.exit(1)


def send_to_api(event_data: Dict[Any, Any], port: int) -> bool:
    """Send event data to the session server."""
    api_url = get_server_url(port, "/events")

    try:
        payload = {
            "type": event_data.get("type", ""),
            "properties": event_data.get("properties") or {},
        }
        response = requests.post(
            api_url, json=payload, timeout=NetworkConstants.REQUEST_TIMEOUT_SECONDS
        )
        response.raise_for_status()

        response.json()  # Validate JSON response
        return True

    except requests.exceptions.RequestException as e:
        logger.error(f"Error sending request to API: {e}")
        return False
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        return False


def parse_custom_arguments(argv=None) -> Dict[str, Any]:
    """
    Parse any --key=value or --flag arguments dynamically.
    """
    arguments = {}
    argv = sys.argv[1:] if argv is None else argv

    for arg in argv:
        if not arg.startswith("--"):
            continue
        key = arg[2:]  # Remove '--' prefix
        if "=" in key:
            key, value = key.split("=", 1)
            arguments[key.replace("-", "_")] = value
        else:
            arguments[key.replace("-", "_")] = True

    return arguments


def run_local_command(command: str, settings: Config) -> int:
    """
    Handle commands that work on local files without the server.

    Returns:
        int: Process exit code
    """
    gate = PauseGate(settings.paused_path)

    if command == "pause":
        gate.pause()
        print("peon-ping: sounds paused")
    elif command == "resume":
        gate.resume()
        print("peon-ping: sounds resumed")
    elif command == "toggle":
        paused = gate.toggle()
        print(f"peon-ping: sounds {'paused' if paused else 'resumed'}")
    elif command == "status":
        state = "paused" if gate.is_paused() else "active"
        print(f"peon-ping: {state}")
    elif command == "packs":
        packs = list_packs(settings.packs_dir)
        if not packs:
            print(f"peon-ping: no packs installed in {settings.packs_dir}")
            return 1
        for name in packs:
            print(f"  {name}")
    else:
        return 2
    return 0


def main():
    """Main function to handle the hook process."""
    arguments = parse_custom_arguments()

    for command in LOCAL_COMMANDS:
        if arguments.get(command):
            sys.exit(run_local_command(command, config))

    port = config.port
    if "port" in arguments:
        try:
            port = int(arguments["port"])
        except ValueError:
            logger.error(f"Invalid --port value: {arguments['port']}")
            sys.exit(1)

    event_data = read_json_from_stdin()
    if not send_to_api(event_data, port):
        sys.exit(1)


if __name__ == "__main__":
    main()
