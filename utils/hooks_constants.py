"""
Host event constants for the peon-ping hooks system.

This module defines all supported host lifecycle event types as an Enum,
providing type safety and preventing magic string usage throughout the system.
"""

from enum import Enum


class HostEvent(Enum):
    """
    Enumeration of the coding-agent host lifecycle events we react to.

    Each enum member has a string value that matches the event "type"
    field delivered by the host.
    """

    SESSION_CREATED = "session.created"
    SESSION_IDLE = "session.idle"
    SESSION_ERROR = "session.error"
    SESSION_STATUS = "session.status"
    PERMISSION_ASKED = "permission.asked"
    MESSAGE_UPDATED = "message.updated"

    def __str__(self) -> str:
        """Return the string value of the host event."""
        return self.value


# session.status values that mean the agent started working
BUSY_STATUSES = ("busy", "running")


def get_all_host_events() -> list[str]:
    """
    Get all host event names as strings.

    Returns:
        list[str]: List of all host event names
    """
    return [event.value for event in HostEvent]


def is_valid_host_event(event_name: str) -> bool:
    """
    Check if a string is a valid host event name.

    Args:
        event_name (str): Event name to validate

    Returns:
        bool: True if valid host event name, False otherwise
    """
    return event_name in get_all_host_events()
