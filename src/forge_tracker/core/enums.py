"""Enums for the Forge tracker application."""

from enum import Enum


class SessionStatus(str, Enum):
    """Lifecycle status of the timed session."""

    IDLE = "idle"
    RUNNING = "running"
