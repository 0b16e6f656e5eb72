"""
Exception types for the adventure engine.

Ordinary player mistakes are never exceptions: they come back as an
Outcome with status "fail". Exceptions are reserved for corrupted static
data and for failures of the external narration service.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adventure.models.turn import TurnResult


class AdventureError(Exception):
    """Base class for engine errors"""


class ConfigIntegrityError(AdventureError, ValueError):
    """World config references something that does not exist.

    Raised at load time by the validator, and during play if the
    orchestrator meets an unknown room, encounter or quest id.
    """

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or [message]


class NarrationError(AdventureError):
    """The narration service failed after the turn was already resolved.

    The committed turn is attached so the caller can retry narration
    without resolving the turn again.
    """

    def __init__(self, message: str, turn: "TurnResult | None" = None):
        super().__init__(message)
        self.turn = turn
