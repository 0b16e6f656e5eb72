"""
Action models - Typed representation of parsed player input.

The parser turns raw text into a single ParsedAction. Only the fields
relevant to its action_type are set:

    - MOVE: direction
    - TAKE / USE: item
    - COMBAT: mode
    - QUEST: target

Example:
    >>> action = ParsedAction(
    ...     action_type=ActionType.TAKE,
    ...     raw="Take the torch",
    ...     item="torch",
    ... )
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ActionType(str, Enum):
    """Categories of player action the rules engine dispatches on."""

    START = "start"  # Forced first turn of a new game
    MOVE = "move"
    TAKE = "take"
    COMBAT = "combat"
    INVESTIGATE = "investigate"
    TALK = "talk"
    USE = "use"
    WAIT = "wait"
    QUEST = "quest"
    CUSTOM = "custom"  # Free text handed to the narration layer
    UNKNOWN = "unknown"


class CombatMode(str, Enum):
    ATTACK = "attack"
    DEFEND = "defend"


class ActionTag(str, Enum):
    """Coarse display tag for menu labels. Never affects state."""

    MOVE = "MOVE"
    COMBAT = "COMBAT"
    SOCIAL = "SOCIAL"
    LOOK = "LOOK"
    USE = "USE"
    SYSTEM = "SYSTEM"
    CUSTOM = "CUSTOM"
    ACTION = "ACTION"


class ParsedAction(BaseModel):
    """Structured representation of one player input.

    Attributes:
        action_type: The category of action
        raw: The original input (stripped)
        direction: MOVE target direction
        item: TAKE/USE item fragment as typed (resolved by the handler)
        mode: COMBAT mode
        target: QUEST objective id
    """

    action_type: ActionType
    raw: str = ""
    direction: str | None = None
    item: str | None = None
    mode: CombatMode | None = None
    target: str | None = None
