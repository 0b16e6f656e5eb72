"""
Turn models - What one resolved turn produces.

Handlers return an Outcome; the processor wraps it into a TurnResult,
which is what the UI displays and what the narration layer is sent.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from adventure.models.action import ParsedAction


class CheckStatus(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    FAIL = "fail"


class CheckResult(BaseModel):
    """Result of one deterministic skill check"""
    skill: str | None = None
    roll: int
    total: int
    target: int
    status: CheckStatus


class InventoryUpdate(BaseModel):
    """Changes to inventory"""
    add: list[str] = Field(default_factory=list)
    remove: list[str] = Field(default_factory=list)


class CombatReport(BaseModel):
    encounter_id: str
    defeated: bool
    damage_to_enemy: int
    counter_damage: int
    enemy_hp: int
    enemy_max_hp: int


class Outcome(BaseModel):
    """Deterministic result of a handler"""
    status: CheckStatus
    message: str = ""
    check: CheckResult | None = None
    inventory_update: InventoryUpdate = Field(default_factory=InventoryUpdate)
    combat: CombatReport | None = None
    game_over: bool = False


def fail(message: str, check: CheckResult | None = None) -> Outcome:
    """Outcome for a player mistake or failed attempt"""
    return Outcome(status=CheckStatus.FAIL, message=message, check=check)


class RoomSnapshot(BaseModel):
    id: str
    name: str
    description: str


class PlayerSnapshot(BaseModel):
    health: int
    max_health: int


class EncounterSnapshot(BaseModel):
    id: str
    name: str
    current_hp: int
    max_hp: int


class DirectorSnapshot(BaseModel):
    style: str
    tension: int
    last_beat: str


class TurnResult(BaseModel):
    """Summary of a resolved turn, consumed by the UI and the narrator"""
    action: ParsedAction
    outcome: Outcome
    room: RoomSnapshot
    items_here: list[str] = Field(default_factory=list)
    actions: list[str] = Field(default_factory=list)
    director: DirectorSnapshot
    game_over: bool = False
    turn: int
    phase: str
    player: PlayerSnapshot
    active_encounter: EncounterSnapshot | None = None


# =============================================================================
# Narration payloads
# =============================================================================

class NarrationRequest(BaseModel):
    """Structured turn summary sent to the text generator"""
    turn: int
    phase: str
    room: RoomSnapshot
    items_here: list[str]
    action_type: str
    action_raw: str
    outcome_status: str
    outcome_message: str
    actions: list[str]
    player: PlayerSnapshot
    active_encounter: EncounterSnapshot | None = None
    director: DirectorSnapshot
    game_over: bool = False


class Narration(BaseModel):
    """Flavor text returned by the text generator"""
    description: str
    message: str
