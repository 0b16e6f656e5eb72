"""
Game state models - Mutable per-player save data

Every bounded number is changed through a method on the entity that owns
it, so the clamping rules live in exactly one place.
"""

from enum import Enum

from pydantic import BaseModel, Field, field_serializer

from adventure.models.world import Bounds


class QuestStatus(str, Enum):
    """Quest lifecycle. Only ever moves forward."""

    LOCKED = "locked"
    ACTIVE = "active"
    COMPLETED = "completed"

    @property
    def rank(self) -> int:
        return _QUEST_RANK[self]


_QUEST_RANK = {QuestStatus.LOCKED: 0, QuestStatus.ACTIVE: 1, QuestStatus.COMPLETED: 2}

# Action types that have a usage counter in Metrics ("custom" is not counted)
ACTION_COUNTER_KEYS = (
    "start",
    "move",
    "take",
    "investigate",
    "talk",
    "combat",
    "use",
    "wait",
    "quest",
    "unknown",
)


class StateModel(BaseModel):
    model_config = {"validate_assignment": True}


# =============================================================================
# Player
# =============================================================================

class Player(StateModel):
    """Player vitals and skill scores"""
    health: int
    max_health: int
    skills: dict[str, int] = Field(default_factory=dict)

    def set_health(self, value: int, min_health: int) -> int:
        """Set health clamped to [min_health, max_health]"""
        self.health = min(self.max_health, max(min_health, value))
        return self.health

    def set_skill(self, skill: str, value: int, bounds: Bounds) -> int:
        self.skills[skill] = bounds.clamp(value)
        return self.skills[skill]


# =============================================================================
# World entities
# =============================================================================

class QuestState(StateModel):
    """Runtime progress of one quest"""
    id: str
    title: str
    description: str = ""
    status: QuestStatus = QuestStatus.LOCKED
    progress: int = 0
    updated_at_turn: int = 0

    def advance(self, status: QuestStatus, turn: int) -> bool:
        """Move the quest forward. Returns False if that would regress it."""
        if status.rank <= self.status.rank:
            return False
        self.status = status
        self.updated_at_turn = turn
        if status == QuestStatus.COMPLETED:
            self.progress = 100
        return True

    def raise_progress(self, floor: int) -> None:
        """Raise progress to at least ``floor`` (never lowers it)"""
        self.progress = min(100, max(self.progress, floor))


class EncounterState(StateModel):
    """A hostile bound to a room"""
    id: str
    room_id: str
    name: str
    max_hp: int
    current_hp: int
    defeated: bool = False
    last_outcome: str | None = None

    def apply_damage(self, amount: int) -> int:
        """Subtract damage, clamped to [0, max_hp]. Returns remaining HP."""
        self.current_hp = min(self.max_hp, max(0, self.current_hp - amount))
        return self.current_hp

    def mark_defeated(self) -> None:
        self.defeated = True
        self.last_outcome = "defeated"


class NPCState(StateModel):
    """An NPC's trust and bounded interaction log"""
    id: str
    name: str
    room_id: str
    faction: str
    trust: int = 0
    memory: list[str] = Field(default_factory=list)

    def adjust_trust(self, delta: int, bounds: Bounds) -> int:
        self.trust = bounds.clamp(self.trust + delta)
        return self.trust

    def remember(self, entry: str, limit: int) -> None:
        """Append to memory, evicting the oldest entries past ``limit``"""
        memory = self.memory + [entry]
        self.memory = memory[-limit:] if limit > 0 else []


class TimeState(StateModel):
    turn: int = 0
    phase: str = "dawn"


class DirectorState(StateModel):
    """Pacing director state: style, tension and last beat"""
    style: str = "balanced"
    tension: int = 25
    last_beat: str = "discovery"

    def set_tension(self, value: int, bounds: Bounds) -> int:
        self.tension = bounds.clamp(value)
        return self.tension


class CheckTally(StateModel):
    passed: int = 0
    failed: int = 0
    partial: int = 0


def _empty_action_counts() -> dict[str, int]:
    return {key: 0 for key in ACTION_COUNTER_KEYS}


class Metrics(StateModel):
    """Observational counters. Only action counts feed back into gameplay."""
    action_counts: dict[str, int] = Field(default_factory=_empty_action_counts)
    checks: CheckTally = Field(default_factory=CheckTally)
    reputation_changes: int = 0
    quest_completions: int = 0
    inventory_peak: int = 0
    combat_victories: int = 0
    damage_dealt: int = 0
    damage_taken: int = 0


class WorldState(StateModel):
    """Per-playthrough world state"""
    room_items: dict[str, list[str]] = Field(default_factory=dict)
    quests: dict[str, QuestState] = Field(default_factory=dict)  # config order
    encounters: dict[str, EncounterState] = Field(default_factory=dict)
    factions: dict[str, int] = Field(default_factory=dict)
    npcs: dict[str, NPCState] = Field(default_factory=dict)
    time: TimeState = Field(default_factory=TimeState)
    director: DirectorState = Field(default_factory=DirectorState)
    metrics: Metrics = Field(default_factory=Metrics)


# =============================================================================
# Aggregate root
# =============================================================================

class GameState(StateModel):
    """Current game session state"""
    current_room: str
    inventory: list[str] = Field(default_factory=list)
    visited_rooms: set[str] = Field(default_factory=set)
    moves: int = 0
    message_history: list[dict[str, str]] = Field(default_factory=list)  # narration layer only
    is_first_turn: bool = True
    player: Player
    world_state: WorldState = Field(default_factory=WorldState)

    @field_serializer("visited_rooms")
    def serialize_visited_rooms(self, visited_rooms: set[str]) -> list[str]:
        return sorted(visited_rooms)

    def has_item(self, item_id: str) -> bool:
        return item_id in self.inventory

    def apply_inventory_update(self, add: list[str], remove: list[str]) -> None:
        """Add (de-duplicated) then remove, in that order"""
        inventory = list(self.inventory)
        for item in add:
            if item not in inventory:
                inventory.append(item)
        if remove:
            inventory = [item for item in inventory if item not in remove]
        self.inventory = inventory

    def room_items(self, room_id: str) -> list[str]:
        """Live item list for a room (created empty if missing)"""
        if room_id not in self.world_state.room_items:
            self.world_state.room_items[room_id] = []
        return self.world_state.room_items[room_id]
