"""Pydantic models for the adventure engine"""

from adventure.models.world import (
    WorldConfig,
    Room,
    QuestDefinition,
    EncounterDefinition,
    NPCDefinition,
)
from adventure.models.game import (
    GameState,
    Player,
    WorldState,
    QuestState,
    QuestStatus,
    EncounterState,
    NPCState,
    DirectorState,
    Metrics,
)
from adventure.models.action import ActionType, ActionTag, CombatMode, ParsedAction
from adventure.models.turn import (
    CheckResult,
    CheckStatus,
    CombatReport,
    InventoryUpdate,
    Outcome,
    TurnResult,
    Narration,
    NarrationRequest,
)

__all__ = [
    # World config
    "WorldConfig",
    "Room",
    "QuestDefinition",
    "EncounterDefinition",
    "NPCDefinition",
    # Game state
    "GameState",
    "Player",
    "WorldState",
    "QuestState",
    "QuestStatus",
    "EncounterState",
    "NPCState",
    "DirectorState",
    "Metrics",
    # Actions
    "ActionType",
    "ActionTag",
    "CombatMode",
    "ParsedAction",
    # Turn results
    "CheckResult",
    "CheckStatus",
    "CombatReport",
    "InventoryUpdate",
    "Outcome",
    "TurnResult",
    "Narration",
    "NarrationRequest",
]
