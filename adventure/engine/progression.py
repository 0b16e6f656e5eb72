"""
Progression trackers - Quests, faction reputation and NPC relationships.

Quest definitions form a small dependency graph: a quest whose
``unlocks_when_completed`` names quest P is promoted from locked to active
when P completes. Statuses only move forward (see QuestState.advance).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from adventure.engine.parser import includes_token
from adventure.errors import ConfigIntegrityError
from adventure.models.action import ActionType
from adventure.models.game import QuestStatus
from adventure.models.turn import CheckStatus

if TYPE_CHECKING:
    from adventure.models.action import ParsedAction
    from adventure.models.game import GameState, NPCState, QuestState
    from adventure.models.turn import Outcome
    from adventure.models.world import WorldConfig

logger = logging.getLogger(__name__)

UNLOCK_PROGRESS_FLOOR = 10

TRUST_DELTAS = {
    CheckStatus.SUCCESS: 2,
    CheckStatus.PARTIAL: 1,
    CheckStatus.FAIL: -1,
}


class QuestTracker:
    """Walks the quest unlock graph and applies post-turn progress hooks"""

    def __init__(self, config: "WorldConfig"):
        self.config = config

    def get(self, state: "GameState", quest_id: str) -> "QuestState":
        quest = state.world_state.quests.get(quest_id)
        if quest is None:
            raise ConfigIntegrityError(f"Unknown quest id '{quest_id}'")
        return quest

    def is_active(self, state: "GameState", quest_id: str) -> bool:
        return self.get(state, quest_id).status == QuestStatus.ACTIVE

    def first_active(self, state: "GameState") -> "QuestState | None":
        """First active quest in config order"""
        for definition in self.config.quests:
            quest = state.world_state.quests.get(definition.id)
            if quest is not None and quest.status == QuestStatus.ACTIVE:
                return quest
        return None

    def hint(self, state: "GameState") -> str:
        quest = self.first_active(state)
        if quest is None:
            return "No active objective remains."
        return f"Active objective: {quest.title}."

    def unlock(self, state: "GameState", quest_id: str, turn: int) -> bool:
        """Promote a locked quest to active. No effect on any other status."""
        quest = self.get(state, quest_id)
        if quest.status != QuestStatus.LOCKED:
            return False
        quest.advance(QuestStatus.ACTIVE, turn)
        quest.raise_progress(UNLOCK_PROGRESS_FLOOR)
        logger.info(f"Quest unlocked: {quest_id}")
        return True

    def complete(self, state: "GameState", quest_id: str, turn: int) -> bool:
        """Complete a quest and unlock every quest that depends on it.

        Returns:
            True if the quest was not already completed
        """
        quest = self.get(state, quest_id)
        if not quest.advance(QuestStatus.COMPLETED, turn):
            return False
        logger.info(f"Quest completed: {quest_id}")
        for dependent in self.config.dependents_of(quest_id):
            self.unlock(state, dependent.id, turn)
        return True

    def raise_floor(self, state: "GameState", quest_id: str, floor: int) -> None:
        """Raise progress of an active quest to at least ``floor``"""
        quest = self.get(state, quest_id)
        if quest.status == QuestStatus.ACTIVE:
            quest.raise_progress(floor)

    def apply_turn_hooks(self, state: "GameState", action: "ParsedAction", outcome: "Outcome") -> None:
        """Progress side effects, run after the clock has advanced"""
        story = self.config.story
        turn = state.world_state.time.turn

        if story.amulet_item in outcome.inventory_update.add:
            self.complete(state, story.amulet_quest, turn)

        if action.action_type == ActionType.COMBAT and outcome.combat and outcome.combat.defeated:
            if outcome.combat.encounter_id == story.guardian_encounter:
                self.raise_floor(state, story.amulet_quest, story.amulet_progress_on_guardian)
            if outcome.combat.encounter_id == story.sentinel_encounter:
                self.raise_floor(state, story.treasure_quest, story.treasure_progress_on_sentinel)

        if action.action_type == ActionType.MOVE and state.current_room == self.treasure_room:
            self.raise_floor(state, story.treasure_quest, story.treasure_progress_on_arrival)

    @property
    def treasure_room(self) -> str:
        definition = self.config.get_quest(self.config.story.treasure_quest)
        if definition is None:
            raise ConfigIntegrityError(f"Unknown quest id '{self.config.story.treasure_quest}'")
        return definition.room_id


# =============================================================================
# Factions and NPCs
# =============================================================================

def adjust_faction(state: "GameState", config: "WorldConfig", faction_id: str, delta: int) -> int:
    """Apply a reputation delta, clamped to the faction bounds"""
    factions = state.world_state.factions
    if faction_id not in config.systems.factions:
        raise ConfigIntegrityError(f"Unknown faction id '{faction_id}'")
    factions[faction_id] = config.systems.faction_bounds.clamp(factions.get(faction_id, 0) + delta)
    state.world_state.metrics.reputation_changes += 1
    return factions[faction_id]


def remember_interaction(state: "GameState", config: "WorldConfig", npc_id: str, entry: str) -> None:
    npc = state.world_state.npcs.get(npc_id)
    if npc is None:
        raise ConfigIntegrityError(f"Unknown NPC id '{npc_id}'")
    npc.remember(entry, config.systems.npc.memory_limit)


def record_conversation(
    state: "GameState",
    config: "WorldConfig",
    npc: "NPCState",
    status: CheckStatus,
    entry: str,
) -> int:
    """Trust change from a conversation, mirrored onto the NPC's faction.

    Returns:
        The trust delta that was applied
    """
    delta = TRUST_DELTAS[status]
    npc.adjust_trust(delta, config.systems.npc.trust_bounds)
    adjust_faction(state, config, npc.faction, delta)
    remember_interaction(state, config, npc.id, entry)
    return delta


def npc_in_room(state: "GameState", room_id: str, raw_input: str = "") -> "NPCState | None":
    """The NPC named in the input, else the first NPC in the room"""
    npcs = [npc for npc in state.world_state.npcs.values() if npc.room_id == room_id]
    if not npcs:
        return None
    for npc in npcs:
        if includes_token(raw_input, npc.name):
            return npc
    return npcs[0]
