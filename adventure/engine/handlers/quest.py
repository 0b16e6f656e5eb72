"""
Quest handler - Claiming the treasure, the game's terminal action.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from adventure.engine.handlers.base import ActionHandler
from adventure.errors import ConfigIntegrityError
from adventure.models.game import QuestStatus
from adventure.models.turn import CheckStatus, InventoryUpdate, Outcome, fail

if TYPE_CHECKING:
    from adventure.models.action import ParsedAction
    from adventure.models.game import GameState


class QuestHandler(ActionHandler):
    """Handles QUEST actions.

    Preconditions are checked in order and the first unmet one is reported:
    the room, the quest being active, the guarding encounter being
    defeated, the required relics being held.
    """

    def handle(self, action: "ParsedAction", state: "GameState") -> Outcome:
        quest_id = self.config.story.treasure_quest
        if action.target != quest_id:
            return fail("That objective is not available.")

        definition = self.config.get_quest(quest_id)
        if definition is None:
            raise ConfigIntegrityError(f"Unknown quest id '{quest_id}'")
        quest = self.quests.get(state, quest_id)

        if state.current_room != definition.room_id:
            return fail("The treasure can only be claimed in the treasure chamber.")

        if quest.status != QuestStatus.ACTIVE:
            return fail("This quest is not yet active.")

        guard_id = definition.required_encounter_defeated
        if guard_id:
            guard = state.world_state.encounters.get(guard_id)
            if guard is None:
                raise ConfigIntegrityError(f"Unknown encounter id '{guard_id}'")
            if not guard.defeated:
                return fail("A sentinel still guards the vault. Defeat it first.")

        if not all(state.has_item(item) for item in definition.required_items):
            return fail("You are missing the required relics to claim the treasure.")

        self.quests.complete(state, quest_id, self.next_turn(state))
        return Outcome(
            status=CheckStatus.SUCCESS,
            message="You claim the treasure and complete your quest.",
            inventory_update=InventoryUpdate(add=list(definition.reward_items)),
            game_over=True,
        )
