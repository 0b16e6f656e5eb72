"""
Talk handler - Conversations with NPCs.

Every conversation is a normal charisma check that moves the NPC's trust
(and their faction's standing) and is written to the NPC's memory. The
village elder additionally completes the opening quest and hands over
its reward unless the check failed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from adventure.engine.handlers.base import ActionHandler
from adventure.engine.progression import npc_in_room, record_conversation
from adventure.errors import ConfigIntegrityError
from adventure.models.game import QuestStatus
from adventure.models.turn import CheckStatus, InventoryUpdate, Outcome, fail

if TYPE_CHECKING:
    from adventure.models.action import ParsedAction
    from adventure.models.game import GameState


class TalkHandler(ActionHandler):
    def handle(self, action: "ParsedAction", state: "GameState") -> Outcome:
        npc = npc_in_room(state, state.current_room, action.raw)
        if npc is None:
            return fail("No one here is available to speak with you.")

        check = self.skill_check(state, "charisma", self.difficulty.normal, f"{npc.id}:talk:{action.raw}")
        turn = self.next_turn(state)
        record_conversation(state, self.config, npc, check.status, f"Turn {turn}: {action.raw}")

        update = InventoryUpdate()
        message = f"{npc.name} shares guidance about the path ahead."

        if npc.id == self.config.story.elder_npc and check.status != CheckStatus.FAIL:
            granted = self._elder_sanction(state, turn)
            if granted is not None:
                update = granted
                message = f"{npc.name} grants you the Elder Seal and authorizes your temple expedition."

        return Outcome(status=check.status, message=message, check=check, inventory_update=update)

    def _elder_sanction(self, state: "GameState", turn: int) -> InventoryUpdate | None:
        """Complete the opening quest if it is active; returns its rewards"""
        quest_id = self.config.story.opening_quest
        definition = self.config.get_quest(quest_id)
        if definition is None:
            raise ConfigIntegrityError(f"Unknown quest id '{quest_id}'")
        if self.quests.get(state, quest_id).status != QuestStatus.ACTIVE:
            return None

        self.quests.complete(state, quest_id, turn)
        return InventoryUpdate(add=[item for item in definition.reward_items if not state.has_item(item)])
