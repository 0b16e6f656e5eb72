"""
Take handler - Picking items up from the current room.

Ordinary items need a normal perception check. The amulet is gated on
the amulet quest: it must be active, its required items held and its
guardian defeated before the (hard) check is even attempted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from adventure.engine.handlers.base import ActionHandler
from adventure.engine.parser import resolve_item
from adventure.errors import ConfigIntegrityError
from adventure.models.game import QuestStatus
from adventure.models.turn import CheckStatus, InventoryUpdate, Outcome, fail

if TYPE_CHECKING:
    from adventure.models.action import ParsedAction
    from adventure.models.game import GameState

PERCEPTION = "perception"


class TakeHandler(ActionHandler):
    """Handles TAKE actions"""

    def handle(self, action: "ParsedAction", state: "GameState") -> Outcome:
        room_id = state.current_room
        room_items = state.room_items(room_id)
        item = resolve_item(room_items, action.item)
        if item is None:
            return fail("That item is not available here.")

        is_amulet = item == self.config.story.amulet_item
        if is_amulet:
            blocked = self._amulet_gate(state)
            if blocked is not None:
                return blocked

        difficulty = self.difficulty.hard if is_amulet else self.difficulty.normal
        check = self.skill_check(state, PERCEPTION, difficulty, f"{room_id}:{item}:take")
        if check.status == CheckStatus.FAIL:
            return fail(f"You reach for the {item} but fail to secure it.", check=check)

        room_items.remove(item)
        return Outcome(
            status=check.status,
            message=f"You secure the {item} and add it to your inventory.",
            check=check,
            inventory_update=InventoryUpdate(add=[item]),
        )

    def _amulet_gate(self, state: "GameState") -> Outcome | None:
        """Failure outcome if the amulet may not be taken yet"""
        story = self.config.story
        definition = self.config.get_quest(story.amulet_quest)
        if definition is None:
            raise ConfigIntegrityError(f"Unknown quest id '{story.amulet_quest}'")

        if self.quests.get(state, definition.id).status != QuestStatus.ACTIVE:
            return fail("You are not yet sanctioned to recover the amulet.")

        if not all(state.has_item(required) for required in definition.required_items):
            return fail("The temple wards reject you. You need the Elder Seal.")

        guardian_id = definition.required_encounter_defeated
        if guardian_id:
            guardian = state.world_state.encounters.get(guardian_id)
            if guardian is None:
                raise ConfigIntegrityError(f"Unknown encounter id '{guardian_id}'")
            if not guardian.defeated:
                return fail(f"The {guardian.name} still bars your path to the amulet.")

        return None
