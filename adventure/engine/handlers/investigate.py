"""
Investigate handler - An easy lore check that surfaces the current objective.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from adventure.engine.combat import active_encounter
from adventure.engine.handlers.base import ActionHandler
from adventure.models.turn import CheckStatus, Outcome

if TYPE_CHECKING:
    from adventure.models.action import ParsedAction
    from adventure.models.game import GameState


class InvestigateHandler(ActionHandler):
    def handle(self, action: "ParsedAction", state: "GameState") -> Outcome:
        room_id = state.current_room
        check = self.skill_check(state, "lore", self.difficulty.easy, f"{room_id}:investigate:{action.raw}")

        if check.status == CheckStatus.FAIL:
            message = "You scan the area but fail to uncover anything useful."
        else:
            message = f"You uncover useful clues. {self.quests.hint(state)}"
            encounter = active_encounter(state, room_id)
            if encounter is not None:
                message += (
                    f" Threat present: {encounter.name} "
                    f"({encounter.current_hp}/{encounter.max_hp} HP)."
                )

        return Outcome(status=check.status, message=message, check=check)
