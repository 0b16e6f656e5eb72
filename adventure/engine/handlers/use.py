"""
Use handler - Using a held item.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from adventure.engine.handlers.base import ActionHandler
from adventure.engine.parser import resolve_item
from adventure.models.turn import CheckStatus, Outcome, fail

if TYPE_CHECKING:
    from adventure.models.action import ParsedAction
    from adventure.models.game import GameState


class UseHandler(ActionHandler):
    def handle(self, action: "ParsedAction", state: "GameState") -> Outcome:
        item = resolve_item(state.inventory, action.item)
        if item is None:
            return fail("You do not have that item available.")

        story = self.config.story
        if item == story.seal_item and state.current_room == story.seal_room:
            return Outcome(
                status=CheckStatus.SUCCESS,
                message="The Elder Seal resonates with temple wards and steadies your resolve.",
            )

        if item == story.amulet_item and state.current_room == self.quests.treasure_room:
            return Outcome(
                status=CheckStatus.PARTIAL,
                message="The amulet glows near the vault, but the chamber must still be secured.",
            )

        return Outcome(
            status=CheckStatus.PARTIAL,
            message=f"You use the {item}, but it creates no immediate breakthrough.",
        )
