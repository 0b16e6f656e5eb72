"""
Start and movement handlers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from adventure.engine.combat import active_encounter
from adventure.engine.handlers.base import ActionHandler
from adventure.models.turn import CheckStatus, Outcome, fail

if TYPE_CHECKING:
    from adventure.models.action import ParsedAction
    from adventure.models.game import GameState

START_MESSAGE = "Your journey begins. Seek the Village Elder to earn passage toward the temple."


class StartHandler(ActionHandler):
    """Forced first turn of a new game"""

    def handle(self, action: "ParsedAction", state: "GameState") -> Outcome:
        state.is_first_turn = False
        return Outcome(status=CheckStatus.SUCCESS, message=START_MESSAGE)


class MovementHandler(ActionHandler):
    """Follows an exit of the current room.

    Example:
        >>> handler.handle(ParsedAction(action_type=ActionType.MOVE, direction="north"), state)
        Outcome(status=<CheckStatus.SUCCESS: 'success'>, message='You move north and enter a new area.', ...)
    """

    def handle(self, action: "ParsedAction", state: "GameState") -> Outcome:
        room = self.require_room(state.current_room)
        destination = room.exits.get(action.direction or "")
        if destination is None:
            return fail(f"No path leads {action.direction} from here.")

        self.require_room(destination)
        state.current_room = destination
        state.visited_rooms.add(destination)

        encounter = active_encounter(state, destination)
        if encounter is not None:
            message = f"You move {action.direction} and confront {encounter.name}."
        else:
            message = f"You move {action.direction} and enter a new area."
        return Outcome(status=CheckStatus.SUCCESS, message=message)
