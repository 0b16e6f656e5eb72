"""
Turn processor - The single entry point of the rules engine.

One call resolves one player action, synchronously:
    1. Parse: ActionParser turns raw text into a ParsedAction
    2. Dispatch: the handler for the action type produces an Outcome
    3. Inventory: add (de-duplicated), then remove
    4. Clock: moves and turn advance, phase cycles
    5. Progress: quest hooks, director, metrics
    6. Menu: available actions for the (possibly new) room

Player mistakes come back as failed outcomes. A reference to a room,
encounter or quest the world config does not know raises
ConfigIntegrityError, because it means the static data is corrupt.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from adventure.engine.combat import active_encounter
from adventure.engine.director import PacingDirector
from adventure.engine.handlers import (
    ActionHandler,
    CombatHandler,
    CustomHandler,
    InvestigateHandler,
    MovementHandler,
    QuestHandler,
    StartHandler,
    TakeHandler,
    TalkHandler,
    UnknownHandler,
    UseHandler,
    WaitHandler,
)
from adventure.engine.menu import available_actions
from adventure.engine.metrics import record_turn
from adventure.engine.parser import ActionParser
from adventure.engine.progression import QuestTracker
from adventure.errors import ConfigIntegrityError
from adventure.models.action import ActionType
from adventure.models.turn import (
    DirectorSnapshot,
    EncounterSnapshot,
    PlayerSnapshot,
    RoomSnapshot,
    TurnResult,
)

if TYPE_CHECKING:
    from adventure.models.game import GameState
    from adventure.models.world import WorldConfig

logger = logging.getLogger(__name__)


class TurnProcessor:
    """Resolves turns against one world config.

    The processor holds no per-game state; one instance can serve any
    number of sessions, each passing in its own GameState.

    Example:
        >>> processor = TurnProcessor(config)
        >>> result = processor.resolve_turn(state, "Talk to Village Elder")
        >>> result.outcome.status
        <CheckStatus.SUCCESS: 'success'>
    """

    def __init__(self, config: "WorldConfig"):
        self.config = config
        self.parser = ActionParser()
        self.quests = QuestTracker(config)
        self.director = PacingDirector(config)

        self._handlers: dict[ActionType, ActionHandler] = {
            ActionType.START: StartHandler(config, self.quests),
            ActionType.MOVE: MovementHandler(config, self.quests),
            ActionType.TAKE: TakeHandler(config, self.quests),
            ActionType.COMBAT: CombatHandler(config, self.quests),
            ActionType.INVESTIGATE: InvestigateHandler(config, self.quests),
            ActionType.TALK: TalkHandler(config, self.quests),
            ActionType.USE: UseHandler(config, self.quests),
            ActionType.WAIT: WaitHandler(config, self.quests),
            ActionType.QUEST: QuestHandler(config, self.quests),
            ActionType.CUSTOM: CustomHandler(config, self.quests),
            ActionType.UNKNOWN: UnknownHandler(config, self.quests),
        }

    def resolve_turn(self, state: "GameState", raw_input: str | None, custom: bool = False) -> TurnResult:
        """Resolve one action, mutating ``state`` in place.

        Args:
            state: The session's game state
            raw_input: Menu label or typed text
            custom: True for text submitted through the free-text prompt

        Returns:
            TurnResult summarizing the committed turn

        Raises:
            ConfigIntegrityError: If state references ids the config lacks
        """
        action = self.parser.parse(raw_input, state, custom=custom)
        outcome = self._handlers[action.action_type].handle(action, state)
        state.apply_inventory_update(outcome.inventory_update.add, outcome.inventory_update.remove)

        self._advance_clock(state)

        self.quests.apply_turn_hooks(state, action, outcome)
        self.director.update(state, action.action_type, outcome)
        record_turn(state, action, outcome)

        result = self._build_result(state, action, outcome)
        logger.info(
            f"Turn {result.turn} ({result.phase}): {action.action_type.value} "
            f"-> {outcome.status.value} in '{state.current_room}'"
        )
        return result

    def _advance_clock(self, state: "GameState") -> None:
        phases = self.config.gameplay.time_phases
        clock = state.world_state.time
        state.moves += 1
        clock.turn += 1
        clock.phase = phases[clock.turn % len(phases)]

    def _build_result(self, state: "GameState", action, outcome) -> TurnResult:
        room = self.config.get_room(state.current_room)
        if room is None:
            raise ConfigIntegrityError(f"Unknown room id '{state.current_room}'")

        encounter = active_encounter(state, room.id)
        director = state.world_state.director

        return TurnResult(
            action=action,
            outcome=outcome,
            room=RoomSnapshot(id=room.id, name=room.name, description=room.description),
            items_here=list(state.room_items(room.id)),
            actions=available_actions(state, self.config),
            director=DirectorSnapshot(
                style=director.style,
                tension=director.tension,
                last_beat=director.last_beat,
            ),
            game_over=outcome.game_over,
            turn=state.world_state.time.turn,
            phase=state.world_state.time.phase,
            player=PlayerSnapshot(health=state.player.health, max_health=state.player.max_health),
            active_encounter=(
                EncounterSnapshot(
                    id=encounter.id,
                    name=encounter.name,
                    current_hp=encounter.current_hp,
                    max_hp=encounter.max_hp,
                )
                if encounter is not None
                else None
            ),
        )
