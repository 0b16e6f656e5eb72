"""
Shared plumbing for action handlers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from adventure.engine.checks import run_check
from adventure.errors import ConfigIntegrityError

if TYPE_CHECKING:
    from adventure.engine.progression import QuestTracker
    from adventure.models.action import ParsedAction
    from adventure.models.game import GameState
    from adventure.models.turn import CheckResult, Outcome
    from adventure.models.world import Room, WorldConfig


class ActionHandler:
    """Base class for handlers.

    A handler resolves one action type against the state and returns an
    Outcome. It may mutate the state (room, encounters, quests, NPCs,
    room items) but never the inventory directly: inventory changes go
    through Outcome.inventory_update so the processor applies them once.
    """

    def __init__(self, config: "WorldConfig", quests: "QuestTracker"):
        self.config = config
        self.quests = quests

    def handle(self, action: "ParsedAction", state: "GameState") -> "Outcome":
        raise NotImplementedError

    def require_room(self, room_id: str) -> "Room":
        room = self.config.get_room(room_id)
        if room is None:
            raise ConfigIntegrityError(f"Unknown room id '{room_id}'")
        return room

    def skill_check(self, state: "GameState", skill: str, difficulty: int, seed: str) -> "CheckResult":
        score = state.player.skills.get(skill, self.config.systems.initial_skill_score)
        return run_check(score, difficulty, seed, state.world_state.time.turn, state.moves, skill=skill)

    @property
    def difficulty(self):
        return self.config.systems.skill_difficulty

    @staticmethod
    def next_turn(state: "GameState") -> int:
        """Turn number this action will be recorded under"""
        return state.world_state.time.turn + 1
