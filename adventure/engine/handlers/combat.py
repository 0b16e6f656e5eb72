"""
Combat handler - Thin adapter over CombatResolver.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from adventure.engine.combat import CombatResolver
from adventure.engine.handlers.base import ActionHandler

if TYPE_CHECKING:
    from adventure.engine.progression import QuestTracker
    from adventure.models.action import ParsedAction
    from adventure.models.game import GameState
    from adventure.models.turn import Outcome
    from adventure.models.world import WorldConfig


class CombatHandler(ActionHandler):
    def __init__(self, config: "WorldConfig", quests: "QuestTracker"):
        super().__init__(config, quests)
        self.resolver = CombatResolver(config)

    def handle(self, action: "ParsedAction", state: "GameState") -> "Outcome":
        return self.resolver.resolve(state, action.mode)
