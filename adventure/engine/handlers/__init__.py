"""
Action handlers for the rules engine.

One handler per action type. Each handler exposes:
    - handle(): resolve the action against the state, returning an Outcome

Example:
    >>> handler = TakeHandler(config, QuestTracker(config))
    >>> outcome = handler.handle(action, state)
    >>> outcome.inventory_update.add
    ['torch']
"""

from adventure.engine.handlers.base import ActionHandler
from adventure.engine.handlers.movement import StartHandler, MovementHandler
from adventure.engine.handlers.take import TakeHandler
from adventure.engine.handlers.combat import CombatHandler
from adventure.engine.handlers.investigate import InvestigateHandler
from adventure.engine.handlers.talk import TalkHandler
from adventure.engine.handlers.use import UseHandler
from adventure.engine.handlers.quest import QuestHandler
from adventure.engine.handlers.flavor import WaitHandler, CustomHandler, UnknownHandler

__all__ = [
    "ActionHandler",
    "StartHandler",
    "MovementHandler",
    "TakeHandler",
    "CombatHandler",
    "InvestigateHandler",
    "TalkHandler",
    "UseHandler",
    "QuestHandler",
    "WaitHandler",
    "CustomHandler",
    "UnknownHandler",
]
