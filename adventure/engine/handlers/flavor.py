"""
Flavor handlers - Actions with little or no rules weight.

WAIT always succeeds. CUSTOM is free text for the narration layer and
never has a deterministic effect: success with an empty message. UNKNOWN
input is treated as improvisation (a perception check) unless it reads
as a question.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from adventure.engine.handlers.base import ActionHandler
from adventure.models.turn import CheckStatus, Outcome

if TYPE_CHECKING:
    from adventure.models.action import ParsedAction
    from adventure.models.game import GameState

QUESTION_PATTERN = re.compile(r"^(who|what|where|when|why|how|can|is|are)\b", re.IGNORECASE)


class WaitHandler(ActionHandler):
    def handle(self, action: "ParsedAction", state: "GameState") -> Outcome:
        return Outcome(
            status=CheckStatus.SUCCESS,
            message="You pause, reassess your surroundings, and steady your focus.",
        )


class CustomHandler(ActionHandler):
    def handle(self, action: "ParsedAction", state: "GameState") -> Outcome:
        # Empty message: the narrator answers action.raw on its own
        return Outcome(status=CheckStatus.SUCCESS, message="")


class UnknownHandler(ActionHandler):
    def handle(self, action: "ParsedAction", state: "GameState") -> Outcome:
        if QUESTION_PATTERN.match(action.raw) or action.raw.endswith("?"):
            return Outcome(status=CheckStatus.SUCCESS, message="")

        check = self.skill_check(
            state,
            "perception",
            self.difficulty.normal,
            f"{state.current_room}:improvise:{action.raw}",
        )
        return Outcome(
            status=check.status,
            message="You improvise and probe the environment for a useful opening.",
            check=check,
        )
