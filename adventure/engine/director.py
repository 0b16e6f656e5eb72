"""
Pacing director - Tension, narrative beat and director style.

Tension moves by a per-action delta plus a penalty for poor outcomes.
The beat is read off a fixed threshold table, and the style is re-derived
every turn from the running action counts and check tallies.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from adventure.models.action import ActionType
from adventure.models.turn import CheckStatus

if TYPE_CHECKING:
    from adventure.models.game import GameState
    from adventure.models.turn import Outcome
    from adventure.models.world import WorldConfig

logger = logging.getLogger(__name__)

TENSION_DELTAS: dict[ActionType, int] = {
    ActionType.START: 0,
    ActionType.MOVE: 4,
    ActionType.TAKE: 3,
    ActionType.COMBAT: 6,
    ActionType.INVESTIGATE: 2,
    ActionType.TALK: -2,
    ActionType.USE: 2,
    ActionType.WAIT: -4,
    ActionType.QUEST: 8,
    ActionType.UNKNOWN: 1,
}

OUTCOME_PENALTIES: dict[CheckStatus, int] = {
    CheckStatus.FAIL: 3,
    CheckStatus.PARTIAL: 1,
    CheckStatus.SUCCESS: 0,
}

# (minimum tension, index into the configured beats), highest first.
# With the default beats: reveal, threat, discovery, setback; recovery below 20.
BEAT_THRESHOLDS: tuple[tuple[int, int], ...] = (
    (80, 4),
    (60, 1),
    (40, 0),
    (20, 2),
)
FALLBACK_BEAT_INDEX = 3

GRIM_TENSION = 75


class PacingDirector:
    """Owns the director's tension, last beat and style"""

    def __init__(self, config: "WorldConfig"):
        self.config = config
        self.pacing = config.systems.pacing

    def tension_delta(self, action_type: ActionType, status: CheckStatus) -> int:
        return TENSION_DELTAS.get(action_type, 0) + OUTCOME_PENALTIES[status]

    def select_beat(self, tension: int) -> str:
        beats = self.pacing.beats
        for threshold, index in BEAT_THRESHOLDS:
            if tension >= threshold:
                return beats[index]
        return beats[FALLBACK_BEAT_INDEX]

    def select_style(self, state: "GameState", tension: int) -> str:
        metrics = state.world_state.metrics
        counts = metrics.action_counts

        def count(action_type: ActionType) -> int:
            return counts.get(action_type.value, 0)

        if tension >= GRIM_TENSION or count(ActionType.COMBAT) > count(ActionType.TALK):
            return "grim"
        explorative = count(ActionType.INVESTIGATE) + count(ActionType.TALK)
        physical = count(ActionType.MOVE) + count(ActionType.TAKE) + count(ActionType.COMBAT)
        if explorative > physical:
            return "mystic"
        if metrics.checks.passed > metrics.checks.failed:
            return "heroic"
        return self.config.systems.default_director_style

    def update(self, state: "GameState", action_type: ActionType, outcome: "Outcome") -> None:
        """Apply this turn's tension change, then pick beat and style.

        Runs before the turn's metrics are recorded, so style reflects
        the counts as of the previous turn.
        """
        director = state.world_state.director
        before = director.tension
        director.set_tension(
            director.tension + self.tension_delta(action_type, outcome.status),
            self.pacing.tension_bounds,
        )
        director.last_beat = self.select_beat(director.tension)
        director.style = self.select_style(state, director.tension)
        logger.debug(
            f"Director: tension {before}->{director.tension}, "
            f"beat={director.last_beat}, style={director.style}"
        )
