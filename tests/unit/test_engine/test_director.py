"""Unit tests for PacingDirector.

Tests cover:
- Tension deltas and outcome penalties
- Beat thresholds
- Style derivation from action counts and check tallies
- Tension clamping
"""

import pytest

from adventure.engine.director import PacingDirector
from adventure.models.action import ActionType
from adventure.models.turn import CheckStatus, Outcome


class TestTension:
    """Tests for tension movement."""

    @pytest.fixture
    def director(self, world_config) -> PacingDirector:
        return PacingDirector(world_config)

    @pytest.mark.parametrize(
        "action_type,status,delta",
        [
            (ActionType.START, CheckStatus.SUCCESS, 0),
            (ActionType.MOVE, CheckStatus.SUCCESS, 4),
            (ActionType.COMBAT, CheckStatus.FAIL, 9),
            (ActionType.TALK, CheckStatus.PARTIAL, -1),
            (ActionType.WAIT, CheckStatus.SUCCESS, -4),
            (ActionType.QUEST, CheckStatus.SUCCESS, 8),
            (ActionType.CUSTOM, CheckStatus.SUCCESS, 0),
            (ActionType.UNKNOWN, CheckStatus.FAIL, 4),
        ],
    )
    def test_delta(self, director, action_type, status, delta) -> None:
        assert director.tension_delta(action_type, status) == delta

    def test_update_applies_delta(self, director, game_state) -> None:
        director.update(game_state, ActionType.MOVE, Outcome(status=CheckStatus.SUCCESS))
        assert game_state.world_state.director.tension == 29

    def test_tension_clamped_high(self, director, game_state) -> None:
        game_state.world_state.director.tension = 98
        director.update(game_state, ActionType.QUEST, Outcome(status=CheckStatus.FAIL))
        assert game_state.world_state.director.tension == 100

    def test_tension_clamped_low(self, director, game_state) -> None:
        game_state.world_state.director.tension = 2
        director.update(game_state, ActionType.WAIT, Outcome(status=CheckStatus.SUCCESS))
        assert game_state.world_state.director.tension == 0


class TestBeatAndStyle:
    """Tests for beat selection and style derivation."""

    @pytest.fixture
    def director(self, world_config) -> PacingDirector:
        return PacingDirector(world_config)

    @pytest.mark.parametrize(
        "tension,beat",
        [
            (100, "reveal"),
            (80, "reveal"),
            (79, "threat"),
            (60, "threat"),
            (59, "discovery"),
            (40, "discovery"),
            (39, "setback"),
            (20, "setback"),
            (19, "recovery"),
            (0, "recovery"),
        ],
    )
    def test_beat_thresholds(self, director, tension, beat) -> None:
        assert director.select_beat(tension) == beat

    def test_grim_at_high_tension(self, director, game_state) -> None:
        assert director.select_style(game_state, 75) == "grim"

    def test_grim_when_fighting_more_than_talking(self, director, game_state) -> None:
        game_state.world_state.metrics.action_counts["combat"] = 2
        game_state.world_state.metrics.action_counts["talk"] = 1
        assert director.select_style(game_state, 10) == "grim"

    def test_mystic_when_exploring(self, director, game_state) -> None:
        counts = game_state.world_state.metrics.action_counts
        counts["investigate"] = 3
        counts["move"] = 2
        assert director.select_style(game_state, 10) == "mystic"

    def test_heroic_when_passing(self, director, game_state) -> None:
        game_state.world_state.metrics.checks.passed = 2
        game_state.world_state.metrics.checks.failed = 1
        assert director.select_style(game_state, 10) == "heroic"

    def test_default_style(self, director, game_state) -> None:
        assert director.select_style(game_state, 10) == "balanced"

    def test_update_sets_beat_and_style(self, director, game_state) -> None:
        """Update writes the beat for the new tension."""
        game_state.world_state.director.tension = 55
        director.update(game_state, ActionType.COMBAT, Outcome(status=CheckStatus.SUCCESS))

        state = game_state.world_state.director
        assert state.tension == 61
        assert state.last_beat == "threat"
        assert state.style == "balanced"
