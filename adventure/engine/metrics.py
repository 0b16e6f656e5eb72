"""
Turn metrics - Observational counters recorded after every turn.

Nothing reads these during play except the director, which looks at the
action counts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from adventure.models.action import ActionType
from adventure.models.turn import CheckStatus

if TYPE_CHECKING:
    from adventure.models.action import ParsedAction
    from adventure.models.game import GameState
    from adventure.models.turn import Outcome


def record_turn(state: "GameState", action: "ParsedAction", outcome: "Outcome") -> None:
    metrics = state.world_state.metrics
    counts = metrics.action_counts

    # custom has no counter
    if action.action_type.value in counts:
        counts[action.action_type.value] += 1

    metrics.inventory_peak = max(metrics.inventory_peak, len(state.inventory))

    if outcome.check is not None:
        if outcome.check.status == CheckStatus.SUCCESS:
            metrics.checks.passed += 1
        elif outcome.check.status == CheckStatus.PARTIAL:
            metrics.checks.partial += 1
        else:
            metrics.checks.failed += 1

    if action.action_type == ActionType.QUEST and outcome.status == CheckStatus.SUCCESS:
        metrics.quest_completions += 1

    if outcome.combat is not None:
        metrics.damage_dealt += outcome.combat.damage_to_enemy
        metrics.damage_taken += outcome.combat.counter_damage
        if outcome.combat.defeated:
            metrics.combat_victories += 1
