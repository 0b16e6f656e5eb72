"""
Skill checks - Seeded, reproducible d20 rolls.

There is no RNG state anywhere: a roll is a hash of its seed string, the
turn and the move counter, so replaying a turn reproduces its checks.
"""

import logging
import struct

from adventure.models.turn import CheckResult, CheckStatus

logger = logging.getLogger(__name__)

HASH_SEED = 17
HASH_MULTIPLIER = 31
HASH_MODULUS = 1_000_003
DIE_SIDES = 20

# Margin over the difficulty needed for a clean success
SUCCESS_MARGIN = 2


def compute_roll(seed: str, turn: int, moves: int) -> int:
    """Deterministic d20 roll in [1, 20] for ``seed:turn:moves``"""
    value = HASH_SEED
    # UTF-16 code units: astral characters fold as surrogate pairs
    encoded = f"{seed}:{turn}:{moves}".encode("utf-16-le")
    for (unit,) in struct.iter_unpack("<H", encoded):
        value = (value * HASH_MULTIPLIER + unit) % HASH_MODULUS
    return value % DIE_SIDES + 1


def check_status(total: int, difficulty: int) -> CheckStatus:
    if total >= difficulty + SUCCESS_MARGIN:
        return CheckStatus.SUCCESS
    if total >= difficulty:
        return CheckStatus.PARTIAL
    return CheckStatus.FAIL


def run_check(
    skill_score: int,
    difficulty: int,
    seed: str,
    turn: int,
    moves: int,
    skill: str | None = None,
) -> CheckResult:
    """
    Roll against a difficulty.

    Args:
        skill_score: Player's score in the tested skill
        difficulty: Target number (partial at target, success at target + 2)
        seed: Stable identifier of what is being attempted
        turn: World clock turn before this turn resolves
        moves: Move counter before this turn resolves
        skill: Skill name, recorded on the result for display

    Returns:
        CheckResult with roll, total, target and status
    """
    roll = compute_roll(seed, turn, moves)
    total = roll + skill_score
    result = CheckResult(
        skill=skill,
        roll=roll,
        total=total,
        target=difficulty,
        status=check_status(total, difficulty),
    )
    logger.debug(
        f"Check {skill or 'raw'} seed={seed!r} turn={turn} moves={moves}: "
        f"{roll}+{skill_score}={total} vs {difficulty} -> {result.status.value}"
    )
    return result
