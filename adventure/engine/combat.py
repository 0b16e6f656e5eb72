"""
Combat resolver - Attack/defend against the active encounter in a room.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from adventure.engine.checks import run_check
from adventure.engine.progression import adjust_faction
from adventure.errors import ConfigIntegrityError
from adventure.models.action import CombatMode
from adventure.models.turn import CheckStatus, CombatReport, InventoryUpdate, Outcome

if TYPE_CHECKING:
    from adventure.models.game import EncounterState, GameState
    from adventure.models.world import WorldConfig

logger = logging.getLogger(__name__)

ATTACK_SKILL = "combat"
DEFEND_SKILL = "stealth"


def active_encounter(state: "GameState", room_id: str) -> "EncounterState | None":
    """First undefeated encounter bound to the room"""
    for encounter in state.world_state.encounters.values():
        if encounter.room_id == room_id and not encounter.defeated:
            return encounter
    return None


class CombatResolver:
    """Resolves one exchange of blows.

    The player's damage depends on mode and check status; if the encounter
    survives it counters, if not it drops its loot and shifts reputation.
    """

    def __init__(self, config: "WorldConfig"):
        self.config = config
        self.settings = config.systems.combat

    def player_damage(self, status: CheckStatus, mode: CombatMode) -> int:
        damage = self.settings.defend_damage if mode == CombatMode.DEFEND else self.settings.base_damage
        if status == CheckStatus.PARTIAL:
            damage += 1
        elif status == CheckStatus.SUCCESS:
            damage += self.settings.critical_bonus
        else:
            damage = max(1, damage - 1)
        return damage

    def counter_damage(self, status: CheckStatus, mode: CombatMode) -> int:
        counter = self.settings.enemy_counter_damage.for_status(status.value)
        if mode == CombatMode.DEFEND:
            counter = max(1, counter - 1)
        return counter

    def resolve(self, state: "GameState", mode: CombatMode | None) -> Outcome:
        """Resolve combat in the player's current room"""
        mode = mode or CombatMode.ATTACK
        encounter = active_encounter(state, state.current_room)
        if encounter is None:
            return Outcome(status=CheckStatus.FAIL, message="There is no immediate threat to fight here.")

        definition = self.config.get_encounter(encounter.id)
        if definition is None:
            raise ConfigIntegrityError(f"Unknown encounter id '{encounter.id}'")

        if mode == CombatMode.DEFEND:
            skill, difficulty = DEFEND_SKILL, definition.difficulty - 1
        else:
            skill, difficulty = ATTACK_SKILL, definition.difficulty

        turn = state.world_state.time.turn
        check = run_check(
            state.player.skills.get(skill, self.config.systems.initial_skill_score),
            difficulty,
            f"{encounter.id}:{mode.value}:{turn}",
            turn,
            state.moves,
            skill=skill,
        )

        damage = self.player_damage(check.status, mode)
        encounter.apply_damage(damage)

        counter = 0
        drops: list[str] = []
        if encounter.current_hp <= 0:
            encounter.mark_defeated()
            drops = list(definition.drops)
            for faction_id, delta in definition.faction_impact.items():
                adjust_faction(state, self.config, faction_id, delta)
            message = f"You defeat {encounter.name} and secure the area."
            logger.info(f"Encounter defeated: {encounter.id}")
        else:
            counter = self.counter_damage(check.status, mode)
            min_health = self.config.systems.player.min_health
            state.player.set_health(state.player.health - counter, min_health)
            encounter.last_outcome = check.status.value
            message = (
                f"You strike {encounter.name} for {damage} damage. "
                f"It remains at {encounter.current_hp}/{encounter.max_hp} HP and counters for {counter}."
            )
            if state.player.health == min_health:
                message += " You are barely standing."

        return Outcome(
            status=CheckStatus.SUCCESS if encounter.defeated else check.status,
            message=message,
            check=check,
            inventory_update=InventoryUpdate(add=drops),
            combat=CombatReport(
                encounter_id=encounter.id,
                defeated=encounter.defeated,
                damage_to_enemy=damage,
                counter_damage=counter,
                enemy_hp=encounter.current_hp,
                enemy_max_hp=encounter.max_hp,
            ),
        )
