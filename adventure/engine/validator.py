"""
World Validator - Validates integrity of a loaded world config

Checks:
- Gameplay settings: action count bounds, initial room, time phases
- Room references: every exit points at a known room
- Quest references: rooms, unlock dependencies, required encounters
- Quest unlock graph: no cycles
- Encounter references: rooms, positive max HP, known factions
- NPC references: rooms and factions
- Story hooks: every id the progression rules use resolves
- Orphan detection: rooms nothing leads to (warnings)
"""

import sys
from dataclasses import dataclass, field
from pathlib import Path

from adventure.models.world import WorldConfig


@dataclass
class ValidationResult:
    """Result of world validation"""

    world_id: str
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """World is valid if there are no errors (warnings are OK)"""
        return len(self.errors) == 0

    def add_error(self, message: str):
        self.errors.append(message)

    def add_warning(self, message: str):
        self.warnings.append(message)

    def report(self) -> str:
        """Plain-text summary for the command line"""
        lines = [f"World '{self.world_id}': {len(self.errors)} error(s), {len(self.warnings)} warning(s)"]
        lines += [f"  error: {error}" for error in self.errors]
        lines += [f"  warning: {warning}" for warning in self.warnings]
        lines.append("World is valid" if self.is_valid else "World is invalid")
        return "\n".join(lines)


class WorldValidator:
    """Validates world config integrity"""

    def __init__(self, config: WorldConfig, world_id: str):
        self.config = config
        self.world_id = world_id
        self.result = ValidationResult(world_id=world_id)

    def validate(self) -> ValidationResult:
        """Run all validation checks"""
        self._validate_gameplay()
        self._validate_rooms()
        self._validate_quests()
        self._validate_encounters()
        self._validate_npcs()
        self._validate_story_hooks()
        self._detect_unreachable_rooms()

        return self.result

    def _validate_gameplay(self):
        gameplay = self.config.gameplay
        bounds = gameplay.action_count
        if bounds.min < 1 or bounds.min > bounds.max:
            self.result.add_error(
                f"Invalid action_count bounds: min={bounds.min}, max={bounds.max}"
            )

        if gameplay.initial_room not in self.config.rooms:
            self.result.add_error(
                f"gameplay.initial_room '{gameplay.initial_room}' does not exist in rooms"
            )

        if not gameplay.time_phases:
            self.result.add_error("gameplay.time_phases must not be empty")

        systems = self.config.systems
        if systems.default_director_style not in systems.director_styles:
            self.result.add_error(
                f"Default director style '{systems.default_director_style}' is not a known style"
            )
        if len(systems.pacing.beats) != 5:
            self.result.add_error(
                f"pacing.beats must list exactly 5 beats, got {len(systems.pacing.beats)}"
            )
        if systems.player.min_health > systems.player.max_health:
            self.result.add_error("player.min_health exceeds player.max_health")

    def _validate_rooms(self):
        """Check that every exit leads somewhere real"""
        for room_id, room in self.config.rooms.items():
            for direction, dest_id in room.exits.items():
                if dest_id not in self.config.rooms:
                    self.result.add_error(
                        f"Room '{room_id}' has invalid exit '{direction}' -> '{dest_id}'"
                    )

    def _validate_quests(self):
        quest_ids = {quest.id for quest in self.config.quests}
        encounter_ids = set(self.config.encounters)

        for quest in self.config.quests:
            if quest.room_id not in self.config.rooms:
                self.result.add_error(
                    f"Quest '{quest.id}' references unknown room '{quest.room_id}'"
                )
            if quest.unlocks_when_completed and quest.unlocks_when_completed not in quest_ids:
                self.result.add_error(
                    f"Quest '{quest.id}' unlock dependency '{quest.unlocks_when_completed}' does not exist"
                )
            if quest.required_encounter_defeated and quest.required_encounter_defeated not in encounter_ids:
                self.result.add_error(
                    f"Quest '{quest.id}' references unknown encounter '{quest.required_encounter_defeated}'"
                )
            if quest.initial_status not in ("locked", "active", "completed"):
                self.result.add_error(
                    f"Quest '{quest.id}' has invalid initial_status '{quest.initial_status}'"
                )

        self._detect_unlock_cycles(quest_ids)

    def _detect_unlock_cycles(self, quest_ids: set[str]):
        """Each quest waits on at most one other, so a cycle is a closed chain"""
        prerequisite = {
            quest.id: quest.unlocks_when_completed
            for quest in self.config.quests
            if quest.unlocks_when_completed in quest_ids
        }
        reported: set[frozenset[str]] = set()
        for quest_id in prerequisite:
            chain: list[str] = []
            current = quest_id
            while current in prerequisite and current not in chain:
                chain.append(current)
                current = prerequisite[current]
            if current not in chain:
                continue
            cycle = chain[chain.index(current):]
            if frozenset(cycle) in reported:
                continue
            reported.add(frozenset(cycle))
            self.result.add_error(f"Quest unlock cycle: {' -> '.join(cycle + [current])}")

    def _validate_encounters(self):
        factions = set(self.config.systems.factions)
        for encounter_id, encounter in self.config.encounters.items():
            if encounter.room_id not in self.config.rooms:
                self.result.add_error(
                    f"Encounter '{encounter_id}' references unknown room '{encounter.room_id}'"
                )
            if encounter.max_hp < 1:
                self.result.add_error(f"Encounter '{encounter_id}' has invalid max_hp")
            for faction_id in encounter.faction_impact:
                if faction_id not in factions:
                    self.result.add_error(
                        f"Encounter '{encounter_id}' impacts unknown faction '{faction_id}'"
                    )

    def _validate_npcs(self):
        factions = set(self.config.systems.factions)
        for npc_id, npc in self.config.npcs.items():
            if npc.room_id not in self.config.rooms:
                self.result.add_error(
                    f"NPC '{npc_id}' references unknown room '{npc.room_id}'"
                )
            if npc.faction not in factions:
                self.result.add_error(
                    f"NPC '{npc_id}' belongs to unknown faction '{npc.faction}'"
                )

    def _validate_story_hooks(self):
        story = self.config.story
        quest_ids = {quest.id for quest in self.config.quests}

        for name in ("opening_quest", "amulet_quest", "treasure_quest"):
            value = getattr(story, name)
            if value not in quest_ids:
                self.result.add_error(f"story.{name} '{value}' is not a known quest")

        for name in ("guardian_encounter", "sentinel_encounter"):
            value = getattr(story, name)
            if value not in self.config.encounters:
                self.result.add_error(f"story.{name} '{value}' is not a known encounter")

        if story.elder_npc not in self.config.npcs:
            self.result.add_error(f"story.elder_npc '{story.elder_npc}' is not a known NPC")
        if story.seal_room not in self.config.rooms:
            self.result.add_error(f"story.seal_room '{story.seal_room}' is not a known room")

    def _detect_unreachable_rooms(self):
        """Rooms no exit leads to (warnings only)"""
        targets = {dest for room in self.config.rooms.values() for dest in room.exits.values()}
        targets.add(self.config.gameplay.initial_room)
        for room_id in self.config.rooms:
            if room_id not in targets:
                self.result.add_warning(f"Room '{room_id}' is unreachable")


def validate_world(
    world_id: str, worlds_dir: str | Path | None = None
) -> ValidationResult:
    """
    Validate a world definition for integrity.

    Args:
        world_id: The world identifier (folder name in worlds/)
        worlds_dir: Optional path to worlds directory

    Returns:
        ValidationResult with errors and warnings
    """
    from adventure.engine.world import WorldLoader

    config = WorldLoader(worlds_dir).load_world(world_id, validate=False)

    validator = WorldValidator(config, world_id)
    return validator.validate()


def main():
    """CLI entry point for world validation"""
    from adventure.engine.world import WorldLoader
    from adventure.errors import ConfigIntegrityError

    if len(sys.argv) < 2:
        print("Usage: python -m adventure.engine.validator <world_id>")
        worlds = WorldLoader().list_worlds()
        if worlds:
            print("Available worlds: " + ", ".join(w["id"] for w in worlds))
        sys.exit(1)

    world_id = sys.argv[1]

    try:
        result = validate_world(world_id)
    except (FileNotFoundError, ConfigIntegrityError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(result.report())
    sys.exit(0 if result.is_valid else 1)


if __name__ == "__main__":
    main()
