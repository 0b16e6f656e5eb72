"""
World loader - Load and validate YAML world files
"""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from adventure.errors import ConfigIntegrityError
from adventure.models.world import (
    EncounterDefinition,
    NPCDefinition,
    QuestDefinition,
    Room,
    WorldConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_WORLD_ID = "village"


class WorldLoader:
    """Loads game worlds from YAML files"""

    def __init__(self, worlds_dir: str | Path | None = None):
        """Initialize with worlds directory path"""
        if worlds_dir is None:
            # Default to the worlds bundled with the package
            worlds_dir = Path(__file__).parent.parent / "worlds"
        self.worlds_dir = Path(worlds_dir)

    def list_worlds(self) -> list[dict]:
        """List available worlds with metadata"""
        worlds = []

        if not self.worlds_dir.exists():
            return worlds

        for world_path in sorted(self.worlds_dir.iterdir()):
            world_yaml = world_path / "world.yaml"
            if not world_yaml.is_file():
                continue
            try:
                data = self._read_yaml(world_yaml) or {}
            except yaml.YAMLError as e:
                logger.warning(f"Skipping world '{world_path.name}': {e}")
                continue
            premise = str(data.get("premise", "")).strip()
            worlds.append({
                "id": world_path.name,
                "name": data.get("name", world_path.name),
                "description": premise[:200] + "..." if len(premise) > 200 else premise,
            })

        return worlds

    def load_world(self, world_id: str = DEFAULT_WORLD_ID, validate: bool = True) -> WorldConfig:
        """
        Load a complete world from YAML files.

        Args:
            world_id: The world identifier (folder name in worlds/)
            validate: Whether to run integrity checks on load (default True)

        Returns:
            Immutable WorldConfig

        Raises:
            FileNotFoundError: If world doesn't exist
            ConfigIntegrityError: If the files are malformed or validation fails
        """
        world_path = self.worlds_dir / world_id

        if not (world_path / "world.yaml").exists():
            raise FileNotFoundError(f"World '{world_id}' not found at {world_path}")

        data = self._read_yaml(world_path / "world.yaml") or {}

        try:
            config = WorldConfig(
                name=data.get("name", world_id),
                premise=str(data.get("premise", "")).strip(),
                gameplay=data.get("gameplay", {}),
                systems=data.get("systems", {}),
                story=data.get("story", {}),
                narration=data.get("narration", {}),
                rooms=self._load_rooms(world_path / "rooms.yaml"),
                quests=self._load_quests(world_path / "quests.yaml"),
                encounters=self._load_encounters(world_path / "encounters.yaml"),
                npcs=self._load_npcs(world_path / "npcs.yaml"),
            )
        except ValidationError as e:
            raise ConfigIntegrityError(
                f"World '{world_id}' is malformed: {e.error_count()} schema error(s)",
                errors=[f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()],
            ) from e

        # Validate world if requested
        if validate:
            from adventure.engine.validator import WorldValidator
            result = WorldValidator(config, world_id).validate()

            if not result.is_valid:
                error_list = "\n  - ".join(result.errors)
                raise ConfigIntegrityError(
                    f"World '{world_id}' validation failed with {len(result.errors)} error(s):\n  - {error_list}",
                    errors=list(result.errors),
                )

        logger.info(
            f"Loaded world '{world_id}': {len(config.rooms)} rooms, {len(config.quests)} quests, "
            f"{len(config.encounters)} encounters, {len(config.npcs)} NPCs"
        )
        return config

    @staticmethod
    def _read_yaml(path: Path):
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)

    def _read_optional(self, path: Path):
        if not path.exists():
            return None
        return self._read_yaml(path)

    def _load_rooms(self, path: Path) -> dict[str, Room]:
        """Load rooms.yaml"""
        data = self._read_optional(path) or {}
        return {
            room_id: Room(
                id=room_id,
                name=room_data.get("name", room_id),
                description=str(room_data.get("description", "")).strip(),
                exits=room_data.get("exits", {}),
                items=room_data.get("items", []),
            )
            for room_id, room_data in data.items()
        }

    def _load_quests(self, path: Path) -> tuple[QuestDefinition, ...]:
        """Load quests.yaml (a list, order preserved)"""
        data = self._read_optional(path) or []
        return tuple(QuestDefinition(**quest_data) for quest_data in data)

    def _load_encounters(self, path: Path) -> dict[str, EncounterDefinition]:
        """Load encounters.yaml"""
        data = self._read_optional(path) or {}
        return {
            encounter_id: EncounterDefinition(id=encounter_id, **encounter_data)
            for encounter_id, encounter_data in data.items()
        }

    def _load_npcs(self, path: Path) -> dict[str, NPCDefinition]:
        """Load npcs.yaml"""
        data = self._read_optional(path) or {}
        return {
            npc_id: NPCDefinition(id=npc_id, **npc_data)
            for npc_id, npc_data in data.items()
        }
