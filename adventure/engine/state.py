"""
Game state management - Factory, normalization and snapshots.

create_initial_state() builds a new game from the world config.
normalize_state() rebuilds a schema-valid GameState from any persisted
document, however stale or damaged: missing pieces get factory defaults,
numbers are clamped to their bounds, unknown enum values fall back to the
configured default, and entity maps are reconciled against the config
(ids the config no longer knows are dropped, new ids are added).
It never raises.
"""

import logging
import math
from typing import Any

from adventure.models.game import (
    ACTION_COUNTER_KEYS,
    CheckTally,
    DirectorState,
    EncounterState,
    GameState,
    Metrics,
    NPCState,
    Player,
    QuestState,
    QuestStatus,
    TimeState,
    WorldState,
)
from adventure.models.world import WorldConfig

logger = logging.getLogger(__name__)

# Ceiling for unbounded counters: the largest integer a JSON number holds exactly
MAX_COUNTER = 2**53


# =============================================================================
# Factory
# =============================================================================

def _initial_quests(config: WorldConfig) -> dict[str, QuestState]:
    return {
        quest.id: QuestState(
            id=quest.id,
            title=quest.title,
            description=quest.description,
            status=QuestStatus(quest.initial_status),
            progress=0,
            updated_at_turn=0,
        )
        for quest in config.quests
    }


def _initial_encounter(config: WorldConfig, encounter_id: str) -> EncounterState:
    definition = config.encounters[encounter_id]
    return EncounterState(
        id=definition.id,
        room_id=definition.room_id,
        name=definition.name,
        max_hp=definition.max_hp,
        current_hp=definition.max_hp,
    )


def _initial_npc(config: WorldConfig, npc_id: str) -> NPCState:
    definition = config.npcs[npc_id]
    return NPCState(
        id=definition.id,
        name=definition.name,
        room_id=definition.room_id,
        faction=definition.faction,
    )


def _initial_director(config: WorldConfig) -> DirectorState:
    pacing = config.systems.pacing
    return DirectorState(
        style=config.systems.default_director_style,
        tension=pacing.initial_tension,
        last_beat=pacing.beats[0],
    )


def create_initial_state(config: WorldConfig) -> GameState:
    """Create a new game with every sub-entity at its config default"""
    systems = config.systems
    initial_room = config.gameplay.initial_room

    return GameState(
        current_room=initial_room,
        inventory=[],
        visited_rooms={initial_room},
        moves=0,
        message_history=[],
        is_first_turn=True,
        player=Player(
            health=systems.player.initial_health,
            max_health=systems.player.max_health,
            skills={skill: systems.initial_skill_score for skill in systems.skills},
        ),
        world_state=WorldState(
            room_items={room_id: list(room.items) for room_id, room in config.rooms.items()},
            quests=_initial_quests(config),
            encounters={eid: _initial_encounter(config, eid) for eid in config.encounters},
            factions={faction: 0 for faction in systems.factions},
            npcs={npc_id: _initial_npc(config, npc_id) for npc_id in config.npcs},
            time=TimeState(turn=0, phase=config.gameplay.time_phases[0]),
            director=_initial_director(config),
            metrics=Metrics(),
        ),
    )


# =============================================================================
# Normalization
# =============================================================================

def _number(value: Any) -> int | float | None:
    """Coerce to a finite number, or None"""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None


def _mapping(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _str_list(value: Any) -> list[str] | None:
    if isinstance(value, (list, tuple, set, frozenset)):
        return [item for item in value if isinstance(item, str)]
    return None


class StateNormalizer:
    """Repairs persisted documents into valid GameState values.

    Each repair is recorded so one warning can summarize what changed.
    """

    def __init__(self, config: WorldConfig):
        self.config = config
        self.defaults = create_initial_state(config)
        self.repairs: list[str] = []

    def normalize(self, document: Any) -> GameState:
        if isinstance(document, GameState):
            document = document.model_dump()
        if not isinstance(document, dict):
            if document is not None:
                self.repairs.append(f"document of type {type(document).__name__} replaced")
            return create_initial_state(self.config)

        world = _mapping(document.get("world_state"))
        current_room = self._room_id(document.get("current_room"))

        state = GameState(
            current_room=current_room,
            inventory=self._inventory(document.get("inventory")),
            visited_rooms=self._visited_rooms(document.get("visited_rooms"), current_room),
            moves=self._int(document.get("moves"), 0, 0, None, "moves"),
            message_history=self._message_history(document.get("message_history")),
            is_first_turn=bool(document.get("is_first_turn", False)),
            player=self._player(document.get("player")),
            world_state=WorldState(
                room_items=self._room_items(world.get("room_items")),
                quests=self._quests(world.get("quests")),
                encounters=self._encounters(world.get("encounters")),
                factions=self._factions(world.get("factions")),
                npcs=self._npcs(world.get("npcs")),
                time=self._time(world.get("time")),
                director=self._director(world.get("director")),
                metrics=self._metrics(world.get("metrics")),
            ),
        )

        if self.repairs:
            logger.warning(
                f"Normalized persisted state with {len(self.repairs)} repair(s): "
                + "; ".join(self.repairs[:10])
            )
        return state

    # -- scalars --------------------------------------------------------------

    def _int(self, value: Any, default: int, low: int | None, high: int | None, label: str) -> int:
        number = _number(value)
        if number is None:
            if value is not None:
                self.repairs.append(f"{label} reset to {default}")
            return default
        result = int(round(number))
        if low is not None and result < low:
            self.repairs.append(f"{label} clamped to {low}")
            result = low
        high = MAX_COUNTER if high is None else high
        if result > high:
            self.repairs.append(f"{label} clamped to {high}")
            result = high
        return result

    def _choice(self, value: Any, allowed, default: str, label: str) -> str:
        if isinstance(value, str) and value in allowed:
            return value
        if value is not None:
            self.repairs.append(f"{label} '{value}' replaced with '{default}'")
        return default

    # -- top level ------------------------------------------------------------

    def _room_id(self, value: Any) -> str:
        return self._choice(value, self.config.rooms, self.config.gameplay.initial_room, "current_room")

    def _inventory(self, value: Any) -> list[str]:
        items = _str_list(value) or []
        return list(dict.fromkeys(items))

    def _visited_rooms(self, value: Any, current_room: str) -> set[str]:
        rooms = {room for room in (_str_list(value) or []) if room in self.config.rooms}
        if not rooms:
            rooms = {self.config.gameplay.initial_room}
        rooms.add(current_room)
        return rooms

    def _message_history(self, value: Any) -> list[dict[str, str]]:
        if not isinstance(value, list):
            return []
        return [
            {"role": entry["role"], "content": entry["content"]}
            for entry in value
            if isinstance(entry, dict)
            and isinstance(entry.get("role"), str)
            and isinstance(entry.get("content"), str)
        ]

    def _player(self, value: Any) -> Player:
        data = _mapping(value)
        settings = self.config.systems.player
        max_health = self._int(
            data.get("max_health"), settings.max_health, settings.min_health, settings.max_health,
            "player.max_health",
        )
        health = self._int(
            data.get("health"), min(settings.initial_health, max_health), settings.min_health, max_health,
            "player.health",
        )
        return Player(health=health, max_health=max_health, skills=self._skills(data.get("skills")))

    def _skills(self, value: Any) -> dict[str, int]:
        data = _mapping(value)
        systems = self.config.systems
        bounds = systems.skill_bounds
        return {
            skill: self._int(data.get(skill), systems.initial_skill_score, bounds.min, bounds.max, f"skill {skill}")
            for skill in systems.skills
        }

    # -- world state ----------------------------------------------------------

    def _room_items(self, value: Any) -> dict[str, list[str]]:
        data = _mapping(value)
        result = {}
        for room_id, default_items in self.defaults.world_state.room_items.items():
            items = _str_list(data.get(room_id))
            result[room_id] = items if items is not None else list(default_items)
        return result

    def _quests(self, value: Any) -> dict[str, QuestState]:
        data = _mapping(value)
        result = {}
        for quest_id, default in self.defaults.world_state.quests.items():
            existing = _mapping(data.get(quest_id))
            if quest_id not in data:
                self.repairs.append(f"quest '{quest_id}' added")
            status = existing.get("status", default.status.value)
            if isinstance(status, QuestStatus):
                status = status.value
            result[quest_id] = QuestState(
                id=quest_id,
                title=default.title,
                description=default.description,
                status=QuestStatus(
                    self._choice(status, [s.value for s in QuestStatus], default.status.value, f"quest {quest_id} status")
                ),
                progress=self._int(existing.get("progress"), 0, 0, 100, f"quest {quest_id} progress"),
                updated_at_turn=self._int(existing.get("updated_at_turn"), 0, 0, None, f"quest {quest_id} turn"),
            )
        self._note_dropped("quest", data, result)
        return result

    def _encounters(self, value: Any) -> dict[str, EncounterState]:
        data = _mapping(value)
        result = {}
        for encounter_id, default in self.defaults.world_state.encounters.items():
            existing = _mapping(data.get(encounter_id))
            last_outcome = existing.get("last_outcome")
            result[encounter_id] = EncounterState(
                id=encounter_id,
                room_id=default.room_id,
                name=default.name,
                max_hp=default.max_hp,
                current_hp=self._int(
                    existing.get("current_hp"), default.max_hp, 0, default.max_hp,
                    f"encounter {encounter_id} hp",
                ),
                defeated=bool(existing.get("defeated", False)),
                last_outcome=last_outcome if isinstance(last_outcome, str) else None,
            )
        self._note_dropped("encounter", data, result)
        return result

    def _factions(self, value: Any) -> dict[str, int]:
        data = _mapping(value)
        bounds = self.config.systems.faction_bounds
        return {
            faction: self._int(data.get(faction), 0, bounds.min, bounds.max, f"faction {faction}")
            for faction in self.config.systems.factions
        }

    def _npcs(self, value: Any) -> dict[str, NPCState]:
        data = _mapping(value)
        npc_settings = self.config.systems.npc
        trust = npc_settings.trust_bounds
        result = {}
        for npc_id, default in self.defaults.world_state.npcs.items():
            existing = _mapping(data.get(npc_id))
            memory = _str_list(existing.get("memory")) or []
            result[npc_id] = NPCState(
                id=npc_id,
                name=default.name,
                room_id=default.room_id,
                faction=default.faction,
                trust=self._int(existing.get("trust"), 0, trust.min, trust.max, f"npc {npc_id} trust"),
                memory=memory[-npc_settings.memory_limit:] if npc_settings.memory_limit > 0 else [],
            )
        self._note_dropped("npc", data, result)
        return result

    def _time(self, value: Any) -> TimeState:
        data = _mapping(value)
        phases = self.config.gameplay.time_phases
        return TimeState(
            turn=self._int(data.get("turn"), 0, 0, None, "time.turn"),
            phase=self._choice(data.get("phase"), phases, phases[0], "time.phase"),
        )

    def _director(self, value: Any) -> DirectorState:
        data = _mapping(value)
        systems = self.config.systems
        default = self.defaults.world_state.director
        return DirectorState(
            style=self._choice(data.get("style"), systems.director_styles, default.style, "director.style"),
            tension=self._int(
                data.get("tension"), default.tension,
                systems.pacing.min_tension, systems.pacing.max_tension, "director.tension",
            ),
            last_beat=self._choice(data.get("last_beat"), systems.pacing.beats, default.last_beat, "director.last_beat"),
        )

    def _metrics(self, value: Any) -> Metrics:
        data = _mapping(value)
        counts = _mapping(data.get("action_counts"))
        checks = _mapping(data.get("checks"))

        def counter(source: dict, key: str) -> int:
            return self._int(source.get(key), 0, 0, None, f"metrics.{key}")

        return Metrics(
            action_counts={key: counter(counts, key) for key in ACTION_COUNTER_KEYS},
            checks=CheckTally(
                passed=counter(checks, "passed"),
                failed=counter(checks, "failed"),
                partial=counter(checks, "partial"),
            ),
            reputation_changes=counter(data, "reputation_changes"),
            quest_completions=counter(data, "quest_completions"),
            inventory_peak=counter(data, "inventory_peak"),
            combat_victories=counter(data, "combat_victories"),
            damage_dealt=counter(data, "damage_dealt"),
            damage_taken=counter(data, "damage_taken"),
        )

    def _note_dropped(self, kind: str, data: dict, kept: dict) -> None:
        for entity_id in data:
            if entity_id not in kept:
                self.repairs.append(f"unknown {kind} '{entity_id}' dropped")


def normalize_state(document: Any, config: WorldConfig) -> GameState:
    """Rebuild a valid GameState from a possibly partial or legacy document"""
    return StateNormalizer(config).normalize(document)


def dump_state(state: GameState) -> dict:
    """Plain JSON-ready snapshot (visited_rooms as a sorted list)"""
    return state.model_dump(mode="json")
