"""
World config models - Immutable pydantic models for YAML world definitions
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FrozenModel(BaseModel):
    """Base for static config: built once at load time, never mutated"""

    model_config = ConfigDict(frozen=True)


class Bounds(FrozenModel):
    """Inclusive numeric range"""
    min: int
    max: int

    def clamp(self, value: int) -> int:
        return min(self.max, max(self.min, value))


class ActionCount(FrozenModel):
    """How many actions the menu offers each turn"""
    min: int = 4
    max: int = 6


class GameplaySettings(FrozenModel):
    """Turn-level gameplay settings from world.yaml"""
    initial_room: str
    free_text_label: str = "Ask the Game Master..."
    back_to_menu_label: str = "Back to menu"
    generic_actions: tuple[str, ...] = ()
    time_phases: tuple[str, ...] = ("dawn", "morning", "afternoon", "dusk", "night")
    action_count: ActionCount = Field(default_factory=ActionCount)


class PlayerSettings(FrozenModel):
    max_health: int = 20
    initial_health: int = 20
    min_health: int = 1


class SkillDifficulty(FrozenModel):
    """Difficulty bands for skill checks"""
    easy: int = 8
    normal: int = 11
    hard: int = 14


class CounterDamage(FrozenModel):
    """Damage an undefeated encounter deals back, keyed by check status"""
    success: int = 1
    partial: int = 2
    fail: int = 4

    def for_status(self, status: str) -> int:
        return getattr(self, status, self.partial)


class CombatSettings(FrozenModel):
    base_damage: int = 2
    defend_damage: int = 1
    critical_bonus: int = 2
    enemy_counter_damage: CounterDamage = Field(default_factory=CounterDamage)


class NPCSettings(FrozenModel):
    trust_bounds: Bounds = Field(default_factory=lambda: Bounds(min=-10, max=10))
    memory_limit: int = 8


class PacingSettings(FrozenModel):
    """Tension bounds and the beat vocabulary for the pacing director"""
    min_tension: int = 0
    max_tension: int = 100
    initial_tension: int = 25
    beats: tuple[str, ...] = ("discovery", "threat", "setback", "recovery", "reveal")

    @property
    def tension_bounds(self) -> Bounds:
        return Bounds(min=self.min_tension, max=self.max_tension)


class SystemsSettings(FrozenModel):
    """Tunable rules constants"""
    player: PlayerSettings = Field(default_factory=PlayerSettings)
    skills: tuple[str, ...] = ("combat", "lore", "stealth", "charisma", "perception")
    initial_skill_score: int = 2
    skill_bounds: Bounds = Field(default_factory=lambda: Bounds(min=0, max=10))
    skill_difficulty: SkillDifficulty = Field(default_factory=SkillDifficulty)
    combat: CombatSettings = Field(default_factory=CombatSettings)
    factions: tuple[str, ...] = ()
    faction_bounds: Bounds = Field(default_factory=lambda: Bounds(min=-100, max=100))
    npc: NPCSettings = Field(default_factory=NPCSettings)
    pacing: PacingSettings = Field(default_factory=PacingSettings)
    director_styles: tuple[str, ...] = ("balanced", "grim", "heroic", "mystic")
    default_director_style: str = "balanced"


class StoryHooks(FrozenModel):
    """Ids the hand-written progression rules are keyed on"""
    opening_quest: str
    elder_npc: str
    seal_item: str
    amulet_item: str
    amulet_quest: str
    guardian_encounter: str
    treasure_quest: str
    sentinel_encounter: str
    seal_room: str
    amulet_progress_on_guardian: int = 70
    treasure_progress_on_sentinel: int = 85
    treasure_progress_on_arrival: int = 60


class NarrationSettings(FrozenModel):
    required_keys: tuple[str, ...] = ("description", "message")
    description_max_chars: int = 500
    max_history_messages: int = 40


class Room(FrozenModel):
    """Room definition from rooms.yaml"""
    id: str
    name: str
    description: str = ""
    exits: dict[str, str] = Field(default_factory=dict)  # direction -> room id
    items: tuple[str, ...] = ()  # initial items; live presence is in GameState


class QuestDefinition(FrozenModel):
    """Quest definition from quests.yaml"""
    id: str
    title: str
    description: str = ""
    room_id: str
    item: str | None = None
    required_items: tuple[str, ...] = ()
    required_encounter_defeated: str | None = None
    initial_status: str = "locked"
    reward_items: tuple[str, ...] = ()
    unlocks_when_completed: str | None = None  # prerequisite quest id


class EncounterDefinition(FrozenModel):
    """Encounter definition from encounters.yaml"""
    id: str
    room_id: str
    name: str
    difficulty: int
    max_hp: int
    drops: tuple[str, ...] = ()
    faction_impact: dict[str, int] = Field(default_factory=dict)


class NPCDefinition(FrozenModel):
    """NPC definition from npcs.yaml"""
    id: str
    name: str
    room_id: str
    faction: str


class WorldConfig(FrozenModel):
    """Complete loaded world data"""
    name: str
    premise: str = ""
    gameplay: GameplaySettings
    systems: SystemsSettings = Field(default_factory=SystemsSettings)
    story: StoryHooks
    narration: NarrationSettings = Field(default_factory=NarrationSettings)
    rooms: dict[str, Room]
    quests: tuple[QuestDefinition, ...] = ()  # ordered
    encounters: dict[str, EncounterDefinition] = Field(default_factory=dict)
    npcs: dict[str, NPCDefinition] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_unique_quest_ids(self) -> "WorldConfig":
        ids = [quest.id for quest in self.quests]
        if len(ids) != len(set(ids)):
            raise ValueError("Quest ids must be unique")
        return self

    def get_room(self, room_id: str) -> Room | None:
        """Get a room by ID"""
        return self.rooms.get(room_id)

    def get_quest(self, quest_id: str) -> QuestDefinition | None:
        """Get a quest definition by ID"""
        for quest in self.quests:
            if quest.id == quest_id:
                return quest
        return None

    def get_encounter(self, encounter_id: str) -> EncounterDefinition | None:
        """Get an encounter definition by ID"""
        return self.encounters.get(encounter_id)

    def get_npc(self, npc_id: str) -> NPCDefinition | None:
        """Get an NPC definition by ID"""
        return self.npcs.get(npc_id)

    def dependents_of(self, quest_id: str) -> list[QuestDefinition]:
        """Quests that unlock when the given quest completes"""
        return [q for q in self.quests if q.unlocks_when_completed == quest_id]
