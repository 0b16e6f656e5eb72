"""Unit tests for game state and world config models.

Tests cover:
- Bounded setters on player, encounters, NPCs and director
- Quest status only moving forward
- Inventory updates
- Config helpers
"""

import pytest

from adventure.models.game import (
    DirectorState,
    EncounterState,
    NPCState,
    Player,
    QuestState,
    QuestStatus,
)
from adventure.models.world import Bounds, CounterDamage, PacingSettings


class TestBounds:
    """Tests for Bounds and derived settings."""

    @pytest.mark.parametrize("value,expected", [(-5, 0), (0, 0), (7, 7), (10, 10), (99, 10)])
    def test_clamp(self, value, expected) -> None:
        assert Bounds(min=0, max=10).clamp(value) == expected

    def test_tension_bounds(self) -> None:
        bounds = PacingSettings(min_tension=5, max_tension=90).tension_bounds
        assert (bounds.min, bounds.max) == (5, 90)

    def test_counter_damage_lookup(self) -> None:
        damage = CounterDamage(success=1, partial=2, fail=4)
        assert damage.for_status("fail") == 4
        assert damage.for_status("success") == 1


class TestEntities:
    """Tests for bounded mutators on state entities."""

    def test_player_health(self) -> None:
        player = Player(health=10, max_health=20)

        assert player.set_health(25, 1) == 20
        assert player.set_health(-3, 1) == 1

    def test_player_skill(self) -> None:
        player = Player(health=10, max_health=20, skills={"lore": 2})
        assert player.set_skill("lore", 14, Bounds(min=0, max=10)) == 10

    def test_encounter_damage(self) -> None:
        encounter = EncounterState(id="wolf", room_id="forest", name="Wolf", max_hp=8, current_hp=8)

        assert encounter.apply_damage(3) == 5
        assert encounter.apply_damage(10) == 0
        encounter.mark_defeated()
        assert encounter.defeated is True
        assert encounter.last_outcome == "defeated"

    def test_npc_trust_and_memory(self) -> None:
        npc = NPCState(id="elder", name="Elder", room_id="start", faction="villagers")

        assert npc.adjust_trust(15, Bounds(min=-10, max=10)) == 10
        for n in range(4):
            npc.remember(f"entry {n}", 3)
        assert npc.memory == ["entry 1", "entry 2", "entry 3"]

    def test_npc_memory_disabled(self) -> None:
        npc = NPCState(id="elder", name="Elder", room_id="start", faction="villagers")
        npc.remember("entry", 0)
        assert npc.memory == []

    def test_director_tension(self) -> None:
        director = DirectorState()
        assert director.set_tension(140, Bounds(min=0, max=100)) == 100


class TestQuestState:
    """Tests for QuestState transitions."""

    def test_advance_forward(self) -> None:
        quest = QuestState(id="q", title="Q")

        assert quest.advance(QuestStatus.ACTIVE, 2) is True
        assert quest.advance(QuestStatus.COMPLETED, 5) is True
        assert quest.progress == 100
        assert quest.updated_at_turn == 5

    def test_no_regression(self) -> None:
        quest = QuestState(id="q", title="Q", status=QuestStatus.COMPLETED, progress=100, updated_at_turn=3)

        assert quest.advance(QuestStatus.ACTIVE, 9) is False
        assert quest.advance(QuestStatus.COMPLETED, 9) is False
        assert quest.status == QuestStatus.COMPLETED
        assert quest.updated_at_turn == 3

    def test_raise_progress(self) -> None:
        quest = QuestState(id="q", title="Q", progress=50)

        quest.raise_progress(30)
        assert quest.progress == 50
        quest.raise_progress(150)
        assert quest.progress == 100


class TestGameState:
    """Tests for GameState helpers."""

    def test_inventory_update(self, game_state) -> None:
        game_state.inventory = ["torch"]

        game_state.apply_inventory_update(["torch", "map", "map"], ["torch"])

        assert game_state.inventory == ["map"]

    def test_room_items_created_on_demand(self, game_state) -> None:
        del game_state.world_state.room_items["cave"]
        assert game_state.room_items("cave") == []
        assert "cave" in game_state.world_state.room_items

    def test_has_item(self, game_state) -> None:
        game_state.inventory.append("map")
        assert game_state.has_item("map")
        assert not game_state.has_item("torch")

    def test_validate_assignment(self, game_state) -> None:
        with pytest.raises(ValueError):
            game_state.moves = "many"
