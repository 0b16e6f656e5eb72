"""Unit tests for quest, faction and NPC trackers.

Tests cover:
- Unlocking only from locked, with the progress floor
- Completion walks the unlock graph and never regresses
- Post-turn hooks (amulet pickup, encounter defeats, treasure arrival)
- Faction clamping and the reputation metric
- NPC trust bounds and memory eviction
"""

import pytest

from adventure.engine.progression import (
    QuestTracker,
    adjust_faction,
    npc_in_room,
    record_conversation,
    remember_interaction,
)
from adventure.errors import ConfigIntegrityError
from adventure.models.action import ActionType, CombatMode, ParsedAction
from adventure.models.game import QuestStatus
from adventure.models.turn import CheckStatus, CombatReport, InventoryUpdate, Outcome


class TestQuestTracker:
    """Tests for QuestTracker."""

    @pytest.fixture
    def tracker(self, world_config) -> QuestTracker:
        return QuestTracker(world_config)

    def quest(self, state, quest_id):
        return state.world_state.quests[quest_id]

    def test_initial_statuses(self, game_state) -> None:
        assert self.quest(game_state, "prove_worth").status == QuestStatus.ACTIVE
        assert self.quest(game_state, "recover_amulet").status == QuestStatus.LOCKED
        assert self.quest(game_state, "claim_treasure").status == QuestStatus.LOCKED

    def test_unlock_sets_floor(self, tracker, game_state) -> None:
        assert tracker.unlock(game_state, "recover_amulet", 3) is True

        quest = self.quest(game_state, "recover_amulet")
        assert quest.status == QuestStatus.ACTIVE
        assert quest.progress == 10
        assert quest.updated_at_turn == 3

    def test_unlock_keeps_higher_progress(self, tracker, game_state) -> None:
        self.quest(game_state, "recover_amulet").progress = 40
        tracker.unlock(game_state, "recover_amulet", 1)
        assert self.quest(game_state, "recover_amulet").progress == 40

    def test_unlock_ignores_non_locked(self, tracker, game_state) -> None:
        """Unlocking an active or completed quest changes nothing."""
        assert tracker.unlock(game_state, "prove_worth", 5) is False
        assert self.quest(game_state, "prove_worth").updated_at_turn == 0

        tracker.complete(game_state, "prove_worth", 1)
        assert tracker.unlock(game_state, "prove_worth", 2) is False
        assert self.quest(game_state, "prove_worth").status == QuestStatus.COMPLETED

    def test_complete_unlocks_dependents(self, tracker, game_state) -> None:
        """Completing the opening quest activates the amulet quest only."""
        assert tracker.complete(game_state, "prove_worth", 2) is True

        assert self.quest(game_state, "prove_worth").status == QuestStatus.COMPLETED
        assert self.quest(game_state, "prove_worth").progress == 100
        assert self.quest(game_state, "recover_amulet").status == QuestStatus.ACTIVE
        assert self.quest(game_state, "claim_treasure").status == QuestStatus.LOCKED

    def test_complete_is_idempotent(self, tracker, game_state) -> None:
        tracker.complete(game_state, "prove_worth", 2)
        assert tracker.complete(game_state, "prove_worth", 9) is False
        assert self.quest(game_state, "prove_worth").updated_at_turn == 2

    def test_first_active_follows_config_order(self, tracker, game_state) -> None:
        tracker.unlock(game_state, "claim_treasure", 1)
        assert tracker.first_active(game_state).id == "prove_worth"

        tracker.complete(game_state, "prove_worth", 2)
        assert tracker.first_active(game_state).id == "recover_amulet"

    def test_hint(self, tracker, game_state) -> None:
        assert tracker.hint(game_state) == "Active objective: Earn the Elder Seal."
        for quest in game_state.world_state.quests.values():
            quest.status = QuestStatus.COMPLETED
        assert tracker.hint(game_state) == "No active objective remains."

    def test_unknown_quest_is_config_error(self, tracker, game_state) -> None:
        with pytest.raises(ConfigIntegrityError):
            tracker.unlock(game_state, "slay_dragon", 1)

    def test_treasure_room(self, tracker) -> None:
        assert tracker.treasure_room == "treasure"

    # Post-turn hooks

    def test_amulet_pickup_completes_quest(self, tracker, game_state) -> None:
        tracker.unlock(game_state, "recover_amulet", 1)
        game_state.world_state.time.turn = 6
        action = ParsedAction(action_type=ActionType.TAKE, raw="Take amulet", item="amulet")
        outcome = Outcome(status=CheckStatus.SUCCESS, inventory_update=InventoryUpdate(add=["amulet"]))

        tracker.apply_turn_hooks(game_state, action, outcome)

        assert self.quest(game_state, "recover_amulet").status == QuestStatus.COMPLETED
        assert self.quest(game_state, "recover_amulet").updated_at_turn == 6
        assert self.quest(game_state, "claim_treasure").status == QuestStatus.ACTIVE
        assert self.quest(game_state, "claim_treasure").progress == 10

    def test_guardian_defeat_raises_amulet_progress(self, tracker, game_state) -> None:
        tracker.unlock(game_state, "recover_amulet", 1)
        action = ParsedAction(action_type=ActionType.COMBAT, raw="Attack", mode=CombatMode.ATTACK)
        outcome = Outcome(
            status=CheckStatus.SUCCESS,
            combat=CombatReport(
                encounter_id="temple_guardian",
                defeated=True,
                damage_to_enemy=4,
                counter_damage=0,
                enemy_hp=0,
                enemy_max_hp=12,
            ),
        )

        tracker.apply_turn_hooks(game_state, action, outcome)

        assert self.quest(game_state, "recover_amulet").progress == 70

    def test_sentinel_defeat_ignored_while_locked(self, tracker, game_state) -> None:
        action = ParsedAction(action_type=ActionType.COMBAT, raw="Attack", mode=CombatMode.ATTACK)
        outcome = Outcome(
            status=CheckStatus.SUCCESS,
            combat=CombatReport(
                encounter_id="treasure_sentinel",
                defeated=True,
                damage_to_enemy=4,
                counter_damage=0,
                enemy_hp=0,
                enemy_max_hp=14,
            ),
        )

        tracker.apply_turn_hooks(game_state, action, outcome)

        quest = self.quest(game_state, "claim_treasure")
        assert quest.status == QuestStatus.LOCKED
        assert quest.progress == 0

    def test_arrival_in_treasure_room(self, tracker, game_state) -> None:
        tracker.unlock(game_state, "claim_treasure", 1)
        game_state.current_room = "treasure"
        action = ParsedAction(action_type=ActionType.MOVE, raw="Go north", direction="north")

        tracker.apply_turn_hooks(game_state, action, Outcome(status=CheckStatus.SUCCESS))

        assert self.quest(game_state, "claim_treasure").progress == 60

    def test_floor_never_lowers_progress(self, tracker, game_state) -> None:
        tracker.unlock(game_state, "claim_treasure", 1)
        self.quest(game_state, "claim_treasure").progress = 85
        tracker.raise_floor(game_state, "claim_treasure", 60)
        assert self.quest(game_state, "claim_treasure").progress == 85


class TestFactionsAndNPCs:
    """Tests for faction ledger and NPC interactions."""

    def test_adjust_faction_clamps(self, world_config, game_state) -> None:
        assert adjust_faction(game_state, world_config, "villagers", 150) == 100
        assert adjust_faction(game_state, world_config, "villagers", -500) == -100
        assert game_state.world_state.metrics.reputation_changes == 2

    def test_unknown_faction(self, world_config, game_state) -> None:
        with pytest.raises(ConfigIntegrityError):
            adjust_faction(game_state, world_config, "pirates", 1)

    def test_memory_evicts_oldest(self, world_config, game_state) -> None:
        for turn in range(1, 12):
            remember_interaction(game_state, world_config, "village_elder", f"Turn {turn}: hello")

        memory = game_state.world_state.npcs["village_elder"].memory
        assert len(memory) == 8
        assert memory[0] == "Turn 4: hello"
        assert memory[-1] == "Turn 11: hello"

    @pytest.mark.parametrize(
        "status,delta", [(CheckStatus.SUCCESS, 2), (CheckStatus.PARTIAL, 1), (CheckStatus.FAIL, -1)]
    )
    def test_conversation_trust(self, world_config, game_state, status, delta) -> None:
        npc = game_state.world_state.npcs["forest_ranger"]

        assert record_conversation(game_state, world_config, npc, status, "Turn 1: hi") == delta
        assert npc.trust == delta
        assert game_state.world_state.factions["forest_clans"] == delta
        assert npc.memory == ["Turn 1: hi"]

    def test_trust_clamped(self, world_config, game_state) -> None:
        npc = game_state.world_state.npcs["forest_ranger"]
        for _ in range(10):
            record_conversation(game_state, world_config, npc, CheckStatus.SUCCESS, "x")
        assert npc.trust == 10
        for _ in range(30):
            record_conversation(game_state, world_config, npc, CheckStatus.FAIL, "x")
        assert npc.trust == -10

    def test_npc_in_room(self, game_state) -> None:
        assert npc_in_room(game_state, "start").id == "village_elder"
        assert npc_in_room(game_state, "meadow") is None

    def test_npc_named_in_input(self, game_state) -> None:
        """A named NPC wins over the first one in the room."""
        game_state.world_state.npcs["temple_keeper"].room_id = "start"
        assert npc_in_room(game_state, "start", "talk to the temple keeper").id == "temple_keeper"
        assert npc_in_room(game_state, "start", "talk to someone").id == "village_elder"
