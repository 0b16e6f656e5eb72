"""Full playthroughs through the TurnProcessor.

Tests cover:
- The intended route from a new game to the treasure
- Bounds and ordering that must hold after every turn
- Determinism across identical playthroughs
"""

import pytest

from adventure.engine.state import create_initial_state, dump_state
from adventure.models.game import QuestStatus
from tests.conftest import set_skills

pytestmark = [pytest.mark.integration, pytest.mark.slow]


def play_until(processor, state, action: str, done, limit: int = 30):
    """Repeat an action until ``done(state)`` holds"""
    for _ in range(limit):
        result = processor.resolve_turn(state, action)
        if done(state):
            return result
    raise AssertionError(f"'{action}' did not finish within {limit} turns")


def check_invariants(state, result, config, previous_ranks: dict[str, int]) -> dict[str, int]:
    systems = config.systems
    world = state.world_state

    assert systems.player.min_health <= state.player.health <= state.player.max_health
    for score in state.player.skills.values():
        assert systems.skill_bounds.min <= score <= systems.skill_bounds.max
    assert systems.pacing.min_tension <= world.director.tension <= systems.pacing.max_tension
    for standing in world.factions.values():
        assert systems.faction_bounds.min <= standing <= systems.faction_bounds.max
    for npc in world.npcs.values():
        assert systems.npc.trust_bounds.min <= npc.trust <= systems.npc.trust_bounds.max
        assert len(npc.memory) <= systems.npc.memory_limit
    for encounter in world.encounters.values():
        assert 0 <= encounter.current_hp <= encounter.max_hp

    assert len(state.inventory) == len(set(state.inventory))
    assert state.current_room in state.visited_rooms
    assert 4 <= len(result.actions) <= 6
    assert len(result.actions) == len(set(result.actions))

    ranks = {quest_id: quest.status.rank for quest_id, quest in world.quests.items()}
    for quest_id, rank in ranks.items():
        assert rank >= previous_ranks.get(quest_id, 0)
    return ranks


class TestIntendedRoute:
    """From a new game to the treasure chamber."""

    def test_full_route(self, processor, new_game) -> None:
        state = new_game
        set_skills(state, 10)
        quests = state.world_state.quests
        encounters = state.world_state.encounters

        processor.resolve_turn(state, "begin")
        play_until(processor, state, "Talk to Village Elder", lambda s: s.has_item("elder_seal"))
        processor.resolve_turn(state, "Go north")
        processor.resolve_turn(state, "Go east")
        assert state.current_room == "temple"

        play_until(processor, state, "Attack Runic Guardian", lambda s: encounters["temple_guardian"].defeated)
        assert quests["recover_amulet"].progress == 70

        play_until(processor, state, "Take amulet", lambda s: s.has_item("amulet"))
        assert quests["recover_amulet"].status == QuestStatus.COMPLETED
        assert quests["claim_treasure"].status == QuestStatus.ACTIVE

        for direction in ("west", "south", "east", "north"):
            processor.resolve_turn(state, f"Go {direction}")
        assert state.current_room == "treasure"
        assert quests["claim_treasure"].progress == 60

        play_until(processor, state, "Attack Vault Sentinel", lambda s: encounters["treasure_sentinel"].defeated)
        assert state.has_item("vault_key")
        assert quests["claim_treasure"].progress == 85

        result = processor.resolve_turn(state, "Claim the treasure")

        assert result.game_over is True
        assert all(quest.status == QuestStatus.COMPLETED for quest in quests.values())
        assert {"gold", "crown", "jewels"} <= set(state.inventory)


class TestInvariants:
    """Bounds that hold for any sequence of menu choices."""

    @pytest.mark.parametrize("skill_score", [0, 2, 10])
    def test_menu_walk(self, processor, world_config, skill_score) -> None:
        state = create_initial_state(world_config)
        set_skills(state, skill_score)
        ranks: dict[str, int] = {}

        result = processor.resolve_turn(state, "begin")
        for turn in range(80):
            ranks = check_invariants(state, result, world_config, ranks)
            if result.game_over:
                break
            action = result.actions[(turn * 7) % len(result.actions)]
            result = processor.resolve_turn(state, action)

    def test_free_text_never_changes_rules_state(self, processor, game_state) -> None:
        before = dump_state(game_state)

        for text in ("go north", "take the torch", "attack!", "Claim the treasure"):
            processor.resolve_turn(game_state, text, custom=True)

        after = dump_state(game_state)
        assert after["current_room"] == before["current_room"]
        assert after["inventory"] == before["inventory"]
        assert after["world_state"]["quests"] == before["world_state"]["quests"]
        assert after["world_state"]["encounters"] == before["world_state"]["encounters"]
        assert after["moves"] == before["moves"] + 4


class TestDeterminism:
    """Identical inputs give identical games."""

    def test_replay(self, processor, world_config) -> None:
        script = [
            "begin",
            "Talk to Village Elder",
            "Go north",
            "Attack Shadow Wolf",
            "Defend against Shadow Wolf",
            "Take sword",
            "Go east",
            "Investigate surroundings",
            "dance",
            "Who built this temple?",
        ]

        def play():
            state = create_initial_state(world_config)
            return [processor.resolve_turn(state, text).model_dump() for text in script], dump_state(state)

        assert play() == play()
