"""
Available actions - The menu offered to the player after a turn.

Order: exits, combat verbs, up to two room items, one NPC, special
story actions, then generic filler. Duplicates are skipped, the list is
capped at the configured maximum and padded up to the minimum.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from adventure.engine.combat import active_encounter
from adventure.engine.progression import npc_in_room
from adventure.errors import ConfigIntegrityError
from adventure.models.game import QuestStatus

if TYPE_CHECKING:
    from adventure.models.game import GameState
    from adventure.models.world import WorldConfig

VISIBLE_ITEM_ACTIONS = 2


def available_actions(state: "GameState", config: "WorldConfig") -> list[str]:
    room = config.get_room(state.current_room)
    if room is None:
        raise ConfigIntegrityError(f"Unknown room id '{state.current_room}'")

    bounds = config.gameplay.action_count
    story = config.story
    actions: list[str] = []

    def push(label: str) -> None:
        if not label or label in actions or len(actions) >= bounds.max:
            return
        actions.append(label)

    for direction in room.exits:
        push(f"Go {direction}")

    encounter = active_encounter(state, room.id)
    if encounter is not None:
        push(f"Attack {encounter.name}")
        push(f"Defend against {encounter.name}")

    for item in state.room_items(room.id)[:VISIBLE_ITEM_ACTIONS]:
        push(f"Take {item}")

    npc = npc_in_room(state, room.id)
    if npc is not None:
        push(f"Talk to {npc.name}")

    if room.id == story.seal_room and state.has_item(story.seal_item):
        push(f"Use {story.seal_item} at altar")

    treasure = config.get_quest(story.treasure_quest)
    claim = state.world_state.quests.get(story.treasure_quest)
    if (
        treasure is not None
        and claim is not None
        and room.id == treasure.room_id
        and claim.status == QuestStatus.ACTIVE
        and encounter is None
    ):
        push("Claim the treasure")

    for label in config.gameplay.generic_actions:
        push(label)

    while len(actions) < bounds.min:
        push(f"Review objective {len(actions) + 1}")

    return actions
