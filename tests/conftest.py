"""
Shared pytest fixtures for adventure engine tests.

This module provides:
- world_config: The bundled "village" world, loaded and validated
- new_game: A fresh GameState whose first turn has not been played
- game_state: A GameState past its opening turn, standing in the village
- processor: A TurnProcessor bound to the world config
- mock_llm_client: Mock LLM client for deterministic narration tests
- Custom markers for test categorization
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from adventure.engine.processor import TurnProcessor
from adventure.engine.state import create_initial_state
from adventure.engine.world import WorldLoader
from adventure.models.game import GameState
from adventure.models.world import WorldConfig

if TYPE_CHECKING:
    from tests.mocks.llm import MockLLMClient


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line("markers", "integration: marks tests as integration tests")


# =============================================================================
# World and State Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def world_config() -> WorldConfig:
    """The bundled village world. Frozen, so safe to share."""
    return WorldLoader().load_world("village")


@pytest.fixture
def new_game(world_config: WorldConfig) -> GameState:
    """A brand-new game: the next turn is the forced START."""
    return create_initial_state(world_config)


@pytest.fixture
def game_state(new_game: GameState) -> GameState:
    """A game past its opening turn, in the village square."""
    new_game.is_first_turn = False
    return new_game


@pytest.fixture
def processor(world_config: WorldConfig) -> TurnProcessor:
    return TurnProcessor(world_config)


def set_skills(state: GameState, value: int) -> None:
    """Set every skill to the same score (test helper)."""
    for skill in state.player.skills:
        state.player.skills[skill] = value


@pytest.fixture
def skilled_state(game_state: GameState) -> GameState:
    """Started game with every skill at the maximum of 10.

    With a d20 roll of at least 1, any normal (11) check is at least a
    partial success, so outcomes that must not fail are guaranteed.
    """
    set_skills(game_state, 10)
    return game_state


# =============================================================================
# Mock LLM Fixtures
# =============================================================================


@pytest.fixture
def mock_llm_client() -> "MockLLMClient":
    """Mock LLM client answering every prompt with a fixed narration."""
    from tests.mocks.llm import MockLLMClient

    return MockLLMClient(
        {
            "default": '{"description": "Wind stirs the square.", "message": "The world watches."}',
        }
    )
