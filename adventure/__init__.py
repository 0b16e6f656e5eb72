"""
Terminal Adventure - deterministic rules engine for a text adventure.

Import directly from submodules:
    from adventure.engine.world import WorldLoader
    from adventure.engine.state import create_initial_state, normalize_state
    from adventure.engine.processor import TurnProcessor
    from adventure.llm.narrator import NarratorAI
"""

__version__ = "0.1.0"
