"""LLM integration for narration.

- `client.py`: LiteLLM client wrapper
- `narrator.py`: NarratorAI and narration merge helpers

Import directly from submodules:
    from adventure.llm.narrator import NarratorAI, merge_narration
"""

from adventure.llm.client import get_completion, parse_json_response, get_model_string, is_available

__all__ = [
    "get_completion",
    "parse_json_response",
    "get_model_string",
    "is_available",
]
