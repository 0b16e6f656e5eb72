"""
Narrator AI - Flavor text for resolved turns.

The narrator is purely decorative. It receives a structured summary of a
turn the rules engine has already committed and returns a short scene
description plus a one-line message. Nothing it says is read back into
the game state.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from adventure.config import LLMSettings
from adventure.errors import NarrationError
from adventure.llm.client import get_completion, get_model_string, parse_json_response
from adventure.llm.client import is_available as ollama_available
from adventure.models.turn import Narration, NarrationRequest

if TYPE_CHECKING:
    from adventure.models.game import GameState
    from adventure.models.turn import TurnResult
    from adventure.models.world import WorldConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are the narrator of a fantasy text adventure played in a small terminal.

WORLD: {world_name}
{premise}

The game rules have ALREADY resolved the player's action. You receive a JSON
summary of the result. Describe it; never change it.

RULES:
1. Respond ONLY with a JSON object: {{"description": "...", "message": "..."}}
2. "description": 2-4 short sentences describing the scene after the action.
3. "message": one line of feedback about the action. If the outcome message is
   empty, answer or act out the player's text yourself.
4. Do not invent items, exits, damage, quest progress or inventory changes.
5. Match the director's style ({styles}) and the current beat.
6. Never break character. Never include text outside the JSON."""


def trim_history(messages: list[dict[str, str]], limit: int) -> list[dict[str, str]]:
    """Keep the most recent ``limit`` messages"""
    if limit <= 0:
        return []
    return list(messages[-limit:])


def merge_narration(result: "TurnResult", narration: Narration) -> str:
    """Combine the deterministic message with the narrated one.

    The rules message always comes first and is never replaced.
    """
    deterministic = result.outcome.message.strip()
    narrated = narration.message.strip()
    if not deterministic:
        return narrated
    if not narrated or narrated == deterministic:
        return deterministic
    return f"{deterministic} {narrated}"


class NarratorAI:
    """LLM-powered narrator.

    Example:
        >>> narrator = NarratorAI(config, runtime.llm)
        >>> narration = await narrator.narrate(result, state)
        >>> print(merge_narration(result, narration))
    """

    def __init__(self, config: "WorldConfig", settings: LLMSettings | None = None):
        """Initialize the narrator.

        Args:
            config: World config, for the prompt and narration limits
            settings: LLM settings; defaults are used when omitted
        """
        self.config = config
        self.settings = settings or LLMSettings()

    def build_system_prompt(self) -> str:
        return SYSTEM_PROMPT.format(
            world_name=self.config.name,
            premise=self.config.premise,
            styles=", ".join(self.config.systems.director_styles),
        )

    def build_request(self, result: "TurnResult") -> NarrationRequest:
        """Structured turn summary sent to the model"""
        return NarrationRequest(
            turn=result.turn,
            phase=result.phase,
            room=result.room,
            items_here=list(result.items_here),
            action_type=result.action.action_type.value,
            action_raw=result.action.raw,
            outcome_status=result.outcome.status.value,
            outcome_message=result.outcome.message,
            actions=list(result.actions),
            player=result.player,
            active_encounter=result.active_encounter,
            director=result.director,
            game_over=result.game_over,
        )

    async def is_available(self) -> bool:
        """Whether the narration backend answers. Hosted providers are assumed up."""
        if self.settings.provider != "ollama":
            return True
        return await ollama_available(self.settings.base_url, timeout=self.settings.health_timeout_seconds)

    async def narrate(self, result: "TurnResult", state: "GameState") -> Narration:
        """Narrate a committed turn.

        Appends the exchange to ``state.message_history``. Nothing else in
        the state is touched.

        Raises:
            NarrationError: On transport failure, timeout or an unusable
                response. The turn itself stays committed.
        """
        limit = min(self.settings.max_history_messages, self.config.narration.max_history_messages)
        payload = self.build_request(result).model_dump_json()
        user_message = {"role": "user", "content": payload}

        messages = [
            {"role": "system", "content": self.build_system_prompt()},
            *trim_history(state.message_history, limit),
            user_message,
        ]

        try:
            content = await get_completion(
                messages,
                model=get_model_string(self.settings.provider, self.settings.model),
                temperature=self.settings.temperature,
                max_tokens=self.settings.max_tokens,
                response_format={"type": "json_object"},
                timeout=self.settings.timeout_seconds,
                api_base=self.settings.base_url if self.settings.provider == "ollama" else None,
            )
        except Exception as e:
            raise NarrationError(f"Narration request failed: {type(e).__name__}: {e}", turn=result) from e

        try:
            parsed = parse_json_response(content)
        except ValueError as e:
            logger.warning(f"Unusable narration for turn {result.turn}: {e}")
            raise NarrationError(str(e), turn=result) from e

        narration = self._to_narration(parsed, result)

        state.message_history = trim_history(
            [
                *state.message_history,
                user_message,
                {"role": "assistant", "content": json.dumps(narration.model_dump())},
            ],
            limit,
        )
        return narration

    def _to_narration(self, parsed: dict, result: "TurnResult") -> Narration:
        missing = [key for key in self.config.narration.required_keys if not isinstance(parsed.get(key), str)]
        if missing:
            raise NarrationError(f"Narration response missing {', '.join(missing)}", turn=result)

        description = parsed["description"].strip()
        max_chars = self.config.narration.description_max_chars
        if len(description) > max_chars:
            logger.warning(f"Narration description truncated from {len(description)} to {max_chars} chars")
            description = description[:max_chars].rstrip()

        return Narration(description=description, message=parsed["message"].strip())
