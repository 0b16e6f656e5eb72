"""
Sessions - Persistence and the resolve, save, narrate pipeline.

A turn is committed the moment the rules engine returns. The session
saves it before narration is attempted, so a narration failure (or a
retry of one) can never lose or repeat gameplay effects.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from adventure.engine.state import create_initial_state, dump_state, normalize_state
from adventure.llm.narrator import merge_narration
from adventure.models.game import GameState

if TYPE_CHECKING:
    from adventure.engine.processor import TurnProcessor
    from adventure.llm.narrator import NarratorAI
    from adventure.models.turn import Narration, TurnResult
    from adventure.models.world import WorldConfig

logger = logging.getLogger(__name__)

DEFAULT_USERNAME = "guest"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SessionRecord(BaseModel):
    """One player's saved session"""
    username: str
    created_at: datetime = Field(default_factory=_now)
    last_connected: datetime = Field(default_factory=_now)
    game_state: GameState | None = None


class SessionStore:
    """JSON file of sessions keyed by username.

    Every game_state read from disk goes through normalize_state, so an
    old or hand-edited file still loads.
    """

    def __init__(self, path: str | Path, config: "WorldConfig"):
        self.path = Path(path)
        self.config = config
        self.sessions: dict[str, SessionRecord] = {}

    def load(self) -> dict[str, SessionRecord]:
        self.sessions = {}
        if not self.path.exists():
            logger.info(f"No sessions file at {self.path}, starting fresh")
            return self.sessions

        try:
            with open(self.path, encoding="utf-8") as f:
                entries = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load sessions from {self.path}: {e}")
            return self.sessions

        if not isinstance(entries, list):
            logger.error(f"Sessions file {self.path} is not a list, ignoring it")
            return self.sessions

        for entry in entries:
            if not isinstance(entry, dict) or not isinstance(entry.get("username"), str):
                logger.warning("Skipping session entry without a username")
                continue
            record = SessionRecord(username=entry["username"])
            for key in ("created_at", "last_connected"):
                raw = entry.get(key)
                if not isinstance(raw, str):
                    continue
                try:
                    setattr(record, key, datetime.fromisoformat(raw))
                except ValueError:
                    logger.warning(f"Invalid {key} for '{record.username}': {raw!r}")
            if entry.get("game_state") is not None:
                record.game_state = normalize_state(entry["game_state"], self.config)
            self.sessions[record.username] = record

        logger.info(f"Loaded {len(self.sessions)} saved session(s)")
        return self.sessions

    def get_or_create(self, username: str | None = None) -> SessionRecord:
        username = username or DEFAULT_USERNAME
        record = self.sessions.get(username)
        if record is not None:
            record.last_connected = _now()
            logger.info(f"Resuming session for '{username}' (has_game={record.game_state is not None})")
            return record
        record = SessionRecord(username=username)
        self.sessions[username] = record
        logger.info(f"Created new session for '{username}'")
        return record

    def delete(self, username: str) -> None:
        if self.sessions.pop(username, None) is not None:
            self.save()

    def save(self) -> None:
        """Write every session with game progress, atomically"""
        entries = [
            {
                "username": record.username,
                "created_at": record.created_at.isoformat(),
                "last_connected": record.last_connected.isoformat(),
                "game_state": dump_state(record.game_state),
            }
            for record in self.sessions.values()
            if record.game_state is not None
        ]

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".sessions-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(entries, f, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.info(f"Saved {len(entries)} session(s) to {self.path}")


@dataclass
class NarratedTurn:
    """A committed turn plus its narration"""
    result: "TurnResult"
    narration: "Narration"

    @property
    def message(self) -> str:
        return merge_narration(self.result, self.narration)


class GameSession:
    """Drives one player's game: resolve, persist, then narrate.

    Example:
        >>> session = GameSession(store.get_or_create("ada"), store, processor, narrator)
        >>> turn = await session.play_turn("Go north")
        >>> print(turn.narration.description)
    """

    def __init__(
        self,
        record: SessionRecord,
        store: SessionStore,
        processor: "TurnProcessor",
        narrator: "NarratorAI",
    ):
        self.record = record
        self.store = store
        self.processor = processor
        self.narrator = narrator
        self.last_result: "TurnResult | None" = None

    @property
    def state(self) -> GameState:
        if self.record.game_state is None:
            self.record.game_state = create_initial_state(self.processor.config)
        return self.record.game_state

    def new_game(self) -> GameState:
        self.record.game_state = create_initial_state(self.processor.config)
        self.last_result = None
        return self.record.game_state

    async def play_turn(self, action_text: str, custom: bool = False) -> NarratedTurn:
        """Resolve one action, save it, then narrate it.

        Raises:
            NarrationError: Narration failed. The turn is already saved;
                call retry_narration() instead of replaying the action.
        """
        self.last_result = self.processor.resolve_turn(self.state, action_text, custom=custom)
        await asyncio.to_thread(self.store.save)
        return await self._narrate(self.last_result)

    async def retry_narration(self) -> NarratedTurn:
        """Narrate the last committed turn again without resolving it"""
        if self.last_result is None:
            raise RuntimeError("No committed turn to narrate")
        return await self._narrate(self.last_result)

    async def _narrate(self, result: "TurnResult") -> NarratedTurn:
        narration = await self.narrator.narrate(result, self.state)
        # message history changed
        await asyncio.to_thread(self.store.save)
        return NarratedTurn(result=result, narration=narration)
