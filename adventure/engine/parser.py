"""
Rule-based action parser.

Turns raw player text into a single ParsedAction using keyword and prefix
patterns only. The first matching rule wins:

    1. A brand-new game always starts with START
    2. Explicit free-text submissions are CUSTOM, no pattern matching
    3. Empty input is UNKNOWN
    4. "claim (the) treasure" is the QUEST claim
    5. go / take / attack / defend / look / talk / use / wait prefixes
    6. Questions are CUSTOM
    7. Anything else is UNKNOWN
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from adventure.models.action import ActionTag, ActionType, CombatMode, ParsedAction

if TYPE_CHECKING:
    from adventure.models.game import GameState

logger = logging.getLogger(__name__)

START_RAW = "__start__"
CLAIM_TREASURE_TARGET = "claim_treasure"


def normalize_token(value: str) -> str:
    """Lowercase, turn non-alphanumerics into spaces, collapse whitespace"""
    value = re.sub(r"[^a-z0-9\s]", " ", str(value).lower())
    return re.sub(r"\s+", " ", value).strip()


def includes_token(haystack: str, needle: str) -> bool:
    return normalize_token(needle) in normalize_token(haystack)


class ActionParser:
    """Parse player input into a ParsedAction.

    Example:
        >>> parser = ActionParser()
        >>> parser.parse("Go north", state).direction
        'north'
        >>> parser.parse("Take the torch", state).item
        'torch'
    """

    CLAIM_PHRASES: tuple[str, ...] = ("claim the treasure", "claim treasure")

    TAKE_PATTERN = re.compile(r"^(take|pick up|pickup|grab)\b")
    ATTACK_PATTERN = re.compile(r"^(attack|fight|strike|engage)\b")
    DEFEND_PATTERN = re.compile(r"^(defend|brace|guard|block)\b")
    INVESTIGATE_PATTERN = re.compile(r"^(look|investigate|inspect|search|review)\b")
    TALK_PATTERN = re.compile(r"^(talk|speak|ask)\b")
    USE_PATTERN = re.compile(r"^(use|offer)\b")
    WAIT_PATTERN = re.compile(r"^(wait|rest|pause)\b")
    QUESTION_PATTERN = re.compile(
        r"^(who|what|where|when|why|how|can|is|are|tell|describe|narrate)\b"
    )

    def parse(self, raw_input: str | None, state: "GameState", custom: bool = False) -> ParsedAction:
        """Parse player input.

        Args:
            raw_input: The raw player input (menu label or typed text)
            state: Current game state (only is_first_turn is read)
            custom: True when the UI submitted the text through its
                free-text prompt; such input is never pattern matched

        Returns:
            ParsedAction with the fields relevant to its type
        """
        action = self._parse(raw_input, state, custom)
        logger.debug(f"Parsed {raw_input!r} -> {action.action_type.value}")
        return action

    def _parse(self, raw_input: str | None, state: "GameState", custom: bool) -> ParsedAction:
        if state.is_first_turn:
            return ParsedAction(action_type=ActionType.START, raw=START_RAW)

        raw = str(raw_input if raw_input is not None else "").strip()

        if custom:
            return ParsedAction(action_type=ActionType.CUSTOM, raw=raw)

        normalized = normalize_token(raw)

        if not normalized:
            return ParsedAction(action_type=ActionType.UNKNOWN, raw=raw)

        if normalized in self.CLAIM_PHRASES:
            return ParsedAction(action_type=ActionType.QUEST, raw=raw, target=CLAIM_TREASURE_TARGET)

        if normalized.startswith("go "):
            return ParsedAction(action_type=ActionType.MOVE, raw=raw, direction=normalized.split(" ")[1])

        if self.TAKE_PATTERN.match(normalized):
            item = self._strip_article(self.TAKE_PATTERN.sub("", normalized, count=1))
            return ParsedAction(action_type=ActionType.TAKE, raw=raw, item=item)

        if self.ATTACK_PATTERN.match(normalized):
            return ParsedAction(action_type=ActionType.COMBAT, raw=raw, mode=CombatMode.ATTACK)

        if self.DEFEND_PATTERN.match(normalized):
            return ParsedAction(action_type=ActionType.COMBAT, raw=raw, mode=CombatMode.DEFEND)

        if self.INVESTIGATE_PATTERN.match(normalized):
            return ParsedAction(action_type=ActionType.INVESTIGATE, raw=raw)

        if self.TALK_PATTERN.match(normalized):
            return ParsedAction(action_type=ActionType.TALK, raw=raw)

        if self.USE_PATTERN.match(normalized):
            remainder = self._strip_article(self.USE_PATTERN.sub("", normalized, count=1))
            return ParsedAction(action_type=ActionType.USE, raw=raw, item=remainder.split(" ")[0])

        if self.WAIT_PATTERN.match(normalized):
            return ParsedAction(action_type=ActionType.WAIT, raw=raw)

        if self.QUESTION_PATTERN.match(normalized) or raw.endswith("?"):
            return ParsedAction(action_type=ActionType.CUSTOM, raw=raw)

        return ParsedAction(action_type=ActionType.UNKNOWN, raw=raw)

    @staticmethod
    def _strip_article(remainder: str) -> str:
        return re.sub(r"^the\s+", "", remainder.strip()).strip()


def resolve_item(items: list[str], candidate: str | None) -> str | None:
    """Match a typed item fragment against a list of item ids.

    An empty fragment only resolves when exactly one item is present.
    Otherwise the first item whose normalized id contains the fragment wins.
    """
    if not candidate:
        return items[0] if len(items) == 1 else None
    for item in items:
        if includes_token(item, candidate):
            return item
    return None


# =============================================================================
# Display tags
# =============================================================================

_TAG_KEYWORDS: tuple[tuple[ActionTag, frozenset[str]], ...] = (
    (ActionTag.MOVE, frozenset({
        "go", "walk", "run", "head", "north", "south", "east", "west",
        "up", "down", "enter", "leave", "climb",
    })),
    (ActionTag.COMBAT, frozenset({
        "attack", "fight", "strike", "engage", "defend", "brace", "guard", "block",
    })),
    (ActionTag.SOCIAL, frozenset({"talk", "speak", "ask", "greet", "offer"})),
    (ActionTag.LOOK, frozenset({"look", "investigate", "inspect", "search", "examine", "review"})),
    (ActionTag.USE, frozenset({"use", "take", "grab", "pick"})),
    (ActionTag.SYSTEM, frozenset({"wait", "rest", "pause", "claim", "objective", "objectives", "menu"})),
)


def classify_action(label: str, free_text_label: str | None = None) -> ActionTag:
    """Coarse display tag for a menu label. Never affects game state."""
    if free_text_label is not None and label == free_text_label:
        return ActionTag.CUSTOM
    if str(label).strip().endswith("?"):
        return ActionTag.CUSTOM

    tokens = normalize_token(label).split(" ")
    if not tokens or not tokens[0]:
        return ActionTag.ACTION

    # The leading verb decides; later words only break ties
    for tag, keywords in _TAG_KEYWORDS:
        if tokens[0] in keywords:
            return tag
    for tag, keywords in _TAG_KEYWORDS:
        if keywords.intersection(tokens):
            return tag
    return ActionTag.ACTION
