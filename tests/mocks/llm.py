"""
Mock LLM client for deterministic testing.

MockLLMClient stands in for ``get_completion``: it is awaited with the
same arguments and returns a predetermined response chosen by matching
patterns against the last message sent.

Example:
    >>> mock = MockLLMClient({
    ...     "talk": '{"description": "The elder nods.", "message": "Go."}',
    ...     "default": '{"description": "Quiet.", "message": "Nothing."}',
    ... })
    >>> monkeypatch.setattr("adventure.llm.narrator.get_completion", mock.get_completion)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class LLMCall:
    """Record of a single LLM call for test verification.

    Attributes:
        messages: The messages sent
        response: The response returned
        matched_pattern: The pattern that matched (or "default")
        kwargs: Extra keyword arguments (model, timeout, ...)
    """

    messages: list[dict[str, str]]
    response: str | None
    matched_pattern: str
    kwargs: dict[str, Any] = field(default_factory=dict)

    @property
    def prompt(self) -> str:
        return self.messages[-1]["content"] if self.messages else ""


class MockLLMClient:
    """Mock replacement for adventure.llm.client.get_completion.

    Attributes:
        responses: Dict mapping pattern strings to response strings
        call_history: List of all calls made to this mock
        error: If set, raised by every call (simulates transport failure)
    """

    def __init__(self, responses: dict[str, str | None] | None = None) -> None:
        self.responses: dict[str, str | None] = responses or {}
        self.call_history: list[LLMCall] = []
        self.error: Exception | None = None

    async def get_completion(self, messages: list[dict[str, str]], **kwargs: Any) -> str | None:
        """Simulate a completion call."""
        if self.error is not None:
            raise self.error

        prompt = messages[-1]["content"] if messages else ""
        response, pattern = self._find_response(prompt)
        self.call_history.append(
            LLMCall(messages=list(messages), response=response, matched_pattern=pattern, kwargs=kwargs)
        )
        return response

    def _find_response(self, prompt: str) -> tuple[str | None, str]:
        prompt_lower = prompt.lower()

        for pattern, response in self.responses.items():
            if pattern == "default":
                continue
            if pattern.lower() in prompt_lower:
                return response, pattern

        if "default" in self.responses:
            return self.responses["default"], "default"

        return "{}", "none"

    def fail_with(self, error: Exception) -> None:
        self.error = error

    def recover(self) -> None:
        self.error = None

    def get_last_call(self) -> LLMCall | None:
        return self.call_history[-1] if self.call_history else None

    def assert_called(self, times: int | None = None) -> None:
        """Assert the mock was called (exactly ``times`` times if given)."""
        if times is not None:
            assert (
                len(self.call_history) == times
            ), f"Expected {times} calls, got {len(self.call_history)}"
        else:
            assert len(self.call_history) > 0, "Expected at least one call"
