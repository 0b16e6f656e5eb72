"""
LLM client - Provider-agnostic completion calls using LiteLLM
"""

import json
import logging
import os
import re
from typing import Any

import httpx
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def get_provider() -> str:
    """Get configured LLM provider"""
    return os.getenv("LLM_PROVIDER", "ollama")


def get_model() -> str:
    """Get configured model name"""
    return os.getenv("LLM_MODEL", "qwen3-coder:30b")


def get_model_string(provider: str | None = None, model: str | None = None) -> str:
    """Get the full model string for LiteLLM"""
    provider = provider or get_provider()
    model = model or get_model()

    # LiteLLM uses prefixed model names for some providers
    if provider in ("gemini", "anthropic", "ollama"):
        return f"{provider}/{model}"
    # OpenAI doesn't need a prefix
    return model


async def get_completion(
    messages: list[dict[str, str]],
    model: str | None = None,
    temperature: float = 0.6,
    max_tokens: int = 900,
    response_format: dict | None = None,
    timeout: float | None = None,
    api_base: str | None = None,
) -> str:
    """
    Get completion from configured LLM provider.

    Args:
        messages: List of message dicts with 'role' and 'content'
        model: Optional LiteLLM model string override
        temperature: Creativity (0-2)
        max_tokens: Maximum response length
        response_format: Optional format specification
        timeout: Request timeout in seconds
        api_base: Optional base URL (Ollama)

    Returns:
        The generated text response
    """
    import litellm

    _configure_api_keys()

    model_string = model or get_model_string()

    logger.info(
        f"LLM Request: model={model_string}, temperature={temperature}, "
        f"max_tokens={max_tokens}, timeout={timeout}"
    )
    logger.debug(f"Messages: {len(messages)} messages, response_format={response_format}")

    kwargs: dict[str, Any] = {
        "model": model_string,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    # Not all models support JSON mode
    if response_format:
        kwargs["response_format"] = response_format
    if timeout is not None:
        kwargs["timeout"] = timeout
    if api_base:
        kwargs["api_base"] = api_base

    try:
        response = await litellm.acompletion(**kwargs)
    except Exception as e:
        logger.error(f"LLM Error: {type(e).__name__}: {e}")
        raise

    content = response.choices[0].message.content
    finish_reason = getattr(response.choices[0], "finish_reason", "unknown")

    logger.info(
        f"LLM Response: finish_reason={finish_reason}, content_length={len(content) if content else 0}"
    )
    if finish_reason == "length":
        logger.warning(f"Response TRUNCATED due to max_tokens limit ({max_tokens})")

    if content:
        preview = content[:200] + "..." if len(content) > 200 else content
        logger.debug(f"Response preview: {preview}")
    else:
        logger.warning("LLM returned empty content")

    return content


async def is_available(base_url: str | None = None, timeout: float = 3.0) -> bool:
    """
    Check that a local Ollama server is answering.

    Args:
        base_url: Ollama base URL (defaults to OLLAMA_BASE_URL)
        timeout: Seconds to wait for /api/tags

    Returns:
        True if the server listed its models
    """
    base_url = (base_url or os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")).rstrip("/")
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(f"{base_url}/api/tags")
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.warning(f"Ollama not reachable at {base_url}: {type(e).__name__}: {e}")
        return False

    if not response.is_success:
        logger.warning(f"Ollama health check at {base_url} returned HTTP {response.status_code}")
    return response.is_success


def _configure_api_keys():
    """Configure API keys for LiteLLM from environment"""
    import litellm

    provider = get_provider()
    logger.debug(f"Configuring API keys for provider: {provider}")

    if provider == "openai":
        api_key = os.getenv("OPENAI_API_KEY")
        if api_key:
            litellm.api_key = api_key
        else:
            logger.warning("OPENAI_API_KEY not found in environment")

    elif provider in ("gemini", "anthropic"):
        key_name = f"{provider.upper()}_API_KEY"
        if not os.getenv(key_name):
            logger.warning(f"{key_name} not found in environment")

    elif provider == "ollama":
        base_url = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
        os.environ["OLLAMA_API_BASE"] = base_url
        logger.debug(f"OLLAMA_API_BASE configured: {base_url}")


def parse_json_response(response: str | None) -> dict:
    """
    Parse a JSON object from an LLM response.
    Handles markdown code blocks and chatter around the object.

    Raises:
        ValueError: If the response is empty or holds no JSON object
    """
    if response is None or not response.strip():
        raise ValueError("LLM returned empty response")

    cleaned = response.strip()

    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]

    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]

    cleaned = cleaned.strip()

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        # Try to extract JSON from the response
        json_match = re.search(r"\{[\s\S]*\}", cleaned)
        if not json_match:
            snippet = cleaned[:200] + "..." if len(cleaned) > 200 else cleaned
            raise ValueError(f"Failed to parse JSON from LLM response: {snippet}") from None
        try:
            parsed = json.loads(json_match.group())
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse JSON from LLM response: {e}") from e

    if not isinstance(parsed, dict):
        raise ValueError(f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed
