"""
Conversational assistant backed by the Anthropic Messages API.

The model only ever sees the pre-built data snapshot embedded in the system
prompt plus the conversation turns; it has no handle on the data store. The
snapshot is resent on every turn.
"""

import json
import logging
import threading
from typing import Iterable

import anthropic

from . import config
from .errors import AssistantError, ConfigurationError
from .schemas import ChatMessage

logger = logging.getLogger(__name__)

_client: anthropic.Anthropic | None = None
_lock = threading.Lock()


def get_anthropic_client() -> anthropic.Anthropic:
    """Return the shared Anthropic client, creating it once."""
    global _client

    if _client is not None:
        return _client

    with _lock:
        if _client is None:
            if not config.ANTHROPIC_API_KEY:
                raise ConfigurationError("ANTHROPIC_API_KEY must be set")
            _client = anthropic.Anthropic(api_key=config.ANTHROPIC_API_KEY)
    return _client


def build_system_prompt(context: dict) -> str:
    """Fixed Spanish instructions with the snapshot serialised as JSON."""
    return config.ASSISTANT_SYSTEM_PROMPT.format(
        brand=config.BRAND_NAME,
        context=json.dumps(context, ensure_ascii=False, indent=2, default=str),
    )


def ask_assistant(
    messages: Iterable[ChatMessage],
    context: dict,
    client: anthropic.Anthropic | None = None,
) -> str:
    """Send the conversation plus the data snapshot; return the reply text.

    Raises
    ------
    AssistantError
        When the gateway call fails or the reply contains no text.
    """
    turns = [{"role": m.role, "content": m.content} for m in messages]
    if not turns:
        raise AssistantError("conversation is empty")

    client = client or get_anthropic_client()

    try:
        response = client.messages.create(
            model=config.ANTHROPIC_MODEL,
            max_tokens=config.ASSISTANT_MAX_TOKENS,
            system=build_system_prompt(context),
            messages=turns,
        )
    except anthropic.APIError as e:
        logger.error("Assistant request failed: %s", e)
        raise AssistantError("assistant request failed") from e

    text = "".join(
        block.text for block in response.content if getattr(block, "type", None) == "text"
    )
    if not text:
        logger.error("Assistant returned no text (stop_reason=%s)", getattr(response, "stop_reason", None))
        raise AssistantError("assistant returned no text")

    logger.info("Assistant replied with %d chars to %d turns", len(text), len(turns))
    return text
