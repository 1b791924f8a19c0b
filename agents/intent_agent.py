"""IntentAgent: classifies the user's reply to a proposed plan."""

from __future__ import annotations

import json
import logging
from typing import Mapping

from autogen_core.models import ChatCompletionClient

from research_state_manager import UserIntent

from .llm import SingleTurnAgent, strip_code_fence
from .research_prompts import INTENT_PROMPT

logger = logging.getLogger(__name__)


def parse_intent(text: str, options: Mapping[str, str]) -> UserIntent:
    """Map raw model output onto one of the option keys.

    Unrecognised output is treated as ``update`` so the user is asked again
    rather than having research start or stop on a misreading.
    """

    cleaned = strip_code_fence(text).strip()
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        data = None
    if isinstance(data, dict):
        value = str(data.get("intent", "")).strip().lower()
        if value in options:
            return UserIntent(value)

    cleaned = cleaned.strip("\"'`.").lower()
    if cleaned in options:
        return UserIntent(cleaned)
    for key in options:
        if cleaned.startswith(key) or f'"{key}"' in text.lower():
            return UserIntent(key)
    logger.warning("Could not classify intent from %r; asking again.", text)
    return UserIntent.UPDATE


class IntentAgent:
    """Determines whether the user confirms, revises or abandons the plan."""

    def __init__(self, *, model_client: ChatCompletionClient) -> None:
        self._agent = SingleTurnAgent(
            name="intent_checker",
            system_message=INTENT_PROMPT,
            description="Classifies the user's reply to the research plan.",
            model_client=model_client,
        )

    async def select(self, options: Mapping[str, str], reply: str) -> UserIntent:
        if not reply or not reply.strip():
            # An empty reply accepts the plan as shown.
            return UserIntent.CONFIRM
        if reply.strip().lower() in options:
            return UserIntent(reply.strip().lower())

        listing = "\n".join(f"- {key}: {description}" for key, description in options.items())
        prompt = f"Options:\n{listing}\n\nUser reply:\n{reply}\n\nRespond with one option key."
        logger.info("IntentAgent classifying reply: %s", reply)
        text = await self._agent.ask(prompt)
        logger.info("IntentAgent raw output: %s", text)
        return parse_intent(text, options)
