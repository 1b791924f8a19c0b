"""Shared helpers for the AutoGen-backed research agents."""

from __future__ import annotations

import json
import logging
import os
import re
from typing import Any, Iterable, List, Optional

from autogen_agentchat.agents import AssistantAgent
from autogen_agentchat.messages import BaseChatMessage
from autogen_core import CancellationToken
from autogen_core.models import ChatCompletionClient, ModelInfo
from autogen_ext.models.openai import OpenAIChatCompletionClient

from .config import ResearchConfig

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")


def build_openai_client(config: ResearchConfig) -> ChatCompletionClient:
    if not os.getenv("OPENAI_API_KEY"):
        raise EnvironmentError("OPENAI_API_KEY is not set.")
    model_info: ModelInfo = {
        "vision": False,
        "function_calling": False,
        "json_output": False,
        "structured_output": False,
        "family": "openai",
    }
    client_kwargs = {
        "model": config.openai_model_name,
        "api_key": os.environ["OPENAI_API_KEY"],
        "base_url": config.openai_base_url,
        "include_name_in_message": False,
        "model_info": model_info,
    }
    if config.temperature is not None:
        client_kwargs["temperature"] = config.temperature
    return OpenAIChatCompletionClient(**client_kwargs)


def last_chat_message(messages: Iterable[Any], preferred_source: Optional[str] = None) -> BaseChatMessage:
    candidate: Optional[BaseChatMessage] = None
    for message in reversed(list(messages)):
        if not isinstance(message, BaseChatMessage):
            continue
        if preferred_source and getattr(message, "source", None) == preferred_source:
            return message
        if candidate is None:
            candidate = message
    if candidate:
        return candidate
    raise RuntimeError("Assistant did not produce a chat response.")


def strip_code_fence(text: str) -> str:
    return _FENCE_RE.sub("", text.strip()).strip()


def parse_string_list(text: str) -> List[str]:
    """Parse a JSON array of strings, falling back to one item per bullet line."""

    cleaned = strip_code_fence(text)
    try:
        data = json.loads(cleaned)
        if isinstance(data, list):
            return [str(item).strip() for item in data if str(item).strip()]
    except json.JSONDecodeError:
        logger.debug("Failed to parse JSON array; falling back to plaintext parsing.")

    items: List[str] = []
    for line in cleaned.splitlines():
        item = line.strip().lstrip("-•*1234567890.) ").strip()
        if item:
            items.append(item)
    return items


class SingleTurnAgent:
    """Wraps an `AssistantAgent` that answers one prompt at a time without memory."""

    def __init__(
        self,
        *,
        name: str,
        system_message: str,
        description: str,
        model_client: ChatCompletionClient,
    ) -> None:
        self.name = name
        self.system_message = system_message
        self._assistant = AssistantAgent(
            name=name,
            model_client=model_client,
            system_message=system_message,
            description=description,
            max_tool_iterations=1,
        )

    async def ask(self, prompt: str) -> str:
        await self._assistant.on_reset(CancellationToken())
        result = await self._assistant.run(task=prompt)
        message = last_chat_message(result.messages, preferred_source=self.name)
        text = message.to_text().strip()
        logger.debug("%s raw output: %s", self.name, text)
        return text
