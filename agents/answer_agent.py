"""AnswerAgent: answers a research question from retrieved web content."""

from __future__ import annotations

import logging

from autogen_core.models import ChatCompletionClient

from .llm import SingleTurnAgent
from .research_prompts import ANSWER_PROMPT

logger = logging.getLogger(__name__)


class AnswerAgent:
    def __init__(self, *, model_client: ChatCompletionClient) -> None:
        self._agent = SingleTurnAgent(
            name="research_answerer",
            system_message=ANSWER_PROMPT,
            description="Answers a question from supplied web content.",
            model_client=model_client,
        )

    async def answer(self, content: str, question: str) -> str:
        if not question or not question.strip():
            raise ValueError("Question must be a non-empty string.")
        prompt = f"Research question:\n{question}\n\nWeb content:\n{content}\n\nAnswer the question."
        logger.info("AnswerAgent answering: %s", question)
        return await self._agent.ask(prompt)
