"""PlannerAgent: drafts and revises the research plan."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from autogen_core.models import ChatCompletionClient

from .llm import SingleTurnAgent, parse_string_list
from .research_prompts import PLANNER_PROMPT

logger = logging.getLogger(__name__)

MAX_PLAN_STEPS = 8


class PlannerAgent:
    """Breaks a topic into ordered research questions."""

    def __init__(self, *, model_client: ChatCompletionClient) -> None:
        self._agent = SingleTurnAgent(
            name="research_planner",
            system_message=PLANNER_PROMPT,
            description="Decomposes a research topic into an ordered list of questions.",
            model_client=model_client,
        )

    async def generate(self, topic: str) -> List[str]:
        if not topic or not topic.strip():
            raise ValueError("Topic must be a non-empty string.")
        prompt = f"Research topic: {topic}\n\nReturn only a JSON array of strings."
        text = await self._agent.ask(prompt)
        return self._to_plan(text, fallback=[topic.strip()])

    async def revise(self, topic: str, current_plan: Sequence[str], feedback: Optional[str] = None) -> List[str]:
        steps = "\n".join(f"{idx}. {step}" for idx, step in enumerate(current_plan, start=1))
        prompt_parts = [f"Research topic: {topic}", f"Current plan:\n{steps}"]
        if feedback:
            prompt_parts.append(f"User feedback:\n{feedback}")
        prompt_parts.append("Return the revised plan as a JSON array of strings.")
        text = await self._agent.ask("\n\n".join(prompt_parts))
        return self._to_plan(text, fallback=list(current_plan))

    @staticmethod
    def _to_plan(text: str, *, fallback: List[str]) -> List[str]:
        plan = parse_string_list(text)
        if not plan:
            logger.warning("Planner returned no steps; keeping %d fallback step(s).", len(fallback))
            return fallback
        if len(plan) > MAX_PLAN_STEPS:
            plan = plan[:MAX_PLAN_STEPS]
        logger.info("Using research plan: %s", plan)
        return plan
