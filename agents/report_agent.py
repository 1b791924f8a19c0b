"""ReportAgent: condenses the answered plan into the final report."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from autogen_core.models import ChatCompletionClient

from .llm import SingleTurnAgent
from .research_prompts import report_prompt

logger = logging.getLogger(__name__)


class ReportAgent:
    def __init__(self, *, model_client: ChatCompletionClient) -> None:
        now = datetime.now(timezone.utc)
        self._agent = SingleTurnAgent(
            name="research_reporter",
            system_message=report_prompt(
                current_dt_iso=now.strftime("%Y-%m-%dT%H:%M:%SZ"),
                current_day=now.strftime("%A"),
            ),
            description="Synthesizes answered research questions into a final report.",
            model_client=model_client,
        )

    async def summarize(self, text: str, topic: str) -> str:
        prompt = f"Research topic:\n{topic}\n\nResearch notes:\n{text}\n\nWrite the final report."
        logger.info("ReportAgent summarizing %d characters of notes", len(text))
        return await self._agent.ask(prompt)
