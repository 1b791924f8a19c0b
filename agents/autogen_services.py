"""
AutoGen-backed implementation of `ResearchServices`.

- Planner, intent, answer, evaluator and report agents share one
  OpenAI-compatible chat completion client.
- Web search goes through the Tavily MCP server via JSON-RPC.
- Plan feedback is read from the console (or any injected reader).

Required env:
  - OPENAI_API_KEY
  - TAVILY_MCP_BASE_URL (defaults to the local MCP server)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Mapping, Optional, Sequence

from autogen_core.models import ChatCompletionClient

from research_state_manager import AnswerEvaluation, PreviousSearch, UserIntent

from .answer_agent import AnswerAgent
from .config import ResearchConfig
from .intent_agent import IntentAgent
from .llm import build_openai_client
from .mcp_client import MCPServerConfig, MCPToolClient
from .planner_agent import PlannerAgent
from .report_agent import ReportAgent
from .research_evaluator_agent import ResearchEvaluatorAgent
from .search_agent import SearchAgent

logger = logging.getLogger(__name__)


class AutoGenResearchServices:
    def __init__(
        self,
        config: Optional[ResearchConfig] = None,
        *,
        model_client: Optional[ChatCompletionClient] = None,
        tool_client: Optional[MCPToolClient] = None,
        read_feedback: Callable[[str], str] = input,
        show: Callable[[str], None] = print,
    ) -> None:
        self._config = config or ResearchConfig.from_env()
        self._model_client = model_client or build_openai_client(self._config)
        tool_client = tool_client or MCPToolClient(
            config=MCPServerConfig(
                base_url=self._config.tavily_mcp_base_url,
                api_key=self._config.tavily_mcp_api_key,
                tool_name=self._config.tavily_mcp_tool_name,
            )
        )
        logger.info("Initializing research agents with model '%s'", self._config.openai_model_name)

        self._planner = PlannerAgent(model_client=self._model_client)
        self._intent = IntentAgent(model_client=self._model_client)
        self._search = SearchAgent(
            tool_client=tool_client,
            model_client=self._model_client,
            max_results=self._config.tavily_max_results,
            include_raw_content=self._config.tavily_include_raw_content,
        )
        self._answerer = AnswerAgent(model_client=self._model_client)
        self._evaluator = ResearchEvaluatorAgent(model_client=self._model_client)
        self._reporter = ReportAgent(model_client=self._model_client)

        self._read_feedback = read_feedback
        self._show = show
        self._current_plan: List[str] = []
        self._last_feedback: str = ""

    @property
    def current_plan(self) -> List[str]:
        return list(self._current_plan)

    async def ask_user(self, message: str) -> None:
        if self._current_plan:
            steps = "\n".join(f"  {idx}. {step}" for idx, step in enumerate(self._current_plan, start=1))
            self._show(f"\nResearch plan:\n{steps}\n")
        self._show(message)
        self._last_feedback = (await asyncio.to_thread(self._read_feedback, "> ")).strip()

    async def generate_research_plan(self, topic: str) -> List[str]:
        self._current_plan = await self._planner.generate(topic)
        return list(self._current_plan)

    async def select_user_intent(self, options: Mapping[str, str]) -> UserIntent:
        return await self._intent.select(options, self._last_feedback)

    async def update_research_plan(self, topic: str, current_plan: Sequence[str]) -> List[str]:
        self._current_plan = await self._planner.revise(topic, current_plan, feedback=self._last_feedback)
        return list(self._current_plan)

    async def web_search(self, query: str, previous_searches: Sequence[PreviousSearch]) -> str:
        return await self._search.search(query, previous_searches)

    async def answer_question_about_content(self, content: str, question: str) -> str:
        return await self._answerer.answer(content, question)

    async def evaluate_answer(self, question: str, answer: str) -> AnswerEvaluation:
        return await self._evaluator.evaluate(question, answer)

    async def summarize(self, text: str, topic: str) -> str:
        return await self._reporter.summarize(text, topic)
