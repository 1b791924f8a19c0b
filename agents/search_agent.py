"""SearchAgent: web search that learns from earlier rejected queries."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

from autogen_core.models import ChatCompletionClient

from research_state_manager import PreviousSearch

from .llm import SingleTurnAgent, strip_code_fence
from .mcp_client import MCPToolClient
from .research_prompts import SEARCH_QUERY_PROMPT

logger = logging.getLogger(__name__)


def simplify_results(response: Any) -> List[Dict[str, str]]:
    """Flatten a Tavily response into ``title``/``content``/``url`` entries."""

    if isinstance(response, dict) and set(response) == {"result"}:
        # MCPToolClient wraps non-object tool results this way.
        return simplify_results(response["result"])

    if isinstance(response, dict):
        entries: List[Any] = []
        answer = response.get("answer")
        if isinstance(answer, str) and answer.strip():
            entries.append({"title": "Answer", "content": answer.strip()})
        listed = [key for key in ("results", "data") if isinstance(response.get(key), list)]
        for key in listed:
            entries.extend(response[key])
        if not entries and not listed:
            entries = [response]
    elif isinstance(response, list):
        entries = response
    else:
        entries = [response]

    simplified: List[Dict[str, str]] = []
    for entry in entries:
        if not isinstance(entry, dict):
            simplified.append({"title": str(entry), "content": str(entry), "url": ""})
            continue
        title = entry.get("title") or entry.get("source") or entry.get("url") or "Result"
        content = entry.get("content") or entry.get("snippet") or entry.get("summary") or ""
        url = entry.get("url") or entry.get("link") or ""
        simplified.append({"title": str(title), "content": str(content), "url": str(url)})
    return simplified


def format_results(query: str, results: Sequence[Dict[str, str]]) -> str:
    if not results:
        return f"Query: {query}\nNo results found."
    lines = []
    for item in results:
        citation = f" ({item['url']})" if item.get("url") else ""
        lines.append(f"- {item['title']}{citation}: {item['content']}")
    return f"Query: {query}\n" + "\n".join(lines)


class SearchAgent:
    """Runs Tavily searches over MCP, refining the query after rejected attempts."""

    def __init__(
        self,
        *,
        tool_client: MCPToolClient,
        model_client: Optional[ChatCompletionClient] = None,
        max_results: int = 5,
        include_raw_content: bool = False,
    ) -> None:
        self._tool_client = tool_client
        self._max_results = max_results
        self._include_raw_content = include_raw_content
        self._query_agent: Optional[SingleTurnAgent] = None
        if model_client is not None:
            self._query_agent = SingleTurnAgent(
                name="search_query_generator",
                system_message=SEARCH_QUERY_PROMPT,
                description="Rewrites a search query after unproductive attempts.",
                model_client=model_client,
            )

    async def search(self, query: str, previous_searches: Sequence[PreviousSearch]) -> str:
        if not query or not query.strip():
            raise ValueError("Query must be a non-empty string.")
        effective_query = await self._refine_query(query, previous_searches)
        logger.info("Executing Tavily search for: %s", effective_query)
        payload = {
            "query": effective_query,
            "max_results": self._max_results,
            "include_raw_content": self._include_raw_content,
        }
        response = await asyncio.to_thread(self._tool_client.call_tool, **payload)
        results = simplify_results(response)[: self._max_results]
        return format_results(effective_query, results)

    async def _refine_query(self, query: str, previous_searches: Sequence[PreviousSearch]) -> str:
        if not previous_searches or self._query_agent is None:
            return query
        history = "\n".join(
            f"- query: {item.query}\n  rejected because: {item.reasoning}" for item in previous_searches
        )
        prompt = (
            f"Research question: {query}\n\nEarlier searches that did not produce a good answer:\n{history}\n\n"
            "Respond with one new search query."
        )
        text = strip_code_fence(await self._query_agent.ask(prompt)).strip().strip('"')
        refined = text.splitlines()[0].strip() if text else ""
        if not refined:
            return query
        logger.info("Refined search query after %d rejection(s): %s", len(previous_searches), refined)
        return refined
