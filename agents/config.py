"""Environment-driven configuration for the research planner."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_OPENAI_MODEL = "gpt-5-nano"
DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
DEFAULT_TAVILY_MCP_URL = "http://127.0.0.1:6112/mcp"
DEFAULT_MAX_ANSWER_ATTEMPTS = 5


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return float(value)


@dataclass(slots=True)
class ResearchConfig:
    """Settings shared by the orchestrator and the AutoGen collaborators.

    ``max_answer_attempts`` bounds the search/answer/evaluate cycle for one
    plan step; ``None`` or ``0`` leaves it unbounded.
    """

    openai_model_name: str = DEFAULT_OPENAI_MODEL
    openai_base_url: str = DEFAULT_OPENAI_BASE_URL
    temperature: Optional[float] = None
    tavily_mcp_base_url: str = DEFAULT_TAVILY_MCP_URL
    tavily_mcp_api_key: Optional[str] = None
    tavily_mcp_tool_name: str = "tavily.search"
    tavily_max_results: int = 5
    tavily_include_raw_content: bool = False
    max_answer_attempts: Optional[int] = DEFAULT_MAX_ANSWER_ATTEMPTS
    output_dir: Path = Path(".")
    log_dir: Path = Path("logs")
    interaction_log: bool = True

    @classmethod
    def from_env(cls) -> "ResearchConfig":
        attempts = os.getenv("RESEARCH_MAX_ANSWER_ATTEMPTS")
        return cls(
            openai_model_name=os.getenv("OPENAI_MODEL", DEFAULT_OPENAI_MODEL),
            openai_base_url=os.getenv("OPENAI_API_BASE_URL", DEFAULT_OPENAI_BASE_URL),
            temperature=_env_float("OPENAI_TEMPERATURE"),
            tavily_mcp_base_url=os.getenv("TAVILY_MCP_BASE_URL", DEFAULT_TAVILY_MCP_URL),
            tavily_mcp_api_key=os.getenv("TAVILY_MCP_API_KEY") or os.getenv("TAVILY_API_KEY"),
            tavily_mcp_tool_name=os.getenv("TAVILY_MCP_TOOL_NAME", "tavily.search"),
            tavily_max_results=int(os.getenv("TAVILY_MAX_RESULTS", "5")),
            tavily_include_raw_content=_env_flag("TAVILY_INCLUDE_RAW_CONTENT", False),
            max_answer_attempts=int(attempts) if attempts else DEFAULT_MAX_ANSWER_ATTEMPTS,
            output_dir=Path(os.getenv("RESEARCH_OUTPUT_DIR", ".")),
            log_dir=Path(os.getenv("RESEARCH_LOG_DIR", "logs")),
            interaction_log=_env_flag("RESEARCH_INTERACTION_LOG", True),
        )

    @property
    def attempt_limit(self) -> Optional[int]:
        if not self.max_answer_attempts or self.max_answer_attempts < 1:
            return None
        return self.max_answer_attempts
