"""
State models supporting the research workflow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


class UserIntent(str, Enum):
    """Decision that governs whether the plan proceeds, is revised, or is abandoned."""

    CONFIRM = "confirm"
    UPDATE = "update"
    EXIT = "exit"


class OutcomeStatus(str, Enum):
    COMPLETED = "completed"
    EXITED = "exited"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class PreviousSearch:
    """A search attempt whose answer was rejected, with the evaluator's reasoning."""

    query: str
    reasoning: str


class AnswerEvaluation(BaseModel):
    """Verdict returned by the answer evaluator."""

    is_good: bool
    reasoning: str = Field(default="")


@dataclass(slots=True)
class ResearchQuestionState:
    """Represents a single plan step and its progress through the answer loop."""

    research_question: str
    query: str = ""
    previous_searches: List[PreviousSearch] = field(default_factory=list)
    attempts: int = 0
    answer: Optional[str] = None
    accepted: bool = False
    id: str = field(default_factory=lambda: uuid4().hex)

    def __post_init__(self) -> None:
        if not self.query:
            self.query = self.research_question

    def record_rejection(self, reasoning: str) -> None:
        self.previous_searches.append(PreviousSearch(query=self.query, reasoning=reasoning))

    @property
    def last_reasoning(self) -> str:
        if not self.previous_searches:
            return ""
        return self.previous_searches[-1].reasoning


@dataclass(slots=True)
class ResearchOutcome:
    """Result of one research run, tagged with the reason it ended."""

    status: OutcomeStatus
    plan_name: str
    report: str = ""
    reason: str = ""
    plan_path: Optional[str] = None
    answers_path: Optional[str] = None
    report_path: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def completed(self) -> bool:
        return self.status is OutcomeStatus.COMPLETED
