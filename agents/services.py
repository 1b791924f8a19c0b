"""
Collaborator interface for the research orchestrator.

Each external capability the workflow depends on is one async method with a
concrete input/output contract. `AutoGenResearchServices` in
`agents.autogen_services` is the production implementation.
"""

from __future__ import annotations

from typing import List, Mapping, Protocol, Sequence

from research_state_manager import AnswerEvaluation, PreviousSearch, UserIntent

PLAN_FEEDBACK_PROMPT = "How does this plan look? Would you like to proceed or make revisions?"

INTENT_OPTIONS: Mapping[str, str] = {
    UserIntent.CONFIRM.value: "The user is satisfied with the plan and wants to move forward.",
    UserIntent.UPDATE.value: "The user intends to revise certain aspects of the plan.",
    UserIntent.EXIT.value: "The user wishes to halt the research process.",
}


class ResearchServices(Protocol):
    async def ask_user(self, message: str) -> None:
        """Show ``message`` to the user."""

    async def generate_research_plan(self, topic: str) -> List[str]:
        ...

    async def select_user_intent(self, options: Mapping[str, str]) -> UserIntent:
        """Pick exactly one key of ``options`` describing what the user wants."""

    async def update_research_plan(self, topic: str, current_plan: Sequence[str]) -> List[str]:
        ...

    async def web_search(self, query: str, previous_searches: Sequence[PreviousSearch]) -> str:
        """Retrieve content for ``query`` while avoiding the unproductive ``previous_searches``."""

    async def answer_question_about_content(self, content: str, question: str) -> str:
        ...

    async def evaluate_answer(self, question: str, answer: str) -> AnswerEvaluation:
        ...

    async def summarize(self, text: str, topic: str) -> str:
        ...
