"""
Research orchestrator.

Drives one research run end to end:

  1. generate a plan for the topic and save it to ``{plan_name}.txt``,
  2. ask the user to confirm, update or exit until they stop updating,
  3. answer every plan step through search -> answer -> evaluate cycles,
     appending accepted answers to ``{plan_name}_research_answers.md``,
  4. summarize the answers into ``{plan_name}_research_report.txt``.

All intelligence lives behind `ResearchServices`; this module only sequences
the calls and persists their results.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from research_state_manager import (
    OutcomeStatus,
    ResearchOutcome,
    ResearchQuestionState,
    UserIntent,
)

from .config import ResearchConfig
from .interaction_log import InteractionLog
from .research_files import PersistenceError, ResearchFiles
from .services import INTENT_OPTIONS, PLAN_FEEDBACK_PROMPT, ResearchServices

logger = logging.getLogger(__name__)


class ResearchOrchestrator:
    """Sequences plan confirmation, per-question answering and report synthesis."""

    def __init__(
        self,
        services: ResearchServices,
        *,
        config: Optional[ResearchConfig] = None,
        interaction_log: Optional[InteractionLog] = None,
    ) -> None:
        self._services = services
        self._config = config or ResearchConfig()
        self._log = interaction_log or InteractionLog(
            self._config.log_dir, enabled=self._config.interaction_log
        )
        self._question_states: List[ResearchQuestionState] = []

    @property
    def question_states(self) -> List[ResearchQuestionState]:
        """Return the per-question states of the last run."""

        return list(self._question_states)

    async def run(self, topic: str, plan_name: str) -> ResearchOutcome:
        if not topic or not topic.strip():
            raise ValueError("Topic must be a non-empty string.")
        files = ResearchFiles(plan_name, output_dir=self._config.output_dir)
        warnings: List[str] = []
        self._question_states = []
        self._log.start(topic, plan_name)
        logger.info("Starting research on '%s' (plan '%s')", topic, plan_name)

        try:
            outcome = await self._run(topic, files, warnings)
        except PersistenceError as exc:
            logger.error("%s", exc)
            outcome = self._outcome(files, OutcomeStatus.FAILED, warnings, reason=str(exc))
        except Exception as exc:
            self._log.finish(status="error", error=str(exc))
            raise

        self._log.finish(status=outcome.status.value, reason=outcome.reason)
        return outcome

    async def _run(self, topic: str, files: ResearchFiles, warnings: List[str]) -> ResearchOutcome:
        plan = await self._services.generate_research_plan(topic)
        files.write_plan(plan)
        self._log.record("generate_research_plan", {"plan": plan})

        intent = await self._confirm_plan(topic, files)
        if intent is UserIntent.EXIT:
            logger.info("Halting the research at the user's request.")
            self._discard_plan(files, warnings)
            return self._outcome(
                files, OutcomeStatus.EXITED, warnings, reason="Research halted at the user's request."
            )

        final_plan = files.read_plan()
        files.create_answers(topic)
        for index, question in enumerate(final_plan, start=1):
            logger.info("Researching plan step %d/%d: %s", index, len(final_plan), question)
            state = await self._answer_question(question, files, warnings)
            self._question_states.append(state)

        answers = files.read_answers()
        report = await self._services.summarize(answers, topic)
        files.write_report(report)
        self._log.record("summarize", {"report_path": str(files.report_path)})
        logger.info("The research process is complete.")
        return self._outcome(files, OutcomeStatus.COMPLETED, warnings, report=report)

    async def _confirm_plan(self, topic: str, files: ResearchFiles) -> UserIntent:
        intent = UserIntent.UPDATE
        while intent is UserIntent.UPDATE:
            await self._services.ask_user(PLAN_FEEDBACK_PROMPT)
            intent = UserIntent(await self._services.select_user_intent(INTENT_OPTIONS))
            self._log.record("select_user_intent", {"intent": intent.value})
            logger.info("User intent: %s", intent.value)

            if intent is UserIntent.UPDATE:
                current_plan = files.read_plan()
                updated_plan = await self._services.update_research_plan(topic, current_plan)
                files.write_plan(updated_plan)
                self._log.record("update_research_plan", {"plan": updated_plan})
        return intent

    async def _answer_question(
        self, question: str, files: ResearchFiles, warnings: List[str]
    ) -> ResearchQuestionState:
        state = ResearchQuestionState(research_question=question)
        limit = self._config.attempt_limit

        while True:
            state.attempts += 1
            content = await self._services.web_search(state.query, tuple(state.previous_searches))
            answer = await self._services.answer_question_about_content(content, question)
            evaluation = await self._services.evaluate_answer(question, answer)
            state.answer = answer
            self._log.record(
                "evaluate_answer",
                {
                    "question": question,
                    "attempt": state.attempts,
                    "is_good": evaluation.is_good,
                    "reasoning": evaluation.reasoning,
                },
            )

            if evaluation.is_good:
                state.accepted = True
                files.append_answer(question, answer)
                return state

            state.record_rejection(evaluation.reasoning)
            logger.info("Answer rejected on attempt %d: %s", state.attempts, evaluation.reasoning)
            if limit is not None and state.attempts >= limit:
                reasoning = " ".join(evaluation.reasoning.split())
                note = f"Unverified after {state.attempts} attempts: {reasoning}"
                logger.warning("Giving up on '%s'. %s", question, note)
                warnings.append(f"{question}: {note}")
                files.append_answer(question, answer, note=note)
                return state

    def _discard_plan(self, files: ResearchFiles, warnings: List[str]) -> None:
        try:
            files.delete_plan()
        except PersistenceError as exc:
            logger.warning("Could not delete the plan file: %s", exc)
            warnings.append(str(exc))

    @staticmethod
    def _outcome(
        files: ResearchFiles,
        status: OutcomeStatus,
        warnings: List[str],
        *,
        report: str = "",
        reason: str = "",
    ) -> ResearchOutcome:
        completed = status is OutcomeStatus.COMPLETED
        return ResearchOutcome(
            status=status,
            plan_name=files.plan_name,
            report=report if completed else "",
            reason=reason,
            plan_path=str(files.plan_path) if files.plan_path.exists() else None,
            answers_path=str(files.answers_path) if files.answers_path.exists() else None,
            report_path=str(files.report_path) if completed else None,
            warnings=list(warnings),
        )


async def research_topic_and_report(
    topic: str,
    plan_name: str,
    services: ResearchServices,
    *,
    config: Optional[ResearchConfig] = None,
) -> str:
    """Run the research workflow and return the report, or ``""`` if it did not complete."""

    outcome = await ResearchOrchestrator(services, config=config).run(topic, plan_name)
    return outcome.report
