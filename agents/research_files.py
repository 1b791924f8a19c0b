"""Flat-file persistence for the plan, the accumulated answers and the final report."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Sequence

logger = logging.getLogger(__name__)


class PersistenceError(RuntimeError):
    """Raised when a research artifact cannot be read or written."""

    def __init__(self, *, action: str, path: Path, cause: Exception) -> None:
        super().__init__(f"Failed to {action} {path}: {cause}")
        self.action = action
        self.path = path
        self.cause = cause


class ResearchFiles:
    """Paths and I/O for the three artifacts derived from a plan name."""

    def __init__(self, plan_name: str, *, output_dir: Path | str = ".") -> None:
        if not plan_name or not plan_name.strip():
            raise ValueError("Plan name must be a non-empty string.")
        self.plan_name = plan_name
        self.output_dir = Path(output_dir)
        self.plan_path = self.output_dir / f"{plan_name}.txt"
        self.answers_path = self.output_dir / f"{plan_name}_research_answers.md"
        self.report_path = self.output_dir / f"{plan_name}_research_report.txt"

    # ------------------------------------------------------------------
    # Plan
    # ------------------------------------------------------------------
    def write_plan(self, plan: Sequence[str]) -> None:
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            serialized = json.dumps(list(plan), indent=2, ensure_ascii=False)
            self.plan_path.write_text(serialized, encoding="utf-8")
        except (OSError, TypeError) as exc:
            raise PersistenceError(action="save the plan file", path=self.plan_path, cause=exc) from exc
        logger.info("Saved %d plan steps to %s", len(plan), self.plan_path)

    def read_plan(self) -> List[str]:
        try:
            data = json.loads(self.plan_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(action="read the plan file", path=self.plan_path, cause=exc) from exc
        if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
            raise PersistenceError(
                action="read the plan file",
                path=self.plan_path,
                cause=ValueError("expected a JSON array of strings"),
            )
        return data

    def delete_plan(self) -> None:
        try:
            self.plan_path.unlink()
        except OSError as exc:
            raise PersistenceError(action="delete the plan file", path=self.plan_path, cause=exc) from exc
        logger.info("Deleted plan file %s", self.plan_path)

    # ------------------------------------------------------------------
    # Answers
    # ------------------------------------------------------------------
    def create_answers(self, topic: str) -> None:
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            self.answers_path.write_text(f"# Detailed Exploration of {topic}\n\n", encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(
                action="create the research answers file", path=self.answers_path, cause=exc
            ) from exc

    def append_answer(self, question: str, answer: str, *, note: str | None = None) -> None:
        section = f"## {question}\n\n{answer}\n\n"
        if note:
            section += f"> {note}\n\n"
        try:
            with self.answers_path.open("a", encoding="utf-8") as handle:
                handle.write(section)
        except OSError as exc:
            raise PersistenceError(
                action="append the answer to", path=self.answers_path, cause=exc
            ) from exc

    def read_answers(self) -> str:
        try:
            return self.answers_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(
                action="read the research answers file", path=self.answers_path, cause=exc
            ) from exc

    # ------------------------------------------------------------------
    # Report
    # ------------------------------------------------------------------
    def write_report(self, report: str) -> None:
        try:
            self.report_path.write_text(report, encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(action="write the final report", path=self.report_path, cause=exc) from exc
        logger.info("Saved final report to %s", self.report_path)
