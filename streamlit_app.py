"""
Streamlit entry point for the Research Planner Agent.

Runs a research session with optional one-shot plan feedback and shows the
plan, the per-question answers and the final report for any plan name.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List

import streamlit as st
from dotenv import load_dotenv

from agents.autogen_services import AutoGenResearchServices
from agents.config import ResearchConfig
from agents.research_files import PersistenceError, ResearchFiles
from agents.research_orchestrator import ResearchOrchestrator

# Ensure environment variables from .env are loaded before building the services.
load_dotenv()

LOGGER = logging.getLogger(__name__)


def scripted_feedback(feedback: str):
    """Return a feedback reader that gives ``feedback`` once, then confirms."""

    replies: List[str] = [feedback] if feedback.strip() else []

    def _read(_prompt: str) -> str:
        return replies.pop(0) if replies else "confirm"

    return _read


def _render_artifacts(files: ResearchFiles) -> None:
    with st.expander("Plan", expanded=False):
        try:
            for idx, step in enumerate(files.read_plan(), start=1):
                st.markdown(f"{idx}. {step}")
        except PersistenceError:
            st.caption("No plan saved for this name.")

    with st.expander("Research answers", expanded=False):
        try:
            st.markdown(files.read_answers())
        except PersistenceError:
            st.caption("No answers recorded yet.")

    if files.report_path.exists():
        st.subheader("Final report")
        st.markdown(files.report_path.read_text(encoding="utf-8"))


def main() -> None:
    st.set_page_config(page_title="Research Planner", layout="wide")
    st.title("Research Planner")
    st.caption("Drafts a research plan, answers every step from live sources, then writes a report.")

    config = ResearchConfig.from_env()
    with st.sidebar:
        st.header("Session")
        plan_name = st.text_input("Plan name", value="research")
        output_dir = st.text_input("Output directory", value=str(config.output_dir))
        config.max_answer_attempts = st.number_input(
            "Attempts per question", min_value=1, max_value=20, value=config.attempt_limit or 5
        )
    config.output_dir = Path(output_dir)

    topic = st.text_input("Topic")
    feedback = st.text_area("Plan feedback (optional, applied once before confirming)")
    notes: List[str] = []

    if st.button("Run research", disabled=not (topic.strip() and plan_name.strip())):
        try:
            services = AutoGenResearchServices(
                config, read_feedback=scripted_feedback(feedback), show=notes.append
            )
        except Exception as exc:  # pragma: no cover - surfaced to UI
            LOGGER.exception("Streamlit failed to initialize the research services: %s", exc)
            st.error(f"Failed to initialize the research services. Verify API keys.\n\nDetails: {exc}")
            return

        with st.spinner("Researching..."):
            outcome = asyncio.run(ResearchOrchestrator(services, config=config).run(topic, plan_name))
        if outcome.completed:
            st.success("Research complete.")
        else:
            st.warning(f"Research {outcome.status.value}: {outcome.reason}")
        for warning in outcome.warnings:
            st.caption(warning)
        if notes:
            with st.expander("Session messages", expanded=False):
                st.text("\n".join(notes))

    if plan_name.strip():
        _render_artifacts(ResearchFiles(plan_name, output_dir=config.output_dir))


if __name__ == "__main__":
    main()
