"""
Command line interface for the Research Planner Agent.

Loads API keys from environment variables (via `.env`), drafts a research plan
for the topic, asks for feedback on the plan, then researches every step and
writes the final report.

Usage:
    python main.py "solar panel efficiency" --plan-name solar
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from agents.autogen_services import AutoGenResearchServices
from agents.config import ResearchConfig
from agents.research_orchestrator import ResearchOrchestrator
from research_state_manager import OutcomeStatus

logger = logging.getLogger(__name__)

EXIT_CODES = {
    OutcomeStatus.COMPLETED: 0,
    OutcomeStatus.FAILED: 1,
    OutcomeStatus.EXITED: 2,
}


def parse_arguments(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Plan, research and report on a topic.")
    parser.add_argument("topic", nargs="?", help="Topic to research (prompted for when omitted)")
    parser.add_argument("--plan-name", default="research", help="Base name for the plan, answers and report files")
    parser.add_argument("--output-dir", type=Path, help="Directory for the research files")
    parser.add_argument(
        "--max-attempts",
        type=int,
        help="Search attempts per plan step before keeping a best-effort answer (0 = unlimited)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ResearchConfig:
    config = ResearchConfig.from_env()
    if args.output_dir is not None:
        config.output_dir = args.output_dir
    if args.max_attempts is not None:
        config.max_answer_attempts = args.max_attempts
    return config


def main(argv=None) -> int:
    """Run one research session and return the process exit code."""
    args = parse_arguments(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Loading environment variables from .env file...")
    load_dotenv()

    topic = args.topic
    if not topic:
        try:
            topic = input("Research topic> ").strip()
        except EOFError:
            topic = ""
    if not topic:
        print("A research topic is required.")
        return 1

    config = build_config(args)
    try:
        services = AutoGenResearchServices(config)
    except Exception as exc:
        logger.exception("Failed to initialize the research services: %s", exc)
        return 1

    try:
        outcome = asyncio.run(ResearchOrchestrator(services, config=config).run(topic, args.plan_name))
    except KeyboardInterrupt:
        logger.info("Interrupted; research stopped.")
        return 130

    for warning in outcome.warnings:
        logger.warning(warning)
    if outcome.completed:
        print(f"\n{outcome.report}\n")
        print(f"Report saved to {outcome.report_path}")
    else:
        print(f"Research {outcome.status.value}: {outcome.reason}")
    return EXIT_CODES[outcome.status]


if __name__ == "__main__":
    sys.exit(main())
