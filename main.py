#!/usr/bin/env python
"""CLI for the News AI feed."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import BaseModel, field_validator

from news_ai.config import create_from_config, get_default_config_path, load_config
from news_ai.pipeline import FeedState, PipelineController

logger = logging.getLogger(__name__)


class CLIArgs(BaseModel):
    """Validated CLI arguments."""

    topic: str
    config: Path
    pages: int = 1
    summarize: int | None = None
    question: str | None = None
    log: bool = False
    log_dir: str = "logs"

    @field_validator("config")
    @classmethod
    def config_must_exist(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"Config file not found: {v}")
        return v

    @field_validator("pages")
    @classmethod
    def pages_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("--pages must be at least 1")
        return v


def _print_feed(state: FeedState) -> None:
    if state.error_message:
        logger.error(state.error_message)
        return
    if not state.articles:
        logger.info("No news articles found.")
        return
    for i, article in enumerate(state.articles, 1):
        logger.info(f"{i}. {article.title}")
        logger.info(f"   Source: {article.source}")
        logger.info(f"   URL: {article.url}")
        if article.published_at:
            logger.info(f"   Published: {article.published_at}")


async def _augment(controller: PipelineController, state: FeedState, args: CLIArgs) -> None:
    """Summarize the chosen article and answer the optional question about it."""
    index = args.summarize or 0
    if not 1 <= index <= len(state.articles):
        logger.error(f"--summarize must be between 1 and {len(state.articles)}")
        return

    article = state.articles[index - 1]
    summary = await controller.summarize(article)
    logger.info(f"\n--- Summary: {article.title} ---")
    if summary.record:
        logger.info(f"{summary.record.emoji} {summary.record.summary}")
    else:
        logger.error(summary.message)

    if args.question:
        outcome = await controller.ask(article, args.question)
        logger.info(f"\nQ: {args.question}")
        logger.info(f"A: {outcome.answer}" if outcome.answer else f"Error: {outcome.message}")


async def run(args: CLIArgs) -> None:
    """Load the feed for a topic and optionally augment one article.

    Args:
        args: Validated CLI arguments.
    """
    config = load_config(args.config)
    controller, session_logger = create_from_config(
        config,
        log_override=args.log if args.log else None,
        log_dir_override=args.log_dir if args.log_dir != "logs" else None,
    )

    try:
        await controller.start(args.topic)

        for _ in range(args.pages - 1):
            if not controller.state.has_more or controller.state.error:
                break
            await controller.load_more()

        state = controller.state
        logger.info(f"\nShowing news for: {state.topic or 'latest news'}")
        logger.info(f"Loaded {len(state.articles)} articles (more available: {state.has_more})\n")
        _print_feed(state)

        if args.summarize is not None:
            await _augment(controller, state, args)
    finally:
        controller.close()

    usage = controller.usage
    logger.info("\n--- Usage Summary ---")
    logger.info(f"News requests: {usage.news_requests}")
    logger.info(f"Summary calls: {len(usage.api_calls)}")
    logger.info(f"Input tokens: {usage.input_tokens:,}")
    logger.info(f"Output tokens: {usage.output_tokens:,}")
    logger.info(f"QA requests: {usage.qa_requests}")

    if session_logger and session_logger.last_log_path:
        logger.info(f"\nSession log written to: {session_logger.last_log_path}")


def main() -> None:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(description="Browse topic news with AI summaries.")
    parser.add_argument(
        "topic",
        help="Topic key (tech, sports, finance, health, entertainment) or search term",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: configs/default.yaml)",
    )
    parser.add_argument(
        "--pages",
        type=int,
        default=1,
        help="Number of pages to load (default: 1)",
    )
    parser.add_argument(
        "--summarize",
        type=int,
        default=None,
        help="1-based index of the article to summarize",
    )
    parser.add_argument(
        "--question",
        "-q",
        default=None,
        help="Question to ask about the summarized article",
    )
    parser.add_argument(
        "--log",
        action="store_true",
        default=False,
        help="Enable session event logging to JSON file",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default="logs",
        help="Directory for log files (default: logs/)",
    )

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    ns = parser.parse_args()
    config_path: Path = ns.config if ns.config else get_default_config_path()

    try:
        args = CLIArgs(
            topic=ns.topic,
            config=config_path,
            pages=ns.pages,
            summarize=ns.summarize,
            question=ns.question,
            log=ns.log,
            log_dir=ns.log_dir,
        )
    except Exception as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
