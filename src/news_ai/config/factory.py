"""Factory functions to create components from configuration."""

from pathlib import Path

from news_ai.augment import AugmentationCache
from news_ai.config.models import (
    ClaudeSummarizerConfig,
    HuggingFaceAnswererConfig,
    NewsAIConfig,
    NewsAPISourceConfig,
)
from news_ai.gateway.base import NewsSource, QuestionAnswerer, Summarizer
from news_ai.gateway.claude import ClaudeSummarizer
from news_ai.gateway.huggingface import HuggingFaceAnswerer
from news_ai.gateway.newsapi import NewsAPISource
from news_ai.paginator import ArticlePaginator
from news_ai.pipeline.controller import PipelineController
from news_ai.session_log import SessionLogger


def create_news_source(config: NewsAPISourceConfig) -> NewsSource:
    """Create a news source from config.

    Uses explicit type matching rather than getattr.
    """
    if isinstance(config, NewsAPISourceConfig):
        return NewsAPISource(
            base_url=config.base_url,
            language=config.language,
            sort_by=config.sort_by,
            timeout=config.timeout,
        )
    msg = f"Unknown news source config type: {type(config)}"
    raise ValueError(msg)


def create_summarizer(config: ClaudeSummarizerConfig) -> Summarizer:
    """Create a summarizer from config."""
    if isinstance(config, ClaudeSummarizerConfig):
        return ClaudeSummarizer(
            model=config.model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )
    msg = f"Unknown summarizer config type: {type(config)}"
    raise ValueError(msg)


def create_answerer(config: HuggingFaceAnswererConfig) -> QuestionAnswerer:
    """Create a question answerer from config."""
    if isinstance(config, HuggingFaceAnswererConfig):
        return HuggingFaceAnswerer(model_url=config.model_url, timeout=config.timeout)
    msg = f"Unknown answerer config type: {type(config)}"
    raise ValueError(msg)


def create_from_config(
    config: NewsAIConfig,
    *,
    log_override: bool | None = None,
    log_dir_override: str | None = None,
) -> tuple[PipelineController, SessionLogger | None]:
    """Create a complete pipeline controller from root config.

    Args:
        config: Root configuration.
        log_override: Override the config's logging.enabled setting.
        log_dir_override: Override the config's logging.log_dir setting.

    Returns:
        Tuple of (controller, session_logger).
        session_logger is None if logging is disabled.
    """
    log_enabled = log_override if log_override is not None else config.logging.enabled
    log_dir = Path(log_dir_override if log_dir_override is not None else config.logging.log_dir)

    session_logger: SessionLogger | None = None
    if log_enabled:
        session_logger = SessionLogger(log_dir=log_dir, enabled=True)

    paginator = ArticlePaginator(
        create_news_source(config.news),
        page_size=config.feed.page_size,
    )
    augmentation = AugmentationCache(
        create_summarizer(config.summarizer),
        create_answerer(config.answerer),
        fallback_max_chars=config.augmentation.fallback_max_chars,
    )
    controller = PipelineController(
        paginator,
        augmentation,
        quiet_interval=config.feed.debounce_seconds,
        default_topic=config.feed.default_topic,
        session_logger=session_logger,
    )
    return (controller, session_logger)
