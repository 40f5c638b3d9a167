"""Configuration module for News AI."""

from news_ai.config.factory import (
    create_answerer,
    create_from_config,
    create_news_source,
    create_summarizer,
)
from news_ai.config.loader import get_default_config_path, load_config
from news_ai.config.models import (
    AugmentationConfig,
    ClaudeSummarizerConfig,
    FeedConfig,
    HuggingFaceAnswererConfig,
    LoggingConfig,
    NewsAIConfig,
    NewsAPISourceConfig,
)

__all__ = [
    "AugmentationConfig",
    "ClaudeSummarizerConfig",
    "FeedConfig",
    "HuggingFaceAnswererConfig",
    "LoggingConfig",
    "NewsAIConfig",
    "NewsAPISourceConfig",
    "create_answerer",
    "create_from_config",
    "create_news_source",
    "create_summarizer",
    "get_default_config_path",
    "load_config",
]
