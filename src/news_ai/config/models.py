"""Pydantic configuration models for News AI components."""

from typing import Literal

from pydantic import BaseModel, Field

# ============================================================
# Gateway Configs
# ============================================================


class NewsAPISourceConfig(BaseModel):
    """Configuration for NewsAPISource."""

    type: Literal["newsapi"] = "newsapi"
    base_url: str = "https://newsapi.org/v2/everything"
    language: str = "en"
    sort_by: str = "publishedAt"
    timeout: float = 30.0

    model_config = {"frozen": True}


class ClaudeSummarizerConfig(BaseModel):
    """Configuration for ClaudeSummarizer."""

    type: Literal["claude"] = "claude"
    model: str = "claude-haiku-4-5-20251001"
    temperature: float = Field(default=0.7, ge=0.0, le=1.0)
    max_tokens: int = Field(default=800, gt=0)

    model_config = {"frozen": True}


class HuggingFaceAnswererConfig(BaseModel):
    """Configuration for HuggingFaceAnswerer."""

    type: Literal["huggingface"] = "huggingface"
    model_url: str = "https://api-inference.huggingface.co/models/deepset/roberta-base-squad2"
    timeout: float = 30.0

    model_config = {"frozen": True}


# ============================================================
# Pipeline Configs
# ============================================================


class FeedConfig(BaseModel):
    """Configuration for the paginated article feed."""

    page_size: int = Field(default=9, gt=0)
    default_topic: str = "general"
    debounce_seconds: float = Field(default=0.5, ge=0.0)

    model_config = {"frozen": True}


class AugmentationConfig(BaseModel):
    """Configuration for the augmentation cache."""

    fallback_max_chars: int = Field(default=1000, gt=0)

    model_config = {"frozen": True}


# ============================================================
# Logging Config
# ============================================================


class LoggingConfig(BaseModel):
    """Configuration for session event logging."""

    enabled: bool = False
    log_dir: str = "logs"

    model_config = {"frozen": True}


# ============================================================
# Root Config
# ============================================================


class NewsAIConfig(BaseModel):
    """Root configuration for News AI."""

    news: NewsAPISourceConfig = Field(default_factory=NewsAPISourceConfig)
    summarizer: ClaudeSummarizerConfig = Field(default_factory=ClaudeSummarizerConfig)
    answerer: HuggingFaceAnswererConfig = Field(default_factory=HuggingFaceAnswererConfig)
    feed: FeedConfig = Field(default_factory=FeedConfig)
    augmentation: AugmentationConfig = Field(default_factory=AugmentationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}
