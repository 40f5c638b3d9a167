"""News AI: topic news feed with AI summaries and question answering."""

from news_ai.augment import AugmentationCache
from news_ai.config import NewsAIConfig, create_from_config, load_config
from news_ai.data import (
    TOPICS,
    APICallUsage,
    Article,
    PageResult,
    QueryState,
    SummaryRecord,
    Usage,
    resolve_topic,
)
from news_ai.debounce import TopicDebouncer
from news_ai.errors import (
    ErrorKind,
    PipelineError,
    classify_error,
    classify_status,
    user_message,
)
from news_ai.gateway import (
    ClaudeSummarizer,
    HuggingFaceAnswerer,
    NewsAPISource,
    NewsSource,
    QuestionAnswerer,
    Summarizer,
)
from news_ai.paginator import ArticlePaginator
from news_ai.pipeline import AnswerOutcome, FeedState, PipelineController, SummaryOutcome
from news_ai.session_log import SessionLogger

__all__ = [
    # Models
    "APICallUsage",
    "Article",
    "PageResult",
    "QueryState",
    "SummaryRecord",
    "TOPICS",
    "Usage",
    "resolve_topic",
    # Errors
    "ErrorKind",
    "PipelineError",
    "classify_error",
    "classify_status",
    "user_message",
    # Protocols
    "NewsSource",
    "QuestionAnswerer",
    "Summarizer",
    # Gateways
    "ClaudeSummarizer",
    "HuggingFaceAnswerer",
    "NewsAPISource",
    # Core
    "ArticlePaginator",
    "AugmentationCache",
    "TopicDebouncer",
    # Pipeline
    "AnswerOutcome",
    "FeedState",
    "PipelineController",
    "SummaryOutcome",
    # Logging
    "SessionLogger",
    # Config
    "NewsAIConfig",
    "create_from_config",
    "load_config",
]
