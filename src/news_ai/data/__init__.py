from news_ai.data.models import (
    PLACEHOLDER_IMAGE_URL,
    TOPIC_ALIASES,
    TOPICS,
    APICallUsage,
    Article,
    PageResult,
    QueryState,
    SummaryRecord,
    Usage,
    resolve_topic,
)

__all__ = [
    "APICallUsage",
    "Article",
    "PLACEHOLDER_IMAGE_URL",
    "PageResult",
    "QueryState",
    "SummaryRecord",
    "TOPICS",
    "TOPIC_ALIASES",
    "Usage",
    "resolve_topic",
]
