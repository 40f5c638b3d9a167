"""Core data models for News AI."""

from dataclasses import dataclass, field

PLACEHOLDER_IMAGE_URL = "https://source.unsplash.com/featured/?news"

# Selection keys offered to the user, mapped to the provider search term.
TOPIC_ALIASES: dict[str, str] = {
    "tech": "technology",
    "sports": "sports",
    "finance": "finance",
    "health": "health",
    "entertainment": "entertainment",
}

TOPICS: tuple[str, ...] = tuple(TOPIC_ALIASES)


def resolve_topic(topic: str) -> str:
    """Map a topic selection key to the search term sent to the provider.

    Unknown keys (e.g. "general" or free text) pass through unchanged.
    """
    return TOPIC_ALIASES.get(topic, topic)


@dataclass(frozen=True)
class Article:
    """A news article returned by the search provider.

    Identity is the ``url`` field, compared with exact string equality.
    URLs that differ only in tracking parameters are distinct articles.
    """

    url: str
    title: str = ""
    description: str | None = None
    content: str | None = None
    image_url: str | None = None
    author: str | None = None
    published_at: str | None = None
    source: str = ""

    @property
    def display_image_url(self) -> str:
        """Image URL safe to render, with a placeholder for missing/non-http values."""
        if self.image_url and self.image_url.startswith("http"):
            return self.image_url
        return PLACEHOLDER_IMAGE_URL


@dataclass(frozen=True)
class QueryState:
    """The active topic query and pagination cursor."""

    topic: str
    page_index: int = 1
    page_size: int = 9


@dataclass(frozen=True)
class PageResult:
    """One page of articles as returned by the provider."""

    articles: tuple[Article, ...]
    requested_page_size: int

    @property
    def has_more(self) -> bool:
        # A short page ends pagination; there is no real cursor.
        return len(self.articles) == self.requested_page_size


@dataclass(frozen=True)
class SummaryRecord:
    """AI summary of an article plus a sentiment emoji.

    ``fallback`` is set when the record was synthesized from the raw article
    text because the summarization provider was rate limited.
    """

    summary: str
    emoji: str
    fallback: bool = False


@dataclass(frozen=True)
class APICallUsage:
    """Usage from a single model call."""

    model: str
    input_tokens: int = 0
    output_tokens: int = 0


@dataclass
class Usage:
    """Accumulated upstream usage across pipeline components."""

    api_calls: list[APICallUsage] = field(default_factory=list)
    news_requests: int = 0
    qa_requests: int = 0

    @property
    def input_tokens(self) -> int:
        return sum(c.input_tokens for c in self.api_calls)

    @property
    def output_tokens(self) -> int:
        return sum(c.output_tokens for c in self.api_calls)

    def __add__(self, other: "Usage") -> "Usage":
        return Usage(
            api_calls=self.api_calls + other.api_calls,
            news_requests=self.news_requests + other.news_requests,
            qa_requests=self.qa_requests + other.qa_requests,
        )

    def __iadd__(self, other: "Usage") -> "Usage":
        self.api_calls.extend(other.api_calls)
        self.news_requests += other.news_requests
        self.qa_requests += other.qa_requests
        return self
