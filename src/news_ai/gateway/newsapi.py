"""NewsAPI search client."""

import logging
import os
from typing import Any

import httpx

from news_ai.data import Article, PageResult, Usage, resolve_topic
from news_ai.errors import (
    ErrorKind,
    PipelineError,
    classify_news_error_code,
    classify_status,
)

NEWSAPI_URL = "https://newsapi.org/v2/everything"

logger = logging.getLogger(__name__)


class NewsAPISource:
    """Fetch pages of articles from the NewsAPI ``everything`` endpoint.

    Results are always English and sorted by publish time, newest first.
    A missing key does not fail construction; it is reported on the first
    request as ``MISSING_CREDENTIALS``.

    Args:
        api_key: NewsAPI key (defaults to NEWSAPI_KEY env var).
        base_url: Endpoint URL.
        language: Language filter.
        sort_by: Sort order.
        timeout: Transport timeout in seconds.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str = NEWSAPI_URL,
        language: str = "en",
        sort_by: str = "publishedAt",
        timeout: float = 30.0,
    ) -> None:
        self._api_key = api_key or os.environ.get("NEWSAPI_KEY")
        self._base_url = base_url
        self._language = language
        self._sort_by = sort_by
        self._timeout = timeout

    async def fetch_page(
        self,
        topic: str,
        *,
        page: int,
        page_size: int,
    ) -> tuple[PageResult, Usage]:
        """Fetch one page of articles for a topic.

        Args:
            topic: Topic selection key (mapped through the alias table) or search term.
            page: 1-based page index.
            page_size: Number of articles requested.

        Returns:
            Tuple of (page, usage).

        Raises:
            PipelineError: Classified provider or transport failure.
        """
        if not self._api_key:
            raise PipelineError(
                ErrorKind.MISSING_CREDENTIALS,
                "News API key is missing. Pass api_key or set NEWSAPI_KEY env var.",
            )

        params: dict[str, str | int] = {
            "apiKey": self._api_key,
            "q": resolve_topic(topic),
            "page": page,
            "pageSize": page_size,
            "language": self._language,
            "sortBy": self._sort_by,
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(self._base_url, params=params)
        except httpx.HTTPError as exc:
            raise PipelineError.from_exception(exc) from exc

        try:
            data = response.json()
        except ValueError as exc:
            if response.is_error:
                raise PipelineError(
                    classify_status(response.status_code),
                    f"News API returned HTTP {response.status_code}",
                    status_code=response.status_code,
                ) from exc
            raise PipelineError(
                ErrorKind.MALFORMED_RESPONSE,
                "News API returned a non-JSON body",
                status_code=response.status_code,
            ) from exc

        if not isinstance(data, dict):
            raise PipelineError(
                ErrorKind.MALFORMED_RESPONSE,
                "News API returned a non-object body",
                status_code=response.status_code,
            )

        if response.is_error or data.get("status") == "error":
            raise _news_error(response.status_code, data)

        raw_articles = data.get("articles")
        if not isinstance(raw_articles, list):
            raise PipelineError(
                ErrorKind.MALFORMED_RESPONSE,
                "News API response has no articles array",
                status_code=response.status_code,
            )

        articles: list[Article] = []
        for item in raw_articles:
            article = _parse_article(item)
            if article is not None:
                articles.append(article)

        page_result = PageResult(articles=tuple(articles), requested_page_size=page_size)
        return (page_result, Usage(news_requests=1))


def _news_error(status_code: int, data: dict[str, Any]) -> PipelineError:
    """Build a classified error from a failed NewsAPI response."""
    kind = classify_news_error_code(data.get("code"))
    if kind is ErrorKind.UNKNOWN and status_code >= 400:
        kind = classify_status(status_code)
    message = str(data.get("message") or "News API returned an error")
    return PipelineError(kind, message, status_code=status_code)


def _parse_article(item: Any) -> Article | None:
    """Convert one NewsAPI article record, skipping records without a URL."""
    if not isinstance(item, dict) or not item.get("url"):
        logger.warning("Skipping article without url: %r", item)
        return None
    source = item.get("source")
    source_name = source.get("name") if isinstance(source, dict) else None
    return Article(
        url=item["url"],
        title=item.get("title") or "",
        description=item.get("description"),
        content=item.get("content"),
        image_url=item.get("urlToImage"),
        author=item.get("author"),
        published_at=item.get("publishedAt"),
        source=source_name or "Unknown",
    )
