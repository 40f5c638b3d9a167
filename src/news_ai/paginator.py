"""Accumulating, deduplicating paginator over a news source."""

import asyncio
import logging

from news_ai.data import Article, PageResult, QueryState, Usage
from news_ai.errors import PipelineError
from news_ai.gateway.base import NewsSource

logger = logging.getLogger(__name__)


class ArticlePaginator:
    """Owns the accumulated article list for the active topic.

    Pages are requested one at a time: a call to ``fetch_next_page`` while
    another fetch for the same topic is pending attaches to the pending
    fetch instead of issuing a second request. ``reset_for`` switches topic;
    any fetch still in flight for the previous topic is discarded when it
    lands.

    Args:
        source: News source used to fetch pages.
        page_size: Number of articles requested per page.
    """

    def __init__(self, source: NewsSource, *, page_size: int = 9) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self._source = source
        self._page_size = page_size
        self._topic = ""
        self._page_index = 1
        self._articles: list[Article] = []
        self._seen_urls: set[str] = set()
        self._has_more = False
        self._pages_merged = 0
        self._generation = 0
        self._in_flight: asyncio.Task[PageResult | None] | None = None
        self._in_flight_generation = -1
        self.usage = Usage()

    @property
    def topic(self) -> str:
        return self._topic

    @property
    def page_index(self) -> int:
        """The page the next fetch will request (1-based)."""
        return self._page_index

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def articles(self) -> tuple[Article, ...]:
        return tuple(self._articles)

    @property
    def has_more(self) -> bool:
        return self._has_more

    @property
    def loading(self) -> bool:
        return self._in_flight is not None and self._in_flight_generation == self._generation

    @property
    def query_state(self) -> QueryState:
        return QueryState(
            topic=self._topic, page_index=self._page_index, page_size=self._page_size
        )

    def reset_for(self, topic: str) -> None:
        """Switch to a new topic: clear accumulated articles and rewind to page 1.

        No request is made; call ``fetch_next_page`` to load the first page.
        """
        self._generation += 1
        self._topic = topic or ""
        self._page_index = 1
        self._articles = []
        self._seen_urls = set()
        self._has_more = False
        self._pages_merged = 0

    async def fetch_next_page(self) -> PageResult | None:
        """Fetch and merge the page at ``page_index``.

        Returns:
            The fetched page, or None when nothing was merged: no active topic,
            results already exhausted, or the topic changed while the request
            was in flight.

        Raises:
            PipelineError: If the source failed. Accumulated state is unchanged.
        """
        if not self._topic:
            self._articles = []
            self._seen_urls = set()
            self._has_more = False
            return None

        if self._pages_merged and not self._has_more:
            return None

        in_flight = self._in_flight
        if in_flight is not None and self._in_flight_generation == self._generation:
            return await asyncio.shield(in_flight)

        task = asyncio.ensure_future(
            self._fetch(self._generation, self._topic, self._page_index)
        )
        self._in_flight = task
        self._in_flight_generation = self._generation
        task.add_done_callback(self._clear_in_flight)
        return await asyncio.shield(task)

    def _clear_in_flight(self, task: "asyncio.Task[PageResult | None]") -> None:
        if self._in_flight is task:
            self._in_flight = None
            self._in_flight_generation = -1
        if not task.cancelled():
            # Mark the exception retrieved; awaiting callers re-raise it.
            task.exception()

    async def _fetch(self, generation: int, topic: str, page: int) -> PageResult | None:
        try:
            result, usage = await self._source.fetch_page(
                topic, page=page, page_size=self._page_size
            )
        except Exception as exc:
            if generation != self._generation:
                logger.info("Ignoring failure of stale page %d for topic %r: %s", page, topic, exc)
                return None
            if isinstance(exc, PipelineError):
                raise
            raise PipelineError.from_exception(exc) from exc

        self.usage += usage
        if generation != self._generation:
            logger.info("Discarding stale page %d for topic %r", page, topic)
            return None

        self._merge(result)
        return result

    def _merge(self, result: PageResult) -> None:
        added = 0
        for article in result.articles:
            if article.url in self._seen_urls:
                continue
            self._seen_urls.add(article.url)
            self._articles.append(article)
            added += 1

        self._has_more = result.has_more
        self._pages_merged += 1
        self._page_index += 1
        logger.debug(
            "Merged page for %r: %d new of %d, total %d, has_more=%s",
            self._topic,
            added,
            len(result.articles),
            len(self._articles),
            self._has_more,
        )
