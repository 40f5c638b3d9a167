"""Controller wiring topic selection, pagination and augmentation together."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, replace

from news_ai.augment import AugmentationCache
from news_ai.data import Article, SummaryRecord, Usage
from news_ai.debounce import TopicDebouncer
from news_ai.errors import ErrorKind, PipelineError, user_message
from news_ai.paginator import ArticlePaginator
from news_ai.session_log import SessionLogger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedState:
    """Snapshot of the article feed handed to the presentation layer."""

    topic: str = ""
    articles: tuple[Article, ...] = ()
    has_more: bool = False
    loading: bool = False
    page_index: int = 1
    error: ErrorKind | None = None
    error_message: str | None = None


@dataclass(frozen=True)
class SummaryOutcome:
    """Result of a summary request: either a record or an error."""

    record: SummaryRecord | None = None
    error: ErrorKind | None = None
    message: str | None = None


@dataclass(frozen=True)
class AnswerOutcome:
    """Result of a question: an answer, an error, or neither for a blank question."""

    answer: str | None = None
    error: ErrorKind | None = None
    message: str | None = None


FeedListener = Callable[[FeedState], None]


class PipelineController:
    """Orchestrates the feed and article augmentation for one session.

    Flow:
    1. Topic selections go through the debouncer
    2. A settled topic resets the paginator and loads page 1
    3. ``load_more`` appends further pages
    4. Article selection looks up or requests a summary; questions likewise

    Every feed change is published to subscribers as a new ``FeedState``.

    Args:
        paginator: Article paginator for the feed.
        augmentation: Session augmentation cache.
        quiet_interval: Debounce interval for topic selection, in seconds.
        default_topic: Topic loaded by ``start``.
        session_logger: Optional SessionLogger for event recording.
    """

    def __init__(
        self,
        paginator: ArticlePaginator,
        augmentation: AugmentationCache,
        *,
        quiet_interval: float = 0.5,
        default_topic: str = "general",
        session_logger: SessionLogger | None = None,
    ) -> None:
        self._paginator = paginator
        self._augmentation = augmentation
        self._default_topic = default_topic
        self._session_logger = session_logger
        self._debouncer = TopicDebouncer(self._on_topic_settled, quiet_interval=quiet_interval)
        self._listeners: list[FeedListener] = []
        self._feed_version = 0
        self._state = FeedState()

    @property
    def state(self) -> FeedState:
        return self._state

    @property
    def paginator(self) -> ArticlePaginator:
        return self._paginator

    @property
    def augmentation(self) -> AugmentationCache:
        return self._augmentation

    @property
    def debouncer(self) -> TopicDebouncer:
        return self._debouncer

    @property
    def usage(self) -> Usage:
        """Combined usage of the feed and the augmentation cache."""
        return self._paginator.usage + self._augmentation.usage

    def subscribe(self, listener: FeedListener) -> Callable[[], None]:
        """Register a listener for feed state changes.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def start(self, topic: str | None = None) -> FeedState:
        """Load the initial topic immediately, without debouncing.

        Args:
            topic: Initial topic; defaults to the configured default topic.
        """
        initial = self._default_topic if topic is None else topic
        if self._session_logger:
            self._session_logger.start_session(
                {"initial_topic": initial, "page_size": self._paginator.page_size}
            )
        await self._on_topic_settled(initial)
        return self._state

    def select_topic(self, topic: str | None) -> None:
        """Forward a raw topic selection; it settles after the quiet interval."""
        self._debouncer.submit(topic)

    async def settle_now(self) -> FeedState:
        """Settle a pending topic selection immediately."""
        await self._debouncer.flush()
        return self._state

    async def load_more(self) -> FeedState:
        """Append the next page for the current topic."""
        await self._fetch()
        return self._state

    async def summarize(self, article: Article) -> SummaryOutcome:
        """Get the summary for a selected article (cached or freshly requested)."""
        t0 = time.monotonic()
        before = _snapshot(self._augmentation.usage)
        try:
            record = await self._augmentation.get_or_request_summary(article)
        except PipelineError as exc:
            logger.warning("Summary failed for %s: %s", article.url, exc)
            self._log("summary", article.url, None, t0, before, exc.kind)
            return SummaryOutcome(error=exc.kind, message=user_message(exc.kind, "summary"))

        self._log("summary", article.url, record, t0, before)
        return SummaryOutcome(record=record)

    async def ask(self, article: Article, question: str) -> AnswerOutcome:
        """Answer a question about an article (cached or freshly requested)."""
        if not question.strip():
            return AnswerOutcome()

        request = {"url": article.url, "question": question}
        t0 = time.monotonic()
        before = _snapshot(self._augmentation.usage)
        try:
            answer = await self._augmentation.get_or_request_answer(article, question)
        except PipelineError as exc:
            logger.warning("Answer failed for %s: %s", article.url, exc)
            self._log("answer", request, None, t0, before, exc.kind)
            return AnswerOutcome(error=exc.kind, message=user_message(exc.kind, "answer"))

        self._log("answer", request, answer, t0, before)
        return AnswerOutcome(answer=answer)

    def close(self) -> None:
        """Cancel pending topic settlements and write the session log."""
        self._debouncer.close()
        if self._session_logger:
            path = self._session_logger.finish_session(self.usage)
            if path:
                logger.info("Session log written to: %s", path)

    async def _on_topic_settled(self, topic: str) -> None:
        self._feed_version += 1
        self._paginator.reset_for(topic)
        self._publish()
        await self._fetch()

    async def _fetch(self) -> None:
        version = self._feed_version
        page_request = {"topic": self._paginator.topic, "page": self._paginator.page_index}
        t0 = time.monotonic()
        before = _snapshot(self._paginator.usage)

        if self._paginator.topic and (self._paginator.has_more or page_request["page"] == 1):
            self._publish(loading=True)

        try:
            result = await self._paginator.fetch_next_page()
        except PipelineError as exc:
            if version != self._feed_version:
                return
            logger.warning("Page %d fetch failed: %s", page_request["page"], exc)
            self._log("page_fetch", page_request, None, t0, before, exc.kind)
            self._publish(error=exc.kind)
            return

        if version != self._feed_version:
            return

        if result is not None:
            output = {"article_count": len(result.articles), "has_more": result.has_more}
            self._log("page_fetch", page_request, output, t0, before)
        self._publish()

    def _publish(self, *, loading: bool | None = None, error: ErrorKind | None = None) -> None:
        self._state = FeedState(
            topic=self._paginator.topic,
            articles=self._paginator.articles,
            has_more=self._paginator.has_more,
            loading=self._paginator.loading if loading is None else loading,
            page_index=self._paginator.page_index,
            error=error,
            error_message=user_message(error, "news") if error is not None else None,
        )
        for listener in list(self._listeners):
            listener(self._state)

    def _log(
        self,
        event: str,
        input_data: object,
        output_data: object,
        started_at: float,
        usage_before: Usage,
        error: ErrorKind | None = None,
    ) -> None:
        """Record one event with the usage the component accrued since ``usage_before``."""
        if not self._session_logger:
            return
        owner = self._paginator if event == "page_fetch" else self._augmentation
        self._session_logger.log_event(
            event=event,
            component=type(owner).__name__,
            input_data=input_data,
            output_data=output_data,
            usage=_usage_since(usage_before, owner.usage),
            duration_seconds=time.monotonic() - started_at,
            error=error.value if error is not None else None,
        )


def _snapshot(usage: Usage) -> Usage:
    return replace(usage, api_calls=list(usage.api_calls))


def _usage_since(before: Usage, current: Usage) -> Usage:
    """Usage added to ``current`` after ``before`` was snapshotted from it.

    Usage only grows, so the new model calls are the tail of ``api_calls``.
    Overlapping operations on the same component share each other's usage.
    """
    return Usage(
        api_calls=current.api_calls[len(before.api_calls) :],
        news_requests=current.news_requests - before.news_requests,
        qa_requests=current.qa_requests - before.qa_requests,
    )
