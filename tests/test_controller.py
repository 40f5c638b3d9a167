"""Tests for PipelineController."""

import asyncio
import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from news_ai.augment import AugmentationCache
from news_ai.data import APICallUsage, Article, PageResult, SummaryRecord, Usage
from news_ai.errors import ErrorKind, PipelineError
from news_ai.paginator import ArticlePaginator
from news_ai.pipeline import FeedState, PipelineController
from news_ai.session_log import SessionLogger

QUIET = 0.02


def _page(topic: str, start: int, count: int, page_size: int = 9) -> tuple[PageResult, Usage]:
    articles = tuple(
        Article(url=f"https://example.com/{topic}/{i}", title=f"{topic} {i}")
        for i in range(start, start + count)
    )
    return (PageResult(articles=articles, requested_page_size=page_size), Usage(news_requests=1))


class TestPipelineController:
    """Tests for PipelineController."""

    @pytest.fixture
    def mock_source(self) -> MagicMock:
        """Create a mock news source returning a full page for any topic."""
        source = MagicMock()
        source.fetch_page = AsyncMock(side_effect=lambda topic, *, page, page_size: _page(
            topic, (page - 1) * page_size, page_size
        ))
        return source

    @pytest.fixture
    def mock_summarizer(self) -> MagicMock:
        summarizer = MagicMock()
        summarizer.summarize = AsyncMock(
            return_value=(SummaryRecord(summary="Summary.", emoji="🙂"), Usage())
        )
        return summarizer

    @pytest.fixture
    def mock_answerer(self) -> MagicMock:
        answerer = MagicMock()
        answerer.answer = AsyncMock(return_value=("An answer", Usage(qa_requests=1)))
        return answerer

    @pytest.fixture
    def controller(
        self,
        mock_source: MagicMock,
        mock_summarizer: MagicMock,
        mock_answerer: MagicMock,
    ) -> PipelineController:
        """Create a controller with mocked gateways."""
        return PipelineController(
            ArticlePaginator(mock_source, page_size=9),
            AugmentationCache(mock_summarizer, mock_answerer),
            quiet_interval=QUIET,
        )

    # -- Feed --

    async def test_start_loads_default_topic(
        self, controller: PipelineController, mock_source: MagicMock
    ) -> None:
        state = await controller.start()

        assert state.topic == "general"
        assert len(state.articles) == 9
        assert state.has_more is True
        assert state.loading is False
        assert state.page_index == 2
        assert state.error is None
        mock_source.fetch_page.assert_awaited_once_with("general", page=1, page_size=9)

    async def test_start_with_topic(self, controller: PipelineController) -> None:
        state = await controller.start("tech")
        assert state.topic == "tech"

    async def test_load_more_appends(
        self, controller: PipelineController, mock_source: MagicMock
    ) -> None:
        await controller.start("tech")
        state = await controller.load_more()

        assert len(state.articles) == 18
        assert mock_source.fetch_page.call_args.kwargs["page"] == 2

    async def test_short_page_ends_feed(
        self, controller: PipelineController, mock_source: MagicMock
    ) -> None:
        mock_source.fetch_page.side_effect = [_page("tech", 0, 9), _page("tech", 9, 4)]
        await controller.start("tech")
        state = await controller.load_more()

        assert len(state.articles) == 13
        assert state.has_more is False

        # Further load_more calls are no-ops
        state = await controller.load_more()
        assert len(state.articles) == 13
        assert mock_source.fetch_page.await_count == 2

    async def test_publishes_loading_then_result(self, controller: PipelineController) -> None:
        states: list[FeedState] = []
        controller.subscribe(states.append)

        await controller.start("tech")

        assert [s.loading for s in states] == [False, True, False]
        assert states[0].articles == ()
        assert len(states[-1].articles) == 9

    async def test_unsubscribe(self, controller: PipelineController) -> None:
        states: list[FeedState] = []
        unsubscribe = controller.subscribe(states.append)
        unsubscribe()

        await controller.start("tech")
        assert states == []

    async def test_error_is_published_and_state_kept(
        self, controller: PipelineController, mock_source: MagicMock
    ) -> None:
        mock_source.fetch_page.side_effect = [
            _page("tech", 0, 9),
            PipelineError(ErrorKind.RATE_LIMITED, status_code=429),
        ]
        await controller.start("tech")
        state = await controller.load_more()

        assert state.error is ErrorKind.RATE_LIMITED
        assert state.error_message == "API rate limit exceeded. Please try again later."
        assert len(state.articles) == 9
        assert state.has_more is True
        assert state.loading is False

    async def test_empty_topic_clears_feed(
        self, controller: PipelineController, mock_source: MagicMock
    ) -> None:
        await controller.start("")
        assert controller.state.articles == ()
        assert controller.state.has_more is False
        mock_source.fetch_page.assert_not_awaited()

    async def test_topic_selection_is_debounced(
        self, controller: PipelineController, mock_source: MagicMock
    ) -> None:
        await controller.start("tech")

        controller.select_topic("sports")
        controller.select_topic("finance")
        await asyncio.sleep(QUIET * 5)

        assert controller.state.topic == "finance"
        topics = [c.args[0] for c in mock_source.fetch_page.call_args_list]
        assert topics == ["tech", "finance"]
        controller.close()

    async def test_settle_now(self, controller: PipelineController) -> None:
        controller.select_topic("health")
        state = await controller.settle_now()
        assert state.topic == "health"
        assert len(state.articles) == 9

    async def test_topic_switch_resets_feed(self, controller: PipelineController) -> None:
        await controller.start("tech")
        await controller.load_more()

        controller.select_topic("sports")
        state = await controller.settle_now()

        assert state.topic == "sports"
        assert len(state.articles) == 9
        assert all("/sports/" in a.url for a in state.articles)

    async def test_stale_page_not_published(
        self, controller: PipelineController, mock_source: MagicMock
    ) -> None:
        release = asyncio.Event()

        async def fetch(topic: str, *, page: int, page_size: int):
            if topic == "sports":
                await release.wait()
            return _page(topic, 0, page_size)

        mock_source.fetch_page.side_effect = fetch
        slow_start = asyncio.ensure_future(controller.start("sports"))
        await asyncio.sleep(0)

        controller.select_topic("finance")
        await controller.settle_now()
        release.set()
        await slow_start

        assert controller.state.topic == "finance"
        assert all("/finance/" in a.url for a in controller.state.articles)

    async def test_close_cancels_pending_selection(
        self, controller: PipelineController, mock_source: MagicMock
    ) -> None:
        controller.select_topic("sports")
        controller.close()
        await asyncio.sleep(QUIET * 3)
        mock_source.fetch_page.assert_not_awaited()

    # -- Augmentation --

    async def test_summarize_returns_record(self, controller: PipelineController) -> None:
        article = Article(url="https://example.com/1", content="Body text.")
        outcome = await controller.summarize(article)
        assert outcome.record is not None
        assert outcome.record.summary == "Summary."
        assert outcome.error is None

    async def test_summarize_error_outcome(
        self, controller: PipelineController, mock_summarizer: MagicMock
    ) -> None:
        mock_summarizer.summarize.side_effect = PipelineError(ErrorKind.UNAUTHORIZED)
        outcome = await controller.summarize(Article(url="https://example.com/1"))

        assert outcome.record is None
        assert outcome.error is ErrorKind.UNAUTHORIZED
        assert outcome.message == "Invalid API key. Please check your Summary service key."

    async def test_ask_returns_answer(self, controller: PipelineController) -> None:
        article = Article(url="https://example.com/1", content="Body text.")
        outcome = await controller.ask(article, "What happened?")
        assert outcome.answer == "An answer"
        assert outcome.error is None

    async def test_ask_blank_question_is_ignored(
        self, controller: PipelineController, mock_answerer: MagicMock
    ) -> None:
        outcome = await controller.ask(Article(url="https://example.com/1", content="x"), "  ")
        assert outcome.answer is None
        assert outcome.error is None
        mock_answerer.answer.assert_not_awaited()

    async def test_ask_empty_context(
        self, controller: PipelineController, mock_answerer: MagicMock
    ) -> None:
        outcome = await controller.ask(Article(url="https://example.com/1"), "Why?")
        assert outcome.error is ErrorKind.EMPTY_CONTEXT
        assert outcome.message == "No content available to answer questions about."
        mock_answerer.answer.assert_not_awaited()

    async def test_usage_combines_feed_and_augmentation(
        self, controller: PipelineController
    ) -> None:
        await controller.start("tech")
        await controller.ask(Article(url="https://example.com/1", content="x"), "Why?")

        assert controller.usage.news_requests == 1
        assert controller.usage.qa_requests == 1


class TestControllerSessionLog:
    """Session events recorded by the controller."""

    async def test_events_written_on_close(self, tmp_path: Path) -> None:
        source = MagicMock()
        source.fetch_page = AsyncMock(
            side_effect=[_page("tech", 0, 9), PipelineError(ErrorKind.UPSTREAM_SERVER_ERROR)]
        )
        summarizer = MagicMock()
        summarizer.summarize = AsyncMock(
            return_value=(
                SummaryRecord(summary="Summary.", emoji="🙂"),
                Usage(api_calls=[APICallUsage(model="m", input_tokens=120, output_tokens=30)]),
            )
        )
        answerer = MagicMock()
        answerer.answer = AsyncMock(return_value=("An answer", Usage(qa_requests=1)))

        session_logger = SessionLogger(log_dir=tmp_path)
        controller = PipelineController(
            ArticlePaginator(source, page_size=9),
            AugmentationCache(summarizer, answerer),
            session_logger=session_logger,
        )

        await controller.start("tech")
        await controller.load_more()
        await controller.summarize(controller.state.articles[0])
        controller.close()

        path = session_logger.last_log_path
        assert path is not None
        data = json.loads(path.read_text())
        assert data["settings"] == {"initial_topic": "tech", "page_size": 9}
        events = data["events"]
        assert [e["event"] for e in events] == ["page_fetch", "page_fetch", "summary"]
        assert events[0]["component"] == "ArticlePaginator"
        assert events[0]["output"] == {"article_count": 9, "has_more": True}
        assert events[1]["error"] == "upstream_server_error"
        assert events[2]["component"] == "AugmentationCache"
        assert events[0]["usage"]["news_requests"] == 1
        assert events[1]["usage"]["news_requests"] == 0
        assert events[2]["usage"]["input_tokens"] == 120
        assert events[2]["usage"]["news_requests"] == 0
        assert data["total_usage"]["news_requests"] == 1

    async def test_cached_answer_records_no_usage(self, tmp_path: Path) -> None:
        source = MagicMock()
        source.fetch_page = AsyncMock(return_value=_page("tech", 0, 9))
        answerer = MagicMock()
        answerer.answer = AsyncMock(return_value=("An answer", Usage(qa_requests=1)))

        session_logger = SessionLogger(log_dir=tmp_path)
        controller = PipelineController(
            ArticlePaginator(source, page_size=9),
            AugmentationCache(MagicMock(), answerer),
            session_logger=session_logger,
        )
        article = Article(url="https://example.com/1", content="Body text.")

        await controller.start("tech")
        await controller.ask(article, "Why?")
        await controller.ask(article, "Why?")

        answers = [e for e in session_logger.events if e.event == "answer"]
        assert answers[0].usage is not None
        assert answers[0].usage["qa_requests"] == 1
        assert answers[1].usage is not None
        assert answers[1].usage["qa_requests"] == 0
        controller.close()
