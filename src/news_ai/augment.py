"""Session cache for AI summaries and question answers."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Hashable
from typing import TypeVar

from news_ai.data import Article, SummaryRecord, Usage
from news_ai.errors import ErrorKind, PipelineError
from news_ai.gateway.base import QuestionAnswerer, Summarizer

logger = logging.getLogger(__name__)

FALLBACK_EMOJI = "😐"
FALLBACK_SUMMARY = "Summary not available."

T = TypeVar("T")


class AugmentationCache:
    """Memoizes summaries per article and answers per (article, question).

    One instance lives for the whole session and is shared by reference.
    Records never expire. For any key at most one request is in flight;
    concurrent callers await the same pending request. Failed requests are
    not cached, so calling again retries.

    Args:
        summarizer: Summarization provider.
        answerer: Question-answering provider.
        fallback_max_chars: Length cap for the raw text used as a fallback summary.
    """

    def __init__(
        self,
        summarizer: Summarizer,
        answerer: QuestionAnswerer,
        *,
        fallback_max_chars: int = 1000,
    ) -> None:
        self._summarizer = summarizer
        self._answerer = answerer
        self._fallback_max_chars = fallback_max_chars
        self._summaries: dict[str, SummaryRecord] = {}
        self._answers: dict[tuple[str, str], str] = {}
        self._pending: dict[Hashable, asyncio.Task] = {}
        self.usage = Usage()

    def cached_summary(self, article: Article) -> SummaryRecord | None:
        return self._summaries.get(article.url)

    def cached_answer(self, article: Article, question: str) -> str | None:
        return self._answers.get((article.url, question))

    def in_flight(self, key: Hashable) -> bool:
        """Whether a request for ``key`` is pending.

        Summary keys are ``("summary", url)``, answer keys ``("answer", url, question)``.
        """
        return key in self._pending

    async def get_or_request_summary(self, article: Article) -> SummaryRecord:
        """Return the summary for an article, requesting it once if needed.

        A rate-limited summarization degrades to a fallback record built from
        the article's own text; that record is cached like a real one.

        Raises:
            PipelineError: Any other provider failure.
        """
        cached = self._summaries.get(article.url)
        if cached is not None:
            return cached
        return await self._single_flight(("summary", article.url), lambda: self._summarize(article))

    async def get_or_request_answer(self, article: Article, question: str) -> str:
        """Answer a question about an article, requesting it once per exact question.

        Context is the article content, else its description, else a model
        summary already cached for it (rate-limit fallbacks are not used).

        Raises:
            ValueError: If the question is blank.
            PipelineError: ``EMPTY_CONTEXT`` when there is nothing to answer from
                (no request is made), or a classified provider failure.
        """
        if not question.strip():
            raise ValueError("question must not be blank")

        context = self._context_for(article)
        if not context:
            raise PipelineError(
                ErrorKind.EMPTY_CONTEXT, "No content available to answer questions about."
            )

        key = (article.url, question)
        cached = self._answers.get(key)
        if cached is not None:
            return cached
        return await self._single_flight(
            ("answer", article.url, question), lambda: self._answer(key, question, context)
        )

    def _context_for(self, article: Article) -> str:
        summary = self._summaries.get(article.url)
        candidates = (
            article.content,
            article.description,
            # A fallback only repeats content/description or the placeholder.
            summary.summary if summary is not None and not summary.fallback else None,
        )
        for candidate in candidates:
            if candidate and candidate.strip():
                return candidate
        return ""

    async def _single_flight(self, key: Hashable, factory: Callable[[], Awaitable[T]]) -> T:
        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._pending[key] = task
            task.add_done_callback(lambda t: self._finish(key, t))
        # Shielded so a cancelled waiter does not cancel the shared request.
        return await asyncio.shield(task)

    def _finish(self, key: Hashable, task: asyncio.Task) -> None:
        if self._pending.get(key) is task:
            del self._pending[key]
        if not task.cancelled():
            task.exception()

    async def _summarize(self, article: Article) -> SummaryRecord:
        try:
            record, usage = await self._summarizer.summarize(article)
        except Exception as exc:
            error = PipelineError.from_exception(exc)
            if error.kind is not ErrorKind.RATE_LIMITED:
                if error is exc:
                    raise
                raise error from exc
            logger.warning("Summarizer rate limited for %s, using article text", article.url)
            record = self._fallback_summary(article)
        else:
            self.usage += usage

        self._summaries[article.url] = record
        return record

    def _fallback_summary(self, article: Article) -> SummaryRecord:
        text = article.content or article.description or FALLBACK_SUMMARY
        return SummaryRecord(
            summary=text[: self._fallback_max_chars], emoji=FALLBACK_EMOJI, fallback=True
        )

    async def _answer(self, key: tuple[str, str], question: str, context: str) -> str:
        try:
            answer, usage = await self._answerer.answer(question, context)
        except Exception as exc:
            error = PipelineError.from_exception(exc)
            if error is exc:
                raise
            raise error from exc
        self.usage += usage
        self._answers[key] = answer
        return answer
