"""Protocols for the upstream providers."""

from typing import Protocol

from news_ai.data import Article, PageResult, SummaryRecord, Usage


class NewsSource(Protocol):
    """Interface for the paginated news search provider."""

    async def fetch_page(
        self,
        topic: str,
        *,
        page: int,
        page_size: int,
    ) -> tuple[PageResult, Usage]:
        """Fetch one page of articles for a topic.

        Args:
            topic: Topic selection key or free-text search term.
            page: 1-based page index.
            page_size: Number of articles requested per page.

        Returns:
            Tuple of (page, usage).

        Raises:
            PipelineError: If the provider call fails for any reason.
        """
        ...


class Summarizer(Protocol):
    """Interface for the article summarization provider."""

    async def summarize(self, article: Article) -> tuple[SummaryRecord, Usage]:
        """Summarize an article and pick a sentiment emoji.

        Raises:
            PipelineError: If the provider call fails or its reply can't be parsed.
        """
        ...


class QuestionAnswerer(Protocol):
    """Interface for the question-answering provider."""

    async def answer(self, question: str, context: str) -> tuple[str, Usage]:
        """Answer a question from the given context text.

        Raises:
            PipelineError: If the provider call fails.
        """
        ...
