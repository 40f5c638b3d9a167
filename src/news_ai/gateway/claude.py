"""Claude-based article summarizer."""

import json
import logging
import os

import anthropic

from news_ai.data import APICallUsage, Article, SummaryRecord, Usage
from news_ai.errors import ErrorKind, PipelineError

logger = logging.getLogger(__name__)

SUMMARY_PROMPT_TEMPLATE = """\
You are a professional news summarizer.

Summarize the following news content into a detailed summary that is at least \
7 to 10 full sentences long. Include key facts, people, events, numbers, and \
causes. Do not shorten it too much. Be informative but clear and readable.

Also provide one emoji that best represents the sentiment.

Return ONLY valid JSON in this format:
{{"summary": "Your long summary here...", "emoji": "🙂"}}

Content:
"{content}"
"""


def build_summary_prompt(article: Article) -> str:
    """Interpolate the article text (content, else description) into the prompt."""
    return SUMMARY_PROMPT_TEMPLATE.format(content=article.content or article.description or "")


def parse_summary_reply(text: str) -> SummaryRecord:
    """Parse the ``{"summary", "emoji"}`` JSON object from a model reply.

    Raises:
        PipelineError: ``MALFORMED_RESPONSE`` if the reply isn't the expected JSON.
    """
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = [line for line in cleaned.split("\n") if not line.strip().startswith("```")]
        cleaned = "\n".join(lines)

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise PipelineError(
            ErrorKind.MALFORMED_RESPONSE, "Summary reply is not valid JSON"
        ) from exc

    if not isinstance(parsed, dict) or not isinstance(parsed.get("summary"), str):
        raise PipelineError(ErrorKind.MALFORMED_RESPONSE, "Summary reply has no summary field")

    return SummaryRecord(summary=parsed["summary"], emoji=str(parsed.get("emoji", "")))


class ClaudeSummarizer:
    """Summarize articles with the Anthropic messages API.

    Generation parameters are fixed per instance so repeated requests for
    the same article are comparable.

    Args:
        model: Anthropic model ID to use.
        api_key: API key (defaults to CLAUDE_API_KEY env var).
        temperature: Sampling temperature.
        max_tokens: Maximum output tokens.
    """

    def __init__(
        self,
        *,
        model: str = "claude-haiku-4-5-20251001",
        api_key: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 800,
    ) -> None:
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        resolved_key = api_key or os.environ.get("CLAUDE_API_KEY")
        # One request per summarize() call; the SDK must not retry.
        self._client = (
            anthropic.AsyncAnthropic(api_key=resolved_key, max_retries=0) if resolved_key else None
        )

    async def summarize(self, article: Article) -> tuple[SummaryRecord, Usage]:
        """Summarize an article and pick a sentiment emoji.

        Args:
            article: Article whose content (or description) is summarized.

        Returns:
            Tuple of (summary record, usage).

        Raises:
            PipelineError: Classified provider failure or unparseable reply.
        """
        if self._client is None:
            raise PipelineError(
                ErrorKind.MISSING_CREDENTIALS,
                "Claude API key is missing. Pass api_key or set CLAUDE_API_KEY env var.",
            )

        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
                messages=[{"role": "user", "content": build_summary_prompt(article)}],
            )
        except anthropic.AnthropicError as exc:
            raise PipelineError.from_exception(exc) from exc

        usage = Usage(
            api_calls=[
                APICallUsage(
                    model=self._model,
                    input_tokens=response.usage.input_tokens,
                    output_tokens=response.usage.output_tokens,
                ),
            ],
        )

        response_text = ""
        for block in response.content:
            if hasattr(block, "text"):
                response_text += block.text

        logger.debug("Summary reply for %s: %d chars", article.url, len(response_text))
        return (parse_summary_reply(response_text), usage)
