"""Extractive question answering via the Hugging Face inference API."""

import logging
import os
from dataclasses import dataclass
from typing import Any

import httpx

from news_ai.data import Usage
from news_ai.errors import ErrorKind, PipelineError

HF_QA_URL = "https://api-inference.huggingface.co/models/deepset/roberta-base-squad2"

NO_CANDIDATE_ANSWER = "No answer found"
UNRECOGNIZED_ANSWER = "Unable to generate an answer from the available content."

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectAnswer:
    """Response shaped as a single object with an ``answer`` field."""

    answer: str

    @property
    def text(self) -> str:
        return self.answer


@dataclass(frozen=True)
class CandidateList:
    """Response shaped as an array of candidate answers, best first."""

    candidates: tuple[dict[str, Any], ...]

    @property
    def text(self) -> str:
        answer = self.candidates[0].get("answer")
        return str(answer) if answer else NO_CANDIDATE_ANSWER


@dataclass(frozen=True)
class UnrecognizedShape:
    """Any response the provider may send that isn't one of the known shapes."""

    raw: Any = None

    @property
    def text(self) -> str:
        return UNRECOGNIZED_ANSWER


QAResponse = DirectAnswer | CandidateList | UnrecognizedShape


def parse_qa_response(data: Any) -> QAResponse:
    """Classify a decoded QA response body into one of the known shapes."""
    if isinstance(data, dict) and data.get("answer"):
        return DirectAnswer(answer=str(data["answer"]))
    if isinstance(data, list) and data and isinstance(data[0], dict):
        return CandidateList(candidates=tuple(c for c in data if isinstance(c, dict)))
    logger.warning("Unrecognized QA response shape: %r", data)
    return UnrecognizedShape(raw=data)


class HuggingFaceAnswerer:
    """Answer questions about article text with a hosted extractive QA model.

    Args:
        api_key: Hugging Face token (defaults to HUGGINGFACE_API_KEY env var).
        model_url: Inference endpoint of the QA model.
        timeout: Transport timeout in seconds.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model_url: str = HF_QA_URL,
        timeout: float = 30.0,
    ) -> None:
        self._api_key = api_key or os.environ.get("HUGGINGFACE_API_KEY")
        self._model_url = model_url
        self._timeout = timeout

    async def answer(self, question: str, context: str) -> tuple[str, Usage]:
        """Answer a question from the given context.

        Args:
            question: Free-text question.
            context: Article text the answer is extracted from.

        Returns:
            Tuple of (answer text, usage).

        Raises:
            PipelineError: Classified provider or transport failure.
        """
        if not self._api_key:
            raise PipelineError(
                ErrorKind.MISSING_CREDENTIALS,
                "Hugging Face API key is missing. Pass api_key or set HUGGINGFACE_API_KEY.",
            )

        payload = {"inputs": {"question": question, "context": context}}
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(self._model_url, json=payload, headers=headers)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise PipelineError.from_exception(exc) from exc

        return (parse_qa_response(data).text, Usage(qa_requests=1))
