from news_ai.gateway.base import NewsSource, QuestionAnswerer, Summarizer
from news_ai.gateway.claude import ClaudeSummarizer
from news_ai.gateway.huggingface import (
    CandidateList,
    DirectAnswer,
    HuggingFaceAnswerer,
    QAResponse,
    UnrecognizedShape,
    parse_qa_response,
)
from news_ai.gateway.newsapi import NewsAPISource

__all__ = [
    "CandidateList",
    "ClaudeSummarizer",
    "DirectAnswer",
    "HuggingFaceAnswerer",
    "NewsAPISource",
    "NewsSource",
    "QAResponse",
    "QuestionAnswerer",
    "Summarizer",
    "UnrecognizedShape",
    "parse_qa_response",
]
