from news_ai.pipeline.controller import (
    AnswerOutcome,
    FeedListener,
    FeedState,
    PipelineController,
    SummaryOutcome,
)

__all__ = ["AnswerOutcome", "FeedListener", "FeedState", "PipelineController", "SummaryOutcome"]
