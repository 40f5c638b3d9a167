"""Tests for SessionLogger and serialization helpers."""

import json
from pathlib import Path

from news_ai.data import APICallUsage, Article, SummaryRecord, Usage
from news_ai.session_log import SessionLogger, _serialize

# -- _serialize tests --


def test_serialize_none() -> None:
    assert _serialize(None) is None


def test_serialize_primitive() -> None:
    assert _serialize(42) == 42
    assert _serialize("hello") == "hello"
    assert _serialize(True) is True


def test_serialize_tuple_as_list() -> None:
    assert _serialize((1, "two", None)) == [1, "two", None]


def test_serialize_dict() -> None:
    assert _serialize({"a": 1, "b": "two"}) == {"a": 1, "b": "two"}


def test_serialize_dataclass() -> None:
    record = SummaryRecord(summary="Text", emoji="🙂")
    assert _serialize(record) == {"summary": "Text", "emoji": "🙂", "fallback": False}


def test_serialize_usage_includes_computed_properties() -> None:
    usage = Usage(
        api_calls=[
            APICallUsage(model="m1", input_tokens=100, output_tokens=50),
            APICallUsage(model="m2", input_tokens=200, output_tokens=75),
        ],
        news_requests=3,
        qa_requests=2,
    )
    result = _serialize(usage)
    assert result["input_tokens"] == 300
    assert result["output_tokens"] == 125
    assert result["news_requests"] == 3
    assert result["qa_requests"] == 2
    assert len(result["api_calls"]) == 2


def test_serialize_nested_articles() -> None:
    articles = [Article(url="https://example.com/1", title="One")]
    result = _serialize({"articles": articles})
    assert result["articles"][0]["url"] == "https://example.com/1"


def test_serialize_path() -> None:
    assert _serialize(Path("/some/path")) == "/some/path"


# -- SessionLogger disabled tests --


def test_session_logger_disabled_is_noop(tmp_path: Path) -> None:
    logger = SessionLogger(log_dir=tmp_path, enabled=False)
    assert not logger.enabled

    logger.start_session({"initial_topic": "tech"})
    logger.log_event("page_fetch", "ArticlePaginator", "input", "output", None, 1.0)
    result = logger.finish_session(None)

    assert result is None
    assert logger.last_log_path is None
    assert logger.events == []
    assert list(tmp_path.iterdir()) == []


def test_log_event_before_start_is_ignored(tmp_path: Path) -> None:
    logger = SessionLogger(log_dir=tmp_path)
    logger.log_event("page_fetch", "ArticlePaginator", None, None, None, 0.1)
    assert logger.events == []
    assert logger.finish_session(None) is None


# -- SessionLogger enabled tests --


def test_session_logger_start_and_finish(tmp_path: Path) -> None:
    logger = SessionLogger(log_dir=tmp_path)
    logger.start_session({"initial_topic": "tech", "page_size": 9})
    path = logger.finish_session(None)

    assert path is not None
    assert path.exists()
    assert path.name.startswith("session_")
    assert path.suffix == ".json"
    assert ":" not in path.name
    assert logger.last_log_path == path

    data = json.loads(path.read_text())
    assert data["settings"] == {"initial_topic": "tech", "page_size": 9}
    assert data["session_id"]
    assert data["completed_at"] is not None
    assert data["events"] == []


def test_session_logger_log_events(tmp_path: Path) -> None:
    logger = SessionLogger(log_dir=tmp_path)
    logger.start_session()

    summary_usage = Usage(
        api_calls=[APICallUsage(model="claude-haiku-4-5", input_tokens=100, output_tokens=50)]
    )
    logger.log_event(
        event="summary",
        component="AugmentationCache",
        input_data="https://example.com/1",
        output_data=SummaryRecord(summary="Text", emoji="🙂"),
        usage=summary_usage,
        duration_seconds=0.51234,
    )
    logger.log_event(
        event="page_fetch",
        component="ArticlePaginator",
        input_data={"topic": "tech", "page": 2},
        output_data=None,
        usage=None,
        duration_seconds=0.01,
        error="rate_limited",
    )
    assert len(logger.events) == 2

    path = logger.finish_session(summary_usage)
    assert path is not None
    data = json.loads(path.read_text())

    first, second = data["events"]
    assert first["event"] == "summary"
    assert first["output"]["emoji"] == "🙂"
    assert first["usage"]["input_tokens"] == 100
    assert first["duration_seconds"] == 0.5123
    assert first["error"] is None
    assert second["input"] == {"topic": "tech", "page": 2}
    assert second["usage"] is None
    assert second["error"] == "rate_limited"
    assert data["total_usage"]["output_tokens"] == 50


def test_finish_resets_session(tmp_path: Path) -> None:
    logger = SessionLogger(log_dir=tmp_path / "nested" / "logs")
    logger.start_session()
    assert logger.finish_session(None) is not None
    assert (tmp_path / "nested" / "logs").is_dir()

    # A second finish without a new session writes nothing
    assert logger.finish_session(None) is None
    assert logger.events == []
