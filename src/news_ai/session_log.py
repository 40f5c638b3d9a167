"""Session logger recording pipeline events to a JSON file."""

import dataclasses
import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from news_ai.data import Usage


class EventRecord(BaseModel):
    """Record of one pipeline event (page fetch, summary, answer)."""

    event: str
    component: str
    input: Any = None
    output: Any = None
    usage: dict[str, Any] | None = None
    error: str | None = None
    timestamp: str = ""
    duration_seconds: float = 0.0


class SessionRecord(BaseModel):
    """Record of a complete session."""

    session_id: str
    started_at: str
    settings: dict[str, Any] = {}
    completed_at: str | None = None
    events: list[EventRecord] = []
    total_usage: dict[str, Any] | None = None


def _serialize(obj: Any) -> Any:
    """Serialize an object to JSON-compatible format.

    Handles dataclasses, Pydantic models, tuples, lists, dicts, and primitives.
    For Usage objects, includes computed property summaries.
    """
    if obj is None:
        return None
    if isinstance(obj, Usage):
        return {
            "api_calls": [_serialize(c) for c in obj.api_calls],
            "news_requests": obj.news_requests,
            "qa_requests": obj.qa_requests,
            "input_tokens": obj.input_tokens,
            "output_tokens": obj.output_tokens,
        }
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, BaseModel):
        return obj.model_dump()
    if isinstance(obj, (list, tuple)):
        return [_serialize(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _serialize(v) for k, v in obj.items()}
    if isinstance(obj, Path):
        return str(obj)
    return obj


class SessionLogger:
    """Accumulates event records and writes one JSON log file per session.

    When ``enabled=False``, all methods are no-ops.

    Args:
        log_dir: Directory to write JSON log files.
        enabled: If False, all methods become no-ops.
    """

    def __init__(self, log_dir: Path, *, enabled: bool = True) -> None:
        self._log_dir = log_dir
        self._enabled = enabled
        self._record: SessionRecord | None = None
        self._last_log_path: Path | None = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def last_log_path(self) -> Path | None:
        """Path to the last written log file, or None."""
        return self._last_log_path

    @property
    def events(self) -> list[EventRecord]:
        """Events recorded so far in the current session."""
        if self._record is None:
            return []
        return list(self._record.events)

    def start_session(self, settings: Any = None) -> None:
        """Initialize a new session record.

        Args:
            settings: Session settings worth recording (page size, topic, ...).
        """
        if not self._enabled:
            return

        self._record = SessionRecord(
            session_id=str(uuid.uuid4()),
            started_at=datetime.now(tz=UTC).isoformat(),
            settings=_serialize(settings) or {},
        )

    def log_event(
        self,
        event: str,
        component: str,
        input_data: Any,
        output_data: Any,
        usage: Usage | None,
        duration_seconds: float,
        error: str | None = None,
    ) -> None:
        """Append an event record to the current session.

        Args:
            event: Event name (e.g. "page_fetch", "summary", "answer").
            component: Component class name.
            input_data: Event input (will be serialized).
            output_data: Event output (will be serialized).
            usage: Usage for this event (None when nothing was requested).
            duration_seconds: Wall-clock time for this event.
            error: Error kind when the event failed.
        """
        if not self._enabled or self._record is None:
            return

        self._record.events.append(
            EventRecord(
                event=event,
                component=component,
                input=_serialize(input_data),
                output=_serialize(output_data),
                usage=_serialize(usage) if usage is not None else None,
                error=error,
                timestamp=datetime.now(tz=UTC).isoformat(),
                duration_seconds=round(duration_seconds, 4),
            )
        )

    def finish_session(self, usage: Usage | None) -> Path | None:
        """Write the session record to a JSON file.

        Returns:
            Path to the written JSON file, or None if logging is disabled.
        """
        if not self._enabled or self._record is None:
            return None

        self._record.completed_at = datetime.now(tz=UTC).isoformat()
        self._record.total_usage = _serialize(usage) if usage is not None else None

        self._log_dir.mkdir(parents=True, exist_ok=True)

        # session_2026-02-12T14-30-00.json (colons → dashes)
        ts = self._record.started_at.replace(":", "-")
        ts = ts.split(".")[0].split("+")[0]
        filepath = self._log_dir / f"session_{ts}.json"

        filepath.write_text(self._record.model_dump_json(indent=2))
        self._last_log_path = filepath
        self._record = None
        return filepath
