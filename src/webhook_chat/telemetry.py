"""Chat telemetry: turn timings, failure counters and history size.

Sessions report through a `Telemetry` object. `TelemetryContext()` hands
out a shared no-op unless ``WEBHOOK_CHAT_TELEMETRY=1`` (or ``DEBUG=1``) is
set and at least one reporter is given. `MemoryReporter` collects
everything in memory for the CLI's end-of-session report.
"""

from collections import Counter, deque
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager, nullcontext
from enum import StrEnum
import logging
import os
import time
from typing import Any, Protocol, runtime_checkable

log = logging.getLogger(__name__)


class ChatMetric(StrEnum):
    """Names the session reports under."""

    TURN = "chat.turn"
    TURN_FAILED = "chat.turn.failed"
    SUBMIT_DROPPED = "chat.submit.dropped"
    HISTORY_LENGTH = "chat.history.length"


def telemetry_enabled() -> bool:
    """Whether the environment opts into telemetry."""
    return os.getenv("WEBHOOK_CHAT_TELEMETRY") == "1" or os.getenv("DEBUG") == "1"


@runtime_checkable
class TelemetryReporter(Protocol):
    """Receives timings and metric samples."""

    def record_timing(self, name: str, seconds: float, **metadata: Any) -> None: ...  # noqa: D102
    def record_metric(self, name: str, value: float, **metadata: Any) -> None: ...  # noqa: D102


class Telemetry(Protocol):
    """What a session needs from its telemetry collaborator."""

    def __call__(self, name: str, **metadata: Any) -> AbstractContextManager[None]: ...  # noqa: D102
    def count(self, name: str, increment: int = 1) -> None: ...  # noqa: D102
    def gauge(self, name: str, value: float) -> None: ...  # noqa: D102


class _DisabledTelemetry:
    __slots__ = ()

    def __call__(self, name: str, **metadata: Any) -> AbstractContextManager[None]:  # noqa: ARG002
        return nullcontext()

    def count(self, name: str, increment: int = 1) -> None:
        pass

    def gauge(self, name: str, value: float) -> None:
        pass


class _ReportingTelemetry:
    """Forwards samples to reporters; a failing reporter is logged and skipped."""

    __slots__ = ("reporters",)

    def __init__(self, *reporters: TelemetryReporter):
        self.reporters = reporters

    @contextmanager
    def __call__(self, name: str, **metadata: Any) -> Iterator[None]:
        """Time the enclosed block under `name`, even when it raises."""
        if not name or not isinstance(name, str):
            raise ValueError("Telemetry names must be non-empty strings")
        started = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - started
            self._emit("record_timing", name, elapsed, metadata)

    def count(self, name: str, increment: int = 1) -> None:
        self._emit("record_metric", name, increment, {"kind": "counter"})

    def gauge(self, name: str, value: float) -> None:
        self._emit("record_metric", name, value, {"kind": "gauge"})

    def _emit(
        self, method: str, name: str, value: float, metadata: dict[str, Any]
    ) -> None:
        for reporter in self.reporters:
            try:
                getattr(reporter, method)(name, value, **metadata)
            except Exception as e:
                log.error(
                    "Telemetry reporter '%s' failed on %s: %s",
                    type(reporter).__name__,
                    name,
                    e,
                    exc_info=True,
                )


_DISABLED = _DisabledTelemetry()


def TelemetryContext(*reporters: TelemetryReporter) -> Telemetry:  # noqa: N802
    """Return reporting telemetry, or the shared no-op when disabled."""
    if reporters and telemetry_enabled():
        return _ReportingTelemetry(*reporters)
    return _DISABLED


class MemoryReporter:
    """In-memory reporter behind the CLI's end-of-session summary.

    Counters are summed, gauges keep their latest value and only the most
    recent `max_timings` durations per name are retained.
    """

    def __init__(self, max_timings: int = 1000):
        self.max_timings = max_timings
        self.timings: dict[str, deque[float]] = {}
        self.counters: Counter[str] = Counter()
        self.gauges: dict[str, float] = {}

    def record_timing(self, name: str, seconds: float, **metadata: Any) -> None:
        self.timings.setdefault(name, deque(maxlen=self.max_timings)).append(seconds)

    def record_metric(self, name: str, value: float, **metadata: Any) -> None:
        if metadata.get("kind") == "gauge":
            self.gauges[name] = value
        else:
            self.counters[name] += int(value)

    @property
    def empty(self) -> bool:
        return not (self.timings or self.counters or self.gauges)

    def get_report(self) -> str:
        lines = ["--- chat session ---"]
        for name, durations in sorted(self.timings.items()):
            mean = sum(durations) / len(durations)
            lines.append(f"{name:<22} {len(durations):>5} x  avg {mean:.3f}s")
        for name, total in sorted(self.counters.items()):
            lines.append(f"{name:<22} {total:>5}")
        for name, value in sorted(self.gauges.items()):
            lines.append(f"{name:<22} {value:>5g}")
        return "\n".join(lines)

    def print_report(self) -> None:
        if not self.empty:
            print(self.get_report())  # noqa: T201
