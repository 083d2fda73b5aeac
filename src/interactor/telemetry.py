"""Telemetry context and reporter interfaces.

Every pipeline transition runs inside a telemetry scope. Scopes are a
shared no-op unless telemetry is enabled (``INTERACTOR_TELEMETRY=1`` or
``enabled=True``) and at least one reporter is registered, so disabled
telemetry costs one attribute lookup per transition.

Scopes never swallow or alter exceptions raised inside them; reporter
failures are logged and ignored.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
import logging
import time
from types import TracebackType
from typing import Any, Protocol, Self, TypeAlias, runtime_checkable

from interactor.config import telemetry_enabled

log = logging.getLogger(__name__)

# Context-aware scope stack for nested interactors and threads
_scope_stack_var: ContextVar[tuple[str, ...]] = ContextVar("scope_stack", default=())


@runtime_checkable
class TelemetryReporter(Protocol):
    """Duck-typed protocol for telemetry reporters."""

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None: ...  # noqa: D102
    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None: ...  # noqa: D102


@dataclass(frozen=True, slots=True)
class _NoOpTelemetryContext:
    """An immutable and stateless no-op context."""

    def __call__(self, name: str, **metadata: Any) -> Self:  # noqa: ARG002
        return self

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        return None

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        pass

    @property
    def enabled(self) -> bool:
        return False


class _EnabledTelemetryContext:
    """Telemetry context forwarding scopes and counters to reporters."""

    __slots__ = ("reporters",)

    def __init__(self, *reporters: TelemetryReporter):
        self.reporters = reporters

    def __call__(
        self, name: str, **metadata: Any
    ) -> AbstractContextManager[_EnabledTelemetryContext]:
        return self._create_scope(name, **metadata)

    @property
    def enabled(self) -> bool:
        return True

    @contextmanager
    def _create_scope(
        self, name: str, **metadata: Any
    ) -> Iterator[_EnabledTelemetryContext]:
        if not name or not isinstance(name, str):
            raise ValueError("Scope name must be a non-empty string")

        scope_stack = _scope_stack_var.get()
        scope_path = ".".join((*scope_stack, name))
        token = _scope_stack_var.set((*scope_stack, name))
        start_time = time.perf_counter()
        outcome = "ok"
        try:
            yield self
        except BaseException:
            outcome = "error"
            raise
        finally:
            duration = time.perf_counter() - start_time
            _scope_stack_var.reset(token)
            self._report(
                "record_timing",
                scope_path,
                duration,
                depth=len(scope_stack),
                parent_scope=".".join(scope_stack) if scope_stack else None,
                outcome=outcome,
                **metadata,
            )

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        """Record a counter metric within the current scope."""
        scope_stack = _scope_stack_var.get()
        self._report(
            "record_metric",
            ".".join((*scope_stack, name)),
            increment,
            metric_type="counter",
            **metadata,
        )

    def _report(self, method: str, scope: str, value: Any, **metadata: Any) -> None:
        for reporter in self.reporters:
            try:
                getattr(reporter, method)(scope, value, **metadata)
            except Exception as e:
                log.error(
                    "Telemetry reporter '%s' failed: %s",
                    type(reporter).__name__,
                    e,
                    exc_info=True,
                )


_NO_OP_SINGLETON = _NoOpTelemetryContext()

TelemetryContextProtocol: TypeAlias = _EnabledTelemetryContext | _NoOpTelemetryContext


def TelemetryContext(  # noqa: N802
    *reporters: TelemetryReporter, enabled: bool | None = None
) -> TelemetryContextProtocol:
    """Return a telemetry context.

    Returns the shared no-op context when there are no reporters or when
    telemetry is disabled. `enabled` overrides ``INTERACTOR_TELEMETRY``.
    """
    if not reporters:
        return _NO_OP_SINGLETON
    if enabled is None:
        enabled = telemetry_enabled()
    return _EnabledTelemetryContext(*reporters) if enabled else _NO_OP_SINGLETON


class SimpleReporter:
    """In-memory reporter for development and tests.

    Keeps at most `max_entries_per_scope` entries per scope; call
    `get_report()` for a summary.
    """

    def __init__(self, max_entries_per_scope: int = 1000):
        self.max_entries = max_entries_per_scope
        self.timings: dict[str, deque[tuple[float, dict[str, Any]]]] = {}
        self.metrics: dict[str, deque[tuple[Any, dict[str, Any]]]] = {}

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None:
        self.timings.setdefault(scope, deque(maxlen=self.max_entries)).append(
            (duration, metadata)
        )

    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None:
        self.metrics.setdefault(scope, deque(maxlen=self.max_entries)).append(
            (value, metadata)
        )

    def get_report(self) -> str:
        """Summarize call counts and durations per scope."""
        lines = ["=== Telemetry Report ===", "", "--- Timings ---"]
        for scope, values in sorted(self.timings.items()):
            durations = [v[0] for v in values]
            lines.append(
                f"{scope:<50} | Calls: {len(durations):<4} | "
                f"Avg: {sum(durations) / len(durations):.4f}s | "
                f"Total: {sum(durations):.4f}s"
            )
        if self.metrics:
            lines.extend(["", "--- Metrics ---"])
            for scope, values in sorted(self.metrics.items()):
                total = sum(v[0] for v in values if isinstance(v[0], int | float))
                lines.append(f"{scope:<50} | Count: {len(values):<4} | Total: {total:,.0f}")
        return "\n".join(lines)
