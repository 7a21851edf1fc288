"""Export task bookkeeping: a single-shot task record and the per-plan "is running" guard."""
import logging
from contextlib import contextmanager
from enum import Enum
from threading import Lock
from typing import Any, Optional, Set, Tuple

from nutriplan.logic.export.errors import ExportInProgressError

logger = logging.getLogger(__name__)


class TaskState(str, Enum):
    PENDING = "PENDING"
    SETTLED = "SETTLED"


class ExportTask:
    """One export request. Settles exactly once, with a result or an error."""

    def __init__(self, kind: str, plan_id: str):
        self.kind = kind
        self.plan_id = plan_id
        self.state = TaskState.PENDING
        self.result: Any = None
        self.error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.state is TaskState.SETTLED and self.error is None

    def settle(self, result: Any = None, error: Optional[BaseException] = None):
        if self.state is TaskState.SETTLED:
            raise RuntimeError(f"{self} already settled")
        self.result = result
        self.error = error
        self.state = TaskState.SETTLED

    def cancel(self):
        # exports are not cancellable; the task settles on its own
        pass

    def __str__(self) -> str:
        return f"ExportTask({self.kind}, {self.plan_id}, {self.state.value})"

    __repr__ = __str__


class ExportGuard:
    def __init__(self):
        self._lock = Lock()
        self._running: Set[Tuple[str, str]] = set()

    def is_running(self, kind: str, plan_id: str) -> bool:
        with self._lock:
            return (kind, plan_id) in self._running

    @contextmanager
    def running(self, kind: str, plan_id: str):
        key = (kind, plan_id)
        with self._lock:
            if key in self._running:
                raise ExportInProgressError(kind, plan_id)
            self._running.add(key)
        try:
            yield ExportTask(kind, plan_id)
        finally:
            with self._lock:
                self._running.discard(key)


# Shared by the web layer
EXPORT_GUARD = ExportGuard()

__all__ = ["TaskState", "ExportTask", "ExportGuard", "EXPORT_GUARD"]
