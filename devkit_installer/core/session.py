"""
Install session: the event log and progress value read by the front end.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from pydantic import BaseModel, Field

from ..models.installation import LogEntry, LogType


LogListener = Callable[[LogEntry], None]
ProgressListener = Callable[[float], None]


class SessionSnapshot(BaseModel):
    """Read-only view of a session for rendering."""
    logs: Tuple[LogEntry, ...] = Field(default_factory=tuple)
    progress: float = Field(default=0.0, ge=0.0, le=100.0)
    is_installing: bool = False

    @property
    def status_label(self) -> str:
        if self.is_installing:
            return "Installing..."
        if self.progress == 100:
            return "Complete"
        return "Ready"


class InstallSession:
    """
    Append-only log and progress for install runs.

    One orchestrator writes to a session at a time. The log and progress are
    cleared by reset() at the start of every run.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._logs: List[LogEntry] = []
        self._progress = 0.0
        self.is_installing = False
        self._log_listeners: List[LogListener] = []
        self._progress_listeners: List[ProgressListener] = []

    @property
    def logs(self) -> Tuple[LogEntry, ...]:
        return tuple(self._logs)

    @property
    def progress(self) -> float:
        return self._progress

    def subscribe(self,
                  on_log: Optional[LogListener] = None,
                  on_progress: Optional[ProgressListener] = None) -> None:
        """Register callbacks for new log entries and progress changes."""
        if on_log:
            self._log_listeners.append(on_log)
        if on_progress:
            self._progress_listeners.append(on_progress)

    def reset(self) -> None:
        self._logs.clear()
        self._progress = 0.0
        for listener in self._progress_listeners:
            listener(self._progress)

    def add_log(self, log_type: LogType, message: str) -> LogEntry:
        """Append an entry stamped no earlier than the previous one."""
        timestamp = datetime.now()
        if self._logs and timestamp < self._logs[-1].timestamp:
            timestamp = self._logs[-1].timestamp
        entry = LogEntry(type=LogType(log_type), message=message, timestamp=timestamp)
        self._logs.append(entry)
        for listener in self._log_listeners:
            listener(entry)
        return entry

    def info(self, message: str) -> LogEntry:
        return self.add_log(LogType.INFO, message)

    def success(self, message: str) -> LogEntry:
        return self.add_log(LogType.SUCCESS, message)

    def error(self, message: str) -> LogEntry:
        return self.add_log(LogType.ERROR, message)

    def warning(self, message: str) -> LogEntry:
        return self.add_log(LogType.WARNING, message)

    def set_progress(self, value: float) -> None:
        """
        Update progress.

        Raises:
            ValueError: If value is outside [0, 100] or lower than the current value
        """
        if not 0.0 <= value <= 100.0:
            raise ValueError(f"Progress out of range: {value}")
        if value < self._progress:
            raise ValueError(f"Progress cannot go back from {self._progress} to {value}")
        self._progress = value
        for listener in self._progress_listeners:
            listener(value)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            logs=self.logs,
            progress=self._progress,
            is_installing=self.is_installing,
        )
