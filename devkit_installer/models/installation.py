"""
Installation result, event log and run summary models.
"""

from enum import Enum
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field


class LogType(str, Enum):
    """Kind of a user-visible log entry."""
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"


class LogEntry(BaseModel):
    """One line of the install event log."""
    type: LogType = Field(..., description="Entry kind")
    message: str = Field(..., description="Human-readable message")
    timestamp: datetime = Field(default_factory=datetime.now, description="Capture time")

    class Config:
        frozen = True


class InstallResult(BaseModel):
    """Outcome of a single install operation."""
    success: bool = Field(..., description="Whether the operation succeeded")
    message: str = Field(..., description="Human-readable outcome")
    output: Optional[str] = Field(None, description="Raw command output")

    @classmethod
    def ok(cls, message: str, output: Optional[str] = None) -> "InstallResult":
        return cls(success=True, message=message, output=output)

    @classmethod
    def error(cls, message: str) -> "InstallResult":
        return cls(success=False, message=message)

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "message": "Git installed successfully",
                "output": "Reading package lists..."
            }
        }


class RunSummary(BaseModel):
    """Totals for one orchestrator run."""
    total: int = Field(default=0, description="Tools in the execution order")
    attempted: int = Field(default=0, description="Steps that reached the backend")
    successful: int = Field(default=0)
    failed: int = Field(default=0)
    skipped: int = Field(default=0, description="Steps with no install operation")
    order: List[str] = Field(default_factory=list, description="Execution order of tool ids")
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration_seconds: float = Field(default=0.0)

    def complete(self) -> None:
        """Stamp the completion time."""
        self.completed_at = datetime.now()
        if self.started_at:
            self.duration_seconds = (self.completed_at - self.started_at).total_seconds()
