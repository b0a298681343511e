"""
Data models for the developer tool installer.
"""

from .tool import Tool, ToolDefinition, SystemInfo
from .installation import InstallResult, LogEntry, LogType, RunSummary

__all__ = [
    "Tool",
    "ToolDefinition",
    "SystemInfo",
    "InstallResult",
    "LogEntry",
    "LogType",
    "RunSummary"
]
