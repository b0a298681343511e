"""
Plain-text rendering for the console front end.
"""

from typing import AbstractSet, List, Optional

from ..models.installation import LogEntry, LogType
from ..models.tool import SystemInfo, Tool


OS_LABELS = {
    "windows": "Windows",
    "macos": "macOS",
    "debian": "Debian/Ubuntu",
    "fedora": "Fedora",
    "arch": "Arch Linux",
    "rhel": "RHEL/CentOS",
}

LOG_PREFIXES = {
    LogType.SUCCESS: "✓",
    LogType.ERROR: "✗",
    LogType.WARNING: "!",
    LogType.INFO: "›",
}


def os_label(os_name: str) -> str:
    return OS_LABELS.get(os_name, "Linux")


def format_system_line(info: SystemInfo) -> str:
    parts = [os_label(info.os), info.arch]
    if info.package_manager:
        parts.append(info.package_manager)
    return " • ".join(parts)


def format_tool_line(index: int, tool: Tool, selected: AbstractSet[str]) -> str:
    """One row of the tool selector, e.g. ``2. [x] Claude Code CLI - AI coding assistant``."""
    if tool.installed:
        mark = "[installed]"
    elif tool.id in selected:
        mark = "[x]"
    else:
        mark = "[ ]"

    line = f"{index}. {mark} {tool.name}"
    if tool.required and not tool.installed:
        line += " (Required)"
    if tool.description:
        line += f" - {tool.description}"
    if tool.version:
        line += f" • {tool.version}"
    return line


def format_tool_list(tools: List[Tool], selected: AbstractSet[str]) -> str:
    return "\n".join(format_tool_line(i, t, selected) for i, t in enumerate(tools, start=1))


def format_log_entry(entry: LogEntry) -> str:
    stamp = entry.timestamp.strftime("%H:%M:%S")
    return f"{LOG_PREFIXES[entry.type]} {entry.message} [{stamp}]"


def format_progress(progress: float, width: int = 30, label: Optional[str] = None) -> str:
    filled = int(round(width * progress / 100))
    bar = "#" * filled + "-" * (width - filled)
    text = f"[{bar}] {round(progress)}%"
    return f"{label} {text}" if label else text


def install_button_label(pending_count: int) -> str:
    if pending_count == 0:
        return "All selected tools are installed"
    return f"Install Selected ({pending_count})"
