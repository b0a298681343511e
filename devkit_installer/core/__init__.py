"""
Core modules for the developer tool installer.
"""

from .catalog import DEFAULT_TOOLS, ToolCatalog, load_definitions
from .selection import SelectionState, initial_selection, toggle
from .ordering import pinned_order, topological_order
from .session import InstallSession, SessionSnapshot
from .orchestrator import InstallOrchestrator

__all__ = [
    "DEFAULT_TOOLS",
    "ToolCatalog",
    "load_definitions",
    "SelectionState",
    "initial_selection",
    "toggle",
    "pinned_order",
    "topological_order",
    "InstallSession",
    "SessionSnapshot",
    "InstallOrchestrator"
]
