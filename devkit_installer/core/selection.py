"""
Dependency-aware tool selection.

Dependency expansion on select and the cascade on deselect both look one hop
along ``depends_on`` only. A dependency of a dependency is not pulled in, and
a tool two levels below a deselected one stays selected.
"""

import logging
from typing import AbstractSet, FrozenSet, List, Set

from .catalog import ToolCatalog
from ..models.tool import Tool


logger = logging.getLogger(__name__)


def initial_selection(catalog: ToolCatalog) -> Set[str]:
    """
    Pre-selected tool ids at load time.

    Every required tool that is not installed, plus every tool that is not
    installed and directly depends on one of those. Tools flagged
    ``preselect`` are selected whenever they are missing.
    """
    missing_required = {t.id for t in catalog if t.required and not t.installed}
    selected = set(missing_required)
    selected.update(t.id for t in catalog if t.preselect and not t.installed)
    for tool in catalog:
        if tool.installed:
            continue
        if any(dep in missing_required for dep in tool.depends_on):
            selected.add(tool.id)
    return selected


def toggle(selection: AbstractSet[str], tool_id: str, catalog: ToolCatalog) -> Set[str]:
    """
    Return a new selection with ``tool_id`` toggled.

    Installed and unknown tools are left alone.
    """
    selected = set(selection)
    if tool_id not in catalog:
        logger.warning(f"Ignoring toggle of unknown tool: {tool_id}")
        return selected

    tool = catalog.get(tool_id)
    if tool.installed:
        logger.debug(f"{tool_id} is already installed; toggle ignored")
        return selected

    if tool_id in selected:
        selected.discard(tool_id)
        for dependent in catalog.dependents_of(tool_id):
            selected.discard(dependent.id)
    else:
        selected.add(tool_id)
        for dep in tool.depends_on:
            if not catalog.get(dep).installed:
                selected.add(dep)
    return selected


class SelectionState:
    """Mutable selection owned by one installer session."""

    def __init__(self, catalog: ToolCatalog):
        self.catalog = catalog
        self._selected: Set[str] = initial_selection(catalog)

    @property
    def selected(self) -> FrozenSet[str]:
        return frozenset(self._selected)

    def is_selected(self, tool_id: str) -> bool:
        return tool_id in self._selected

    def toggle(self, tool_id: str) -> FrozenSet[str]:
        self._selected = toggle(self._selected, tool_id, self.catalog)
        return self.selected

    def pending(self) -> List[Tool]:
        """Selected tools that are not installed, in catalog order."""
        return [t for t in self.catalog if t.id in self._selected and not t.installed]
