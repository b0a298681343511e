"""
Tool catalog: the known tools, their dependency edges and install operations.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Sequence

from pydantic import ValidationError

from ..errors import CatalogError, UnknownToolError
from ..models.tool import SystemInfo, Tool, ToolDefinition


DEFAULT_TOOLS: List[ToolDefinition] = [
    ToolDefinition(
        id="nodejs",
        name="Node.js",
        description="Required for Claude Code",
        required=True,
        preselect=True,
        install_operation="install_nodejs",
    ),
    ToolDefinition(
        id="claude_code",
        name="Claude Code CLI",
        description="AI coding assistant",
        depends_on=["nodejs"],
        preselect=True,
        install_operation="install_claude_code",
    ),
    ToolDefinition(
        id="git",
        name="Git",
        description="Version control",
        install_operation="install_git",
    ),
    ToolDefinition(
        id="vscode",
        name="VS Code",
        description="Code editor",
        install_operation="install_vscode",
    ),
    ToolDefinition(
        id="bun",
        name="Bun",
        description="Fast JS runtime",
        install_operation="install_bun",
    ),
]


def load_definitions(path: Path) -> List[ToolDefinition]:
    """
    Load tool definitions from a JSON catalog file.

    The file holds either a list of tool objects or ``{"tools": [...]}``.

    Raises:
        CatalogError: If the file cannot be read or a record is invalid
    """
    try:
        data = json.loads(Path(path).read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"Cannot read catalog file {path}: {e}") from e

    if isinstance(data, dict):
        if "tools" not in data:
            raise CatalogError(f"Catalog file {path} has no \"tools\" key")
        records = data["tools"]
    else:
        records = data
    if not isinstance(records, list):
        raise CatalogError(f"Catalog file {path} must contain a list of tools")

    try:
        return [ToolDefinition(**record) for record in records]
    except (TypeError, ValidationError) as e:
        raise CatalogError(f"Invalid tool definition in {path}: {e}") from e


def _check_acyclic(definitions: Sequence[ToolDefinition]) -> None:
    """Raise CatalogError if the depends_on edges contain a cycle."""
    edges = {d.id: d.depends_on for d in definitions}
    # 0 = unvisited, 1 = on the current path, 2 = done
    state: Dict[str, int] = {}

    for root in edges:
        if state.get(root):
            continue
        stack = [(root, iter(edges[root]))]
        path = [root]
        state[root] = 1
        while stack:
            node, children = stack[-1]
            child = next(children, None)
            if child is None:
                state[node] = 2
                stack.pop()
                path.pop()
                continue
            if state.get(child) == 1:
                cycle = path[path.index(child):] + [child]
                raise CatalogError(f"Dependency cycle: {' -> '.join(cycle)}")
            if not state.get(child):
                state[child] = 1
                path.append(child)
                stack.append((child, iter(edges[child])))


class ToolCatalog:
    """Ordered, read-only collection of tools merged with host install state."""

    def __init__(self,
                 definitions: Optional[Sequence[ToolDefinition]] = None,
                 installed_tools: Optional[Mapping[str, Optional[str]]] = None):
        """
        Build the catalog and validate its dependency graph.

        Args:
            definitions: Tool definitions in display order (defaults to DEFAULT_TOOLS)
            installed_tools: Tool id -> installed version (None or missing when absent)

        Raises:
            CatalogError: On duplicate ids, unknown dependencies or cycles
        """
        self.logger = logging.getLogger(__name__)
        definitions = list(DEFAULT_TOOLS if definitions is None else definitions)
        installed_tools = installed_tools or {}

        ids = [d.id for d in definitions]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise CatalogError(f"Duplicate tool ids: {', '.join(duplicates)}")

        known = set(ids)
        for definition in definitions:
            for dep in definition.depends_on:
                if dep not in known:
                    raise CatalogError(f"Tool '{definition.id}' depends on unknown tool '{dep}'")
                if dep == definition.id:
                    raise CatalogError(f"Tool '{definition.id}' depends on itself")

        _check_acyclic(definitions)

        self._tools: Dict[str, Tool] = {
            d.id: Tool.from_definition(d, installed_tools.get(d.id))
            for d in definitions
        }

        installed = [t.id for t in self._tools.values() if t.installed]
        self.logger.debug(f"Catalog loaded: {len(self._tools)} tools, installed: {installed}")

    @classmethod
    def from_system_info(cls,
                         info: SystemInfo,
                         definitions: Optional[Sequence[ToolDefinition]] = None) -> "ToolCatalog":
        """Build the catalog from a host snapshot."""
        return cls(definitions, info.installed_tools)

    @property
    def tools(self) -> List[Tool]:
        return list(self._tools.values())

    @property
    def ids(self) -> List[str]:
        return list(self._tools)

    def get(self, tool_id: str) -> Tool:
        try:
            return self._tools[tool_id]
        except KeyError:
            raise UnknownToolError(tool_id) from None

    def dependents_of(self, tool_id: str) -> List[Tool]:
        """Tools that list ``tool_id`` directly in depends_on."""
        return [t for t in self._tools.values() if tool_id in t.depends_on]

    def install_operation(self, tool_id: str) -> str:
        """
        Backend operation name for a tool.

        Raises:
            UnknownToolError: If the tool is unknown or has no operation mapped
        """
        operation = self._tools[tool_id].install_operation if tool_id in self._tools else None
        if not operation:
            raise UnknownToolError(tool_id)
        return operation

    def __contains__(self, tool_id: object) -> bool:
        return tool_id in self._tools

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)
