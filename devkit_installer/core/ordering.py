"""
Execution order strategies for an install run.
"""

import heapq
from typing import Callable, Dict, List, Sequence

from .catalog import ToolCatalog
from ..errors import CatalogError


FOUNDATION_TOOL = "nodejs"
CAPSTONE_TOOL = "claude_code"


def pinned_order(tool_ids: Sequence[str],
                 foundation: str = FOUNDATION_TOOL,
                 capstone: str = CAPSTONE_TOOL) -> List[str]:
    """
    Foundation tool first, capstone tool last, everything else in input order.

    Only correct while every dependency edge points at the foundation tool.
    """
    ids = list(dict.fromkeys(tool_ids))
    middle = [i for i in ids if i not in (foundation, capstone)]
    head = [foundation] if foundation in ids else []
    tail = [capstone] if capstone in ids and capstone != foundation else []
    return head + middle + tail


def topological_order(tool_ids: Sequence[str], catalog: ToolCatalog) -> List[str]:
    """
    Dependencies before dependents, ties broken by input order.

    Edges to tools outside ``tool_ids`` are ignored.

    Raises:
        CatalogError: If the selected tools form a cycle
    """
    ids = list(dict.fromkeys(tool_ids))
    position = {tool_id: i for i, tool_id in enumerate(ids)}
    indegree: Dict[str, int] = {tool_id: 0 for tool_id in ids}
    dependents: Dict[str, List[str]] = {tool_id: [] for tool_id in ids}

    for tool_id in ids:
        deps = catalog.get(tool_id).depends_on if tool_id in catalog else []
        for dep in deps:
            if dep in position:
                indegree[tool_id] += 1
                dependents[dep].append(tool_id)

    ready = [position[i] for i in ids if indegree[i] == 0]
    heapq.heapify(ready)
    order: List[str] = []
    while ready:
        tool_id = ids[heapq.heappop(ready)]
        order.append(tool_id)
        for dependent in dependents[tool_id]:
            indegree[dependent] -= 1
            if indegree[dependent] == 0:
                heapq.heappush(ready, position[dependent])

    if len(order) != len(ids):
        stuck = [i for i in ids if i not in order]
        raise CatalogError(f"Dependency cycle among: {', '.join(stuck)}")
    return order


OrderingStrategy = Callable[[Sequence[str], ToolCatalog], List[str]]

# Strategy name -> factory taking the (foundation, capstone) pins
ORDERING_STRATEGIES: Dict[str, Callable[[str, str], OrderingStrategy]] = {
    "pinned": lambda foundation, capstone: (
        lambda ids, catalog: pinned_order(ids, foundation, capstone)
    ),
    "topological": lambda foundation, capstone: topological_order,
}


def get_strategy(name: str,
                 foundation: str = FOUNDATION_TOOL,
                 capstone: str = CAPSTONE_TOOL) -> OrderingStrategy:
    """Look up an ordering strategy by name."""
    try:
        factory = ORDERING_STRATEGIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown ordering strategy '{name}' (choose from {', '.join(ORDERING_STRATEGIES)})"
        ) from None
    return factory(foundation, capstone)
