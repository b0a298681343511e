"""
Install orchestrator - drives the selected tools through the backend one at a time.
"""

from datetime import datetime
from typing import Iterable, List

from .catalog import ToolCatalog
from .ordering import FOUNDATION_TOOL, CAPSTONE_TOOL, get_strategy
from .session import InstallSession
from ..errors import InstallInProgressError, UnknownToolError
from ..integrations.system_backend import SystemBackend
from ..models.installation import RunSummary
from ..models.tool import Tool
from ..utils.logging import get_logger


COMPLETE_MESSAGE = "Installation complete!"


class InstallOrchestrator:
    """Runs install operations sequentially and reports into an InstallSession."""

    def __init__(self,
                 catalog: ToolCatalog,
                 backend: SystemBackend,
                 ordering: str = "pinned",
                 foundation_tool: str = FOUNDATION_TOOL,
                 capstone_tool: str = CAPSTONE_TOOL):
        """
        Initialize the orchestrator.

        Args:
            catalog: Tool catalog built from the load-time host snapshot
            backend: System backend that performs install operations
            ordering: Execution order strategy ("pinned" or "topological")
            foundation_tool: Tool forced to the front by the pinned strategy
            capstone_tool: Tool forced to the back by the pinned strategy
        """
        self.logger = get_logger(__name__)
        self.catalog = catalog
        self.backend = backend
        self.ordering = ordering
        self._order = get_strategy(ordering, foundation_tool, capstone_tool)

    def plan(self, selected_ids: Iterable[str]) -> List[Tool]:
        """
        Tools a run would install, in execution order.

        Unknown ids and tools installed at catalog load time are dropped.
        """
        candidates = []
        for tool_id in selected_ids:
            if tool_id not in self.catalog:
                self.logger.warning(f"Dropping unknown tool id from selection: {tool_id}")
                continue
            if self.catalog.get(tool_id).installed:
                continue
            candidates.append(tool_id)
        return [self.catalog.get(i) for i in self._order(candidates, self.catalog)]

    async def run(self, selected_ids: Iterable[str], session: InstallSession) -> RunSummary:
        """
        Install the selected tools.

        A failing step never stops the run; every step is attempted once and
        the run always ends with the completion entry.

        Args:
            selected_ids: Selected tool ids
            session: Session receiving log entries and progress

        Returns:
            Summary of the run

        Raises:
            InstallInProgressError: If the session is already installing
        """
        tools = self.plan(selected_ids)
        if not tools:
            self.logger.info("Nothing to install")
            return RunSummary()

        if session.is_installing:
            raise InstallInProgressError("An installation is already running in this session")

        summary = RunSummary(
            total=len(tools),
            order=[t.id for t in tools],
            started_at=datetime.now(),
        )
        self.logger.info(f"Installing {summary.total} tools in order: {summary.order}")

        session.is_installing = True
        session.reset()
        completed = 0
        try:
            for tool in tools:
                if await self._install_one(tool, session, summary):
                    completed += 1
                    session.set_progress(completed / summary.total * 100)

            session.success(COMPLETE_MESSAGE)
        finally:
            session.is_installing = False

        summary.complete()
        self.logger.info(
            f"Run complete: {summary.successful} succeeded, {summary.failed} failed, "
            f"{summary.skipped} skipped in {summary.duration_seconds:.2f}s"
        )
        return summary

    async def _install_one(self, tool: Tool, session: InstallSession, summary: RunSummary) -> bool:
        """Run one step. Returns False when the step was skipped."""
        session.info(f"Installing {tool.name}...")

        try:
            operation = self.catalog.install_operation(tool.id)
        except UnknownToolError:
            self.logger.error(f"No install operation mapped for {tool.id}")
            session.error(f"Unknown tool: {tool.id}")
            summary.skipped += 1
            return False

        summary.attempted += 1
        try:
            result = await self.backend.install(operation)
        except Exception as e:
            self.logger.error(f"Install operation {operation} raised: {e}", exc_info=True)
            session.error(f"Failed to install {tool.name}: {e}")
            summary.failed += 1
            return True

        if result.success:
            self.logger.info(f"{tool.id}: {result.message}")
            session.success(result.message)
            summary.successful += 1
        else:
            self.logger.error(f"{tool.id}: {result.message}")
            session.error(result.message)
            summary.failed += 1
        return True
