"""
Exception types for the installer.
"""


class InstallerError(Exception):
    """Base class for installer errors."""


class CatalogError(InstallerError):
    """The tool catalog is misconfigured (duplicate id, dangling dependency, cycle)."""


class UnknownToolError(InstallerError, KeyError):
    """A tool id is not in the catalog or has no install operation."""

    def __init__(self, tool_id: str):
        super().__init__(tool_id)
        self.tool_id = tool_id

    def __str__(self) -> str:
        return f"Unknown tool: {self.tool_id}"


class UnknownOperationError(InstallerError):
    """The backend was asked to run an operation it does not provide."""


class InstallInProgressError(InstallerError):
    """A run was started on a session that is already installing."""
