"""
Tool-related data models.
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class ToolDefinition(BaseModel):
    """Static definition of an installable tool."""
    id: str = Field(..., description="Unique tool identifier")
    name: str = Field(..., description="Display name")
    description: str = Field(default="", description="Short description")
    required: bool = Field(default=False, description="Shown as required; pre-selected when missing")
    preselect: bool = Field(default=False, description="Pre-selected when missing, without the required badge")
    depends_on: List[str] = Field(default_factory=list, description="Tool ids that must be present first")
    install_operation: Optional[str] = Field(None, description="Backend operation that installs the tool")

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "id": "claude_code",
                "name": "Claude Code CLI",
                "description": "AI coding assistant",
                "depends_on": ["nodejs"],
                "install_operation": "install_claude_code"
            }
        }


class Tool(ToolDefinition):
    """Tool definition merged with the host's install state."""
    installed: bool = Field(default=False, description="Present on the host at load time")
    version: Optional[str] = Field(None, description="Version reported by the host")

    @classmethod
    def from_definition(cls, definition: ToolDefinition, version: Optional[str] = None) -> "Tool":
        return cls(
            **definition.model_dump(),
            installed=bool(version),
            version=version or None,
        )


class SystemInfo(BaseModel):
    """Snapshot of the host reported by the system backend."""
    os: str = Field(..., description="OS family (windows, macos, debian, fedora, arch, rhel, linux)")
    arch: str = Field(..., description="CPU architecture")
    package_manager: Optional[str] = Field(None, description="Detected package manager")
    installed_tools: Dict[str, Optional[str]] = Field(
        default_factory=dict,
        description="Tool id -> installed version, None when absent"
    )

    def version_of(self, tool_id: str) -> Optional[str]:
        return self.installed_tools.get(tool_id)
