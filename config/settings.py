"""
Configuration settings for the developer tool installer.
"""

from typing import Optional
from pathlib import Path
from pydantic import BaseModel, Field, validator
from pydantic_settings import BaseSettings


ORDERING_CHOICES = ("pinned", "topological")


class InstallerConfig(BaseModel):
    """Selection and ordering configuration."""
    ordering: str = Field(default="pinned", description="Execution order strategy: pinned or topological")
    foundation_tool: str = Field(default="nodejs", description="Tool installed first by the pinned strategy")
    capstone_tool: str = Field(default="claude_code", description="Tool installed last by the pinned strategy")
    catalog_path: Optional[Path] = Field(None, description="JSON catalog replacing the built-in tool list")

    @validator('ordering')
    def validate_ordering(cls, v):
        if v not in ORDERING_CHOICES:
            raise ValueError(f"ordering must be one of {', '.join(ORDERING_CHOICES)}")
        return v

    @validator('catalog_path')
    def validate_catalog_exists(cls, v):
        if v is not None and not v.exists():
            raise ValueError(f"Catalog file not found: {v}")
        return v


class BackendConfig(BaseModel):
    """System backend configuration."""
    shell_override: Optional[str] = Field(None, description="Shell used for install commands")
    probe_timeout: float = Field(default=10.0, gt=0, description="Version probe timeout in seconds")
    mock_delay_seconds: float = Field(default=0.0, ge=0, description="Per-step delay of the dry-run backend")


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field(default="WARNING", description="Logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format"
    )
    file_path: Optional[Path] = Field(default=Path("logs/devkit_installer.log"))
    max_file_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(default=5, description="Number of log backups to keep")

    @validator('level')
    def validate_level(cls, v):
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ValueError(f"Invalid log level: {v}")
        return v


class Settings(BaseSettings):
    """Main application settings."""
    installer: InstallerConfig = Field(default_factory=InstallerConfig)
    backend: BackendConfig = Field(default_factory=BackendConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # Operational settings
    dry_run: bool = Field(default=False, description="Use the mock backend instead of the host")

    class Config:
        env_prefix = "DEVKIT_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_nested_delimiter = "__"
        extra = "ignore"  # Ignore extra fields from environment
