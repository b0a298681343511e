"""Shared fixtures for the installer tests.

Puts the project root first on sys.path so the local packages are imported.
"""

import sys
from pathlib import Path

import pytest

_root = Path(__file__).parent.parent
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

from devkit_installer.core.catalog import ToolCatalog  # noqa: E402
from devkit_installer.integrations.system_backend import MockSystemBackend  # noqa: E402
from devkit_installer.models.tool import SystemInfo, ToolDefinition  # noqa: E402


def make_catalog(installed=None, definitions=None) -> ToolCatalog:
    """Catalog with the given tool id -> version map marked installed."""
    return ToolCatalog(definitions, installed or {})


@pytest.fixture
def fresh_catalog() -> ToolCatalog:
    """Default catalog with nothing installed."""
    return make_catalog()


@pytest.fixture
def chain_definitions():
    """Three-level chain: app -> lib -> base, plus an unrelated tool."""
    return [
        ToolDefinition(id="base", name="Base", required=True, install_operation="install_base"),
        ToolDefinition(id="lib", name="Lib", depends_on=["base"], install_operation="install_lib"),
        ToolDefinition(id="app", name="App", depends_on=["lib"], install_operation="install_app"),
        ToolDefinition(id="extra", name="Extra", install_operation="install_extra"),
    ]


@pytest.fixture
def mock_backend() -> MockSystemBackend:
    return MockSystemBackend(
        system_info=SystemInfo(os="debian", arch="x86_64", package_manager="apt")
    )


@pytest.fixture
def catalog_factory():
    return make_catalog
