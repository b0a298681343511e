#!/usr/bin/env python3
"""
Main entry point for the developer tool installer.
"""

import asyncio
import argparse
import sys
from pathlib import Path
from typing import List, Optional
import json
import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from pydantic import ValidationError

from devkit_installer.core.catalog import ToolCatalog, load_definitions
from devkit_installer.core.orchestrator import InstallOrchestrator
from devkit_installer.core.selection import SelectionState
from devkit_installer.core.session import InstallSession
from devkit_installer.errors import CatalogError
from devkit_installer.integrations.system_backend import LocalSystemBackend, MockSystemBackend
from devkit_installer.utils import console
from devkit_installer.utils.logging import setup_root_logger
from config.settings import Settings, ORDERING_CHOICES


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Guided installer for Node.js, Claude Code CLI and other developer tools"
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file (JSON format)"
    )

    parser.add_argument(
        "--catalog",
        type=Path,
        help="Path to a JSON tool catalog replacing the built-in one"
    )

    parser.add_argument(
        "--list",
        action="store_true",
        help="Show detected tools and the current selection, then exit"
    )

    parser.add_argument(
        "--select",
        action="append",
        default=[],
        metavar="TOOL_ID",
        help="Select a tool (and its missing dependencies); repeatable"
    )

    parser.add_argument(
        "--deselect",
        action="append",
        default=[],
        metavar="TOOL_ID",
        help="Deselect a tool (and the tools that depend on it); repeatable"
    )

    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Toggle tools by number before installing"
    )

    parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Install without asking for confirmation"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Use a mock backend; nothing is installed"
    )

    parser.add_argument(
        "--ordering",
        choices=ORDERING_CHOICES,
        help="Execution order strategy (default: pinned)"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)"
    )

    return parser.parse_args(argv)


def load_config(args) -> Settings:
    """Load configuration from file, overridden by command line args."""
    config_data = {}
    if args.config:
        with open(args.config) as f:
            config_data = json.load(f)

    if args.catalog:
        config_data.setdefault("installer", {})["catalog_path"] = str(args.catalog)
    if args.ordering:
        config_data.setdefault("installer", {})["ordering"] = args.ordering
    if args.log_level:
        config_data.setdefault("logging", {})["level"] = args.log_level
    if args.dry_run:
        config_data["dry_run"] = True

    return Settings(**config_data)


def build_backend(settings: Settings):
    if settings.dry_run:
        return MockSystemBackend(delay=settings.backend.mock_delay_seconds)
    return LocalSystemBackend(
        shell_override=settings.backend.shell_override,
        probe_timeout=settings.backend.probe_timeout
    )


def apply_selection_args(state: SelectionState, select: List[str], deselect: List[str]) -> None:
    """Apply --select/--deselect on top of the initial selection."""
    for tool_id in deselect:
        if state.is_selected(tool_id):
            state.toggle(tool_id)
    for tool_id in select:
        if not state.is_selected(tool_id):
            state.toggle(tool_id)


def interactive_select(state: SelectionState) -> None:
    """Prompt for tool numbers to toggle until an empty line."""
    tools = state.catalog.tools
    while True:
        print(console.format_tool_list(tools, state.selected))
        answer = input("Toggle tool number (Enter to continue): ").strip()
        if not answer:
            return
        if not answer.isdigit() or not 1 <= int(answer) <= len(tools):
            print(f"Invalid choice: {answer}")
            continue
        tool = tools[int(answer) - 1]
        if tool.installed:
            print(f"{tool.name} is already installed")
            continue
        state.toggle(tool.id)


def confirm_install(pending_count: int) -> bool:
    answer = input(f"{console.install_button_label(pending_count)}? [y/N] ").strip().lower()
    return answer in ("y", "yes")


def print_progress(progress: float) -> None:
    if progress > 0:
        print(console.format_progress(progress))


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)

    try:
        settings = load_config(args)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    setup_root_logger(
        settings.logging.file_path,
        settings.logging.level,
        format_string=settings.logging.format,
        max_file_size_mb=settings.logging.max_file_size_mb,
        backup_count=settings.logging.backup_count,
        console=bool(args.log_level)
    )
    logger = logging.getLogger(__name__)
    logger.info(f"Arguments: {vars(args)}")

    backend = build_backend(settings)
    info = await backend.get_system_info()

    try:
        definitions = None
        if settings.installer.catalog_path:
            definitions = load_definitions(settings.installer.catalog_path)
        catalog = ToolCatalog.from_system_info(info, definitions)
    except CatalogError as e:
        logger.error(f"Catalog error: {e}")
        print(f"Catalog error: {e}", file=sys.stderr)
        return 2

    state = SelectionState(catalog)
    apply_selection_args(state, args.select, args.deselect)

    # Blocking prompts run in the default executor
    loop = asyncio.get_running_loop()

    print(console.format_system_line(info))
    if args.interactive:
        await loop.run_in_executor(None, interactive_select, state)
    else:
        print(console.format_tool_list(catalog.tools, state.selected))

    pending = state.pending()
    if args.list or not pending:
        print(console.install_button_label(len(pending)))
        return 0

    if not args.yes:
        if not await loop.run_in_executor(None, confirm_install, len(pending)):
            print("Aborted")
            return 0

    orchestrator = InstallOrchestrator(
        catalog,
        backend,
        ordering=settings.installer.ordering,
        foundation_tool=settings.installer.foundation_tool,
        capstone_tool=settings.installer.capstone_tool
    )
    session = InstallSession()
    session.subscribe(
        on_log=lambda entry: print(console.format_log_entry(entry)),
        on_progress=print_progress
    )

    summary = await orchestrator.run([t.id for t in pending], session)

    logger.info(f"Summary: {summary.model_dump()}")
    print(console.format_progress(session.progress, label=session.snapshot().status_label))
    print(f"{summary.successful} succeeded, {summary.failed} failed, {summary.skipped} skipped")

    return 1 if summary.failed or summary.skipped else 0


def cli() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
