"""Tests for the command line front end."""

import json
import os
import threading

import pytest

import main
from devkit_installer.core.selection import SelectionState
from devkit_installer.integrations.system_backend import MockSystemBackend
from devkit_installer.models.installation import InstallResult


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    """Run in a scratch directory without DEVKIT_* variables."""
    for key in list(os.environ):
        if key.startswith("DEVKIT_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


class TestDryRun:
    """End-to-end runs against the mock backend."""

    @pytest.mark.asyncio
    async def test_installs_selection(self, capsys) -> None:
        code = await main.main(["--dry-run", "--yes", "--select", "git"])
        out = capsys.readouterr().out

        assert code == 0
        assert "› Installing Node.js..." in out
        assert "› Installing Git..." in out
        assert "✓ Installation complete!" in out
        assert out.index("Installing Node.js") < out.index("Installing Git") < out.index("Installing Claude Code CLI")
        assert "Complete [" in out

    @pytest.mark.asyncio
    async def test_list_only(self, capsys) -> None:
        code = await main.main(["--dry-run", "--list"])
        out = capsys.readouterr().out

        assert code == 0
        assert "1. [x] Node.js (Required)" in out
        assert "Install Selected (2)" in out
        assert "Installing" not in out

    @pytest.mark.asyncio
    async def test_deselect_cascades(self, capsys) -> None:
        code = await main.main(["--dry-run", "--yes", "--deselect", "nodejs"])
        out = capsys.readouterr().out

        assert code == 0
        assert "All selected tools are installed" in out
        assert "Installing" not in out

    @pytest.mark.asyncio
    async def test_confirmation_declined(self, monkeypatch, capsys) -> None:
        monkeypatch.setattr("builtins.input", lambda prompt: "n")
        code = await main.main(["--dry-run"])

        assert code == 0
        assert "Aborted" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_failed_step_sets_exit_code(self, monkeypatch, capsys) -> None:
        backend = MockSystemBackend(outcomes={
            "install_nodejs": InstallResult.error("Command failed: offline"),
        })
        monkeypatch.setattr(main, "build_backend", lambda settings: backend)

        code = await main.main(["--yes"])
        out = capsys.readouterr().out

        assert code == 1
        assert "✗ Command failed: offline" in out
        assert "✓ Installation complete!" in out


class TestConfigurationErrors:
    """Bad configuration exits with status 2."""

    @pytest.mark.asyncio
    async def test_cyclic_catalog(self, tmp_path, capsys) -> None:
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps([
            {"id": "a", "name": "A", "depends_on": ["b"]},
            {"id": "b", "name": "B", "depends_on": ["a"]},
        ]))

        code = await main.main(["--dry-run", "--catalog", str(path)])

        assert code == 2
        assert "Catalog error" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_missing_catalog(self, tmp_path, capsys) -> None:
        code = await main.main(["--dry-run", "--catalog", str(tmp_path / "missing.json")])
        assert code == 2
        assert "Invalid configuration" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_config_file(self, tmp_path, capsys) -> None:
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"dry_run": True, "installer": {"ordering": "topological"}}))

        code = await main.main(["--config", str(path), "--list"])

        assert code == 0


class TestSelectionHelpers:
    """Selection flags and the interactive prompt."""

    def test_select_and_deselect(self, fresh_catalog) -> None:
        state = SelectionState(fresh_catalog)
        main.apply_selection_args(state, select=["claude_code", "bun"], deselect=["nodejs"])
        # deselecting nodejs drops claude_code, selecting claude_code brings nodejs back
        assert state.selected == frozenset({"nodejs", "claude_code", "bun"})

    def test_select_already_selected_is_kept(self, fresh_catalog) -> None:
        state = SelectionState(fresh_catalog)
        main.apply_selection_args(state, select=["nodejs"], deselect=[])
        assert state.is_selected("nodejs")

    def test_interactive_toggles(self, fresh_catalog, monkeypatch, capsys) -> None:
        answers = iter(["3", "x", "9", "1", ""])
        monkeypatch.setattr("builtins.input", lambda prompt: next(answers))
        state = SelectionState(fresh_catalog)

        main.interactive_select(state)

        assert state.selected == frozenset({"git"})
        out = capsys.readouterr().out
        assert "Invalid choice: x" in out
        assert "Invalid choice: 9" in out

    def test_interactive_installed_tool(self, catalog_factory, monkeypatch, capsys) -> None:
        answers = iter(["3", ""])
        monkeypatch.setattr("builtins.input", lambda prompt: next(answers))
        state = SelectionState(catalog_factory({"git": "2.43.0"}))

        main.interactive_select(state)

        assert "Git is already installed" in capsys.readouterr().out
        assert not state.is_selected("git")

    def test_confirm_install(self, monkeypatch) -> None:
        monkeypatch.setattr("builtins.input", lambda prompt: " Yes ")
        assert main.confirm_install(2)
        monkeypatch.setattr("builtins.input", lambda prompt: "")
        assert not main.confirm_install(2)


class TestPromptsOffLoop:
    """Interactive prompts do not block the event loop thread."""

    @pytest.mark.asyncio
    async def test_prompts_run_in_worker_thread(self, monkeypatch, capsys) -> None:
        loop_thread = threading.current_thread()
        answers = iter(["3", "", "y"])
        prompt_threads = []

        def fake_input(prompt):
            prompt_threads.append(threading.current_thread())
            return next(answers)

        monkeypatch.setattr("builtins.input", fake_input)
        code = await main.main(["--dry-run", "--interactive"])
        out = capsys.readouterr().out

        assert code == 0
        assert len(prompt_threads) == 3
        assert all(t is not loop_thread for t in prompt_threads)
        assert "› Installing Git..." in out
