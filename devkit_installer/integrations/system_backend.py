"""
System backend: host detection and the OS-level install operations.
"""

import asyncio
import logging
import platform
import shutil
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Protocol, Tuple, Union

from ..errors import UnknownOperationError
from ..models.installation import InstallResult
from ..models.tool import SystemInfo


# Tool id -> (executable, version args)
VERSION_PROBES: Dict[str, Tuple[str, List[str]]] = {
    "nodejs": ("node", ["--version"]),
    "npm": ("npm", ["--version"]),
    "git": ("git", ["--version"]),
    "vscode": ("code", ["--version"]),
    "bun": ("bun", ["--version"]),
    "claude_code": ("claude", ["--version"]),
}

# Operation -> OS family -> shell command. "default" applies to any OS not listed.
INSTALL_COMMANDS: Dict[str, Dict[str, str]] = {
    "install_nodejs": {
        "windows": "winget install -e --id OpenJS.NodeJS --accept-package-agreements --accept-source-agreements",
        "macos": "brew install node",
        "debian": "curl -fsSL https://deb.nodesource.com/setup_22.x | sudo -E bash - && sudo apt-get install -y nodejs",
        "fedora": "sudo dnf install -y nodejs npm",
        "rhel": "sudo dnf install -y nodejs npm",
        "arch": "sudo pacman -Sy --noconfirm nodejs npm",
    },
    "install_claude_code": {
        "default": "npm install -g @anthropic-ai/claude-code",
    },
    "install_git": {
        "windows": "winget install -e --id Git.Git --accept-package-agreements --accept-source-agreements",
        "macos": "brew install git",
        "debian": "sudo apt-get install -y git",
        "fedora": "sudo dnf install -y git",
        "rhel": "sudo dnf install -y git",
        "arch": "sudo pacman -Sy --noconfirm git",
    },
    "install_vscode": {
        "windows": "winget install -e --id Microsoft.VisualStudioCode --accept-package-agreements --accept-source-agreements",
        "macos": "brew install --cask visual-studio-code || brew reinstall --cask visual-studio-code",
        "debian": (
            "wget -qO- https://packages.microsoft.com/keys/microsoft.asc | gpg --dearmor > packages.microsoft.gpg && "
            "sudo install -D -o root -g root -m 644 packages.microsoft.gpg /etc/apt/keyrings/packages.microsoft.gpg && "
            "echo \"deb [arch=amd64,arm64,armhf signed-by=/etc/apt/keyrings/packages.microsoft.gpg] "
            "https://packages.microsoft.com/repos/code stable main\" | sudo tee /etc/apt/sources.list.d/vscode.list > /dev/null && "
            "rm -f packages.microsoft.gpg && "
            "sudo apt-get update && sudo apt-get install -y code"
        ),
        "fedora": (
            "sudo rpm --import https://packages.microsoft.com/keys/microsoft.asc && "
            "echo -e \"[code]\\nname=Visual Studio Code\\nbaseurl=https://packages.microsoft.com/yumrepos/vscode\\n"
            "enabled=1\\ngpgcheck=1\\ngpgkey=https://packages.microsoft.com/keys/microsoft.asc\" "
            "| sudo tee /etc/yum.repos.d/vscode.repo > /dev/null && "
            "sudo dnf install -y code"
        ),
        "arch": "yay -S --noconfirm visual-studio-code-bin || paru -S --noconfirm visual-studio-code-bin",
    },
    "install_bun": {
        "windows": "powershell -c \"irm bun.sh/install.ps1 | iex\"",
        "default": "curl -fsSL https://bun.sh/install | bash",
    },
}
INSTALL_COMMANDS["install_vscode"]["rhel"] = INSTALL_COMMANDS["install_vscode"]["fedora"]

SUCCESS_MESSAGES: Dict[str, str] = {
    "install_nodejs": "Node.js installed successfully",
    "install_claude_code": "Claude Code installed successfully",
    "install_git": "Git installed successfully",
    "install_vscode": "VS Code installed successfully",
    "install_bun": "Bun installed successfully",
}

PACKAGE_MANAGERS: Dict[str, str] = {
    "debian": "apt",
    "fedora": "dnf",
    "rhel": "dnf",
    "arch": "pacman",
}

# Checked in order; the first marker file that exists decides the family
LINUX_RELEASE_MARKERS: List[Tuple[str, str]] = [
    ("/etc/debian_version", "debian"),
    ("/etc/fedora-release", "fedora"),
    ("/etc/arch-release", "arch"),
    ("/etc/redhat-release", "rhel"),
]

WINDOWS_VSCODE_PATHS = [
    r"C:\Program Files\Microsoft VS Code\Code.exe",
    r"C:\Program Files (x86)\Microsoft VS Code\Code.exe",
]
MACOS_VSCODE_APP = "/Applications/Visual Studio Code.app"


class SystemBackend(Protocol):
    """Privileged operations the installer consumes."""

    async def get_system_info(self) -> SystemInfo:
        ...

    async def install(self, operation: str) -> InstallResult:
        ...


def detect_os(root: Path = Path("/")) -> str:
    """Detect the OS family."""
    system = platform.system()
    if system == "Windows":
        return "windows"
    if system == "Darwin":
        return "macos"
    for marker, family in LINUX_RELEASE_MARKERS:
        if (root / marker.lstrip("/")).exists():
            return family
    return "linux"


def detect_package_manager(os_name: str) -> Optional[str]:
    if os_name == "windows":
        return "winget" if shutil.which("winget") else None
    if os_name == "macos":
        return "brew" if shutil.which("brew") else None
    return PACKAGE_MANAGERS.get(os_name)


def resolve_command(operation: str, os_name: str) -> Optional[str]:
    """
    Shell command for an operation on an OS family, None if unsupported.

    Raises:
        UnknownOperationError: If the operation does not exist
    """
    try:
        commands = INSTALL_COMMANDS[operation]
    except KeyError:
        raise UnknownOperationError(f"Unknown install operation: {operation}") from None
    return commands.get(os_name, commands.get("default"))


class LocalSystemBackend:
    """Detects tools and installs them on the local host through the system shell."""

    def __init__(self,
                 os_name: Optional[str] = None,
                 shell_override: Optional[str] = None,
                 probe_timeout: float = 10.0):
        """
        Initialize the backend.

        Args:
            os_name: OS family; detected when omitted
            shell_override: Shell executable to use instead of bash/powershell
            probe_timeout: Seconds to wait for each version probe
        """
        self.logger = logging.getLogger(__name__)
        self.os_name = os_name or detect_os()
        self.shell = shell_override or ("powershell" if self.os_name == "windows" else "bash")
        self.probe_timeout = probe_timeout

    async def get_system_info(self) -> SystemInfo:
        tool_ids = list(VERSION_PROBES)
        versions = await asyncio.gather(*(self.probe_version(t) for t in tool_ids))
        installed = dict(zip(tool_ids, versions))
        if not installed.get("vscode"):
            installed["vscode"] = self._find_vscode_app()

        info = SystemInfo(
            os=self.os_name,
            arch=platform.machine() or "unknown",
            package_manager=detect_package_manager(self.os_name),
            installed_tools=installed,
        )
        self.logger.info(f"Detected {info.os}/{info.arch}, package manager: {info.package_manager}")
        return info

    async def probe_version(self, tool_id: str) -> Optional[str]:
        """Run the tool's version command; None if missing or failing."""
        executable, args = VERSION_PROBES[tool_id]
        path = shutil.which(executable)
        if not path:
            return None

        # Windows shims (npm.cmd, code.cmd) only run through their resolved path
        try:
            process = await asyncio.create_subprocess_exec(
                path, *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL
            )
        except OSError as e:
            self.logger.debug(f"Version probe for {tool_id} failed to start: {e}")
            return None

        try:
            stdout, _ = await asyncio.wait_for(process.communicate(), timeout=self.probe_timeout)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            self.logger.warning(f"Version probe for {tool_id} timed out after {self.probe_timeout}s")
            return None

        if process.returncode != 0:
            return None
        output = stdout.decode(errors="replace").strip()
        if not output:
            return None
        # `code --version` prints version, commit and arch on separate lines
        return output.splitlines()[0] if tool_id == "vscode" else output

    def _find_vscode_app(self) -> Optional[str]:
        if self.os_name == "macos" and Path(MACOS_VSCODE_APP).exists():
            return "installed"
        if self.os_name == "windows":
            for path in WINDOWS_VSCODE_PATHS:
                if Path(path).exists():
                    return "installed"
        return None

    async def install(self, operation: str) -> InstallResult:
        command = resolve_command(operation, self.os_name)
        if command is None:
            return InstallResult.error("Unsupported operating system")

        self.logger.info(f"Running {operation} on {self.os_name}")
        success, output = await self.run_shell_command(command)
        if success:
            return InstallResult.ok(SUCCESS_MESSAGES.get(operation, f"{operation} completed"), output)
        return InstallResult.error(output)

    async def run_shell_command(self, command: str) -> Tuple[bool, str]:
        """
        Run a command through the shell.

        Returns:
            (success, output) where output is the combined stdout/stderr on
            success and a "Command failed" message otherwise
        """
        flag = "-Command" if self.shell == "powershell" else "-c"
        try:
            process = await asyncio.create_subprocess_exec(
                self.shell, flag, command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
            stdout, stderr = await process.communicate()
        except OSError as e:
            return False, f"Failed to execute command: {e}"

        out = stdout.decode(errors="replace")
        err = stderr.decode(errors="replace")
        if process.returncode == 0:
            return True, f"{out}\n{err}".strip()
        return False, f"Command failed: {out}\n{err}"


MockOutcome = Union[InstallResult, Exception]


class MockSystemBackend:
    """Backend that touches nothing on the host; for dry runs and tests."""

    def __init__(self,
                 system_info: Optional[SystemInfo] = None,
                 outcomes: Optional[Mapping[str, MockOutcome]] = None,
                 delay: float = 0.0):
        """
        Initialize the mock backend.

        Args:
            system_info: Host snapshot to report (defaults to nothing installed)
            outcomes: Operation -> result to return or exception to raise
            delay: Seconds to sleep in each install call
        """
        self.logger = logging.getLogger(__name__)
        self.system_info = system_info or SystemInfo(
            os=detect_os(),
            arch=platform.machine() or "unknown",
            installed_tools={tool_id: None for tool_id in VERSION_PROBES},
        )
        self.outcomes = dict(outcomes or {})
        self.delay = delay
        self.calls: List[str] = []

    async def get_system_info(self) -> SystemInfo:
        return self.system_info

    async def install(self, operation: str) -> InstallResult:
        self.calls.append(operation)
        if self.delay:
            await asyncio.sleep(self.delay)

        outcome = self.outcomes.get(operation)
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is not None:
            return outcome

        command = resolve_command(operation, self.system_info.os)
        self.logger.info(f"Dry run: {operation} -> {command}")
        return InstallResult.ok(f"[dry run] {SUCCESS_MESSAGES.get(operation, operation)}", command)
