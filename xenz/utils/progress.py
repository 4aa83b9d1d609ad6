import subprocess
from typing import List, Optional

from rich.console import Console
from rich.live import Live
from rich.spinner import Spinner

SYMBOL_SUCCESS = "✅"
SYMBOL_FAILED = "❌"

console = Console()


class CommandProgressMonitor:
    """Context manager showing a spinner while an external command runs."""

    def __init__(self, message: str = "Working"):
        self.message = message
        self.spinner = Spinner("dots", text=f"│     {message}")
        self.live = None
        self.result = None
        self.success = False

    def __enter__(self):
        self.live = Live(self.spinner, console=console, refresh_per_second=10)
        self.live.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.live:
            self.live.stop()

        if self.success:
            console.print(f"  │     {SYMBOL_SUCCESS} {self.message} - Complete!", style="bold green")
        elif exc_type is not None:
            console.print(f"  │     {SYMBOL_FAILED} {self.message} - Failed (Exception)", style="bold red")
        elif self.result is not None and self.result.returncode != 0:
            console.print(f"  │     {SYMBOL_FAILED} {self.message} - Failed", style="bold red")

    def set_result(self, result):
        self.result = result
        self.success = result.returncode == 0


def run_command(
    command: List[str],
    message: Optional[str] = None,
    cwd=None,
) -> subprocess.CompletedProcess:
    """Run a command to completion and capture its output.

    A missing executable is reported like a shell would, exit code 127,
    instead of raising.
    """
    try:
        return subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding='utf-8',
            errors='ignore'
        )
    except FileNotFoundError as e:
        return subprocess.CompletedProcess(command, 127, stdout='', stderr=str(e))


def run_command_with_progress(
    command: List[str],
    message: str,
    cwd=None,
) -> subprocess.CompletedProcess:
    """Run a command with a progress spinner."""
    with CommandProgressMonitor(message) as monitor:
        result = run_command(command, cwd=cwd)
        monitor.set_result(result)

    return result


def run_interactive(command: List[str], cwd=None) -> int:
    """Run a command attached to the terminal (prompts, log follow, shells).

    Ctrl+C stops the child and returns control to the menu.
    """
    try:
        return subprocess.run(command, cwd=cwd).returncode
    except FileNotFoundError:
        console.print(f"  ❌ Command not found: {command[0]}", style="bold red")
        return 127
    except KeyboardInterrupt:
        return 130


def filter_docker_errors(stderr: str) -> str:
    """Filter Docker stderr to show only real errors, not progress lines."""
    if not stderr:
        return ""

    progress_keywords = [
        'Pulling', 'Download', 'Extracting', 'Pull complete',
        'Waiting', 'Verifying', 'Already exists', 'Digest:',
        'Status:', 'Image is up to date', 'Downloaded newer image',
        'Building', 'Built', 'Creating', 'Created', 'Starting', 'Started',
        'Recreate', 'Running',
    ]

    error_lines = []
    for line in stderr.split('\n'):
        if any(keyword in line for keyword in progress_keywords):
            continue

        if line.strip():
            error_lines.append(line)

    return '\n'.join(error_lines)
