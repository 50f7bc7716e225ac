"""Shared utility functions for hatchery.

Provides async command execution (captured probes and the inherited-stdio
process runner), file-system checks, duration formatting and Rich-based
console output.  Every process helper takes an explicit working directory;
nothing in hatchery changes the interpreter's current directory.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()

# Exit status a POSIX shell reports for "command not found".  ``spawn`` uses
# the same status when the executable cannot be located at all.
EXIT_COMMAND_NOT_FOUND = 127


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ExternalToolError(Exception):
    """Raised when a spawned command exits with a non-zero status."""

    def __init__(
        self, command: Sequence[str], exit_code: int, message: str | None = None
    ) -> None:
        self.command = list(command)
        self.exit_code = exit_code
        super().__init__(
            message
            or f"Command failed (exit {exit_code}): {format_command(self.command)}"
        )


def format_command(command: Sequence[str]) -> str:
    """Join a command vector into a single display string."""
    return " ".join(str(part) for part in command)


def _merge_env(env: dict[str, str] | None) -> dict[str, str] | None:
    if not env:
        return None
    return {**os.environ, **env}


# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: str | list[str],
    cwd: str | Path | None = None,
    timeout: float | None = None,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a command asynchronously and capture its output.

    Used for side-effect-free probes (tool versions, git identity) where the
    output matters and the user should not see it.

    Args:
        cmd: Shell command string or list of arguments.
        cwd: Working directory for the child process.
        timeout: Optional wall-clock limit in seconds.  ``None`` waits
            indefinitely.
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.

    Raises:
        FileNotFoundError: If *cmd* is a list and its executable does not exist.
    """
    if isinstance(cmd, list):
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
            env=_merge_env(env),
        )
    else:
        process = await asyncio.create_subprocess_shell(
            cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
            env=_merge_env(env),
        )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        shown = cmd if isinstance(cmd, str) else format_command(cmd)
        return (-1, "", f"Command timed out after {timeout}s: {shown}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


async def spawn(
    command: str,
    args: Sequence[str] = (),
    cwd: str | Path | None = None,
    **options: Any,
) -> int:
    """Spawn *command* with inherited standard streams and wait for it.

    Extra keyword *options* are passed through to
    :func:`asyncio.create_subprocess_exec` and override the defaults; an
    ``env`` mapping is merged on top of ``os.environ``.  There is exactly one
    spawn attempt per call.

    Returns:
        ``0`` when the process exits successfully.

    Raises:
        ExternalToolError: On any non-zero exit.  A missing executable is
            reported with :data:`EXIT_COMMAND_NOT_FOUND`.
        FileNotFoundError: If *cwd* does not exist.
    """
    argv = [command, *args]
    spawn_options: dict[str, Any] = {
        "stdin": None,
        "stdout": None,
        "stderr": None,
        "cwd": str(cwd) if cwd else None,
    }
    spawn_options.update(options)
    if "env" in spawn_options:
        spawn_options["env"] = _merge_env(spawn_options["env"])

    try:
        process = await asyncio.create_subprocess_exec(*argv, **spawn_options)
    except FileNotFoundError as exc:
        workdir = spawn_options.get("cwd")
        if workdir and not Path(workdir).is_dir():
            raise
        raise ExternalToolError(argv, EXIT_COMMAND_NOT_FOUND) from exc

    returncode = await process.wait()
    if returncode != 0:
        raise ExternalToolError(argv, returncode)
    return returncode


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def _is_empty_dir(path: Path) -> bool:
    try:
        return not any(path.iterdir())
    except FileNotFoundError:
        return True


async def is_empty_dir(path: str | Path) -> bool:
    """Return ``True`` if *path* is an empty directory or does not exist.

    Raises:
        NotADirectoryError: If *path* exists but is a regular file.
    """
    return await asyncio.to_thread(_is_empty_dir, Path(path))


async def path_exists(path: str | Path) -> bool:
    """Return ``True`` if *path* exists on disk."""
    return await asyncio.to_thread(Path(path).exists)


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist.

    Returns:
        The resolved ``Path`` object.
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path.resolve()


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
        format_duration(3661.0) -> "1h 1m 1s"
    """
    if seconds < 0:
        return "0.0s"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = seconds % 60

    parts: list[str] = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")

    if hours > 0 or minutes > 0:
        parts.append(f"{int(secs)}s")
    else:
        parts.append(f"{secs:.1f}s")

    return " ".join(parts)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(escape(key), escape(str(value)))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
