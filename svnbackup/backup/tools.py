"""
Wrappers around the Subversion administration executables.

Supports:
- svnlook youngest: latest revision of a repository
- svnadmin verify: repository integrity check
- svnadmin hotcopy: consistent copy of a live repository
"""

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol


SVNADMIN = 'svnadmin'
SVNLOOK = 'svnlook'


class ToolError(Exception):
    """Raised when a Subversion executable cannot be run."""
    pass


@dataclass(frozen=True)
class ToolResult:
    exit_code: int
    stdout: str
    stderr: str

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class ToolInvoker(Protocol):
    def invoke(self, executable: str, command: str, *args: str) -> ToolResult:
        ...

    def youngest(self, repository_path) -> ToolResult:
        ...

    def verify(self, repository_path) -> ToolResult:
        ...

    def hotcopy(self, repository_path, backup_path) -> ToolResult:
        ...


class SubversionTool:
    """
    Runs svnadmin/svnlook and captures exit code, stdout and stderr.

    No timeout is applied; a hung tool blocks the calling worker.
    """

    def __init__(self, tool_path: Optional[os.PathLike] = None):
        """
        Initialize the tool wrapper.

        Args:
            tool_path: Directory containing the executables. When omitted
                they are looked up on PATH.
        """
        self.tool_path = Path(tool_path) if tool_path else None

    def executable_path(self, executable: str) -> str:
        if self.tool_path is None:
            return executable
        return str(self.tool_path / executable)

    def invoke(self, executable: str, command: str, *args: str) -> ToolResult:
        """
        Run a tool command synchronously.

        Args:
            executable: Tool name ('svnadmin' or 'svnlook')
            command: Sub-command, e.g. 'hotcopy'
            *args: Remaining command line arguments

        Returns:
            ToolResult with the exit code and captured output

        Raises:
            ToolError: If the process cannot be started or waited on
        """
        cmd = [self.executable_path(executable), command, *[str(arg) for arg in args]]

        try:
            with subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors='replace'
            ) as process:
                try:
                    stdout, stderr = process.communicate()
                except BaseException:
                    process.kill()
                    raise
        except OSError as e:
            raise ToolError(f"Failed to run {' '.join(cmd)}: {e}") from e

        return ToolResult(exit_code=process.returncode, stdout=stdout or '', stderr=stderr or '')

    def youngest(self, repository_path) -> ToolResult:
        return self.invoke(SVNLOOK, 'youngest', repository_path)

    def verify(self, repository_path) -> ToolResult:
        return self.invoke(SVNADMIN, 'verify', repository_path)

    def hotcopy(self, repository_path, backup_path) -> ToolResult:
        return self.invoke(SVNADMIN, 'hotcopy', repository_path, backup_path)
