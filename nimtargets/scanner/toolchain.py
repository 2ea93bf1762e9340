# SPDX-License-Identifier: BSD-3-Clause
"""
Nim toolchain invocation.

Wraps the nim executable as a black box: every call returns the exit
status and the combined stdout/stderr text. A non-zero exit is data,
not an exception.
"""

import sh


DEFAULT_NIM = 'nim'

# Per-call budgets in seconds
AVAILABILITY_TIMEOUT = 5.0
QUERY_TIMEOUT = 10.0

# Minimal program fed on stdin for compile checks
TEST_PROGRAM = 'echo "Hello, World!"\n'

# All exit statuses are accepted so output can be inspected
_ANY_EXIT = list(range(256))


class ToolchainError(RuntimeError):
    """Raised when the toolchain cannot be started."""


class ToolchainTimeout(ToolchainError):
    """Raised when a toolchain call exceeds its time budget."""


class Toolchain:
    """Runs the Nim compiler as a subprocess."""

    def __init__(self, executable: str = DEFAULT_NIM):
        """
        Args:
            executable: Command name or path of the nim binary
        """
        self.executable = executable

    def run(self, args: list, timeout: float, stdin: str = None) -> tuple:
        """Run the toolchain and capture combined output.

        Args:
            args: Command-line arguments
            timeout: Seconds before the process is killed
            stdin: Optional text written to standard input

        Returns:
            (exit_code, output) tuple

        Raises:
            ToolchainTimeout: The process exceeded the timeout
            ToolchainError: The process could not be started
        """
        try:
            nim = sh.Command(self.executable)
            proc = nim(
                *args,
                _in=stdin,
                _err_to_out=True,
                _tty_out=False,
                _ok_code=_ANY_EXIT,
                _timeout=timeout,
                _return_cmd=True,
            )
        except sh.TimeoutException as e:
            raise ToolchainTimeout(
                f"{self.executable} {' '.join(args)} timed out after {timeout}s") from e
        except sh.ErrorReturnCode as e:
            # Killed by a signal
            return e.exit_code, _decode(e.stdout)
        except (sh.CommandNotFound, sh.ForkException, OSError) as e:
            raise ToolchainError(f"Cannot run {self.executable}: {e}") from e

        return proc.exit_code, _decode(proc.stdout)

    def is_available(self) -> bool:
        """Check that the toolchain starts and reports its version."""
        try:
            exit_code, _ = self.run(['--version'], AVAILABILITY_TIMEOUT)
        except ToolchainError:
            return False
        return exit_code == 0

    def query(self, args: list, timeout: float = QUERY_TIMEOUT) -> str:
        """Run an informational invocation and return its output.

        Help and version invocations commonly exit non-zero, so the
        exit status is ignored. Returns an empty string on failure.
        """
        try:
            _, output = self.run(args, timeout)
        except ToolchainError:
            return ''
        return output

    def compile_args(self, os_name: str, cpu: str) -> list:
        """Arguments for a compile-only check of stdin for one target."""
        return [
            f'--os:{os_name}',
            f'--cpu:{cpu}',
            '--compileOnly',
            '--hints:off',
            '--warnings:off',
            '-',
        ]

    def command_hint(self, os_name: str, cpu: str) -> str:
        """Human-readable command selecting a target."""
        return f"{self.executable} --os:{os_name} --cpu:{cpu}"


def _decode(data) -> str:
    if data is None:
        return ''
    if isinstance(data, bytes):
        return data.decode('utf-8', errors='replace')
    return str(data)
