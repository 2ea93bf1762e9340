from __future__ import annotations

import os
import stat
import sys
import threading
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from nimtargets.scanner.toolchain import Toolchain, ToolchainError  # noqa: E402


NIM_VERSION_TEXT = "Nim Compiler Version 2.2.0 [Linux: amd64]\n"

OS_ERROR_TEXT = (
    "Hint: used config file '/etc/nim/nim.cfg' [Conf]\n"
    "Error: unknown OS: 'invalid'. Available options are: DOS, Windows, OS2, "
    "Linux, MacOSX, FreeBSD, Haiku\n"
)

CPU_ERROR_TEXT = (
    "Error: unknown CPU: 'invalid'. Available options are: i386, amd64, arm, "
    "arm64, riscv64, wasm32\n"
)


class FakeToolchain(Toolchain):
    """Toolchain double answering from canned outputs instead of a process."""

    def __init__(self, outputs: dict | None = None, compile_result=None,
                 available: bool = True, delay: float = 0.0) -> None:
        super().__init__("nim")
        self.outputs = outputs or {}
        self.compile_result = compile_result or (lambda os_name, cpu: (0, ""))
        self.available = available
        self.delay = delay
        self.calls: list[list[str]] = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def run(self, args, timeout, stdin=None):
        with self._lock:
            self.calls.append(list(args))

        if list(args) == ["--version"]:
            if not self.available:
                raise ToolchainError("Cannot run nim: not found")
            return 0, NIM_VERSION_TEXT

        if "--compileOnly" in args:
            with self._lock:
                self.active += 1
                self.max_active = max(self.max_active, self.active)
            try:
                if self.delay:
                    time.sleep(self.delay)
                os_name = args[0].split(":", 1)[1]
                cpu = args[1].split(":", 1)[1]
                return self.compile_result(os_name, cpu)
            finally:
                with self._lock:
                    self.active -= 1

        result = self.outputs.get(tuple(args), (1, ""))
        if isinstance(result, Exception):
            raise result
        return result

    def compile_calls(self) -> list[list[str]]:
        return [call for call in self.calls if "--compileOnly" in call]

    def query_calls(self) -> list[list[str]]:
        return [call for call in self.calls
                if call != ["--version"] and "--compileOnly" not in call]


def write_fake_nim(directory: Path, body: str, name: str = "nim") -> Path:
    """Write an executable shell script standing in for the nim binary."""
    path = directory / name
    path.write_text("#!/bin/sh\n" + body, encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


POSIX = os.name == "posix"
