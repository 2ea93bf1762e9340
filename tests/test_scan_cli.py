from __future__ import annotations

import contextlib
import io
import json
import sys
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from helpers import POSIX, FakeToolchain, write_fake_nim  # noqa: E402
from nimtargets.base.scan import main, scan_targets  # noqa: E402
from nimtargets.scanner.config import ScanConfig  # noqa: E402
from nimtargets.scanner.targets import get_known_targets  # noqa: E402


MATRIX_SIZE = len(get_known_targets("os")) * len(get_known_targets("cpu"))

FAKE_NIM = """echo "$*" >> "{log}"
case "$1" in
  --version)
    echo "Nim Compiler Version 2.2.0 [Linux: amd64]"
    exit 0
    ;;
  --os:invalid)
    echo "Error: unknown OS: 'invalid'. Available options are: Linux, Windows, Haiku, Genode" >&2
    exit 1
    ;;
  --cpu:invalid)
    echo "Error: unknown CPU: 'invalid'. Available options are: amd64, arm64, riscv64" >&2
    exit 1
    ;;
  --os:*)
    cat >/dev/null
    exit 0
    ;;
esac
exit 1
"""


def run_main(argv: list[str]) -> tuple[int, str, str]:
    stdout = io.StringIO()
    stderr = io.StringIO()
    code = 0
    with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
        try:
            main(argv)
        except SystemExit as exc:
            code = exc.code if isinstance(exc.code, int) else 1
    return code, stdout.getvalue(), stderr.getvalue()


class ScanTargetsTests(unittest.TestCase):
    def test_hardcoded_only_never_queries_or_compiles(self) -> None:
        toolchain = FakeToolchain(outputs={("--os:invalid", "c"): (1, "one of: beos, haiku, aix")})
        with contextlib.redirect_stderr(io.StringIO()):
            result = scan_targets(ScanConfig(hardcoded_only=True), toolchain)

        self.assertEqual(toolchain.query_calls(), [])
        self.assertEqual(toolchain.compile_calls(), [])
        self.assertEqual(len(result.targets), MATRIX_SIZE)
        self.assertTrue(all(t.source == "hardcoded" for t in result.targets))

    def test_verify_all_with_successful_toolchain(self) -> None:
        toolchain = FakeToolchain()
        with contextlib.redirect_stderr(io.StringIO()):
            result = scan_targets(ScanConfig(verify_all=True), toolchain)
        self.assertTrue(all(t.verified for t in result.targets))
        self.assertTrue(result.verification_run)
        self.assertTrue(result.nim_available)

    def test_verify_all_under_hardcoded_only_is_not_reported_as_run(self) -> None:
        toolchain = FakeToolchain()
        with contextlib.redirect_stderr(io.StringIO()):
            result = scan_targets(ScanConfig(verify_all=True, hardcoded_only=True), toolchain)
        self.assertFalse(result.verification_run)
        self.assertEqual(toolchain.compile_calls(), [])

    def test_verify_all_without_toolchain_is_not_reported_as_run(self) -> None:
        toolchain = FakeToolchain(available=False)
        with contextlib.redirect_stderr(io.StringIO()):
            result = scan_targets(ScanConfig(verify_all=True), toolchain)
        self.assertFalse(result.verification_run)
        self.assertFalse(any(t.verified for t in result.targets))

    def test_unavailable_toolchain_degrades_to_hardcoded(self) -> None:
        toolchain = FakeToolchain(available=False)
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr):
            result = scan_targets(ScanConfig(), toolchain)

        self.assertFalse(result.nim_available)
        self.assertEqual(len(result.targets), MATRIX_SIZE)
        self.assertFalse(any(t.verified for t in result.targets))
        self.assertEqual(toolchain.calls, [["--version"]])
        self.assertIn("Warning: 'nim' command not found", stderr.getvalue())


class MainTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)
        self.log = self.root / "invocations.log"

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def _fake_nim(self) -> str:
        return str(write_fake_nim(self.root, FAKE_NIM.format(log=self.log)))

    def _invocations(self) -> list[str]:
        if not self.log.exists():
            return []
        return self.log.read_text(encoding="utf-8").splitlines()

    def test_conflicting_flags_exit_before_any_work(self) -> None:
        code, stdout, stderr = run_main(["--verify-all", "--skip-verify", "--nim", str(self.root / "nim")])
        self.assertNotEqual(code, 0)
        self.assertEqual(stdout, "")
        self.assertIn("Cannot use --verify-all and --skip-verify together", stderr)
        self.assertEqual(self._invocations(), [])

    def test_invalid_timeout_is_rejected(self) -> None:
        code, stdout, _ = run_main(["--timeout", "soon"])
        self.assertNotEqual(code, 0)
        self.assertEqual(stdout, "")

    def test_unknown_format_is_rejected(self) -> None:
        code, stdout, _ = run_main(["--format", "xml"])
        self.assertNotEqual(code, 0)
        self.assertEqual(stdout, "")

    def test_missing_toolchain_still_emits_json(self) -> None:
        code, stdout, stderr = run_main(["--nim", str(self.root / "missing" / "nim")])
        self.assertEqual(code, 0)

        payload = json.loads(stdout)
        self.assertFalse(payload["nim_available"])
        self.assertFalse(payload["verification_run"])
        self.assertEqual(payload["total_count"], MATRIX_SIZE)
        self.assertEqual(payload["hardcoded_count"], MATRIX_SIZE)
        self.assertEqual(payload["detected_count"], 0)
        self.assertEqual(payload["verified_count"], 0)
        self.assertIn("Using hardcoded target list only", stderr)

    @unittest.skipUnless(POSIX, "fake toolchain scripts need a POSIX shell")
    def test_hardcoded_only_runs_only_the_availability_probe(self) -> None:
        code, stdout, _ = run_main(["--hardcoded-only", "--format", "csv", "--nim", self._fake_nim()])
        self.assertEqual(code, 0)
        self.assertEqual(self._invocations(), ["--version"])

        lines = stdout.splitlines()
        self.assertEqual(lines[0], "os,cpu,verified,source,command")
        self.assertEqual(len(lines), 1 + MATRIX_SIZE)
        self.assertNotIn(",true,", stdout)

    @unittest.skipUnless(POSIX, "fake toolchain scripts need a POSIX shell")
    def test_skip_verify_detects_but_never_compiles(self) -> None:
        code, stdout, _ = run_main(["--skip-verify", "--nim", self._fake_nim()])
        self.assertEqual(code, 0)

        payload = json.loads(stdout)
        self.assertTrue(payload["nim_available"])
        self.assertEqual(payload["verified_count"], 0)
        sources = {(t["os"], t["cpu"]): t["source"] for t in payload["targets"]}
        self.assertEqual(sources[("genode", "riscv64")], "detected")
        self.assertEqual(sources[("genode", "i386")], "mixed")
        self.assertEqual(sources[("dos", "i386")], "hardcoded")
        self.assertEqual(payload["detected_count"], 4 * 3)
        self.assertFalse(any("--compileOnly" in line for line in self._invocations()))

    @unittest.skipUnless(POSIX, "fake toolchain scripts need a POSIX shell")
    def test_default_run_verifies_common_targets(self) -> None:
        nim = self._fake_nim()
        code, stdout, _ = run_main(["--format", "json", "--timeout", "10s", "--nim", nim])
        self.assertEqual(code, 0)

        payload = json.loads(stdout)
        self.assertEqual(payload["verified_count"], 16)
        self.assertFalse(payload["verification_run"])
        verified = [t for t in payload["targets"] if t["verified"]]
        self.assertTrue(all(t["command"].startswith(nim + " --os:") for t in verified))

    @unittest.skipUnless(POSIX, "fake toolchain scripts need a POSIX shell")
    def test_output_file(self) -> None:
        out = self.root / "targets.txt"
        code, stdout, _ = run_main(["--hardcoded-only", "--format", "table", "-o", str(out),
                                    "--nim", self._fake_nim()])
        self.assertEqual(code, 0)
        self.assertEqual(stdout, "")
        self.assertTrue(out.read_text(encoding="utf-8").startswith("OS "))

    def test_unwritable_output_is_fatal(self) -> None:
        out = self.root / "no-such-dir" / "targets.json"
        code, stdout, stderr = run_main(["--hardcoded-only", "-o", str(out),
                                         "--nim", str(self.root / "missing" / "nim")])
        self.assertEqual(code, 1)
        self.assertEqual(stdout, "")
        self.assertIn("output failed", stderr)

    def test_unencodable_stdout_is_fatal(self) -> None:
        stdout = io.TextIOWrapper(io.BytesIO(), encoding="ascii")
        stderr = io.StringIO()
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            with self.assertRaises(SystemExit) as ctx:
                main(["--hardcoded-only", "--format", "table", "--nim", str(self.root / "missing" / "nim")])
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("Writing table output failed", stderr.getvalue())


if __name__ == "__main__":
    unittest.main()
