#!/usr/bin/env python3
# SPDX-License-Identifier: BSD-3-Clause
"""
Nim compilation target scanner.

Lists the (OS, CPU) targets the Nim compiler supports, detected from its
help output and completed with the documented target lists, optionally
verified by test compilation.
"""

import argparse
import sys

from nimtargets.base.report import get_supported_formats, render, utc_timestamp
from nimtargets.scanner import log
from nimtargets.scanner.config import DEFAULT_TIMEOUT, ConfigError, ScanConfig, parse_duration
from nimtargets.scanner.matrix import ScanResult, merge_targets
from nimtargets.scanner.probe import probe_axis
from nimtargets.scanner.targets import AXIS_CPU, AXIS_OS, get_known_targets
from nimtargets.scanner.toolchain import DEFAULT_NIM, Toolchain
from nimtargets.scanner.verify import runs_full_verification, verify_targets


DEFAULT_FORMAT = 'json'


def scan_targets(config: ScanConfig, toolchain: Toolchain) -> ScanResult:
    """Run detection, catalog merge and verification.

    Args:
        config: Scan options
        toolchain: Toolchain to probe

    Returns:
        ScanResult with the full target matrix
    """
    nim_available = toolchain.is_available()
    if not nim_available:
        log.warning(f"'{toolchain.executable}' command not found. "
                    "Using hardcoded target list only.")

    detected_oses = []
    detected_cpus = []
    if not config.hardcoded_only and nim_available:
        log.info("Attempting to detect targets from nim help output...")
        detected_oses = probe_axis(toolchain, AXIS_OS)
        detected_cpus = probe_axis(toolchain, AXIS_CPU)
        log.info(f"Detected {len(detected_oses)} OSes and {len(detected_cpus)} CPUs "
                 "from help output")

    log.info("Adding hardcoded targets...")
    targets = merge_targets(
        detected_oses,
        detected_cpus,
        get_known_targets(AXIS_OS),
        get_known_targets(AXIS_CPU),
        command_hint=toolchain.command_hint,
    )
    log.info(f"Total targets: {len(targets)}")

    targets = verify_targets(targets, config, toolchain, nim_available)

    return ScanResult(
        targets,
        nim_available=nim_available,
        verification_run=runs_full_verification(config, nim_available),
        generated_at=utc_timestamp(),
    )


def write_output(text: str, path: str = None):
    if path:
        with open(path, 'w', encoding='utf-8', newline='') as f:
            f.write(text)
    else:
        sys.stdout.write(text)
        sys.stdout.flush()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='nim-targets',
        description='Scan for available Nim compilation targets',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
This tool scans for available Nim compilation targets by:
  1. Parsing nim help output using regex patterns (if nim available)
  2. Including known hardcoded targets
  3. Optionally verifying targets by test compilation

Examples:
  %(prog)s                          # JSON, verify common targets
  %(prog)s --format table           # Human-readable table
  %(prog)s --verify-all --timeout 1m
  %(prog)s --hardcoded-only --format csv

Notes:
  - If nim command is not found, only hardcoded targets are used
  - Use --hardcoded-only to skip nim detection entirely
  - Use --skip-verify to skip all verification steps
''',
    )

    parser.add_argument('--format', default=DEFAULT_FORMAT,
                        choices=get_supported_formats(),
                        help=f'Output format (default: {DEFAULT_FORMAT})')
    parser.add_argument('--verify-all', action='store_true',
                        help='Verify all targets (slow)')
    parser.add_argument('--skip-verify', action='store_true',
                        help='Skip verification entirely')
    parser.add_argument('--hardcoded-only', action='store_true',
                        help='Use only hardcoded targets (no nim detection)')
    parser.add_argument('--timeout', type=parse_duration, default=DEFAULT_TIMEOUT,
                        help='Timeout for each verification compile, '
                             'e.g. 30s, 1m30s, 500ms (default: 30s)')
    parser.add_argument('--nim', default=DEFAULT_NIM,
                        help=f'Nim executable (default: {DEFAULT_NIM})')
    parser.add_argument('-o', '--output',
                        help='Write the result to a file instead of stdout')
    return parser


def main(argv: list = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = ScanConfig(
            verify_all=args.verify_all,
            skip_verify=args.skip_verify,
            hardcoded_only=args.hardcoded_only,
            timeout=args.timeout,
        )
    except ConfigError as e:
        log.error(str(e))
        sys.exit(1)

    toolchain = Toolchain(args.nim)

    try:
        result = scan_targets(config, toolchain)
    except KeyboardInterrupt:
        log.error("Scan interrupted.")
        sys.exit(130)

    try:
        write_output(render(result, args.format), args.output)
    except (OSError, UnicodeError) as e:
        log.error(f"Writing {args.format} output failed: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
