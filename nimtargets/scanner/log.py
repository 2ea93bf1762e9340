# SPDX-License-Identifier: BSD-3-Clause
"""
Diagnostic output for the target scanner.

Everything goes to stderr; stdout carries only the scan result.
"""

import sys


def info(message: str):
    print(message, file=sys.stderr, flush=True)


def warning(message: str):
    print(f"Warning: {message}", file=sys.stderr, flush=True)


def error(message: str):
    print(f"Error: {message}", file=sys.stderr, flush=True)
