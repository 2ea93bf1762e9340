# SPDX-License-Identifier: BSD-3-Clause
"""
Command-line entry points for the Nim target scanner.

This package contains the scan driver and the output formatters.
"""
