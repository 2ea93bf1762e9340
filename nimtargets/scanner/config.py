# SPDX-License-Identifier: BSD-3-Clause
"""
Scan configuration and duration parsing.
"""

import math
import re


DEFAULT_TIMEOUT = 30.0

_DURATION_UNITS = {
    'ns': 1e-9,
    'us': 1e-6,
    'µs': 1e-6,
    'ms': 1e-3,
    's': 1.0,
    'm': 60.0,
    'h': 3600.0,
}
_DURATION_PART = re.compile(r'(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)')


class ConfigError(ValueError):
    """Raised for invalid or conflicting scan options."""


def parse_duration(text: str) -> float:
    """Parse a duration such as '30s', '1m30s' or '500ms' into seconds.

    A bare number is taken as seconds.
    """
    text = str(text).strip()
    if not text:
        raise ConfigError("Empty duration")

    try:
        seconds = float(text)
    except ValueError:
        seconds = None

    if seconds is None:
        pos = 0
        seconds = 0.0
        for match in _DURATION_PART.finditer(text):
            if match.start() != pos:
                break
            seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
            pos = match.end()
        if pos != len(text):
            raise ConfigError(f"Invalid duration: {text}")

    if not math.isfinite(seconds) or seconds <= 0:
        raise ConfigError(f"Duration must be positive: {text}")
    return seconds


class ScanConfig:
    """Options controlling a single scan."""

    def __init__(self, verify_all: bool = False, skip_verify: bool = False,
                 hardcoded_only: bool = False, timeout: float = DEFAULT_TIMEOUT):
        if verify_all and skip_verify:
            raise ConfigError("Cannot use --verify-all and --skip-verify together")
        if timeout is None or not math.isfinite(timeout) or timeout <= 0:
            raise ConfigError(f"Timeout must be positive, got {timeout}")

        self.verify_all = verify_all
        self.skip_verify = skip_verify
        self.hardcoded_only = hardcoded_only
        self.timeout = float(timeout)

    @property
    def verification_run(self) -> bool:
        """Whether full verification was requested."""
        return self.verify_all and not self.skip_verify

    def __repr__(self):
        return (f"ScanConfig(verify_all={self.verify_all}, "
                f"skip_verify={self.skip_verify}, "
                f"hardcoded_only={self.hardcoded_only}, timeout={self.timeout})")
