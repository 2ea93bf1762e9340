# SPDX-License-Identifier: BSD-3-Clause
"""
Reference target catalogs for the Nim compiler.

This module defines the static per-axis name lists including:
- Documented operating systems (--os)
- Documented processor architectures (--cpu)
- The common subset verified by default
"""

AXIS_OS = 'os'
AXIS_CPU = 'cpu'

# Known targets per axis, from the Nim documentation
AXIS_CONFIG = {
    AXIS_OS: {
        'flag': '--os',
        'known': [
            'dos', 'windows', 'os2', 'linux', 'morphos', 'skyos', 'solaris',
            'irix', 'netbsd', 'freebsd', 'openbsd', 'dragonfly', 'crossos',
            'aix', 'palmos', 'qnx', 'amiga', 'atari', 'netware', 'macos',
            'macosx', 'ios', 'haiku', 'android', 'vxworks', 'genode', 'js',
            'nimvm', 'standalone', 'nintendoswitch', 'freertos', 'zephyr',
            'nuttx', 'any',
        ],
        'common': {'linux', 'windows', 'macosx', 'freebsd'},
    },
    AXIS_CPU: {
        'flag': '--cpu',
        'known': [
            'i386', 'm68k', 'alpha', 'powerpc', 'powerpc64', 'powerpc64el',
            'sparc', 'vm', 'hppa', 'ia64', 'amd64', 'mips', 'mipsel', 'arm',
            'arm64', 'js', 'nimvm', 'avr', 'msp430', 'sparc64', 'mips64',
            'mips64el', 'riscv32', 'riscv64', 'esp', 'wasm32', 'e2k',
            'loongarch64',
        ],
        'common': {'amd64', 'i386', 'arm', 'arm64'},
    },
}


def get_axis_config(axis: str) -> dict:
    """Get axis configuration by name."""
    if axis not in AXIS_CONFIG:
        raise ValueError(f"Unsupported axis: {axis}. "
                        f"Supported: {get_supported_axes()}")
    return AXIS_CONFIG[axis]


def get_supported_axes() -> list:
    """Get list of supported axes."""
    return list(AXIS_CONFIG.keys())


def get_known_targets(axis: str) -> list:
    """Get the documented target names for an axis, in documentation order."""
    return list(get_axis_config(axis)['known'])


def get_common_targets(axis: str) -> set:
    """Get the mainstream subset checked by the default verification pass."""
    return set(get_axis_config(axis)['common'])
