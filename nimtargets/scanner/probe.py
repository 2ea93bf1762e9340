# SPDX-License-Identifier: BSD-3-Clause
"""
Detection of target names by querying the toolchain.

Several invocations are tried in priority order and the first one whose
output yields any target name wins. Earlier invocations are the most
targeted (an invalid --os/--cpu value makes nim list the valid ones), so
a later, noisier source never overrides them.
"""

from nimtargets.scanner import log
from nimtargets.scanner.extract import extract_targets
from nimtargets.scanner.targets import get_axis_config
from nimtargets.scanner.toolchain import QUERY_TIMEOUT


def get_query_commands(axis: str) -> list:
    """Get the invocation variants for an axis, most targeted first."""
    flag = get_axis_config(axis)['flag']
    return [
        # Invalid value makes nim print the valid ones
        [f'{flag}:invalid', 'c'],
        [f'{flag}:help', 'c'],
        [f'{flag}:?', 'c'],
        # General help
        ['--help'],
        ['-h'],
        ['help'],
        # Version and dump info
        ['--version'],
        ['-v'],
        ['dump', '--dump.format:json', 'dummy'],
    ]


def probe_axis(toolchain, axis: str, timeout: float = QUERY_TIMEOUT) -> list:
    """Detect target names for one axis.

    Args:
        toolchain: Toolchain to query
        axis: 'os' or 'cpu'
        timeout: Budget for each individual invocation

    Returns:
        Detected names, empty if no invocation produced any
    """
    for args in get_query_commands(axis):
        output = toolchain.query(args, timeout)
        if not output:
            continue

        found = extract_targets(output, axis)
        if found:
            log.info(f"Found {len(found)} targets for {axis} using command: "
                     f"{toolchain.executable} {' '.join(args)}")
            return found

    return []
