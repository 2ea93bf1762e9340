# SPDX-License-Identifier: BSD-3-Clause
"""
Catalog merge and target matrix construction.
"""

from nimtargets.scanner.targets import AXIS_CPU, AXIS_OS


SOURCE_DETECTED = 'detected'
SOURCE_HARDCODED = 'hardcoded'
SOURCE_MIXED = 'mixed'

RECORD_FIELDS = ['os', 'cpu', 'verified', 'source', 'command']


class TargetRecord:
    """One (OS, CPU) pair in the target matrix."""

    def __init__(self, os_name: str, cpu: str, source: str, command: str,
                 verified: bool = False):
        self.os = os_name
        self.cpu = cpu
        self.source = source
        self.command = command
        self.verified = verified

    @property
    def key(self) -> tuple:
        return (self.os, self.cpu)

    def to_dict(self) -> dict:
        return {
            'os': self.os,
            'cpu': self.cpu,
            'verified': self.verified,
            'source': self.source,
            'command': self.command,
        }

    def __repr__(self):
        return (f"TargetRecord({self.os!r}, {self.cpu!r}, source={self.source!r}, "
                f"verified={self.verified})")


class AxisCatalog:
    """Known names for one axis, each tagged with where it came from."""

    def __init__(self, axis: str):
        self.axis = axis
        self._entries = {}

    def add_detected(self, names):
        for name in names:
            self._entries[name] = SOURCE_DETECTED

    def add_hardcoded(self, names):
        """Add reference names; detected entries keep their tag."""
        for name in names:
            if name not in self._entries:
                self._entries[name] = SOURCE_HARDCODED

    def source(self, name: str) -> str:
        return self._entries[name]

    def is_detected(self, name: str) -> bool:
        return self._entries.get(name) == SOURCE_DETECTED

    def names(self) -> list:
        return sorted(self._entries)

    def __contains__(self, name):
        return name in self._entries

    def __len__(self):
        return len(self._entries)


def build_catalog(axis: str, detected, reference) -> AxisCatalog:
    catalog = AxisCatalog(axis)
    catalog.add_detected(detected)
    catalog.add_hardcoded(reference)
    return catalog


def pair_source(os_detected: bool, cpu_detected: bool) -> str:
    """Provenance of a pair from the provenance of its two halves."""
    if os_detected and cpu_detected:
        return SOURCE_DETECTED
    if os_detected or cpu_detected:
        return SOURCE_MIXED
    return SOURCE_HARDCODED


def build_matrix(os_catalog: AxisCatalog, cpu_catalog: AxisCatalog,
                 command_hint=None) -> list:
    """Build the sorted cross product of two catalogs.

    Args:
        os_catalog: OS axis catalog
        cpu_catalog: CPU axis catalog
        command_hint: Callable (os, cpu) -> str for the command field

    Returns:
        List of TargetRecord ordered by (os, cpu)
    """
    if command_hint is None:
        command_hint = default_command_hint

    records = []
    for os_name in os_catalog.names():
        for cpu in cpu_catalog.names():
            records.append(TargetRecord(
                os_name,
                cpu,
                source=pair_source(os_catalog.is_detected(os_name),
                                   cpu_catalog.is_detected(cpu)),
                command=command_hint(os_name, cpu),
            ))
    return records


def default_command_hint(os_name: str, cpu: str) -> str:
    return f"nim --os:{os_name} --cpu:{cpu}"


def merge_targets(detected_os, detected_cpu, reference_os, reference_cpu,
                  command_hint=None) -> list:
    """Merge detected and reference names into the full target matrix."""
    os_catalog = build_catalog(AXIS_OS, detected_os, reference_os)
    cpu_catalog = build_catalog(AXIS_CPU, detected_cpu, reference_cpu)
    return build_matrix(os_catalog, cpu_catalog, command_hint)


class ScanResult:
    """Final records of a scan plus the metadata reported with them."""

    def __init__(self, targets: list, nim_available: bool, verification_run: bool,
                 generated_at: str = None):
        self.targets = targets
        self.nim_available = nim_available
        self.verification_run = verification_run
        self.generated_at = generated_at

    @property
    def verified_count(self) -> int:
        return sum(1 for target in self.targets if target.verified)

    def count_source(self, source: str) -> int:
        return sum(1 for target in self.targets if target.source == source)
