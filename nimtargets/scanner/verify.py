# SPDX-License-Identifier: BSD-3-Clause
"""
Empirical verification of targets by test compilation.

A target is verified only when nim compiles a trivial program for it
with a zero exit status and no error-looking text in its output.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

from nimtargets.scanner import log
from nimtargets.scanner.targets import AXIS_CPU, AXIS_OS, get_common_targets
from nimtargets.scanner.toolchain import TEST_PROGRAM, ToolchainError


MAX_WORKERS = 8
PROGRESS_EVERY = 50

# Any of these in the output means the compile did not really succeed
ERROR_INDICATORS = ['error:', 'invalid', 'unknown', 'unsupported', 'failed']


def has_error_indicator(output: str) -> bool:
    text = output.lower()
    return any(indicator in text for indicator in ERROR_INDICATORS)


def verify_target(toolchain, os_name: str, cpu: str, timeout: float) -> bool:
    """Try a compile-only build of a minimal program for one target.

    Returns:
        True if the compile exited 0 with no error indicator in its output
    """
    try:
        exit_code, output = toolchain.run(
            toolchain.compile_args(os_name, cpu), timeout, stdin=TEST_PROGRAM)
    except ToolchainError:
        return False

    if exit_code != 0:
        return False
    return not has_error_indicator(output)


def verify_common(records: list, toolchain, timeout: float) -> list:
    """Sequentially verify records whose OS and CPU are both mainstream."""
    common_oses = get_common_targets(AXIS_OS)
    common_cpus = get_common_targets(AXIS_CPU)

    log.info("Verifying common targets...")
    for record in records:
        if record.os in common_oses and record.cpu in common_cpus:
            record.verified = verify_target(toolchain, record.os, record.cpu, timeout)
    return records


def verify_all(records: list, toolchain, timeout: float,
               max_workers: int = MAX_WORKERS) -> list:
    """Verify every record on a bounded pool of worker threads.

    Each worker writes only its own record, so the order of the list
    is unchanged whatever order the probes finish in.
    """
    total = len(records)
    log.info(f"Verifying all {total} targets (this may take a while)...")

    lock = threading.Lock()

    def work(idx: int):
        record = records[idx]
        verified = verify_target(toolchain, record.os, record.cpu, timeout)

        with lock:
            record.verified = verified

        if idx % PROGRESS_EVERY == 0:
            log.info(f"Verified {idx + 1}/{total} targets...")

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = [pool.submit(work, idx) for idx in range(total)]
        for future in futures:
            future.result()

    log.info("Verification complete!")
    return records


def runs_full_verification(config, nim_available: bool) -> bool:
    """Whether verify_targets() will check every record for this scan."""
    return config.verification_run and nim_available and not config.hardcoded_only


def verify_targets(records: list, config, toolchain, nim_available: bool) -> list:
    """Populate the verified field according to the scan configuration.

    Args:
        records: Target matrix from merge_targets()
        config: ScanConfig
        toolchain: Toolchain used for compile checks
        nim_available: Result of the availability probe

    Returns:
        The same list, with verified set on the checked records
    """
    if config.skip_verify:
        log.info("Skipping verification as requested.")
        return records
    if config.hardcoded_only:
        log.info("Skipping verification - hardcoded-only mode.")
        return records
    if not nim_available:
        log.info("Skipping verification - nim command not available.")
        return records

    if not config.verify_all:
        return verify_common(records, toolchain, config.timeout)
    return verify_all(records, toolchain, config.timeout)
