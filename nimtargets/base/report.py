# SPDX-License-Identifier: BSD-3-Clause
"""
Output formatters for scan results.

Supports JSON (with summary metadata), CSV and a plain-text table.
"""

import csv
import io
import json
from datetime import datetime, timezone

from nimtargets.scanner.matrix import RECORD_FIELDS, SOURCE_DETECTED, SOURCE_HARDCODED


TABLE_HEADER = ['OS', 'CPU', 'Verified', 'Source', 'Command']
TABLE_PADDING = 2


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime('%Y-%m-%dT%H:%M:%SZ')


def _bool_text(value: bool) -> str:
    return 'true' if value else 'false'


def format_json(result) -> str:
    payload = {
        'targets': [target.to_dict() for target in result.targets],
        'total_count': len(result.targets),
        'verified_count': result.verified_count,
        'detected_count': result.count_source(SOURCE_DETECTED),
        'hardcoded_count': result.count_source(SOURCE_HARDCODED),
        'generated_at': result.generated_at or utc_timestamp(),
        'verification_run': result.verification_run,
        'nim_available': result.nim_available,
    }
    return json.dumps(payload, indent=2) + '\n'


def format_csv(result) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')
    writer.writerow(RECORD_FIELDS)
    for target in result.targets:
        writer.writerow([
            target.os,
            target.cpu,
            _bool_text(target.verified),
            target.source,
            target.command,
        ])
    return buffer.getvalue()


def format_table(result) -> str:
    """Render records as padded columns with a separator row."""
    rows = [TABLE_HEADER]
    rows.append(['─' * len(title) for title in TABLE_HEADER])
    for target in result.targets:
        rows.append([
            target.os,
            target.cpu,
            _bool_text(target.verified),
            target.source,
            target.command,
        ])

    widths = [max(len(row[col]) for row in rows) for col in range(len(TABLE_HEADER))]

    lines = []
    for row in rows:
        cells = [cell.ljust(widths[col] + TABLE_PADDING) for col, cell in enumerate(row[:-1])]
        cells.append(row[-1])
        lines.append(''.join(cells))
    return '\n'.join(lines) + '\n'


FORMATTERS = {
    'json': format_json,
    'csv': format_csv,
    'table': format_table,
}


def get_supported_formats() -> list:
    return list(FORMATTERS.keys())


def render(result, output_format: str) -> str:
    """Serialize a ScanResult in the requested format."""
    if output_format not in FORMATTERS:
        raise ValueError(f"Unknown format: {output_format}. "
                         f"Supported: {get_supported_formats()}")
    return FORMATTERS[output_format](result)
