# SPDX-License-Identifier: BSD-3-Clause
"""
Extraction rules for mining target names out of toolchain output.

This module holds the rule tables used by the extraction pipeline:
- Line patterns that locate a target list and the group to capture
- Cleanup transforms applied to the captured text
- Separators tried when tokenizing
- Per-axis validation patterns
"""

import re

from nimtargets.scanner.targets import AXIS_CPU, AXIS_OS


# Tried in order; the first match on a line wins
LINE_PATTERNS = [
    {
        'name': 'listing-phrase',
        'pattern': re.compile(
            r'(available|valid|supported)\s+.*?(?:options|targets|platforms).*?[:]\s*(.+)',
            re.IGNORECASE),
        'group': -1,
    },
    {
        'name': 'one-of',
        'pattern': re.compile(r'one\s+of[:]\s*(.+)', re.IGNORECASE),
        'group': -1,
    },
    {
        'name': 'options-are',
        'pattern': re.compile(r'(?:options|targets)\s+are[:]\s*(.+)', re.IGNORECASE),
        'group': -1,
    },
    {
        'name': 'flag-echo',
        'pattern': re.compile(r'--(?:os|cpu)[:]\s*(.+)', re.IGNORECASE),
        'group': -1,
    },
    {
        # Bare run of four or more separated words
        'name': 'separated-run',
        'pattern': re.compile(
            r'(?:^|\s)([a-z0-9_]+(?:[,\s|;]+[a-z0-9_]+){3,})', re.IGNORECASE),
        'group': -1,
    },
]

# Applied in sequence; each sees the output of the previous one
CLEANUP_TRANSFORMS = [
    {
        'name': 'normalize',
        'apply': lambda text: text.strip().lower(),
    },
    {
        'name': 'noise-words',
        'pattern': re.compile(
            r'\b(?:or|and|the|a|an|options|are|targets|platforms|available'
            r'|supported|valid|one|of)\b'),
        'replace': ' ',
    },
    {
        'name': 'punctuation',
        'pattern': re.compile(r'[:\.,;]+'),
        'replace': ' ',
    },
    {
        'name': 'whitespace',
        'pattern': re.compile(r'\s+'),
        'replace': ' ',
    },
]

SEPARATORS = [', ', ' ', ',', '|', ';', '\t']

# A line must split into more than this many tokens to count as a list
MIN_TOKENS = 2

NAME_LENGTH = (2, 20)
NAME_PATTERN = re.compile(r'^[a-z0-9_]+$')

AXIS_VALIDATORS = {
    AXIS_OS: re.compile(
        r'^(linux|windows|macos|freebsd|android|ios|.*bsd|.*nix|.*os)$|^[a-z]+$'),
    AXIS_CPU: re.compile(
        r'^(i386|amd64|x86|arm|mips|sparc|powerpc|riscv|wasm|alpha).*$|^[a-z0-9]+$'),
}


def apply_transform(transform: dict, text: str) -> str:
    """Apply a single cleanup transform entry to text."""
    if 'apply' in transform:
        return transform['apply'](text)
    return transform['pattern'].sub(transform['replace'], text)


class ExtractionRule:
    """Bundle of the tables driving one extraction pass.

    The defaults are the module-level tables; tests and callers can swap
    any of them without touching the pipeline.
    """

    def __init__(self, line_patterns: list = None, cleanup: list = None,
                 separators: list = None, validators: dict = None):
        self.line_patterns = line_patterns if line_patterns is not None else LINE_PATTERNS
        self.cleanup = cleanup if cleanup is not None else CLEANUP_TRANSFORMS
        self.separators = separators if separators is not None else SEPARATORS
        self.validators = validators if validators is not None else AXIS_VALIDATORS

    def capture(self, line: str):
        """Return the captured substring of the first matching pattern, or None."""
        for entry in self.line_patterns:
            match = entry['pattern'].search(line)
            if match is None or not match.groups():
                continue
            index = entry['group']
            if index < 0:
                index += len(match.groups()) + 1
            return match.group(index)
        return None

    def clean(self, text: str) -> str:
        for transform in self.cleanup:
            text = apply_transform(transform, text)
        return text

    def is_valid(self, name: str, axis: str) -> bool:
        """Check a token against the generic and per-axis name rules."""
        low, high = NAME_LENGTH
        if len(name) < low or len(name) > high:
            return False
        if not NAME_PATTERN.match(name):
            return False
        validator = self.validators.get(axis)
        if validator is None:
            return True
        return validator.match(name) is not None


DEFAULT_RULE = ExtractionRule()
