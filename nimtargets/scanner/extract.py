# SPDX-License-Identifier: BSD-3-Clause
"""
Heuristic extraction of target names from free-form toolchain output.
"""

from nimtargets.scanner.rules import DEFAULT_RULE, MIN_TOKENS, ExtractionRule
from nimtargets.scanner.targets import get_axis_config


def tokenize(text: str, separators: list) -> list:
    """Split a cleaned string into candidate tokens.

    Separators are tried in order and the first one that splits the text
    into more than MIN_TOKENS parts wins. Falls back to whitespace splitting.

    Returns:
        List of tokens, empty if the text does not look like a list
    """
    for sep in separators:
        if sep not in text:
            continue
        parts = text.split(sep)
        if len(parts) > MIN_TOKENS:
            tokens = []
            for part in parts:
                part = part.strip()
                if len(part) > 1:
                    tokens.append(part)
            if tokens:
                return tokens
            break

    words = text.split()
    if len(words) > MIN_TOKENS:
        return words
    return []


def extract_targets(raw_text: str, axis: str, rule: ExtractionRule = None) -> list:
    """Mine validated target names for one axis out of raw output.

    Args:
        raw_text: Combined stdout/stderr of a toolchain invocation
        axis: 'os' or 'cpu'
        rule: Extraction tables (defaults to the built-in rule)

    Returns:
        Deduplicated names in first-seen order
    """
    get_axis_config(axis)  # rejects unknown axes
    rule = rule or DEFAULT_RULE

    results = []
    seen = set()

    for line in raw_text.splitlines():
        line = line.strip()
        if not line:
            continue

        captured = rule.capture(line)
        if captured is None:
            continue

        for token in tokenize(rule.clean(captured), rule.separators):
            key = token.lower()
            if key in seen or not rule.is_valid(key, axis):
                continue
            seen.add(key)
            results.append(key)

    return results
