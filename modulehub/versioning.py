"""
Version ordering for release tags.

Release tags in module feeds are loosely formatted ("v2.0.0", "1.2",
"1.0-beta"), so parsing here is lenient and never raises:

- One leading 'v' or 'V' is stripped
- The rest is split on '.'
- Each component keeps only its digits; a component without digits is 0
- Missing trailing components compare as 0, so "1.2" == "1.2.0"

Note that the lenient parse makes garbage compare equal to zero
("abc" == "0.0.0"). Callers that need to reject malformed tags must
validate them separately.
"""

import re
from functools import cmp_to_key
from typing import Tuple

_NON_DIGITS = re.compile(r'[^0-9]')

LESS = -1
EQUAL = 0
GREATER = 1


def _strip_prefix(version: str) -> str:
    if version.startswith(('v', 'V')):
        return version[1:]
    return version


def parse_component(part: str) -> int:
    """Parse one dotted component, discarding non-digit characters."""
    digits = _NON_DIGITS.sub('', part)
    if not digits:
        return 0
    return int(digits)


def parse_version(version: str) -> Tuple[int, ...]:
    """
    Parse a version string into its numeric components.

    Args:
        version: Version string such as "v1.8.3"

    Returns:
        Tuple of integers, one per dotted component
    """
    return tuple(parse_component(part) for part in _strip_prefix(version).split('.'))


def compare_versions(a: str, b: str) -> int:
    """
    Compare two version strings.

    Returns:
        -1 if a < b, 0 if equal, 1 if a > b
    """
    parts_a = parse_version(a)
    parts_b = parse_version(b)
    length = max(len(parts_a), len(parts_b))

    for i in range(length):
        num_a = parts_a[i] if i < len(parts_a) else 0
        num_b = parts_b[i] if i < len(parts_b) else 0
        if num_a != num_b:
            return GREATER if num_a > num_b else LESS

    return EQUAL


# Sort key for sorted()/max(); keeps trailing-zero equivalence
version_key = cmp_to_key(compare_versions)
