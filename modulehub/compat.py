"""
Compatibility classification for module releases.

A release declares which runtime it supports by embedding a marker such as
"#AbstractModule-1.0" anywhere in its description. The boolean computed
here is the source of truth; the " (incompatible)" display suffix is
derived from it only when rendering.
"""

from typing import Tuple

MARKER_PREFIX = "#AbstractModule-"
INCOMPATIBLE_SUFFIX = " (incompatible)"


def compatibility_marker(runtime_version: str) -> str:
    """Marker a description must contain to support runtime_version."""
    return f"{MARKER_PREFIX}{runtime_version}"


def is_compatible(description: str, runtime_version: str) -> bool:
    """Check for the literal compatibility marker in a description."""
    if not description:
        return False
    return compatibility_marker(runtime_version) in description


def display_tag(tag: str, compatible: bool) -> str:
    """Render a tag for display, flagging incompatible releases."""
    if compatible:
        return tag
    return f"{tag}{INCOMPATIBLE_SUFFIX}"


def strip_incompatible_suffix(display: str) -> Tuple[str, bool]:
    """
    Split a display tag back into (tag, compatible).

    Only for consumers that hold nothing but display strings; the
    catalog itself never needs this round trip.
    """
    if INCOMPATIBLE_SUFFIX in display:
        return display.replace(INCOMPATIBLE_SUFFIX, '').strip(), False
    return display.strip(), True
