"""
Module name resolution from release-source URLs.

A source such as https://api.github.com/repos/owner/Echelon-Chat-/releases
names its module after the repository segment, formatted for display:
"Echelon-Chat-" becomes "Echelon (Chat)".
"""

import logging
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

UNKNOWN_MODULE = "Unknown Module"

# Index of the repository segment in "/repos/<owner>/<repo>/releases"
REPO_SEGMENT_INDEX = 3


def format_repository_name(repo_name: str) -> str:
    """
    Format a raw repository identifier as a module name.

    One trailing '-' is dropped, then the name is split at its first '-':
    "foo-bar-baz" becomes "foo (bar-baz)". Names without a dash (or with
    only a leading one) are returned unchanged.
    """
    if repo_name.endswith('-'):
        repo_name = repo_name[:-1]

    dash_index = repo_name.find('-')
    if dash_index > 0:
        main_part = repo_name[:dash_index]
        secondary = repo_name[dash_index + 1:].strip()
        return f"{main_part} ({secondary})"
    return repo_name


def _path_segments(path: str):
    segments = path.split('/')
    # Trailing empty segments carry no information ("/a/b/" == "/a/b")
    while segments and segments[-1] == '':
        segments.pop()
    return segments


def resolve_name(source_url: str) -> str:
    """
    Derive a module name from a source URL.

    Never raises; anything unparseable resolves to UNKNOWN_MODULE.

    Args:
        source_url: Release feed URL

    Returns:
        Formatted module name
    """
    try:
        parsed = urlparse(source_url.strip())
    except (AttributeError, ValueError) as e:
        logger.debug(f"Cannot parse source URL {source_url!r}: {e}")
        return UNKNOWN_MODULE

    if not parsed.scheme or not parsed.netloc:
        logger.debug(f"Source URL has no scheme or host: {source_url!r}")
        return UNKNOWN_MODULE

    segments = _path_segments(parsed.path)
    if len(segments) <= REPO_SEGMENT_INDEX:
        return UNKNOWN_MODULE

    name = format_repository_name(segments[REPO_SEGMENT_INDEX])
    return name or UNKNOWN_MODULE
