"""
Machine-readable output for modulehub commands.

Every command prints JSON Lines on stdout (one object per line) so the
results can be piped into jq or another program. Errors and notices go
to stderr as single JSON objects and never mix with results.
"""

import json
import sys
from typing import Any, Dict, Iterable, Optional


def _to_data(item: Any) -> Dict[str, Any]:
    if hasattr(item, 'to_dict'):
        return item.to_dict()
    if isinstance(item, dict):
        return item
    return {'value': str(item)}


def _write(obj: Dict[str, Any], stream) -> None:
    stream.write(json.dumps(obj, ensure_ascii=False) + "\n")
    stream.flush()


def emit(items: Iterable[Any], err: bool = False) -> None:
    """Print items (dicts or objects with to_dict()) as JSONL."""
    stream = sys.stderr if err else sys.stdout
    for item in items:
        _write(_to_data(item), stream)


def emit_error(message: str, kind: str = "error", context: Optional[Dict[str, Any]] = None) -> None:
    """
    Print an error object on stderr.

    Args:
        message: Human-readable error message
        kind: Error class name or short code such as "interrupted"
        context: Extra fields describing the failure
    """
    obj: Dict[str, Any] = {'error': message, 'type': kind}
    if context:
        obj['context'] = context
    _write(obj, sys.stderr)


def emit_notice(message: str, **fields: Any) -> None:
    """Print an informational object on stderr."""
    _write({'notice': message, **fields}, sys.stderr)
