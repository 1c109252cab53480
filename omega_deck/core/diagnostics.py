"""Bounded copies of provider payloads kept for troubleshooting.

Nothing downstream parses these values; they are stored with the generation
result and echoed back to callers as-is.
"""

from typing import Any

TRUNCATED_MARKER = "...[truncated]"


def cap_diagnostic_payload(value: Any, max_depth: int = 6, max_items: int = 50, max_string: int = 2000) -> Any:
    """Return a JSON-friendly copy of ``value`` limited in depth, width and string length."""
    return _cap(value, max_depth, max_items, max_string)


def _cap(value: Any, depth: int, max_items: int, max_string: int) -> Any:
    if isinstance(value, str):
        if len(value) > max_string:
            return value[:max_string] + TRUNCATED_MARKER
        return value
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if depth <= 0:
        return TRUNCATED_MARKER
    if isinstance(value, dict):
        capped = {}
        for index, (key, item) in enumerate(value.items()):
            if index >= max_items:
                capped["_truncated_keys"] = len(value) - max_items
                break
            capped[str(key)] = _cap(item, depth - 1, max_items, max_string)
        return capped
    if isinstance(value, (list, tuple)):
        capped = [_cap(item, depth - 1, max_items, max_string) for item in value[:max_items]]
        if len(value) > max_items:
            capped.append(TRUNCATED_MARKER)
        return capped
    return _cap(str(value), depth, max_items, max_string)
