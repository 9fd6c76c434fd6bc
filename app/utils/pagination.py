"""Lenient limit/offset parsing for list endpoints."""
from typing import Optional, Tuple


def _to_int(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


def parse_pagination(
    limit: Optional[str],
    offset: Optional[str],
    default_limit: int,
    max_limit: int = 100,
) -> Tuple[int, int]:
    """
    Absent or non-numeric values fall back to defaults; a non-positive limit
    uses the default, a negative offset becomes 0, limit is capped at max_limit.
    """
    parsed_limit = _to_int(limit)
    parsed_offset = _to_int(offset)

    if parsed_limit is None or parsed_limit <= 0:
        parsed_limit = default_limit
    parsed_limit = min(parsed_limit, max_limit)

    if parsed_offset is None or parsed_offset < 0:
        parsed_offset = 0

    return parsed_limit, parsed_offset
