from typing import Any, Dict, List, Optional


def first_row(result) -> Optional[Dict[str, Any]]:
    """First row of a PostgREST response, or None. Works for empty and missing data."""
    rows = getattr(result, "data", None) if result is not None else None
    if not rows:
        return None
    if isinstance(rows, dict):
        return rows
    return rows[0]


def all_rows(result) -> List[Dict[str, Any]]:
    rows = getattr(result, "data", None) if result is not None else None
    return list(rows or [])
