"""
Posts API — Validation Utilities
=================================

What:  Pure functions validating ids, pagination parameters and post payloads.
Why:   Every handler applies the same rules; keeping them here makes the
       rules testable without HTTP or a database.
How:   Functions never raise. They return booleans, clamped values or an
       error list, and the caller decides how to respond.

Pagination is permissive on purpose: garbage input maps to a safe default
instead of a 400.
"""

import re
from typing import Any, List, Optional, Tuple

TITLE_MAX_LENGTH = 255
BODY_MAX_LENGTH = 10_000

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

# Leading integer of a query value: " 2abc" → 2, "50.5" → 50
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_int(value: Any) -> Optional[int]:
    """
    Parse query/path input as an integer, or None when it is not one.

    Accepts ints, integral floats and numeric strings (surrounding whitespace
    allowed). Booleans are rejected even though bool subclasses int.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def parse_leading_int(value: Any) -> Optional[int]:
    """
    Lenient variant of parse_int for query strings: reads the integer at the
    start of the value and ignores whatever follows it.

    >>> parse_leading_int("2abc"), parse_leading_int("50.5"), parse_leading_int("abc")
    (2, 50, None)
    """
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else None
    return parse_int(value)


def validate_id(id: Any) -> bool:
    """
    True iff `id` parses as an integer greater than zero.

    >>> validate_id("123"), validate_id("0"), validate_id("abc"), validate_id(None)
    (True, False, False, False)
    """
    parsed = parse_int(id)
    return parsed is not None and parsed > 0


def validate_pagination(page: Any, limit: Any) -> Tuple[int, int]:
    """
    Clamp pagination input to safe values.

    page  → at least 1; missing, non-numeric or ≤0 gives 1
    limit → 1..100; missing, non-numeric or 0 gives 10

    Only the leading integer counts, so "2abc" is page 2 and "50.5" is 50.

    >>> validate_pagination("-1", "200")
    (1, 100)
    >>> validate_pagination("abc", "xyz")
    (1, 10)
    >>> validate_pagination("2abc", "50.5")
    (2, 50)
    """
    page_num = max(DEFAULT_PAGE, parse_leading_int(page) or DEFAULT_PAGE)
    limit_num = min(MAX_LIMIT, max(1, parse_leading_int(limit) or DEFAULT_LIMIT))
    return page_num, limit_num


def validate_post_data(title: Any, body: Any) -> Tuple[bool, List[str]]:
    """
    Check title and body independently and collect every problem.

    Returns:
        (is_valid, errors): is_valid is True iff errors is empty.
    """
    errors: List[str] = []

    if not isinstance(title, str) or not title.strip():
        errors.append("Title is required and must be a non-empty string")
    elif len(title) > TITLE_MAX_LENGTH:
        errors.append(f"Title must be {TITLE_MAX_LENGTH} characters or less")

    if not isinstance(body, str) or not body.strip():
        errors.append("Body is required and must be a non-empty string")
    elif len(body) > BODY_MAX_LENGTH:
        errors.append(f"Body must be {BODY_MAX_LENGTH} characters or less")

    return len(errors) == 0, errors


def sanitize_string(value: Any) -> str:
    """Trim surrounding whitespace; anything that isn't a string becomes ''."""
    return value.strip() if isinstance(value, str) else ""
