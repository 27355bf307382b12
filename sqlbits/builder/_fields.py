"""Locate the field list of a SELECT statement so it can be replaced."""

import re
from typing import Final, Optional

from sqlbits.constants import FIELD_LIST_HINT_END, FIELD_LIST_HINT_START

__all__ = ("find_select_field_span", "replace_select_fields")

_HINTED_SELECT_RE: Final = re.compile(
    rf"\bSELECT\s*{re.escape(FIELD_LIST_HINT_START)}.+?{re.escape(FIELD_LIST_HINT_END)}\s*FROM\b",
    re.IGNORECASE | re.DOTALL,
)
# non-greedy so it stops at the first FROM it finds
_SELECT_RE: Final = re.compile(r"\bSELECT\s.+?\sFROM\b", re.IGNORECASE | re.DOTALL)


def find_select_field_span(sql: str) -> "Optional[tuple[int, int]]":
    """Find the span of text running from the first ``SELECT`` to its ``FROM``.

    When both field list hints are present the hinted span is used, which is
    what makes a field list holding a nested ``SELECT ... FROM`` replaceable.
    Otherwise the shortest ``SELECT ... FROM`` span is taken.

    Returns:
        ``(start, end)`` of the whole ``SELECT ... FROM`` text, or None.
    """
    pattern = _SELECT_RE
    if FIELD_LIST_HINT_START in sql and FIELD_LIST_HINT_END in sql:
        pattern = _HINTED_SELECT_RE
    match = pattern.search(sql)
    if match is None:
        return None
    return match.span()


def replace_select_fields(sql: str, fields: "list[str]") -> "Optional[str]":
    """Swap the SELECT field list for ``fields``.

    Returns:
        The rewritten statement, or None when no field list was found.
    """
    span = find_select_field_span(sql)
    if span is None:
        return None
    start, end = span
    return f"{sql[:start]}SELECT {', '.join(fields)} FROM{sql[end:]}"
