"""Literal protocol constants shared by the statement builder and its callers."""

from typing import Final

__all__ = (
    "DEFAULT_PARAM_OPERATOR",
    "DEFAULT_PARAM_PREFIX",
    "FIELD_LIST_HINT_END",
    "FIELD_LIST_HINT_START",
    "OPERATOR_NOT_EQUAL",
    "ORDER_BY_ASCENDING",
    "ORDER_BY_DESCENDING",
    "SQLSTATE_NO_DATA",
    "SQLSTATE_SUCCESS",
    "SQLSTATE_TABLE_DOES_NOT_EXIST",
)

SQLSTATE_SUCCESS: Final[str] = "00000"
"""5 digit code meaning "successful completion/no error"."""
SQLSTATE_NO_DATA: Final[str] = "02000"
"""5 digit code meaning "no data"; e.g. an UPDATE/DELETE whose WHERE clause matched no rows."""
SQLSTATE_TABLE_DOES_NOT_EXIST: Final[str] = "42S02"
"""5 digit ANSI code meaning a table referenced in the SQL does not exist."""

ORDER_BY_ASCENDING: Final[str] = "ASC"
ORDER_BY_DESCENDING: Final[str] = "DESC"

# Comment hints bracketing a field list which itself holds a nested SELECT ... FROM.
FIELD_LIST_HINT_START: Final[str] = "/* FIELDLIST */"
FIELD_LIST_HINT_END: Final[str] = "/* /FIELDLIST */"

# Standard SQL spelling of NOT EQUAL.
OPERATOR_NOT_EQUAL: Final[str] = "<>"

DEFAULT_PARAM_PREFIX: Final[str] = " "
DEFAULT_PARAM_OPERATOR: Final[str] = "="
