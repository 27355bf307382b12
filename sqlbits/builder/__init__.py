"""Statement builder and its helpers."""

from sqlbits.builder._base import StatementBuilder
from sqlbits.builder._fields import find_select_field_span, replace_select_fields
from sqlbits.builder._state import BuilderState

__all__ = ("BuilderState", "StatementBuilder", "find_select_field_span", "replace_select_fields")
