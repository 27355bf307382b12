"""Runtime-checkable protocols for the collaborators a statement builder consumes.

The builder never implements these itself: data sources, sanitizers and
transaction control belong to the caller.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Optional, Protocol, runtime_checkable

__all__ = (
    "Aggregater",
    "DataSource",
    "PagedResults",
    "RowCountReceiver",
    "Sanitizer",
    "TransactionController",
)


@runtime_checkable
class DataSource(Protocol):
    """Supplies parameter values by key."""

    def is_key_defined(self, key: str) -> bool:
        """Return True if the source holds a value (possibly ``None``) for ``key``."""
        ...

    def is_key_list_valued(self, key: str) -> bool:
        """Return True if the value for ``key`` is a list of values."""
        ...

    def value_for(self, key: str) -> Optional[Any]:
        """Get the scalar value for ``key``."""
        ...

    def values_for(self, key: str) -> Optional[Sequence[Any]]:
        """Get the list of values for ``key``."""
        ...


@runtime_checkable
class Sanitizer(Protocol):
    """Decides which field and order-by names are safe to write into SQL.

    UI defined values like sort order and requested fields are an attack
    vector (SQL injection) unless they are checked against what the model
    actually defines.
    """

    def defined_fields(self) -> Sequence[str]:
        """Return the fields available, in order."""
        ...

    def is_field_sortable(self, name: str) -> bool:
        """Return True if ``name`` may appear in an ORDER BY."""
        ...

    def default_sort(self) -> Mapping[str, str]:
        """Return the default ``field -> direction`` ordering."""
        ...

    def sanitize_order_by(self, order_by: Mapping[str, str]) -> Mapping[str, str]:
        """Drop any entry whose field is not sortable."""
        ...

    def sanitize_field_list(self, fields: Sequence[str]) -> Sequence[str]:
        """Drop any field which is not defined."""
        ...


@runtime_checkable
class TransactionController(Protocol):
    """Owns the real transaction boundary the builder's nesting counter wraps."""

    def in_transaction(self) -> bool: ...

    def begin(self) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@runtime_checkable
class Aggregater(Protocol):
    """Provides an aggregate definition (``alias -> SQL expression``)."""

    def aggregate_definition(self) -> Mapping[str, str]: ...


@runtime_checkable
class PagedResults(Protocol):
    """Pager information used to limit a query."""

    def is_total_row_count_desired(self) -> bool:
        """Pagers and long processes may want a total regardless of pager use."""
        ...

    def pager_page_size(self) -> int:
        """Maximum row count for a page; 0 means no limit."""
        ...

    def pager_query_offset(self) -> int:
        """Query offset derived from the page size and the page desired."""
        ...


@runtime_checkable
class RowCountReceiver(Protocol):
    """Receives the overall row count of a query, paged or not."""

    def set_total_row_count(self, total_row_count: int) -> None: ...
