"""Aggregate definitions used to reshape a built SELECT into a totals query."""

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Final, Optional

__all__ = ("TOTAL_ROW_COUNT", "Aggregate", "RowCountAggregate")


class Aggregate(Mapping[str, str]):
    """Immutable mapping of result alias to the SQL expression computing it.

    >>> Aggregate({"total": "sum(amount)"})["total"]
    'sum(amount)'
    """

    __slots__ = ("_definition",)

    def __init__(self, definition: Optional[Mapping[str, str]] = None, **aliases: str) -> None:
        merged = dict(definition or {})
        merged.update(aliases)
        self._definition = MappingProxyType(merged)

    def __getitem__(self, alias: str) -> str:
        return self._definition[alias]

    def __iter__(self) -> Iterator[str]:
        return iter(self._definition)

    def __len__(self) -> int:
        return len(self._definition)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self._definition)!r})"

    def aggregate_definition(self) -> Mapping[str, str]:
        return self


class RowCountAggregate:
    """Counts the total rows a statement would return.

    The ``rowcount`` slot receives the result once the caller has executed
    the aggregate statement.
    """

    __slots__ = ("_definition", "rowcount")

    def __init__(self, alias: str = "rowcount") -> None:
        self._definition = Aggregate({alias: "count(*)"})
        self.rowcount = 0

    def aggregate_definition(self) -> Mapping[str, str]:
        return self._definition

    def set_total_row_count(self, total_row_count: int) -> None:
        self.rowcount = total_row_count


TOTAL_ROW_COUNT: Final = Aggregate({"rowcount": "count(*)"})
