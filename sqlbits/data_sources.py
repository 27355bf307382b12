"""Dict-backed :class:`~sqlbits.protocols.DataSource`."""

from collections.abc import Mapping, Sequence
from typing import Any, Optional

__all__ = ("MappingDataSource",)

_LIST_TYPES = (list, tuple, set, frozenset)


class MappingDataSource:
    """Serve parameter values out of a mapping such as parsed request data.

    A key is defined when it is present in the mapping, even if its value is
    ``None``. List, tuple and set values are list-valued.
    """

    __slots__ = ("_data",)

    def __init__(self, data: "Optional[Mapping[str, Any]]" = None, **values: Any) -> None:
        merged = dict(data or {})
        merged.update(values)
        self._data = merged

    def is_key_defined(self, key: str) -> bool:
        return key in self._data

    def is_key_list_valued(self, key: str) -> bool:
        return isinstance(self._data.get(key), _LIST_TYPES)

    def value_for(self, key: str) -> Optional[Any]:
        value = self._data.get(key)
        if isinstance(value, _LIST_TYPES):
            return None
        return value

    def values_for(self, key: str) -> "Optional[Sequence[Any]]":
        value = self._data.get(key)
        if value is None:
            return None
        if isinstance(value, _LIST_TYPES):
            return list(value)
        return [value]
