"""Allow-list :class:`~sqlbits.protocols.Sanitizer`."""

from collections.abc import Iterable, Mapping, Sequence
from typing import Optional

__all__ = ("FieldSanitizer",)


class FieldSanitizer:
    """Accept only field names a model defines.

    Args:
        fields: Every field the model defines, in display order.
        sortable: Fields allowed in an ORDER BY. Defaults to all ``fields``.
        default_sort: Ordering used when a request supplies none that survives sanitizing.
    """

    __slots__ = ("_default_sort", "_fields", "_sortable")

    def __init__(
        self,
        fields: Iterable[str],
        sortable: Optional[Iterable[str]] = None,
        default_sort: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._fields = list(dict.fromkeys(fields))
        self._sortable = frozenset(self._fields if sortable is None else sortable)
        self._default_sort = dict(default_sort or {})

    def defined_fields(self) -> Sequence[str]:
        return list(self._fields)

    def is_field_sortable(self, name: str) -> bool:
        return name in self._sortable

    def default_sort(self) -> Mapping[str, str]:
        return dict(self._default_sort)

    def sanitize_order_by(self, order_by: Mapping[str, str]) -> Mapping[str, str]:
        return {field: direction for field, direction in order_by.items() if self.is_field_sortable(field)}

    def sanitize_field_list(self, fields: Sequence[str]) -> Sequence[str]:
        defined = set(self._fields)
        return [field for field in fields if field in defined]
