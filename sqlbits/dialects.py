"""Per-dialect metadata used to render identifier quoting, pagination and parameters.

Callers name the dialect they target when they create a builder; there is no
process-wide driver registry. The three known profiles are resolved through
:func:`get_dialect_info`. Any other database can be described by building a
:class:`DialectInfo` directly and passing it in place of a name.
"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Final, Optional, Union

from sqlbits.exceptions import ImproperConfigurationError
from sqlbits.parameters import ParameterStyle

__all__ = (
    "DIALECT_ALIASES",
    "Dialect",
    "DialectInfo",
    "DialectLike",
    "LimitStyle",
    "get_dialect_info",
)


class Dialect(str, Enum):
    """Known dialect profiles."""

    MYSQL = "mysql"
    POSTGRESQL = "postgresql"
    SQLITE = "sqlite"

    def __str__(self) -> str:
        return self.value


class LimitStyle(str, Enum):
    """How a dialect spells pagination."""

    LIMIT_OFFSET = "limit_offset"
    """``LIMIT n OFFSET m``"""
    FETCH_FIRST = "fetch_first"
    """``OFFSET m ROWS FETCH FIRST n ROWS ONLY``"""


@dataclass(frozen=True)
class DialectInfo:
    """Immutable description of one SQL dialect."""

    name: str
    identifier_quote: str = '"'
    """Character wrapped around table/field names in case of spaces and keyword clashes."""
    supports_named_parameters: bool = True
    """When False, statements are converted to ``positional_style`` on render."""
    positional_style: ParameterStyle = ParameterStyle.NUMERIC
    limit_style: LimitStyle = LimitStyle.LIMIT_OFFSET
    true_literal: str = "1"
    """Literal used to seed filter fragments (``<true> AND ...``)."""
    sqlglot_dialect: Optional[str] = None

    @property
    def parameter_style(self) -> ParameterStyle:
        """Parameter style of statements handed to the driver."""
        if self.supports_named_parameters:
            return ParameterStyle.NAMED_COLON
        return self.positional_style

    def quote(self, identifier: str) -> str:
        """Quote an identifier, doubling any embedded quote characters.

        Returns:
            The quoted identifier.
        """
        delim = self.identifier_quote
        return delim + identifier.replace(delim, delim + delim) + delim


DialectLike = Union[Dialect, DialectInfo, str]

DIALECT_ALIASES: Final[dict[str, Dialect]] = {
    "mysql": Dialect.MYSQL,
    "mariadb": Dialect.MYSQL,
    "postgresql": Dialect.POSTGRESQL,
    "postgres": Dialect.POSTGRESQL,
    "pg": Dialect.POSTGRESQL,
    "sqlite": Dialect.SQLITE,
    "sqlite3": Dialect.SQLITE,
}


@lru_cache(maxsize=None)
def _profile(dialect: Dialect) -> DialectInfo:
    if dialect is Dialect.MYSQL:
        return DialectInfo(
            name="MySQL",
            identifier_quote="`",
            supports_named_parameters=False,
            positional_style=ParameterStyle.QMARK,
            sqlglot_dialect="mysql",
        )
    if dialect is Dialect.POSTGRESQL:
        return DialectInfo(
            name="PostgreSQL",
            identifier_quote='"',
            supports_named_parameters=False,
            positional_style=ParameterStyle.NUMERIC,
            true_literal="true",
            sqlglot_dialect="postgres",
        )
    return DialectInfo(name="SQLite3", identifier_quote='"', supports_named_parameters=True, sqlglot_dialect="sqlite")


def get_dialect_info(dialect: "Optional[DialectLike]") -> DialectInfo:
    """Resolve a dialect selection to its :class:`DialectInfo`.

    Args:
        dialect: A :class:`Dialect`, a dialect name or alias (case-insensitive),
            or a ready-made :class:`DialectInfo` which is returned unchanged.

    Raises:
        ImproperConfigurationError: If no dialect was given or the name is unknown.

    Returns:
        The resolved dialect profile.
    """
    if dialect is None:
        msg = "No dialect defined! A statement builder must be bound to a dialect."
        raise ImproperConfigurationError(msg)
    if isinstance(dialect, DialectInfo):
        return dialect
    if isinstance(dialect, Dialect):
        return _profile(dialect)
    normalized = DIALECT_ALIASES.get(str(dialect).lower().strip())
    if normalized is None:
        known = ", ".join(sorted(DIALECT_ALIASES))
        msg = f"Unknown dialect {dialect!r}. Known dialects: {known}"
        raise ImproperConfigurationError(msg)
    return _profile(normalized)
