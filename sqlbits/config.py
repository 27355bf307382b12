"""Builder configuration."""

from typing import TYPE_CHECKING, Optional

from sqlbits.builder import StatementBuilder
from sqlbits.dialects import DialectInfo, DialectLike, get_dialect_info

if TYPE_CHECKING:
    from sqlbits.protocols import DataSource, Sanitizer, TransactionController

__all__ = ("BuilderConfig",)


class BuilderConfig:
    """Declarative configuration shared by every builder a model creates.

    The dialect is resolved when the configuration is created, so a
    misconfigured dialect fails at startup rather than on first use.
    """

    __slots__ = ("data_source", "dialect", "sanitizer", "transactions")

    def __init__(
        self,
        dialect: "Optional[DialectLike]",
        data_source: "Optional[DataSource]" = None,
        sanitizer: "Optional[Sanitizer]" = None,
        transactions: "Optional[TransactionController]" = None,
    ) -> None:
        """Initialize builder configuration.

        Args:
            dialect: Dialect every builder targets
            data_source: Default source of parameter values
            sanitizer: Default field/order-by sanitizer
            transactions: Transaction controller whose boundary the builders nest within
        """
        self.dialect: DialectInfo = get_dialect_info(dialect)
        self.data_source = data_source
        self.sanitizer = sanitizer
        self.transactions = transactions

    def create_builder(self) -> StatementBuilder:
        """Return a new builder bound to this configuration."""
        return StatementBuilder(
            self.dialect, data_source=self.data_source, sanitizer=self.sanitizer, transactions=self.transactions
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dialect={self.dialect.name!r})"
