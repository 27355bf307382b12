"""Parameterized SQL statement builder.

A :class:`StatementBuilder` grows a SQL string one fragment at a time while
keeping the values of its named parameters beside it. Column values are never
written into the SQL text; they are bound to ``:key`` placeholders which are
converted to positional ones on render for drivers lacking named parameters.
"""

import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Optional

import sqlglot
from mypy_extensions import mypyc_attr
from sqlglot.errors import ParseError as SQLGlotParseError
from sqlglot.errors import TokenError as SQLGlotTokenError
from typing_extensions import Self

from sqlbits.aggregates import TOTAL_ROW_COUNT
from sqlbits.builder._fields import replace_select_fields
from sqlbits.builder._state import BuilderState, membership_operator, normalize_operator
from sqlbits.constants import DEFAULT_PARAM_PREFIX, OPERATOR_NOT_EQUAL, ORDER_BY_ASCENDING, ORDER_BY_DESCENDING
from sqlbits.dialects import DialectInfo, DialectLike, LimitStyle, get_dialect_info
from sqlbits.exceptions import ImproperConfigurationError, SQLBuilderError, SQLParsingError
from sqlbits.parameters import convert_to_positional
from sqlbits.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from sqlglot import exp

    from sqlbits.protocols import Aggregater, DataSource, PagedResults, Sanitizer, TransactionController

__all__ = ("StatementBuilder",)

logger = get_logger("builder")


@mypyc_attr(allow_interpreted_subclasses=True)
class StatementBuilder:
    """Build a SQL statement and its parameters for one dialect.

    Every mutating method returns the builder so calls chain::

        sql = (
            StatementBuilder("postgresql")
            .set_data_source(MappingDataSource(request_data))
            .start_with("SELECT")
            .add_field_list(["id", "name"])
            .add("FROM users")
            .start_where_clause()
            .must_add_param("status")
            .set_param_prefix(" AND ")
            .add_param_if_defined("name")
            .end_where_clause()
            .apply_order_by_list({"name": "ASC"})
            .add_query_limit(25)
        )
        cursor.execute(sql.sql(), sql.sql_args())

    A builder holds no synchronization; confine one to a single thread or
    hand out :meth:`clone` copies instead.
    """

    __slots__ = (
        "_data_source",
        "_dialect",
        "_parameter_sets",
        "_parameters",
        "_positional_args",
        "_positional_sql",
        "_sanitizer",
        "_sql",
        "_state",
        "_transaction_depth",
        "_transactions",
    )

    def __init__(
        self,
        dialect: "Optional[DialectLike]",
        *,
        data_source: "Optional[DataSource]" = None,
        sanitizer: "Optional[Sanitizer]" = None,
        transactions: "Optional[TransactionController]" = None,
    ) -> None:
        """Bind the builder to its dialect and collaborators.

        Args:
            dialect: Dialect the statement targets; see :func:`~sqlbits.dialects.get_dialect_info`.
            data_source: Where parameter values are pulled from by key.
            sanitizer: Used to prune requested field and order-by lists.
            transactions: Owner of the real transaction the nesting counter wraps.

        Raises:
            ImproperConfigurationError: If no usable dialect was given.
        """
        self._dialect: DialectInfo = get_dialect_info(dialect)
        self._data_source = data_source
        self._sanitizer = sanitizer
        self._transactions = transactions
        # Only the 0 -> 1 and 1 -> 0 transitions touch the real transaction.
        self._transaction_depth = 0
        self._sql = ""
        self._parameters: dict[str, Optional[Any]] = {}
        self._parameter_sets: dict[str, Optional[list[Any]]] = {}
        self._state = BuilderState()
        self._positional_sql: Optional[str] = None
        self._positional_args: list[Any] = []

    def reset(self) -> Self:
        """Clear the statement, its parameters and the modal context; the dialect is kept."""
        self._sql = ""
        self._parameters = {}
        self._parameter_sets = {}
        self._state = BuilderState()
        self._positional_sql = None
        self._positional_args = []
        return self

    @property
    def dialect(self) -> DialectInfo:
        return self._dialect

    @property
    def data_source(self) -> "Optional[DataSource]":
        return self._data_source

    @property
    def sanitizer(self) -> "Optional[Sanitizer]":
        return self._sanitizer

    @property
    def state(self) -> BuilderState:
        """A copy of the current modal context."""
        return self._state.copy()

    @property
    def param_prefix(self) -> str:
        return self._state.prefix

    @property
    def param_operator(self) -> str:
        return self._state.operator

    @property
    def null_mode(self) -> bool:
        return self._state.null_mode

    @property
    def transaction_depth(self) -> int:
        return self._transaction_depth

    # -- transactions ------------------------------------------------------

    def begin_transaction(self) -> Self:
        """Start a transaction unless one was already started, then count the nesting level."""
        if self._transaction_depth < 1 and self._transactions is not None:
            if not self._transactions.in_transaction():
                logger.debug("Beginning transaction")
                self._transactions.begin()
        self._transaction_depth += 1
        return self

    def commit_transaction(self) -> Self:
        """Commit once the outermost :meth:`begin_transaction` is matched."""
        if self._transaction_depth > 0:
            self._transaction_depth -= 1
            if self._transaction_depth == 0 and self._transactions is not None:
                logger.debug("Committing transaction")
                self._transactions.commit()
        return self

    def rollback_transaction(self) -> Self:
        """Roll back once the outermost :meth:`begin_transaction` is matched."""
        if self._transaction_depth > 0:
            self._transaction_depth -= 1
            if self._transaction_depth == 0 and self._transactions is not None:
                logger.debug("Rolling back transaction")
                self._transactions.rollback()
        return self

    @contextmanager
    def transaction(self) -> Iterator[Self]:
        """Wrap a unit of work: commit on success, roll back and re-raise on error."""
        self.begin_transaction()
        try:
            yield self
        except Exception:
            self.rollback_transaction()
            raise
        self.commit_transaction()

    # -- modal context -----------------------------------------------------

    def get_quoted(self, identifier: str) -> str:
        """Quote an identifier the way the bound dialect expects."""
        return self._dialect.quote(identifier)

    def start_with(self, sql: str) -> Self:
        """Replace the statement text with ``sql``; parameters are kept."""
        self._sql = sql
        return self

    def start_filter(self) -> Self:
        """Begin a standalone filter fragment meant for :meth:`apply_filter`.

        The fragment is seeded with the dialect's "always true" literal so
        each bound predicate can be glued on with ``" AND "``.
        """
        self._state.null_mode = True
        self.start_with(self._dialect.true_literal)
        return self.set_param_prefix(" AND ")

    def start_where_clause(self) -> Self:
        """Prefix the next binding with ``" WHERE "`` and render NULLs as ``IS [NOT] NULL``."""
        self._state.null_mode = True
        return self.set_param_prefix(" WHERE ")

    def end_where_clause(self) -> Self:
        self._state.null_mode = False
        return self.set_param_prefix(DEFAULT_PARAM_PREFIX)

    @contextmanager
    def where_clause(self) -> Iterator[Self]:
        """Scope a WHERE clause; the modal context in effect before it is restored on exit."""
        saved_state = self._state.copy()
        self.start_where_clause()
        try:
            yield self
        finally:
            self._state = saved_state

    def set_param_prefix(self, prefix: str) -> Self:
        """Set the "glue" written before each subsequent bound fragment. Spacing matters."""
        self._state.prefix = prefix
        return self

    def set_param_operator(self, operator: str) -> Self:
        """Set the operator used by subsequent bindings; ``"="`` by default, ``" LIKE "`` is another."""
        self._state.operator = normalize_operator(operator)
        return self

    def set_data_source(self, data_source: "Optional[DataSource]") -> Self:
        self._data_source = data_source
        return self

    def set_sanitizer(self, sanitizer: "Optional[Sanitizer]") -> Self:
        self._sanitizer = sanitizer
        return self

    # -- parameters --------------------------------------------------------

    def set_param(self, key: str, value: Optional[Any]) -> Self:
        """Bind a value (``None`` included) to ``key``; the SQL text is untouched."""
        self._parameters[key] = value
        self._parameter_sets.pop(key, None)
        return self

    def set_nullable_param(self, key: str, value: Optional[Any]) -> Self:
        """Bind ``value`` to ``key`` where ``None`` stands for SQL NULL."""
        return self.set_param(key, value)

    def set_param_set(self, key: str, values: "Optional[Sequence[Any]]") -> Self:
        """Bind a list of values to ``key``; the SQL text is untouched."""
        self._parameters[key] = None
        self._parameter_sets[key] = list(values) if values is not None else None
        return self

    def is_param_a_set(self, key: str) -> bool:
        """Tell if the data used for ``key`` is a list of values.

        Keys never bound locally are looked up in the data source, if any.
        """
        if key in self._parameters:
            return key in self._parameter_sets
        if self._data_source is not None:
            return self._data_source.is_key_list_valued(key)
        return False

    def get_param(self, key: str) -> Optional[Any]:
        return self._parameters.get(key)

    def get_param_set(self, key: str) -> "Optional[list[Any]]":
        return self._parameter_sets.get(key)

    def get_unique_param_key(self, key: str) -> str:
        """Return ``key``, or ``key`` suffixed with the first free number starting at 2.

        Some drivers reject a statement naming the same parameter twice,
        e.g. upserts repeating a column.
        """
        suffix = 1
        unique_key = key
        while unique_key in self._parameters:
            suffix += 1
            unique_key = f"{key}{suffix}"
        return unique_key

    def _get_param_value_from_data_source(self, key: str) -> None:
        if self._data_source is None or key in self._parameters:
            return
        if self._data_source.is_key_list_valued(key):
            self.set_param_set(key, self._data_source.values_for(key))
        else:
            self.set_param(key, self._data_source.value_for(key))

    def _has_empty_value(self, key: str, empty_values: "tuple[Any, ...]") -> bool:
        if self.is_param_a_set(key):
            return not self.get_param_set(key)
        value = self.get_param(key)
        return value is None or value in empty_values

    def set_param_value_if_null(self, key: str, value: Any) -> Self:
        """Bind ``value`` to ``key`` when its data value is NULL (or an empty set)."""
        self._get_param_value_from_data_source(key)
        if self._has_empty_value(key, ()):
            self.set_param(key, value)
        return self

    def set_param_value_if_empty(self, key: str, value: Any) -> Self:
        """Bind ``value`` to ``key`` when its data value is NULL, ``""`` or ``"0"`` (or an empty set)."""
        self._get_param_value_from_data_source(key)
        if self._has_empty_value(key, ("", "0")):
            self.set_param(key, value)
        return self

    def _is_data_key_defined(self, key: str) -> bool:
        if self._data_source is not None:
            return self._data_source.is_key_defined(key)
        return False

    # -- appending ---------------------------------------------------------

    def add(self, sql: str) -> Self:
        """Append ``sql`` prefixed with a space.

        *Never* pass values gathered from user input; bind them with the
        ``*_param`` methods instead.
        """
        self._sql += " " + sql
        return self

    def _add_param_as_list_for_column(self, column: str, key: str, values: "list[Any]", operator: str) -> None:
        if not values:
            return
        placeholders = []
        for idx, value in enumerate(values, start=1):
            item_key = f"{key}_{idx}"
            placeholders.append(f":{item_key}")
            self.set_param(item_key, value)
        self._sql += f"{self._state.prefix}{self.get_quoted(column)}{operator}({','.join(placeholders)})"

    def _adding_param(self, column: str, key: str) -> None:
        values = self.get_param_set(key)
        if self.is_param_a_set(key) and values:
            operator = membership_operator(self._state.operator) or self._state.operator
            self._add_param_as_list_for_column(column, key, values, operator)
            return

        quoted = self.get_quoted(column)
        if self.get_param(key) is not None or not self._state.null_mode:
            self._sql += f"{self._state.prefix}{quoted}{self._state.operator}:{key}"
            return

        # "=" with NULL is only meaningful once we know we are in a WHERE clause.
        operator = self._state.operator.strip()
        if operator == "=":
            self._sql += f"{self._state.prefix}{quoted} IS NULL"
        elif operator == OPERATOR_NOT_EQUAL:
            self._sql += f"{self._state.prefix}{quoted} IS NOT NULL"

    def append_param(self, key: str, value: Any) -> Self:
        """Bind ``value`` to ``key`` and write it for the column of the same name."""
        self.set_param(key, value)
        self._adding_param(key, key)
        return self

    def must_add_param(self, key: str) -> Self:
        """Write the parameter into the SQL regardless of the NULL status of its data."""
        return self.must_add_param_for_column(key, key)

    def must_add_param_for_column(self, key: str, column: str) -> Self:
        """Pull ``key`` from the data source and always write it for ``column``."""
        self._get_param_value_from_data_source(key)
        self._adding_param(column, key)
        return self

    def add_param_if_defined(self, key: str) -> Self:
        """Write the parameter only if the data source defines ``key``."""
        return self.add_param_for_column_if_defined(key, key)

    def add_param_for_column_if_defined(self, key: str, column: str) -> Self:
        if self._is_data_key_defined(key):
            self._get_param_value_from_data_source(key)
            self._adding_param(column, key)
        return self

    def add_field_list(self, fields: "Optional[Sequence[str]]") -> Self:
        """Append the field (column) list, or ``*`` when it is empty.

        Fields are written as given; run them through a sanitizer first, see
        :meth:`add_sanitized_field_list`.
        """
        prefix = self._state.prefix
        if fields:
            return self.add(prefix + (", " + prefix).join(fields))
        return self.add(prefix + "*")

    def add_sanitized_field_list(self, fields: "Optional[Sequence[str]]") -> Self:
        """Append the requested fields which the sanitizer accepts.

        Raises:
            ImproperConfigurationError: If no sanitizer is bound.
        """
        if self._sanitizer is None:
            msg = "No sanitizer defined; cannot sanitize the requested field list."
            raise ImproperConfigurationError(msg)
        return self.add_field_list(self._sanitizer.sanitize_field_list(fields) if fields else None)

    def add_query_limit(self, limit: int, offset: int = 0) -> Self:
        """Append the pagination clause of the bound dialect.

        A ``limit`` of 0 or less writes nothing; an ``offset`` of 0 or less
        leaves out the offset.
        """
        if limit <= 0:
            return self
        if self._dialect.limit_style is LimitStyle.FETCH_FIRST:
            if offset > 0:
                self.add("OFFSET").add(str(offset)).add("ROWS")
            return self.add("FETCH FIRST").add(str(limit)).add("ROWS ONLY")
        self.add("LIMIT").add(str(limit))
        if offset > 0:
            self.add("OFFSET").add(str(offset))
        return self

    def apply_query_limit_from_pager(self, pager: "Optional[PagedResults]") -> Self:
        if pager is None:
            return self
        return self.add_query_limit(pager.pager_page_size(), pager.pager_query_offset())

    # -- composition -------------------------------------------------------

    def _merge_parameters(self, other: "StatementBuilder") -> None:
        # colliding keys are overwritten by ``other``
        self._parameters.update(other._parameters)
        for key in other._parameters:
            if key in other._parameter_sets:
                values = other._parameter_sets[key]
                self._parameter_sets[key] = list(values) if values is not None else None
            else:
                self._parameter_sets.pop(key, None)

    def add_sub_query_for_column(self, sub_query: "StatementBuilder", column: str) -> Self:
        """Write ``<column> IN (<sub-query>)`` and take over the sub-query's parameters.

        ``=`` and ``<>`` become ``IN`` and ``NOT IN``; other operators are kept.
        """
        operator = membership_operator(self._state.operator) or self._state.operator
        self._sql += f"{self._state.prefix}{self.get_quoted(column)}{operator}({sub_query._sql})"
        self._merge_parameters(sub_query)
        return self

    def apply_filter(self, filter_builder: "Optional[StatementBuilder]") -> Self:
        """Append an externally built filter (see :meth:`start_filter`) and its parameters."""
        if filter_builder is None:
            return self
        if filter_builder._sql:
            self._sql += self._state.prefix + filter_builder._sql
        self._merge_parameters(filter_builder)
        return self

    def apply_order_by_list(self, order_by: "Optional[Mapping[str, str]]") -> Self:
        """Append ``ORDER BY`` for a ``field -> direction`` mapping.

        Directions other than ``DESC`` (any case) sort ascending.
        """
        if not order_by:
            return self
        entries = []
        for field, direction in order_by.items():
            if (direction or "").strip().upper() == ORDER_BY_DESCENDING:
                entries.append(f"{field} {ORDER_BY_DESCENDING}")
            else:
                entries.append(f"{field} {ORDER_BY_ASCENDING}")
        return self.add("ORDER BY").add(",".join(entries))

    def apply_sort_list(self, sort_list: "Optional[Mapping[str, str]]") -> Self:
        return self.apply_order_by_list(sort_list)

    def apply_order_by_from_sanitizer(self, requested: "Optional[Mapping[str, str]]" = None) -> Self:
        """Order by the requested fields the sanitizer deems sortable, else by its default sort.

        Without a sanitizer nothing is written.
        """
        if self._sanitizer is None:
            return self
        order_by = self._sanitizer.sanitize_order_by(requested) if requested else None
        if not order_by:
            order_by = self._sanitizer.default_sort()
        return self.apply_order_by_list(order_by)

    def replace_select_fields_with(self, fields: "Optional[Sequence[str]]") -> Self:
        """Replace the SELECT field list of the statement.

        Nested queries in the field list need the hints around it::

            SELECT /* FIELDLIST */ field1, (SELECT blah FROM t2) AS field2 /* /FIELDLIST */ FROM t1
        """
        if not fields:
            return self
        replaced = replace_select_fields(self._sql, list(fields))
        if replaced is None:
            logger.debug("No SELECT field list found to replace")
            return self
        self._sql = replaced
        return self

    def clone(self) -> Self:
        """Copy the builder; the copy and the original do not share parameter tables.

        The copy starts outside any transaction: its nesting counter is 0.
        """
        new_builder = type(self)(
            self._dialect, data_source=self._data_source, sanitizer=self._sanitizer, transactions=self._transactions
        )
        new_builder._sql = self._sql
        new_builder._parameters = dict(self._parameters)
        new_builder._parameter_sets = {k: list(v) if v is not None else None for k, v in self._parameter_sets.items()}
        new_builder._state = self._state.copy()
        return new_builder

    def clone_as_aggregate(self, aggregate: "Optional[Aggregater]" = None) -> Self:
        """Copy the builder with its SELECT fields replaced by an aggregate definition.

        Args:
            aggregate: Aggregate to compute; counts rows as ``rowcount`` by default.

        Raises:
            SQLBuilderError: If the aggregate definition is empty.
        """
        definition = (aggregate if aggregate is not None else TOTAL_ROW_COUNT).aggregate_definition()
        fields = [f"{expression} AS {alias}" for alias, expression in definition.items()]
        if not fields:
            msg = "Aggregate definition is empty."
            raise SQLBuilderError(msg)
        return self.clone().replace_select_fields_with(fields)

    def clone_for_query_totals(
        self, pager: "Optional[PagedResults]", aggregate: "Optional[Aggregater]" = None
    ) -> "Optional[Self]":
        """Aggregate copy for a pager that wants an overall total, else None.

        Call it after the SELECT is defined but before ORDER BY and LIMIT are applied.
        """
        if pager is None or not pager.is_total_row_count_desired():
            return None
        return self.clone_as_aggregate(aggregate)

    # -- rendering ---------------------------------------------------------

    def get_sql_statement(self) -> str:
        """Return the statement as built, named placeholders included."""
        return self._sql

    def sql(self) -> str:
        """Return the statement in the form the dialect's driver binds.

        For dialects without named parameters each call converts the current
        statement afresh and refreshes :meth:`sql_args` to match.
        """
        self._positional_sql = None
        self._positional_args = []
        if not self._parameters or self._dialect.supports_named_parameters:
            return self._sql
        self._positional_sql, self._positional_args = convert_to_positional(
            self._sql, self._parameters, self._dialect.positional_style
        )
        log_with_context(
            logger,
            logging.DEBUG,
            "Converted statement to positional parameters",
            dialect=self._dialect.name,
            parameter_style=str(self._dialect.positional_style),
            argument_count=len(self._positional_args),
        )
        return self._positional_sql

    def sql_params(self) -> "dict[str, Optional[Any]]":
        return self._parameters

    def sql_param_sets(self) -> "dict[str, Optional[list[Any]]]":
        return self._parameter_sets

    def sql_args(self) -> "list[Any]":
        """Positional arguments of the last :meth:`sql` call for dialects without named parameters."""
        return list(self._positional_args)

    def named_args(self) -> "dict[str, Any]":
        """Scalar parameters keyed by name; set-valued keys are left out."""
        return {k: v for k, v in self._parameters.items() if k not in self._parameter_sets}

    def to_expression(self) -> "exp.Expression":
        """Parse the built statement with sqlglot for the bound dialect.

        Raises:
            SQLParsingError: If sqlglot cannot parse the statement.
        """
        try:
            return sqlglot.parse_one(self._sql, read=self._dialect.sqlglot_dialect)
        except (SQLGlotParseError, SQLGlotTokenError) as e:
            msg = f"Unable to parse built statement: {e}"
            raise SQLParsingError(msg, sql=self._sql) from e

    def __str__(self) -> str:
        return self._sql

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dialect={self._dialect.name!r}, sql={self._sql!r})"
