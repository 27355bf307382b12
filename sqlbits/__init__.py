"""sqlbits: dialect-aware, parameterized SQL statement building."""

from sqlbits import builder, constants, dialects, exceptions, parameters, protocols, utils
from sqlbits.__metadata__ import __version__
from sqlbits.aggregates import TOTAL_ROW_COUNT, Aggregate, RowCountAggregate
from sqlbits.builder import BuilderState, StatementBuilder
from sqlbits.config import BuilderConfig
from sqlbits.constants import (
    FIELD_LIST_HINT_END,
    FIELD_LIST_HINT_START,
    OPERATOR_NOT_EQUAL,
    ORDER_BY_ASCENDING,
    ORDER_BY_DESCENDING,
    SQLSTATE_NO_DATA,
    SQLSTATE_SUCCESS,
)
from sqlbits.data_sources import MappingDataSource
from sqlbits.dialects import Dialect, DialectInfo, LimitStyle, get_dialect_info
from sqlbits.exceptions import ImproperConfigurationError, SQLBitsError, SQLBuilderError, SQLParsingError
from sqlbits.parameters import ParameterStyle, convert_to_positional
from sqlbits.protocols import (
    Aggregater,
    DataSource,
    PagedResults,
    RowCountReceiver,
    Sanitizer,
    TransactionController,
)
from sqlbits.sanitizer import FieldSanitizer

__all__ = (
    "FIELD_LIST_HINT_END",
    "FIELD_LIST_HINT_START",
    "OPERATOR_NOT_EQUAL",
    "ORDER_BY_ASCENDING",
    "ORDER_BY_DESCENDING",
    "SQLSTATE_NO_DATA",
    "SQLSTATE_SUCCESS",
    "TOTAL_ROW_COUNT",
    "Aggregate",
    "Aggregater",
    "BuilderConfig",
    "BuilderState",
    "DataSource",
    "Dialect",
    "DialectInfo",
    "FieldSanitizer",
    "ImproperConfigurationError",
    "LimitStyle",
    "MappingDataSource",
    "PagedResults",
    "ParameterStyle",
    "RowCountAggregate",
    "RowCountReceiver",
    "SQLBitsError",
    "SQLBuilderError",
    "SQLParsingError",
    "Sanitizer",
    "StatementBuilder",
    "TransactionController",
    "__version__",
    "builder",
    "constants",
    "convert_to_positional",
    "dialects",
    "exceptions",
    "get_dialect_info",
    "parameters",
    "protocols",
    "utils",
)
