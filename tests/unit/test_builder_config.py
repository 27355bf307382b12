"""Unit tests for builder configuration."""

from unittest.mock import Mock

import pytest

from sqlbits import BuilderConfig, FieldSanitizer, ImproperConfigurationError, MappingDataSource


def test_config_resolves_dialect_eagerly() -> None:
    config = BuilderConfig("postgres")

    assert config.dialect.name == "PostgreSQL"
    assert repr(config) == "BuilderConfig(dialect='PostgreSQL')"


def test_config_rejects_missing_dialect() -> None:
    with pytest.raises(ImproperConfigurationError):
        BuilderConfig(None)


def test_create_builder_binds_collaborators() -> None:
    source = MappingDataSource(id=1)
    sanitizer = FieldSanitizer(["id"])
    transactions = Mock()
    transactions.in_transaction.return_value = False
    config = BuilderConfig("mysql", data_source=source, sanitizer=sanitizer, transactions=transactions)

    builder = config.create_builder()
    builder.begin_transaction()

    assert builder.dialect is config.dialect
    assert builder.data_source is source
    assert builder.sanitizer is sanitizer
    transactions.begin.assert_called_once_with()


def test_create_builder_returns_fresh_builders() -> None:
    config = BuilderConfig("sqlite")

    first = config.create_builder().start_with("SELECT 1")
    second = config.create_builder()

    assert first is not second
    assert second.get_sql_statement() == ""
