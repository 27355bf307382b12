from __future__ import annotations

from unittest.mock import Mock

import pytest

from sqlbits import StatementBuilder


@pytest.fixture
def pg_builder() -> StatementBuilder:
    return StatementBuilder("postgresql")


@pytest.fixture
def mysql_builder() -> StatementBuilder:
    return StatementBuilder("mysql")


@pytest.fixture
def sqlite_builder() -> StatementBuilder:
    return StatementBuilder("sqlite")


@pytest.fixture
def transactions() -> Mock:
    """Transaction controller double reporting no open transaction."""
    controller = Mock()
    controller.in_transaction.return_value = False
    return controller
