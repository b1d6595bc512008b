"""Unit tests for StockLedger (pure arithmetic, repository mocked)."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from modules.orders.exceptions import InsufficientStock
from modules.orders.stock import StockLedger

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return MagicMock()


@pytest.fixture()
def ledger(repo):
    return StockLedger(repo)


def _product(stock: int):
    return SimpleNamespace(id=uuid4(), stock=stock)


class TestReserve:
    def test_decrements_and_persists(self, ledger, repo):
        product = _product(10)
        ledger.reserve(product, 4)

        assert product.stock == 6
        repo.save_stock.assert_called_once_with(product)

    def test_insufficient_stock_writes_nothing(self, ledger, repo):
        product = _product(3)
        with pytest.raises(InsufficientStock):
            ledger.reserve(product, 5)

        assert product.stock == 3
        repo.save_stock.assert_not_called()

    def test_rejects_non_positive_quantity(self, ledger):
        with pytest.raises(ValueError):
            ledger.reserve(_product(3), 0)


class TestRelease:
    def test_increments_and_persists(self, ledger, repo):
        product = _product(0)
        ledger.release(product, 7)

        assert product.stock == 7
        repo.save_stock.assert_called_once_with(product)


class TestResync:
    def test_positive_delta_reserves(self, ledger):
        product = _product(5)
        assert ledger.resync(product, old_quantity=5, new_quantity=8) == 3
        assert product.stock == 2

    def test_negative_delta_releases(self, ledger):
        product = _product(5)
        assert ledger.resync(product, old_quantity=5, new_quantity=2) == -3
        assert product.stock == 8

    def test_zero_delta_touches_nothing(self, ledger, repo):
        product = _product(5)
        assert ledger.resync(product, old_quantity=4, new_quantity=4) == 0
        assert product.stock == 5
        repo.save_stock.assert_not_called()

    def test_positive_delta_beyond_stock(self, ledger):
        product = _product(2)
        with pytest.raises(InsufficientStock):
            ledger.resync(product, old_quantity=1, new_quantity=4)
        assert product.stock == 2


def test_lock_delegates_to_row_lock(ledger, repo):
    ledger.lock("product-id")
    repo.get_for_update.assert_called_once_with("product-id")
