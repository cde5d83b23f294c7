import itertools
from pathlib import Path

import pytest

from kakeibo.services import CategoryService, LedgerService, TransactionService
from kakeibo.storage import JSONStorage


def _counter(prefix):
    numbers = itertools.count(1)
    return lambda: f"{prefix}-{next(numbers)}"


@pytest.fixture
def data_dir(tmp_path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def storage(data_dir):
    return JSONStorage(data_dir)


@pytest.fixture
def categories(storage):
    return CategoryService(storage, id_factory=_counter("cat"))


@pytest.fixture
def transactions(storage):
    return TransactionService(storage, id_factory=_counter("tx"))


@pytest.fixture
def ledger(transactions, categories):
    return LedgerService(transactions, categories)


@pytest.fixture
def lunch():
    return {
        "type": "expense",
        "amount": 1200,
        "date": "2024-03-05",
        "categoryId": "exp-1",
        "memo": "lunch",
    }


@pytest.fixture
def salary():
    return {"type": "income", "amount": 300000, "date": "2024-03-01", "categoryId": "inc-1"}
