from datetime import date

import pytest

from kakeibo.models import Transaction, parse_date


def test_parse_date_accepts_padded_iso_day():
    assert parse_date(" 2024-02-29 ") == date(2024, 2, 29)


@pytest.mark.parametrize("value", ["20240305", "2024-3-5", "2024-W10-2", "2024-03-05T00:00", "2023-02-29"])
def test_parse_date_rejects_other_forms(value):
    with pytest.raises(ValueError):
        parse_date(value)


def test_transaction_from_dict_keeps_stored_values():
    data = {
        "id": "t1",
        "type": "expense",
        "amount": 1200,
        "date": "2024-03-05",
        "categoryId": "exp-1",
        "memo": "lunch",
    }
    assert Transaction.from_dict(data).to_dict() == data


@pytest.mark.parametrize("amount", [0, -1, 12.9, "5", False])
def test_transaction_from_dict_rejects_invalid_amounts(amount):
    with pytest.raises(ValueError):
        Transaction.from_dict(
            {"id": "t1", "type": "income", "amount": amount, "date": "2024-03-05", "categoryId": "inc-1"}
        )
