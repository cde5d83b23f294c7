from datetime import date

import pytest

from kakeibo.aggregation import monthly_summary
from kakeibo.defaults import PALETTE
from kakeibo.exceptions import RecordNotFoundError, ValidationError
from kakeibo.services import CategoryService, TransactionService


class TestCategoryService:
    def test_first_run_is_seeded(self, categories):
        income = [c.id for c in categories.list("income")]
        expense = [c.id for c in categories.list("expense")]

        assert income == ["inc-1", "inc-2", "inc-3"]
        assert expense == ["exp-1", "exp-2", "exp-3", "exp-4", "exp-5", "exp-6"]

    def test_add_trims_name_and_cycles_palette(self, categories):
        category = categories.add("  Books  ", "expense")

        assert category.id == "cat-1"
        assert category.name == "Books"
        assert category.color == PALETTE[9 % len(PALETTE)]
        assert categories.list()[-1] == category

    def test_colors_repeat_when_palette_exhausted(self, categories):
        added = [categories.add(f"Extra {i}", "expense") for i in range(len(PALETTE) + 2)]
        assert all(category.color in PALETTE for category in added)

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_add_rejects_empty_name(self, categories, name):
        before = categories.list()
        with pytest.raises(ValidationError) as excinfo:
            categories.add(name, "income")
        assert excinfo.value.field == "name"
        assert categories.list() == before

    def test_add_rejects_unknown_type(self, categories):
        with pytest.raises(ValidationError) as excinfo:
            categories.add("Gift", "transfer")
        assert excinfo.value.field == "type"

    def test_remove_persists_and_ignores_missing(self, storage, categories):
        categories.remove("exp-5")
        categories.remove("does-not-exist")

        reloaded = CategoryService(storage)
        assert "exp-5" not in [c.id for c in reloaded.list()]
        assert len(reloaded.list()) == 8

    def test_get_and_find(self, categories):
        assert categories.get("inc-1").name == "Salary"
        assert categories.find("missing") is None
        with pytest.raises(RecordNotFoundError):
            categories.get("missing")


class TestTransactionService:
    def test_add_assigns_id_and_persists(self, storage, transactions, lunch):
        transaction = transactions.add(lunch)

        assert transaction.id == "tx-1"
        assert transaction.date == date(2024, 3, 5)
        assert TransactionService(storage).get("tx-1") == transaction

    def test_ids_are_unique(self, transactions, lunch):
        ids = {transactions.add(lunch).id for _ in range(5)}
        assert len(ids) == 5

    def test_colliding_id_factory_is_retried(self, storage, lunch):
        ids = iter(["same", "same", "other"])
        service = TransactionService(storage, id_factory=lambda: next(ids))

        assert service.add(lunch).id == "same"
        assert service.add(lunch).id == "other"

    @pytest.mark.parametrize(
        "field, value",
        [
            ("amount", 0),
            ("amount", -5),
            ("amount", "abc"),
            ("amount", 12.5),
            ("amount", True),
            ("amount", None),
            ("categoryId", ""),
            ("categoryId", None),
            ("date", None),
            ("date", "2024-02-30"),
            ("type", "refund"),
        ],
    )
    def test_invalid_candidate_is_rejected_without_mutation(
        self, storage, transactions, lunch, field, value
    ):
        transactions.add(lunch)
        stored = storage.path_for("transactions").read_bytes()

        with pytest.raises(ValidationError) as excinfo:
            transactions.add({**lunch, field: value})

        assert excinfo.value.field == field
        assert len(transactions.list()) == 1
        assert storage.path_for("transactions").read_bytes() == stored

    def test_amount_accepts_integral_strings(self, transactions, lunch):
        assert transactions.add({**lunch, "amount": "1500"}).amount == 1500

    def test_blank_memo_is_stored_as_none(self, transactions, lunch):
        assert transactions.add({**lunch, "memo": "  "}).memo is None

    def test_remove_leaves_others_untouched(self, storage, transactions, lunch, salary):
        first = transactions.add(lunch)
        second = transactions.add(salary)
        third = transactions.add({**lunch, "amount": 800})

        transactions.remove(second.id)
        transactions.remove(second.id)

        assert transactions.list() == [first, third]
        assert TransactionService(storage).list() == [first, third]

    def test_list_filters_by_calendar_month(self, transactions, lunch):
        march_last = transactions.add({**lunch, "date": "2024-03-31"})
        transactions.add({**lunch, "date": "2024-04-01"})
        transactions.add({**lunch, "date": "2023-03-15"})
        march_first = transactions.add({**lunch, "date": "2024-03-01"})

        assert transactions.list(2024, 3) == [march_last, march_first]
        assert len(transactions.list()) == 4

    def test_list_requires_year_and_month_together(self, transactions):
        with pytest.raises(ValidationError):
            transactions.list(2024)

    def test_for_day(self, transactions, lunch, salary):
        transactions.add(lunch)
        transactions.add(salary)
        assert [tx.category_id for tx in transactions.for_day(date(2024, 3, 5))] == ["exp-1"]

    def test_get_missing_raises(self, transactions):
        with pytest.raises(RecordNotFoundError):
            transactions.get("nope")


class TestLedgerService:
    def test_deleting_category_leaves_dangling_transaction(self, ledger, categories, transactions, lunch):
        transaction = transactions.add(lunch)
        categories.remove("exp-1")

        assert transactions.get(transaction.id).category_id == "exp-1"
        row = ledger.describe(transactions.list())[0]
        assert row["category"] == {
            "id": "exp-1",
            "name": "Unknown",
            "color": "lightgray",
            "known": False,
        }
        assert ledger.summary(2024, 3).expense == 1200

    def test_type_mismatch_does_not_break_derivation(self, ledger, transactions, lunch):
        transactions.add({**lunch, "type": "income", "categoryId": "exp-1"})
        view = ledger.month_view(2024, 3)

        assert view["summary"] == {"income": 1200, "expense": 0, "total": 1200}
        assert view["items"][0]["category"]["name"] == "Food"

    def test_expense_scenario(self, ledger, transactions, lunch):
        transactions.add(lunch)
        assert ledger.summary(2024, 3).to_dict() == {"income": 0, "expense": 1200, "total": -1200}

    def test_income_then_expense_scenario(self, ledger, transactions, lunch, salary):
        transactions.add(salary)
        transactions.add(lunch)
        summary = monthly_summary(transactions.list(2024, 3))

        assert summary.total == 298800
        assert summary.total == summary.income - summary.expense

    def test_month_view(self, ledger, transactions, lunch, salary):
        transactions.add(salary)
        transactions.add(lunch)
        transactions.add({**lunch, "date": "2024-03-05", "amount": 300})
        view = ledger.month_view(2024, 3)

        # March 2024 starts on a Friday.
        assert len(view["calendar"]) == 5 + 31
        assert view["calendar"][0] == {"date": None, "day": None, "totals": None}
        fifth = view["calendar"][5 + 4]
        assert fifth["date"] == "2024-03-05"
        assert fifth["totals"] == {"income": 0, "expense": 1500}
        assert [row["date"] for row in view["items"]] == ["2024-03-05", "2024-03-05", "2024-03-01"]
        assert [row["amount"] for row in view["items"]][:2] == [1200, 300]

    def test_refresh_reloads_from_storage(self, storage, ledger, transactions, lunch):
        TransactionService(storage).add(lunch)
        assert transactions.list() == []

        ledger.refresh()
        assert len(transactions.list()) == 1
