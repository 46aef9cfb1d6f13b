"""Tests for CSV row normalization."""

from datetime import date
from decimal import Decimal
from unittest.mock import patch

from finance_assistant.ingest.models import NormalizedTransaction, PaymentMethod, TransactionKind
from finance_assistant.ingest.tabular import normalize_row, normalize_rows


class TestNormalizeRow:
    """Test normalize_row."""

    def test_negative_amount_is_expense(self):
        """Test a plain expense row."""
        transaction = normalize_row({"Date": "2024-01-15", "Description": "Grocery Store", "Amount": "-45.20"})

        assert transaction.date == date(2024, 1, 15)
        assert transaction.description == "Grocery Store"
        assert transaction.amount == Decimal("45.20")
        assert transaction.kind is TransactionKind.EXPENSE
        assert transaction.category == "Food & Dining"
        assert transaction.payment_method is PaymentMethod.BANK_TRANSFER

    def test_grocery_expense_row(self):
        """Test the canonical negative grocery row."""
        transaction = normalize_row({"date": "2024-01-15", "description": "Grocery Store", "amount": "-45.67"})

        assert transaction == NormalizedTransaction(
            date=date(2024, 1, 15),
            description="Grocery Store",
            amount=Decimal("45.67"),
            kind=TransactionKind.EXPENSE,
            category="Food & Dining",
            payment_method=PaymentMethod.BANK_TRANSFER,
        )

    def test_missing_amount_column_is_skipped(self):
        """Test that a row without an amount field emits nothing."""
        assert normalize_row({"date": "2024-01-15", "description": "Grocery Store"}) is None

    def test_positive_amount_is_income(self):
        """Test that a positive amount makes the row income."""
        transaction = normalize_row({"date": "01/20/2024", "description": "ACME Payroll", "amount": "2,500.00"})

        assert transaction.kind is TransactionKind.INCOME
        assert transaction.category == "Income"
        assert transaction.amount == Decimal("2500.00")

    def test_income_keyword_overrides_negative_sign(self):
        """Test that an income keyword makes a negative row income."""
        transaction = normalize_row({"date": "2024-01-20", "description": "Refund from store", "amount": "-20"})

        assert transaction.kind is TransactionKind.INCOME
        assert transaction.amount == Decimal("20")

    def test_provided_category_wins(self):
        """Test that a category column is used as given."""
        transaction = normalize_row(
            {"date": "2024-01-20", "description": "Delta Airlines", "amount": "-100", "category": " Travel "}
        )
        assert transaction.category == "Travel"

    def test_column_aliases_and_header_normalization(self):
        """Test alias columns with untidy headers."""
        transaction = normalize_row(
            {" Transaction_Date ": "2024-02-01", "MEMO": "Uber ride", "TransactionAmount": "-12.50"}
        )

        assert transaction.date == date(2024, 2, 1)
        assert transaction.description == "Uber ride"
        assert transaction.category == "Transportation"

    def test_first_non_empty_alias_wins(self):
        """Test that an empty preferred column falls through to the next alias."""
        transaction = normalize_row(
            {"date": "2024-02-01", "description": "", "memo": "Netflix", "amount": "-15.99"}
        )
        assert transaction.description == "Netflix"

    def test_unparseable_date_falls_back_to_today(self):
        """Test the date fallback."""
        with patch("finance_assistant.ingest.dates._today", return_value=date(2030, 6, 1)):
            transaction = normalize_row({"date": "someday", "description": "Cafe", "amount": "-3"})
        assert transaction.date == date(2030, 6, 1)

    def test_overflow_cells_are_ignored(self):
        """Test that cells stored under the None key by csv.DictReader are ignored."""
        transaction = normalize_row({"date": "2024-01-01", "description": "Cafe", "amount": "-3", None: ["x"]})
        assert transaction is not None

    def test_rows_without_required_fields_are_skipped(self):
        """Test rows missing a date, description or amount."""
        assert normalize_row({"date": "2024-01-01", "description": "Cafe"}) is None
        assert normalize_row({"description": "Cafe", "amount": "-3"}) is None
        assert normalize_row({"date": "2024-01-01", "amount": "-3"}) is None

    def test_invalid_or_zero_amount_is_skipped(self):
        """Test that only strictly positive amounts are emitted."""
        assert normalize_row({"date": "2024-01-01", "description": "Cafe", "amount": "abc"}) is None
        assert normalize_row({"date": "2024-01-01", "description": "Cafe", "amount": "0.00"}) is None

    def test_blank_description_is_skipped(self):
        """Test that a whitespace-only description is rejected."""
        assert normalize_row({"date": "2024-01-01", "description": "   ", "amount": "-3"}) is None


class TestNormalizeRows:
    """Test normalize_rows."""

    def test_skips_unusable_rows(self):
        """Test that unusable rows are dropped and order is preserved."""
        rows = [
            {"date": "2024-01-01", "description": "Cafe", "amount": "-3"},
            {"date": "2024-01-02", "description": "No amount"},
            {"date": "2024-01-03", "description": "Payroll", "amount": "100"},
        ]

        transactions = normalize_rows(rows)

        assert [t.description for t in transactions] == ["Cafe", "Payroll"]

    def test_normalization_is_deterministic(self):
        """Test that normalizing the same rows twice yields the same sequence."""
        rows = [
            {"date": "2024-01-15", "description": "Grocery Store", "amount": "-45.67"},
            {"date": "2024-01-16", "description": "Salary", "amount": "-1000"},
            {"date": "2024-01-17", "description": "Uber", "amount": "-12.50"},
        ]

        first = normalize_rows(rows)

        assert len(first) == 3
        assert normalize_rows(rows) == first

    def test_row_error_does_not_abort_import(self):
        """Test that an exception while processing one row only skips that row."""
        good = NormalizedTransaction(
            date=date(2024, 1, 1),
            description="Cafe",
            amount=Decimal("3"),
            kind=TransactionKind.EXPENSE,
            category="Food & Dining",
        )
        with patch("finance_assistant.ingest.tabular.normalize_row", side_effect=[RuntimeError("boom"), good]):
            with patch("finance_assistant.ingest.tabular.logger") as mock_logger:
                transactions = normalize_rows([{"a": "1"}, {"b": "2"}])

        assert transactions == [good]
        mock_logger.error.assert_called_once()
        assert "boom" in mock_logger.error.call_args[0][0]
