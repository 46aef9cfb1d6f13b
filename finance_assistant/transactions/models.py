"""Transaction model for imported income and expense records."""

from __future__ import annotations

from datetime import date as date_type
from decimal import Decimal

from sqlalchemy import CheckConstraint, Index
from sqlalchemy.orm import Mapped

from finance_assistant.extensions import db
from finance_assistant.ingest.models import PaymentMethod, TransactionKind
from finance_assistant.models.base import BaseModel

DESCRIPTION_MAX_LENGTH = 500
NOTES_MAX_LENGTH = 1000


class Transaction(BaseModel):
    """A single income or expense owned by one principal.

    Attributes:
        user_id: Opaque id of the owning principal
        type: ``income`` or ``expense``
        amount: Positive amount, at least 0.01
        category: Category name from the default or custom taxonomy
        description: Free text, at most 500 characters
        date: Calendar date of the transaction
        payment_method: One of the PaymentMethod values
    """

    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("amount >= 0.01", name="check_transaction_amount_positive"),
        Index("ix_transactions_user_date", "user_id", "date"),
        Index("ix_transactions_user_type", "user_id", "type"),
        Index("ix_transactions_user_category", "user_id", "category"),
        {"comment": "Income and expense records imported from uploads"},
    )

    user_id: Mapped[str] = db.Column(db.String(128), nullable=False, comment="Owning principal id")
    type: Mapped[str] = db.Column(
        db.String(16), nullable=False, default=TransactionKind.EXPENSE.value, comment="income or expense"
    )
    amount: Mapped[Decimal] = db.Column(db.Numeric(12, 2), nullable=False, comment="Absolute amount")
    category: Mapped[str] = db.Column(db.String(100), nullable=False, comment="Category name")
    subcategory: Mapped[str | None] = db.Column(db.String(100), nullable=True)
    description: Mapped[str] = db.Column(db.String(DESCRIPTION_MAX_LENGTH), nullable=False)
    date: Mapped[date_type] = db.Column(db.Date, nullable=False, default=date_type.today)
    payment_method: Mapped[str] = db.Column(
        db.String(32), nullable=False, default=PaymentMethod.CASH.value, comment="How the transaction was paid"
    )
    tags: Mapped[list[str] | None] = db.Column(db.JSON, nullable=True)
    location: Mapped[str | None] = db.Column(db.String(200), nullable=True)
    notes: Mapped[str | None] = db.Column(db.Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Transaction {self.id}: {self.type} {self.amount} on {self.date}>"
