"""Service functions behind the upload, import and category endpoints."""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from flask import current_app
from marshmallow import ValidationError
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from finance_assistant.extensions import db
from finance_assistant.ingest import ImportBatch, IngestionDispatcher, ReceiptScan
from finance_assistant.services import PDFTextService, get_ocr_service
from finance_assistant.transactions.models import Transaction

from .schemas import (
    ExtractedReceiptSchema,
    NormalizedTransactionSchema,
    TransactionInputSchema,
    TransactionSchema,
)

PREVIEW_SIZE = 5
CENTS = Decimal("0.01")

normalized_transaction_schema = NormalizedTransactionSchema()
normalized_transactions_schema = NormalizedTransactionSchema(many=True)
extracted_receipt_schema = ExtractedReceiptSchema()
transaction_input_schema = TransactionInputSchema()
transactions_schema = TransactionSchema(many=True)


def _recognize(image_path: str) -> str:
    # Tesseract is only looked up when a receipt is actually uploaded
    return get_ocr_service().recognize(image_path)


def get_dispatcher() -> IngestionDispatcher:
    """Build a dispatcher wired to Tesseract and PyMuPDF."""
    return IngestionDispatcher(
        recognize=_recognize,
        extract_text=PDFTextService().extract_text,
        upload_folder=current_app.config.get("UPLOAD_FOLDER"),
    )


def _batch_payload(batch: ImportBatch) -> dict[str, Any]:
    transactions = normalized_transactions_schema.dump(batch.transactions)
    return {
        "type": batch.source,
        "transactions": transactions,
        "count": batch.count,
        "message": f"Successfully parsed {batch.count} transactions from {batch.source.upper()}",
        "quickActions": {
            "importAll": {
                "action": "bulk-import",
                "data": transactions,
                "label": f"Import all {batch.count} transactions",
            },
            "preview": {
                "action": "preview",
                "data": transactions[:PREVIEW_SIZE],
                "label": f"Preview first {PREVIEW_SIZE} transactions",
            },
            "selectiveImport": {
                "action": "selective-import",
                "data": transactions,
                "label": "Choose transactions to import",
            },
        },
    }


def _receipt_payload(scan: ReceiptScan) -> dict[str, Any]:
    extracted = extracted_receipt_schema.dump(scan.extracted)
    suggested = normalized_transaction_schema.dump(scan.suggested)
    return {
        "type": "receipt",
        "extractedData": extracted,
        "suggestedTransaction": suggested,
        "message": "Receipt processed successfully",
        "quickActions": {
            "addTransaction": {"action": "add-single", "data": suggested, "label": "Add this transaction"},
            "editAndAdd": {"action": "edit-single", "data": suggested, "label": "Edit and add transaction"},
            "viewDetails": {"action": "view-details", "data": extracted, "label": "View extracted details"},
        },
    }


def build_upload_payload(result: ImportBatch | ReceiptScan) -> dict[str, Any]:
    """Serialize a dispatch result together with its follow-up actions."""
    if isinstance(result, ReceiptScan):
        return _receipt_payload(result)
    return _batch_payload(result)


def process_upload(media_type: str | None, file_name: str | None, data: bytes) -> dict[str, Any]:
    """Dispatch an uploaded file and build the response payload.

    Raises:
        IngestionError: If the file cannot be processed
    """
    result = get_dispatcher().dispatch(media_type, file_name, data)
    payload = build_upload_payload(result)
    current_app.logger.info(f"Processed upload '{file_name}' as {payload['type']}")
    return payload


def format_validation_error(error: ValidationError) -> str:
    """Flatten marshmallow error messages into one line."""
    messages = error.messages
    if not isinstance(messages, dict):
        return str(messages)
    parts = []
    for field_name, field_messages in messages.items():
        if isinstance(field_messages, list):
            field_messages = " ".join(str(message) for message in field_messages)
        parts.append(f"{field_name}: {field_messages}")
    return "; ".join(parts)


def create_transaction_for_user(user_id: str, data: dict[str, Any]) -> Transaction:
    """Build a transaction from validated input."""
    return Transaction(
        user_id=user_id,
        type=data["type"],
        amount=data["amount"],
        category=data["category"],
        subcategory=data.get("subcategory"),
        description=data["description"],
        date=data["date"],
        payment_method=data["payment_method"].value,
        tags=data.get("tags"),
        location=data.get("location"),
        notes=data.get("notes"),
    )


def add_transaction_for_user(user_id: str, record: Any) -> Transaction:
    """Validate and persist a single transaction.

    Raises:
        ValidationError: If the record is invalid
    """
    data = transaction_input_schema.load(record)
    transaction = create_transaction_for_user(user_id, data)
    transaction.save()
    current_app.logger.info(f"Added transaction {transaction.id} for user {user_id}")
    return transaction


def import_transactions_for_user(user_id: str, records: Iterable[tuple[int, Any]]) -> dict[str, Any]:
    """Import transactions for a given user.

    Each record is validated on its own; an invalid record is reported and never
    aborts the batch.

    Args:
        user_id: ID of the principal to import transactions for
        records: (index, raw transaction) pairs; the index is echoed back in errors

    Returns:
        Dictionary with ``imported``, ``errors``, ``errorDetails`` and ``transactions``
    """
    saved: list[Transaction] = []
    error_details: list[dict[str, Any]] = []

    for index, record in records:
        try:
            data = transaction_input_schema.load(record)
        except ValidationError as e:
            error_details.append({"index": index, "transaction": record, "error": format_validation_error(e)})
            continue

        transaction = create_transaction_for_user(user_id, data)
        db.session.add(transaction)
        saved.append(transaction)

    if saved:
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise

    current_app.logger.info(
        f"Imported {len(saved)} transactions for user {user_id} ({len(error_details)} rejected)"
    )
    return {
        "imported": len(saved),
        "errors": len(error_details),
        "errorDetails": error_details,
        "transactions": transactions_schema.dump(saved),
    }


def select_records(transactions: list[Any], selected_indices: list[Any]) -> list[tuple[int, Any]]:
    """Pick the selected transactions, ignoring indices that are out of range or not integers."""
    selected = []
    for index in selected_indices:
        if isinstance(index, bool) or not isinstance(index, int):
            continue
        if 0 <= index < len(transactions) and transactions[index]:
            selected.append((index, transactions[index]))
    return selected


def _money(value: Any) -> str:
    return str(Decimal(str(value or 0)).quantize(CENTS, rounding=ROUND_HALF_UP))


def get_category_usage(user_id: str) -> list[dict[str, Any]]:
    """Summarize a user's stored transactions per (category, type), most used first."""
    transaction_count = func.count(Transaction.id)
    result = (
        db.session.query(
            Transaction.category,
            Transaction.type,
            transaction_count.label("count"),
            func.sum(Transaction.amount).label("total_amount"),
            func.avg(Transaction.amount).label("avg_amount"),
        )
        .filter(Transaction.user_id == user_id)
        .group_by(Transaction.category, Transaction.type)
        .order_by(transaction_count.desc(), Transaction.category, Transaction.type)
        .all()
    )

    return [
        {
            "category": category,
            "type": kind,
            "count": count,
            "totalAmount": _money(total_amount),
            "avgAmount": _money(avg_amount),
        }
        for category, kind, count, total_amount, avg_amount in result
    ]
