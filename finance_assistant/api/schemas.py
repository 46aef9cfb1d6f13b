"""API Validation Schemas."""

from datetime import date, datetime
from decimal import Decimal

from marshmallow import EXCLUDE, Schema, fields, pre_load, validate

from finance_assistant.ingest.dates import parse_date_value
from finance_assistant.ingest.models import PaymentMethod, TransactionKind
from finance_assistant.transactions.models import DESCRIPTION_MAX_LENGTH, NOTES_MAX_LENGTH

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"
TRANSACTION_TYPES = [kind.value for kind in TransactionKind]


class FlexibleDate(fields.Field):
    """Date field accepting ISO dates, ISO timestamps and common US formats."""

    default_error_messages = {"invalid": "Not a valid date."}

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        return value.isoformat()

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if not isinstance(value, str):
            raise self.make_error("invalid")
        parsed = parse_date_value(value)
        if parsed is None:
            raise self.make_error("invalid")
        return parsed


class NormalizedTransactionSchema(Schema):
    type = fields.Enum(TransactionKind, by_value=True, attribute="kind")
    amount = fields.Decimal(as_string=True)
    description = fields.Str()
    date = fields.Date()
    category = fields.Str()
    payment_method = fields.Enum(PaymentMethod, by_value=True, data_key="paymentMethod")


class LineItemSchema(Schema):
    name = fields.Str()
    amount = fields.Decimal(as_string=True)


class ExtractedReceiptSchema(Schema):
    total = fields.Decimal(as_string=True)
    merchant_name = fields.Str(data_key="merchantName")
    date = fields.Date()
    items = fields.List(fields.Nested(LineItemSchema))
    category = fields.Str()
    raw_text = fields.Str(data_key="rawText")


class TransactionInputSchema(Schema):
    """Validates a transaction submitted for import."""

    class Meta:
        unknown = EXCLUDE

    type = fields.Str(required=True, validate=validate.OneOf(TRANSACTION_TYPES))
    amount = fields.Decimal(required=True, places=2, validate=validate.Range(min=Decimal("0.01")))
    description = fields.Str(required=True, validate=validate.Length(min=1, max=DESCRIPTION_MAX_LENGTH))
    date = FlexibleDate(required=True)
    category = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    subcategory = fields.Str(allow_none=True, validate=validate.Length(max=100))
    payment_method = fields.Enum(
        PaymentMethod, by_value=True, data_key="paymentMethod", load_default=PaymentMethod.CASH
    )
    tags = fields.List(fields.Str(), allow_none=True)
    location = fields.Str(allow_none=True, validate=validate.Length(max=200))
    notes = fields.Str(allow_none=True, validate=validate.Length(max=NOTES_MAX_LENGTH))

    @pre_load
    def strip_text(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        cleaned = dict(data)
        for key in ("type", "description", "category", "subcategory", "location"):
            if isinstance(cleaned.get(key), str):
                cleaned[key] = cleaned[key].strip()
        if isinstance(cleaned.get("type"), str):
            cleaned["type"] = cleaned["type"].lower()
        return cleaned


class TransactionSchema(Schema):
    id = fields.Int(dump_only=True)
    user_id = fields.Str(dump_only=True, data_key="userId")
    type = fields.Str()
    amount = fields.Decimal(as_string=True)
    category = fields.Str()
    subcategory = fields.Str(allow_none=True)
    description = fields.Str()
    date = fields.Date()
    payment_method = fields.Str(data_key="paymentMethod")
    tags = fields.List(fields.Str(), allow_none=True)
    location = fields.Str(allow_none=True)
    notes = fields.Str(allow_none=True)
    created_at = fields.DateTime(dump_only=True, data_key="createdAt")
    updated_at = fields.DateTime(dump_only=True, data_key="updatedAt")


class CustomCategorySchema(Schema):
    id = fields.Str()
    name = fields.Str()
    color = fields.Str()
    icon = fields.Str()
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt", allow_none=True)


class CategoryInputSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.Str(required=True, validate=validate.Length(min=1, max=50))
    type = fields.Str(required=True, validate=validate.OneOf(TRANSACTION_TYPES))
    color = fields.Str(validate=validate.Regexp(HEX_COLOR_PATTERN, error="Color must be a valid hex color"))
    icon = fields.Str()

    @pre_load
    def strip_name(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get("name"), str):
            return {**data, "name": data["name"].strip()}
        return data


class CategoryUpdateSchema(CategoryInputSchema):
    name = fields.Str(validate=validate.Length(min=1, max=50))
    type = fields.Str(dump_only=True)
