"""Tests for the upload endpoint."""

from io import BytesIO
from unittest.mock import Mock, patch

import pytest

CSV_BYTES = (
    b"Date,Description,Amount\n"
    b"2024-01-15,Grocery Store,-45.20\n"
    b"2024-01-16,ACME Payroll,2500.00\n"
    b"2024-01-17,,-3.00\n"
)
RECEIPT_TEXT = "WALMART SUPERCENTER\n03/15/2024\nMilk 3.49\nTOTAL $7.00\n"
STATEMENT_TEXT = "01/15/2024 GROCERY OUTLET -45.20\n2024-02-01 Payroll Deposit +2,500.00\n"


def _upload(client, headers, data, file_name, media_type):
    return client.post(
        "/api/v1/upload",
        data={"file": (BytesIO(data), file_name, media_type)},
        headers=headers,
        content_type="multipart/form-data",
    )


@pytest.fixture
def mock_ocr():
    service = Mock()
    service.recognize.return_value = RECEIPT_TEXT
    with patch("finance_assistant.api.services.get_ocr_service", return_value=service):
        yield service


class TestUploadCsv:
    """Test CSV uploads."""

    def test_csv_upload(self, client, auth_headers):
        """Test that CSV rows are normalized and returned with quick actions."""
        response = _upload(client, auth_headers, CSV_BYTES, "bank.csv", "text/csv")

        assert response.status_code == 200
        body = response.get_json()
        assert body["status"] == "success"
        assert body["message"] == "Successfully parsed 2 transactions from CSV"

        data = body["data"]
        assert data["type"] == "csv"
        assert data["count"] == 2
        assert data["transactions"][0] == {
            "type": "expense",
            "amount": "45.20",
            "description": "Grocery Store",
            "date": "2024-01-15",
            "category": "Food & Dining",
            "paymentMethod": "bank_transfer",
        }
        assert data["transactions"][1]["type"] == "income"
        assert data["transactions"][1]["category"] == "Income"

        quick_actions = data["quickActions"]
        assert quick_actions["importAll"]["action"] == "bulk-import"
        assert quick_actions["importAll"]["label"] == "Import all 2 transactions"
        assert quick_actions["preview"]["data"] == data["transactions"][:5]
        assert quick_actions["selectiveImport"]["action"] == "selective-import"

    def test_preview_is_limited_to_five(self, client, auth_headers):
        """Test the preview quick action size."""
        rows = b"".join(f"2024-01-{day:02d},Cafe,-{day}.00\n".encode() for day in range(1, 9))
        response = _upload(client, auth_headers, b"date,description,amount\n" + rows, "bank.csv", "text/csv")

        data = response.get_json()["data"]
        assert len(data["transactions"]) == 8
        assert len(data["quickActions"]["preview"]["data"]) == 5

    def test_unreadable_csv(self, client, auth_headers):
        """Test that CSV the tokenizer rejects is a client error."""
        data = b"date,amount\n" + b"x" * 200_000 + b",1\n"
        response = _upload(client, auth_headers, data, "bank.csv", "text/csv")

        assert response.status_code == 400
        assert response.get_json()["message"].startswith("Error reading CSV file:")


class TestUploadReceipt:
    """Test receipt image uploads."""

    def test_receipt_upload(self, client, auth_headers, mock_ocr):
        """Test extracted data, suggestion and quick actions for a receipt."""
        response = _upload(client, auth_headers, b"jpeg-bytes", "receipt.jpg", "image/jpeg")

        assert response.status_code == 200
        body = response.get_json()
        assert body["message"] == "Receipt processed successfully"

        data = body["data"]
        assert data["type"] == "receipt"
        assert data["extractedData"]["merchantName"] == "WALMART SUPERCENTER"
        assert data["extractedData"]["total"] == "7.00"
        assert data["extractedData"]["date"] == "2024-03-15"
        assert data["extractedData"]["items"][0] == {"name": "Milk", "amount": "3.49"}
        assert data["extractedData"]["rawText"] == RECEIPT_TEXT

        suggested = data["suggestedTransaction"]
        assert suggested["type"] == "expense"
        assert suggested["description"] == "Receipt from WALMART SUPERCENTER"
        assert suggested["paymentMethod"] == "credit_card"
        assert suggested["category"] == "Shopping"

        assert data["quickActions"]["addTransaction"]["action"] == "add-single"
        assert data["quickActions"]["editAndAdd"]["action"] == "edit-single"
        assert data["quickActions"]["viewDetails"]["data"] == data["extractedData"]
        mock_ocr.recognize.assert_called_once()

    def test_ocr_engine_failure(self, client, auth_headers, mock_ocr):
        """Test that OCR engine errors return a server error."""
        mock_ocr.recognize.side_effect = RuntimeError("tesseract crashed")

        response = _upload(client, auth_headers, b"jpeg-bytes", "receipt.jpg", "image/jpeg")

        assert response.status_code == 500
        body = response.get_json()
        assert body["status"] == "error"
        assert body["message"] == "Failed to extract data from receipt: tesseract crashed"


class TestUploadPdf:
    """Test PDF statement uploads."""

    def test_pdf_upload(self, client, auth_headers):
        """Test that statement lines are extracted."""
        with patch("finance_assistant.api.services.PDFTextService") as mock_service_class:
            mock_service_class.return_value.extract_text.return_value = STATEMENT_TEXT
            response = _upload(client, auth_headers, b"%PDF-1.7", "statement.pdf", "application/pdf")

        assert response.status_code == 200
        body = response.get_json()
        assert body["message"] == "Successfully parsed 2 transactions from PDF"
        assert body["data"]["type"] == "pdf"
        assert body["data"]["count"] == 2
        assert [t["type"] for t in body["data"]["transactions"]] == ["expense", "income"]


class TestUploadErrors:
    """Test rejected uploads."""

    def test_requires_principal(self, client):
        """Test that requests without the principal header are rejected."""
        response = _upload(client, {}, CSV_BYTES, "bank.csv", "text/csv")

        assert response.status_code == 401
        assert response.get_json()["message"] == "Authentication required"

    def test_no_file(self, client, auth_headers):
        """Test a request without a file part."""
        response = client.post("/api/v1/upload", data={}, headers=auth_headers)

        assert response.status_code == 400
        assert response.get_json()["message"] == "No file uploaded"

    def test_unsupported_type(self, client, auth_headers):
        """Test that unsupported media types are rejected with a client error."""
        response = _upload(client, auth_headers, b"PK", "archive.zip", "application/zip")

        assert response.status_code == 400
        body = response.get_json()
        assert body["status"] == "error"
        assert body["message"] == (
            "File type application/zip is not supported. Please use JPG, PNG, PDF, or CSV files."
        )

    def test_file_too_large(self, app, client, auth_headers):
        """Test the upload size limit."""
        app.config["MAX_CONTENT_LENGTH"] = 1024

        response = _upload(client, auth_headers, b"x" * 4096, "bank.csv", "text/csv")

        assert response.status_code == 413
        assert response.get_json()["status"] == "error"
