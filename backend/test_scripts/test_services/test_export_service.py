"""
Tests for the CSV report export.

Reference: backend/app/services/export_service.py
"""
import csv
import io
from decimal import Decimal

import pytest
from pydantic import ValidationError

from backend.app.schemas.export import CSVExportRequest
from backend.app.schemas.loans import AmortizationRow
from backend.app.services.export_service import SCHEDULE_HEADER, build_csv_report

ROWS = [
    AmortizationRow(month=1, payment=Decimal("8791.59"), principal=Decimal("7958.26"),
                    interest=Decimal("833.33"), balance=Decimal("92041.74")),
    AmortizationRow(month=2, payment=Decimal("8791.59"), principal=Decimal("8024.58"),
                    interest=Decimal("767.01"), balance=Decimal("84017.16")),
    ]


def _parse(text: str) -> list:
    return list(csv.reader(io.StringIO(text)))


def test_full_report_layout():
    text = build_csv_report(CSVExportRequest(
        amortization=ROWS,
        principal=Decimal("100000"),
        rate=Decimal("7.5"),
        tenure=12,
        emi=Decimal("8791.59"),
        total_interest=Decimal("5499.08"),
        total_payment=Decimal("105499.08"),
        currency="USD",
        locale="en_US",
        ))
    lines = _parse(text)

    assert lines[0] == ["EMI Calculator Report"]
    assert lines[1] == []
    assert lines[2] == ["Loan Summary"]
    assert lines[3] == ["Principal Amount", "$100,000.00"]
    assert lines[4] == ["Interest Rate", "7.50% p.a."]
    assert lines[5] == ["Tenure", "12 months"]
    assert lines[6] == ["Monthly EMI", "$8,791.59"]
    assert lines[7] == ["Total Interest", "$5,499.08"]
    assert lines[8] == ["Total Payment", "$105,499.08"]
    assert lines[9] == []
    assert lines[10] == ["Amortization Schedule"]
    assert lines[11] == SCHEDULE_HEADER
    assert lines[12] == ["1", "8791.59", "7958.26", "833.33", "92041.74"]
    assert len(lines) == 12 + len(ROWS)


def test_formatted_amounts_are_quoted():
    text = build_csv_report(CSVExportRequest(amortization=ROWS, principal=Decimal("100000"), locale="en_US"))
    assert 'Principal Amount,"$100,000.00"' in text.splitlines()


def test_missing_summary_values():
    lines = _parse(build_csv_report(CSVExportRequest(amortization=ROWS)))
    assert lines[3] == ["Principal Amount", "N/A"]
    assert lines[4] == ["Interest Rate", "N/A"]
    assert lines[5] == ["Tenure", "N/A"]
    assert lines[8] == ["Total Payment", "N/A"]


def test_indian_grouping():
    lines = _parse(build_csv_report(CSVExportRequest(
        amortization=ROWS, principal=Decimal("1234567.5"), currency="INR", locale="en_IN",
        )))
    assert lines[3] == ["Principal Amount", "₹12,34,567.50"]


def test_requires_schedule_rows():
    with pytest.raises(ValidationError):
        CSVExportRequest(amortization=[])


def test_rejects_unknown_currency():
    with pytest.raises(ValidationError):
        CSVExportRequest(amortization=ROWS, currency="XYZ")
