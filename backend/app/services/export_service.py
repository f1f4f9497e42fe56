"""
CSV report export for amortization schedules.

Layout:
    EMI Calculator Report
    <blank>
    Loan Summary
    Principal Amount,<amount or N/A>
    Interest Rate,<rate>% p.a.
    Tenure,<months> months
    Monthly EMI,<amount or N/A>
    Total Interest,<amount or N/A>
    Total Payment,<amount or N/A>
    <blank>
    Amortization Schedule
    Month,Payment,Principal,Interest,Balance
    one row per schedule entry

Summary amounts are formatted with Babel for the selected currency;
schedule cells stay plain decimals so spreadsheets can compute with them.
"""
import csv
import io
from decimal import Decimal
from typing import Optional

from backend.app.config import get_settings
from backend.app.logging_config import get_logger
from backend.app.schemas.export import CSVExportRequest
from backend.app.utils.currency_utils import format_currency, format_percentage

logger = get_logger(__name__)

CSV_FILENAME = "emi-schedule.csv"
CSV_MEDIA_TYPE = "text/csv"
NOT_AVAILABLE = "N/A"
SCHEDULE_HEADER = ["Month", "Payment", "Principal", "Interest", "Balance"]


def _money(value: Optional[Decimal], currency: str, locale: Optional[str]) -> str:
    if value is None:
        return NOT_AVAILABLE
    return format_currency(value, currency, locale)


def build_csv_report(request: CSVExportRequest) -> str:
    """Render the report as CSV text."""
    currency = request.currency or get_settings().DEFAULT_CURRENCY
    locale = request.locale

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    writer.writerow(["EMI Calculator Report"])
    writer.writerow([])
    writer.writerow(["Loan Summary"])
    writer.writerow(["Principal Amount", _money(request.principal, currency, locale)])
    writer.writerow([
        "Interest Rate",
        f"{format_percentage(request.rate)} p.a." if request.rate is not None else NOT_AVAILABLE,
        ])
    writer.writerow(["Tenure", f"{request.tenure} months" if request.tenure is not None else NOT_AVAILABLE])
    writer.writerow(["Monthly EMI", _money(request.emi, currency, locale)])
    writer.writerow(["Total Interest", _money(request.total_interest, currency, locale)])
    writer.writerow(["Total Payment", _money(request.total_payment, currency, locale)])
    writer.writerow([])

    writer.writerow(["Amortization Schedule"])
    writer.writerow(SCHEDULE_HEADER)
    for row in request.amortization:
        writer.writerow([row.month, row.payment, row.principal, row.interest, row.balance])

    logger.info("CSV report built", rows=len(request.amortization), currency=currency)
    return buffer.getvalue()
