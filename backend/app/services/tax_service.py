"""
Tax calculators: GST (India), sales tax and property tax.

All outputs are rounded to cents.
"""
from decimal import Decimal

from backend.app.logging_config import get_logger
from backend.app.schemas.taxes import GSTRequest, GSTResult, PropertyTaxRequest, SalesTaxRequest, TaxResult
from backend.app.utils.financial_math import HUNDRED, ONE, TWELVE, ZERO, percent_of, round_money

logger = get_logger(__name__)

TWO = Decimal("2")


def calculate_gst(request: GSTRequest) -> GSTResult:
    """
    GST on an amount.

    Forward: the amount is the base, GST = base * rate / 100.
    Reverse: the amount includes GST, base = amount / (1 + rate / 100).

    Intra-state supplies split GST equally into CGST and SGST; inter-state
    supplies carry IGST only.
    """
    if request.is_reverse:
        base = request.amount / (ONE + request.gst_rate / HUNDRED)
        total_gst = request.amount - base
    else:
        base = request.amount
        total_gst = percent_of(request.amount, request.gst_rate)

    if request.is_inter_state:
        cgst, sgst, igst = ZERO, ZERO, total_gst
    else:
        cgst = sgst = total_gst / TWO
        igst = ZERO

    logger.debug("GST calculated", reverse=request.is_reverse, inter_state=request.is_inter_state, rate=str(request.gst_rate))

    return GSTResult(
        base_amount=round_money(base),
        gst_rate=request.gst_rate,
        cgst=round_money(cgst),
        sgst=round_money(sgst),
        igst=round_money(igst),
        total_gst=round_money(total_gst),
        final_amount=round_money(base + total_gst),
        is_inter_state=request.is_inter_state,
        )


def calculate_sales_tax(request: SalesTaxRequest) -> TaxResult:
    tax = percent_of(request.amount, request.rate)
    return TaxResult(
        base_amount=round_money(request.amount),
        tax_amount=round_money(tax),
        total_amount=round_money(request.amount + tax),
        )


def calculate_property_tax(request: PropertyTaxRequest) -> TaxResult:
    """Annual property tax on the assessed value, plus its monthly share."""
    tax = percent_of(request.assessed_value, request.rate)
    return TaxResult(
        base_amount=round_money(request.assessed_value),
        tax_amount=round_money(tax),
        total_amount=round_money(request.assessed_value + tax),
        monthly_tax=round_money(tax / TWELVE),
        )
