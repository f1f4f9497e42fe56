"""
Tax calculator API endpoints.

- POST /calc/tax/gst: GST forward/reverse with CGST/SGST or IGST split
- POST /calc/tax/sales: Sales tax
- POST /calc/tax/property: Annual property tax with monthly share
"""
from fastapi import APIRouter

from backend.app.schemas.taxes import (
    GSTRequest,
    GSTResult,
    PropertyTaxRequest,
    SalesTaxRequest,
    TaxResult,
    )
from backend.app.services import tax_service

tax_router = APIRouter(prefix="/calc/tax", tags=["Taxes"])


@tax_router.post("/gst", response_model=GSTResult)
async def calculate_gst(request: GSTRequest) -> GSTResult:
    """
    GST calculator.

    Forward: `amount` is the net price, GST is added.
    Reverse (`is_reverse=true`): `amount` includes GST, the base is extracted.

    Intra-state GST is split in equal CGST and SGST halves; inter-state GST
    is a single IGST.

    **Example Request**:
    ```json
    {"amount": "1000", "gst_rate": "18", "is_inter_state": false, "is_reverse": false}
    ```

    **Response**:
    ```json
    {"base_amount": "1000.00", "gst_rate": "18", "cgst": "90.00", "sgst": "90.00",
     "igst": "0.00", "total_gst": "180.00", "final_amount": "1180.00", "is_inter_state": false}
    ```
    """
    return tax_service.calculate_gst(request)


@tax_router.post("/sales", response_model=TaxResult)
async def calculate_sales_tax(request: SalesTaxRequest) -> TaxResult:
    """Sales tax: tax = amount * rate / 100, total = amount + tax."""
    return tax_service.calculate_sales_tax(request)


@tax_router.post("/property", response_model=TaxResult)
async def calculate_property_tax(request: PropertyTaxRequest) -> TaxResult:
    """Annual property tax on the assessed value; `monthly_tax` is the annual tax / 12."""
    return tax_service.calculate_property_tax(request)
