"""
Utility endpoints for frontend support.

Provides helper endpoints for:
- Listing the currencies offered by the currency selector
- Currency lookup by ISO code
- Normalizing a currency code, symbol or name
"""
from fastapi import APIRouter, HTTPException, Query

from backend.app.config import get_settings
from backend.app.schemas.utilities import (
    CurrencyItem,
    CurrencyListResponse,
    CurrencyNormalizationResponse,
    )
from backend.app.utils.currency_utils import get_currency, list_currencies, normalize_currency

router = APIRouter(prefix="/utilities", tags=["Utilities"])


@router.get("/currencies", response_model=CurrencyListResponse)
async def list_supported_currencies(
    language: str = Query("en", description="Language for currency names (default: en)")
    ):
    """
    Get the list of supported currencies, default currency first.

    **Example Request**:
    ```
    GET /api/v1/utilities/currencies
    GET /api/v1/utilities/currencies?language=it
    ```

    **Response**:
    ```json
    {
      "currencies": [
        {"code": "USD", "name": "US Dollar", "symbol": "$", "country": "United States",
         "country_code": "US", "locale": "en_US"},
        ...
      ],
      "count": 52,
      "default": "USD",
      "language": "en"
    }
    ```
    """
    currencies = [CurrencyItem(**c) for c in list_currencies(language)]
    return CurrencyListResponse(
        currencies=currencies,
        count=len(currencies),
        default=get_settings().DEFAULT_CURRENCY,
        language=language,
        )


@router.get("/currencies/normalize", response_model=CurrencyNormalizationResponse)
async def normalize_currency_endpoint(
    query: str = Query(..., min_length=1, description="Currency code, symbol or name"),
    language: str = Query("en", description="Language for name matching"),
    ):
    """
    Normalize currency input to ISO 4217 code(s).

    **Example Requests**:
    ```
    GET /api/v1/utilities/currencies/normalize?query=inr
    GET /api/v1/utilities/currencies/normalize?query=€
    GET /api/v1/utilities/currencies/normalize?query=rupee
    ```

    **Response**:
    ```json
    {"query": "€", "iso_codes": ["EUR"], "match_type": "exact", "error": null}
    ```
    """
    return CurrencyNormalizationResponse(**normalize_currency(query, language))


@router.get("/currencies/{code}", response_model=CurrencyItem)
async def get_supported_currency(
    code: str,
    language: str = Query("en", description="Language for the currency name"),
    ):
    """Get one supported currency by ISO code (case-insensitive)."""
    currency = get_currency(code, language)
    if currency is None:
        raise HTTPException(status_code=404, detail=f"Currency '{code}' is not supported")
    return CurrencyItem(**currency)
