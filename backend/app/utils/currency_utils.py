"""
Currency utilities backed by Babel.

Provides the curated list of currencies offered by the calculators, lookup
and normalization of user input (ISO code, symbol or name), and locale-aware
formatting of amounts, numbers and percentages.
"""

from decimal import Decimal
from typing import List, Optional

import structlog
from babel import Locale, UnknownLocaleError
from babel.numbers import format_decimal, get_currency_name, get_currency_symbol

from backend.app.config import get_settings
from backend.app.utils.translation_utils import get_babel_locale

logger = structlog.get_logger(__name__)

# (ISO code, country, ISO 3166 country code, display locale)
SUPPORTED_CURRENCIES = [
    # Major currencies
    ("USD", "United States", "US", "en_US"),
    ("EUR", "European Union", "EU", "de_DE"),
    ("GBP", "United Kingdom", "GB", "en_GB"),
    ("INR", "India", "IN", "en_IN"),
    ("JPY", "Japan", "JP", "ja_JP"),
    ("AUD", "Australia", "AU", "en_AU"),
    ("CAD", "Canada", "CA", "en_CA"),
    # A-Z by country
    ("ARS", "Argentina", "AR", "es_AR"),
    ("BDT", "Bangladesh", "BD", "bn_BD"),
    ("BRL", "Brazil", "BR", "pt_BR"),
    ("BGN", "Bulgaria", "BG", "bg_BG"),
    ("CLP", "Chile", "CL", "es_CL"),
    ("CNY", "China", "CN", "zh_CN"),
    ("COP", "Colombia", "CO", "es_CO"),
    ("CRC", "Costa Rica", "CR", "es_CR"),
    ("CZK", "Czech Republic", "CZ", "cs_CZ"),
    ("DKK", "Denmark", "DK", "da_DK"),
    ("EGP", "Egypt", "EG", "ar_EG"),
    ("GHS", "Ghana", "GH", "en_GH"),
    ("HKD", "Hong Kong", "HK", "zh_HK"),
    ("HUF", "Hungary", "HU", "hu_HU"),
    ("ISK", "Iceland", "IS", "is_IS"),
    ("IDR", "Indonesia", "ID", "id_ID"),
    ("ILS", "Israel", "IL", "he_IL"),
    ("KES", "Kenya", "KE", "en_KE"),
    ("KWD", "Kuwait", "KW", "ar_KW"),
    ("MYR", "Malaysia", "MY", "en_MY"),
    ("MXN", "Mexico", "MX", "es_MX"),
    ("MAD", "Morocco", "MA", "ar_MA"),
    ("NZD", "New Zealand", "NZ", "en_NZ"),
    ("NGN", "Nigeria", "NG", "en_NG"),
    ("NOK", "Norway", "NO", "nb_NO"),
    ("PKR", "Pakistan", "PK", "en_PK"),
    ("PEN", "Peru", "PE", "es_PE"),
    ("PHP", "Philippines", "PH", "en_PH"),
    ("PLN", "Poland", "PL", "pl_PL"),
    ("QAR", "Qatar", "QA", "ar_QA"),
    ("RON", "Romania", "RO", "ro_RO"),
    ("SAR", "Saudi Arabia", "SA", "ar_SA"),
    ("SGD", "Singapore", "SG", "en_SG"),
    ("ZAR", "South Africa", "ZA", "en_ZA"),
    ("KRW", "South Korea", "KR", "ko_KR"),
    ("LKR", "Sri Lanka", "LK", "en_LK"),
    ("SEK", "Sweden", "SE", "sv_SE"),
    ("CHF", "Switzerland", "CH", "de_CH"),
    ("TWD", "Taiwan", "TW", "zh_TW"),
    ("THB", "Thailand", "TH", "th_TH"),
    ("TRY", "Turkey", "TR", "tr_TR"),
    ("UAH", "Ukraine", "UA", "uk_UA"),
    ("AED", "United Arab Emirates", "AE", "ar_AE"),
    ("UYU", "Uruguay", "UY", "es_UY"),
    ("VND", "Vietnam", "VN", "vi_VN"),
    ]

_BY_CODE = {code: (code, country, country_code, locale) for code, country, country_code, locale in SUPPORTED_CURRENCIES}

# Map of common currency symbols to possible ISO codes
SYMBOL_TO_ISO = {
    "$": ["USD", "CAD", "AUD", "NZD", "HKD", "SGD", "MXN", "ARS", "CLP", "COP"],
    "€": ["EUR"],
    "£": ["GBP"],
    "¥": ["JPY", "CNY"],
    "₹": ["INR"],
    "₩": ["KRW"],
    "₺": ["TRY"],
    "₱": ["PHP"],
    "₴": ["UAH"],
    "₡": ["CRC"],
    "₦": ["NGN"],
    "₨": ["PKR", "LKR"],
    "₫": ["VND"],
    "₪": ["ILS"],
    "₵": ["GHS"],
    "৳": ["BDT"],
    "฿": ["THB"],
    "Fr": ["CHF"],
    "kr": ["SEK", "NOK", "DKK", "ISK"],
    "zł": ["PLN"],
    "Ft": ["HUF"],
    "Kč": ["CZK"],
    "лв": ["BGN"],
    "lei": ["RON"],
    "R": ["ZAR"],
    "R$": ["BRL"],
    "RM": ["MYR"],
    "Rp": ["IDR"],
    }


def _parse_locale(locale_str: Optional[str]) -> Locale:
    """Parse 'en_IN' or 'en-IN' into a Babel Locale, falling back to the default locale."""
    if not locale_str:
        locale_str = get_settings().DEFAULT_LOCALE
    try:
        return Locale.parse(locale_str.replace("-", "_"))
    except (ValueError, UnknownLocaleError) as e:
        logger.warning("Unknown locale, using default", locale=locale_str, error=str(e))
        return Locale.parse(get_settings().DEFAULT_LOCALE)


def _currency_dict(code: str, country: str, country_code: str, locale: str, language: str = "en") -> dict:
    return {
        "code": code,
        "name": get_currency_name(code, locale=get_babel_locale(language)),
        "symbol": get_currency_symbol(code, locale=locale),
        "country": country,
        "country_code": country_code,
        "locale": locale,
        }


def list_currencies(language: str = "en") -> List[dict]:
    """
    List the supported currencies, the default currency first.

    Args:
        language: Language for currency names (default: 'en')

    Returns:
        List of dicts with 'code', 'name', 'symbol', 'country', 'country_code', 'locale'
    """
    default_code = get_settings().DEFAULT_CURRENCY
    currencies = [_currency_dict(*entry, language=language) for entry in SUPPORTED_CURRENCIES]
    currencies.sort(key=lambda c: c["code"] != default_code)
    return currencies


def get_currency(code: str, language: str = "en") -> Optional[dict]:
    """Supported currency by ISO code (case-insensitive), or None."""
    entry = _BY_CODE.get((code or "").strip().upper())
    if entry is None:
        return None
    return _currency_dict(*entry, language=language)


def normalize_currency(input_str: str, language: str = "en") -> dict:
    """
    Normalize currency input to supported ISO 4217 code(s).

    Accepts:
    - ISO code (USD, EUR, etc.)
    - Currency symbol ($, €, etc.)
    - Localized currency name (Dollar, Euro, etc.)

    Args:
        input_str: Currency identifier in any format
        language: Language for name matching (default: 'en')

    Returns:
        Dict with:
        - query: Original input
        - iso_codes: List of matching ISO codes
        - match_type: 'exact', 'symbol_ambiguous', 'multi-match', 'not_found'
        - error: Error message if any
    """
    if not input_str or not input_str.strip():
        return {"query": input_str, "iso_codes": [], "match_type": "not_found", "error": "Empty input"}

    stripped = input_str.strip()
    code = stripped.upper()

    if code in _BY_CODE:
        return {"query": input_str, "iso_codes": [code], "match_type": "exact", "error": None}

    symbol_key = stripped if stripped in SYMBOL_TO_ISO else code if code in SYMBOL_TO_ISO else None
    if symbol_key is not None:
        candidates = SYMBOL_TO_ISO[symbol_key]
        if len(candidates) == 1:
            return {"query": input_str, "iso_codes": candidates, "match_type": "exact", "error": None}
        return {
            "query": input_str,
            "iso_codes": candidates,
            "match_type": "symbol_ambiguous",
            "error": f"Symbol '{stripped}' matches multiple currencies",
            }

    locale = get_babel_locale(language)
    needle = stripped.lower()
    matches = [
        c for c, *_ in SUPPORTED_CURRENCIES
        if needle in get_currency_name(c, locale=locale).lower()
        ]

    if len(matches) == 1:
        return {"query": input_str, "iso_codes": matches, "match_type": "exact", "error": None}
    if len(matches) > 1:
        return {
            "query": input_str,
            "iso_codes": matches,
            "match_type": "multi-match",
            "error": f"Multiple currencies match '{stripped}'",
            }

    return {
        "query": input_str,
        "iso_codes": [],
        "match_type": "not_found",
        "error": f"No currency found for '{stripped}'",
        }


# ============================================================================
# FORMATTING
# ============================================================================

def format_number(value: Decimal, locale: Optional[str] = None, decimals: int = 2) -> str:
    """
    Format a number with the locale's grouping and exactly `decimals` fraction digits.

    Examples:
        >>> format_number(Decimal("1234567.5"), "en_US")
        '1,234,567.50'
        >>> format_number(Decimal("1234567.5"), "en_IN")
        '12,34,567.50'
    """
    babel_locale = _parse_locale(locale)
    integer_part = babel_locale.decimal_formats.get(None).pattern.split(";")[0].split(".")[0]
    pattern = integer_part + ("." + "0" * decimals if decimals > 0 else "")
    return format_decimal(Decimal(value), format=pattern, locale=babel_locale)


def format_currency(value: Decimal, code: Optional[str] = None, locale: Optional[str] = None, decimals: int = 2) -> str:
    """
    Format an amount as symbol + localized number (e.g. '₹12,34,567.50').

    The symbol is Babel's symbol for the currency in its own display locale.
    The number uses `locale` when given, else the currency's display locale.
    """
    code = (code or get_settings().DEFAULT_CURRENCY).upper()
    entry = _BY_CODE.get(code)
    currency_locale = entry[3] if entry else get_settings().DEFAULT_LOCALE
    symbol = get_currency_symbol(code, locale=currency_locale)
    return f"{symbol}{format_number(value, locale or currency_locale, decimals)}"


def format_percentage(value: Decimal, decimals: int = 2) -> str:
    """Format a percentage value: 7.5 -> '7.50%'."""
    return f"{Decimal(value):.{decimals}f}%"
