"""
Localization helpers.

Resolves user-supplied language codes to Babel locales used for currency
names, with fallback to English.
"""

import structlog
from babel import Locale, UnknownLocaleError

logger = structlog.get_logger(__name__)


def get_babel_locale(language: str) -> Locale:
    """
    Get a Babel Locale for a language code, falling back to English.

    Examples:
        >>> get_babel_locale('it').language
        'it'
        >>> get_babel_locale('xx_invalid').language
        'en'
    """
    try:
        return Locale.parse(language.replace("-", "_"))
    except (ValueError, TypeError, UnknownLocaleError) as e:
        logger.warning("Language not supported, falling back to English", language=language, error=str(e))
        return Locale.parse('en')
