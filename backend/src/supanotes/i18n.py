"""
Page translations.

The request locale comes from ``Accept-Language``, negotiated against the
catalogues shipped in ``locales/<locale>/LC_MESSAGES/messages.po``. English
is the source language, so it has no catalogue and falls through to the
message ids.

Catalogues are read with Babel and compiled in memory on first use:

    pybabel extract -F babel.cfg -o messages.pot .
    pybabel update -i messages.pot -d backend/src/supanotes/locales
"""

import logging
from functools import lru_cache
from io import BytesIO
from pathlib import Path
from typing import List, Optional

from babel.core import negotiate_locale
from babel.messages.mofile import write_mo
from babel.messages.pofile import read_po
from babel.support import NullTranslations, Translations

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"
SUPPORTED_LOCALES = ("en", "fr")
LOCALES_DIR = Path(__file__).parent / "locales"
DOMAIN = "messages"


def N_(message: str) -> str:
    """Mark a message for extraction; it is translated when rendered."""
    return message


def parse_accept_language(header: Optional[str]) -> List[str]:
    """Language tags from an Accept-Language header, best first.

    Entries with ``q=0`` and the ``*`` wildcard are dropped.
    """
    weighted = []
    for index, part in enumerate((header or "").split(",")):
        tag, _, params = part.partition(";")
        tag = tag.strip()
        if not tag or tag == "*":
            continue

        quality = 1.0
        params = params.strip().replace(" ", "")
        if params.startswith("q="):
            try:
                quality = float(params[2:])
            except ValueError:
                quality = 0.0
        if quality > 0:
            weighted.append((-quality, index, tag))

    return [tag for _, _, tag in sorted(weighted)]


def get_locale(accept_language: Optional[str]) -> str:
    """Best supported locale for the header, DEFAULT_LOCALE when none match."""
    locale = negotiate_locale(parse_accept_language(accept_language), SUPPORTED_LOCALES, sep="-")
    if locale and locale.lower() in SUPPORTED_LOCALES:
        return locale.lower()
    return DEFAULT_LOCALE


@lru_cache(maxsize=None)
def get_translations(locale: str) -> NullTranslations:
    """Compiled catalogue for a locale."""
    po_path = LOCALES_DIR / locale / "LC_MESSAGES" / f"{DOMAIN}.po"
    if not po_path.is_file():
        return NullTranslations()

    with po_path.open("rb") as po_file:
        catalog = read_po(po_file, locale=locale, domain=DOMAIN)

    buffer = BytesIO()
    write_mo(buffer, catalog)
    buffer.seek(0)
    logger.debug(f"Loaded {len(catalog)} messages for locale {locale}")
    return Translations(buffer, domain=DOMAIN)
