"""Text helpers shared by the exporters: download filenames and phone numbers."""
import re
from datetime import date
from typing import Optional

from nutriplan.utilities.config import PHONE_COUNTRY_CODE
from nutriplan.utilities.constants import FILENAME_DATE_FORMAT

_UNSAFE_FILENAME_CHARS = re.compile(r'[^a-zA-Z0-9áéíóúñÁÉÍÓÚÑ\s]')
_WHITESPACE_RUN = re.compile(r'\s+')
_NON_DIGITS = re.compile(r'\D')

__all__ = ["sanitize_filename", "underscore_spaces", "export_filename", "normalize_phone"]


def sanitize_filename(name: str) -> str:
    """Drop everything but ASCII alphanumerics, Spanish accented letters and spaces,
    then turn each whitespace run into a single underscore.

    >>> sanitize_filename("Plan de Pérdida de Peso")
    'Plan_de_Pérdida_de_Peso'
    """
    cleaned = _UNSAFE_FILENAME_CHARS.sub('', name or '')
    return underscore_spaces(cleaned)


def underscore_spaces(text: str) -> str:
    return _WHITESPACE_RUN.sub('_', text or '')


def export_filename(name: str, ext: str, on: Optional[date] = None, prefix: str = "", suffix: str = "") -> str:
    """Build `<prefix><sanitized-name><suffix>_<YYYY-MM-DD>.<ext>`."""
    day = (on or date.today()).strftime(FILENAME_DATE_FORMAT)
    return f"{prefix}{sanitize_filename(name)}{suffix}_{day}.{ext.lstrip('.')}"


def normalize_phone(raw: Optional[str], country_code: str = PHONE_COUNTRY_CODE) -> Optional[str]:
    """Normalize a local or international number to the digits-only E.164 form wa.me expects.

    Returns None when no digits remain.
    """
    if not raw:
        return None
    digits = _NON_DIGITS.sub('', raw)
    if not digits:
        return None
    if digits.startswith('0'):
        return country_code + digits[1:]
    if not digits.startswith(country_code):
        return country_code + digits
    return digits
