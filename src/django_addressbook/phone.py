"""Phone number sanitizing and validation.

Numbers are stored in E.164 form when they can be parsed, so that
"(202) 555-1234" and "202.555.1234" compare equal.
"""
import re

import phonenumbers
from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

from django_addressbook.conf import get_phone_region

_FORMATTING_CHARS = re.compile(r'[\s().\-/]')


def _parse(raw: str, region: str | None = None):
    try:
        return phonenumbers.parse(raw, region or get_phone_region())
    except phonenumbers.NumberParseException:
        return None


def sanitize(raw: str | None, region: str | None = None) -> str:
    """Return the E.164 form of the number, or the raw text without formatting.

    Blank input sanitizes to ''.
    """
    if not raw or not str(raw).strip():
        return ''
    raw = str(raw).strip()
    parsed = _parse(raw, region)
    if parsed is not None and phonenumbers.is_valid_number(parsed):
        return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)
    return _FORMATTING_CHARS.sub('', raw)


def is_valid(raw: str | None, region: str | None = None) -> bool:
    """Check whether raw parses to a valid phone number."""
    if not raw or not str(raw).strip():
        return False
    parsed = _parse(str(raw).strip(), region)
    return parsed is not None and phonenumbers.is_valid_number(parsed)


def format_for_display(value: str | None, region: str | None = None) -> str:
    """National format for numbers in the home region, international otherwise."""
    if not value:
        return ''
    parsed = _parse(value, region)
    if parsed is None or not phonenumbers.is_valid_number(parsed):
        return value
    home_region = region or get_phone_region()
    if phonenumbers.region_code_for_number(parsed) == home_region:
        return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.NATIONAL)
    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.INTERNATIONAL)


def validate_phone(value):
    """Model/form field validator for phone numbers."""
    if value and not is_valid(value):
        raise ValidationError(_('is not valid'), code='invalid_phone')
