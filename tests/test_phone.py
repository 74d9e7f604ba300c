"""Tests for phone number sanitizing and validation."""
import pytest
from django.core.exceptions import ValidationError
from django.test import override_settings

from django_addressbook import phone


class TestSanitize:
    """Tests for phone.sanitize()."""

    def test_sanitize_formats_to_e164(self):
        """Valid numbers are stored in E.164 form."""
        assert phone.sanitize('(650) 253-0000') == '+16502530000'

    def test_sanitize_punctuation_variants_agree(self):
        """Differently punctuated spellings of one number sanitize equally."""
        assert phone.sanitize('650.253.0000') == phone.sanitize('650 253 0000')

    def test_sanitize_blank(self):
        """Blank input sanitizes to an empty string."""
        assert phone.sanitize('') == ''
        assert phone.sanitize(None) == ''
        assert phone.sanitize('   ') == ''

    def test_sanitize_unparseable_strips_formatting(self):
        """Numbers that don't validate keep their digits only."""
        assert phone.sanitize('555-1234') == '5551234'

    @override_settings(ADDRESSBOOK_PHONE_REGION='GB')
    def test_sanitize_uses_configured_region(self):
        """National numbers are parsed in ADDRESSBOOK_PHONE_REGION."""
        assert phone.sanitize('020 7031 3000') == '+442070313000'


class TestValidation:
    """Tests for phone.is_valid() and validate_phone()."""

    def test_is_valid(self):
        assert phone.is_valid('(650) 253-0000')
        assert not phone.is_valid('12345')
        assert not phone.is_valid('')

    def test_validate_phone_rejects_invalid(self):
        """validate_phone raises ValidationError for an invalid number."""
        with pytest.raises(ValidationError) as exc_info:
            phone.validate_phone('12345')

        assert exc_info.value.code == 'invalid_phone'

    def test_validate_phone_allows_blank_and_valid(self):
        phone.validate_phone('')
        phone.validate_phone('+1 650 253 0000')


class TestFormatForDisplay:

    def test_home_region_uses_national_format(self):
        assert phone.format_for_display('+16502530000') == '(650) 253-0000'

    def test_foreign_number_uses_international_format(self):
        assert phone.format_for_display('+442070313000') == '+44 20 7031 3000'

    def test_invalid_value_is_returned_unchanged(self):
        assert phone.format_for_display('5551234') == '5551234'
        assert phone.format_for_display('') == ''
