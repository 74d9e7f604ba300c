"""Tests for addressee formatting."""
import pytest

from django_addressbook.formatting import (
    DISPLAY,
    LABEL,
    family_display,
    family_label,
    format_addressee,
    individual_display,
    individual_label,
)


def make_contact(first_name='', last_name='', prefix=''):
    from django_addressbook.models import Contact
    return Contact(prefix=prefix, first_name=first_name, last_name=last_name)


class TestIndividualFormatters:

    def test_label_includes_prefix(self):
        """Individual label is "prefix first last"."""
        contact = make_contact('John', 'Smith', prefix='Dr.')
        assert individual_label([contact]) == 'Dr. John Smith'

    def test_display_is_last_comma_first(self):
        contact = make_contact('John', 'Smith')
        assert individual_display([contact]) == 'Smith, John'

    def test_display_without_first_name(self):
        contact = make_contact(last_name='Smith')
        assert individual_display([contact]) == 'Smith'


class TestFamilyFormatters:

    def test_label_same_last_name(self):
        """A shared last name is written once."""
        contacts = [make_contact('John', 'Smith'), make_contact('Jane', 'Smith')]
        assert family_label(contacts) == 'John & Jane Smith'

    def test_label_different_last_names(self):
        contacts = [make_contact('John', 'Smith'), make_contact('Jane', 'Doe')]
        assert family_label(contacts) == 'John Smith & Jane Doe'

    def test_display_same_last_name(self):
        contacts = [make_contact('John', 'Smith'), make_contact('Jane', 'Smith')]
        assert family_display(contacts) == 'Smith, John & Jane'

    def test_display_different_last_names(self):
        contacts = [make_contact('John', 'Smith'), make_contact('Jane', 'Doe')]
        assert family_display(contacts) == 'Smith, John & Doe, Jane'

    def test_single_contact_falls_back_to_individual(self):
        """Family formatters with one main contact behave like individual ones."""
        contacts = [make_contact('John', 'Smith')]
        assert family_label(contacts) == 'John Smith'
        assert family_display(contacts) == 'Smith, John'


class TestFormatAddressee:

    def test_dispatches_on_kind_and_purpose(self):
        contacts = [make_contact('John', 'Smith'), make_contact('Jane', 'Smith')]
        assert format_addressee('family', LABEL, contacts) == 'John & Jane Smith'
        assert format_addressee('individual', DISPLAY, contacts) == 'Smith, John'

    def test_unknown_kind_raises(self):
        with pytest.raises(KeyError):
            format_addressee('business', LABEL, [make_contact('John', 'Smith')])
