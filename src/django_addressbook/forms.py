"""Django Address Book forms.

The forms validate JSON payloads; the workflow in services.py reads
form.errors and form.instance rather than rendering them.
"""
from django import forms
from django.forms.models import model_to_dict

from .models import Address, Contact, Group

CONTACT_FIELDS = [
    'prefix', 'first_name', 'middle_name', 'last_name', 'birthday',
    'work_phone', 'cell_phone', 'email', 'website',
]

# Payload keys use the column names of the main contact and type links
ADDRESS_PAYLOAD_KEYS = {
    'contact1_id': 'primary_contact',
    'contact2_id': 'secondary_contact',
    'address_type_id': 'address_type',
}


class ContactForm(forms.ModelForm):
    """Form for creating/editing a Contact (address handled separately)."""

    class Meta:
        model = Contact
        fields = CONTACT_FIELDS
        widgets = {
            'birthday': forms.DateInput(attrs={'type': 'date'}),
            'website': forms.URLInput(attrs={'placeholder': 'https://example.com'}),
        }

    @classmethod
    def from_payload(cls, payload, instance=None):
        """Bind payload; fields missing from it keep the instance's values."""
        data = model_to_dict(instance, fields=CONTACT_FIELDS) if instance else {}
        data.update({k: v for k, v in (payload or {}).items() if k in CONTACT_FIELDS})
        return cls(data=data, instance=instance)


class AddressForm(forms.ModelForm):
    """Form for an Address payload (address1 ... home_phone, contact1_id, contact2_id, address_type_id)."""

    class Meta:
        model = Address
        fields = [
            'address1', 'address2', 'city', 'state', 'zip', 'home_phone',
            'primary_contact', 'secondary_contact', 'address_type',
        ]
        widgets = {
            'address1': forms.TextInput(attrs={'placeholder': 'Street address'}),
            'address2': forms.TextInput(attrs={'placeholder': 'Apt, suite, unit (optional)'}),
            'zip': forms.TextInput(attrs={'placeholder': '12345'}),
        }

    @classmethod
    def from_payload(cls, payload, instance=None, partial=False):
        """Bind a payload keyed by column names.

        With partial=True, fields missing from the payload keep the instance's values.
        """
        data = {}
        if partial and instance is not None:
            data = model_to_dict(instance, fields=cls._meta.fields)
        for key, value in (payload or {}).items():
            data[ADDRESS_PAYLOAD_KEYS.get(key, key)] = value
        return cls(data=data, instance=instance)


class GroupForm(forms.ModelForm):
    """Form for creating/editing a Group."""

    class Meta:
        model = Group
        fields = ['name', 'addresses']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['addresses'].queryset = Address.objects.eligible_for_group()
        self.fields['addresses'].required = False
