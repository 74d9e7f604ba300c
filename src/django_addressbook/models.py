"""
Django Address Book models.

This module provides:
- AddressType: individual vs. family addresses (reference data)
- Address: postal/phone data shared by up to two main contacts
- Contact: a person in the address book, pointing at zero or one Address
- Group: a named set of addresses
- StagedAddressEdit: a pending shared-address edit awaiting confirmation

Key Design:
- Contact.address is the link; Address.contacts is the full set of sharers
- Address.primary_contact / secondary_contact are the (at most two) main
  contacts, re-derived from the contact set after every link/unlink
- The address type follows the number of main contacts (one: individual,
  two: family)
- Unlinking never deletes an address; what happens to one that lost its last
  contact is decided by django_addressbook.services.release_orphaned_address,
  which Contact.delete() also applies
"""
from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator
from django.db import models, transaction
from django.db.models import F, Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from django_addressbook import phone
from django_addressbook.base import ArchivableManager, ArchivableModel, TimeStampedModel
from django_addressbook.formatting import DISPLAY, LABEL, format_addressee
from django_addressbook.states import US_STATES

zip_validator = RegexValidator(
    regex=r'^\d{5}(-\d{4})?$',
    message=_('is invalid'),
    code='invalid_zip',
)

POSTAL_FIELDS = ('address1', 'address2', 'city', 'state', 'zip')


# =============================================================================
# AddressType - reference data
# =============================================================================

class AddressType(TimeStampedModel):
    """Classifies an address as having one (individual) or two (family) main contacts."""

    class Kind(models.TextChoices):
        INDIVIDUAL = 'individual', _('Individual')
        FAMILY = 'family', _('Family')

    name = models.CharField(_('name'), max_length=50, unique=True)
    kind = models.CharField(
        _('kind'),
        max_length=20,
        choices=Kind.choices,
        default=Kind.INDIVIDUAL,
    )
    only_one_main_contact = models.BooleanField(_('only one main contact'), default=True)

    class Meta:
        verbose_name = _('address type')
        verbose_name_plural = _('address types')
        ordering = ['name']

    def __str__(self):
        return self.name

    @classmethod
    def _canonical(cls, kind, name, only_one_main_contact):
        address_type = cls.objects.filter(kind=kind).order_by('pk').first()
        if address_type is None:
            address_type = cls.objects.create(
                name=name,
                kind=kind,
                only_one_main_contact=only_one_main_contact,
            )
        return address_type

    @classmethod
    def individual(cls):
        return cls._canonical(cls.Kind.INDIVIDUAL, 'Individual', True)

    @classmethod
    def family(cls):
        return cls._canonical(cls.Kind.FAMILY, 'Family', False)

    def format_address_for_label(self, address):
        return format_addressee(self.kind, LABEL, address.main_contacts)

    def format_address_for_display(self, address):
        return format_addressee(self.kind, DISPLAY, address.main_contacts)


# =============================================================================
# Address - shared postal/phone record
# =============================================================================

class AddressManager(ArchivableManager):

    def find_for_list(self):
        """All addresses sorted by primary contact (last, first); no primary sorts last."""
        return self.select_related(
            'primary_contact', 'secondary_contact', 'address_type'
        ).order_by(
            F('primary_contact__last_name').asc(nulls_last=True),
            F('primary_contact__first_name').asc(nulls_last=True),
            'pk',
        )

    def eligible_for_group(self):
        """Addresses with a street line; phone-only addresses can't be mailed to."""
        return self.exclude(address1='')

    def remove_contact(self, contact):
        """Unlink contact from every address it is a main contact of or linked to.

        Returns the affected addresses so the caller can apply the orphan policy.
        """
        addresses = list(
            self.filter(
                Q(primary_contact=contact) | Q(secondary_contact=contact) | Q(contacts=contact)
            ).distinct()
        )
        for address in addresses:
            address.unlink_contact(contact)
        return addresses


class Address(ArchivableModel):
    """A postal address and/or home phone shared by one or more contacts."""

    address1 = models.CharField(_('address line 1'), max_length=255, blank=True)
    address2 = models.CharField(_('address line 2'), max_length=255, blank=True)
    city = models.CharField(_('city'), max_length=100, blank=True)
    state = models.CharField(_('state'), max_length=2, choices=US_STATES, blank=True)
    zip = models.CharField(_('zip'), max_length=10, blank=True, validators=[zip_validator])
    home_phone = models.CharField(
        _('home phone'),
        max_length=30,
        blank=True,
        validators=[phone.validate_phone],
    )

    address_type = models.ForeignKey(
        AddressType,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name='addresses',
        verbose_name=_('address type'),
    )
    primary_contact = models.ForeignKey(
        'Contact',
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        db_column='contact1_id',
        related_name='primary_for_addresses',
        verbose_name=_('primary contact'),
    )
    secondary_contact = models.ForeignKey(
        'Contact',
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        db_column='contact2_id',
        related_name='secondary_for_addresses',
        verbose_name=_('secondary contact'),
    )

    objects = AddressManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = _('address')
        verbose_name_plural = _('addresses')
        ordering = ['pk']

    def __str__(self):
        if not self.is_street_address_empty:
            return self.mailing_address
        return self.home_phone or f'Address #{self.pk}'

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def clean(self):
        super().clean()
        errors = []

        if not self.home_phone and self.is_street_address_empty:
            errors.append(_('You must specify a phone number or a full address'))

        street_parts = [self.address1, self.city, self.zip]
        if any(street_parts) and not all(street_parts):
            errors.append(_('You must specify a valid address'))

        if (
            self.primary_contact_id is not None
            and self.primary_contact_id == self.secondary_contact_id
        ):
            errors.append(_('The primary and secondary contacts must be different'))

        if (
            self.secondary_contact_id is None
            and self.address_type is not None
            and not self.address_type.only_one_main_contact
        ):
            errors.append(
                _('This address type requires primary and secondary contacts be specified')
            )

        if errors:
            raise ValidationError(errors)

    def save(self, *args, **kwargs):
        self.home_phone = phone.sanitize(self.home_phone)
        if self.address_type is not None and self.address_type.only_one_main_contact:
            self.secondary_contact = None
        super().save(*args, **kwargs)

    def archive(self):
        self.groups.clear()
        super().archive()

    # -------------------------------------------------------------------------
    # Contact links
    # -------------------------------------------------------------------------

    def link_contact(self):
        """Re-derive main contacts after a contact started pointing here."""
        self.adjust_primary_secondary_contacts()

    def unlink_contact(self, contact):
        """Detach contact from this address and re-derive the main contacts.

        Returns:
            int: Number of contacts still linked to this address
        """
        if self.primary_contact_id == contact.pk:
            self.primary_contact = None
        if self.secondary_contact_id == contact.pk:
            self.secondary_contact = None

        self.contacts.filter(pk=contact.pk).update(address=None)
        if contact.address_id == self.pk:
            contact.address = None

        self.save()
        remaining = self.contacts.count()
        if remaining:
            self.adjust_primary_secondary_contacts()
        return remaining

    def derive_primary_secondary_contacts(self):
        """Fill the main contact slots from the first two linked contacts (by id).

        Main contacts that are not linked to this address are dropped first.
        Only updates the instance; adjust_primary_secondary_contacts() also saves.
        """
        linked_ids = set(self.contacts.values_list('pk', flat=True)) if self.pk else set()
        if self.primary_contact_id not in linked_ids:
            self.primary_contact = None
        if self.secondary_contact_id not in linked_ids:
            self.secondary_contact = None

        candidates = list(self.contacts.order_by('pk')[:2]) if self.pk else []
        first = candidates[0] if candidates else None
        second = candidates[1] if len(candidates) > 1 else None

        if first is None:
            self.primary_contact = None
        elif self.primary_contact_id is None:
            self.primary_contact = first

        if second is None:
            self.secondary_contact = None
        elif self.secondary_contact_id is None:
            self.secondary_contact = second

        if (
            self.primary_contact_id is not None
            and self.primary_contact_id == self.secondary_contact_id
        ):
            if self.primary_contact_id == first.pk:
                self.secondary_contact = second
            else:
                self.secondary_contact = first

        if self.primary_contact_id is not None and self.secondary_contact_id is None:
            self.address_type = AddressType.individual()
        elif self.primary_contact_id is not None and self.secondary_contact_id is not None:
            self.address_type = AddressType.family()

    def adjust_primary_secondary_contacts(self):
        self.derive_primary_secondary_contacts()
        self.save()

    @property
    def main_contacts(self):
        return [c for c in (self.primary_contact, self.secondary_contact) if c is not None]

    def only_has_one_contact(self):
        return self.pk is not None and self.contacts.count() == 1

    # -------------------------------------------------------------------------
    # Formatting
    # -------------------------------------------------------------------------

    @property
    def addressee(self):
        """Addressee line for mailing labels."""
        return self._format_addressee(LABEL)

    @property
    def addressee_for_display(self):
        """Addressee line for on-screen lists."""
        return self._format_addressee(DISPLAY)

    def _format_addressee(self, purpose):
        contacts = self.main_contacts
        if not contacts:
            return self._format_without_contacts()
        if self.address_type is not None:
            if purpose == LABEL:
                return self.address_type.format_address_for_label(self)
            return self.address_type.format_address_for_display(self)
        kind = AddressType.Kind.FAMILY if len(contacts) == 2 else AddressType.Kind.INDIVIDUAL
        return format_addressee(kind, purpose, contacts)

    def _format_without_contacts(self):
        if self.address1:
            street = self.address1
            if self.address2:
                street = f'{street} {self.address2}'
            return f'{street}, {self.city}, {self.state} {self.zip}'
        return phone.format_for_display(self.home_phone)

    @property
    def mailing_address(self):
        parts = [self.address1]
        if self.address2:
            parts.append(self.address2)
        parts.append(f'{self.city}, {self.state} {self.zip}')
        return ', '.join(parts)

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def different_from(self, other):
        """True if other is None or any postal field or the phone differs."""
        if other is None:
            return True
        for field in POSTAL_FIELDS:
            if (getattr(self, field) or '') != (getattr(other, field) or ''):
                return True
        return phone.sanitize(self.home_phone) != phone.sanitize(other.home_phone)

    def compare_by_primary_contact(self, other):
        """Three-way comparison by primary contact name; no primary sorts last."""
        if other is None:
            return -1
        if not isinstance(other, Address):
            raise TypeError(f'Cannot compare Address with {type(other).__name__}')

        mine, theirs = self.primary_contact, other.primary_contact
        if mine is not None and theirs is None:
            return -1
        if mine is None and theirs is not None:
            return 1
        if mine is None and theirs is None:
            return 0

        left = f'{mine.last_name}{mine.first_name}'
        right = f'{theirs.last_name}{theirs.first_name}'
        return (left > right) - (left < right)

    @property
    def is_street_address_empty(self):
        return not all([self.address1, self.city, self.state, self.zip])

    @property
    def is_address_empty(self):
        return self.pk is None or self.is_street_address_empty

    @property
    def is_empty(self):
        return self.is_address_empty and not self.home_phone

    @property
    def has_standalone_data(self):
        """Whether the address is worth keeping without any contact."""
        return bool(self.home_phone) or not self.is_street_address_empty


# =============================================================================
# Contact
# =============================================================================

class Contact(TimeStampedModel):
    """A person in the address book."""

    prefix = models.CharField(_('prefix'), max_length=20, blank=True)
    first_name = models.CharField(_('first name'), max_length=150, blank=True)
    middle_name = models.CharField(_('middle name'), max_length=150, blank=True)
    last_name = models.CharField(_('last name'), max_length=150)
    birthday = models.DateField(_('birthday'), null=True, blank=True)
    work_phone = models.CharField(
        _('work phone'), max_length=30, blank=True, validators=[phone.validate_phone]
    )
    cell_phone = models.CharField(
        _('cell phone'), max_length=30, blank=True, validators=[phone.validate_phone]
    )
    email = models.EmailField(_('email'), blank=True)
    website = models.URLField(_('website'), blank=True)

    address = models.ForeignKey(
        Address,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='contacts',
        verbose_name=_('address'),
    )

    class Meta:
        verbose_name = _('contact')
        verbose_name_plural = _('contacts')
        ordering = ['last_name', 'first_name', 'pk']

    def __str__(self):
        return self.full_name

    @property
    def full_name(self):
        parts = [self.first_name, self.middle_name, self.last_name]
        return ' '.join(part for part in parts if part)

    @property
    def sort_name(self):
        if self.first_name:
            return f'{self.last_name}, {self.first_name}'
        return self.last_name

    def save(self, *args, **kwargs):
        self.work_phone = phone.sanitize(self.work_phone)
        self.cell_phone = phone.sanitize(self.cell_phone)
        super().save(*args, **kwargs)

    def assign_address(self, new_address):
        """Point this contact at new_address, saving it first if needed.

        The previous address is unlinked but never deleted here.

        Returns:
            The previous Address if it was replaced, otherwise None
        """
        old_address = self.address
        if new_address.pk is None:
            new_address.save()

        self.address = new_address
        if self.pk is None:
            self.save()
        else:
            self.save(update_fields=['address', 'updated_at'])
        new_address.link_contact()

        if old_address is not None and old_address.pk != new_address.pk:
            old_address.unlink_contact(self)
            return old_address
        return None

    def remove_address(self):
        """Detach this contact from its address.

        Returns:
            The id of the removed address, or None if there was none
        """
        old_address = self.address
        if old_address is None:
            return None
        old_address.unlink_contact(self)
        return old_address.pk

    def delete(self, *args, **kwargs):
        """Unlink from every address, applying the orphan address policy, then delete."""
        from django_addressbook.services import remove_contact_from_addresses

        with transaction.atomic():
            remove_contact_from_addresses(self)
            return super().delete(*args, **kwargs)


# =============================================================================
# Group
# =============================================================================

class Group(TimeStampedModel):
    """A named set of addresses, e.g. a holiday card list."""

    name = models.CharField(_('name'), max_length=100, unique=True)
    addresses = models.ManyToManyField(
        Address,
        blank=True,
        related_name='groups',
        verbose_name=_('addresses'),
    )

    class Meta:
        verbose_name = _('group')
        verbose_name_plural = _('groups')
        ordering = ['name']

    def __str__(self):
        return self.name

    def add_address(self, address):
        """Add address to the group. Returns False for addresses without a street."""
        if not address.address1:
            return False
        self.addresses.add(address)
        return True

    def remove_address(self, address):
        self.addresses.remove(address)

    def labels(self):
        """Mailing labels (addressee + mailing address) for every member address."""
        members = Address.objects.find_for_list().filter(groups=self)
        return [
            {'addressee': address.addressee, 'mailing_address': address.mailing_address}
            for address in members
        ]


# =============================================================================
# StagedAddressEdit - pending shared-address edit
# =============================================================================

class StagedAddressEdit(models.Model):
    """A candidate address edit held until the user picks "all" or "just me".

    One row per session; staging again replaces it. Rows are deleted when
    consumed, and expired rows are removed by cleanup_staged_address_edits.
    """

    session_key = models.CharField(max_length=40, unique=True)
    contact = models.ForeignKey(
        Contact,
        on_delete=models.CASCADE,
        related_name='staged_address_edits',
    )
    payload = models.JSONField(help_text="Snapshot of the candidate address fields")
    created_at = models.DateTimeField(auto_now_add=True)
    expires_at = models.DateTimeField()

    class Meta:
        indexes = [
            models.Index(fields=['expires_at'], name='addressbook_staged_expires_idx'),
        ]

    def __str__(self):
        return f"{self.session_key} -> contact {self.contact_id}"

    @property
    def is_expired(self):
        return self.expires_at <= timezone.now()
