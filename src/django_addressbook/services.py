"""Address book service layer.

All writes that touch the contact/address relationship go through these
functions. The model methods (Contact.assign_address, Address.unlink_contact)
only maintain the links; deciding what happens to an address that lost its
last contact is done here, by release_orphaned_address().

Functions:
- create_contact(): Create a contact, optionally with an address
- update_contact(): Update a contact and resolve its address specification
- change_address(): Apply a staged shared-address edit to all sharers or just one
- remove_address(): Detach a contact from its address
- delete_contact(): Delete a contact and clean up its addresses
- update_address() / delete_address(): Direct address editing
- release_orphaned_address(): Apply the orphan address policy
- stage_address_edit() / consume_staged_edit() / purge_expired_staged_edits()
"""
import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from django.core.exceptions import NON_FIELD_ERRORS, ValidationError
from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext as _

from django_addressbook.conf import (
    POLICY_ARCHIVE,
    POLICY_KEEP_STANDALONE,
    get_orphan_address_policy,
    get_staged_edit_ttl,
)
from django_addressbook.forms import AddressForm, ContactForm
from django_addressbook.models import (
    POSTAL_FIELDS,
    Address,
    AddressType,
    Contact,
    StagedAddressEdit,
)
from django_addressbook.selectors import get_contact_by_id
from django_addressbook.serializers import address_snapshot

logger = logging.getLogger(__name__)

EXISTING_ADDRESS = 'existing_address'
SPECIFIED_ADDRESS = 'specified_address'
NO_ADDRESS = 'none'

INVALID_ADDRESS_MESSAGE = 'Please specify a valid address'


class Outcome:
    """What update_contact()/change_address() did with the address."""

    UNCHANGED = 'unchanged'
    ADDRESS_ASSIGNED = 'address_assigned'
    ADDRESS_UPDATED = 'address_updated'
    CONFIRMATION_REQUIRED = 'confirmation_required'
    STAGED_EDIT_MISSING = 'staged_edit_missing'
    INVALID = 'invalid'


class Release:
    """What release_orphaned_address() did with a contactless address."""

    DELETED = 'deleted'
    ARCHIVED = 'archived'
    KEPT = 'kept'


@dataclass
class AddressSpecification:
    """The address part of a contact payload.

    kind is one of:
    - existing_address: use the address of contact other_contact_id
    - specified_address: build an address from fields
    - none: leave the address alone
    """

    kind: str = NO_ADDRESS
    fields: dict = field(default_factory=dict)
    other_contact_id: Any = None

    @classmethod
    def from_request_data(cls, data: dict) -> 'AddressSpecification':
        kind = data.get('address_specification_type') or NO_ADDRESS
        fields = data.get('address') or {}
        # A home phone alone is enough to specify an address
        if kind not in (EXISTING_ADDRESS, SPECIFIED_ADDRESS):
            kind = SPECIFIED_ADDRESS if str(fields.get('home_phone') or '').strip() else NO_ADDRESS
        return cls(kind=kind, fields=fields, other_contact_id=data.get('other_id'))

    @property
    def assigns_new_object(self) -> bool:
        return self.kind == EXISTING_ADDRESS


@dataclass
class ContactUpdateResult:
    """Result of a contact create/update/change-address request."""

    outcome: str
    contact: Contact
    address: Address | None = None
    errors: dict = field(default_factory=dict)
    address_list: list | None = None
    saved: bool = False
    staged_edit: StagedAddressEdit | None = None


@dataclass
class ContactDeleteResult:
    old_address: dict | None
    address_list: list | None = None


# =============================================================================
# Parsing
# =============================================================================

def _form_errors(form) -> dict:
    return {name: list(messages) for name, messages in form.errors.items()}


def _validation_errors(address) -> dict:
    try:
        address.full_clean()
    except ValidationError as e:
        return e.message_dict
    return {}


def parse_address(spec: AddressSpecification) -> tuple[Address | None, dict]:
    """Turn an address specification into a candidate address.

    Returns:
        (candidate, errors) - candidate is None when the specification names
        no address; errors is empty when the candidate is valid
    """
    if spec.kind == EXISTING_ADDRESS:
        other = get_contact_by_id(spec.other_contact_id)
        if other is None or other.address is None:
            return None, {}
        return other.address, _validation_errors(other.address)

    if spec.kind == SPECIFIED_ADDRESS:
        form = AddressForm.from_payload(spec.fields)
        if form.is_valid():
            return form.instance, {}
        return form.instance, _form_errors(form)

    return None, {}


def restore_address(payload: dict) -> Address:
    """Rebuild a candidate address from a staged snapshot.

    A snapshot of a saved row that still exists returns that row as it is now.
    """
    if payload.get('id'):
        existing = Address.objects.filter(pk=payload['id']).first()
        if existing is not None:
            return existing

    address = Address()

    for name in POSTAL_FIELDS + ('home_phone',):
        setattr(address, name, payload.get(name) or '')
    address.primary_contact = get_contact_by_id(payload.get('contact1_id'))
    address.secondary_contact = get_contact_by_id(payload.get('contact2_id'))
    address_type_id = payload.get('address_type_id')
    address.address_type = (
        AddressType.objects.filter(pk=address_type_id).first() if address_type_id else None
    )
    return address


# =============================================================================
# Orphan policy
# =============================================================================

def release_orphaned_address(address: Address | None) -> str | None:
    """Apply ADDRESSBOOK_ORPHAN_ADDRESS_POLICY to an address with no contacts.

    Returns:
        Release.DELETED / ARCHIVED / KEPT, or None if the address still has contacts
    """
    if address is None or address.pk is None:
        return None
    if address.contacts.exists():
        return None

    policy = get_orphan_address_policy()
    address_id = address.pk
    if policy == POLICY_KEEP_STANDALONE and address.has_standalone_data:
        logger.info("Keeping contactless address %s", address_id)
        return Release.KEPT
    if policy == POLICY_ARCHIVE:
        address.archive()
        logger.info("Archived contactless address %s", address_id)
        return Release.ARCHIVED

    address.delete()
    logger.info("Deleted contactless address %s", address_id)
    return Release.DELETED


def unlink_contact(address: Address, contact: Contact) -> int:
    """Unlink contact from address, then apply the orphan policy.

    Returns:
        int: Number of contacts still linked to the address
    """
    with transaction.atomic():
        remaining = address.unlink_contact(contact)
        if not remaining:
            release_orphaned_address(address)
    return remaining


def remove_contact_from_addresses(contact: Contact) -> list[Address]:
    """Unlink contact from all of its addresses, applying the orphan policy to each."""
    with transaction.atomic():
        addresses = Address.objects.remove_contact(contact)
        for address in addresses:
            release_orphaned_address(address)
    return addresses


# =============================================================================
# Shared address workflow
# =============================================================================

def is_shared(address: Address | None) -> bool:
    return address is not None and address.pk is not None and address.contacts.count() > 1


def _copy_address_fields(source: Address, target: Address):
    """Copy everything but the id from source onto target.

    Main contacts are only taken from source when they live at target;
    otherwise target keeps its own and the gaps are re-derived.
    """
    for name in POSTAL_FIELDS + ('home_phone',):
        setattr(target, name, getattr(source, name))
    if source.address_type_id is not None:
        target.address_type_id = source.address_type_id

    linked_ids = set(target.contacts.values_list('pk', flat=True))
    if source.primary_contact_id in linked_ids:
        target.primary_contact_id = source.primary_contact_id
    if source.secondary_contact_id in linked_ids:
        target.secondary_contact_id = source.secondary_contact_id
    if target.primary_contact_id == target.secondary_contact_id:
        target.secondary_contact = None

    target.derive_primary_secondary_contacts()
    target.save()


def assign_address_to_contact(contact: Contact, candidate: Address, assign_new_object: bool) -> str:
    """Attach candidate to contact, or copy it onto the contact's current address.

    The candidate is attached when the contact has no address yet or
    assign_new_object is set; the replaced address goes through the orphan
    policy. Otherwise the current address is edited in place, which affects
    every contact sharing it.

    Returns:
        Outcome.ADDRESS_ASSIGNED or Outcome.ADDRESS_UPDATED
    """
    current = contact.address
    if current is None or assign_new_object:
        old_address = contact.assign_address(candidate)
        if old_address is not None:
            release_orphaned_address(old_address)
        logger.info("Contact %s now at address %s", contact.pk, candidate.pk)
        return Outcome.ADDRESS_ASSIGNED

    _copy_address_fields(candidate, current)
    logger.info("Updated address %s in place for contact %s", current.pk, contact.pk)
    return Outcome.ADDRESS_UPDATED


def create_contact(contact_data: dict, spec: AddressSpecification) -> ContactUpdateResult:
    """Create a contact; a valid address specification is always attached."""
    form = ContactForm.from_payload(contact_data)
    errors = {} if form.is_valid() else _form_errors(form)
    candidate, address_errors = parse_address(spec)
    if address_errors:
        errors.setdefault(NON_FIELD_ERRORS, []).append(_(INVALID_ADDRESS_MESSAGE))
        errors['address'] = address_errors

    if errors:
        return ContactUpdateResult(
            outcome=Outcome.INVALID, contact=form.instance, address=candidate, errors=errors,
        )

    with transaction.atomic():
        contact = form.save()
        outcome = Outcome.UNCHANGED
        if candidate is not None:
            contact.assign_address(candidate)
            outcome = Outcome.ADDRESS_ASSIGNED

    logger.info("Created contact %s", contact.pk)
    return ContactUpdateResult(
        outcome=outcome,
        contact=contact,
        address=contact.address,
        address_list=list(Address.objects.find_for_list()) if candidate is not None else None,
        saved=True,
    )


def update_contact(
    contact: Contact,
    contact_data: dict,
    spec: AddressSpecification,
    session_key: str | None = None,
) -> ContactUpdateResult:
    """Update a contact and decide what its address specification means.

    - no candidate, or same as the current address: address untouched
    - current address shared by several contacts: the candidate is staged and
      Outcome.CONFIRMATION_REQUIRED is returned; finish with change_address()
    - otherwise see assign_address_to_contact()

    Nothing is saved when the contact or the address payload is invalid.
    """
    form = ContactForm.from_payload(contact_data, instance=contact)
    errors = {} if form.is_valid() else _form_errors(form)
    candidate, address_errors = parse_address(spec)
    if address_errors:
        errors.setdefault(NON_FIELD_ERRORS, []).append(_(INVALID_ADDRESS_MESSAGE))
        errors['address'] = address_errors

    if errors:
        return ContactUpdateResult(
            outcome=Outcome.INVALID, contact=contact, address=candidate, errors=errors,
        )

    outcome = Outcome.UNCHANGED
    staged = None
    with transaction.atomic():
        contact = form.save()
        if candidate is not None and candidate.different_from(contact.address):
            if is_shared(contact.address):
                if not session_key:
                    raise ValueError("session_key is required to stage a shared address edit")
                staged = stage_address_edit(session_key, contact, candidate)
                outcome = Outcome.CONFIRMATION_REQUIRED
            else:
                outcome = assign_address_to_contact(contact, candidate, spec.assigns_new_object)

    if outcome == Outcome.CONFIRMATION_REQUIRED:
        address = candidate
    else:
        address = contact.address
    return ContactUpdateResult(
        outcome=outcome,
        contact=contact,
        address=address,
        address_list=(
            list(Address.objects.find_for_list())
            if outcome == Outcome.ADDRESS_ASSIGNED else None
        ),
        saved=True,
        staged_edit=staged,
    )


def change_address(contact: Contact, session_key: str, apply_to_all: bool) -> ContactUpdateResult:
    """Resolve a staged shared-address edit.

    apply_to_all=True edits the shared address in place for every sharer;
    False gives contact its own copy and leaves the shared address alone.
    """
    payload = consume_staged_edit(session_key, contact)
    if payload is None:
        return ContactUpdateResult(
            outcome=Outcome.STAGED_EDIT_MISSING, contact=contact, address=contact.address,
        )

    with transaction.atomic():
        candidate = restore_address(payload)
        outcome = assign_address_to_contact(contact, candidate, assign_new_object=not apply_to_all)

    contact.refresh_from_db()
    return ContactUpdateResult(
        outcome=outcome,
        contact=contact,
        address=contact.address,
        address_list=(
            list(Address.objects.find_for_list())
            if outcome == Outcome.ADDRESS_ASSIGNED else None
        ),
        saved=True,
    )


def remove_address(contact: Contact) -> int | None:
    """Detach contact from its address.

    Returns:
        The id of the old address, or None if the contact had none
    """
    with transaction.atomic():
        old_address = contact.address
        old_address_id = contact.remove_address()
        if old_address is not None:
            release_orphaned_address(old_address)
    return old_address_id


def delete_contact(contact: Contact) -> ContactDeleteResult:
    """Delete contact; its addresses are unlinked and released first."""
    old_address = address_snapshot(contact.address) if contact.address_id else None
    with transaction.atomic():
        addresses = remove_contact_from_addresses(contact)
        contact_id = contact.pk
        contact.delete()
    logger.info("Deleted contact %s", contact_id)
    return ContactDeleteResult(
        old_address=old_address,
        address_list=list(Address.objects.find_for_list()) if addresses else None,
    )


# =============================================================================
# Direct address editing
# =============================================================================

def update_address(address: Address, data: dict) -> dict:
    """Update address fields from a payload.

    Returns:
        Field errors; empty when the address was saved
    """
    form = AddressForm.from_payload(data, instance=address, partial=True)
    if not form.is_valid():
        return _form_errors(form)
    form.save()
    return {}


def delete_address(address: Address) -> None:
    """Delete an address; its contacts are left without one."""
    address_id = address.pk
    with transaction.atomic():
        address.delete()
    logger.info("Deleted address %s", address_id)


# =============================================================================
# Staged edits
# =============================================================================

def stage_address_edit(session_key: str, contact: Contact, candidate: Address) -> StagedAddressEdit:
    """Hold candidate for session_key until change_address() consumes it.

    Staging again from the same session replaces the previous edit.
    """
    staged, _created = StagedAddressEdit.objects.update_or_create(
        session_key=session_key,
        defaults={
            'contact': contact,
            'payload': address_snapshot(candidate),
            'expires_at': timezone.now() + timedelta(seconds=get_staged_edit_ttl()),
        },
    )
    logger.info(
        "Staged shared address edit for contact %s (address %s)",
        contact.pk, contact.address_id,
    )
    return staged


def consume_staged_edit(session_key: str, contact: Contact | None = None) -> dict | None:
    """Remove and return the staged snapshot for session_key.

    With contact, only an edit staged for that contact is consumed; an edit
    staged for someone else stays in place. Returns None when nothing matches
    or the edit expired.
    """
    if not session_key:
        return None
    with transaction.atomic():
        queryset = StagedAddressEdit.objects.select_for_update().filter(session_key=session_key)
        if contact is not None:
            queryset = queryset.filter(contact=contact)
        staged = queryset.first()
        if staged is None:
            return None
        staged.delete()
    if staged.is_expired:
        logger.info("Discarded expired staged address edit for session %s", session_key)
        return None
    return staged.payload


def purge_expired_staged_edits(now=None) -> int:
    """Delete staged edits past their expiry. Returns the number deleted."""
    deleted, _details = StagedAddressEdit.objects.filter(
        expires_at__lte=now or timezone.now()
    ).delete()
    return deleted
