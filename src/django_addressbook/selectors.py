"""
Django Address Book Selectors - read-only queries.

Lookups by id return None when nothing matches; callers treat a missing
contact or address as a valid "new" state.

Usage:
    from django_addressbook.selectors import get_contact_by_id, get_address_list
"""
from django.db.models import QuerySet

from django_addressbook.models import Address, AddressType, Contact, Group


# =============================================================================
# CONTACT SELECTORS
# =============================================================================

def get_contact_by_id(contact_id) -> Contact | None:
    """Get a contact by ID, or None if not found."""
    if contact_id in (None, ''):
        return None
    try:
        return Contact.objects.select_related('address').filter(pk=contact_id).first()
    except (TypeError, ValueError):
        return None


def get_contact_list() -> QuerySet[Contact]:
    """All contacts ordered by last name, first name."""
    return Contact.objects.order_by('last_name', 'first_name', 'pk')


def find_contacts_by_last_name(last_name: str) -> QuerySet[Contact]:
    """Contacts whose last name starts with last_name, case-insensitively."""
    return Contact.objects.filter(
        last_name__istartswith=(last_name or '').strip()
    ).order_by('last_name', 'first_name', 'pk')


# =============================================================================
# ADDRESS SELECTORS
# =============================================================================

def get_address_by_id(address_id) -> Address | None:
    """Get an address by ID, or None if not found."""
    if address_id in (None, ''):
        return None
    try:
        return Address.objects.select_related(
            'primary_contact', 'secondary_contact', 'address_type'
        ).filter(pk=address_id).first()
    except (TypeError, ValueError):
        return None


def get_address_list() -> QuerySet[Address]:
    """All addresses sorted for the address list."""
    return Address.objects.find_for_list()


def get_address_for_contact(contact_id) -> Address | None:
    """The address the contact points at, or None."""
    contact = get_contact_by_id(contact_id)
    return contact.address if contact else None


def get_address_types() -> QuerySet[AddressType]:
    return AddressType.objects.order_by('name')


# =============================================================================
# GROUP SELECTORS
# =============================================================================

def get_group_by_id(group_id) -> Group | None:
    """Get a group by ID, or None if not found."""
    if group_id in (None, ''):
        return None
    return Group.objects.filter(pk=group_id).first()


def get_group_list() -> QuerySet[Group]:
    return Group.objects.prefetch_related('addresses').order_by('name')
