"""
Django Address Book - contacts, shared addresses and address groups.

This package provides:
- Contact: a person in the address book (prefix, names, phones, email, website)
- Address: a postal/phone address shared by up to two main contacts
- AddressType: individual vs. family addresses, driving validation and labels
- Group: named sets of addresses (mailing lists, card lists)

Key Design:
- A Contact points at zero or one Address; an Address may be shared
- The first two linked contacts become the primary/secondary contacts
- The address type is re-derived from the number of main contacts
- Editing a shared address requires choosing between "apply to all" and
  "private copy" (see django_addressbook.services)

Usage:
    # settings.py
    INSTALLED_APPS = [
        ...
        'django_addressbook',
    ]

    # urls.py
    path('addressbook/', include('django_addressbook.urls')),

    # In your code
    from django_addressbook.services import update_contact, AddressSpecification
    from django_addressbook.selectors import get_contact_by_id
"""

__version__ = "0.1.0"
