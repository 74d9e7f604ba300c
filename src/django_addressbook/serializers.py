"""Model to JSON-ready dict conversion for the address book API."""

from django_addressbook import phone

# Staged edit snapshot keys, in column naming
ADDRESS_SNAPSHOT_FIELDS = (
    'id', 'address1', 'address2', 'city', 'state', 'zip', 'home_phone',
    'contact1_id', 'contact2_id', 'address_type_id',
)


def address_snapshot(address) -> dict:
    """Serialize the field values of a (possibly unsaved) Address."""
    return {
        'id': address.pk,
        'address1': address.address1,
        'address2': address.address2,
        'city': address.city,
        'state': address.state,
        'zip': address.zip,
        'home_phone': address.home_phone,
        'contact1_id': address.primary_contact_id,
        'contact2_id': address.secondary_contact_id,
        'address_type_id': address.address_type_id,
    }


def contact_to_dict(contact) -> dict:
    return {
        'id': contact.pk,
        'prefix': contact.prefix,
        'first_name': contact.first_name,
        'middle_name': contact.middle_name,
        'last_name': contact.last_name,
        'full_name': contact.full_name,
        'birthday': contact.birthday.isoformat() if contact.birthday else None,
        'work_phone': phone.format_for_display(contact.work_phone),
        'cell_phone': phone.format_for_display(contact.cell_phone),
        'email': contact.email,
        'website': contact.website,
        'address_id': contact.address_id,
    }


def address_to_dict(address) -> dict:
    data = address_snapshot(address)
    data.update({
        'home_phone_display': phone.format_for_display(address.home_phone),
        'address_type': address.address_type.name if address.address_type_id else None,
        'addressee': address.addressee,
        'addressee_for_display': address.addressee_for_display,
        'group_ids': sorted(address.groups.values_list('pk', flat=True)) if address.pk else [],
    })
    return data


def address_list_to_dicts(addresses) -> list[dict]:
    """Compact entries for the sorted address list."""
    return [
        {
            'id': address.pk,
            'addressee_for_display': address.addressee_for_display,
            'contact1_id': address.primary_contact_id,
            'contact2_id': address.secondary_contact_id,
        }
        for address in addresses
    ]


def group_to_dict(group) -> dict:
    return {
        'id': group.pk,
        'name': group.name,
        'address_ids': sorted(group.addresses.values_list('pk', flat=True)),
        'labels': group.labels(),
    }
