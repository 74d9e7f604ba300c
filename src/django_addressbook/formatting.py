"""Addressee formatting per address type.

Each address type kind maps to one formatter per purpose:
- label: the addressee line printed on an envelope ("John & Jane Smith")
- display: the on-screen list entry, sorted by last name ("Smith, John & Jane")

Formatters receive the main contacts of an address (primary first, one or two
entries) and return a string.
"""
from typing import Callable, Sequence

LABEL = 'label'
DISPLAY = 'display'


def _label_name(contact) -> str:
    parts = [contact.prefix, contact.first_name, contact.last_name]
    return ' '.join(part for part in parts if part)


def _display_name(contact) -> str:
    if contact.last_name and contact.first_name:
        return f'{contact.last_name}, {contact.first_name}'
    return contact.last_name or contact.first_name


def individual_label(contacts: Sequence) -> str:
    return _label_name(contacts[0])


def individual_display(contacts: Sequence) -> str:
    return _display_name(contacts[0])


def family_label(contacts: Sequence) -> str:
    if len(contacts) < 2:
        return individual_label(contacts)
    first, second = contacts[0], contacts[1]
    if first.last_name == second.last_name:
        return f'{first.first_name} & {second.first_name} {first.last_name}'.strip()
    return f'{_label_name(first)} & {_label_name(second)}'


def family_display(contacts: Sequence) -> str:
    if len(contacts) < 2:
        return individual_display(contacts)
    first, second = contacts[0], contacts[1]
    if first.last_name == second.last_name:
        return f'{_display_name(first)} & {second.first_name}'
    return f'{_display_name(first)} & {_display_name(second)}'


FORMATTERS: dict[tuple[str, str], Callable[[Sequence], str]] = {
    ('individual', LABEL): individual_label,
    ('individual', DISPLAY): individual_display,
    ('family', LABEL): family_label,
    ('family', DISPLAY): family_display,
}


def format_addressee(kind: str, purpose: str, contacts: Sequence) -> str:
    """Format the main contacts of an address for the given purpose."""
    return FORMATTERS[(kind, purpose)](contacts)
