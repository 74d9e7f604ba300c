"""Exceptions for django-addressbook."""


class AddressBookError(Exception):
    """Base exception for address book errors."""

    pass


class AddressBookConfigError(AddressBookError):
    """Raised when an ADDRESSBOOK_* setting is invalid."""

    def __init__(self, setting: str, value, allowed=None):
        self.setting = setting
        self.value = value
        if allowed:
            message = f"{setting}={value!r} is invalid, expected one of {sorted(allowed)}"
        else:
            message = f"{setting}={value!r} is invalid"
        super().__init__(message)
