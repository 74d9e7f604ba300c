"""Django app configuration for django_addressbook."""
from django.apps import AppConfig


class DjangoAddressBookConfig(AppConfig):
    """Configuration for the Django Address Book app."""

    name = "django_addressbook"
    label = "django_addressbook"
    verbose_name = "Address Book"
    default_auto_field = "django.db.models.BigAutoField"
