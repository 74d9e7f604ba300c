"""Django Address Book configuration.

All settings can be overridden in your Django settings.py and are read
lazily, so override_settings() works in tests.

Example:
    # settings.py
    ADDRESSBOOK_ORPHAN_ADDRESS_POLICY = 'keep_standalone'
    ADDRESSBOOK_STAGED_EDIT_TTL = 600
    ADDRESSBOOK_PHONE_REGION = 'US'
"""

from django.conf import settings

from django_addressbook.exceptions import AddressBookConfigError


# =============================================================================
# ORPHAN ADDRESS POLICY
# =============================================================================

# What happens to an address when its last contact is unlinked:
# - delete: remove the row
# - keep_standalone: keep it if it still has a phone or a full street address
# - archive: soft delete it (archived_at is set)
POLICY_DELETE = 'delete'
POLICY_KEEP_STANDALONE = 'keep_standalone'
POLICY_ARCHIVE = 'archive'

ORPHAN_ADDRESS_POLICIES = {POLICY_DELETE, POLICY_KEEP_STANDALONE, POLICY_ARCHIVE}

DEFAULT_STAGED_EDIT_TTL = 15 * 60
DEFAULT_PHONE_REGION = 'US'


def get_setting(name: str, default=None):
    """Get a setting with ADDRESSBOOK_ prefix."""
    return getattr(settings, f"ADDRESSBOOK_{name}", default)


def get_orphan_address_policy() -> str:
    """Return the configured orphan address policy.

    Raises:
        AddressBookConfigError: If the policy is not one of ORPHAN_ADDRESS_POLICIES
    """
    policy = get_setting('ORPHAN_ADDRESS_POLICY', POLICY_DELETE)
    if policy not in ORPHAN_ADDRESS_POLICIES:
        raise AddressBookConfigError(
            'ADDRESSBOOK_ORPHAN_ADDRESS_POLICY', policy, ORPHAN_ADDRESS_POLICIES
        )
    return policy


def get_staged_edit_ttl() -> int:
    """Seconds a staged shared-address edit stays consumable."""
    ttl = get_setting('STAGED_EDIT_TTL', DEFAULT_STAGED_EDIT_TTL)
    if not isinstance(ttl, int) or isinstance(ttl, bool) or ttl <= 0:
        raise AddressBookConfigError('ADDRESSBOOK_STAGED_EDIT_TTL', ttl)
    return ttl


def get_phone_region() -> str:
    """Region used to parse phone numbers written without a country code."""
    return get_setting('PHONE_REGION', DEFAULT_PHONE_REGION)


# =============================================================================
# DEFAULT SETTINGS REFERENCE
# =============================================================================

# ADDRESSBOOK_ORPHAN_ADDRESS_POLICY = 'delete'  # delete | keep_standalone | archive
# ADDRESSBOOK_STAGED_EDIT_TTL = 900  # seconds
# ADDRESSBOOK_PHONE_REGION = 'US'
