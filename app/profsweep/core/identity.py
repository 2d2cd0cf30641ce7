"""Security identifier to account label resolution.

Translation of a SID to ``DOMAIN\\user`` happens on the host that owns
the profile; a failed translation (deleted principal, unreachable domain
controller) arrives here as a missing value. This module turns that
best-effort result into a label that is never empty.
"""

import re

# Returned when a SID cannot be translated
UNTRANSLATABLE = "untranslatable"

_SID_PATTERN = re.compile(r"^S-\d+(-\d+)+$", re.IGNORECASE | re.ASCII)


def is_security_id(value: str) -> bool:
    """Check whether ``value`` looks like a string-form SID."""
    return bool(_SID_PATTERN.match(value.strip()))


def resolve_identity(security_id: str, translated: object) -> str:
    """Return the translated account name for a SID.

    Args:
        security_id: The profile's SID.
        translated: Name reported by the host, possibly None.

    Returns:
        The account name, or UNTRANSLATABLE if the host could not
        translate the SID.
    """
    if not isinstance(translated, str):
        return UNTRANSLATABLE
    name = translated.strip()
    # Some lookups echo the SID back instead of failing
    if not name or name.upper() == security_id.strip().upper():
        return UNTRANSLATABLE
    return name


def leaf_name(local_path: str) -> str:
    """Return the last component of a Windows or POSIX path."""
    return re.split(r"[\\/]", local_path.rstrip("\\/"))[-1]


def account_label(security_id: str, translated: object, local_path: str) -> str:
    """Build a display label for a profile.

    Falls back from the translated account name to the profile folder
    name, and finally to the SID itself.

    Args:
        security_id: The profile's SID.
        translated: Name reported by the host, possibly None.
        local_path: Profile root path on the host.

    Returns:
        Non-empty label.
    """
    name = resolve_identity(security_id, translated)
    if name != UNTRANSLATABLE:
        return name
    return leaf_name(local_path) or security_id
