"""Record identifiers.

Ids are 24 lowercase hex characters (12 random bytes), the same shape as a
document-store object id, so ids issued elsewhere stay valid here.
"""

import re
import secrets

ID_BYTES = 12

_ID_PATTERN = re.compile(r"[0-9a-f]{24}")


def new_record_id() -> str:
    """Generate a fresh record id.

    Returns:
        24-character lowercase hex string.
    """
    return secrets.token_hex(ID_BYTES)


def is_valid_record_id(value: str | None) -> bool:
    """Check whether a value is a well-formed record id.

    Upper-case hex is accepted and treated as equal to its lower-case form
    by callers that normalize with ``normalize_record_id``.

    Examples:
        >>> is_valid_record_id("65f1c0ffee00000000000001")
        True
        >>> is_valid_record_id("not-an-id")
        False
    """
    if not value:
        return False
    return _ID_PATTERN.fullmatch(value.lower()) is not None


def normalize_record_id(value: str) -> str:
    """Return the canonical (lower-case) form of a well-formed id."""
    return value.lower()
