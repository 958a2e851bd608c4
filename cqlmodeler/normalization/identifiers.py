# ==============================================
# Identifiers
# ==============================================
#
# PURPOSE:
#   Two different notions of "the same name" are used by the modeler:
#
#   1. normalize_name()       → identity of a field inside an entity.
#      Trimmed + lowercased. "Account_ID " and "account_id" are the
#      same field. Used for every lookup and membership test.
#
#   2. sanitize_identifier()  → what the name looks like in CQL.
#      Lowercased, every character outside [a-z0-9_] replaced by "_",
#      repeated "_" collapsed, leading/trailing "_" removed.
#      "Order Items!" → "order_items"
#
#   escape_quotes() doubles single quotes for CQL string literals.
#
# ==============================================

import re
from typing import Iterable, Optional


_INVALID_CHARS = re.compile(r'[^a-z0-9_]')
_REPEATED_UNDERSCORES = re.compile(r'_+')


def normalize_name(name: Optional[str]) -> Optional[str]:
    """
    Canonical lookup key for a field name.

    Args:
        name: Raw field name as declared or referenced

    Returns:
        Trimmed, lowercased name (None stays None)
    """
    if name is None:
        return None
    return name.strip().lower()


def sanitize_identifier(value: Optional[str]) -> Optional[str]:
    """
    Convert a free-text name into a safe CQL identifier.

    Blank input is returned unchanged.
    """
    if value is None or not value.strip():
        return value

    name = value.lower()
    # Replace anything CQL would need quoting for
    name = _INVALID_CHARS.sub('_', name)
    # Collapse multiple underscores
    name = _REPEATED_UNDERSCORES.sub('_', name)
    # Remove leading/trailing underscores
    return name.strip('_')


def escape_quotes(value: Optional[str]) -> str:
    """Escape a value for use inside a single-quoted CQL literal."""
    if value is None:
        return ""
    return value.replace("'", "''")


def contains_name(names: Iterable[str], candidate: str) -> bool:
    """Case-insensitive membership test on raw field names."""
    target = normalize_name(candidate)
    return any(normalize_name(name) == target for name in names)
