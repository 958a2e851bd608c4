# ==============================================
# Enums
# ==============================================
#
# PURPOSE:
#   Closed enumerations used by requests and responses.
#
#   Incoming JSON is produced by forms and spreadsheets, so values
#   arrive in any case, padded with spaces, or not at all. Every
#   input-side enum therefore has a lenient from_string() that
#   never raises and falls back to UNKNOWN.
#
# ENUMS:
# ------
# - Cardinality(Enum):              HIGH, MEDIUM, LOW, UNKNOWN
# - FilterType(Enum):               EQUALITY, RANGE, IN, UNKNOWN
# - PartitionSizeExpectation(Enum): SMALL, MEDIUM, LARGE, VERY_LARGE, UNKNOWN
# - QueryVolume(Enum):              READ_HEAVY, WRITE_HEAVY, BALANCED, UNKNOWN
# - ClusteringKeyType(Enum):        EQUALITY, RANGE, ORDERING  (output only)
#
# ==============================================

from enum import Enum
from typing import Any


class LenientEnum(Enum):
    """Enum base with a case-insensitive parser that defaults to UNKNOWN."""

    @classmethod
    def from_string(cls, value: Any):
        """
        Parse a raw value into a member of this enum.

        Args:
            value: A member, a string such as " very_large ", or None

        Returns:
            The matching member, or UNKNOWN for empty / unrecognized input
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.UNKNOWN
        text = str(value).strip().upper()
        if not text:
            return cls.UNKNOWN
        try:
            return cls[text]
        except KeyError:
            return cls.UNKNOWN


class Cardinality(LenientEnum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    UNKNOWN = "UNKNOWN"


class FilterType(LenientEnum):
    EQUALITY = "EQUALITY"
    RANGE = "RANGE"
    IN = "IN"
    UNKNOWN = "UNKNOWN"

    @property
    def is_equality_like(self) -> bool:
        # IN is served the same way as equality on a key column
        return self in (FilterType.EQUALITY, FilterType.IN)


class PartitionSizeExpectation(LenientEnum):
    SMALL = "SMALL"
    MEDIUM = "MEDIUM"
    LARGE = "LARGE"
    VERY_LARGE = "VERY_LARGE"
    UNKNOWN = "UNKNOWN"


class QueryVolume(LenientEnum):
    READ_HEAVY = "READ_HEAVY"
    WRITE_HEAVY = "WRITE_HEAVY"
    BALANCED = "BALANCED"
    UNKNOWN = "UNKNOWN"


class ClusteringKeyType(Enum):
    """Why a column was placed in the clustering key."""
    EQUALITY = "EQUALITY"
    RANGE = "RANGE"
    ORDERING = "ORDERING"
