# ==============================================
# TypeMapper
# ==============================================
#
# PURPOSE:
#   Map a free-text declared data type ("varchar(64)", "Long",
#   "timestamp with time zone", "list<string>") to a CQL column type.
#
#   Matching is substring-based and ORDER MATTERS: "bigint" must be
#   checked before "int", and "uuid" before everything else.
#
#     "uuid"                     → UUID
#     "bigint" | "long"          → BIGINT
#     "int"                      → INT
#     "double" | "float"         → DOUBLE
#     "decimal" | "numeric"      → DECIMAL
#     "bool"                     → BOOLEAN
#     "timestamp"|"date"|"time"  → TIMESTAMP
#     "blob" | "binary"          → BLOB
#     "list"                     → LIST<TEXT>
#     "set"                      → SET<TEXT>
#     "map"                      → MAP<TEXT,TEXT>
#     default / blank            → TEXT
#
# ==============================================

from typing import Optional, Tuple


class TypeMapper:
    """Stateless declared-type → CQL-type mapping."""

    DEFAULT_TYPE = "TEXT"

    # (substrings, cql type) in priority order
    RULES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
        (("uuid",), "UUID"),
        (("bigint", "long"), "BIGINT"),
        (("int",), "INT"),
        (("double", "float"), "DOUBLE"),
        (("decimal", "numeric"), "DECIMAL"),
        (("bool",), "BOOLEAN"),
        (("timestamp", "date", "time"), "TIMESTAMP"),
        (("blob", "binary"), "BLOB"),
        (("list",), "LIST<TEXT>"),
        (("set",), "SET<TEXT>"),
        (("map",), "MAP<TEXT,TEXT>"),
    )

    @classmethod
    def to_cql(cls, data_type: Optional[str]) -> str:
        """
        Map a declared data type to a CQL column type.

        Args:
            data_type: Free-text type from the field catalog

        Returns:
            A CQL type string (e.g., "BIGINT", "LIST<TEXT>")
        """
        if data_type is None or not data_type.strip():
            return cls.DEFAULT_TYPE

        lower = data_type.lower()
        for needles, cql_type in cls.RULES:
            if any(needle in lower for needle in needles):
                return cql_type
        return cls.DEFAULT_TYPE
