# ==============================================
# TOPIC 1: NORMALIZATION
# ==============================================
#
# This package turns loosely-typed user input into the canonical
# forms the rest of the modeler relies on.
#
# Modules:
# --------
# - identifiers.py    → normalized names, CQL identifier sanitization
# - type_mapper.py    → declared data type → CQL type
# - field_catalog.py  → lookup by normalized name, CSV data dictionaries
#                       (import it directly; it depends on cqlmodeler.model)
#
# ==============================================

from .identifiers import normalize_name, sanitize_identifier, escape_quotes, contains_name
from .type_mapper import TypeMapper

__all__ = [
    "normalize_name",
    "sanitize_identifier",
    "escape_quotes",
    "contains_name",
    "TypeMapper",
]
