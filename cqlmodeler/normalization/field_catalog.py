# ==============================================
# FieldCatalog
# ==============================================
#
# PURPOSE:
#   1. Resolve field references by normalized name.
#      Access patterns reference fields by whatever spelling the user
#      typed ("Account_Id", " account_id"). The catalog maps the
#      normalized form back to the declared FieldMetadata.
#      When two declared fields normalize to the same name, the first
#      declaration wins.
#
#   2. Import field metadata from a CSV data dictionary.
#      Entities usually start life as a spreadsheet export:
#
#        column_name,data_type,description
#        account_id,uuid,Owning account
#        created_at,timestamp,Creation time
#
#      Header matching is fuzzy:
#        name column        → first header containing "column" or "field"
#        type column        → first header containing "type"
#        description column → first header containing "description"
#      timeField is inferred from the type (/time|date/i).
#
# ==============================================

import csv
import io
import re
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from cqlmodeler.errors import ValidationError
from cqlmodeler.model.enums import Cardinality
from cqlmodeler.model.request import FieldMetadata
from cqlmodeler.normalization.identifiers import normalize_name


_TIME_TYPE = re.compile(r'time|date', re.IGNORECASE)


class FieldCatalog:
    """Lookup of an entity's declared fields by normalized name."""

    def __init__(self, fields: List[FieldMetadata]):
        self._fields = [f for f in fields if f is not None]
        self._lookup: Dict[str, FieldMetadata] = {}
        for f in self._fields:
            key = f.normalized_name
            if key and key not in self._lookup:
                self._lookup[key] = f

    def get(self, name: Optional[str]) -> Optional[FieldMetadata]:
        """Resolve a raw field reference, or None if it is not declared."""
        if name is None:
            return None
        return self._lookup.get(normalize_name(name))

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __iter__(self) -> Iterator[FieldMetadata]:
        return iter(self._lookup.values())

    def __len__(self) -> int:
        return len(self._lookup)

    @property
    def declared(self) -> List[FieldMetadata]:
        """Fields in declaration order, duplicates included."""
        return list(self._fields)

    def first_tenant_field(self) -> Optional[FieldMetadata]:
        return next((f for f in self if f.tenant_field), None)

    def first_time_field(self) -> Optional[FieldMetadata]:
        return next((f for f in self if f.time_field), None)


def _find_header(headers: List[str], *needles: str) -> int:
    for position, header in enumerate(headers):
        if any(needle in header for needle in needles):
            return position
    return -1


def parse_fields_csv(text: str) -> List[FieldMetadata]:
    """
    Parse a CSV data dictionary into field metadata.

    Args:
        text: CSV content with a header row

    Returns:
        List of FieldMetadata in row order

    Raises:
        ValidationError: If there is no data row or the name/type
                         columns cannot be identified
    """
    rows = [
        row for row in csv.reader(io.StringIO(text))
        if any(cell.strip() for cell in row)
    ]
    if len(rows) < 2:
        raise ValidationError("CSV requires a header row and at least one data row.")

    headers = [header.strip().lower() for header in rows[0]]
    name_col = _find_header(headers, "column", "field")
    type_col = _find_header(headers, "type")
    description_col = _find_header(headers, "description")

    if name_col == -1 or type_col == -1:
        raise ValidationError("CSV must include column_name and data_type columns.")

    fields = []
    for row in rows[1:]:
        values = [value.strip() for value in row]

        def cell(position: int) -> str:
            return values[position] if 0 <= position < len(values) else ""

        name = cell(name_col)
        if not name:
            continue
        data_type = cell(type_col) or "text"
        fields.append(FieldMetadata(
            name=name,
            data_type=data_type,
            description=cell(description_col),
            time_field=bool(_TIME_TYPE.search(data_type)),
            cardinality=Cardinality.UNKNOWN,
        ))
    return fields


def load_fields_csv(source: Union[str, Path]) -> List[FieldMetadata]:
    """Read a CSV data dictionary from disk and parse it."""
    path = Path(source)
    with open(path, 'r', encoding='utf-8', newline='') as f:
        return parse_fields_csv(f.read())
