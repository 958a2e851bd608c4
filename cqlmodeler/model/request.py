# ==============================================
# Request Model (Data Classes)
# ==============================================
#
# PURPOSE:
#   Data classes that represent the INPUT of the modeler: an entity's
#   fields, the queries it must serve, and workload constraints.
#
#   JSON arrives with camelCase keys (the shape the intake UI posts).
#   Attributes are snake_case; from_dict() does the translation and
#   is deliberately forgiving: missing lists become empty lists,
#   null entries inside lists are dropped, enums parse leniently.
#
# CLASSES:
# --------
# - FieldMetadata        → one column of the entity
# - PatternField         → one filter of an access pattern
# - SortField            → one ORDER BY column of an access pattern
# - AccessPattern        → one query shape the table must serve
# - ConstraintSettings   → workload hints (tenancy, time series, TTL...)
# - EntityModelRequest   → one entity to model (input unit)
# - ModelingRequest      → a batch of entities
#
# ==============================================

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from cqlmodeler.errors import ValidationError
from cqlmodeler.model.enums import (
    Cardinality,
    FilterType,
    PartitionSizeExpectation,
    QueryVolume,
)
from cqlmodeler.normalization.identifiers import normalize_name


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return bool(value)


def _as_optional_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    return _as_bool(value)


def _as_optional_int(value: Any, key: str) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{key} must be an integer, got {value!r}") from e


def _as_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _items(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    return [item for item in (data.get(key) or []) if item is not None]


@dataclass
class FieldMetadata:
    """A declared column of the entity."""

    name: str
    data_type: Optional[str] = None  # Free text, e.g. "uuid", "varchar(64)", "timestamp"
    description: Optional[str] = None
    business_key: bool = False
    mutable: bool = False
    tenant_field: bool = False
    time_field: bool = False
    cardinality: Cardinality = Cardinality.UNKNOWN

    @property
    def normalized_name(self) -> Optional[str]:
        return normalize_name(self.name)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldMetadata":
        return cls(
            name=_as_text(data.get("name")),
            data_type=_as_text(data.get("dataType")),
            description=_as_text(data.get("description")),
            business_key=_as_bool(data.get("businessKey", False)),
            mutable=_as_bool(data.get("mutable", False)),
            tenant_field=_as_bool(data.get("tenantField", False)),
            time_field=_as_bool(data.get("timeField", False)),
            cardinality=Cardinality.from_string(data.get("cardinality")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "dataType": self.data_type,
            "description": self.description,
            "businessKey": self.business_key,
            "mutable": self.mutable,
            "tenantField": self.tenant_field,
            "timeField": self.time_field,
            "cardinality": self.cardinality.value,
        }


@dataclass
class PatternField:
    """A filter (WHERE predicate) of an access pattern."""

    field: Optional[str]
    type: FilterType = FilterType.UNKNOWN
    notes: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PatternField":
        return cls(
            field=_as_text(data.get("field")),
            type=FilterType.from_string(data.get("type")),
            notes=_as_text(data.get("notes")),
        )


@dataclass
class SortField:
    """An ORDER BY column. Direction is free text ("asc", "DESC", "")."""

    field: Optional[str]
    direction: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SortField":
        return cls(
            field=_as_text(data.get("field")),
            direction=_as_text(data.get("direction")),
        )


@dataclass
class AccessPattern:
    """
    One query shape the table must serve.

    A pattern without filters is inert: it contributes nothing to
    key selection or index advice.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    filters: List[PatternField] = field(default_factory=list)
    sort_fields: List[SortField] = field(default_factory=list)
    query_frequency: Optional[str] = None
    cardinality: Cardinality = Cardinality.UNKNOWN

    @property
    def display_name(self) -> str:
        return self.name if self.name is not None else "unnamed"

    def filter_field_names(self) -> Set[str]:
        """Normalized names of every field this pattern filters on."""
        return {
            normalize_name(f.field)
            for f in self.filters
            if f is not None and f.field is not None
        }

    def sort_field_names(self) -> Set[str]:
        """Normalized names of every field this pattern orders by."""
        return {
            normalize_name(s.field)
            for s in self.sort_fields
            if s is not None and s.field is not None
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccessPattern":
        return cls(
            name=_as_text(data.get("name")),
            description=_as_text(data.get("description")),
            filters=[PatternField.from_dict(f) for f in _items(data, "filters")],
            sort_fields=[SortField.from_dict(s) for s in _items(data, "sortFields")],
            query_frequency=_as_text(data.get("queryFrequency")),
            cardinality=Cardinality.from_string(data.get("cardinality")),
        )


@dataclass
class ConstraintSettings:
    """Workload hints that shape, but never decide, the key layout."""

    partition_size_expectation: PartitionSizeExpectation = PartitionSizeExpectation.UNKNOWN
    query_volume: QueryVolume = QueryVolume.UNKNOWN
    multi_tenant: Optional[bool] = None
    tenant_field: Optional[str] = None
    time_series: Optional[bool] = None
    time_ordering_field: Optional[str] = None
    ttl_seconds: Optional[int] = None
    retention_days: Optional[int] = None
    expected_partition_size_mb: Optional[int] = None
    keyspace: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConstraintSettings":
        return cls(
            partition_size_expectation=PartitionSizeExpectation.from_string(
                data.get("partitionSizeExpectation")
            ),
            query_volume=QueryVolume.from_string(data.get("queryVolume")),
            multi_tenant=_as_optional_bool(data.get("multiTenant")),
            tenant_field=_as_text(data.get("tenantField")),
            time_series=_as_optional_bool(data.get("timeSeries")),
            time_ordering_field=_as_text(data.get("timeOrderingField")),
            ttl_seconds=_as_optional_int(data.get("ttlSeconds"), "ttlSeconds"),
            retention_days=_as_optional_int(data.get("retentionDays"), "retentionDays"),
            expected_partition_size_mb=_as_optional_int(
                data.get("expectedPartitionSizeMb"), "expectedPartitionSizeMb"
            ),
            keyspace=_as_text(data.get("keyspace")),
        )


@dataclass
class EntityModelRequest:
    """One entity to model. This is the input unit of the pipeline."""

    entity_name: Optional[str]
    keyspace: Optional[str] = None
    description: Optional[str] = None
    fields: List[FieldMetadata] = field(default_factory=list)
    access_patterns: List[AccessPattern] = field(default_factory=list)
    constraints: Optional[ConstraintSettings] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EntityModelRequest":
        constraints = data.get("constraints")
        return cls(
            entity_name=_as_text(data.get("entityName")),
            keyspace=_as_text(data.get("keyspace")),
            description=_as_text(data.get("description")),
            fields=[FieldMetadata.from_dict(f) for f in _items(data, "fields")],
            access_patterns=[
                AccessPattern.from_dict(p) for p in _items(data, "accessPatterns")
            ],
            constraints=ConstraintSettings.from_dict(constraints) if constraints else None,
        )


@dataclass
class ModelingRequest:
    entities: List[EntityModelRequest] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModelingRequest":
        return cls(
            entities=[EntityModelRequest.from_dict(e) for e in _items(data, "entities")]
        )
