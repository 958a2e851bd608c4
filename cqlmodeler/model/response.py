# ==============================================
# Response Model (Data Classes)
# ==============================================
#
# PURPOSE:
#   Data classes that represent the OUTPUT of the modeler: the
#   physical key layout, index advice, the reasoning behind both,
#   and the generated CQL.
#
# CLASSES:
# --------
# - ClusteringKeyRecommendation (dataclass)
#     field, order ("ASC"/"DESC"), type (ClusteringKeyType), reason
#
# - IndexRecommendation (dataclass)
#     field, reason, cardinality
#
# - EntityModelResponse (dataclass)
#     The full plan for one entity.
#
#     Methods:
#     --------
#     - to_dict() -> dict                  → camelCase JSON for clients / plan store
#     - from_dict(data) -> EntityModelResponse  (classmethod)
#
# - ModelingResponse (dataclass)
#     entities + rejected (only filled when the batch policy skips
#     invalid entities instead of aborting)
#
# ==============================================

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from cqlmodeler.model.enums import Cardinality, ClusteringKeyType


@dataclass
class ClusteringKeyRecommendation:
    field: str
    order: str
    type: ClusteringKeyType
    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "order": self.order,
            "type": self.type.value,
            "reason": self.reason,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClusteringKeyRecommendation":
        return cls(
            field=data["field"],
            order=data.get("order", "ASC"),
            type=ClusteringKeyType(data["type"]),
            reason=data.get("reason", ""),
        )


@dataclass
class IndexRecommendation:
    field: str
    reason: str = ""
    cardinality: Cardinality = Cardinality.UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "reason": self.reason,
            "cardinality": self.cardinality.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IndexRecommendation":
        return cls(
            field=data["field"],
            reason=data.get("reason", ""),
            cardinality=Cardinality.from_string(data.get("cardinality")),
        )


@dataclass
class EntityModelResponse:
    """
    The recommended layout for a single entity.

    `summary` keeps insertion order: Multi-tenant, Partition Key,
    Clustering Keys, Indexes, in the order the pipeline produced them.
    """

    entity_name: str
    keyspace: str
    table_name: str
    partition_key: List[str] = field(default_factory=list)
    clustering_keys: List[ClusteringKeyRecommendation] = field(default_factory=list)
    indexes: List[IndexRecommendation] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    summary: Dict[str, str] = field(default_factory=dict)
    create_table_cql: Optional[str] = None
    index_cql: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the plan to the camelCase JSON shape.

        Returns:
            A JSON-serializable dictionary
        """
        return {
            "entityName": self.entity_name,
            "keyspace": self.keyspace,
            "tableName": self.table_name,
            "partitionKey": list(self.partition_key),
            "clusteringKeys": [ck.to_dict() for ck in self.clustering_keys],
            "indexes": [idx.to_dict() for idx in self.indexes],
            "warnings": list(self.warnings),
            "summary": dict(self.summary),
            "createTableCql": self.create_table_cql,
            "indexCql": list(self.index_cql),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EntityModelResponse":
        """
        Reconstruct a plan from its stored JSON form.

        Args:
            data: Dictionary produced by to_dict()

        Returns:
            An EntityModelResponse instance
        """
        return cls(
            entity_name=data["entityName"],
            keyspace=data["keyspace"],
            table_name=data["tableName"],
            partition_key=list(data.get("partitionKey", [])),
            clustering_keys=[
                ClusteringKeyRecommendation.from_dict(ck)
                for ck in data.get("clusteringKeys", [])
            ],
            indexes=[IndexRecommendation.from_dict(idx) for idx in data.get("indexes", [])],
            warnings=list(data.get("warnings", [])),
            summary=dict(data.get("summary", {})),
            create_table_cql=data.get("createTableCql"),
            index_cql=list(data.get("indexCql", [])),
        )


@dataclass
class ModelingResponse:
    entities: List[EntityModelResponse] = field(default_factory=list)
    # {"entityName": ..., "error": ...} for entities skipped by the batch policy
    rejected: List[Dict[str, Optional[str]]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"entities": [e.to_dict() for e in self.entities]}
        if self.rejected:
            data["rejected"] = [dict(r) for r in self.rejected]
        return data
