# ==============================================
# MODEL: Requests, responses and enums
# ==============================================
#
# Modules:
# --------
# - enums.py     → Cardinality, FilterType, PartitionSizeExpectation,
#                  QueryVolume, ClusteringKeyType
# - request.py   → FieldMetadata, AccessPattern, EntityModelRequest, ...
# - response.py  → ClusteringKeyRecommendation, IndexRecommendation,
#                  EntityModelResponse, ModelingResponse
#
# ==============================================

from .enums import (
    Cardinality,
    ClusteringKeyType,
    FilterType,
    PartitionSizeExpectation,
    QueryVolume,
)
from .request import (
    AccessPattern,
    ConstraintSettings,
    EntityModelRequest,
    FieldMetadata,
    ModelingRequest,
    PatternField,
    SortField,
)
from .response import (
    ClusteringKeyRecommendation,
    EntityModelResponse,
    IndexRecommendation,
    ModelingResponse,
)

__all__ = [
    "Cardinality",
    "ClusteringKeyType",
    "FilterType",
    "PartitionSizeExpectation",
    "QueryVolume",
    "AccessPattern",
    "ConstraintSettings",
    "EntityModelRequest",
    "FieldMetadata",
    "ModelingRequest",
    "PatternField",
    "SortField",
    "ClusteringKeyRecommendation",
    "EntityModelResponse",
    "IndexRecommendation",
    "ModelingResponse",
]
