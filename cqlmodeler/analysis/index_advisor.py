# ==============================================
# IndexAdvisor
# ==============================================
#
# PURPOSE:
#   Every filtered field that the key layout does not cover still has
#   to be queryable. Those fields become secondary-index (SAI)
#   candidates.
#
#   - Considers filters of ANY type, across EVERY access pattern
#     (PK-qualified or not).
#   - One recommendation per field; the first pattern that needs it
#     provides the reason text.
#   - Low-cardinality index columns get a warning.
#
# ==============================================

from typing import List, Optional, Set

from cqlmodeler.model.enums import Cardinality
from cqlmodeler.model.request import AccessPattern, EntityModelRequest
from cqlmodeler.model.response import ClusteringKeyRecommendation, IndexRecommendation
from cqlmodeler.normalization.field_catalog import FieldCatalog
from cqlmodeler.normalization.identifiers import normalize_name
from .results import IndexResult


class IndexAdvisor:

    def recommend(
        self,
        entity: EntityModelRequest,
        partition_key: List[str],
        clustering_keys: List[ClusteringKeyRecommendation],
        catalog: Optional[FieldCatalog] = None
    ) -> IndexResult:
        """
        Recommend indexes for filtered fields outside the primary key.

        Args:
            entity: The validated entity request
            partition_key: Chosen partition key field names
            clustering_keys: Final clustering keys

        Returns:
            IndexResult with recommendations in first-use order
        """
        catalog = catalog or FieldCatalog(entity.fields)
        result = IndexResult()

        key_fields: Set[str] = {normalize_name(name) for name in partition_key}
        key_fields.update(normalize_name(ck.field) for ck in clustering_keys)
        indexed: Set[str] = set()

        for pattern in entity.access_patterns:
            if pattern is None or not pattern.filters:
                continue
            for pattern_filter in pattern.filters:
                if pattern_filter is None:
                    continue
                if not pattern_filter.field or not pattern_filter.field.strip():
                    continue
                metadata = catalog.get(pattern_filter.field)
                if metadata is None:
                    continue
                name = metadata.normalized_name
                if name in key_fields or name in indexed:
                    continue

                indexed.add(name)
                result.indexes.append(IndexRecommendation(
                    field=metadata.name,
                    reason=f"Required for access pattern: {self._describe(pattern)}",
                    cardinality=metadata.cardinality,
                ))
                if metadata.cardinality == Cardinality.LOW:
                    result.warnings.append(
                        f"Index on low-cardinality field {metadata.name} may not be optimal."
                    )

        if result.indexes:
            result.summary["Indexes"] = ", ".join(idx.field for idx in result.indexes)
        return result

    @staticmethod
    def _describe(pattern: AccessPattern) -> str:
        if pattern.description is not None:
            return pattern.description.strip()
        return pattern.name if pattern.name is not None else ""
