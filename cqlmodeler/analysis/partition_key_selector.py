# ==============================================
# PartitionKeySelector
# ==============================================
#
# PURPOSE:
#   Pick the partition key from how often each field is used for
#   point lookups across the entity's access patterns.
#
# CLASS: PartitionKeySelector
# ---------------------------
#   Stateless: entity in, PartitionKeyResult out. Raises only when
#   no field has a name to key on.
#
#   select(entity, catalog=None) -> PartitionKeyResult
#
#   STEP 1: MULTI-TENANT PREPEND
#     constraints.multi_tenant → resolve constraints.tenant_field,
#     else the first field flagged tenant_field. Prepend it.
#     Unresolved → warning (tenant isolation not guaranteed).
#
#   STEP 2: FREQUENCY TABLE
#     Count every EQUALITY / IN filter, across every pattern, whose
#     field is declared and NOT time-typed. Keyed by normalized name.
#
#   STEP 3: RANK
#     frequency DESC, then business_key first, otherwise first-seen.
#
#   STEP 4: PICK
#     Append the top-ranked candidate not already in the key.
#
#   STEP 5: FALLBACKS
#     No candidate → first declared non-time field (warning).
#     No non-time field at all → first named field (warning).
#     Nameless fields are never picked.
#
#   STEP 6: DIAGNOSTICS on the picked field
#     LOW / UNKNOWN cardinality, used by a single pattern while other
#     candidates exist, VERY_LARGE partitions with a 1-column key.
#
# ==============================================

from typing import Dict, List, Optional

from cqlmodeler.errors import ValidationError
from cqlmodeler.model.enums import Cardinality, PartitionSizeExpectation
from cqlmodeler.model.request import EntityModelRequest, FieldMetadata
from cqlmodeler.normalization.field_catalog import FieldCatalog
from cqlmodeler.normalization.identifiers import contains_name
from .results import PartitionKeyResult


class PartitionKeySelector:
    """Frequency-driven partition key selection with tenant and fallback handling."""

    def select(
        self,
        entity: EntityModelRequest,
        catalog: Optional[FieldCatalog] = None
    ) -> PartitionKeyResult:
        """
        Choose the partition key for an entity.

        Args:
            entity: The validated entity request
            catalog: Field lookup for the entity (built if not given)

        Returns:
            PartitionKeyResult with a non-empty partition_key
        """
        catalog = catalog or FieldCatalog(entity.fields)
        result = PartitionKeyResult()
        constraints = entity.constraints

        # STEP 1: Tenant isolation leads the key
        if constraints is not None and constraints.multi_tenant:
            tenant = self._resolve_tenant_field(entity, catalog)
            if tenant is not None:
                result.partition_key.append(tenant.name)
                result.summary["Multi-tenant"] = (
                    f"Included {tenant.name} as leading partition key to isolate tenants."
                )
            else:
                result.warnings.append(
                    "Multi-tenant flag set but no tenant field provided; "
                    "tenant isolation not guaranteed."
                )

        # STEP 2 + 3: Count and rank point-lookup fields
        result.frequencies = self._count_equality_usage(entity, catalog)
        candidates = self._rank_candidates(result.frequencies, catalog)

        # STEP 4: Top candidate not already present
        picked: Optional[FieldMetadata] = None
        for candidate in candidates:
            if not contains_name(result.partition_key, candidate.name):
                result.partition_key.append(candidate.name)
                picked = candidate
                break

        # STEP 5: Fallbacks
        if picked is None:
            picked = self._fallback(entity, result)

        # STEP 6: Diagnostics (tenant-only keys are checked on the tenant column)
        subject = picked or catalog.get(result.partition_key[0])
        frequency = result.frequencies.get(subject.normalized_name, 0) if subject else 0
        if subject is not None:
            self._diagnose(subject, frequency, result)

        if (
            constraints is not None
            and constraints.partition_size_expectation == PartitionSizeExpectation.VERY_LARGE
            and len(result.partition_key) == 1
        ):
            result.warnings.append(
                "Very large partitions expected but partition key has a single column. "
                "Recommend composite PK with bucketing."
            )

        result.summary["Partition Key"] = (
            f"{', '.join(result.partition_key)} selected based on access pattern "
            f"frequency ({frequency} occurrences across patterns)."
        )
        return result

    def _resolve_tenant_field(
        self,
        entity: EntityModelRequest,
        catalog: FieldCatalog
    ) -> Optional[FieldMetadata]:
        constraints = entity.constraints
        if constraints.tenant_field and constraints.tenant_field.strip():
            explicit = catalog.get(constraints.tenant_field)
            if explicit is not None:
                return explicit
        return catalog.first_tenant_field()

    def _count_equality_usage(
        self,
        entity: EntityModelRequest,
        catalog: FieldCatalog
    ) -> Dict[str, int]:
        frequencies: Dict[str, int] = {}
        for pattern in entity.access_patterns:
            if pattern is None or not pattern.filters:
                continue
            for pattern_filter in pattern.filters:
                if pattern_filter is None or not pattern_filter.type.is_equality_like:
                    continue
                if not pattern_filter.field or not pattern_filter.field.strip():
                    continue
                metadata = catalog.get(pattern_filter.field)
                # Time fields make hot, unbounded partitions
                if metadata is None or metadata.time_field:
                    continue
                key = metadata.normalized_name
                frequencies[key] = frequencies.get(key, 0) + 1
        return frequencies

    def _rank_candidates(
        self,
        frequencies: Dict[str, int],
        catalog: FieldCatalog
    ) -> List[FieldMetadata]:
        candidates = [catalog.get(name) for name in frequencies]
        candidates = [c for c in candidates if c is not None and not c.time_field]
        # sorted() is stable: equal (frequency, business_key) keep first-seen order
        return sorted(
            candidates,
            key=lambda c: (-frequencies[c.normalized_name], not c.business_key),
        )

    def _fallback(
        self,
        entity: EntityModelRequest,
        result: PartitionKeyResult
    ) -> Optional[FieldMetadata]:
        # Only reached when no pattern-driven candidate could be appended
        if result.partition_key:
            return None

        first_non_time = next(
            (
                f for f in entity.fields
                if f is not None and not f.time_field and f.name and f.name.strip()
            ),
            None,
        )
        if first_non_time is not None:
            result.partition_key.append(first_non_time.name)
            result.warnings.append(
                "No fields found in access patterns; using first non-time field as "
                "partition key. Recommendation: Review access patterns to ensure "
                "partition key selection."
            )
            return first_non_time

        first = next(
            (f for f in entity.fields if f is not None and f.name and f.name.strip()),
            None,
        )
        if first is None:
            raise ValidationError(
                f"At least one named field is required for {entity.entity_name}",
                entity_name=entity.entity_name
            )
        result.partition_key.append(first.name)
        result.warnings.append("No ideal partition key found; defaulted to first CSV field.")
        return first

    def _diagnose(
        self,
        picked: FieldMetadata,
        frequency: int,
        result: PartitionKeyResult
    ) -> None:
        if picked.cardinality == Cardinality.LOW:
            result.warnings.append(
                f"Partition key {picked.name} has LOW cardinality. Recommendation: "
                f"Consider adding bucketing or using a composite partition key to "
                f"improve data distribution."
            )
        elif picked.cardinality == Cardinality.UNKNOWN:
            result.warnings.append(
                f"Partition key {picked.name} cardinality is UNKNOWN. Recommendation: "
                f"Verify this field has sufficient cardinality (1000+ unique values) "
                f"for even data distribution."
            )

        if frequency == 1 and len(result.frequencies) > 1:
            result.warnings.append(
                f"Partition key {picked.name} appears in only 1 access pattern. "
                f"Recommendation: Consider if a more frequently used field would be "
                f"a better partition key."
            )
