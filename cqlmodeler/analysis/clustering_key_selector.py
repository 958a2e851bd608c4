# ==============================================
# ClusteringKeySelector
# ==============================================
#
# PURPOSE:
#   Build the ordered clustering key for a chosen partition key.
#
#   Clustering columns can only be restricted in order: a query may
#   filter on clustering key N only if it also restricts keys 0..N-1
#   (the sequential-prefix rule). Several access patterns compete for
#   that order, so keys are placed in three passes and each pass
#   checks the patterns it could break.
#
#   Only PK-qualified patterns (patterns filtering on at least one
#   partition-key field) take part. Everything else is left to the
#   IndexAdvisor.
#
# CLASS: ClusteringKeySelector
# ----------------------------
#   Stateless: select(entity, partition_key, catalog=None)
#              -> ClusteringKeyResult
#
#   PASS A: EQUALITY / IN filters → EQUALITY, ASC
#     - Field also sorted by the same pattern → deferred to PASS C.
#     - Another PK-qualified pattern with ORDER BY that filters on
#       neither this field nor its own sort field → skip (index).
#
#   PASS B: RANGE filters → RANGE, DESC for time fields else ASC
#     - Only if no keys exist yet, or the pattern filters on key 0.
#
#   PASS C: sort fields → ORDERING
#     - Pattern must filter on key 0 when keys exist, else warning.
#     - Sort field also filtered (equality) by the pattern: insert
#       right after the last key the pattern filters on, demoting
#       every later key the pattern does not filter on.
#     - Pure sort field: append.
#
#   TIME SERIES: constraints.time_series → append the ordering field
#   (time_ordering_field or first time field) as ORDERING DESC.
#   Skipped for partition key columns and keys demoted in PASS C.
#
# ==============================================

from typing import List, Optional, Set

from cqlmodeler.model.enums import ClusteringKeyType, FilterType
from cqlmodeler.model.request import AccessPattern, EntityModelRequest, FieldMetadata, SortField
from cqlmodeler.model.response import ClusteringKeyRecommendation
from cqlmodeler.normalization.field_catalog import FieldCatalog
from cqlmodeler.normalization.identifiers import normalize_name
from .ordered_key_set import OrderedKeySet
from .results import ClusteringKeyResult


class ClusteringKeySelector:
    """Three-pass clustering key placement honoring the sequential-prefix rule."""

    EQUALITY_REASON = "Supports equality filter from access pattern with partition key."
    RANGE_REASON = "Supports range filtering from access pattern with partition key."
    EQUALITY_SORT_REASON = (
        "Required as clustering key (equality filter + ORDER BY) "
        "from access pattern with partition key."
    )
    SORT_REASON = "Preserves requested ordering from access pattern with partition key."

    def select(
        self,
        entity: EntityModelRequest,
        partition_key: List[str],
        catalog: Optional[FieldCatalog] = None
    ) -> ClusteringKeyResult:
        """
        Derive the clustering key sequence.

        Args:
            entity: The validated entity request
            partition_key: Field names chosen by the PartitionKeySelector
            catalog: Field lookup for the entity (built if not given)

        Returns:
            ClusteringKeyResult in final clustering order
        """
        catalog = catalog or FieldCatalog(entity.fields)
        result = ClusteringKeyResult()
        pk_names = {normalize_name(name) for name in partition_key}
        keys = OrderedKeySet()

        qualified = [
            pattern for pattern in entity.access_patterns
            if pattern is not None and pattern.filters
            and pattern.filter_field_names() & pk_names
        ]

        self._place_equality_keys(qualified, catalog, pk_names, keys)
        self._place_range_keys(qualified, catalog, pk_names, keys)
        self._place_sort_keys(qualified, catalog, pk_names, keys, result)
        self._place_time_series_key(entity, catalog, pk_names, keys, result)

        result.clustering_keys = keys.to_list()
        if not result.clustering_keys:
            result.summary["Clustering Keys"] = (
                "No clustering keys required for single-row partitions."
            )
        else:
            result.summary["Clustering Keys"] = " → ".join(
                f"{ck.field} ({ck.type.value.lower()})" for ck in result.clustering_keys
            )
        return result

    # ------------------------------------------------------------------
    # PASS A
    # ------------------------------------------------------------------

    def _place_equality_keys(
        self,
        qualified: List[AccessPattern],
        catalog: FieldCatalog,
        pk_names: Set[str],
        keys: OrderedKeySet
    ) -> None:
        for pattern in qualified:
            sorted_by_pattern = pattern.sort_field_names()

            for pattern_filter in pattern.filters:
                if pattern_filter is None or not pattern_filter.type.is_equality_like:
                    continue
                metadata = catalog.get(pattern_filter.field)
                if metadata is None or metadata.normalized_name in pk_names:
                    continue
                name = metadata.normalized_name

                # Equality + ORDER BY on the same field is positioned in PASS C
                if name in sorted_by_pattern or name in keys:
                    continue
                if self._would_break_sort_pattern(pattern, name, qualified):
                    continue

                keys.append(ClusteringKeyRecommendation(
                    field=metadata.name,
                    order="ASC",
                    type=ClusteringKeyType.EQUALITY,
                    reason=self.EQUALITY_REASON,
                ))

    def _would_break_sort_pattern(
        self,
        pattern: AccessPattern,
        name: str,
        qualified: List[AccessPattern]
    ) -> bool:
        """
        True if placing `name` now would force a prefix that some other
        sort-bearing pattern cannot supply before its ORDER BY column.
        """
        for other in qualified:
            if other is pattern or not other.sort_fields:
                continue
            other_filters = other.filter_field_names()
            for sort_field in other.sort_fields:
                if sort_field is None or sort_field.field is None:
                    continue
                sort_name = normalize_name(sort_field.field)
                if name not in other_filters and sort_name not in other_filters:
                    return True
        return False

    # ------------------------------------------------------------------
    # PASS B
    # ------------------------------------------------------------------

    def _place_range_keys(
        self,
        qualified: List[AccessPattern],
        catalog: FieldCatalog,
        pk_names: Set[str],
        keys: OrderedKeySet
    ) -> None:
        for pattern in qualified:
            # Range access cannot skip the established first key
            admissible = self._covers_first_key(pattern, keys)

            for pattern_filter in pattern.filters:
                if pattern_filter is None or pattern_filter.type != FilterType.RANGE:
                    continue
                metadata = catalog.get(pattern_filter.field)
                if metadata is None or metadata.normalized_name in pk_names:
                    continue
                if not admissible:
                    continue
                keys.append(ClusteringKeyRecommendation(
                    field=metadata.name,
                    order="DESC" if metadata.time_field else "ASC",
                    type=ClusteringKeyType.RANGE,
                    reason=self.RANGE_REASON,
                ))

    # ------------------------------------------------------------------
    # PASS C
    # ------------------------------------------------------------------

    def _place_sort_keys(
        self,
        qualified: List[AccessPattern],
        catalog: FieldCatalog,
        pk_names: Set[str],
        keys: OrderedKeySet,
        result: ClusteringKeyResult
    ) -> None:
        for pattern in qualified:
            if not pattern.sort_fields:
                continue
            filter_names = pattern.filter_field_names()
            equality_names = {
                normalize_name(f.field)
                for f in pattern.filters
                if f is not None and f.field is not None and f.type.is_equality_like
            }
            # Sorting may skip intermediate keys, never the first one
            has_first_key = self._covers_first_key(pattern, keys)

            for sort_field in pattern.sort_fields:
                if sort_field is None:
                    continue
                metadata = catalog.get(sort_field.field)
                if metadata is None:
                    continue
                name = metadata.normalized_name
                if name in pk_names or name in keys:
                    continue

                if not has_first_key:
                    first = keys.first.field if keys.first else "none"
                    result.warnings.append(
                        f"Pattern '{pattern.display_name}' uses sort field {metadata.name} "
                        f"but doesn't include the first clustering key ({first}). "
                        f"This pattern will require specifying the first CK before using "
                        f"{metadata.name} in ORDER BY, or consider making {metadata.name} "
                        f"an index instead."
                    )
                    continue

                direction = self._direction(sort_field, metadata)
                if name in equality_names:
                    self._insert_mandatory_key(
                        pattern, metadata, direction, filter_names, keys, result
                    )
                else:
                    keys.append(ClusteringKeyRecommendation(
                        field=metadata.name,
                        order=direction,
                        type=ClusteringKeyType.ORDERING,
                        reason=self.SORT_REASON,
                    ))

    def _insert_mandatory_key(
        self,
        pattern: AccessPattern,
        metadata: FieldMetadata,
        direction: str,
        filter_names: Set[str],
        keys: OrderedKeySet,
        result: ClusteringKeyResult
    ) -> None:
        """
        Place an equality + ORDER BY field right after the last key the
        pattern filters on. Later keys the pattern does not filter on
        would strand it outside a valid prefix, so they are demoted.
        """
        position = keys.index_after_last(lambda name: name in filter_names)
        removed = keys.remove_from(position, lambda name: name not in filter_names)

        for key in removed:
            result.demoted.append(key.field)
            result.warnings.append(
                f"Clustering key {key.field} was removed to keep {metadata.name} usable "
                f"for ORDER BY in pattern '{pattern.display_name}'; it will be handled "
                f"as an index candidate instead."
            )

        keys.insert(position, ClusteringKeyRecommendation(
            field=metadata.name,
            order=direction,
            type=ClusteringKeyType.ORDERING,
            reason=self.EQUALITY_SORT_REASON,
        ))

    # ------------------------------------------------------------------
    # TIME SERIES
    # ------------------------------------------------------------------

    def _place_time_series_key(
        self,
        entity: EntityModelRequest,
        catalog: FieldCatalog,
        pk_names: Set[str],
        keys: OrderedKeySet,
        result: ClusteringKeyResult
    ) -> None:
        constraints = entity.constraints
        if constraints is None or not constraints.time_series:
            return

        time_field_name = constraints.time_ordering_field
        if not time_field_name or not time_field_name.strip():
            first_time_field = catalog.first_time_field()
            time_field_name = first_time_field.name if first_time_field else None

        if not time_field_name or not time_field_name.strip():
            result.warnings.append(
                "Time-series flag enabled but no timestamp field selected for ordering."
            )
            return

        time_field = catalog.get(time_field_name)
        if time_field is None:
            result.warnings.append(
                f"Time-series ordering field {time_field_name} is not a declared field; "
                f"no time ordering applied."
            )
            return
        if time_field.normalized_name in pk_names:
            return
        # Demoted keys are index candidates now
        if time_field.normalized_name in {normalize_name(name) for name in result.demoted}:
            return

        keys.append(ClusteringKeyRecommendation(
            field=time_field.name,
            order="DESC",
            type=ClusteringKeyType.ORDERING,
            reason=f"Time-series flag enabled; ordering on {time_field.name}",
        ))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _covers_first_key(pattern: AccessPattern, keys: OrderedKeySet) -> bool:
        if not keys:
            return True
        return normalize_name(keys.first.field) in pattern.filter_field_names()

    @staticmethod
    def _direction(sort_field: SortField, metadata: FieldMetadata) -> str:
        if sort_field.direction and sort_field.direction.strip():
            return sort_field.direction.strip().upper()
        return "DESC" if metadata.time_field else "ASC"
