# ==============================================
# OrderedKeySet
# ==============================================
#
# PURPOSE:
#   The growing clustering-key list. Keeps recommendations in
#   clustering order and answers "is this field already placed?"
#   in O(1) by normalized name.
#
#   The equality+sort repair step in the clustering-key selector
#   needs three positional operations, all expressed here so the
#   selector never re-derives positions by rescanning:
#
#     - index_after_last(pred)    → insertion point right after the
#                                   last key matching pred (or end)
#     - remove_from(pos, pred)    → drop keys at pos..end matching pred
#     - insert(pos, key)          → positional insert
#
# ==============================================

from typing import Callable, Dict, Iterator, List, Optional

from cqlmodeler.model.response import ClusteringKeyRecommendation
from cqlmodeler.normalization.identifiers import normalize_name


class OrderedKeySet:
    """Insertion-ordered set of clustering keys, keyed by normalized field name."""

    def __init__(self):
        self._keys: List[ClusteringKeyRecommendation] = []
        self._members: Dict[str, ClusteringKeyRecommendation] = {}

    def __contains__(self, name: str) -> bool:
        return normalize_name(name) in self._members

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[ClusteringKeyRecommendation]:
        return iter(list(self._keys))

    def __bool__(self) -> bool:
        return bool(self._keys)

    @property
    def first(self) -> Optional[ClusteringKeyRecommendation]:
        return self._keys[0] if self._keys else None

    def names(self) -> List[str]:
        """Normalized names in clustering order."""
        return [normalize_name(key.field) for key in self._keys]

    def to_list(self) -> List[ClusteringKeyRecommendation]:
        return list(self._keys)

    def append(self, key: ClusteringKeyRecommendation) -> bool:
        """
        Add a key at the end.

        Returns:
            False (and changes nothing) if the field is already placed
        """
        return self.insert(len(self._keys), key)

    def insert(self, position: int, key: ClusteringKeyRecommendation) -> bool:
        """Insert a key at position; no-op returning False if already placed."""
        name = normalize_name(key.field)
        if name in self._members:
            return False
        self._keys.insert(position, key)
        self._members[name] = key
        return True

    def index_after_last(self, predicate: Callable[[str], bool]) -> int:
        """
        Position right after the last key whose normalized name
        satisfies predicate. If none does, the end of the list.
        """
        position = len(self._keys)
        for index, name in enumerate(self.names()):
            if predicate(name):
                position = index + 1
        return position

    def remove_from(
        self,
        position: int,
        predicate: Callable[[str], bool]
    ) -> List[ClusteringKeyRecommendation]:
        """
        Remove keys at position..end whose normalized name satisfies predicate.

        Returns:
            The removed keys, in their former order
        """
        kept = self._keys[:position]
        removed = []
        for key in self._keys[position:]:
            name = normalize_name(key.field)
            if predicate(name):
                removed.append(key)
                del self._members[name]
            else:
                kept.append(key)
        self._keys = kept
        return removed
