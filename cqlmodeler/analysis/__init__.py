# ==============================================
# TOPIC 2: ANALYSIS (Key layout selection)
# ==============================================
#
# This package turns access patterns into a physical key layout.
#
# Three-step process:
#   Step 1: PartitionKeySelector   → which rows live together
#   Step 2: ClusteringKeySelector  → how rows are ordered in a partition
#   Step 3: IndexAdvisor           → what is left for secondary indexes
#
# Modules:
# --------
# - results.py                  → data classes passed between steps
# - ordered_key_set.py          → ordered set of clustering keys
# - partition_key_selector.py   → Step 1
# - clustering_key_selector.py  → Step 2
# - index_advisor.py            → Step 3
#
# ==============================================

from .results import PartitionKeyResult, ClusteringKeyResult, IndexResult
from .ordered_key_set import OrderedKeySet
from .partition_key_selector import PartitionKeySelector
from .clustering_key_selector import ClusteringKeySelector
from .index_advisor import IndexAdvisor

__all__ = [
    "PartitionKeyResult",
    "ClusteringKeyResult",
    "IndexResult",
    "OrderedKeySet",
    "PartitionKeySelector",
    "ClusteringKeySelector",
    "IndexAdvisor",
]
