# ==============================================
# Selection Results (Data Classes)
# ==============================================
#
# PURPOSE:
#   What each analysis step hands to the next one. Every step
#   returns its decision plus its own warnings and summary entries;
#   the orchestrator merges them in pipeline order.
#
# CLASSES:
# --------
# - PartitionKeyResult   → partition_key, frequencies, warnings, summary
# - ClusteringKeyResult  → clustering_keys, demoted, warnings, summary
# - IndexResult          → indexes, warnings, summary
#
# ==============================================

from dataclasses import dataclass, field
from typing import Dict, List

from cqlmodeler.model.response import ClusteringKeyRecommendation, IndexRecommendation


@dataclass
class PartitionKeyResult:
    partition_key: List[str] = field(default_factory=list)
    # normalized field name → number of EQUALITY/IN filters referencing it
    frequencies: Dict[str, int] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    summary: Dict[str, str] = field(default_factory=dict)


@dataclass
class ClusteringKeyResult:
    clustering_keys: List[ClusteringKeyRecommendation] = field(default_factory=list)
    # keys placed tentatively, then removed to keep an ORDER BY prefix valid
    demoted: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    summary: Dict[str, str] = field(default_factory=dict)


@dataclass
class IndexResult:
    indexes: List[IndexRecommendation] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    summary: Dict[str, str] = field(default_factory=dict)
