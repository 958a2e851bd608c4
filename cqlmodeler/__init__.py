# ==============================================
# CQL Data Modeler
# ==============================================
#
# Package Structure (4 Topics + Orchestrator):
#
# cqlmodeler/
# ├── model/            # Request / response types and lenient enums
# ├── normalization/    # Topic 1: Field names, identifiers, CQL types, CSV catalogs
# ├── analysis/         # Topic 2: Partition key, clustering keys, indexes
# ├── ddl/              # Topic 3: CREATE TABLE / CREATE INDEX rendering
# ├── persistence/      # Topic 4: Optional storage of generated plans
# ├── config.py         # Configuration management
# ├── errors.py         # ValidationError, PlanStoreError
# ├── sources.py        # Load requests from files or URLs
# ├── modeler.py        # Final orchestrator class
# └── cli.py            # Command line entry point
#
# ==============================================

__version__ = "0.1.0"

from cqlmodeler.errors import ValidationError, PlanStoreError
from cqlmodeler.modeler import CassandraModeler

__all__ = [
    "CassandraModeler",
    "ValidationError",
    "PlanStoreError",
]
