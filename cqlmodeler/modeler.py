# ==============================================
# CassandraModeler — Final Orchestrator
# ==============================================
#
# PURPOSE:
#   This is the MAIN CLASS that ties the topics together into a
#   single modeling pipeline. Users interact with this class only.
#   Everything else is internal.
#
# HOW IT CONNECTS THE TOPICS:
#
#   ┌──────────────────────────────────────────────────────────┐
#   │                    CassandraModeler                      │
#   │                                                          │
#   │   validate_entity()  ── ValidationError on bad input     │
#   │          │                                               │
#   │          ▼                                               │
#   │  ┌──────────────────────────────────────────────┐        │
#   │  │ TOPIC 1: NORMALIZATION                       │        │
#   │  │  FieldCatalog, identifiers                   │        │
#   │  └──────────────┬───────────────────────────────┘        │
#   │                 │ field lookup                           │
#   │                 ▼                                        │
#   │  ┌──────────────────────────────────────────────┐        │
#   │  │ TOPIC 2: ANALYSIS                            │        │
#   │  │  PartitionKeySelector →                      │        │
#   │  │  ClusteringKeySelector → IndexAdvisor        │        │
#   │  └──────────────┬───────────────────────────────┘        │
#   │                 │ key layout + warnings + summary        │
#   │                 ▼                                        │
#   │  ┌──────────────────────────────────────────────┐        │
#   │  │ TOPIC 3: DDL                                 │        │
#   │  │  CQLGenerator                                │        │
#   │  └──────────────┬───────────────────────────────┘        │
#   │                 ▼                                        │
#   │          EntityModelResponse                             │
#   └──────────────────────────────────────────────────────────┘
#
#   Topic 4 (persistence/) is NOT called from here. The modeler is
#   pure: request in, response out. Saving plans is up to the caller
#   (see cli.py).
#
# CLASS: CassandraModeler
# -----------------------
#
#   Constructor:
#   ------------
#   - __init__(config: ModelerConfig | None = None)
#
#   Public Methods:
#   ---------------
#   - generate_models(request) -> ModelingResponse
#       Accepts a ModelingRequest or its JSON dict form.
#       Empty batch → ValidationError.
#       abort_on_invalid_entity=True  → first invalid entity aborts.
#       abort_on_invalid_entity=False → invalid entities are skipped
#                                       and listed in response.rejected.
#
#   - model_entity(entity) -> EntityModelResponse
#       Validate, then run the pipeline for one entity.
#
#   - validate_entity(entity) -> None
#   - determine_keyspace(entity) -> str
#
#   Warnings order in the response:
#       partition key → clustering keys → indexes → constraint checks
#
# ==============================================

from typing import Any, Dict, Optional, Union

from cqlmodeler.config import ModelerConfig, get_config
from cqlmodeler.errors import ValidationError
from cqlmodeler.model.request import EntityModelRequest, ModelingRequest
from cqlmodeler.model.response import EntityModelResponse, ModelingResponse
from cqlmodeler.normalization.field_catalog import FieldCatalog
from cqlmodeler.normalization.identifiers import sanitize_identifier
from cqlmodeler.analysis.partition_key_selector import PartitionKeySelector
from cqlmodeler.analysis.clustering_key_selector import ClusteringKeySelector
from cqlmodeler.analysis.index_advisor import IndexAdvisor
from cqlmodeler.ddl.cql_generator import CQLGenerator


class CassandraModeler:
    """
    Access-pattern driven table designer.

    Every call is independent; nothing is cached between requests.
    """

    def __init__(self, config: Optional[ModelerConfig] = None):
        """
        Initialize the modeler with all pipeline components.

        Args:
            config: Modeler configuration. If None, loads from environment.
        """
        self._config = config or get_config().modeler

        self._partition_key_selector = PartitionKeySelector()
        self._clustering_key_selector = ClusteringKeySelector()
        self._index_advisor = IndexAdvisor()
        self._cql_generator = CQLGenerator(
            compaction_class=self._config.compaction_class,
            gc_grace_seconds=self._config.gc_grace_seconds
        )

    @property
    def config(self) -> ModelerConfig:
        return self._config

    def generate_models(
        self,
        request: Union[ModelingRequest, Dict[str, Any]]
    ) -> ModelingResponse:
        """
        Model every entity in the request.

        Args:
            request: ModelingRequest or its camelCase JSON dict

        Returns:
            ModelingResponse with one plan per modeled entity, in request order

        Raises:
            ValidationError: Empty batch, or an invalid entity while
                             abort_on_invalid_entity is set
        """
        if isinstance(request, dict):
            request = ModelingRequest.from_dict(request)

        entities = [e for e in request.entities if e is not None]
        if not entities:
            raise ValidationError("At least one entity is required to generate a data model.")

        response = ModelingResponse()
        for entity in entities:
            try:
                response.entities.append(self.model_entity(entity))
            except ValidationError as e:
                if self._config.abort_on_invalid_entity:
                    raise
                response.rejected.append({
                    "entityName": entity.entity_name,
                    "error": str(e),
                })
        return response

    def model_entity(
        self,
        entity: Union[EntityModelRequest, Dict[str, Any]]
    ) -> EntityModelResponse:
        """
        Run the full pipeline for a single entity.

        Args:
            entity: EntityModelRequest or its camelCase JSON dict

        Returns:
            EntityModelResponse with keys, warnings, summary and DDL
        """
        if isinstance(entity, dict):
            entity = EntityModelRequest.from_dict(entity)
        self.validate_entity(entity)

        catalog = FieldCatalog(entity.fields)
        keyspace = self.determine_keyspace(entity)
        table_name = sanitize_identifier(entity.entity_name)

        # TOPIC 2: Analysis
        pk_result = self._partition_key_selector.select(entity, catalog)
        partition_key = pk_result.partition_key

        ck_result = self._clustering_key_selector.select(entity, partition_key, catalog)
        clustering_keys = ck_result.clustering_keys

        index_result = self._index_advisor.recommend(
            entity, partition_key, clustering_keys, catalog
        )

        warnings = []
        summary: Dict[str, str] = {}
        for step in (pk_result, ck_result, index_result):
            warnings.extend(step.warnings)
            summary.update(step.summary)
        warnings.extend(self._constraint_warnings(entity))

        # TOPIC 3: DDL
        create_table_cql, index_cql = self._cql_generator.generate(
            entity, keyspace, table_name, partition_key, clustering_keys,
            index_result.indexes
        )

        return EntityModelResponse(
            entity_name=entity.entity_name,
            keyspace=keyspace,
            table_name=table_name,
            partition_key=list(partition_key),
            clustering_keys=list(clustering_keys),
            indexes=list(index_result.indexes),
            warnings=warnings,
            summary=summary,
            create_table_cql=create_table_cql,
            index_cql=index_cql,
        )

    def validate_entity(self, entity: EntityModelRequest) -> None:
        """
        Reject entities that cannot be modeled at all.

        Raises:
            ValidationError: Blank name, no named fields, no access
                             patterns, or no access pattern with filters
        """
        name = entity.entity_name
        if name is None or not name.strip():
            raise ValidationError("Entity name is required.", entity_name=name)
        if not entity.fields:
            raise ValidationError(f"CSV fields are required for {name}", entity_name=name)
        if not any(f is not None and f.name and f.name.strip() for f in entity.fields):
            raise ValidationError(
                f"At least one named field is required for {name}", entity_name=name
            )
        if not entity.access_patterns:
            raise ValidationError(
                f"At least one access pattern is required for {name}", entity_name=name
            )
        has_filters = any(
            pattern is not None and pattern.filters
            for pattern in entity.access_patterns
        )
        if not has_filters:
            raise ValidationError(
                f"At least one access pattern with filters is required for {name}",
                entity_name=name
            )

    def determine_keyspace(self, entity: EntityModelRequest) -> str:
        """constraints.keyspace, then entity.keyspace, then the configured default."""
        candidates = []
        if entity.constraints is not None:
            candidates.append(entity.constraints.keyspace)
        candidates.append(entity.keyspace)

        for candidate in candidates:
            if candidate and candidate.strip():
                keyspace = sanitize_identifier(candidate)
                # "---" sanitizes to nothing; keep looking
                if keyspace:
                    return keyspace
        return self._config.default_keyspace

    def _constraint_warnings(self, entity: EntityModelRequest) -> list:
        constraints = entity.constraints
        if constraints is None:
            return []
        threshold = self._config.large_partition_mb
        expected = constraints.expected_partition_size_mb
        if expected is not None and expected > threshold:
            return [
                f"Expected partition size exceeds {threshold}MB. "
                f"Consider adding bucketing to partition key."
            ]
        return []
