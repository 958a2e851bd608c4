# ==============================================
# CQLGenerator
# ==============================================
#
# PURPOSE:
#   Render the resolved key layout as ready-to-run CQL.
#   Nothing is executed here; the statements are returned as text.
#
# CLASS: CQLGenerator
# -------------------
#   Constructor:
#   ------------
#   - __init__(compaction_class="SizeTieredCompactionStrategy",
#              gc_grace_seconds=86400)
#
#   Methods:
#   --------
#   - generate(entity, keyspace, table_name, partition_key,
#              clustering_keys, indexes) -> (create_table_cql, index_cql)
#
#   - build_create_table(...) -> str
#       CREATE TABLE IF NOT EXISTS <ks>.<table> (
#           <column> <TYPE> [COMMENT '<description>'],
#           ...,
#           PRIMARY KEY (<primary key clause>)
#       ) WITH <option> AND <option> ...;
#
#       Options, in order, each only when it applies:
#         comment = '<entity description>'
#         CLUSTERING ORDER BY (<ck> <dir>, ...)   ← only with clustering keys
#         compaction = {'class': '<compaction_class>'}
#         gc_grace_seconds = <n>
#         default_time_to_live = <ttl>             ← ttl_seconds, else retention_days * 86400
#
#   - build_primary_key_clause(partition_key, clustering_keys) -> str
#       "id"                  single partition column, no clustering
#       "(a, b)"              composite partition key, no clustering
#       "(a), c, d"           clustering present
#       "(a, b), c, d"
#
#   - build_index_statements(keyspace, table_name, indexes) -> list[str]
#       One SAI statement per recommendation, named <table>_<field>_sai_idx.
#
# ==============================================

from typing import List, Optional, Set, Tuple

from cqlmodeler.model.request import ConstraintSettings, EntityModelRequest
from cqlmodeler.model.response import ClusteringKeyRecommendation, IndexRecommendation
from cqlmodeler.normalization.identifiers import escape_quotes, sanitize_identifier
from cqlmodeler.normalization.type_mapper import TypeMapper


SECONDS_PER_DAY = 86400


class CQLGenerator:
    """Renders CREATE TABLE and CREATE CUSTOM INDEX statements."""

    def __init__(
        self,
        compaction_class: str = "SizeTieredCompactionStrategy",
        gc_grace_seconds: int = 86400
    ):
        self.compaction_class = compaction_class
        self.gc_grace_seconds = gc_grace_seconds

    def generate(
        self,
        entity: EntityModelRequest,
        keyspace: str,
        table_name: str,
        partition_key: List[str],
        clustering_keys: List[ClusteringKeyRecommendation],
        indexes: List[IndexRecommendation]
    ) -> Tuple[str, List[str]]:
        """
        Generate all DDL for one entity.

        Returns:
            Tuple of (create_table_cql, index_cql)
        """
        create_table = self.build_create_table(
            entity, keyspace, table_name, partition_key, clustering_keys
        )
        index_statements = self.build_index_statements(keyspace, table_name, indexes)
        return create_table, index_statements

    def build_create_table(
        self,
        entity: EntityModelRequest,
        keyspace: str,
        table_name: str,
        partition_key: List[str],
        clustering_keys: List[ClusteringKeyRecommendation]
    ) -> str:
        columns = self._column_definitions(entity)
        columns.append(
            f"    PRIMARY KEY ({self.build_primary_key_clause(partition_key, clustering_keys)})"
        )
        cql = f"CREATE TABLE IF NOT EXISTS {keyspace}.{table_name} (\n"
        cql += ",\n".join(columns)
        cql += "\n)"

        options = self._table_options(entity, clustering_keys)
        if options:
            cql += " WITH " + " AND ".join(options)
        return cql + ";"

    def build_primary_key_clause(
        self,
        partition_key: List[str],
        clustering_keys: List[ClusteringKeyRecommendation]
    ) -> str:
        partition_columns = ", ".join(sanitize_identifier(name) for name in partition_key)
        if not clustering_keys:
            if len(partition_key) == 1:
                return partition_columns
            return f"({partition_columns})"

        clustering_columns = ", ".join(
            sanitize_identifier(ck.field) for ck in clustering_keys
        )
        return f"({partition_columns}), {clustering_columns}"

    def build_index_statements(
        self,
        keyspace: str,
        table_name: str,
        indexes: List[IndexRecommendation]
    ) -> List[str]:
        statements = []
        for recommendation in indexes:
            index_name = sanitize_identifier(f"{table_name}_{recommendation.field}_sai_idx")
            statements.append(
                f"CREATE CUSTOM INDEX IF NOT EXISTS {index_name} "
                f"ON {keyspace}.{table_name} ({sanitize_identifier(recommendation.field)}) "
                f"USING 'StorageAttachedIndex';"
            )
        return statements

    @staticmethod
    def determine_ttl(constraints: Optional[ConstraintSettings]) -> Optional[int]:
        """ttl_seconds wins over retention_days; non-positive values are ignored."""
        if constraints is None:
            return None
        if constraints.ttl_seconds is not None and constraints.ttl_seconds > 0:
            return constraints.ttl_seconds
        if constraints.retention_days is not None and constraints.retention_days > 0:
            return constraints.retention_days * SECONDS_PER_DAY
        return None

    def _column_definitions(self, entity: EntityModelRequest) -> List[str]:
        columns = []
        seen: Set[str] = set()
        for field in entity.fields:
            if field is None or not field.name or not field.name.strip():
                continue
            # Same normalized name declared twice: the first declaration wins
            if field.normalized_name in seen:
                continue
            seen.add(field.normalized_name)

            column = f"    {sanitize_identifier(field.name)} {TypeMapper.to_cql(field.data_type)}"
            if field.description and field.description.strip():
                column += f" COMMENT '{escape_quotes(field.description)}'"
            columns.append(column)
        return columns

    def _table_options(
        self,
        entity: EntityModelRequest,
        clustering_keys: List[ClusteringKeyRecommendation]
    ) -> List[str]:
        options = []
        if entity.description and entity.description.strip():
            options.append(f"comment = '{escape_quotes(entity.description)}'")

        if clustering_keys:
            order_clause = ", ".join(
                f"{sanitize_identifier(ck.field)} {self._clustering_order(ck.order)}"
                for ck in clustering_keys
            )
            options.append(f"CLUSTERING ORDER BY ({order_clause})")

        options.append(f"compaction = {{'class': '{self.compaction_class}'}}")
        options.append(f"gc_grace_seconds = {self.gc_grace_seconds}")

        ttl = self.determine_ttl(entity.constraints)
        if ttl is not None:
            options.append(f"default_time_to_live = {ttl}")
        return options

    @staticmethod
    def _clustering_order(order: Optional[str]) -> str:
        # Anything that is not DESC renders as ASC
        if order and order.strip().upper() == "DESC":
            return "DESC"
        return "ASC"
