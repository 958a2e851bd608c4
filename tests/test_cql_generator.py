# ==============================================
# Tests for CQLGenerator
# ==============================================
#
# - full CREATE TABLE text (columns, comments, options order)
# - primary key clause shapes
# - TTL resolution
# - SAI index statements
#
# ==============================================

import pytest

from cqlmodeler.ddl import CQLGenerator
from cqlmodeler.model import (
    Cardinality,
    ClusteringKeyRecommendation,
    ClusteringKeyType,
    ConstraintSettings,
    EntityModelRequest,
    FieldMetadata,
    IndexRecommendation,
)


def ck(name: str, order: str = "ASC") -> ClusteringKeyRecommendation:
    return ClusteringKeyRecommendation(name, order, ClusteringKeyType.EQUALITY)


@pytest.fixture
def generator() -> CQLGenerator:
    return CQLGenerator()


class TestCreateTable:
    def test_full_statement(self, generator):
        entity = EntityModelRequest(
            entity_name="Orders",
            description="Customer's orders",
            fields=[
                FieldMetadata("order_id", "uuid", "Order's id"),
                FieldMetadata("Customer ID", "text"),
                FieldMetadata("created_at", "timestamp", "  "),
            ],
            constraints=ConstraintSettings(ttl_seconds=3600),
        )
        cql = generator.build_create_table(
            entity, "shop", "orders", ["Customer ID"], [ck("created_at", "DESC")]
        )
        assert cql == (
            "CREATE TABLE IF NOT EXISTS shop.orders (\n"
            "    order_id UUID COMMENT 'Order''s id',\n"
            "    customer_id TEXT,\n"
            "    created_at TIMESTAMP,\n"
            "    PRIMARY KEY ((customer_id), created_at)\n"
            ") WITH comment = 'Customer''s orders'"
            " AND CLUSTERING ORDER BY (created_at DESC)"
            " AND compaction = {'class': 'SizeTieredCompactionStrategy'}"
            " AND gc_grace_seconds = 86400"
            " AND default_time_to_live = 3600;"
        )

    def test_minimal_statement(self, generator):
        entity = EntityModelRequest(entity_name="t", fields=[FieldMetadata("id", "uuid")])
        cql = generator.build_create_table(entity, "ks", "t", ["id"], [])
        assert cql == (
            "CREATE TABLE IF NOT EXISTS ks.t (\n"
            "    id UUID,\n"
            "    PRIMARY KEY (id)\n"
            ") WITH compaction = {'class': 'SizeTieredCompactionStrategy'}"
            " AND gc_grace_seconds = 86400;"
        )

    def test_configured_compaction_and_gc_grace(self):
        generator = CQLGenerator("LeveledCompactionStrategy", 3600)
        entity = EntityModelRequest(entity_name="t", fields=[FieldMetadata("id")])
        cql = generator.build_create_table(entity, "ks", "t", ["id"], [])
        assert "compaction = {'class': 'LeveledCompactionStrategy'}" in cql
        assert "gc_grace_seconds = 3600;" in cql

    def test_blank_and_duplicate_fields_are_skipped(self, generator):
        entity = EntityModelRequest(entity_name="t", fields=[
            FieldMetadata("id", "uuid"), FieldMetadata("  "), FieldMetadata("ID", "text"),
        ])
        cql = generator.build_create_table(entity, "ks", "t", ["id"], [])
        assert cql.count("    id ") == 1
        assert "    id UUID," in cql

    def test_unknown_direction_renders_asc(self, generator):
        entity = EntityModelRequest(entity_name="t", fields=[FieldMetadata("a"), FieldMetadata("b")])
        cql = generator.build_create_table(entity, "ks", "t", ["a"], [ck("b", "sideways")])
        assert "CLUSTERING ORDER BY (b ASC)" in cql


class TestPrimaryKeyClause:
    @pytest.mark.parametrize("partition_key, clustering, expected", [
        (["id"], [], "id"),
        (["tenant_id", "user_id"], [], "(tenant_id, user_id)"),
        (["id"], [ck("ts")], "(id), ts"),
        (["Tenant", "User Id"], [ck("ts"), ck("seq")], "(tenant, user_id), ts, seq"),
    ])
    def test_shapes(self, generator, partition_key, clustering, expected):
        assert generator.build_primary_key_clause(partition_key, clustering) == expected


class TestTtl:
    @pytest.mark.parametrize("constraints, expected", [
        (None, None),
        (ConstraintSettings(), None),
        (ConstraintSettings(ttl_seconds=60, retention_days=2), 60),
        (ConstraintSettings(retention_days=2), 172800),
        (ConstraintSettings(ttl_seconds=0, retention_days=1), 86400),
        (ConstraintSettings(ttl_seconds=-5), None),
        (ConstraintSettings(retention_days=0), None),
    ])
    def test_determine_ttl(self, constraints, expected):
        assert CQLGenerator.determine_ttl(constraints) == expected


class TestIndexStatements:
    def test_sai_statement(self, generator):
        statements = generator.build_index_statements(
            "shop", "orders", [IndexRecommendation("Order Status", "r", Cardinality.LOW)]
        )
        assert statements == [
            "CREATE CUSTOM INDEX IF NOT EXISTS orders_order_status_sai_idx "
            "ON shop.orders (order_status) USING 'StorageAttachedIndex';"
        ]

    def test_generate_returns_table_and_indexes(self, generator):
        entity = EntityModelRequest(entity_name="t", fields=[FieldMetadata("id"), FieldMetadata("email")])
        create_table, index_cql = generator.generate(
            entity, "ks", "t", ["id"], [], [IndexRecommendation("email")]
        )
        assert create_table.startswith("CREATE TABLE IF NOT EXISTS ks.t (")
        assert index_cql == [
            "CREATE CUSTOM INDEX IF NOT EXISTS t_email_sai_idx ON ks.t (email) "
            "USING 'StorageAttachedIndex';"
        ]
