# ==============================================
# Tests for CassandraModeler (end to end)
# ==============================================
#
# - validation errors and batch policy
# - keyspace resolution
# - merged warnings / summary order
# - reference scenarios
# - properties every response must satisfy
#
# ==============================================

import pytest

from cqlmodeler import CassandraModeler, ValidationError
from cqlmodeler.config import ModelerConfig
from cqlmodeler.model import (
    AccessPattern,
    Cardinality,
    ClusteringKeyType,
    ConstraintSettings,
    EntityModelRequest,
    FieldMetadata,
    FilterType,
    ModelingRequest,
    PatternField,
    SortField,
)
from cqlmodeler.normalization import normalize_name, sanitize_identifier


def eq(name: str) -> PatternField:
    return PatternField(name, FilterType.EQUALITY)


def simple_entity(name="items", **kwargs) -> EntityModelRequest:
    values = dict(
        entity_name=name,
        fields=[FieldMetadata("id", "uuid", cardinality=Cardinality.HIGH)],
        access_patterns=[AccessPattern(name="by_id", filters=[eq("id")])],
    )
    values.update(kwargs)
    return EntityModelRequest(**values)


class TestValidation:
    def test_empty_batch(self, modeler):
        with pytest.raises(ValidationError, match="At least one entity is required"):
            modeler.generate_models(ModelingRequest())

    def test_empty_dict_batch(self, modeler):
        with pytest.raises(ValidationError):
            modeler.generate_models({"entities": [None]})

    @pytest.mark.parametrize("changes, message", [
        ({"entity_name": "  "}, "Entity name is required."),
        ({"fields": []}, "CSV fields are required for items"),
        ({"fields": [FieldMetadata(None, "text"), FieldMetadata(" ")]},
         "At least one named field is required for items"),
        ({"access_patterns": []}, "At least one access pattern is required for items"),
        ({"access_patterns": [AccessPattern(name="empty"), None]},
         "At least one access pattern with filters is required for items"),
    ])
    def test_invalid_entity(self, modeler, changes, message):
        entity = simple_entity(**changes)
        with pytest.raises(ValidationError) as excinfo:
            modeler.model_entity(entity)
        assert str(excinfo.value) == message

    def test_nameless_field_is_not_picked_as_partition_key(self, modeler):
        response = modeler.generate_models({"entities": [{
            "entityName": "things",
            "fields": [{"dataType": "text"}, {"name": "created_at", "timeField": True}],
            "accessPatterns": [{"name": "p", "filters": [{"field": "x", "type": "EQUALITY"}]}],
        }]})
        plan = response.entities[0]
        assert plan.partition_key == ["created_at"]
        assert "No ideal partition key found; defaulted to first CSV field." in plan.warnings
        assert "PRIMARY KEY (created_at)" in plan.create_table_cql

    def test_error_carries_entity_name(self, modeler):
        with pytest.raises(ValidationError) as excinfo:
            modeler.model_entity(simple_entity(fields=[]))
        assert excinfo.value.entity_name == "items"


class TestBatchPolicy:
    def test_abort_on_first_invalid_entity(self, modeler):
        request = ModelingRequest(entities=[simple_entity(), simple_entity("broken", fields=[])])
        with pytest.raises(ValidationError, match="broken"):
            modeler.generate_models(request)

    def test_skip_invalid_entities_when_configured(self):
        modeler = CassandraModeler(ModelerConfig(abort_on_invalid_entity=False))
        request = ModelingRequest(entities=[
            simple_entity("first"),
            simple_entity("broken", access_patterns=[]),
            simple_entity("second"),
        ])
        response = modeler.generate_models(request)
        assert [e.table_name for e in response.entities] == ["first", "second"]
        assert response.rejected == [{
            "entityName": "broken",
            "error": "At least one access pattern is required for broken",
        }]


class TestKeyspace:
    def test_constraint_keyspace_wins(self, modeler):
        entity = simple_entity(keyspace="Entity KS", constraints=ConstraintSettings(keyspace="Sales-Prod"))
        assert modeler.determine_keyspace(entity) == "sales_prod"

    def test_entity_keyspace(self, modeler):
        assert modeler.determine_keyspace(simple_entity(keyspace="Analytics")) == "analytics"

    def test_default_keyspace(self, modeler):
        assert modeler.determine_keyspace(simple_entity()) == "odp_modeler"
        assert modeler.determine_keyspace(simple_entity(keyspace="---")) == "odp_modeler"

    def test_configured_default(self):
        modeler = CassandraModeler(ModelerConfig(default_keyspace="sandbox"))
        assert modeler.determine_keyspace(simple_entity(keyspace="  ")) == "sandbox"


class TestOrdersEntity:
    def test_layout(self, modeler, orders_entity):
        plan = modeler.model_entity(orders_entity)
        assert plan.keyspace == "shop"
        assert plan.table_name == "orders"
        assert plan.partition_key == ["account_id"]
        assert [(ck.field, ck.order) for ck in plan.clustering_keys] == [("created_at", "DESC")]
        assert [idx.field for idx in plan.indexes] == ["status"]
        assert plan.warnings == ["Index on low-cardinality field status may not be optimal."]
        assert list(plan.summary) == ["Partition Key", "Clustering Keys", "Indexes"]
        assert plan.summary["Clustering Keys"] == "created_at (range)"

    def test_ddl(self, modeler, orders_entity):
        plan = modeler.model_entity(orders_entity)
        assert plan.create_table_cql == (
            "CREATE TABLE IF NOT EXISTS shop.orders (\n"
            "    order_id UUID COMMENT 'Order identifier',\n"
            "    account_id UUID COMMENT 'Owning account',\n"
            "    status TEXT COMMENT 'Order status',\n"
            "    created_at TIMESTAMP COMMENT 'Creation time',\n"
            "    total DECIMAL,\n"
            "    PRIMARY KEY ((account_id), created_at)\n"
            ") WITH comment = 'Customer orders'"
            " AND CLUSTERING ORDER BY (created_at DESC)"
            " AND compaction = {'class': 'SizeTieredCompactionStrategy'}"
            " AND gc_grace_seconds = 86400"
            " AND default_time_to_live = 2592000;"
        )
        assert plan.index_cql == [
            "CREATE CUSTOM INDEX IF NOT EXISTS orders_status_sai_idx "
            "ON shop.orders (status) USING 'StorageAttachedIndex';"
        ]

    def test_dict_request(self, modeler, orders_request_dict):
        response = modeler.generate_models(orders_request_dict)
        data = response.to_dict()
        plan = data["entities"][0]
        assert plan["partitionKey"] == ["account_id"]
        assert plan["clusteringKeys"][0]["type"] == "RANGE"
        assert plan["indexes"] == []
        assert plan["createTableCql"].endswith("default_time_to_live = 3600;")
        assert "rejected" not in data

    def test_large_partition_warning_comes_last(self, modeler, orders_entity):
        orders_entity.constraints = ConstraintSettings(expected_partition_size_mb=250)
        plan = modeler.model_entity(orders_entity)
        assert plan.warnings[-1] == (
            "Expected partition size exceeds 100MB. Consider adding bucketing to partition key."
        )

    def test_partition_size_at_threshold_is_fine(self, modeler, orders_entity):
        orders_entity.constraints = ConstraintSettings(expected_partition_size_mb=100)
        plan = modeler.model_entity(orders_entity)
        assert not any("Expected partition size" in w for w in plan.warnings)


class TestScenarios:
    def test_single_equality_pattern(self, modeler):
        plan = modeler.model_entity(EntityModelRequest(
            entity_name="tickets",
            fields=[
                FieldMetadata("id", "uuid", business_key=True),
                FieldMetadata("status", "text"),
                FieldMetadata("created_at", "timestamp", time_field=True),
            ],
            access_patterns=[AccessPattern(name="by_status", filters=[eq("status")])],
        ))
        assert plan.partition_key == ["status"]
        assert plan.clustering_keys == []
        assert plan.indexes == []
        assert plan.index_cql == []
        assert plan.summary["Clustering Keys"] == (
            "No clustering keys required for single-row partitions."
        )

    def test_range_and_sort_on_same_time_field(self, modeler):
        plan = modeler.model_entity(EntityModelRequest(
            entity_name="transactions",
            fields=[
                FieldMetadata("account_id", "uuid"),
                FieldMetadata("tx_date", "timestamp", time_field=True),
            ],
            access_patterns=[
                AccessPattern(name="A", filters=[eq("account_id"),
                                                 PatternField("tx_date", FilterType.RANGE)]),
                AccessPattern(name="B", filters=[eq("account_id")],
                              sort_fields=[SortField("tx_date", "DESC")]),
            ],
        ))
        assert plan.partition_key == ["account_id"]
        assert [ck.field for ck in plan.clustering_keys] == ["tx_date"]
        assert plan.clustering_keys[0].order == "DESC"

    def test_tenant_leads_partition_key(self, modeler):
        plan = modeler.model_entity(EntityModelRequest(
            entity_name="documents",
            fields=[FieldMetadata("tenant_id"), FieldMetadata("doc_id"), FieldMetadata("folder")],
            access_patterns=[
                AccessPattern(name="a", filters=[eq("folder")]),
                AccessPattern(name="b", filters=[eq("folder"), eq("doc_id")]),
            ],
            constraints=ConstraintSettings(multi_tenant=True, tenant_field="tenant_id"),
        ))
        assert plan.partition_key[0] == "tenant_id"

    def test_time_series_without_time_field(self, modeler):
        plan = modeler.model_entity(simple_entity(constraints=ConstraintSettings(time_series=True)))
        assert "Time-series flag enabled but no timestamp field selected for ordering." in plan.warnings
        assert plan.clustering_keys == []

    def test_no_access_patterns(self, modeler):
        with pytest.raises(ValidationError):
            modeler.generate_models(ModelingRequest(entities=[simple_entity(access_patterns=[])]))


class TestResponseProperties:
    @pytest.fixture
    def modeled(self, modeler, orders_entity):
        demotion = EntityModelRequest(
            entity_name="Activity Log",
            fields=[FieldMetadata(name) for name in ("user_id", "status", "region", "category")],
            access_patterns=[
                AccessPattern(name="by_region", filters=[eq("user_id"), eq("status"), eq("region")]),
                AccessPattern(name="by_category",
                              filters=[eq("user_id"), eq("status"), eq("category")],
                              sort_fields=[SortField("category")]),
            ],
        )
        competing = EntityModelRequest(
            entity_name="Ledger",
            fields=[
                FieldMetadata("user_id"),
                FieldMetadata("status"),
                FieldMetadata("created_at", "timestamp", time_field=True),
                FieldMetadata("amount", "decimal"),
            ],
            access_patterns=[
                AccessPattern(name="by_status", filters=[eq("user_id"), eq("status")]),
                AccessPattern(name="by_window", filters=[
                    eq("user_id"), eq("status"), PatternField("created_at", FilterType.RANGE),
                ]),
                AccessPattern(name="by_amount", filters=[
                    eq("user_id"), PatternField("amount", FilterType.RANGE),
                ]),
            ],
        )
        lookup = EntityModelRequest(
            entity_name="tickets",
            fields=[FieldMetadata("id", "uuid"), FieldMetadata("status")],
            access_patterns=[AccessPattern(name="by_status", filters=[eq("status")])],
        )
        entities = [orders_entity, demotion, competing, lookup]
        return [(entity, modeler.model_entity(entity)) for entity in entities]

    @pytest.fixture
    def plans(self, modeled):
        return [plan for _, plan in modeled]

    def test_partition_key_is_never_empty(self, plans):
        assert all(plan.partition_key for plan in plans)

    def test_key_sets_are_disjoint(self, plans):
        for plan in plans:
            pk = {normalize_name(name) for name in plan.partition_key}
            ck = [normalize_name(key.field) for key in plan.clustering_keys]
            indexed = {normalize_name(idx.field) for idx in plan.indexes}
            assert len(ck) == len(set(ck))
            assert not pk & set(ck)
            assert not (pk | set(ck)) & indexed

    def test_clustering_keys_form_a_sequential_prefix(self, modeled):
        # Plain ORDER BY keys may skip intermediate keys
        for entity, plan in modeled:
            filter_sets = [
                pattern.filter_field_names()
                for pattern in entity.access_patterns
                if pattern is not None and pattern.filters
            ]
            names = [normalize_name(key.field) for key in plan.clustering_keys]
            for position, key in enumerate(plan.clustering_keys):
                if key.type == ClusteringKeyType.ORDERING:
                    continue
                prefix = set(names[:position + 1])
                assert any(prefix <= filters for filters in filter_sets), (
                    f"{plan.table_name}.{key.field} has no pattern filtering on {sorted(prefix)}"
                )

    def test_competing_range_pattern_does_not_skip_first_key(self, plans):
        plan = plans[2]
        assert plan.partition_key == ["user_id"]
        assert [(ck.field, ck.type) for ck in plan.clustering_keys] == [
            ("status", ClusteringKeyType.EQUALITY),
            ("created_at", ClusteringKeyType.RANGE),
        ]
        assert [idx.field for idx in plan.indexes] == ["amount"]

    def test_demoted_key_becomes_index(self, plans):
        plan = plans[1]
        assert plan.table_name == "activity_log"
        assert [ck.field for ck in plan.clustering_keys] == ["status", "category"]
        assert [idx.field for idx in plan.indexes] == ["region"]
        assert plan.index_cql == [
            "CREATE CUSTOM INDEX IF NOT EXISTS activity_log_region_sai_idx "
            "ON odp_modeler.activity_log (region) USING 'StorageAttachedIndex';"
        ]

    def test_ddl_matches_layout(self, plans):
        for plan in plans:
            columns = ", ".join(sanitize_identifier(name) for name in plan.partition_key)
            if plan.clustering_keys:
                assert f"PRIMARY KEY (({columns}), " in plan.create_table_cql
            elif len(plan.partition_key) == 1:
                assert f"PRIMARY KEY ({columns})\n" in plan.create_table_cql
            else:
                assert f"PRIMARY KEY (({columns}))\n" in plan.create_table_cql
            for key in plan.clustering_keys:
                assert f"{sanitize_identifier(key.field)} {key.order}" in plan.create_table_cql
            assert len(plan.index_cql) == len(plan.indexes)

    def test_clustering_order_only_with_clustering_keys(self, plans):
        assert any(not plan.clustering_keys for plan in plans)
        for plan in plans:
            has_order = "CLUSTERING ORDER BY" in plan.create_table_cql
            assert has_order == bool(plan.clustering_keys), plan.table_name

    def test_idempotent(self, modeler, orders_entity):
        first = modeler.model_entity(orders_entity).to_dict()
        second = modeler.model_entity(orders_entity).to_dict()
        assert first == second
