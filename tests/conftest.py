# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# This file contains shared fixtures for all tests.
#
# FIXTURES:
# ---------
# - isolated_config      (autouse) fresh config singleton per test
# - modeler_config       ModelerConfig with defaults, no .env involved
# - modeler              CassandraModeler built on modeler_config
# - app_config           AppConfig with a file plan store under tmp_path
# - orders_entity        account / order entity used across modules
# - orders_request_dict  same entity in camelCase JSON form
#
# ==============================================

import pytest

from cqlmodeler import config as config_module
from cqlmodeler.config import AppConfig, ModelerConfig, PlanStoreConfig
from cqlmodeler.model import (
    AccessPattern,
    Cardinality,
    ConstraintSettings,
    EntityModelRequest,
    FieldMetadata,
    FilterType,
    PatternField,
    SortField,
)
from cqlmodeler.modeler import CassandraModeler


@pytest.fixture(autouse=True)
def isolated_config():
    """Never let one test's configuration leak into the next."""
    config_module.reset_config()
    yield
    config_module.reset_config()


@pytest.fixture
def modeler_config() -> ModelerConfig:
    return ModelerConfig()


@pytest.fixture
def modeler(modeler_config) -> CassandraModeler:
    return CassandraModeler(modeler_config)


@pytest.fixture
def app_config(tmp_path) -> AppConfig:
    return AppConfig(
        modeler=ModelerConfig(),
        plan_store=PlanStoreConfig(backend="file", plans_dir=str(tmp_path / "plans")),
    )


@pytest.fixture
def orders_entity() -> EntityModelRequest:
    """
    Orders keyed by account.

    - by_account:        account_id =, created_at range
    - recent_by_account: account_id =, ORDER BY created_at DESC
    - by_status:         status = (no partition key → index)
    """
    return EntityModelRequest(
        entity_name="Orders",
        keyspace="shop",
        description="Customer orders",
        fields=[
            FieldMetadata("order_id", "uuid", "Order identifier", business_key=True,
                          cardinality=Cardinality.HIGH),
            FieldMetadata("account_id", "uuid", "Owning account", cardinality=Cardinality.HIGH),
            FieldMetadata("status", "text", "Order status", cardinality=Cardinality.LOW),
            FieldMetadata("created_at", "timestamp", "Creation time", time_field=True),
            FieldMetadata("total", "decimal", None),
        ],
        access_patterns=[
            AccessPattern(
                name="by_account",
                description="Orders of an account in a time window",
                filters=[
                    PatternField("account_id", FilterType.EQUALITY),
                    PatternField("created_at", FilterType.RANGE),
                ],
            ),
            AccessPattern(
                name="recent_by_account",
                filters=[PatternField("account_id", FilterType.EQUALITY)],
                sort_fields=[SortField("created_at", "desc")],
            ),
            AccessPattern(
                name="by_status",
                description="Orders in a given status",
                filters=[PatternField("status", FilterType.EQUALITY)],
            ),
        ],
        constraints=ConstraintSettings(retention_days=30),
    )


@pytest.fixture
def orders_request_dict() -> dict:
    return {
        "entities": [
            {
                "entityName": "Orders",
                "keyspace": "shop",
                "description": "Customer orders",
                "fields": [
                    {"name": "order_id", "dataType": "uuid", "businessKey": True, "cardinality": "high"},
                    {"name": "account_id", "dataType": "uuid", "cardinality": "HIGH"},
                    {"name": "status", "dataType": "text", "cardinality": "low"},
                    {"name": "created_at", "dataType": "timestamp", "timeField": True},
                ],
                "accessPatterns": [
                    {
                        "name": "by_account",
                        "filters": [
                            {"field": "account_id", "type": "EQUALITY"},
                            {"field": "created_at", "type": "range"},
                        ],
                    },
                    {
                        "name": "recent_by_account",
                        "filters": [{"field": "account_id", "type": "equality"}],
                        "sortFields": [{"field": "created_at", "direction": "DESC"}],
                    },
                ],
                "constraints": {"ttlSeconds": 3600},
            }
        ]
    }
