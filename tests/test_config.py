# ==============================================
# Tests for Configuration
# ==============================================

from cqlmodeler.config import get_config, reset_config


class TestGetConfig:
    def test_defaults(self, monkeypatch):
        for name in ("MODELER_DEFAULT_KEYSPACE", "MODELER_ABORT_ON_INVALID",
                     "PLAN_STORE_BACKEND", "MONGO_USER"):
            monkeypatch.delenv(name, raising=False)
        config = get_config()
        assert config.modeler.default_keyspace == "odp_modeler"
        assert config.modeler.abort_on_invalid_entity is True
        assert config.modeler.gc_grace_seconds == 86400
        assert config.plan_store.backend == "none"
        assert config.mongo.user is None

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("MODELER_DEFAULT_KEYSPACE", "sandbox")
        monkeypatch.setenv("MODELER_ABORT_ON_INVALID", "false")
        monkeypatch.setenv("MODELER_LARGE_PARTITION_MB", "250")
        monkeypatch.setenv("PLAN_STORE_BACKEND", " FILE ")
        monkeypatch.setenv("MONGO_PORT", "27018")
        config = get_config()
        assert config.modeler.default_keyspace == "sandbox"
        assert config.modeler.abort_on_invalid_entity is False
        assert config.modeler.large_partition_mb == 250
        assert config.plan_store.backend == "file"
        assert config.mongo.port == 27018

    def test_singleton_until_reset(self, monkeypatch):
        first = get_config()
        assert get_config() is first
        reset_config()
        assert get_config() is not first
