# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load and validate all configuration from environment
#   variables / .env file. Provides typed config objects
#   to all other modules.
#
# CLASSES:
# --------
# - ModelerConfig (dataclass)
#     default_keyspace: str          (default "odp_modeler")
#     abort_on_invalid_entity: bool  (default True)
#     large_partition_mb: int        (default 100)
#     compaction_class: str          (default "SizeTieredCompactionStrategy")
#     gc_grace_seconds: int          (default 86400)
#
# - MongoConfig (dataclass)
#     host: str          (default "localhost")
#     port: int          (default 27017)
#     user: str | None   (default None)
#     password: str | None (default None)
#     database: str      (default "cql_modeler")
#     collection: str    (default "plans")
#
# - PlanStoreConfig (dataclass)
#     backend: str       ("none" | "file" | "mongo", default "none")
#     plans_dir: str     (default "plans/")
#
# - AppConfig (dataclass)
#     modeler: ModelerConfig
#     plan_store: PlanStoreConfig
#     mongo: MongoConfig
#
# FUNCTIONS:
# ----------
# - get_config() -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
#
# - reset_config() -> None
#     Drop the singleton (tests, or after changing the environment).
#
# USAGE:
# ------
#   from cqlmodeler.config import get_config
#   config = get_config()
#   print(config.modeler.default_keyspace)
#   print(config.plan_store.backend)
#
# ==============================================

import os
from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ModelerConfig:
    """Knobs of the modeling pipeline itself."""
    default_keyspace: str = "odp_modeler"
    # All-or-nothing batches; False skips invalid entities and reports them
    abort_on_invalid_entity: bool = True
    large_partition_mb: int = 100
    compaction_class: str = "SizeTieredCompactionStrategy"
    gc_grace_seconds: int = 86400


@dataclass
class MongoConfig:
    """MongoDB configuration for the optional plan store."""
    host: str = "localhost"
    port: int = 27017
    user: Optional[str] = None
    password: Optional[str] = None
    database: str = "cql_modeler"
    collection: str = "plans"


@dataclass
class PlanStoreConfig:
    """Where generated plans are kept, if anywhere."""
    backend: str = "none"
    plans_dir: str = "plans/"


@dataclass
class AppConfig:
    """Main application configuration."""
    modeler: ModelerConfig = field(default_factory=ModelerConfig)
    plan_store: PlanStoreConfig = field(default_factory=PlanStoreConfig)
    mongo: MongoConfig = field(default_factory=MongoConfig)


# Singleton instance
_config_instance: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Returns:
        AppConfig: Application configuration
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    # Build modeler configuration
    modeler_config = ModelerConfig(
        default_keyspace=os.getenv("MODELER_DEFAULT_KEYSPACE", "odp_modeler"),
        abort_on_invalid_entity=_env_bool("MODELER_ABORT_ON_INVALID", True),
        large_partition_mb=int(os.getenv("MODELER_LARGE_PARTITION_MB", "100")),
        compaction_class=os.getenv("MODELER_COMPACTION_CLASS", "SizeTieredCompactionStrategy"),
        gc_grace_seconds=int(os.getenv("MODELER_GC_GRACE_SECONDS", "86400"))
    )

    # Build plan store configuration
    plan_store_config = PlanStoreConfig(
        backend=os.getenv("PLAN_STORE_BACKEND", "none").strip().lower(),
        plans_dir=os.getenv("PLANS_DIR", "plans/")
    )

    # Build MongoDB configuration
    mongo_config = MongoConfig(
        host=os.getenv("MONGO_HOST", "localhost"),
        port=int(os.getenv("MONGO_PORT", "27017")),
        user=os.getenv("MONGO_USER") or None,
        password=os.getenv("MONGO_PASSWORD") or None,
        database=os.getenv("MONGO_DATABASE", "cql_modeler"),
        collection=os.getenv("MONGO_COLLECTION", "plans")
    )

    # Build main application configuration
    _config_instance = AppConfig(
        modeler=modeler_config,
        plan_store=plan_store_config,
        mongo=mongo_config
    )

    return _config_instance


def reset_config() -> None:
    """Forget the cached configuration so the next get_config() reloads it."""
    global _config_instance
    _config_instance = None
