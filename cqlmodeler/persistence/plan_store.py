import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from pymongo import MongoClient
from pymongo.errors import ConnectionFailure, OperationFailure, PyMongoError

from cqlmodeler.config import AppConfig
from cqlmodeler.errors import PlanStoreError
from cqlmodeler.model.response import EntityModelResponse, ModelingResponse


# ==============================================
# Plan Stores
# ==============================================
#
# PURPOSE:
#   Keep generated plans around after the CLI exits so a team can
#   diff, review and apply them later. The modeler never reads these
#   back; a stored plan is exactly what generate_models() returned,
#   plus a savedAt timestamp.
#
# BACKENDS:
#   - FilePlanStore   → one JSON file per table:
#                         plans/<keyspace>.<table>.json
#   - MongoPlanStore  → one document per (keyspace, tableName),
#                       upserted on every save
#
# FUNCTION:
#   - create_plan_store(config) → store for PLAN_STORE_BACKEND,
#                                 or None when backend is "none"
#
# ==============================================


def _stamp(plan: EntityModelResponse) -> Dict[str, Any]:
    document = plan.to_dict()
    document["savedAt"] = datetime.now().isoformat()
    return document


# CLASS: FilePlanStore
# --------------------
#   Stateful: owns the plans directory.
#
#   - save(plan) -> Path
#   - save_all(response) -> int
#   - load(keyspace, table_name) -> EntityModelResponse | None
#   - list_plans() -> list[str]          "<keyspace>.<table>" names
#   - exists() -> bool                   any plan on disk?
#   - clear() -> int                     delete every plan, return count
#
class FilePlanStore:
    """Stores each entity plan as a pretty-printed JSON file."""

    def __init__(self, plans_dir: str = "plans/"):
        """
        Initialize the file store.

        Args:
            plans_dir: Directory to store plan files
        """
        self.plans_dir = Path(plans_dir)

        # Create directory if it doesn't exist
        self.plans_dir.mkdir(parents=True, exist_ok=True)

    def _plan_file(self, keyspace: str, table_name: str) -> Path:
        return self.plans_dir / f"{keyspace}.{table_name}.json"

    def save(self, plan: EntityModelResponse) -> Path:
        """
        Write one plan to disk, replacing any previous version.

        Args:
            plan: The generated entity plan

        Returns:
            Path of the written file
        """
        path = self._plan_file(plan.keyspace, plan.table_name)
        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(_stamp(plan), f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise PlanStoreError(f"Could not write plan {path}: {e}") from e

        print(f"✓ Saved plan {plan.keyspace}.{plan.table_name} to {path}")
        return path

    def save_all(self, response: ModelingResponse) -> int:
        """Save every entity plan in a response. Returns the number saved."""
        for plan in response.entities:
            self.save(plan)
        return len(response.entities)

    def load(self, keyspace: str, table_name: str) -> Optional[EntityModelResponse]:
        """
        Read a plan back from disk.

        Returns:
            The stored plan, or None if it was never saved
        """
        path = self._plan_file(keyspace, table_name)
        if not path.exists():
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return EntityModelResponse.from_dict(json.load(f))
        except (OSError, json.JSONDecodeError, KeyError) as e:
            raise PlanStoreError(f"Could not read plan {path}: {e}") from e

    def list_plans(self) -> List[str]:
        # "<keyspace>.<table>.json" → "<keyspace>.<table>"
        return sorted(path.name[:-len(".json")] for path in self.plans_dir.glob("*.json"))

    def exists(self) -> bool:
        return any(self.plans_dir.glob("*.json"))

    def clear(self) -> int:
        removed = 0
        for path in self.plans_dir.glob("*.json"):
            path.unlink()
            removed += 1
        print(f"✓ Cleared {removed} plan(s) from {self.plans_dir}")
        return removed


# CLASS: MongoPlanStore
# ---------------------
#   Stateful: owns one MongoDB connection.
#
#   - connect() / disconnect()
#   - save(plan) -> None                 upsert on (keyspace, tableName)
#   - save_all(response) -> int
#   - load(keyspace, table_name) -> EntityModelResponse | None
#   - list_plans() -> list[str]
#   - clear() -> int
#   - __enter__ / __exit__ for `with MongoPlanStore(...) as store:` usage.
#
class MongoPlanStore:
    """Stores plans in a MongoDB collection, one document per table."""

    def __init__(
        self,
        host: str,
        port: int,
        database: str,
        collection: str = "plans",
        user: Optional[str] = None,
        password: Optional[str] = None
    ):
        # Store connection params. Don't connect yet.
        self.host = host
        self.port = port
        self.database = database
        self.collection_name = collection
        self.user = user
        self.password = password
        self.client = None

    def connect(self) -> None:
        try:
            if self.user and self.password:
                uri = f"mongodb://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"
            else:
                uri = f"mongodb://{self.host}:{self.port}/{self.database}"
            self.client = MongoClient(uri)
            # Test connection
            self.client.admin.command('ping')
            print("✓ Connected to MongoDB plan store.")
        except ConnectionFailure as e:
            print(f"✗ Could not connect to MongoDB: {e}")
            raise PlanStoreError(f"Could not connect to MongoDB: {e}") from e
        except OperationFailure as e:
            print(f"✗ MongoDB authentication failed: {e}")
            raise PlanStoreError(f"MongoDB authentication failed: {e}") from e

    def disconnect(self) -> None:
        if self.client:
            self.client.close()
            print("✓ Disconnected from MongoDB plan store.")
            self.client = None

    def _collection(self):
        if not self.client:
            raise PlanStoreError("Not connected to MongoDB.")
        return self.client[self.database][self.collection_name]

    def save(self, plan: EntityModelResponse) -> None:
        """Insert or replace the plan for (keyspace, tableName)."""
        collection = self._collection()
        document = _stamp(plan)
        try:
            collection.update_one(
                {"keyspace": plan.keyspace, "tableName": plan.table_name},
                {"$set": document},
                upsert=True
            )
        except PyMongoError as e:
            print(f"✗ MongoDB upsert failed: {str(e)[:100]}")
            raise PlanStoreError(f"Could not save plan {plan.keyspace}.{plan.table_name}: {e}") from e
        print(f"✓ Saved plan {plan.keyspace}.{plan.table_name} to MongoDB")

    def save_all(self, response: ModelingResponse) -> int:
        for plan in response.entities:
            self.save(plan)
        return len(response.entities)

    def load(self, keyspace: str, table_name: str) -> Optional[EntityModelResponse]:
        collection = self._collection()
        try:
            document = collection.find_one(
                {"keyspace": keyspace, "tableName": table_name},
                {"_id": 0}
            )
        except PyMongoError as e:
            raise PlanStoreError(f"Could not load plan {keyspace}.{table_name}: {e}") from e
        if document is None:
            return None
        return EntityModelResponse.from_dict(document)

    def list_plans(self) -> List[str]:
        collection = self._collection()
        try:
            documents = collection.find({}, {"_id": 0, "keyspace": 1, "tableName": 1})
            return sorted(f"{doc['keyspace']}.{doc['tableName']}" for doc in documents)
        except PyMongoError as e:
            raise PlanStoreError(f"Could not list plans: {e}") from e

    def clear(self) -> int:
        collection = self._collection()
        try:
            removed = collection.delete_many({}).deleted_count
        except PyMongoError as e:
            raise PlanStoreError(f"Could not clear plans: {e}") from e
        print(f"✓ Cleared {removed} plan(s) from MongoDB")
        return removed

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
        return False


def create_plan_store(config: AppConfig):
    """
    Build the plan store selected by configuration.

    Returns:
        FilePlanStore, MongoPlanStore (not yet connected), or None

    Raises:
        PlanStoreError: Unknown backend name
    """
    backend = (config.plan_store.backend or "none").strip().lower()
    if backend == "none":
        return None
    if backend == "file":
        return FilePlanStore(config.plan_store.plans_dir)
    if backend == "mongo":
        return MongoPlanStore(
            host=config.mongo.host,
            port=config.mongo.port,
            database=config.mongo.database,
            collection=config.mongo.collection,
            user=config.mongo.user,
            password=config.mongo.password
        )
    raise PlanStoreError(f"Unknown plan store backend: {config.plan_store.backend}")
