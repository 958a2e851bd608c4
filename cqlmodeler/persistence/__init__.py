# ==============================================
# TOPIC 4: PERSISTENCE
# ==============================================
#
# Optional storage of generated plans. Used by the CLI only;
# the modeler itself never touches it.
#
# Modules:
# --------
# - plan_store.py → FilePlanStore, MongoPlanStore, create_plan_store
#
# ==============================================

from .plan_store import FilePlanStore, MongoPlanStore, create_plan_store

__all__ = ["FilePlanStore", "MongoPlanStore", "create_plan_store"]
