# ==============================================
# TOPIC 3: DDL GENERATION
# ==============================================
#
# This package renders the recommended layout as CQL text.
# It never connects to a cluster and never executes anything.
#
# Modules:
# --------
# - cql_generator.py  → CREATE TABLE + CREATE CUSTOM INDEX (SAI)
#
# ==============================================

from .cql_generator import CQLGenerator

__all__ = ["CQLGenerator"]
