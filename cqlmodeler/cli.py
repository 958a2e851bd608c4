# ==============================================
# CLI — Command Line Entry Point
# ==============================================
#
# PURPOSE:
#   Provides command-line interface to run the modeler.
#   This is how users interact with the system.
#
# COMMANDS:
# ---------
# 1. Generate table designs from a request file or URL:
#    python -m cqlmodeler.cli generate requests/orders.json
#    python -m cqlmodeler.cli generate http://127.0.0.1:8000/request --cql-only
#    python -m cqlmodeler.cli generate orders.json --out plan.json --save
#
# 2. Turn a CSV data dictionary into field metadata:
#    python -m cqlmodeler.cli fields columns.csv --entity orders
#
# 3. List or clear stored plans (PLAN_STORE_BACKEND=file|mongo):
#    python -m cqlmodeler.cli plans
#    python -m cqlmodeler.cli plans --clear
#
# EXIT CODES:
# -----------
#   0 → success
#   1 → I/O failure (file, network, plan store)
#   2 → request rejected (ValidationError)
#
# ==============================================

import argparse
import json
import sys
from typing import List, Optional

import requests

from cqlmodeler.config import AppConfig, get_config
from cqlmodeler.errors import PlanStoreError, ValidationError
from cqlmodeler.model.response import ModelingResponse
from cqlmodeler.modeler import CassandraModeler
from cqlmodeler.normalization.field_catalog import load_fields_csv
from cqlmodeler.persistence.plan_store import MongoPlanStore, create_plan_store
from cqlmodeler.sources import load_request


EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_INVALID = 2


def render_cql(response: ModelingResponse) -> str:
    """All DDL of a response as one script, warnings as CQL comments."""
    blocks = []
    for plan in response.entities:
        lines = [f"-- {plan.keyspace}.{plan.table_name}"]
        lines.extend(f"-- ⚠ {warning}" for warning in plan.warnings)
        lines.append(plan.create_table_cql)
        lines.extend(plan.index_cql)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + "\n"


def _save_plans(config: AppConfig, response: ModelingResponse) -> int:
    store = create_plan_store(config)
    if store is None:
        print("⚠ PLAN_STORE_BACKEND is 'none'; plans were not saved.")
        return EXIT_OK
    if isinstance(store, MongoPlanStore):
        with store:
            store.save_all(response)
    else:
        store.save_all(response)
    return EXIT_OK


def cmd_generate(args: argparse.Namespace, config: AppConfig) -> int:
    try:
        request = load_request(args.source)
        response = CassandraModeler(config.modeler).generate_models(request)
    except ValidationError as e:
        print(f"✗ {e}", file=sys.stderr)
        return EXIT_INVALID
    except (OSError, requests.RequestException) as e:
        print(f"✗ Could not read {args.source}: {e}", file=sys.stderr)
        return EXIT_IO_ERROR

    for rejected in response.rejected:
        print(f"⚠ Skipped {rejected['entityName']}: {rejected['error']}", file=sys.stderr)

    if args.cql_only:
        output = render_cql(response)
    else:
        output = json.dumps(response.to_dict(), indent=2, ensure_ascii=False) + "\n"

    if args.out:
        with open(args.out, 'w', encoding='utf-8') as f:
            f.write(output)
        print(f"✓ Wrote {len(response.entities)} plan(s) to {args.out}")
    else:
        sys.stdout.write(output)

    if args.save:
        try:
            return _save_plans(config, response)
        except PlanStoreError as e:
            print(f"✗ {e}", file=sys.stderr)
            return EXIT_IO_ERROR
    return EXIT_OK


def cmd_fields(args: argparse.Namespace, config: AppConfig) -> int:
    try:
        fields = load_fields_csv(args.csv)
    except ValidationError as e:
        print(f"✗ {e}", file=sys.stderr)
        return EXIT_INVALID
    except OSError as e:
        print(f"✗ Could not read {args.csv}: {e}", file=sys.stderr)
        return EXIT_IO_ERROR

    field_dicts = [f.to_dict() for f in fields]
    if args.entity:
        output = {"entityName": args.entity, "fields": field_dicts, "accessPatterns": []}
    else:
        output = field_dicts
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return EXIT_OK


def cmd_plans(args: argparse.Namespace, config: AppConfig) -> int:
    try:
        store = create_plan_store(config)
        if store is None:
            print("⚠ No plan store configured (set PLAN_STORE_BACKEND to 'file' or 'mongo').")
            return EXIT_IO_ERROR
        if isinstance(store, MongoPlanStore):
            store.connect()
        try:
            if args.clear:
                store.clear()
            else:
                names = store.list_plans()
                if not names:
                    print("No plans stored.")
                for name in names:
                    print(name)
        finally:
            if isinstance(store, MongoPlanStore):
                store.disconnect()
    except PlanStoreError as e:
        print(f"✗ {e}", file=sys.stderr)
        return EXIT_IO_ERROR
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cqlmodeler",
        description="Design Cassandra tables from declared access patterns."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate table designs and CQL")
    generate.add_argument("source", help="Request JSON file or http(s) URL")
    generate.add_argument("--out", help="Write output to this file instead of stdout")
    generate.add_argument("--save", action="store_true", help="Save plans to the configured plan store")
    generate.add_argument("--cql-only", action="store_true", help="Print only the CQL statements")
    generate.set_defaults(handler=cmd_generate)

    fields = subparsers.add_parser("fields", help="Parse a CSV data dictionary into field metadata")
    fields.add_argument("csv", help="CSV file with column_name and data_type columns")
    fields.add_argument("--entity", help="Wrap the fields in an entity request skeleton")
    fields.set_defaults(handler=cmd_fields)

    plans = subparsers.add_parser("plans", help="List or clear stored plans")
    plans.add_argument("--clear", action="store_true", help="Delete every stored plan")
    plans.set_defaults(handler=cmd_plans)

    return parser


def main(argv: Optional[List[str]] = None, config: Optional[AppConfig] = None) -> int:
    args = build_parser().parse_args(argv)
    return args.handler(args, config or get_config())


if __name__ == "__main__":
    sys.exit(main())
