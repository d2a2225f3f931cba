#!/usr/bin/env python3
"""
Recompute department item counts and capacity from live items.

Usage:
    python scripts/reconcile_capacity.py --company-id 3
    python scripts/reconcile_capacity.py --department-id 12
"""
import argparse
import sys

from assetdesk.core.logger import init_logging
from assetdesk.db.session import session_scope
from assetdesk.services.inventory import reconcile_company, reconcile_department
from assetdesk.store import build_entity_store


def main() -> int:
    parser = argparse.ArgumentParser(description="Repair department capacity counters")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--company-id", type=int, help="Reconcile every department of a company")
    group.add_argument("--department-id", type=int, help="Reconcile a single department")
    args = parser.parse_args()

    init_logging()
    with session_scope() as db:
        store = build_entity_store(db)
        if args.company_id is not None:
            departments = reconcile_company(store, args.company_id)
        else:
            departments = [reconcile_department(store, args.department_id)]

    if not departments:
        print("No departments found.")
        return 1
    for d in departments:
        print(f"{d.id:>6}  {d.name:<30} items={d.item_count:<6} capacity={d.capacity_used}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
