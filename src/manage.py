"""FabricLoop order engine management CLI.

Creates and drops the ledger and transaction tables, and seeds the ledger
with a material for local experiments.

Usage:
    python src/manage.py setup-db
    python src/manage.py drop-db
    python src/manage.py seed-material --seller-id seller-001 --quantity 100 --unit kg
"""

import argparse
import sys


def _domain():
    from ordering.domain import ordering

    ordering.init()
    return ordering


def setup_database():
    from ordering.utils.db import setup_db

    print("Creating ordering database schema...")
    setup_db(_domain())
    print("Done.")


def drop_database():
    from ordering.utils.db import drop_db

    print("Dropping ordering database schema...")
    drop_db(_domain())
    print("Done.")


def seed_material(seller_id, quantity, unit, title=None, material_id=None):
    from ordering.engine import OrderEngine

    engine = OrderEngine(domain=_domain())
    try:
        material = engine.register_material(
            seller_id=seller_id,
            available_quantity=quantity,
            unit=unit,
            title=title,
            material_id=material_id,
        )
    finally:
        engine.dispatcher.shutdown(wait=True)
    print(f"Material {material.id}: {material.available_quantity} {material.unit} from {material.seller_id}")


def main():
    parser = argparse.ArgumentParser(description="FabricLoop order engine management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    seed_parser = subparsers.add_parser("seed-material", help="Register a material in the ledger")
    seed_parser.add_argument("--seller-id", required=True)
    seed_parser.add_argument("--quantity", type=float, required=True)
    seed_parser.add_argument("--unit", default="kg", choices=["m", "kg", "yards", "lbs"])
    seed_parser.add_argument("--title")
    seed_parser.add_argument("--material-id")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed-material":
        seed_material(args.seller_id, args.quantity, args.unit, title=args.title, material_id=args.material_id)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
