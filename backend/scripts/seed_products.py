#!/usr/bin/env python3
"""
Seed the catalogue, either with the built-in sample products or from a
JSON file holding a list of products (or {"items": [...]}).

Usage:
    python scripts/seed_products.py
    python scripts/seed_products.py --file catalogue.json --reset
"""
import argparse
import json
import logging
import os
import sys

# allow running from repo/scripts
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from storefront.config import get_settings  # noqa: E402
from storefront.db import Store  # noqa: E402
from storefront.seed import seed_catalog  # noqa: E402
from storefront.utils.logging_config import configure_logging  # noqa: E402

logger = logging.getLogger("seed_products")


def load_entries(path):
    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    if isinstance(data, dict):
        data = data.get("items") or data.get("products") or []
    if not isinstance(data, list):
        raise SystemExit(f"{path}: expected a list of products")
    return data


def main(argv=None):
    parser = argparse.ArgumentParser(description="Seed the storefront catalogue.")
    parser.add_argument("--file", help="JSON file with products (defaults to the sample set)")
    parser.add_argument("--reset", action="store_true", help="drop and recreate all tables first")
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings)
    entries = load_entries(args.file) if args.file else None

    with Store.from_settings(settings) as store:
        store.init_schema(reset=args.reset)
        db = store.session()
        try:
            created = seed_catalog(db, entries)
        finally:
            db.close()
    logger.info("Done: %d new products", len(created))


if __name__ == "__main__":
    main()
