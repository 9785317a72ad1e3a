from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .models import Category, Store
from .store import init_catalog, save_store


def _parse_export(raw: Any, store_name: str | None, url: str | None) -> tuple[str, str | None, list[Category]]:
    """
    Accept either a bare list of categories or a full store object.

    A store object's own name and url are used unless overridden.
    """
    if isinstance(raw, list):
        if not store_name:
            raise ValueError("A store name is required when importing a list of categories")
        return store_name, url, [Category.model_validate(c) for c in raw]

    if isinstance(raw, dict):
        store = Store.model_validate(raw)
        return store_name or store.name, url or store.url, store.categories

    raise ValueError("Scraped export must be a JSON list of categories or a store object")


def run_ingestion(
    source_path: Path,
    store_name: str | None = None,
    url: str | None = None,
    config: CatalogConfig = DEFAULT_CATALOG_CONFIG,
) -> Path:
    """
    Merge a scraped menu export into the catalog.

    Steps:
    - Read the export (categories list or store object).
    - Merge it into the matching store, or add a new one.
    - Persist the catalog and return its path.
    """
    init_catalog(config)
    raw = json.loads(Path(source_path).read_text(encoding="utf-8"))
    name, store_url, categories = _parse_export(raw, store_name, url)
    save_store(name, categories, store_url, config)
    return config.catalog_path


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Import a scraped menu into the catalog.")
    parser.add_argument("source", type=Path, help="JSON file produced by the scraper")
    parser.add_argument("--store-name", help="Store name (required for a categories list)")
    parser.add_argument("--url", help="Store page URL")
    parser.add_argument("--data-dir", type=Path, default=DEFAULT_CATALOG_CONFIG.data_dir)
    args = parser.parse_args(argv)

    config = CatalogConfig(data_dir=args.data_dir)
    path = run_ingestion(args.source, args.store_name, args.url, config)
    print(f"Ingestion complete. Catalog saved to: {path}")


if __name__ == "__main__":
    main()
