from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any, Iterable

from pydantic import ValidationError

from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .models import Category, Store

logger = logging.getLogger(__name__)


def init_catalog(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> None:
    """Create the data directory and an empty catalog file if missing."""
    config.data_dir.mkdir(parents=True, exist_ok=True)
    if not config.catalog_path.exists():
        config.catalog_path.write_text("[]", encoding="utf-8")


def load_catalog(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> list[Store]:
    """
    Read the catalog file into ``Store`` models.

    A missing or corrupt file reads as an empty catalog. Individual store
    entries that fail validation are skipped.
    """
    try:
        raw = json.loads(config.catalog_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return []
    except (OSError, ValueError):
        logger.warning("Could not read catalog %s", config.catalog_path, exc_info=True)
        return []

    if not isinstance(raw, list):
        logger.warning("Catalog %s is not a JSON list, ignoring it", config.catalog_path)
        return []

    stores: list[Store] = []
    for entry in raw:
        try:
            stores.append(Store.model_validate(entry))
        except ValidationError:
            logger.warning("Skipping malformed store entry in catalog", exc_info=True)
    return stores


def _dump(stores: Iterable[Store]) -> list[dict[str, Any]]:
    return [s.model_dump(by_alias=True, exclude_none=True) for s in stores]


def save_catalog(stores: list[Store], config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> None:
    config.data_dir.mkdir(parents=True, exist_ok=True)
    config.catalog_path.write_text(
        json.dumps(_dump(stores), indent=2, ensure_ascii=False), encoding="utf-8"
    )
    logger.info("Saved %d stores to %s", len(stores), config.catalog_path)


def find_store(stores: list[Store], name: str) -> Store | None:
    """Case-insensitive lookup by store name."""
    wanted = name.lower()
    for store in stores:
        if store.name.lower() == wanted:
            return store
    return None


def merge_categories(store: Store, categories: list[Category]) -> Store:
    """
    Return a copy of ``store`` with ``categories`` merged in.

    Categories match on exact name. Within a matched category a dish is new
    unless one with the same title and description already exists.
    """
    merged = [c.model_copy(deep=True) for c in store.categories]
    by_name = {c.name: c for c in merged}

    for incoming in categories:
        existing = by_name.get(incoming.name)
        if existing is None:
            copy = incoming.model_copy(deep=True)
            merged.append(copy)
            by_name[copy.name] = copy
            logger.debug("Added category %s with %d dishes", incoming.name, len(incoming.dishes))
            continue

        seen = {(d.title, d.description) for d in existing.dishes}
        added = 0
        for dish in incoming.dishes:
            key = (dish.title, dish.description)
            if key not in seen:
                existing.dishes.append(dish.model_copy(deep=True))
                seen.add(key)
                added += 1
        logger.debug("Merged %d new dishes into category %s", added, incoming.name)

    return store.model_copy(update={"categories": merged})


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "_", name, flags=re.IGNORECASE).lower()


def save_store(
    name: str,
    categories: list[Category],
    url: str | None = None,
    config: CatalogConfig = DEFAULT_CATALOG_CONFIG,
) -> Store:
    """Insert or merge a scraped store into the catalog and persist it."""
    stores = load_catalog(config)
    now = datetime.now(timezone.utc).isoformat()

    index = next(
        (i for i, s in enumerate(stores) if s.name.lower() == name.lower()), None
    )
    if index is not None:
        updated = merge_categories(stores[index], categories)
        updated = updated.model_copy(
            update={"last_scraped": now, "url": url or updated.url}
        )
        stores[index] = updated
        logger.info(
            "Updated store %s: %d categories, %d dishes",
            name, len(updated.categories), updated.dish_count(),
        )
    else:
        updated = Store(name=name, url=url, last_scraped=now, categories=categories)
        stores.append(updated)
        logger.info(
            "Created store %s: %d categories, %d dishes",
            name, len(categories), updated.dish_count(),
        )

    save_catalog(stores, config)

    if config.write_store_files:
        store_file = config.data_dir / f"{_slug(updated.name)}.json"
        store_file.write_text(
            json.dumps(_dump([updated])[0], indent=2, ensure_ascii=False),
            encoding="utf-8",
        )

    return updated


def delete_store(name: str, config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> bool:
    stores = load_catalog(config)
    remaining = [s for s in stores if s.name.lower() != name.lower()]
    if len(remaining) == len(stores):
        return False
    save_catalog(remaining, config)
    return True


def clear_catalog(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> None:
    save_catalog([], config)


def catalog_fingerprint(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> tuple[int, int]:
    """Return ``(mtime_ns, size)`` of the catalog file, ``(0, 0)`` if absent."""
    try:
        stat = config.catalog_path.stat()
    except FileNotFoundError:
        return (0, 0)
    return (stat.st_mtime_ns, stat.st_size)
