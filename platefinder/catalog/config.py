from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class CatalogConfig:
    """
    Location of the JSON catalog the scraper writes and the engine reads.
    """

    data_dir: Path = Path(os.getenv("PLATEFINDER_DATA_DIR", "data"))
    catalog_filename: str = "stores.json"
    write_store_files: bool = True

    @property
    def catalog_path(self) -> Path:
        return self.data_dir / self.catalog_filename


DEFAULT_CATALOG_CONFIG = CatalogConfig()
