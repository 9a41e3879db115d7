"""In-memory catalog mapping identifiers to commerce product keys."""
import json
import os
from functools import lru_cache
from typing import Dict, Iterable, Optional

from .config import get_settings
from .logger_config import get_logger

logger = get_logger(__name__)


def _normalize(identifier: str) -> str:
    return identifier.strip().lower()


class Catalog:
    """Read-only lookup from name, CAS number or SMILES to a product key."""

    def __init__(self, entries: Iterable[Dict] = ()):
        self._keys: Dict[str, str] = {}
        for entry in entries:
            product_key = str(entry["product_key"])
            for identifier in entry.get("identifiers", []):
                if identifier and identifier.strip():
                    self._keys[_normalize(identifier)] = product_key

    def __len__(self) -> int:
        return len(self._keys)

    def lookup(self, identifier: str) -> Optional[str]:
        if not identifier:
            return None
        return self._keys.get(_normalize(identifier))

    @classmethod
    def from_file(cls, path: str) -> "Catalog":
        """
        Load a catalog from a JSON file.

        The file holds a list of ``{"product_key": ..., "identifiers": [...]}``
        objects.
        """
        with open(path, encoding="utf-8") as f:
            entries = json.load(f)
        catalog = cls(entries)
        logger.info("Loaded %d catalog identifiers from %s", len(catalog), path)
        return catalog


@lru_cache()
def get_catalog() -> Catalog:
    path = get_settings().CATALOG_PATH
    if not path or not os.path.exists(path):
        logger.warning("No catalog file configured (CATALOG_PATH=%r); api vendors will report not_found", path)
        return Catalog()
    return Catalog.from_file(path)
