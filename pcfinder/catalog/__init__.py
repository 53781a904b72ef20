"""Component catalog providers."""

from pcfinder.catalog.repository import (
    DEFAULT_CATALOG_PATH,
    CatalogProvider,
    CatalogRepository,
    InMemoryCatalog,
    JsonFileCatalog,
)

__all__ = [
    "DEFAULT_CATALOG_PATH",
    "CatalogProvider",
    "CatalogRepository",
    "InMemoryCatalog",
    "JsonFileCatalog",
]
