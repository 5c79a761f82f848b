"""The Chainguard repository catalog and its caches."""

from datetime import timedelta

from image_mapper.catalog.aliases import fix_aliases, load_alias_fixes
from image_mapper.catalog.cache import FileCachingCatalog, MemoryCachingCatalog
from image_mapper.catalog.client import CatalogClient, CatalogSource
from image_mapper.config import Settings


def new_catalog_source(
    settings: Settings,
    cache: bool = True,
    cache_duration: timedelta = timedelta(hours=1),
) -> CatalogSource:
    """Build the catalog source chain.

    The remote client is wrapped by the on-disk cache when caching is
    enabled, and always by the in-memory cache so repeated lookups in one
    process don't go back to disk.
    """
    source: CatalogSource = CatalogClient(
        settings.catalog_url,
        parent=settings.catalog_parent,
        timeout=settings.request_timeout_seconds,
    )
    if cache:
        source = FileCachingCatalog(cache_duration, source, settings.resolved_cache_dir)
    return MemoryCachingCatalog(cache_duration, source)


__all__ = [
    "CatalogClient",
    "CatalogSource",
    "FileCachingCatalog",
    "MemoryCachingCatalog",
    "fix_aliases",
    "load_alias_fixes",
    "new_catalog_source",
]
