"""Shared mapper construction for the MCP tools."""

from dataclasses import replace
from datetime import timedelta
from functools import lru_cache

from image_mapper.catalog import CatalogSource, new_catalog_source
from image_mapper.config import settings
from image_mapper.mappings import IgnoreFn, Mapper, MapperConfig


@lru_cache
def shared_catalog_source(cache: bool, cache_duration: timedelta) -> CatalogSource:
    """The catalog source shared by every tool call in this process.

    Sharing it means the in-memory cache is reused between calls. There is
    one source per cache configuration.
    """
    return new_catalog_source(settings, cache=cache, cache_duration=cache_duration)


def get_mapper(
    repository: str | None = None,
    ignore_fns: tuple[IgnoreFn, ...] | None = None,
) -> Mapper:
    """Get a mapper using the shared catalog source.

    Args:
        repository: Override the destination repository from settings
        ignore_fns: Override the ignore functions from settings
    """
    config = MapperConfig.from_settings(settings)
    if repository:
        config = replace(config, repository=repository)
    if ignore_fns is not None:
        config = replace(config, ignore_fns=ignore_fns)
    return Mapper(shared_catalog_source(config.cache, config.cache_duration), config)
