"""Errors raised by image-mapper."""


class MapperError(Exception):
    """Base class for image-mapper errors."""

    pass


class CatalogError(MapperError):
    """The repository catalog could not be provided."""

    pass


class TransportError(CatalogError):
    """Fetching the catalog failed (network error, bad status or bad body)."""

    pass


class CacheCorruptError(CatalogError):
    """The on-disk catalog cache exists but can't be read as a snapshot."""

    pass


class CacheWriteError(CatalogError):
    """A freshly fetched snapshot could not be written to the cache."""

    pass


class ParseError(MapperError):
    """Malformed image reference, YAML or JSON input."""

    pass


class NoMatchError(MapperError):
    """No catalog repository matched an image reference."""

    pass
