"""Image mappings from upstream images to Chainguard images."""

from image_mapper.mappings.mapper import (
    IgnoreFn,
    Mapper,
    MapperConfig,
    ignore_iamguarded,
    ignore_tiers,
    iter_images,
    resolve_image,
)
from image_mapper.mappings.reference import ImageReference, parse_reference, parse_repository

__all__ = [
    "IgnoreFn",
    "ImageReference",
    "Mapper",
    "MapperConfig",
    "ignore_iamguarded",
    "ignore_tiers",
    "iter_images",
    "parse_reference",
    "parse_repository",
    "resolve_image",
]
