"""Rewrite image references in configuration files."""

from image_mapper.rewriters.dockerfile import map_dockerfile
from image_mapper.rewriters.helm import map_values

__all__ = [
    "map_dockerfile",
    "map_values",
]
