"""MCP tools for mapping images to Chainguard images."""

from image_mapper.tools.map_dockerfile import map_dockerfile
from image_mapper.tools.map_helm_values import map_helm_values
from image_mapper.tools.map_images import map_images

__all__ = [
    "map_dockerfile",
    "map_helm_values",
    "map_images",
]
