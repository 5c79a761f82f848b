"""MCP server for mapping upstream images to Chainguard images."""

import logging
import sys

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from image_mapper.config import settings
from image_mapper.tools import map_dockerfile, map_helm_values, map_images

# All tools in this server are read-only (they query the catalog, don't modify anything)
READ_ONLY_ANNOTATIONS = ToolAnnotations(
    readOnlyHint=True,
    openWorldHint=True,  # They fetch the Chainguard catalog
)

mcp = FastMCP(
    name="image-mapper",
    instructions="""This MCP server maps upstream container images to Chainguard images.

TOOLS:
1. map_images - Map a list of image references (e.g., 'nginx:1.25', 'quay.io/argoproj/argocd')
2. map_helm_values - Map the 'image' fields of a Helm values file. Returns a sparse values
   override containing only the changed fields; pass it to helm with an extra -f after the
   original values file.
3. map_dockerfile - Map the FROM lines of a Dockerfile. Build stage references and images
   without a Chainguard equivalent are left unchanged.

NOTES:
- Mappings point at cgr.dev/chainguard by default. Use the 'repository' parameter when
  images are pulled through a mirror or proxy (e.g., registry.internal/cgr).
- map_helm_values and map_dockerfile never suggest FIPS or iamguarded images.
- The catalog is cached for an hour, so newly added images may take a while to appear.
""",
)

mcp.tool(annotations=READ_ONLY_ANNOTATIONS)(map_images)
mcp.tool(annotations=READ_ONLY_ANNOTATIONS)(map_helm_values)
mcp.tool(annotations=READ_ONLY_ANNOTATIONS)(map_dockerfile)


def setup_logging(level: str = "INFO") -> None:
    """Log to stderr; stdout carries the MCP protocol."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def main() -> None:
    """Run the MCP server."""
    setup_logging(settings.log_level)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
