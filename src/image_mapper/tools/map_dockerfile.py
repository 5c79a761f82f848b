"""Tool for mapping the base images of a Dockerfile."""

from typing import Annotated

from pydantic import Field

from image_mapper.errors import CatalogError
from image_mapper.mappings import ignore_iamguarded, ignore_tiers
from image_mapper.models import DockerfileResult
from image_mapper.rewriters import map_dockerfile as rewrite_dockerfile
from image_mapper.tools.common import get_mapper

# Iamguarded images are very unlikely to be used in Dockerfiles, and FIPS
# images are opt-in, so neither is suggested
DOCKERFILE_IGNORE_FNS = (ignore_iamguarded(), ignore_tiers(["FIPS"]))


async def map_dockerfile(
    dockerfile: Annotated[
        str,
        Field(description="Contents of the Dockerfile"),
    ],
    repository: Annotated[
        str | None,
        Field(
            description="Repository to use in the mappings instead of cgr.dev/chainguard "
            "(e.g., a mirror like registry.internal/cgr)"
        ),
    ] = None,
) -> DockerfileResult:
    """Map image references in a Dockerfile's FROM lines to Chainguard images.

    Multi-stage builds are supported: FROM lines that refer to an earlier
    stage are left alone, as are images without a Chainguard equivalent.
    """
    mapper = get_mapper(repository=repository, ignore_fns=DOCKERFILE_IGNORE_FNS)

    try:
        output = await rewrite_dockerfile(mapper, dockerfile)
    except CatalogError as e:
        return DockerfileResult(
            success=False, message=f"Failed to fetch the Chainguard catalog: {e}"
        )

    message = None
    if output == dockerfile:
        message = "No FROM lines could be mapped."

    return DockerfileResult(success=True, dockerfile=output, message=message)
