"""Tool for mapping the images in Helm values."""

from typing import Annotated

from pydantic import Field

from image_mapper.errors import CatalogError, ParseError
from image_mapper.mappings import ignore_iamguarded, ignore_tiers
from image_mapper.models import HelmValuesResult
from image_mapper.rewriters import map_values
from image_mapper.tools.common import get_mapper

# iamguarded and FIPS images are unlikely to be what a chart wants, so they
# are never suggested for values files
HELM_IGNORE_FNS = (ignore_iamguarded(), ignore_tiers(["FIPS"]))


async def map_helm_values(
    values_yaml: Annotated[
        str,
        Field(description="Contents of a Helm values file (YAML)"),
    ],
    repository: Annotated[
        str | None,
        Field(
            description="Repository to use in the mappings instead of cgr.dev/chainguard "
            "(e.g., a mirror like registry.internal/cgr)"
        ),
    ] = None,
) -> HelmValuesResult:
    """Map upstream image references in Helm values to Chainguard images.

    Recognises 'image' values written as a single reference, as
    {repository}, or as {registry, repository}. The result contains only the
    values that changed, ready to be passed to helm with an additional -f.
    """
    mapper = get_mapper(repository=repository, ignore_fns=HELM_IGNORE_FNS)

    try:
        output = await map_values(mapper, values_yaml)
    except ParseError as e:
        return HelmValuesResult(success=False, message=f"Invalid values file: {e}")
    except CatalogError as e:
        return HelmValuesResult(
            success=False, message=f"Failed to fetch the Chainguard catalog: {e}"
        )

    message = None
    if output.strip() == "{}":
        message = "No image references in the values file could be mapped."

    return HelmValuesResult(success=True, values=output, message=message)
