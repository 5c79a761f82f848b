"""Tool for mapping a list of image references."""

from typing import Annotated

from pydantic import Field

from image_mapper import mappings
from image_mapper.errors import CatalogError, ParseError
from image_mapper.models import ImageMappingBatchResult
from image_mapper.tools.common import get_mapper


async def map_images(
    images: Annotated[
        list[str],
        Field(
            description="Image references to map (e.g., ['nginx:1.25', 'ghcr.io/fluxcd/flux-cli']). "
            "Entries may also be newline separated lists; blank lines and # comments are skipped."
        ),
    ],
    ignore_tiers: Annotated[
        list[str] | None,
        Field(description="Ignore Chainguard repos of these tiers (PREMIUM, APPLICATION, BASE, FIPS, AI)"),
    ] = None,
    ignore_iamguarded: Annotated[
        bool,
        Field(description="Ignore iamguarded images"),
    ] = False,
    repository: Annotated[
        str | None,
        Field(
            description="Repository to use in the mappings instead of cgr.dev/chainguard. "
            "For instance, registry.internal.dev/chainguard gives registry.internal.dev/chainguard/<image>."
        ),
    ] = None,
) -> ImageMappingBatchResult:
    """Map upstream image references to their Chainguard equivalents.

    Each image gets a list of matching Chainguard images, best match first.
    Images without an equivalent are listed in 'unmatched'.

    Examples:
        map_images(["nginx"])  # -> cgr.dev/chainguard/nginx:latest
        map_images(["quay.io/argoproj/argocd:v2.9.3"], ignore_tiers=["FIPS"])
    """
    ignore_fns: list[mappings.IgnoreFn] = []
    if ignore_tiers:
        ignore_fns.append(mappings.ignore_tiers(ignore_tiers))
    if ignore_iamguarded:
        ignore_fns.append(mappings.ignore_iamguarded())

    mapper = get_mapper(repository=repository, ignore_fns=tuple(ignore_fns))

    # Entries may hold several newline separated references
    images = [image for entry in images for image in mappings.iter_images(entry)]

    valid: list[str] = []
    invalid: list[str] = []
    for image in images:
        try:
            mappings.parse_reference(image)
        except ParseError as e:
            invalid.append(f"{image} ({e})")
            continue
        valid.append(image)

    try:
        results = await mapper.map_all(valid)
    except CatalogError as e:
        return ImageMappingBatchResult(
            message=f"Failed to fetch the Chainguard catalog: {e}",
        )

    matched = {result.image for result in results if result.found}
    unmatched = [image for image in images if image not in matched]

    message = None
    if invalid:
        message = "Invalid image references: " + ", ".join(invalid)

    return ImageMappingBatchResult(mappings=results, unmatched=unmatched, message=message)
