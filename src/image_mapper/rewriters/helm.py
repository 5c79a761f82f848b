"""Map image references in Helm values files."""

import logging
from typing import Any

import yaml

from image_mapper.errors import MapperError, NoMatchError, ParseError
from image_mapper.mappings.mapper import Mapper, resolve_image

logger = logging.getLogger(__name__)

IMAGE_KEY = "image"


async def map_values(mapper: Mapper, values: str | bytes) -> str:
    """Map the image references in a values file to Chainguard images.

    Returns YAML containing only the values that were changed, suitable for
    passing to helm after the original values file. Images that can't be
    mapped, for whatever reason, are left out.

    Raises:
        ParseError: If the input isn't a YAML mapping
        CatalogError: If the catalog can't be fetched
    """
    await mapper.load()

    try:
        input_values = yaml.safe_load(values)
    except yaml.YAMLError as e:
        raise ParseError(f"unmarshalling yaml: {e}") from e

    if input_values is None:
        input_values = {}
    if not isinstance(input_values, dict):
        raise ParseError(
            f"unmarshalling yaml: expected a mapping, got {type(input_values).__name__}"
        )

    output_values: dict[str, Any] = {}
    await _walk_values(mapper, [], input_values, output_values)

    return yaml.safe_dump(output_values, sort_keys=True, default_flow_style=False)


async def _walk_values(
    mapper: Mapper, path: list[Any], values: dict[Any, Any], output_values: dict[str, Any]
) -> None:
    """Depth-first walk through the nested mappings of a values file."""
    for key, value in values.items():
        if key == IMAGE_KEY:
            await _map_image_value(mapper, [*path, key], value, output_values)

        if isinstance(value, dict):
            await _walk_values(mapper, [*path, key], value, output_values)


async def _map_image_value(
    mapper: Mapper, path: list[Any], value: Any, output_values: dict[str, Any]
) -> None:
    # image: ghcr.io/foo/bar
    if isinstance(value, str):
        try:
            mapped = await resolve_image(mapper, value)
        except (NoMatchError, ParseError) as e:
            logger.debug(f"Not mapping {_dotted(path)}: {e}")
            return
        except MapperError as e:
            logger.warning(f"Not mapping {_dotted(path)}: {e}")
            return
        _set_value(output_values, path, mapped.context)
        return

    if not isinstance(value, dict):
        return

    # image:
    #   repository: ghcr.io/foo/bar
    #
    # OR
    #
    # image:
    #   registry: ghcr.io
    #   repository: foo/bar
    repo = value.get("repository")
    if not isinstance(repo, str) or not repo:
        return

    has_registry = "registry" in value
    registry = value.get("registry")
    if isinstance(registry, str) and registry:
        repo = f"{registry}/{repo}"

    try:
        mapped = await resolve_image(mapper, repo)
    except (NoMatchError, ParseError) as e:
        logger.debug(f"Not mapping {_dotted(path)}: {e}")
        return
    except MapperError as e:
        logger.warning(f"Not mapping {_dotted(path)}: {e}")
        return

    if has_registry:
        _set_value(output_values, [*path, "registry"], mapped.registry)
        _set_value(output_values, [*path, "repository"], mapped.repository)
    else:
        _set_value(output_values, [*path, "repository"], mapped.context)


def _set_value(output_values: dict[Any, Any], path: list[Any], value: Any) -> None:
    """Set the value at path, creating intermediate mappings as needed.

    Paths under a value that was already written as a scalar are skipped.
    """
    current = output_values
    for key in path[:-1]:
        current = current.setdefault(key, {})
        if not isinstance(current, dict):
            logger.debug(f"Not mapping {_dotted(path)}: {key} is already set")
            return
    current[path[-1]] = value


def _dotted(path: list[Any]) -> str:
    return ".".join(str(key) for key in path)
