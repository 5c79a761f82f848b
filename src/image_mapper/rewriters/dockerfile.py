"""Map the base images of a Dockerfile."""

import logging
import re

from image_mapper.errors import MapperError, NoMatchError, ParseError
from image_mapper.mappings.mapper import Mapper, resolve_image

logger = logging.getLogger(__name__)

# FROM [--platform=<platform>] <image> [AS <name>]
FROM_PATTERN = re.compile(
    r"^(?P<instruction>\s*FROM\s+)(?P<flags>(?:--\S+\s+)*)(?P<image>\S+)(?P<rest>.*)$",
    re.IGNORECASE,
)
STAGE_PATTERN = re.compile(r"^\s+AS\s+(?P<stage>\S+)", re.IGNORECASE)

# The empty image; there's nothing to map it to
SCRATCH = "scratch"


async def map_dockerfile(mapper: Mapper, content: str | bytes) -> str:
    """Replace the images in FROM instructions with Chainguard images.

    Everything other than the image reference is kept as it is, including
    flags, stage names, comments and line endings. FROM lines that refer
    to an earlier build stage, and images that can't be mapped, are left
    unchanged.

    Raises:
        ParseError: If the content isn't UTF-8
        CatalogError: If the catalog can't be fetched
    """
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"decoding dockerfile: {e}") from e

    await mapper.load()

    stages: set[str] = set()
    lines = []
    continued = False
    for line in content.splitlines(keepends=True):
        body = line.rstrip("\r\n")
        ending = line[len(body) :]
        # Continuation lines belong to the previous instruction
        if not continued:
            body = await _map_line(mapper, body, stages)
        continued = not body.lstrip().startswith("#") and body.rstrip().endswith("\\")
        lines.append(body + ending)

    return "".join(lines)


async def _map_line(mapper: Mapper, line: str, stages: set[str]) -> str:
    match = FROM_PATTERN.match(line)
    if match is None:
        return line

    image = match.group("image")
    rest = match.group("rest")

    is_stage = image.lower() in stages

    stage_match = STAGE_PATTERN.match(rest)
    if stage_match:
        stages.add(stage_match.group("stage").lower())

    if is_stage or image.lower() == SCRATCH:
        return line

    try:
        mapped = await resolve_image(mapper, image)
    except (NoMatchError, ParseError) as e:
        logger.debug(f"Not mapping {image}: {e}")
        return line
    except MapperError as e:
        logger.warning(f"Not mapping {image}: {e}")
        return line

    return f"{match.group('instruction')}{match.group('flags')}{mapped}{rest}"
