"""Mapping upstream image references to Chainguard images."""

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from datetime import timedelta

from image_mapper.catalog import CatalogSource, new_catalog_source
from image_mapper.config import DEFAULT_REPOSITORY, Settings
from image_mapper.config import settings as default_settings
from image_mapper.errors import NoMatchError, ParseError
from image_mapper.mappings.reference import ImageReference, parse_reference, parse_repository
from image_mapper.models import CatalogSnapshot, MappingResult, Repo

logger = logging.getLogger(__name__)

# Returns True for repos the mapper should not consider
IgnoreFn = Callable[[Repo], bool]

DEFAULT_TAG = "latest"


def ignore_tiers(tiers: Iterable[str]) -> IgnoreFn:
    """Ignore repos in any of the given catalog tiers (case-insensitive)."""
    ignored = frozenset(tier.upper() for tier in tiers)

    def ignore(repo: Repo) -> bool:
        return repo.catalog_tier.upper() in ignored

    return ignore


def ignore_iamguarded() -> IgnoreFn:
    """Ignore iamguarded images."""

    def ignore(repo: Repo) -> bool:
        return "-iamguarded" in repo.name

    return ignore


@dataclass(frozen=True)
class MapperConfig:
    """Everything that changes how images are mapped."""

    # Destination for mapped images; registry.internal/cgr gives registry.internal/cgr/<image>
    repository: str = DEFAULT_REPOSITORY
    ignore_fns: tuple[IgnoreFn, ...] = ()
    cache: bool = True
    cache_duration: timedelta = timedelta(hours=1)

    @classmethod
    def from_settings(cls, settings: Settings) -> "MapperConfig":
        ignore_fns: list[IgnoreFn] = []
        if settings.ignore_tiers:
            ignore_fns.append(ignore_tiers(settings.ignore_tiers))
        if settings.ignore_iamguarded:
            ignore_fns.append(ignore_iamguarded())
        return cls(
            repository=settings.repository,
            ignore_fns=tuple(ignore_fns),
            cache=settings.cache_enabled,
            cache_duration=timedelta(seconds=settings.cache_duration_seconds),
        )


def _canonical_names(repo: Repo, repository: str) -> set[str]:
    """Canonical repositories that should map to this repo."""
    names = set()
    for candidate in (*repo.aliases, repo.name, f"{repository}/{repo.name}"):
        try:
            names.add(parse_repository(candidate))
        except ParseError:
            logger.debug(f"Ignoring unparsable alias {candidate!r} of {repo.name}")
    return names


class Mapper:
    """Maps image references to equivalent images in the catalog."""

    def __init__(self, source: CatalogSource, config: MapperConfig | None = None) -> None:
        self.source = source
        self.config = config or MapperConfig()
        # Canonical names per repo for the last snapshot seen
        self._index: tuple[CatalogSnapshot, list[tuple[Repo, set[str]]]] | None = None

    @classmethod
    def create(
        cls, config: MapperConfig | None = None, settings: Settings | None = None
    ) -> "Mapper":
        """Build a mapper backed by the remote catalog and its caches."""
        config = config or MapperConfig()
        source = new_catalog_source(
            settings or default_settings,
            cache=config.cache,
            cache_duration=config.cache_duration,
        )
        return cls(source, config)

    @property
    def repository(self) -> str:
        return self.config.repository.rstrip("/")

    async def load(self) -> None:
        """Fetch the catalog so an unreachable catalog fails before any mapping.

        Raises:
            CatalogError: If the catalog can't be fetched
        """
        self._repo_index(await self.source.fetch())

    def _ignored(self, repo: Repo) -> bool:
        return any(ignore(repo) for ignore in self.config.ignore_fns)

    async def map(self, image: str) -> MappingResult:
        """Find catalog equivalents for an image reference.

        Candidates come back in catalog order. An image without any match
        gives an empty result rather than an error.

        Raises:
            ParseError: If the image reference is malformed
            CatalogError: If the catalog can't be fetched
        """
        ref = parse_reference(image)
        snapshot = await self.source.fetch()

        results: list[str] = []
        for repo, names in self._repo_index(snapshot):
            if ref.context not in names:
                continue
            results.append(self._destination(repo, ref))

        return MappingResult(image=image, results=tuple(results))

    def _repo_index(self, snapshot: CatalogSnapshot) -> list[tuple[Repo, set[str]]]:
        if self._index is None or self._index[0] is not snapshot:
            index = [
                (repo, _canonical_names(repo, self.repository))
                for repo in snapshot.repos
                if not self._ignored(repo)
            ]
            self._index = (snapshot, index)
        return self._index[1]

    async def map_all(self, images: Iterable[str]) -> list[MappingResult]:
        """Map each image, in order. Unmatched images have empty results."""
        return [await self.map(image) for image in images]

    def _destination(self, repo: Repo, ref: ImageReference) -> str:
        tag = ref.tag if ref.tag and ref.tag in repo.active_tags else DEFAULT_TAG
        return f"{self.repository}/{repo.name}:{tag}"


async def resolve_image(mapper: Mapper, image: str) -> ImageReference:
    """Map an image and return the best candidate.

    Raises:
        NoMatchError: If the image has no equivalent
        ParseError: If the image or the mapped reference is malformed
        CatalogError: If the catalog can't be fetched
    """
    mapping = await mapper.map(image)
    if not mapping.results:
        raise NoMatchError(f"no results found for {image}")
    return parse_reference(mapping.results[0])


def iter_images(text: str) -> Iterator[str]:
    """Yield image references from newline separated text.

    Blank lines and lines starting with '#' are skipped.
    """
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        yield line
