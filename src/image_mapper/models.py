"""Pydantic models for image-mapper."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Tag(BaseModel):
    """A tag in a catalog repository."""

    model_config = ConfigDict(frozen=True)

    name: str


class Repo(BaseModel):
    """A repository in the Chainguard catalog."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(min_length=1, description="Repository name, unique in the catalog")
    catalog_tier: str = Field(
        default="",
        alias="catalogTier",
        description="Catalog tier: PREMIUM, APPLICATION, BASE, FIPS, AI, ...",
    )
    aliases: tuple[str, ...] = Field(
        default=(),
        description="Upstream references this repository replaces, "
        "either bare repository paths or registry/path strings",
    )
    active_tags: tuple[str, ...] = Field(default=(), alias="activeTags")
    tags: tuple[Tag, ...] = ()

    @field_validator("aliases", "active_tags", "tags", mode="before")
    @classmethod
    def _null_as_empty(cls, value: object) -> object:
        # The catalog returns null rather than [] for empty lists
        if value is None:
            return ()
        return value

    @field_validator("catalog_tier", mode="before")
    @classmethod
    def _null_as_blank(cls, value: object) -> object:
        if value is None:
            return ""
        return value


class CatalogSnapshot(BaseModel):
    """The full list of catalog repositories at a point in time.

    This is also the on-disk cache format (``repos``, ``fetchedAt``).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    repos: tuple[Repo, ...] = ()
    fetched_at: datetime = Field(alias="fetchedAt")

    @field_validator("fetched_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def to_json(self) -> str:
        """Serialize with the wire field names."""
        return self.model_dump_json(by_alias=True)


class MappingResult(BaseModel):
    """Result of mapping a single image reference."""

    model_config = ConfigDict(frozen=True)

    image: str = Field(description="The image reference that was mapped")
    results: tuple[str, ...] = Field(
        default=(),
        description="Fully qualified Chainguard references, best match first. "
        "Empty when nothing matched.",
    )

    @property
    def found(self) -> bool:
        return bool(self.results)


class ImageMappingBatchResult(BaseModel):
    """Result of mapping a batch of image references."""

    mappings: list[MappingResult] = Field(default_factory=list)
    unmatched: list[str] = Field(
        default_factory=list,
        description="Input references with no Chainguard equivalent",
    )
    message: str | None = None


class HelmValuesResult(BaseModel):
    """Result of mapping the images in a Helm values file."""

    success: bool
    values: str | None = Field(
        default=None,
        description="Sparse values override containing only the rewritten image fields. "
        "Pass it to helm with -f after the original values file.",
    )
    message: str | None = None


class DockerfileResult(BaseModel):
    """Result of mapping the FROM lines of a Dockerfile."""

    success: bool
    dockerfile: str | None = Field(
        default=None,
        description="The Dockerfile with mapped FROM references. "
        "Lines that could not be mapped are unchanged.",
    )
    message: str | None = None
