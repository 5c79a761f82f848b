"""Client for the Chainguard repository catalog."""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone

import httpx
from pydantic import BaseModel, ValidationError

from image_mapper import __version__
from image_mapper.catalog.aliases import AliasFixes, fix_aliases
from image_mapper.config import DEFAULT_CATALOG_PARENT
from image_mapper.errors import TransportError
from image_mapper.models import CatalogSnapshot, Repo

logger = logging.getLogger(__name__)

USER_AGENT = f"image-mapper/{__version__}"

CATALOG_QUERY = """
query ChainguardPrivateImageCatalog {
  repos(filter: {uidp: {childrenOf: "%s"}}) {
    name
    aliases
    catalogTier
    activeTags
    tags(filter: {excludeDates: true, excludeEpochs: true, excludeReferrers: true}) {
      name
    }
  }
}
"""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CatalogSource(ABC):
    """Something that can provide a snapshot of the catalog.

    Sources are layered by wrapping: a caching source takes the source it
    caches as its delegate.
    """

    @abstractmethod
    async def fetch(self) -> CatalogSnapshot:
        """Return the list of catalog repositories.

        Raises:
            CatalogError: If no snapshot can be provided
        """


class _CatalogData(BaseModel):
    repos: list[Repo]


class _CatalogResponse(BaseModel):
    data: _CatalogData


class CatalogClient(CatalogSource):
    """Lists repositories from the catalog with a single GraphQL query.

    Every call is one network round trip; there are no retries at this
    layer. Alias corrections are applied to the fetched repositories.
    """

    def __init__(
        self,
        url: str,
        parent: str = DEFAULT_CATALOG_PARENT,
        timeout: float = 60.0,
        alias_fixes: AliasFixes | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.parent = parent
        self.timeout = timeout
        self._alias_fixes = alias_fixes
        self._transport = transport

    async def fetch(self) -> CatalogSnapshot:
        logger.info("Fetching list of repositories from Chainguard catalog...")

        body = {"query": CATALOG_QUERY % self.parent}
        headers = {
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }

        async with httpx.AsyncClient(transport=self._transport) as client:
            try:
                response = await client.post(
                    self.url, json=body, headers=headers, timeout=self.timeout
                )
            except httpx.HTTPError as e:
                raise TransportError(f"making request: {e}") from e

        if response.status_code != httpx.codes.OK:
            raise TransportError(f"unexpected status code: {response.status_code}")

        try:
            payload = _CatalogResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise TransportError(f"unmarshaling body: {e}") from e

        repos = fix_aliases(payload.data.repos, self._alias_fixes)
        logger.debug(f"Fetched {len(repos)} repositories from {self.url}")

        return CatalogSnapshot(repos=tuple(repos), fetched_at=utcnow())
