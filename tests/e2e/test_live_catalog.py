"""End-to-end tests against the live Chainguard catalog.

These tests need network access.
Run with: pytest tests/e2e -v --run-e2e
"""

from datetime import timedelta

import pytest

from image_mapper.catalog import CatalogClient, FileCachingCatalog, MemoryCachingCatalog
from image_mapper.config import Settings
from image_mapper.mappings import Mapper, MapperConfig, ignore_iamguarded, ignore_tiers
from image_mapper.rewriters import map_dockerfile

CACHE_DURATION = timedelta(hours=1)


@pytest.fixture(scope="module")
def settings() -> Settings:
    return Settings()


@pytest.mark.e2e
class TestLiveCatalog:
    """Fetch and map against data.chainguard.dev."""

    @pytest.mark.asyncio
    async def test_fetch(self, settings):
        client = CatalogClient(settings.catalog_url, parent=settings.catalog_parent)
        snapshot = await client.fetch()

        names = {repo.name for repo in snapshot.repos}
        assert "nginx" in names
        assert "python" in names

    @pytest.mark.asyncio
    async def test_cached_fetch(self, settings, cache_dir):
        client = CatalogClient(settings.catalog_url, parent=settings.catalog_parent)
        source = MemoryCachingCatalog(
            CACHE_DURATION, FileCachingCatalog(CACHE_DURATION, client, cache_dir)
        )

        first = await source.fetch()
        assert (cache_dir / "repos.json").exists()
        assert await source.fetch() is first

    @pytest.mark.asyncio
    async def test_map(self, settings, cache_dir):
        client = CatalogClient(settings.catalog_url, parent=settings.catalog_parent)
        mapper = Mapper(
            FileCachingCatalog(CACHE_DURATION, client, cache_dir),
            MapperConfig(ignore_fns=(ignore_iamguarded(), ignore_tiers(["FIPS"]))),
        )

        mapping = await mapper.map("nginx")
        assert "cgr.dev/chainguard/nginx:latest" in mapping.results

        output = await map_dockerfile(mapper, "FROM python:3.12 AS build\nFROM build\n")
        assert output.startswith("FROM cgr.dev/chainguard/python:")
        assert output.endswith("FROM build\n")
