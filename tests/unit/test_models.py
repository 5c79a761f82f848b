"""Tests for catalog models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from image_mapper.models import CatalogSnapshot, MappingResult, Repo


class TestRepo:
    """Tests for the Repo model."""

    def test_parses_wire_names(self):
        repo = Repo.model_validate(
            {
                "name": "nginx",
                "catalogTier": "APPLICATION",
                "aliases": ["nginx"],
                "activeTags": ["latest", "1.25"],
                "tags": [{"name": "latest"}, {"name": "1.25"}, {"name": "1.24"}],
            }
        )
        assert repo.catalog_tier == "APPLICATION"
        assert repo.active_tags == ("latest", "1.25")
        assert [tag.name for tag in repo.tags] == ["latest", "1.25", "1.24"]

    def test_null_lists_are_empty(self):
        repo = Repo.model_validate(
            {"name": "redis", "catalogTier": "APPLICATION", "aliases": None, "activeTags": None, "tags": None}
        )
        assert repo.aliases == ()
        assert repo.active_tags == ()
        assert repo.tags == ()

    def test_null_tier_is_blank(self):
        repo = Repo.model_validate({"name": "redis", "catalogTier": None})
        assert repo.catalog_tier == ""

    def test_name_is_required(self):
        with pytest.raises(ValidationError):
            Repo.model_validate({"name": "", "catalogTier": "BASE"})

    def test_is_read_only(self):
        repo = Repo(name="nginx")
        with pytest.raises(ValidationError):
            repo.name = "redis"


class TestCatalogSnapshot:
    """Tests for the CatalogSnapshot model."""

    def test_json_uses_wire_names(self):
        snapshot = CatalogSnapshot(
            repos=(Repo(name="nginx", catalog_tier="APPLICATION", active_tags=("latest",)),),
            fetched_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
        )
        data = snapshot.to_json()
        assert '"fetchedAt"' in data
        assert '"catalogTier":"APPLICATION"' in data
        assert '"activeTags":["latest"]' in data
        assert CatalogSnapshot.model_validate_json(data) == snapshot

    def test_naive_fetched_at_is_utc(self):
        snapshot = CatalogSnapshot.model_validate_json('{"repos": [], "fetchedAt": "2025-01-01T00:00:00"}')
        assert snapshot.fetched_at == datetime(2025, 1, 1, tzinfo=timezone.utc)


class TestMappingResult:
    def test_found(self):
        assert MappingResult(image="nginx", results=("cgr.dev/chainguard/nginx:latest",)).found
        assert not MappingResult(image="nginx").found
