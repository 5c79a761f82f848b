"""Tests for settings."""

import sys
from pathlib import Path

import pytest

from image_mapper.config import Settings, user_cache_dir


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("IMAGE_MAPPER_REPOSITORY", "registry.internal/cgr")
    monkeypatch.setenv("IMAGE_MAPPER_IGNORE_TIERS", '["FIPS", "AI"]')
    monkeypatch.setenv("IMAGE_MAPPER_CACHE_ENABLED", "false")

    settings = Settings()

    assert settings.repository == "registry.internal/cgr"
    assert settings.ignore_tiers == ["FIPS", "AI"]
    assert settings.cache_enabled is False


def test_explicit_cache_dir(tmp_path):
    settings = Settings(cache_dir=tmp_path)
    assert settings.resolved_cache_dir == tmp_path


@pytest.mark.skipif(sys.platform in ("win32", "darwin"), reason="XDG cache layout")
def test_xdg_cache_home(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))
    monkeypatch.delenv("IMAGE_MAPPER_CACHE_DIR", raising=False)

    assert user_cache_dir() == tmp_path
    assert Settings().resolved_cache_dir == tmp_path / "chainguard-image-mapper"


@pytest.mark.skipif(sys.platform in ("win32", "darwin"), reason="XDG cache layout")
def test_relative_xdg_cache_home_ignored(monkeypatch):
    monkeypatch.setenv("XDG_CACHE_HOME", "relative/cache")
    assert user_cache_dir() == Path.home() / ".cache"
