"""Configuration for image-mapper."""

import os
import sys
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

CACHE_SUBDIR = "chainguard-image-mapper"
CACHE_FILE = "repos.json"

DEFAULT_REPOSITORY = "cgr.dev/chainguard"

# Organization whose repositories make up the catalog
DEFAULT_CATALOG_PARENT = "ce2d1984a010471142503340d670612d63ffb9f6"


class Settings(BaseSettings):
    """Configuration from environment variables."""

    model_config = SettingsConfigDict(env_prefix="IMAGE_MAPPER_")

    # Catalog endpoint
    catalog_url: str = "https://data.chainguard.dev/query"
    catalog_parent: str = DEFAULT_CATALOG_PARENT
    request_timeout_seconds: float = 60.0

    # Mapping
    repository: str = DEFAULT_REPOSITORY
    ignore_tiers: list[str] = []
    ignore_iamguarded: bool = False

    # Catalog caching
    cache_enabled: bool = True
    cache_duration_seconds: int = 3600  # 1 hour
    cache_dir: Path | None = None

    log_level: str = "INFO"

    @property
    def resolved_cache_dir(self) -> Path:
        """Directory holding the on-disk catalog cache."""
        if self.cache_dir is not None:
            return self.cache_dir
        return user_cache_dir() / CACHE_SUBDIR


settings = Settings()


def user_cache_dir() -> Path:
    """Return the platform's per-user cache root.

    - Linux and other unixes: $XDG_CACHE_HOME, falling back to ~/.cache
    - macOS: ~/Library/Caches
    - Windows: %LOCALAPPDATA%
    """
    if sys.platform == "win32":
        local_app_data = os.environ.get("LOCALAPPDATA")
        if local_app_data:
            return Path(local_app_data)
        return Path.home() / "AppData" / "Local"

    if sys.platform == "darwin":
        return Path.home() / "Library" / "Caches"

    xdg_cache_home = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache_home and os.path.isabs(xdg_cache_home):
        return Path(xdg_cache_home)
    return Path.home() / ".cache"
