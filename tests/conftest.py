"""Pytest configuration and fixtures for image-mapper tests."""

from pathlib import Path

import pytest

from image_mapper.models import Repo
from tests.harness import CountingCatalog, FakeClock, make_repo


def pytest_addoption(parser: pytest.Parser) -> None:
    """Add custom command-line options."""
    parser.addoption(
        "--run-e2e",
        action="store_true",
        default=False,
        help="Run end-to-end tests against the live catalog",
    )


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest markers."""
    config.addinivalue_line("markers", "e2e: marks end-to-end tests")


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Skip tests based on markers and options."""
    if config.getoption("--run-e2e"):
        return

    skip_e2e = pytest.mark.skip(reason="need --run-e2e option to run")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_e2e)


# -----------------------------------------------------------------------------
# Catalog fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def catalog_repos() -> list[Repo]:
    """A small catalog covering the shapes the mapper has to deal with."""
    return [
        make_repo("nginx", aliases=["nginx", "docker.io/library/nginx"], active_tags=["latest", "1.25"]),
        make_repo("nginx-fips", aliases=["nginx"], tier="FIPS"),
        make_repo("argocd", aliases=["quay.io/argoproj/argocd"]),
        make_repo("argocd-iamguarded", aliases=["quay.io/argoproj/argocd"]),
        make_repo("go", aliases=["golang"], tier="BASE", active_tags=["latest", "1.22", "latest-dev"]),
        make_repo("python", aliases=["python", "docker.io/bitnami/python"], tier="BASE"),
        make_repo("prometheus-operator", aliases=["quay.io/prometheus-operator/prometheus-operator"]),
        make_repo("haproxy", aliases=["haproxy:2.8"]),
        make_repo("static", tier="BASE"),
    ]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def catalog(catalog_repos: list[Repo], clock: FakeClock) -> CountingCatalog:
    return CountingCatalog(catalog_repos, clock=clock)


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """A cache directory that doesn't exist yet."""
    return tmp_path / "cache" / "chainguard-image-mapper"
