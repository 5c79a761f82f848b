"""Test harness for image-mapper."""

from tests.harness.catalog import (
    EPOCH,
    CountingCatalog,
    FailingMapper,
    FakeClock,
    StaticMapper,
    make_repo,
    make_snapshot,
)

__all__ = [
    "EPOCH",
    "CountingCatalog",
    "FailingMapper",
    "FakeClock",
    "StaticMapper",
    "make_repo",
    "make_snapshot",
]
