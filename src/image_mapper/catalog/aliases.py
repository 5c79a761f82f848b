"""Corrections for known-bad alias data in the catalog."""

from collections.abc import Iterable, Mapping, Sequence
from functools import lru_cache
from pathlib import Path

import yaml

from image_mapper.models import Repo

ALIAS_FIXES_FILE = Path(__file__).parent / "alias_fixes.yaml"

AliasFixes = Mapping[str, Sequence[str]]


@lru_cache
def load_alias_fixes(path: Path = ALIAS_FIXES_FILE) -> dict[str, tuple[str, ...]]:
    """Load the alias correction table, returning repo name -> aliases."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping of repository name to aliases")
    return {str(name): tuple(aliases or ()) for name, aliases in data.items()}


def fix_aliases(repos: Iterable[Repo], fixes: AliasFixes | None = None) -> list[Repo]:
    """Replace the aliases of every repo named in the correction table.

    Repos that aren't in the table are returned as they are. The input is
    never modified, and applying the corrections twice gives the same
    result as applying them once.
    """
    if fixes is None:
        fixes = load_alias_fixes()

    fixed = []
    for repo in repos:
        if repo.name in fixes:
            repo = repo.model_copy(update={"aliases": tuple(fixes[repo.name])})
        fixed.append(repo)
    return fixed
