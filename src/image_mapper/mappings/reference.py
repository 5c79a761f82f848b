"""Parsing and canonicalization of container image references."""

import re
from dataclasses import dataclass

from image_mapper.errors import ParseError

DOCKER_HUB = "index.docker.io"

# Hostnames that all refer to Docker Hub
DOCKER_HUB_ALIASES = frozenset({"docker.io", "index.docker.io", "registry-1.docker.io"})

# A path component: lowercase alphanumerics joined by '.', '_', '__' or runs of '-'
_COMPONENT = re.compile(r"^[a-z0-9]+(?:(?:[._]|__|-+)[a-z0-9]+)*$")
_TAG = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.-]{0,127}$")
_DIGEST = re.compile(r"^[A-Za-z][A-Za-z0-9]*(?:[-_+.][A-Za-z][A-Za-z0-9]*)*:[0-9a-fA-F]{32,}$")
_REGISTRY = re.compile(r"^(?:[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)*(?::[0-9]+)?$")


@dataclass(frozen=True)
class ImageReference:
    """A parsed image reference in canonical form."""

    registry: str
    repository: str
    tag: str | None = None
    digest: str | None = None

    @property
    def context(self) -> str:
        """The registry/repository part, without tag or digest."""
        return f"{self.registry}/{self.repository}"

    def __str__(self) -> str:
        ref = self.context
        if self.tag:
            ref += f":{self.tag}"
        if self.digest:
            ref += f"@{self.digest}"
        return ref


def _is_registry(segment: str) -> bool:
    return "." in segment or ":" in segment or segment == "localhost"


def _canonical_registry(registry: str) -> str:
    registry = registry.lower()
    if registry in DOCKER_HUB_ALIASES:
        return DOCKER_HUB
    return registry


def _split_repository(name: str, original: str) -> tuple[str, str]:
    """Split 'registry/path' into a canonical (registry, repository) pair."""
    registry = DOCKER_HUB
    path = name
    first, sep, rest = name.partition("/")
    if sep and _is_registry(first):
        if not _REGISTRY.match(first):
            raise ParseError(f"invalid registry in image reference: {original!r}")
        registry = _canonical_registry(first)
        path = rest

    components = path.split("/")
    for component in components:
        if not _COMPONENT.match(component):
            raise ParseError(f"invalid repository in image reference: {original!r}")

    if registry == DOCKER_HUB and len(components) == 1:
        path = f"library/{path}"

    return registry, path


def parse_reference(ref: str) -> ImageReference:
    """Parse an image reference into its canonical parts.

    Examples:
        "nginx" -> index.docker.io/library/nginx
        "ghcr.io/foo/bar:1.2" -> ghcr.io/foo/bar, tag "1.2"
        "localhost:5000/app@sha256:..." -> localhost:5000/app, digest "sha256:..."

    Raises:
        ParseError: If the reference is malformed
    """
    original = ref
    ref = ref.strip()
    if not ref:
        raise ParseError("empty image reference")

    digest = None
    if "@" in ref:
        ref, digest = ref.split("@", 1)
        if not _DIGEST.match(digest):
            raise ParseError(f"invalid digest in image reference: {original!r}")

    # Tags can only appear after the last '/', anything before that could be a port
    tag = None
    last_slash = ref.rfind("/")
    colon = ref.find(":", last_slash + 1)
    if colon != -1:
        ref, tag = ref[:colon], ref[colon + 1 :]
        if not _TAG.match(tag):
            raise ParseError(f"invalid tag in image reference: {original!r}")

    registry, repository = _split_repository(ref, original)
    return ImageReference(registry=registry, repository=repository, tag=tag, digest=digest)


def parse_repository(repo: str) -> str:
    """Canonicalize a repository as a registry hostname or registry/path.

    "quay.io" stays a bare registry; "hashicorp/vault-k8s" becomes
    "index.docker.io/hashicorp/vault-k8s". Tags and digests are dropped.

    Raises:
        ParseError: If the repository is malformed
    """
    stripped = repo.strip()
    if stripped and "/" not in stripped and _is_registry(stripped) and _REGISTRY.match(stripped):
        return _canonical_registry(stripped)
    return parse_reference(repo).context
