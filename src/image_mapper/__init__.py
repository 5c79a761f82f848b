"""Map upstream container images to Chainguard images."""

__version__ = "0.1.0"
