"""Test fixtures for Hummanta tests.

This package provides reusable pytest fixtures and builders:

- registry: A file:// registry laid out on disk (root index, domain
  indexes, package and release manifests, .tar.gz artifacts)

Import fixtures in your tests using:
    from tests.fixtures.registry import RegistryBuilder, HOST_TARGET
"""

__all__ = [
    "registry",
]
