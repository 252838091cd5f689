"""
Manifest documents for Hummanta.

Index, package, release and installed-state documents, parsed from and
serialized to TOML.
"""

from .base import ManifestFile
from .index import IndexManifest
from .package import PackageConfig, PackageManifest, PackageMeta
from .release import Artifact, ReleaseManifest
from .installed import (
    CategoryMap,
    DomainMap,
    Entry,
    InstalledManifest,
    KindMap,
    PackageEntry,
    PackageMap,
)

__all__ = [
    "ManifestFile",
    "IndexManifest",
    "PackageConfig",
    "PackageManifest",
    "PackageMeta",
    "Artifact",
    "ReleaseManifest",
    "CategoryMap",
    "DomainMap",
    "Entry",
    "InstalledManifest",
    "KindMap",
    "PackageEntry",
    "PackageMap",
]
