"""
Package manifest and publisher-side package configuration.

The package manifest lives at ``<package-base>/manifests/index.toml``::

    latest = "v1.2.0"
    targets = ["x86_64-unknown-linux-gnu", "aarch64-apple-darwin"]

    [package]
    name = "solidity-detector-foundry"
    homepage = "https://hummanta.github.io/solidity-detector-foundry"
    repository = "https://github.com/hummanta/solidity-detector-foundry"
    language = "solidity"
    kind = "detector"
    description = "Detects Foundry based Solidity projects"

    [releases]
    "v1.2.0" = "release-v1.2.0.toml"
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from hummanta.manifest.base import ManifestFile, optional_str, require_str, str_table


def _str_list(data: Dict[str, Any], key: str) -> List[str]:
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"'{key}' must be a list of strings")
    return list(value)


@dataclass
class PackageMeta:
    """Descriptive metadata shared by package manifests and package configs."""

    name: str
    homepage: str
    repository: str
    kind: str
    language: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PackageMeta":
        if not isinstance(data, dict):
            raise ValueError("'package' must be a table")
        return cls(
            name=require_str(data, "name"),
            homepage=require_str(data, "homepage"),
            repository=require_str(data, "repository"),
            kind=require_str(data, "kind"),
            language=optional_str(data, "language"),
            description=optional_str(data, "description"),
        )

    def to_dict(self) -> Dict[str, str]:
        data = {
            "name": self.name,
            "homepage": self.homepage,
            "repository": self.repository,
        }
        if self.language is not None:
            data["language"] = self.language
        data["kind"] = self.kind
        if self.description is not None:
            data["description"] = self.description
        return data


@dataclass
class PackageManifest(ManifestFile):
    """
    Published state of a package.

    ``latest`` names a key of ``releases`` once the package has been
    published; release entries are only ever appended.
    """

    package: PackageMeta
    latest: str
    targets: List[str] = field(default_factory=list)
    releases: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PackageManifest":
        return cls(
            package=PackageMeta.from_dict(data.get("package")),
            latest=require_str(data, "latest"),
            targets=_str_list(data, "targets"),
            releases=str_table(data.get("releases", {}), "releases"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "latest": self.latest,
            "targets": list(self.targets),
            "package": self.package.to_dict(),
            "releases": dict(self.releases),
        }

    @property
    def name(self) -> str:
        return self.package.name

    @property
    def description(self) -> Optional[str]:
        return self.package.description

    def add_release(self, version: str, filename: str) -> bool:
        """
        Record a release file for a version.

        Existing entries are never overwritten.

        Returns:
            True if the release was added, False if the version was already present
        """
        if version in self.releases:
            return False
        self.releases[version] = filename
        return True

    def get_release(self, version: str) -> Optional[str]:
        """Release manifest filename for a version, or None."""
        return self.releases.get(version)


@dataclass
class PackageConfig(ManifestFile):
    """
    Publisher-side package description (``hmt-package.toml``).

    Example::

        targets = ["x86_64-unknown-linux-gnu"]

        [package]
        name = "solidity-detector-foundry"
        homepage = "https://hummanta.github.io/solidity-detector-foundry"
        repository = "https://github.com/hummanta/solidity-detector-foundry"
        kind = "detector"
    """

    package: PackageMeta
    targets: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PackageConfig":
        return cls(
            package=PackageMeta.from_dict(data.get("package")),
            targets=_str_list(data, "targets"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"targets": list(self.targets), "package": self.package.to_dict()}
