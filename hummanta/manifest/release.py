"""
Release manifest: the downloadable artifacts of one package version.

Example::

    version = "v1.2.0"

    [artifacts.x86_64-unknown-linux-gnu]
    url = "https://github.com/hummanta/solidity-detector-foundry/releases/download/v1.2.0/solidity-detector-foundry-v1.2.0-x86_64-unknown-linux-gnu.tar.gz"
    hash = "2c26b46b68ffc68ff99b453c1d30413413422d706483bfa0f98a5e886266e7ae"
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from hummanta.manifest.base import ManifestFile, require_str


@dataclass
class Artifact:
    """A downloadable archive and the SHA-256 of its exact bytes."""

    url: str
    hash: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Artifact":
        if not isinstance(data, dict):
            raise ValueError("artifact must be a table")
        return cls(url=require_str(data, "url"), hash=require_str(data, "hash"))

    def to_dict(self) -> Dict[str, str]:
        return {"url": self.url, "hash": self.hash}


@dataclass
class ReleaseManifest(ManifestFile):
    """Version plus a mapping of target triple -> artifact."""

    version: str
    artifacts: Dict[str, Artifact] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReleaseManifest":
        artifacts = data.get("artifacts", {})
        if not isinstance(artifacts, dict):
            raise ValueError("'artifacts' must be a table")
        return cls(
            version=require_str(data, "version"),
            artifacts={
                target: Artifact.from_dict(artifact)
                for target, artifact in artifacts.items()
            },
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "artifacts": {
                target: artifact.to_dict() for target, artifact in self.artifacts.items()
            },
        }

    def add_artifact(self, target: str, artifact: Artifact) -> None:
        self.artifacts[target] = artifact

    def get_artifact(self, target: str) -> Optional[Artifact]:
        return self.artifacts.get(target)

    def supports_target(self, target: str) -> bool:
        return target in self.artifacts
