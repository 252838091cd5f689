"""
Manifest publishing.

Turns a directory of built artifacts into the documents a registry serves
for one package: ``release-<version>.toml`` and the package's
``index.toml``. Artifacts are named ``<name>-<version>-<target>.tar.gz``
and carry a ``.sha256`` side-car written by :func:`pack_artifact`.

Usage:
    from hummanta.manifest.generate import pack_artifact, publish

    pack_artifact(Path("target/release/solc-detector"), Path("artifacts"),
                  name="solc-detector", version="v1.2.0",
                  target="x86_64-unknown-linux-gnu")
    publish(Path("hmt-package.toml"), Path("artifacts"), Path("manifests"), "v1.2.0")
"""

import logging
from pathlib import Path
from typing import Tuple

from packaging.version import InvalidVersion, Version

from hummanta.core.filesystem import archive_file
from hummanta.fetcher.checksum import checksum_path_for, read_checksum, write_checksum
from hummanta.manifest.package import PackageConfig, PackageManifest
from hummanta.manifest.release import Artifact, ReleaseManifest

logger = logging.getLogger(__name__)

PACKAGE_MANIFEST_NAME = "index.toml"


def artifact_name(name: str, version: str, target: str) -> str:
    """File name of the archive for one package version and target."""
    return f"{name}-{version}-{target}.tar.gz"


def release_filename(version: str) -> str:
    """File name of the release manifest for a version."""
    return f"release-{version}.toml"


def is_newer(candidate: str, current: str) -> bool:
    """
    Whether a version sorts after the current one.

    Versions are compared as PEP 440 versions (a leading 'v' is accepted).
    When either side is not a valid version, plain string ordering is used.
    """
    try:
        return Version(candidate) > Version(current)
    except InvalidVersion:
        return candidate > current


def pack_artifact(
    executable: Path, output_dir: Path, name: str, version: str, target: str
) -> Path:
    """
    Archive an executable and write its checksum side-car.

    Returns:
        Path to the created ``.tar.gz`` archive
    """
    archive = archive_file(executable, Path(output_dir) / artifact_name(name, version, target))
    write_checksum(archive)
    logger.info(f"Packed {archive.name}")
    return archive


def generate_release(
    config: PackageConfig, artifacts_dir: Path, version: str, local: bool = False
) -> ReleaseManifest:
    """
    Build the release manifest for a version from its artifacts.

    Targets without a checksum side-car are skipped: a local build usually
    only produces artifacts for the host platform.

    Args:
        config: Package configuration listing the targets
        artifacts_dir: Directory containing archives and ``.sha256`` files
        version: Version being published
        local: Reference archives with ``file://`` URLs instead of the
            repository's release download URLs
    """
    manifest = ReleaseManifest(version=version)
    meta = config.package

    for target in config.targets:
        name = artifact_name(meta.name, version, target)
        archive = Path(artifacts_dir) / name
        checksum_file = checksum_path_for(archive)

        if not checksum_file.exists():
            logger.warning(f"Artifact not found: {name}, skipped")
            continue

        if local:
            url = archive.resolve().as_uri()
        else:
            url = f"{meta.repository.rstrip('/')}/releases/download/{version}/{name}"

        manifest.add_artifact(target, Artifact(url=url, hash=read_checksum(checksum_file)))

    return manifest


def create_package_manifest(config: PackageConfig, version: str) -> PackageManifest:
    """Create the package manifest for a first release."""
    manifest = PackageManifest(
        package=config.package, latest=version, targets=list(config.targets)
    )
    manifest.add_release(version, release_filename(version))
    return manifest


def update_package_manifest(
    manifest: PackageManifest, config: PackageConfig, version: str
) -> PackageManifest:
    """
    Record a new release in an existing package manifest.

    Metadata and targets are refreshed from the configuration, ``latest``
    only ever moves forward and existing releases are kept.
    """
    manifest.package = config.package
    manifest.targets = list(config.targets)

    if is_newer(version, manifest.latest):
        manifest.latest = version

    manifest.add_release(version, release_filename(version))
    return manifest


def publish(
    config_path: Path,
    artifacts_dir: Path,
    output_dir: Path,
    version: str,
    local: bool = False,
) -> Tuple[Path, Path]:
    """
    Write the release manifest and create or update the package manifest.

    Returns:
        Paths of the written release manifest and package manifest
    """
    config = PackageConfig.load(config_path)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    release = generate_release(config, artifacts_dir, version, local=local)
    release_path = output_dir / release_filename(version)
    release.save(release_path)

    index_path = output_dir / PACKAGE_MANIFEST_NAME
    if index_path.exists():
        package = update_package_manifest(PackageManifest.load(index_path), config, version)
    else:
        package = create_package_manifest(config, version)
    package.save(index_path)

    logger.info(
        f"Generated manifests for {config.package.name} {version} "
        f"with targets: {', '.join(release.artifacts) or 'none'}"
    )
    return release_path, index_path
