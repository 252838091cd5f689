"""
Package manager for one kind of Hummanta packages.

The manager resolves a domain through the registry (root index -> domain
index -> package manifest -> release manifest), downloads and verifies the
artifact for the host platform, unpacks it under the installation root and
records it in ``<root>/installed.toml``.

Installation Layout:
    <root>/
    ├── installed.toml             # Installed-state cache
    ├── installed.toml.lock        # Advisory lock guarding the cache
    ├── toolchains/
    │   └── solidity/              # One directory per domain
    └── targets/
        └── evm/

Usage:
    from hummanta.registry import RegistryClient, ToolchainManager

    client = RegistryClient("https://hummanta.github.io/registry")
    manager = ToolchainManager(client, Path.home() / ".hummanta")
    report = manager.add("solidity")
    for package in manager.get_package("solidity", "compiler"):
        print(package.name, package.entry.path)
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from hummanta.core.directory import domain_dir, installed_manifest_path
from hummanta.core.exceptions import (
    CacheError,
    DomainNotFound,
    FetchError,
    ManifestError,
    PackageNotFound,
    ReleaseNotFound,
    RemoveError,
    UnpackError,
)
from hummanta.core.filesystem import FilesystemError, safe_rmtree, unpack_tar_gz
from hummanta.core.locking import cache_lock
from hummanta.core.platform import current_target
from hummanta.fetcher import FetchContext
from hummanta.manifest import (
    DomainMap,
    Entry,
    IndexManifest,
    InstalledManifest,
    PackageManifest,
    ReleaseManifest,
)
from hummanta.registry.client import RegistryClient
from hummanta.registry.kind import TARGET, TOOLCHAIN, PackageKind
from hummanta.registry.query import Query

logger = logging.getLogger(__name__)

PACKAGE_MANIFEST_PATH = "manifests/index.toml"


@dataclass
class InstalledPackage:
    """A package installed by ``Manager.add``."""

    category: str
    name: str
    version: str
    path: Path


@dataclass
class SkippedPackage:
    """A package ``Manager.add`` could not resolve or has no artifact for the platform."""

    category: str
    name: str
    reason: str


@dataclass
class AddReport:
    """Outcome of adding a domain."""

    domain: str
    installed: List[InstalledPackage] = field(default_factory=list)
    skipped: List[SkippedPackage] = field(default_factory=list)


class Manager(Query):
    """
    Installs, removes and lists the packages of one kind.

    Several managers (one per kind) may share an installation root. Every
    write of the cache happens under an advisory file lock and re-reads the
    file first, so updates made meanwhile by another manager are preserved.
    """

    def __init__(
        self,
        client: RegistryClient,
        kind: PackageKind,
        root: Path,
        platform: Optional[str] = None,
        lock_timeout: float = 30,
    ):
        """
        Initialize package manager.

        Args:
            client: Registry client used for every fetch
            kind: Kind of packages to manage
            root: Installation root (usually ``~/.hummanta``)
            platform: Target triple to install for (default: host platform)
            lock_timeout: Timeout in seconds for acquiring the cache lock

        Raises:
            CacheError: If an existing cache file can't be read
        """
        self.client = client
        self.kind = kind
        self.root = Path(root)
        self.platform = platform or current_target()
        self.lock_timeout = lock_timeout
        self.manifest_path = installed_manifest_path(self.root)
        self.installed = self._load()

        logger.debug(f"Initialized {kind} manager at {self.root} for {self.platform}")

    # ========================================================================
    # Cache persistence
    # ========================================================================

    def _load(self) -> InstalledManifest:
        if not self.manifest_path.exists():
            return InstalledManifest()
        try:
            return InstalledManifest.load(self.manifest_path)
        except ManifestError as e:
            logger.error(f"Failed to load installed cache: {e}")
            raise CacheError(f"Failed to load {self.manifest_path}: {e}") from e

    def _save(self, domain: str) -> None:
        """
        Persist one domain of this kind into the cache file.

        The file is re-read under the lock and only this domain is replaced,
        leaving other kinds and domains as written by other managers.

        Raises:
            CacheError: If the cache can't be read or written
            CacheLockTimeout: If the lock can't be acquired
        """
        with cache_lock(self.manifest_path, timeout=self.lock_timeout):
            merged = self._load()
            merged.set_domain(
                self.kind.name, domain, self.installed.get_category(self.kind.name, domain)
            )
            try:
                merged.save(self.manifest_path)
            except (ManifestError, OSError) as e:
                logger.error(f"Failed to save installed cache: {e}")
                raise CacheError(f"Failed to save {self.manifest_path}: {e}") from e
            self.installed = merged

        logger.debug(f"Saved installed cache: {self.manifest_path}")

    # ========================================================================
    # Resolution
    # ========================================================================

    def fetch_index(self, domain: str, index: Optional[IndexManifest] = None) -> IndexManifest:
        """
        Fetch the domain index listing the packages of a domain.

        Args:
            domain: Domain name (e.g. "solidity")
            index: Registry root index, fetched when not given

        Raises:
            DomainNotFound: If the root index has no such domain for this kind
            FetchError: If a document can't be retrieved
            ManifestError: If a document is not a valid manifest
        """
        if index is None:
            index = self.client.index()

        path = index.get(self.kind.name, domain)
        if path is None:
            raise DomainNotFound(self.kind.name, domain)

        return IndexManifest.from_bytes(self.client.fetch(FetchContext(path)))

    def fetch_package(self, index: IndexManifest, category: str, name: str) -> PackageManifest:
        """
        Fetch the manifest of a package listed in a domain index.

        Raises:
            PackageNotFound: If the index has no such category/name
            FetchError: If the manifest can't be retrieved
            ManifestError: If the manifest is invalid
        """
        base = index.get(category, name)
        if base is None:
            raise PackageNotFound(category, name)

        url = f"{base.rstrip('/')}/{PACKAGE_MANIFEST_PATH}"
        return PackageManifest.from_bytes(self.client.fetch(FetchContext(url)))

    def fetch_release(self, package: PackageManifest, version: str) -> ReleaseManifest:
        """
        Fetch the release manifest of one version of a package.

        Raises:
            ReleaseNotFound: If the package has no such version
            FetchError: If the manifest can't be retrieved
            ManifestError: If the manifest is invalid
        """
        filename = package.get_release(version)
        if filename is None:
            raise ReleaseNotFound(package.name, version)

        url = f"{package.package.homepage.rstrip('/')}/manifests/{filename}"
        return ReleaseManifest.from_bytes(self.client.fetch(FetchContext(url)))

    # ========================================================================
    # Operations
    # ========================================================================

    def add(self, domain: str, platforms: Optional[Iterable[str]] = None) -> AddReport:
        """
        Install the latest release of every package of a domain.

        Packages whose manifests can't be fetched or parsed, or that have no
        artifact for the platform, are skipped and listed in the report for
        the caller to show. Integrity, unpack and cache failures abort the
        operation; packages installed before the failure stay recorded.

        Args:
            domain: Domain name (e.g. "solidity")
            platforms: Target triples to install; more than one installs every
                supported artifact into ``<domain>/<triple>`` side by side

        Returns:
            Report of installed and skipped packages

        Raises:
            DomainNotFound: If the domain is not in the registry
            HashMismatch: If an artifact fails verification
            UnpackError: If an artifact can't be unpacked
            CacheError: If the cache can't be persisted
        """
        platforms = list(platforms) if platforms else [self.platform]
        index = self.fetch_index(domain)
        install_dir = domain_dir(self.root, self.kind.name, domain)
        report = AddReport(domain)

        logger.info(f"Adding {self.kind} for {domain}")

        for category, name in index.entries():
            try:
                package = self.fetch_package(index, category, name)
                release = self.fetch_release(package, package.latest)
            except (FetchError, ManifestError, ReleaseNotFound) as e:
                # latest not in releases is a broken package entry
                logger.debug(f"Skipping {category}/{name}: {e}")
                report.skipped.append(SkippedPackage(category, name, str(e)))
                continue

            supported = [p for p in platforms if release.supports_target(p)]
            if not supported:
                reason = f"no artifact for {', '.join(platforms)}"
                logger.debug(f"Skipping {package.name} {package.latest}: {reason}")
                report.skipped.append(SkippedPackage(category, name, reason))
                continue

            if len(platforms) == 1:
                self._install(release, supported[0], install_dir, package)
                path = install_dir / package.name
            else:
                self._install_all(release, supported, install_dir, package)
                host = self.platform if self.platform in supported else supported[0]
                path = install_dir / host / package.name

            self.installed.insert(
                self.kind.name,
                domain,
                category,
                name,
                Entry(version=package.latest, path=path, description=package.description),
            )
            self._save(domain)

            report.installed.append(InstalledPackage(category, name, package.latest, path))
            logger.info(f"Installed {package.name} {package.latest}")

        return report

    def _install(
        self, release: ReleaseManifest, target: str, destination: Path, package: PackageManifest
    ) -> None:
        """Download, verify and unpack the artifact of one target."""
        artifact = release.get_artifact(target)
        context = FetchContext(artifact.url).with_checksum(artifact.hash)

        try:
            data = self.client.fetch(context)
        except FetchError as e:
            logger.error(f"Failed to fetch {package.name} {release.version} ({target}): {e}")
            raise

        try:
            unpack_tar_gz(data, destination)
        except FilesystemError as e:
            raise UnpackError(
                f"Failed to unpack {package.name} {release.version} ({target}) "
                f"into {destination}: {e}"
            ) from e

        logger.debug(f"Unpacked {package.name} {release.version} into {destination}")

    def _install_all(
        self,
        release: ReleaseManifest,
        targets: List[str],
        install_dir: Path,
        package: PackageManifest,
    ) -> None:
        """Install every target concurrently, each into its own subdirectory."""
        with ThreadPoolExecutor(max_workers=len(targets)) as executor:
            futures = {
                executor.submit(self._install, release, target, install_dir / target, package): target
                for target in targets
            }
            for future in as_completed(futures):
                # The pool waits for the remaining tasks before a failure propagates
                future.result()

    def remove(self, domain: str) -> bool:
        """
        Remove an installed domain and its cache entries.

        Args:
            domain: Domain name

        Returns:
            True if files or cache entries were removed, False if the domain
            was not installed

        Raises:
            RemoveError: If the installation directory can't be deleted
            CacheError: If the cache can't be persisted
        """
        install_dir = domain_dir(self.root, self.kind.name, domain)

        try:
            removed_files = safe_rmtree(install_dir, require_prefix=self.root / self.kind.name)
        except (FilesystemError, ValueError) as e:
            logger.error(f"Failed to remove {install_dir}: {e}")
            raise RemoveError(f"Failed to remove {self.kind} for {domain}: {e}") from e

        removed_entries = self.installed.remove_domain(self.kind.name, domain) is not None
        if removed_entries:
            self._save(domain)

        if removed_files or removed_entries:
            logger.info(f"Removed {self.kind} for {domain}")
        else:
            logger.info(f"No {self.kind} installed for {domain}")

        return removed_files or removed_entries

    def list(self) -> Optional[DomainMap]:
        """Installed domains of this kind, or None when nothing is installed."""
        return self.installed.get_domain(self.kind.name)


def ToolchainManager(client: RegistryClient, root: Path, **kwargs) -> Manager:
    """Create a manager for toolchains."""
    return Manager(client, TOOLCHAIN, root, **kwargs)


def TargetManager(client: RegistryClient, root: Path, **kwargs) -> Manager:
    """Create a manager for targets."""
    return Manager(client, TARGET, root, **kwargs)
