"""
Tests for the package manager.

Managers are exercised against file:// registries built on disk by
``RegistryBuilder``; the platform is pinned so results do not depend on
the machine running the tests.
"""

import pytest
import responses

from hummanta.core.exceptions import (
    CacheError,
    DomainNotFound,
    HashMismatch,
    PackageNotFound,
    ReleaseNotFound,
    RemoveError,
    UnpackError,
)
from hummanta.fetcher import sha256_hex
from hummanta.manifest import (
    Artifact,
    IndexManifest,
    InstalledManifest,
    PackageManifest,
    PackageMeta,
    ReleaseManifest,
)
from hummanta.registry import (
    TARGET,
    TOOLCHAIN,
    Manager,
    RegistryClient,
    TargetManager,
    ToolchainManager,
)
from tests.fixtures.registry import HOST_TARGET, OTHER_TARGET, make_tar_gz


def make_manager(builder, root, kind=TOOLCHAIN, platform=HOST_TARGET) -> Manager:
    return Manager(RegistryClient(builder.base_url), kind, root, platform=platform)


class TestAdd:
    """Tests for Manager.add."""

    def test_add_solidity(self, solidity_registry, tmp_path):
        """Test every package of the domain is unpacked and recorded."""
        root = tmp_path / "home"
        manager = make_manager(solidity_registry, root)

        report = manager.add("solidity")

        assert [p.name for p in report.installed] == [
            "solidity-detector-foundry",
            "solidity-compiler-solc",
        ]
        assert report.skipped == []

        domain = root / "toolchains" / "solidity"
        assert (domain / "solidity-detector-foundry").is_file()
        assert (domain / "solidity-compiler-solc").is_file()

        detectors = manager.get_package("solidity", "detector")
        assert len(detectors) == 1
        entry = detectors[0].entry
        assert entry.version == "v1.2.0"
        assert entry.description == "Detects Foundry based Solidity projects"
        assert entry.path == domain / "solidity-detector-foundry"

    def test_cache_persisted(self, solidity_registry, tmp_path):
        """Test the cache file reflects the installed packages."""
        root = tmp_path / "home"
        make_manager(solidity_registry, root).add("solidity")

        installed = InstalledManifest.load(root / "installed.toml")

        assert installed.contains(
            "toolchains", "solidity", "compiler", "solidity-compiler-solc"
        )
        assert make_manager(solidity_registry, root).list() == installed.get_domain("toolchains")

    def test_add_is_idempotent(self, solidity_registry, tmp_path):
        """Test adding twice leaves the same files and cache."""
        root = tmp_path / "home"
        manager = make_manager(solidity_registry, root)

        manager.add("solidity")
        first = (root / "installed.toml").read_text()
        files = sorted(p.name for p in (root / "toolchains" / "solidity").iterdir())

        manager.add("solidity")

        assert (root / "installed.toml").read_text() == first
        assert sorted(p.name for p in (root / "toolchains" / "solidity").iterdir()) == files

    def test_unknown_domain(self, solidity_registry, tmp_path):
        """Test a domain missing from the index raises DomainNotFound."""
        manager = make_manager(solidity_registry, tmp_path / "home")

        with pytest.raises(DomainNotFound, match="cairo not found in toolchains index"):
            manager.add("cairo")

        assert not (tmp_path / "home" / "installed.toml").exists()

    def test_domain_of_other_kind(self, solidity_registry, tmp_path):
        """Test target domains are not visible to a toolchain manager."""
        with pytest.raises(DomainNotFound):
            make_manager(solidity_registry, tmp_path / "home").add("evm")

    def test_broken_package_skipped(self, registry_builder, tmp_path):
        """Test one unresolvable package does not prevent the others."""
        registry_builder.add_broken_package("toolchains", "move", "detector", "move-detector")
        registry_builder.add_package("toolchains", "move", "compiler", "move-compiler")
        registry_builder.write()
        manager = make_manager(registry_builder, tmp_path / "home")

        report = manager.add("move")

        assert [p.name for p in report.installed] == ["move-compiler"]
        assert [(s.category, s.name) for s in report.skipped] == [("detector", "move-detector")]
        assert manager.get_package("move", "detector") == []
        assert len(manager.get_package("move", "compiler")) == 1

    def test_failing_middle_package_isolated(self, registry_builder, tmp_path):
        """Test the packages around an unfetchable one are installed and recorded."""
        registry_builder.add_package("toolchains", "move", "compiler", "move-first")
        registry_builder.add_broken_package("toolchains", "move", "compiler", "move-second")
        registry_builder.add_package("toolchains", "move", "compiler", "move-third")
        registry_builder.write()
        root = tmp_path / "home"

        report = make_manager(registry_builder, root).add("move")

        assert [p.name for p in report.installed] == ["move-first", "move-third"]
        assert [s.name for s in report.skipped] == ["move-second"]

        installed = InstalledManifest.load(root / "installed.toml")
        assert installed.contains("toolchains", "move", "compiler", "move-first")
        assert installed.contains("toolchains", "move", "compiler", "move-third")
        assert not installed.contains("toolchains", "move", "compiler", "move-second")

        domain = root / "toolchains" / "move"
        assert (domain / "move-first").is_file()
        assert (domain / "move-third").is_file()
        assert not (domain / "move-second").exists()

    def test_unparseable_package_skipped(self, registry_builder, tmp_path):
        """Test a malformed package manifest is skipped."""
        package_dir = registry_builder.add_package("toolchains", "move", "compiler", "bad")
        registry_builder.add_package("toolchains", "move", "compiler", "good")
        (package_dir / "manifests" / "index.toml").write_text("latest = [\n")
        registry_builder.write()

        report = make_manager(registry_builder, tmp_path / "home").add("move")

        assert [p.name for p in report.installed] == ["good"]
        assert report.skipped[0].name == "bad"

    def test_missing_release_skipped(self, registry_builder, tmp_path):
        """Test a latest version without a release entry is skipped."""
        package_dir = registry_builder.add_package("toolchains", "move", "compiler", "mc")
        index = package_dir / "manifests" / "index.toml"
        index.write_text(index.read_text().replace('latest = "v1.0.0"', 'latest = "v2.0.0"'))
        registry_builder.write()

        report = make_manager(registry_builder, tmp_path / "home").add("move")

        assert report.installed == []
        assert "release version not found" in report.skipped[0].reason

    def test_platform_filtering(self, solidity_registry, tmp_path):
        """Test packages without an artifact for the platform are skipped."""
        root = tmp_path / "home"
        manager = make_manager(solidity_registry, root, platform=OTHER_TARGET)

        report = manager.add("solidity")

        assert [p.name for p in report.installed] == ["solidity-compiler-solc"]
        assert [s.name for s in report.skipped] == ["solidity-detector-foundry"]
        assert manager.get_package("solidity", "detector") == []
        assert not (root / "toolchains" / "solidity" / "solidity-detector-foundry").exists()

    def test_hash_mismatch_aborts(self, registry_builder, tmp_path):
        """Test a corrupted artifact aborts and is not recorded."""
        registry_builder.add_package("toolchains", "move", "compiler", "good")
        registry_builder.add_package(
            "toolchains", "move", "compiler", "tampered", hash_override="0" * 64
        )
        registry_builder.add_package("toolchains", "move", "compiler", "later")
        registry_builder.write()
        root = tmp_path / "home"
        manager = make_manager(registry_builder, root)

        with pytest.raises(HashMismatch):
            manager.add("move")

        installed = InstalledManifest.load(root / "installed.toml")
        assert installed.contains("toolchains", "move", "compiler", "good")
        assert not installed.contains("toolchains", "move", "compiler", "tampered")
        assert not installed.contains("toolchains", "move", "compiler", "later")
        assert not (root / "toolchains" / "move" / "tampered").exists()

    def test_unpack_failure_aborts(self, registry_builder, tmp_path):
        """Test an artifact that is not a tarball raises UnpackError."""
        registry_builder.add_package(
            "toolchains", "move", "compiler", "broken", archive_override=b"not a tarball"
        )
        registry_builder.write()

        with pytest.raises(UnpackError, match="broken"):
            make_manager(registry_builder, tmp_path / "home").add("move")

    def test_multi_platform(self, solidity_registry, tmp_path):
        """Test several platforms unpack side by side per triple."""
        root = tmp_path / "home"
        manager = make_manager(solidity_registry, root)

        report = manager.add("solidity", platforms=[HOST_TARGET, OTHER_TARGET])

        domain = root / "toolchains" / "solidity"
        assert (domain / HOST_TARGET / "solidity-compiler-solc").is_file()
        assert (domain / OTHER_TARGET / "solidity-compiler-solc").is_file()
        assert (domain / HOST_TARGET / "solidity-detector-foundry").is_file()
        assert not (domain / OTHER_TARGET / "solidity-detector-foundry").exists()
        assert len(report.installed) == 2

        compiler = manager.get_package("solidity", "compiler")[0].entry
        assert compiler.path == domain / HOST_TARGET / "solidity-compiler-solc"


class TestRemoteRegistry:
    """Tests for adding a domain from an HTTP registry whose packages live on another host."""

    REGISTRY = "https://registry.example"
    PACKAGE_BASE = "https://pkg.example/sdf"
    NAME = "solidity-detector-foundry"

    def _publish(self):
        """Register the registry and package documents with responses."""
        archive = make_tar_gz({self.NAME: b"#!/bin/sh\necho foundry\n"})
        artifact_url = f"{self.PACKAGE_BASE}/artifacts/{self.NAME}-v1.2.0-{HOST_TARGET}.tar.gz"

        root_index = IndexManifest()
        root_index.insert("toolchains", "solidity", "solidity.toml")

        domain_index = IndexManifest()
        domain_index.insert("detector", self.NAME, self.PACKAGE_BASE)

        package = PackageManifest(
            package=PackageMeta(
                name=self.NAME,
                homepage=self.PACKAGE_BASE,
                repository=f"https://github.com/hummanta/{self.NAME}",
                kind="detector",
                language="solidity",
            ),
            latest="v1.2.0",
            targets=[HOST_TARGET],
            releases={"v1.2.0": "release-v1.2.0.toml"},
        )

        release = ReleaseManifest(version="v1.2.0")
        release.add_artifact(HOST_TARGET, Artifact(url=artifact_url, hash=sha256_hex(archive)))

        documents = [
            (f"{self.REGISTRY}/index.toml", root_index.to_toml().encode()),
            (f"{self.REGISTRY}/solidity.toml", domain_index.to_toml().encode()),
            (f"{self.PACKAGE_BASE}/manifests/index.toml", package.to_toml().encode()),
            (
                f"{self.PACKAGE_BASE}/manifests/release-v1.2.0.toml",
                release.to_toml().encode(),
            ),
            (artifact_url, archive),
        ]
        for url, body in documents:
            responses.add(responses.GET, url, body=body)

        return [url for url, _ in documents]

    @responses.activate
    def test_add_resolves_absolute_package_base(self, tmp_path):
        """Test the manifests are fetched in order and the package is recorded."""
        expected_urls = self._publish()
        root = tmp_path / "home"
        manager = ToolchainManager(
            RegistryClient(self.REGISTRY), root, platform=HOST_TARGET
        )

        report = manager.add("solidity")

        assert [call.request.url for call in responses.calls] == expected_urls
        assert [p.name for p in report.installed] == [self.NAME]
        assert (root / "toolchains" / "solidity" / self.NAME).is_file()

        installed = InstalledManifest.load(root / "installed.toml")
        entry = installed.get_package("toolchains", "solidity", "detector")[self.NAME]
        assert entry.version == "v1.2.0"
        assert entry.path == root / "toolchains" / "solidity" / self.NAME

    @responses.activate
    def test_add_twice_is_idempotent(self, tmp_path):
        """Test a second add over HTTP leaves the same cache."""
        self._publish()
        root = tmp_path / "home"
        manager = ToolchainManager(
            RegistryClient(self.REGISTRY), root, platform=HOST_TARGET
        )

        manager.add("solidity")
        first = (root / "installed.toml").read_text()
        manager.add("solidity")

        assert (root / "installed.toml").read_text() == first


class TestResolution:
    """Tests for the fetch_index/fetch_package/fetch_release chain."""

    def test_chain(self, solidity_registry, tmp_path):
        manager = make_manager(solidity_registry, tmp_path / "home")

        index = manager.fetch_index("solidity")
        package = manager.fetch_package(index, "compiler", "solidity-compiler-solc")
        release = manager.fetch_release(package, package.latest)

        assert package.latest == "v0.8.30"
        assert release.version == "v0.8.30"
        assert release.supports_target(HOST_TARGET)
        assert release.supports_target(OTHER_TARGET)

    def test_fetch_index_with_root_index(self, solidity_registry, tmp_path):
        """Test an already fetched root index is reused."""
        manager = make_manager(solidity_registry, tmp_path / "home", kind=TARGET)
        root_index = manager.client.index()

        index = manager.fetch_index("evm", index=root_index)

        assert index.get("target", "evm-target") == "packages/evm-target"

    def test_package_not_found(self, solidity_registry, tmp_path):
        manager = make_manager(solidity_registry, tmp_path / "home")
        index = manager.fetch_index("solidity")

        with pytest.raises(PackageNotFound, match="compiler/vyper"):
            manager.fetch_package(index, "compiler", "vyper")

    def test_release_not_found(self, solidity_registry, tmp_path):
        manager = make_manager(solidity_registry, tmp_path / "home")
        index = manager.fetch_index("solidity")
        package = manager.fetch_package(index, "compiler", "solidity-compiler-solc")

        with pytest.raises(ReleaseNotFound, match="v9.9.9"):
            manager.fetch_release(package, "v9.9.9")


class TestRemove:
    """Tests for Manager.remove."""

    def test_remove_domain(self, solidity_registry, tmp_path):
        """Test files and cache entries are removed together."""
        root = tmp_path / "home"
        manager = make_manager(solidity_registry, root)
        manager.add("solidity")

        assert manager.remove("solidity") is True

        assert not (root / "toolchains" / "solidity").exists()
        assert manager.get_category("solidity") is None
        assert manager.list() is None
        installed = InstalledManifest.load(root / "installed.toml")
        assert installed.get_category("toolchains", "solidity") is None

    def test_remove_absent(self, solidity_registry, tmp_path):
        """Test removing a domain that is not installed is a no-op."""
        manager = make_manager(solidity_registry, tmp_path / "home")

        assert manager.remove("solidity") is False

    def test_remove_keeps_other_kinds(self, solidity_registry, tmp_path):
        root = tmp_path / "home"
        toolchains = make_manager(solidity_registry, root)
        targets = make_manager(solidity_registry, root, kind=TARGET)
        toolchains.add("solidity")
        targets.add("evm")

        toolchains.remove("solidity")

        installed = InstalledManifest.load(root / "installed.toml")
        assert installed.contains("targets", "evm", "target", "evm-target")
        assert (root / "targets" / "evm" / "evm-target").exists()

    def test_remove_invalid_domain(self, solidity_registry, tmp_path):
        """Test a domain resolving outside the kind directory is refused."""
        root = tmp_path / "home"
        (root / "toolchains").mkdir(parents=True)
        manager = make_manager(solidity_registry, root)

        with pytest.raises(RemoveError):
            manager.remove("../targets")


class TestCacheSharing:
    """Tests for two managers sharing one installation root."""

    def test_two_kinds_merge(self, solidity_registry, tmp_path):
        """Test managers created before each other's writes keep both kinds."""
        root = tmp_path / "home"
        toolchains = make_manager(solidity_registry, root)
        targets = make_manager(solidity_registry, root, kind=TARGET)

        toolchains.add("solidity")
        targets.add("evm")

        installed = InstalledManifest.load(root / "installed.toml")
        assert installed.get_category("toolchains", "solidity") is not None
        assert installed.get_category("targets", "evm") is not None

    def test_corrupt_cache(self, solidity_registry, tmp_path):
        """Test an unreadable cache surfaces as CacheError."""
        root = tmp_path / "home"
        root.mkdir()
        (root / "installed.toml").write_text("[toolchains\n")

        with pytest.raises(CacheError):
            make_manager(solidity_registry, root)


class TestConstructors:
    """Tests for the kind-specific constructors."""

    def test_kinds(self, solidity_registry, tmp_path):
        client = RegistryClient(solidity_registry.base_url)

        assert ToolchainManager(client, tmp_path, platform=HOST_TARGET).kind == TOOLCHAIN
        assert TargetManager(client, tmp_path, platform=HOST_TARGET).kind == TARGET

    def test_platform_defaults_to_host(self, solidity_registry, tmp_path, monkeypatch):
        monkeypatch.setattr("hummanta.registry.manager.current_target", lambda: OTHER_TARGET)

        manager = ToolchainManager(RegistryClient(solidity_registry.base_url), tmp_path)

        assert manager.platform == OTHER_TARGET
