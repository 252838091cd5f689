"""
Unit tests for filesystem utilities.
"""

import io
import tarfile

import pytest

from hummanta.core.filesystem import (
    ArchiveExtractionError,
    FilesystemError,
    InsecureArchiveError,
    archive_file,
    atomic_write,
    safe_rmtree,
    unpack_tar_gz,
)
from tests.fixtures.registry import make_tar_gz


class TestUnpackTarGz:
    """Tests for unpack_tar_gz."""

    def test_unpack_single_file(self, tmp_path):
        """Test a single-file archive is unpacked by name."""
        data = make_tar_gz({"solc": b"binary"})

        unpack_tar_gz(data, tmp_path / "out")

        assert (tmp_path / "out" / "solc").read_bytes() == b"binary"

    def test_unpack_is_idempotent(self, tmp_path):
        """Test unpacking twice overwrites files in place."""
        data = make_tar_gz({"solc": b"binary"})

        unpack_tar_gz(data, tmp_path)
        unpack_tar_gz(data, tmp_path)

        assert (tmp_path / "solc").read_bytes() == b"binary"

    def test_unpack_nested_paths(self, tmp_path):
        """Test nested members create directories."""
        data = make_tar_gz({"bin/solc": b"a", "lib/libsolc.so": b"b"})

        unpack_tar_gz(data, tmp_path)

        assert (tmp_path / "bin" / "solc").exists()
        assert (tmp_path / "lib" / "libsolc.so").exists()

    def test_invalid_data(self, tmp_path):
        """Test garbage bytes raise ArchiveExtractionError."""
        with pytest.raises(ArchiveExtractionError):
            unpack_tar_gz(b"not a tarball", tmp_path)

    def test_directory_traversal_blocked(self, tmp_path):
        """Test members escaping the destination are rejected."""
        data = make_tar_gz({"../evil": b"x"})

        with pytest.raises(InsecureArchiveError):
            unpack_tar_gz(data, tmp_path / "out")

        assert not (tmp_path / "evil").exists()

    def test_symlink_escape_blocked(self, tmp_path):
        """Test a symlink pointing outside cannot be used to write there."""
        outside = tmp_path / "outside"
        outside.mkdir()
        data = _tar_gz_with_link("evil", str(outside), tarfile.SYMTYPE, "evil/payload")

        with pytest.raises(InsecureArchiveError):
            unpack_tar_gz(data, tmp_path / "out")

        assert not (outside / "payload").exists()

    def test_relative_symlink_escape_blocked(self, tmp_path):
        """Test a relative symlink climbing out of the destination is rejected."""
        data = _tar_gz_with_link("bin/evil", "../../outside", tarfile.SYMTYPE)

        with pytest.raises(InsecureArchiveError):
            unpack_tar_gz(data, tmp_path / "out")

    def test_hardlink_escape_blocked(self, tmp_path):
        """Test a hard link to a file outside the destination is rejected."""
        data = _tar_gz_with_link("passwd", "../etc/passwd", tarfile.LNKTYPE)

        with pytest.raises(InsecureArchiveError):
            unpack_tar_gz(data, tmp_path / "out")

    def test_symlink_inside_destination_allowed(self, tmp_path):
        """Test links resolving inside the destination are extracted."""
        buffer = io.BytesIO()
        with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
            content = b"binary"
            info = tarfile.TarInfo("bin/solc-0.8.30")
            info.size = len(content)
            tar.addfile(info, io.BytesIO(content))
            link = tarfile.TarInfo("bin/solc")
            link.type = tarfile.SYMTYPE
            link.linkname = "solc-0.8.30"
            tar.addfile(link)

        unpack_tar_gz(buffer.getvalue(), tmp_path / "out")

        assert (tmp_path / "out" / "bin" / "solc").read_bytes() == b"binary"


def _tar_gz_with_link(name, linkname, link_type, payload=None):
    """Build a .tar.gz holding one link member and optionally a file behind it."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        link = tarfile.TarInfo(name)
        link.type = link_type
        link.linkname = linkname
        tar.addfile(link)
        if payload is not None:
            info = tarfile.TarInfo(payload)
            info.size = 1
            tar.addfile(info, io.BytesIO(b"x"))
    return buffer.getvalue()


class TestArchiveFile:
    """Tests for archive_file."""

    def test_archive_stores_file_by_name(self, tmp_path):
        """Test the file is stored without its directory."""
        source = tmp_path / "build" / "solc"
        source.parent.mkdir()
        source.write_bytes(b"binary")

        archive = archive_file(source, tmp_path / "dist" / "solc.tar.gz")

        with tarfile.open(archive, "r:gz") as tar:
            assert tar.getnames() == ["solc"]

    def test_missing_source(self, tmp_path):
        """Test a missing source raises FilesystemError."""
        with pytest.raises(FilesystemError, match="does not exist"):
            archive_file(tmp_path / "missing", tmp_path / "out.tar.gz")

    def test_directory_source(self, tmp_path):
        """Test a directory source is rejected."""
        with pytest.raises(FilesystemError, match="not a file"):
            archive_file(tmp_path, tmp_path / "out.tar.gz")

    def test_archive_unpacks_back(self, tmp_path):
        """Test an archive produced here unpacks to the original file."""
        source = tmp_path / "solc"
        source.write_bytes(b"binary")
        archive = archive_file(source, tmp_path / "solc.tar.gz")

        unpack_tar_gz(archive.read_bytes(), tmp_path / "out")

        assert (tmp_path / "out" / "solc").read_bytes() == b"binary"


class TestAtomicWrite:
    """Tests for atomic_write."""

    def test_write_text(self, tmp_path):
        """Test writing text creates parent directories."""
        target = tmp_path / "nested" / "file.toml"

        atomic_write(target, "key = 1\n")

        assert target.read_text() == "key = 1\n"

    def test_write_bytes(self, tmp_path):
        """Test writing bytes."""
        target = tmp_path / "file.bin"

        atomic_write(target, b"\x00\x01")

        assert target.read_bytes() == b"\x00\x01"

    def test_no_temp_files_left(self, tmp_path):
        """Test the temporary file is renamed away."""
        atomic_write(tmp_path / "file.txt", "content")

        assert [p.name for p in tmp_path.iterdir()] == ["file.txt"]


class TestSafeRmtree:
    """Tests for safe_rmtree."""

    def test_remove_directory(self, tmp_path):
        """Test an existing directory is removed."""
        target = tmp_path / "toolchains" / "solidity"
        target.mkdir(parents=True)
        (target / "solc").write_text("x")

        assert safe_rmtree(target, require_prefix=tmp_path) is True
        assert not target.exists()

    def test_missing_directory(self, tmp_path):
        """Test a missing directory is reported, not an error."""
        assert safe_rmtree(tmp_path / "missing", require_prefix=tmp_path) is False

    def test_outside_prefix(self, tmp_path):
        """Test paths outside the prefix are refused."""
        outside = tmp_path / "outside"
        outside.mkdir()

        with pytest.raises(ValueError, match="Refusing to delete"):
            safe_rmtree(outside, require_prefix=tmp_path / "root")

        assert outside.exists()

    def test_prefix_itself(self, tmp_path):
        """Test the prefix itself is refused."""
        with pytest.raises(ValueError):
            safe_rmtree(tmp_path, require_prefix=tmp_path)

    def test_file_is_rejected(self, tmp_path):
        """Test a regular file is not removed."""
        target = tmp_path / "file"
        target.write_text("x")

        with pytest.raises(FilesystemError, match="not a directory"):
            safe_rmtree(target)
