"""
Package publishing commands.

- pack: Archive a built executable and write its checksum side-car
- publish: Generate the release manifest and create or update the package
  manifest from a directory of artifacts
"""

import logging

from hummanta.cli.utils import print_error, safe_print
from hummanta.core.exceptions import HummantaError
from hummanta.manifest.generate import pack_artifact, publish

logger = logging.getLogger(__name__)


def run_pack(args) -> int:
    """
    Archive an executable as ``<name>-<version>-<target>.tar.gz``.

    Args:
        args: Parsed command-line arguments with:
            - executable: Built executable to archive
            - name: Package name (default: executable file name)
            - version: Version being released
            - target: Target triple the executable was built for
            - output_dir: Directory for the archive and its side-car

    Returns:
        Exit code (0 for success, 1 for error)
    """
    name = args.name or args.executable.name
    try:
        archive = pack_artifact(args.executable, args.output_dir, name, args.version, args.target)
    except HummantaError as e:
        print_error(f"Failed to pack {args.executable}", str(e))
        return 1

    safe_print(f"Created {archive}")
    return 0


def run_publish(args) -> int:
    """
    Write ``release-<version>.toml`` and ``index.toml`` for a package.

    Args:
        args: Parsed command-line arguments with:
            - package: Path to the package configuration file
            - artifacts_dir: Directory of artifacts and ``.sha256`` side-cars
            - output_dir: Directory for the generated manifests
            - version: Version to publish
            - local: Use ``file://`` URLs of the local artifacts

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        release_path, index_path = publish(
            args.package, args.artifacts_dir, args.output_dir, args.version, local=args.local
        )
    except (HummantaError, OSError) as e:
        logger.debug("Failed to publish manifests", exc_info=True)
        print_error("Failed to generate manifests", str(e))
        return 1

    safe_print(f"Wrote {release_path}")
    safe_print(f"Wrote {index_path}")
    return 0
