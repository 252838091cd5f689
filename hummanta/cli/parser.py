"""
Hummanta CLI argument parser.

This module implements the command-line interface for Hummanta using argparse.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Get version from package
try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("hummanta")
except PackageNotFoundError:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """Hummanta command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="hummanta",
            description="Hummanta - toolchain and target package manager",
            epilog='Use "hummanta COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"Hummanta {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--registry",
            metavar="URL",
            help="Registry URL (default: $HUMMANTA_REGISTRY, then config file)",
        )
        parser.add_argument(
            "--timeout",
            type=int,
            metavar="SECONDS",
            help="Network timeout in seconds for registry requests",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_package_command(
            subparsers, "toolchain", "View and manage language toolchains"
        )
        self._add_package_command(
            subparsers, "target", "View and manage compilation targets"
        )
        self._add_manifest_command(subparsers)
        self._add_detect_command(subparsers)

        return parser

    def _add_package_command(self, subparsers, name: str, description: str):
        """Add a 'toolchain' or 'target' subcommand with sub-subcommands."""
        parser = subparsers.add_parser(name, help=description, description=description)

        package_subparsers = parser.add_subparsers(
            dest="package_command", help=f"{name.capitalize()} commands", metavar="COMMAND"
        )

        # add
        add_parser = package_subparsers.add_parser(
            "add",
            help=f"Install the {name}s of a domain",
            description=f"Install the latest {name} packages of a domain",
        )
        add_parser.add_argument("domain", help="Domain to install (e.g. solidity)")
        add_parser.add_argument(
            "--platform",
            action="append",
            metavar="TRIPLE",
            help="Target triple to install for (repeatable, default: host platform)",
        )

        # remove
        remove_parser = package_subparsers.add_parser(
            "remove",
            help=f"Remove the {name}s of a domain",
            description=f"Remove the installed {name} packages of a domain",
        )
        remove_parser.add_argument("domain", help="Domain to remove")
        remove_parser.add_argument(
            "--force", "-f", action="store_true", help="Skip confirmation prompt"
        )

        # list
        package_subparsers.add_parser(
            "list",
            help=f"List installed {name}s",
            description=f"Show every installed {name} domain and its packages",
        )

        # show
        show_parser = package_subparsers.add_parser(
            "show",
            help=f"Show the {name}s of a domain",
            description=f"Display the installed {name} packages of a domain",
        )
        show_parser.add_argument("domain", help="Domain to show")

    def _add_manifest_command(self, subparsers):
        """Add 'manifest' subcommand with sub-subcommands."""
        parser = subparsers.add_parser(
            "manifest",
            help="Generate package and release manifests",
            description="Package artifacts and generate Hummanta-compatible manifests",
        )

        manifest_subparsers = parser.add_subparsers(
            dest="manifest_command", help="Manifest commands", metavar="COMMAND"
        )

        # manifest pack
        pack_parser = manifest_subparsers.add_parser(
            "pack",
            help="Archive a built executable",
            description="Archive an executable and write its .sha256 checksum",
        )
        pack_parser.add_argument("executable", type=Path, help="Executable to archive")
        pack_parser.add_argument("--name", help="Package name (default: executable name)")
        pack_parser.add_argument("--version", required=True, help="Version being released")
        pack_parser.add_argument("--target", required=True, help="Target triple")
        pack_parser.add_argument(
            "--output-dir",
            type=Path,
            default=Path.cwd(),
            metavar="PATH",
            help="Directory for the archive (default: current directory)",
        )

        # manifest publish
        publish_parser = manifest_subparsers.add_parser(
            "publish",
            help="Generate package and release manifests",
            description="Generate release-<version>.toml and create or update index.toml",
        )
        publish_parser.add_argument(
            "--package",
            type=Path,
            required=True,
            metavar="PATH",
            help="Path to the package configuration file",
        )
        publish_parser.add_argument(
            "--artifacts-dir",
            type=Path,
            required=True,
            metavar="PATH",
            help="Directory containing artifact tarballs and their .sha256 checksums",
        )
        publish_parser.add_argument(
            "--output-dir",
            type=Path,
            required=True,
            metavar="PATH",
            help="Output directory for index.toml and release-<version>.toml",
        )
        publish_parser.add_argument("--version", required=True, help="Version to publish")
        publish_parser.add_argument(
            "--local",
            action="store_true",
            help="Reference local artifacts with file:// URLs",
        )

    def _add_detect_command(self, subparsers):
        """Add 'detect' subcommand."""
        parser = subparsers.add_parser(
            "detect",
            help="Detect the language of a project",
            description="Run the installed detectors against a path",
        )
        parser.add_argument(
            "--path",
            type=Path,
            default=Path.cwd(),
            metavar="PATH",
            help="File or directory to detect (default: current directory)",
        )
        parser.add_argument(
            "--timeout",
            dest="detector_timeout",
            type=int,
            default=30,
            metavar="SECONDS",
            help="Time limit for each detector [default: 30]",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        # Configure logging
        self._configure_logging(parsed_args)

        # Check if command specified
        if not parsed_args.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        if args.command in ("toolchain", "target"):
            return self._dispatch_subcommand(
                args,
                "package_command",
                "hummanta.cli.commands.packages",
                {
                    "add": "run_add",
                    "remove": "run_remove",
                    "list": "run_list",
                    "show": "run_show",
                },
            )

        if args.command == "manifest":
            return self._dispatch_subcommand(
                args,
                "manifest_command",
                "hummanta.cli.commands.manifest",
                {"pack": "run_pack", "publish": "run_publish"},
            )

        # Command module mapping
        command_map = {
            "detect": "hummanta.cli.commands.detect",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = self._import_command(module_name, args)
        if module is None:
            return 1

        if not hasattr(module, "run"):
            logger.error(f"Command module {module_name} has no run() function")
            return 1

        return module.run(args)

    def _dispatch_subcommand(self, args, dest: str, module_name: str, handlers: dict) -> int:
        """
        Dispatch the sub-command of a command with sub-commands.

        Args:
            args: Parsed arguments
            dest: Attribute holding the sub-command name
            module_name: Module implementing the handlers
            handlers: Sub-command name to handler function name

        Returns:
            Exit code from command handler
        """
        subcommand = getattr(args, dest, None)
        if not subcommand:
            logger.error(f"No {args.command} sub-command specified")
            self.parser.parse_args([args.command, "--help"])
            return 1

        handler_name = handlers.get(subcommand)
        if not handler_name:
            logger.error(f"Unknown {args.command} command: {subcommand}")
            return 1

        module = self._import_command(module_name, args)
        if module is None:
            return 1

        return getattr(module, handler_name)(args)

    def _import_command(self, module_name: str, args):
        """Import a command module, logging import failures."""
        import importlib

        try:
            return importlib.import_module(module_name)
        except ImportError as e:
            logger.error(f"Failed to load command module: {e}")
            if args.verbose:
                import traceback

                traceback.print_exc()
            return None


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
