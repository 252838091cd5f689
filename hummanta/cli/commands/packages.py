"""
Toolchain and target management commands.

This module implements the sub-commands shared by ``hummanta toolchain`` and
``hummanta target``:
- add: Install every package of a domain
- remove: Remove an installed domain
- list: Show every installed domain
- show: Show the packages of one installed domain
"""

import logging

from hummanta.cli.utils import (
    confirm,
    create_manager,
    print_domain_packages,
    print_error,
    print_warning,
    safe_print,
)
from hummanta.core.exceptions import HummantaError
from hummanta.registry import TARGET, TOOLCHAIN

logger = logging.getLogger(__name__)

KINDS = {"toolchain": TOOLCHAIN, "target": TARGET}

CONFIRM_PROMPT = "Are you sure you want to continue? [y/N]"


def _manager(args):
    return create_manager(args, KINDS[args.command])


def run_add(args) -> int:
    """
    Install every package of a domain.

    Args:
        args: Parsed command-line arguments with:
            - command: "toolchain" or "target"
            - domain: Domain to install
            - platform: Extra target triples to install (optional)

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        manager = _manager(args)
        platforms = getattr(args, "platform", None)
        report = manager.add(args.domain, platforms=platforms)
    except HummantaError as e:
        logger.debug(f"Failed to add {args.domain}", exc_info=True)
        print_error(f"Failed to install {args.command}s for {args.domain}", str(e))
        return 1

    for skipped in report.skipped:
        print_warning(f"Skipped {skipped.category}/{skipped.name}: {skipped.reason}")

    safe_print(f"Successfully installed {args.domain} {manager.kind}")
    return 0


def run_remove(args) -> int:
    """
    Remove an installed domain after confirmation.

    Args:
        args: Parsed command-line arguments with:
            - domain: Domain to remove
            - force: Skip the confirmation prompt

    Returns:
        Exit code (0 for success, 1 for error)
    """
    if not args.force and not confirm(CONFIRM_PROMPT):
        safe_print("Aborted.")
        return 0

    try:
        manager = _manager(args)
        removed = manager.remove(args.domain)
    except HummantaError as e:
        logger.debug(f"Failed to remove {args.domain}", exc_info=True)
        print_error(f"Failed to remove {args.command}s for {args.domain}", str(e))
        return 1

    if removed:
        safe_print(f"Successfully removed {args.domain} {manager.kind}")
    else:
        safe_print(f"No {manager.kind} installed for {args.domain}")
    return 0


def run_list(args) -> int:
    """List every installed domain with its packages."""
    try:
        manager = _manager(args)
    except HummantaError as e:
        print_error(f"Failed to read installed {args.command}s", str(e))
        return 1

    domains = manager.list()
    if not domains:
        safe_print(f"No {manager.kind} installed.")
        return 0

    for domain, categories in domains.items():
        print_domain_packages(domain, categories)
    return 0


def run_show(args) -> int:
    """Show the installed packages of one domain."""
    try:
        manager = _manager(args)
    except HummantaError as e:
        print_error(f"Failed to read installed {args.command}s", str(e))
        return 1

    categories = manager.get_category(args.domain)
    if categories is None:
        safe_print(f"No {manager.kind} installed for {args.domain}")
        return 0

    print_domain_packages(args.domain, categories)
    return 0
