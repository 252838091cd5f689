"""
Detect command implementation.

Runs the installed detectors against a path and prints the detected
language as JSON.
"""

import logging

from hummanta.cli.utils import create_manager, print_error, safe_print
from hummanta.core.exceptions import HummantaError
from hummanta.detection import DetectResult, detect
from hummanta.registry import TOOLCHAIN

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the detect command.

    Args:
        args: Parsed command-line arguments with:
            - path: File or directory to detect

    Returns:
        Exit code (0 when a detector recognized the path, 1 otherwise)
    """
    try:
        manager = create_manager(args, TOOLCHAIN)
        result = detect(manager, args.path, timeout=args.detector_timeout)
    except HummantaError as e:
        print_error("Detection failed", str(e))
        return 1

    if result is None:
        safe_print(DetectResult.failed().to_json())
        return 1

    safe_print(result.to_json())
    return 0
