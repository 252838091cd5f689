"""
Running installed detectors against a project.

Detectors are executables installed in the ``detector`` category of a
toolchain domain. Each one is invoked as ``<detector> --path <path>`` and
prints a :class:`DetectResult` as JSON.

Usage:
    from hummanta.detection import detect

    result = detect(toolchain_manager, Path("."))
    if result:
        print(result.language)
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional, Union

from hummanta.core.exceptions import DetectionError
from hummanta.detection.result import DetectResult

logger = logging.getLogger(__name__)

DETECTOR_CATEGORY = "detector"
DEFAULT_TIMEOUT = 30


def run_detector(
    executable: Union[str, Path], path: Union[str, Path], timeout: float = DEFAULT_TIMEOUT
) -> DetectResult:
    """
    Run one detector executable against a path.

    Args:
        executable: Detector executable
        path: File or directory to detect
        timeout: Maximum run time in seconds

    Returns:
        The parsed detection result

    Raises:
        DetectionError: If the detector can't be run, exits non-zero, times
            out or prints an invalid result
    """
    command = [str(executable), "--path", str(path)]
    logger.debug(f"Executing {' '.join(command)}")

    try:
        result = subprocess.run(command, capture_output=True, text=True, timeout=timeout)
    except subprocess.TimeoutExpired as e:
        raise DetectionError(f"Detector {executable} timed out after {timeout}s") from e
    except OSError as e:
        raise DetectionError(f"Failed to run detector {executable}: {e}") from e

    if result.returncode != 0:
        raise DetectionError(
            f"Detector {executable} exited with code {result.returncode}: "
            f"{result.stderr.strip()}"
        )

    return DetectResult.from_json(result.stdout)


def detect(manager, path: Union[str, Path], timeout: float = DEFAULT_TIMEOUT) -> Optional[DetectResult]:
    """
    Run every installed detector of a manager against a path.

    Detectors that fail are logged and skipped.

    Args:
        manager: Package manager whose ``detector`` packages are run
        path: File or directory to detect
        timeout: Maximum run time of each detector in seconds

    Returns:
        The first passing result, or None if no detector recognized the path
    """
    for packages in manager.by_category(DETECTOR_CATEGORY):
        for name in sorted(packages):
            entry = packages[name]
            try:
                result = run_detector(entry.path, path, timeout=timeout)
            except DetectionError as e:
                logger.warning(f"Detector {name} failed: {e}")
                continue

            logger.debug(f"Detector {name} returned {result}")
            if result.pass_:
                return result

    return None
