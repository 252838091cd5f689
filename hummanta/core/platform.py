"""
Platform detection for Hummanta.

This module detects the current platform (OS, architecture, C library ABI)
and renders it as the target triple used to select release artifacts
(e.g. 'x86_64-unknown-linux-gnu', 'aarch64-apple-darwin').

Usage:
    from hummanta.core.platform import detect_platform, current_target

    platform_info = detect_platform()
    print(f"OS: {platform_info.os}")
    print(f"Target: {current_target()}")
"""

import functools
import platform
import re
import subprocess
from dataclasses import dataclass


@dataclass(frozen=True)
class PlatformInfo:
    """
    Platform information relevant to artifact selection.

    Attributes:
        os: Operating system ('linux', 'macos', 'windows')
        arch: CPU architecture in triple form ('x86_64', 'aarch64', 'i686', 'armv7')
        abi: C library / runtime ABI ('gnu', 'musl', 'msvc', or '' on macOS)
    """

    os: str
    arch: str
    abi: str

    def target_triple(self) -> str:
        """
        Get the target triple for this platform.

        Example:
            >>> PlatformInfo('linux', 'x86_64', 'gnu').target_triple()
            'x86_64-unknown-linux-gnu'
            >>> PlatformInfo('macos', 'aarch64', '').target_triple()
            'aarch64-apple-darwin'
        """
        if self.os == "macos":
            return f"{self.arch}-apple-darwin"
        if self.os == "windows":
            return f"{self.arch}-pc-windows-{self.abi or 'msvc'}"
        if self.arch == "armv7" and self.abi == "gnu":
            # Hard-float is the only 32-bit ARM flavour artifacts are built for
            return "armv7-unknown-linux-gnueabihf"
        return f"{self.arch}-unknown-{self.os}-{self.abi or 'gnu'}"

    def __str__(self) -> str:
        return self.target_triple()


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current platform information.

    This function is cached - it only runs detection once per process.
    """
    os_name = _detect_os()
    return PlatformInfo(os=os_name, arch=_detect_architecture(), abi=_detect_abi(os_name))


def current_target() -> str:
    """Get the target triple of the running platform."""
    return detect_platform().target_triple()


def _detect_os() -> str:
    """
    Detect operating system.

    Raises:
        RuntimeError: If OS is not supported
    """
    system = platform.system().lower()

    if system == "linux":
        return "linux"
    elif system == "darwin":
        return "macos"
    elif system == "windows":
        return "windows"
    else:
        raise RuntimeError(f"Unsupported operating system: {system}")


def _detect_architecture() -> str:
    """Detect CPU architecture, normalized to triple spelling."""
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x86_64"
    elif machine in ("aarch64", "arm64"):
        return "aarch64"
    elif machine in ("i386", "i686", "x86"):
        return "i686"
    elif machine.startswith("arm"):
        return "armv7"
    elif machine.startswith("riscv64"):
        return "riscv64gc"
    else:
        return machine


def _detect_abi(os_name: str) -> str:
    """Detect the ABI component of the target triple."""
    if os_name == "windows":
        return "msvc"
    if os_name == "macos":
        return ""
    return _detect_linux_libc()


def _detect_linux_libc() -> str:
    """
    Detect whether the Linux C library is glibc or musl.

    Returns:
        'musl' when musl is detected, otherwise 'gnu'
    """
    libc, _ = platform.libc_ver()
    if libc == "glibc":
        return "gnu"

    try:
        result = subprocess.run(
            ["ldd", "--version"], capture_output=True, text=True, timeout=5
        )
    except (OSError, subprocess.SubprocessError):
        return "gnu"

    output = result.stdout.lower() + result.stderr.lower()
    if re.search(r"\bmusl\b", output):
        return "musl"
    return "gnu"


def clear_platform_cache():
    """
    Clear the platform detection cache.

    Forces the next call to detect_platform() to re-detect. Useful for testing.
    """
    detect_platform.cache_clear()


__all__ = [
    "PlatformInfo",
    "detect_platform",
    "current_target",
    "clear_platform_cache",
]
