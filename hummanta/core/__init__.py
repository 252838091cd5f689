"""
Core functionality for Hummanta.

This package contains the foundational modules that other components depend on.
"""

from .directory import (
    get_home_dir,
    ensure_home_dir,
    installed_manifest_path,
    config_file_path,
    domain_dir,
    DirectoryError,
)

from .platform import (
    PlatformInfo,
    detect_platform,
    current_target,
    clear_platform_cache,
)

from .config import Config, DEFAULT_REGISTRY

from .exceptions import (
    HummantaError,
    FetchError,
    InvalidUrl,
    UnsupportedScheme,
    NetworkError,
    FileError,
    HashMismatch,
    ManifestError,
    ManifestParseError,
    RegistryError,
    DomainNotFound,
    PackageNotFound,
    ReleaseNotFound,
    UnpackError,
    RemoveError,
    CacheError,
    CacheLockTimeout,
    ConfigError,
    DetectionError,
)

__all__ = [
    "get_home_dir",
    "ensure_home_dir",
    "installed_manifest_path",
    "config_file_path",
    "domain_dir",
    "DirectoryError",
    "PlatformInfo",
    "detect_platform",
    "current_target",
    "clear_platform_cache",
    "Config",
    "DEFAULT_REGISTRY",
    "HummantaError",
    "FetchError",
    "InvalidUrl",
    "UnsupportedScheme",
    "NetworkError",
    "FileError",
    "HashMismatch",
    "ManifestError",
    "ManifestParseError",
    "RegistryError",
    "DomainNotFound",
    "PackageNotFound",
    "ReleaseNotFound",
    "UnpackError",
    "RemoveError",
    "CacheError",
    "CacheLockTimeout",
    "ConfigError",
    "DetectionError",
]
