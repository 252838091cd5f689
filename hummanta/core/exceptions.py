"""
Centralized exception hierarchy for Hummanta.

This module defines all custom exceptions used across the codebase
to keep error semantics in one place.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class HummantaError(Exception):
    """Base exception for all Hummanta errors."""

    pass


# ============================================================================
# Fetch Exceptions
# ============================================================================


class FetchError(HummantaError):
    """Base exception for content fetch errors."""

    pass


class InvalidUrl(FetchError):
    """Raised when a URL has no recognizable scheme."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Invalid URL: {url}")


class UnsupportedScheme(FetchError):
    """Raised when no fetcher is registered for a URL scheme."""

    def __init__(self, scheme: str):
        self.scheme = scheme
        super().__init__(f"Unsupported scheme: {scheme}")


class NetworkError(FetchError):
    """Raised when a remote request fails or returns a non-2xx status."""

    pass


class FileError(FetchError):
    """Raised when reading a local source fails."""

    pass


class HashMismatch(FetchError):
    """Raised when fetched content does not match its expected SHA-256."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Hash mismatch - expected: {expected}, actual: {actual}")


# ============================================================================
# Manifest Exceptions
# ============================================================================


class ManifestError(HummantaError):
    """Base exception for manifest errors."""

    pass


class ManifestParseError(ManifestError):
    """Raised when a manifest document cannot be parsed."""

    pass


# ============================================================================
# Registry Exceptions
# ============================================================================


class RegistryError(HummantaError):
    """Base exception for registry and package manager errors."""

    pass


class DomainNotFound(RegistryError):
    """Raised when the registry index has no entry for a domain."""

    def __init__(self, kind: str, domain: str):
        self.kind = kind
        self.domain = domain
        super().__init__(f"{domain} not found in {kind} index")


class PackageNotFound(RegistryError):
    """Raised when a domain index has no entry for a package."""

    def __init__(self, category: str, name: str):
        self.category = category
        self.name = name
        super().__init__(f"package not found: {category}/{name}")


class ReleaseNotFound(RegistryError):
    """Raised when a package manifest has no release for a version."""

    def __init__(self, name: str, version: str):
        self.name = name
        self.version = version
        super().__init__(f"release version not found: {name} {version}")


class UnpackError(RegistryError):
    """Raised when an artifact archive cannot be unpacked."""

    pass


class RemoveError(RegistryError):
    """Raised when an installation directory cannot be removed."""

    pass


class CacheError(RegistryError):
    """Raised when the installed-state cache cannot be loaded or saved."""

    pass


class CacheLockTimeout(CacheError):
    """Raised when the installed-state cache lock cannot be acquired."""

    pass


# ============================================================================
# Configuration and Detection Exceptions
# ============================================================================


class ConfigError(HummantaError):
    """Raised when the user configuration is invalid."""

    pass


class DetectionError(HummantaError):
    """Raised when a detector plugin fails or returns invalid output."""

    pass
