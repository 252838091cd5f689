"""
Shared TOML (de)serialization for manifest documents.

Manifests are read with the standard library ``tomllib`` and written with
``tomli_w``. Every manifest class converts to and from plain dictionaries;
this mixin layers text, bytes and file I/O on top of that.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Type, TypeVar, Union

import tomli_w

from hummanta.core.exceptions import ManifestError, ManifestParseError
from hummanta.core.filesystem import atomic_write

logger = logging.getLogger(__name__)

M = TypeVar("M", bound="ManifestFile")


class ManifestFile:
    """Mixin giving a manifest TOML text, bytes and file round-tripping."""

    @classmethod
    def from_dict(cls: Type[M], data: Dict[str, Any]) -> M:
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError

    @classmethod
    def from_str(cls: Type[M], text: str) -> M:
        """
        Parse a manifest from TOML text.

        Raises:
            ManifestParseError: If the text is not valid TOML or does not
                match the manifest schema
        """
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            raise ManifestParseError(f"toml parse error: {e}") from e

        try:
            return cls.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise ManifestParseError(f"invalid {cls.__name__}: {e}") from e

    @classmethod
    def from_bytes(cls: Type[M], data: bytes) -> M:
        """Parse a manifest from UTF-8 encoded TOML bytes."""
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ManifestParseError(f"manifest is not valid UTF-8: {e}") from e
        return cls.from_str(text)

    @classmethod
    def load(cls: Type[M], path: Union[str, Path]) -> M:
        """
        Load a manifest from a file.

        Raises:
            ManifestError: If the file can't be read
            ManifestParseError: If the content is invalid
        """
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise ManifestError(f"Failed to read manifest {path}: {e}") from e
        return cls.from_str(text)

    def to_toml(self) -> str:
        """Serialize the manifest to TOML text."""
        try:
            return tomli_w.dumps(self.to_dict())
        except (TypeError, ValueError) as e:
            raise ManifestError(f"toml serialize error: {e}") from e

    def save(self, path: Union[str, Path]) -> None:
        """
        Save the manifest to a file atomically.

        Raises:
            ManifestError: If serialization or writing fails
        """
        content = self.to_toml()
        try:
            atomic_write(path, content)
        except OSError as e:
            raise ManifestError(f"Failed to write manifest {path}: {e}") from e
        logger.debug(f"Saved {type(self).__name__} to {path}")


def require_str(data: Dict[str, Any], key: str) -> str:
    """Fetch a required string field, raising ValueError when absent or mistyped."""
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"missing or invalid field '{key}'")
    return value


def optional_str(data: Dict[str, Any], key: str):
    """Fetch an optional string field (None when absent)."""
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"invalid field '{key}': expected a string")
    return value


def str_table(data: Any, name: str) -> Dict[str, str]:
    """Validate a table whose values are all strings."""
    if not isinstance(data, dict):
        raise ValueError(f"'{name}' must be a table")
    for key, value in data.items():
        if not isinstance(value, str):
            raise ValueError(f"'{name}.{key}' must be a string")
    return dict(data)
