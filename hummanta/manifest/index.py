"""
Index manifest: a two-level ``section -> key -> path`` mapping.

The registry root index maps kind -> domain -> domain index path::

    [toolchains]
    solidity = "toolchains/solidity.toml"

A domain index uses the same shape for category -> package -> package base::

    [detector]
    solidity-detector-foundry = "https://hummanta.github.io/solidity-detector-foundry"
"""

from typing import Any, Dict, Iterator, Optional, Tuple

from hummanta.manifest.base import ManifestFile, str_table


class IndexManifest(ManifestFile):
    """Two-level mapping of section -> key -> path or URL."""

    def __init__(self, sections: Optional[Dict[str, Dict[str, str]]] = None):
        self._sections: Dict[str, Dict[str, str]] = sections or {}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IndexManifest":
        return cls({section: str_table(keys, section) for section, keys in data.items()})

    def to_dict(self) -> Dict[str, Any]:
        return {section: dict(keys) for section, keys in self._sections.items()}

    def insert(self, section: str, key: str, value: str) -> None:
        """Insert or replace an entry."""
        self._sections.setdefault(section, {})[key] = value

    def get(self, section: str, key: str) -> Optional[str]:
        """Value for a section and key, or None."""
        return self._sections.get(section, {}).get(key)

    def remove(self, section: str, key: str) -> Optional[str]:
        """Remove an entry, returning its value if it existed."""
        keys = self._sections.get(section)
        if keys is None:
            return None
        return keys.pop(key, None)

    def contains_section(self, section: str) -> bool:
        return section in self._sections

    def contains_key(self, section: str, key: str) -> bool:
        return key in self._sections.get(section, {})

    def sections(self) -> Iterator[str]:
        """Iterate over section names."""
        return iter(self._sections)

    def keys(self, section: str) -> Iterator[Tuple[str, str]]:
        """Iterate over ``(key, value)`` pairs of one section (empty if missing)."""
        return iter(self._sections.get(section, {}).items())

    def entries(self) -> Iterator[Tuple[str, str]]:
        """Iterate over all ``(section, key)`` pairs in document order."""
        for section, keys in self._sections.items():
            for key in keys:
                yield section, key

    def __len__(self) -> int:
        return sum(len(keys) for keys in self._sections.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IndexManifest):
            return NotImplemented
        return self._sections == other._sections

    def __repr__(self) -> str:
        return f"IndexManifest({self._sections!r})"
