"""
Detection result exchanged with detector executables.

A detector prints one JSON object on stdout::

    {"pass": true, "language": "solidity", "extension": "sol"}
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from hummanta.core.exceptions import DetectionError


@dataclass
class DetectResult:
    """
    Outcome of running a detector against a path.

    Attributes:
        pass_: Whether the detector recognized the project
        language: Detected source language
        extension: Source file extension of the language
    """

    pass_: bool
    language: Optional[str] = None
    extension: Optional[str] = None

    @classmethod
    def passed(cls, language: str, extension: str) -> "DetectResult":
        return cls(pass_=True, language=language, extension=extension)

    @classmethod
    def failed(cls) -> "DetectResult":
        return cls(pass_=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DetectResult":
        if not isinstance(data, dict):
            raise DetectionError("Detection result must be a JSON object")

        passed = data.get("pass")
        if not isinstance(passed, bool):
            raise DetectionError(f"Invalid 'pass' value in detection result: {passed!r}")

        fields = {}
        for key in ("language", "extension"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise DetectionError(f"Invalid '{key}' value in detection result: {value!r}")
            fields[key] = value

        return cls(pass_=passed, **fields)

    @classmethod
    def from_json(cls, text: str) -> "DetectResult":
        """
        Parse a detector's JSON output.

        Raises:
            DetectionError: If the text is not a valid detection result
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise DetectionError(f"Detector output is not valid JSON: {e}") from e
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"pass": self.pass_}
        if self.language is not None:
            data["language"] = self.language
        if self.extension is not None:
            data["extension"] = self.extension
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def __str__(self) -> str:
        return self.to_json()
