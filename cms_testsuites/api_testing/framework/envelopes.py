"""
================================================================================
Response Envelopes
================================================================================

Canonical response shapes shared across CMS endpoints:
    - ProblemDetail (RFC 7807) for errors
    - GenericMessage for success/info messages
    - HttpErrorResponse, the legacy error shape some endpoints still return

Each model maps JSON keys to attributes explicitly through FIELDS; unknown
keys are ignored, missing keys take the attribute default.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Dict, Optional, Tuple, Type, TypeVar


E = TypeVar("E", bound="Envelope")

Converter = Callable[[str, Any], Any]


def _optional_str(name: str, value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise ValueError(f"field '{name}' must be a string, got {type(value).__name__}")


def _int(name: str, value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ValueError(f"field '{name}' must be an integer, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ValueError(f"field '{name}' must be an integer, got {value!r}")


def _any(name: str, value: Any) -> Any:
    return value


class Envelope:
    """Base for explicit JSON-key to attribute mapping."""

    # json key -> (attribute name, converter)
    FIELDS: ClassVar[Dict[str, Tuple[str, Converter]]] = {}

    @classmethod
    def from_dict(cls: Type[E], data: Dict[str, Any]) -> E:
        kwargs = {}
        for key, (attr, convert) in cls.FIELDS.items():
            if key in data:
                kwargs[attr] = convert(key, data[key])
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {key: getattr(self, attr) for key, (attr, _) in self.FIELDS.items()}


@dataclass
class ProblemDetail(Envelope):
    """Problem Detail response model (RFC 7807)."""
    type: Optional[str] = None
    title: Optional[str] = None
    status: int = 0
    detail: Optional[str] = None
    instance: Optional[str] = None
    properties: Any = None

    FIELDS: ClassVar[Dict[str, Tuple[str, Converter]]] = {
        "type": ("type", _optional_str),
        "title": ("title", _optional_str),
        "status": ("status", _int),
        "detail": ("detail", _optional_str),
        "instance": ("instance", _optional_str),
        "properties": ("properties", _any),
    }


@dataclass
class GenericMessage(Envelope):
    """Generic message response model used for success messages."""
    message: Optional[str] = None

    FIELDS: ClassVar[Dict[str, Tuple[str, Converter]]] = {
        "message": ("message", _optional_str),
    }


@dataclass
class HttpErrorResponse(Envelope):
    """Legacy error response: status code, status name, reason and message."""
    http_status_code: int = 0
    http_status: Optional[str] = None
    reason: Optional[str] = None
    message: Optional[str] = None

    FIELDS: ClassVar[Dict[str, Tuple[str, Converter]]] = {
        "httpStatusCode": ("http_status_code", _int),
        "httpStatus": ("http_status", _optional_str),
        "reason": ("reason", _optional_str),
        "message": ("message", _optional_str),
    }


__all__ = [
    "Envelope",
    "GenericMessage",
    "HttpErrorResponse",
    "ProblemDetail",
]
