"""
JSON (de)serialization entry point.

Every envelope decode goes through ``from_json`` so that parse errors and
shape errors surface as one exception type with the target model's name.
"""

from __future__ import annotations

import dataclasses
import json
from typing import Any, Dict, Protocol, Type, TypeVar


T = TypeVar("T", bound="JsonModel")


class JsonModel(Protocol):
    @classmethod
    def from_dict(cls: Type[T], data: Dict[str, Any]) -> T: ...


class EnvelopeDecodeError(Exception):
    """Raised when a JSON document cannot be decoded into a model."""
    pass


def from_json(text: str, model: Type[T]) -> T:
    """
    Deserialize ``text`` into ``model``.

    Raises:
        EnvelopeDecodeError: If ``text`` is not JSON, not an object, or
            does not fit the model's field types
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise EnvelopeDecodeError(
            f"Failed to deserialize JSON to {model.__name__}: {e}"
        ) from e

    if not isinstance(data, dict):
        raise EnvelopeDecodeError(
            f"Failed to deserialize JSON to {model.__name__}: "
            f"expected a JSON object, got {type(data).__name__}"
        )

    try:
        return model.from_dict(data)
    except (TypeError, ValueError) as e:
        raise EnvelopeDecodeError(
            f"Failed to deserialize JSON to {model.__name__}: {e}"
        ) from e


def _plain(obj: Any) -> Any:
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    return obj


def to_json(obj: Any) -> str:
    """Serialize a model, dataclass or plain value to compact JSON."""
    return json.dumps(_plain(obj), ensure_ascii=False, default=str)


def to_pretty_json(obj: Any) -> str:
    return json.dumps(_plain(obj), ensure_ascii=False, indent=2, default=str)


__all__ = [
    "EnvelopeDecodeError",
    "from_json",
    "to_json",
    "to_pretty_json",
]
