"""
================================================================================
JSON Path Evaluation
================================================================================

Evaluates JSONPath expressions (jsonpath-ng, extended grammar) against
response documents and wraps the result in a tagged JsonValue.

Result shape:
    - Definite paths ($.id, $.content[0].slug, $[0].id) yield the single
      matched value and fail when nothing matches
    - Indefinite paths (wildcards, slices, filters, recursive descent,
      unions) yield a list of every match, possibly empty

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, List

from jsonpath_ng import jsonpath as jp
from jsonpath_ng.ext import parse as jsonpath_parse


# ================================================================================
# Errors
# ================================================================================

class JsonPathError(Exception):
    """Base class for extraction failures; carries the offending path."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(message)


class MalformedJsonError(JsonPathError):
    """Response body is not valid JSON."""


class InvalidPathError(JsonPathError):
    """Expression is not valid JSONPath."""


class PathNotFoundError(JsonPathError):
    """Definite path matched nothing."""


class JsonTypeError(JsonPathError):
    """Value was accessed as a type it does not have."""


# ================================================================================
# Tagged value
# ================================================================================

class JsonKind(str, Enum):
    """JSON value tags."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    NULL = "null"


def kind_of(value: Any) -> JsonKind:
    # bool first: it is a subclass of int
    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, (list, tuple)):
        return JsonKind.ARRAY
    if isinstance(value, dict):
        return JsonKind.OBJECT
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


@dataclass(frozen=True)
class JsonValue:
    """
    Result of a path evaluation.

    Typed accessors raise JsonTypeError on a tag mismatch instead of
    casting, e.g. ``as_int()`` on a string id fails rather than parsing it.
    """
    kind: JsonKind
    raw: Any
    path: str = "$"

    @classmethod
    def of(cls, raw: Any, path: str = "$") -> "JsonValue":
        return cls(kind=kind_of(raw), raw=raw, path=path)

    @property
    def is_null(self) -> bool:
        return self.kind is JsonKind.NULL

    def as_str(self) -> str:
        self._expect(JsonKind.STRING)
        return self.raw

    def as_int(self) -> int:
        self._expect(JsonKind.NUMBER)
        if isinstance(self.raw, float):
            if not self.raw.is_integer():
                raise JsonTypeError(
                    self.path, f"Value at '{self.path}' is not an integer: {self.raw}"
                )
            return int(self.raw)
        return self.raw

    def as_float(self) -> float:
        self._expect(JsonKind.NUMBER)
        return float(self.raw)

    def as_bool(self) -> bool:
        self._expect(JsonKind.BOOLEAN)
        return self.raw

    def as_list(self) -> List[Any]:
        self._expect(JsonKind.ARRAY)
        return list(self.raw)

    def as_dict(self) -> Dict[str, Any]:
        self._expect(JsonKind.OBJECT)
        return self.raw

    def _expect(self, kind: JsonKind) -> None:
        if self.kind is not kind:
            raise JsonTypeError(
                self.path,
                f"Value at '{self.path}' is {self.kind.value}, expected {kind.value}: {self.raw!r}",
            )


# ================================================================================
# Evaluation
# ================================================================================

def parse_document(text: str) -> Any:
    """Parse a response body, raising MalformedJsonError on bad JSON."""
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedJsonError("$", f"Response body is not valid JSON: {e}") from e


@lru_cache(maxsize=256)
def compile_path(path: str) -> jp.JSONPath:
    """Parse and cache a JSONPath expression."""
    try:
        return jsonpath_parse(path)
    except Exception as e:
        raise InvalidPathError(path, f"Invalid JSON path '{path}': {e}") from e


def _is_definite(expr: jp.JSONPath) -> bool:
    if isinstance(expr, (jp.Root, jp.This)):
        return True
    if isinstance(expr, jp.Child):
        return _is_definite(expr.left) and _is_definite(expr.right)
    if isinstance(expr, jp.Fields):
        return len(expr.fields) == 1 and expr.fields[0] != "*"
    if isinstance(expr, jp.Index):
        indices = getattr(expr, "indices", None)
        return indices is None or len(indices) == 1
    return False


def is_definite(path: str) -> bool:
    """True if ``path`` addresses at most one value."""
    return _is_definite(compile_path(path))


def find(document: Any, path: str) -> Any:
    """
    Raw value(s) at ``path`` in an already-parsed document.

    Raises:
        InvalidPathError: If the expression does not parse
        PathNotFoundError: If a definite path matches nothing
    """
    expr = compile_path(path)
    matches = [match.value for match in expr.find(document)]

    if not _is_definite(expr):
        return matches

    if not matches:
        raise PathNotFoundError(path, f"No results for path: {path}")
    return matches[0]


def evaluate(document: Any, path: str) -> JsonValue:
    """Evaluate ``path`` and tag the result."""
    return JsonValue.of(find(document, path), path)


__all__ = [
    "InvalidPathError",
    "JsonKind",
    "JsonPathError",
    "JsonTypeError",
    "JsonValue",
    "MalformedJsonError",
    "PathNotFoundError",
    "compile_path",
    "evaluate",
    "find",
    "is_definite",
    "kind_of",
    "parse_document",
]
