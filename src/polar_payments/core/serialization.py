"""
JSON encoding and decoding for request and response models.

Models are pydantic ``BaseModel`` classes whose field names already follow the
API's snake_case convention. Decoding goes through a cached
:class:`pydantic.TypeAdapter` per target type, so any annotation pydantic
understands (``List[Order]``, ``Optional[Customer]``, ``Decimal``) can be
requested.
"""

from __future__ import annotations

import functools
import json
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

import pydantic
from pydantic import BaseModel, GetCoreSchemaHandler, TypeAdapter
from pydantic_core import core_schema

from .enums import default_codec
from .errors import DecodeError

__all__ = [
    "JsonSerializer",
    "JsonValue",
    "SerializerOptions",
    "error_messages",
]


def error_messages(exc: pydantic.ValidationError) -> List[str]:
    """Flatten a pydantic error into ``"path: message"`` strings."""
    messages = []
    for entry in exc.errors():
        path = ".".join(str(part) for part in entry["loc"])
        messages.append(f"{path}: {entry['msg']}" if path else entry["msg"])
    return messages


class JsonValue:
    """
    An opaque JSON value (metadata, webhook data, error details).

    Accessors raise :class:`DecodeError` when the value has a different shape
    than the caller expected.
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: Any = None) -> None:
        self._raw = raw.raw if isinstance(raw, JsonValue) else raw

    @property
    def raw(self) -> Any:
        return self._raw

    @property
    def kind(self) -> str:
        raw = self._raw
        if raw is None:
            return "null"
        if isinstance(raw, bool):
            return "boolean"
        if isinstance(raw, (int, float)):
            return "number"
        if isinstance(raw, str):
            return "string"
        if isinstance(raw, list):
            return "array"
        if isinstance(raw, dict):
            return "object"
        return type(raw).__name__

    @property
    def is_null(self) -> bool:
        return self._raw is None

    def _expect(self, kind: str) -> Any:
        if self.kind != kind:
            raise DecodeError(
                f"Expected JSON {kind}, got {self.kind}", token=self._raw, target=kind
            )
        return self._raw

    def as_str(self) -> str:
        return self._expect("string")

    def as_bool(self) -> bool:
        return self._expect("boolean")

    def as_int(self) -> int:
        value = self._expect("number")
        if isinstance(value, float) and not value.is_integer():
            raise DecodeError(f"Expected an integer, got {value}", token=value, target="int")
        return int(value)

    def as_float(self) -> float:
        return float(self._expect("number"))

    def as_list(self) -> List["JsonValue"]:
        return [JsonValue(item) for item in self._expect("array")]

    def as_dict(self) -> Dict[str, "JsonValue"]:
        return {key: JsonValue(item) for key, item in self._expect("object").items()}

    def get(self, key: str) -> Optional["JsonValue"]:
        if not isinstance(self._raw, dict) or key not in self._raw:
            return None
        return JsonValue(self._raw[key])

    def __eq__(self, other: object) -> bool:
        if isinstance(other, JsonValue):
            return self._raw == other._raw
        return NotImplemented

    def __hash__(self) -> int:
        return hash(json.dumps(self._raw, sort_keys=True, default=str))

    def __repr__(self) -> str:
        return f"JsonValue({self._raw!r})"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda value: value.raw
            ),
        )


@dataclass(frozen=True)
class SerializerOptions:
    omit_none: bool = True


def _format_datetime(value: datetime) -> str:
    text = value.isoformat()
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


def _type_name(target: Any) -> str:
    return getattr(target, "__name__", str(target))


@functools.lru_cache(maxsize=None)
def _adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


class JsonSerializer:
    """Immutable serializer owned by a client instance."""

    def __init__(self, options: Optional[SerializerOptions] = None) -> None:
        self.options = options or SerializerOptions()

    # -- encoding -----------------------------------------------------------

    def to_wire(self, value: Any) -> Any:
        if value is None or isinstance(value, (bool, int, float, str)):
            return value
        if isinstance(value, BaseModel):
            return value.model_dump(
                mode="json", by_alias=True, exclude_none=self.options.omit_none
            )
        if isinstance(value, JsonValue):
            return value.raw
        if isinstance(value, Enum):
            return default_codec.encode(value)
        if isinstance(value, datetime):
            return _format_datetime(value)
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, Decimal):
            return str(value)
        if isinstance(value, Mapping):
            return {
                str(key): self.to_wire(item)
                for key, item in value.items()
                if not (item is None and self.options.omit_none)
            }
        if isinstance(value, (list, tuple, set, frozenset)):
            return [self.to_wire(item) for item in value]
        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")

    def dumps(self, value: Any) -> str:
        return json.dumps(self.to_wire(value), separators=(",", ":"))

    # -- decoding -----------------------------------------------------------

    def loads(self, text: Union[str, bytes], target: Any = None) -> Any:
        try:
            payload = json.loads(text)
        except (TypeError, ValueError, RecursionError) as exc:
            raise DecodeError(f"Response body is not valid JSON: {exc}") from None
        if target is None:
            return payload
        return self.from_wire(payload, target)

    def from_wire(self, payload: Any, target: Any) -> Any:
        if target is Any or target is object:
            return payload
        try:
            return _adapter(target).validate_python(payload)
        except pydantic.ValidationError as exc:
            raise DecodeError(
                f"Unable to decode {_type_name(target)}: " + "; ".join(error_messages(exc)),
                token=payload,
                target=_type_name(target),
            ) from exc
        except RecursionError:
            raise DecodeError(
                f"Payload for {_type_name(target)} is nested too deeply",
                target=_type_name(target),
            ) from None
