"""
Bidirectional mapping between enum members and their JSON wire tokens.

Enum types describe their own wire names through :meth:`WireEnum.wire_names`.
Members missing from that table are sent as their Python name unchanged.
Pydantic models use the same mapping for :class:`WireEnum` fields.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Type, TypeVar

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from .errors import DecodeError, EnumMappingError

__all__ = [
    "EnumCodec",
    "EnumMapping",
    "WireEnum",
    "default_codec",
]

E = TypeVar("E", bound=Enum)


class WireEnum(Enum):
    """Enum whose members may carry an explicit JSON wire token."""

    @classmethod
    def wire_names(cls) -> Mapping["WireEnum", str]:
        return {}

    @classmethod
    def _from_wire(cls, value: Any) -> "WireEnum":
        if isinstance(value, cls):
            return value
        try:
            return default_codec.decode(value, cls)
        except DecodeError as exc:
            raise ValueError(str(exc)) from None

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._from_wire,
            serialization=core_schema.plain_serializer_function_ser_schema(
                default_codec.encode, when_used="json"
            ),
        )


@dataclass(frozen=True)
class EnumMapping:
    enum_type: Type[Enum]
    to_wire: Mapping[Enum, str]
    from_wire: Mapping[str, Enum]

    @classmethod
    def build(cls, enum_type: Type[Enum]) -> "EnumMapping":
        declared = getattr(enum_type, "wire_names", None)
        explicit: Mapping[Enum, str] = declared() if callable(declared) else {}

        to_wire: Dict[Enum, str] = {}
        from_wire: Dict[str, Enum] = {}
        for member in enum_type:
            token = explicit.get(member, member.name)
            existing = from_wire.get(token)
            if existing is not None and existing is not member:
                raise EnumMappingError(
                    f"{enum_type.__name__} maps both {existing.name} and "
                    f"{member.name} to wire token '{token}'"
                )
            to_wire[member] = token
            from_wire[token] = member
        return cls(enum_type=enum_type, to_wire=to_wire, from_wire=from_wire)


class EnumCodec:
    """
    Encodes and decodes enum members, caching one :class:`EnumMapping` per type.

    Safe to share between threads: a mapping may be built twice under a race,
    but only the first one published is ever used.
    """

    def __init__(self) -> None:
        self._mappings: Dict[Type[Enum], EnumMapping] = {}
        self._lock = threading.Lock()

    def mapping_for(self, enum_type: Type[Enum]) -> EnumMapping:
        mapping = self._mappings.get(enum_type)
        if mapping is not None:
            return mapping
        built = EnumMapping.build(enum_type)
        with self._lock:
            return self._mappings.setdefault(enum_type, built)

    def encode(self, value: Enum) -> str:
        return self.mapping_for(type(value)).to_wire[value]

    def decode(self, token: str, enum_type: Type[E]) -> E:
        mapping = self.mapping_for(enum_type)
        try:
            return mapping.from_wire[token]  # type: ignore[return-value]
        except (KeyError, TypeError):
            raise DecodeError(
                f"Unable to convert {token!r} to enum {enum_type.__name__}",
                token=token,
                target=enum_type.__name__,
            ) from None


default_codec = EnumCodec()
