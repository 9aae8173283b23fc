"""
Request validation on top of pydantic.

Request models subclass :class:`RequestModel` and declare their constraints
with ``Field``::

    name: str = Field(min_length=3, max_length=256)

Building an invalid request raises this package's :class:`ValidationError`
instead of pydantic's, so callers only need to handle one error hierarchy.
"""

from __future__ import annotations

from typing import Any

import pydantic
from pydantic import BaseModel, ConfigDict

from .errors import ValidationError
from .serialization import error_messages

__all__ = ["RequestModel", "validate"]


class RequestModel(BaseModel):
    """Base for request bodies: frozen, strict about unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except pydantic.ValidationError as exc:
            raise ValidationError(error_messages(exc)) from exc


def validate(obj: Any) -> None:
    """
    Re-check a model instance against its declared constraints.

    Catches bodies assembled with ``model_construct``, which skips validation.
    Anything that is not a pydantic model is left alone.
    """
    if not isinstance(obj, BaseModel):
        return
    try:
        type(obj).model_validate(obj.model_dump())
    except pydantic.ValidationError as exc:
        raise ValidationError(error_messages(exc)) from exc
