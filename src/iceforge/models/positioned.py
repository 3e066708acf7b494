"""Values annotated with the byte range they occupied in the manifest."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, model_validator

from iceforge.models.errors import SourceSpan

T = TypeVar("T")


class Positioned(BaseModel, Generic[T]):
    """A parsed value plus its source span.

    Equality and hashing only look at ``value``; the span exists purely for
    diagnostics. Bare values are accepted and get an empty span, so models
    can be built without a source document.
    """

    value: T
    span: SourceSpan = SourceSpan()

    model_config = {"frozen": True, "coerce_numbers_to_str": True}

    @model_validator(mode="before")
    @classmethod
    def _wrap_bare_value(cls, data: Any) -> Any:
        if isinstance(data, Positioned):
            return {"value": data.value, "span": data.span}
        if isinstance(data, dict) and "value" in data and set(data) <= {"value", "span"}:
            return data
        return {"value": data}

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Positioned):
            return bool(self.value == other.value)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)

    def __str__(self) -> str:
        return str(self.value)
