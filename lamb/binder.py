"""Decode trigger payloads into handler-defined types."""

from __future__ import annotations

import base64
from functools import lru_cache
from typing import Any, Mapping, Protocol, TypeVar, runtime_checkable

from boto3.dynamodb.types import Binary, TypeDeserializer
from pydantic import TypeAdapter, ValidationError

from lamb.errors import invalid_body

T = TypeVar("T")

_DESERIALIZER = TypeDeserializer()
_UNDECODED = object()


@runtime_checkable
class Validatable(Protocol):
    """Implemented by bound types that need a check beyond decoding.

    Example::

        class Body(BaseModel):
            name: str
            status: str = ""

            def check(self) -> None:
                if not self.status:
                    raise ValueError("status empty")

    ``ctx.bind(Body)`` then calls ``check`` and lets its exception through.
    """

    def check(self) -> None:
        ...


def _validatable(value: Any) -> bool:
    # A data field named "check" does not count, only a method on the type.
    return callable(getattr(type(value), "check", None))


@lru_cache(maxsize=128)
def _adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


def bind(payload: str | bytes | Mapping[str, Any], target: type[T]) -> T:
    """Decode ``payload`` into ``target`` and run its ``check`` if it has one.

    Text is parsed as JSON, mappings are validated as they are. Any decode
    failure raises ``ERR_INVALID_BODY``.
    """

    adapter = _adapter(target)
    value: Any = _UNDECODED
    try:
        if isinstance(payload, (str, bytes, bytearray)):
            value = adapter.validate_json(payload)
        else:
            value = adapter.validate_python(payload)
    except ValidationError:
        pass
    if value is _UNDECODED:
        raise invalid_body()

    if _validatable(value):
        value.check()
    return value


def _stream_value(value: Any) -> Any:
    # Stream events carry binary attributes as base64 text.
    if not isinstance(value, Mapping):
        return value
    if isinstance(value.get("B"), str):
        return {"B": base64.b64decode(value["B"], validate=True)}
    if isinstance(value.get("BS"), list):
        return {
            "BS": [
                base64.b64decode(item, validate=True)
                if isinstance(item, str)
                else item
                for item in value["BS"]
            ]
        }
    if isinstance(value.get("M"), Mapping):
        return {"M": {key: _stream_value(item) for key, item in value["M"].items()}}
    if isinstance(value.get("L"), list):
        return {"L": [_stream_value(item) for item in value["L"]]}
    return value


def _plain(value: Any) -> Any:
    if isinstance(value, Binary):
        return value.value
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    if isinstance(value, set):
        return {_plain(item) for item in value}
    return value


def unmarshal_attributes(attributes: Mapping[str, Any] | None) -> dict[str, Any]:
    """Convert a DynamoDB attribute map into plain Python values."""

    item: dict[str, Any] | None = None
    try:
        item = {
            name: _plain(_DESERIALIZER.deserialize(_stream_value(value)))
            for name, value in (attributes or {}).items()
        }
    except (AttributeError, TypeError, ValueError, KeyError, ArithmeticError):
        pass
    if item is None:
        raise invalid_body()
    return item


def bind_attributes(attributes: Mapping[str, Any] | None, target: type[T]) -> T:
    """Bind a DynamoDB attribute map (``{"pk": {"S": "..."}}``) into ``target``."""

    return bind(unmarshal_attributes(attributes), target)
