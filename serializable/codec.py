"""
Plain-data adapter glue.

Payloads cross the bridge as JSON-compatible values. Domain types opt in by
implementing the JsonSerializable protocol; pydantic models are supported
without any extra code. Everything else passes through unchanged.
"""

from __future__ import annotations

import types
from collections.abc import Mapping
from typing import Any, Callable, Protocol, Union, get_args, get_origin, runtime_checkable

from pydantic import BaseModel

Decoder = Callable[[Any], Any]

_PRIMITIVES = (str, int, float, bool)


@runtime_checkable
class JsonSerializable(Protocol):
    """Protocol for payload types that convert to and from plain data."""

    def to_plain_data(self) -> Any:
        """Return a JSON-compatible representation."""
        ...

    @classmethod
    def from_plain_data(cls, data: Any) -> Any:
        """Build an instance from its JSON-compatible representation."""
        ...


def to_plain_data(value: Any) -> Any:
    """
    Convert a payload to its JSON-compatible form.

    Handles:
    - None and primitives: returned as-is
    - Pydantic models: model_dump(mode="json")
    - Objects with to_plain_data(): its result, converted recursively
    - Mappings, lists and tuples: converted element-wise

    Any other value is returned unchanged.

    Args:
        value: The payload to convert

    Returns:
        JSON-compatible value
    """
    if value is None or isinstance(value, _PRIMITIVES):
        return value
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    converter = getattr(value, "to_plain_data", None)
    if callable(converter):
        return to_plain_data(converter())
    if isinstance(value, Mapping):
        return {key: to_plain_data(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain_data(item) for item in value]
    return value


def _identity(value: Any) -> Any:
    return value


def _unwrap_optional(annotation: Any) -> Any:
    if get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _skip_none(build: Decoder) -> Decoder:
    def decode(value: Any) -> Any:
        if value is None:
            return None
        return build(value)

    return decode


def decoder_for(annotation: Any) -> Decoder:
    """
    Pick the decoder for a parameter annotation.

    Pydantic models decode with model_validate, JsonSerializable types with
    from_plain_data. Optional[T] decodes as T. None stays None. Anything
    else, including missing annotations, passes the value through.

    Args:
        annotation: Resolved type annotation of the parameter

    Returns:
        Callable turning a plain value into the parameter value
    """
    target = _unwrap_optional(annotation)
    if get_origin(target) is not None or not isinstance(target, type):
        return _identity
    if issubclass(target, BaseModel):
        return _skip_none(target.model_validate)
    from_plain_data = getattr(target, "from_plain_data", None)
    if callable(from_plain_data):
        return _skip_none(from_plain_data)
    return _identity
