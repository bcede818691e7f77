"""API method registration table.

Inbound calls name a method by string. Instead of looking the method up by
reflection on every call, each module's api object is turned into an
ApiTable once, at registration time. Every entry knows how many positional
arguments it takes and how to decode each one from plain data.

Example usage:
    class TodoApi:
        @api_method
        def add(self, item: TodoItem) -> None:
            ...

        @api_method(name="clearAll")
        def clear_all(self) -> None:
            ...

    table = ApiTable.from_object(TodoApi())
    table.get("clearAll")([])
"""

from __future__ import annotations

import inspect
import logging
import typing
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar, overload

from .codec import Decoder, decoder_for
from .exceptions import AnnotationError

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

API_METHOD_ATTR = "_api_method_name"

_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@overload
def api_method(fn: F) -> F: ...


@overload
def api_method(*, name: str | None = None) -> Callable[[F], F]: ...


def api_method(fn: Any = None, *, name: str | None = None) -> Any:
    """Mark a method as callable from the bridge.

    Once any method of an api object is marked, only marked methods are
    exposed. Without markers every public method is.

    Args:
        fn: The method (when used without arguments)
        name: Wire name, defaults to the function name

    Returns:
        The decorated function with the wire name attached.
    """

    def decorate(func: F) -> F:
        func._api_method_name = name or func.__name__  # type: ignore[attr-defined]
        return func

    if fn is not None:
        return decorate(fn)
    return decorate


def positional_parameters(func: Callable[..., Any]) -> list[inspect.Parameter]:
    """Return the declared positional parameters of a callable.

    Bound methods do not include self. *args, **kwargs and keyword-only
    parameters are not counted.
    """
    signature = inspect.signature(func)
    return [p for p in signature.parameters.values() if p.kind in _POSITIONAL_KINDS]


def parameter_types(name: str, func: Callable[..., Any], params: Sequence[inspect.Parameter]) -> list[Any]:
    """Resolve the annotated type of each positional parameter.

    Unannotated parameters resolve to None. String annotations that the
    callable's module cannot resolve raise AnnotationError, so a decoder is
    never silently skipped.

    Raises:
        AnnotationError: If a parameter annotation cannot be resolved
    """
    target = inspect.unwrap(getattr(func, "__func__", func))
    try:
        hints = typing.get_type_hints(target)
    except Exception as e:
        logger.debug("Resolving parameters of %s one by one: %s", name, e)
        hints = {}

    module = inspect.getmodule(target)
    namespace = getattr(target, "__globals__", None) or (vars(module) if module else {})
    types: list[Any] = []
    for param in params:
        annotation = hints.get(param.name, param.annotation)
        if annotation is inspect.Parameter.empty:
            types.append(None)
        elif isinstance(annotation, str):
            try:
                types.append(eval(annotation, namespace))
            except Exception as e:
                raise AnnotationError(name, param.name, annotation) from e
        else:
            types.append(annotation)
    return types


@dataclass
class ApiHandler:
    """One wire-callable method.

    Attributes:
        name: Wire name of the method
        func: The callable to invoke (usually a bound method)
        decoders: One decoder per positional parameter, in order
    """

    name: str
    func: Callable[..., Any]
    decoders: tuple[Decoder, ...]

    @classmethod
    def from_callable(
        cls,
        name: str,
        func: Callable[..., Any],
        param_types: Optional[Sequence[Any]] = None,
    ) -> ApiHandler:
        """Build a handler, deriving decoders from the signature.

        Args:
            name: Wire name of the method
            func: The callable to invoke
            param_types: Explicit parameter types. Defaults to the
                callable's type hints.

        Raises:
            ValueError: If param_types does not match the positional
                parameter count
            AnnotationError: If a parameter annotation cannot be resolved
        """
        params = positional_parameters(func)
        if param_types is None:
            param_types = parameter_types(name, func, params)
        elif len(param_types) != len(params):
            raise ValueError(
                f"{name} takes {len(params)} positional parameters, "
                f"got {len(param_types)} types"
            )
        return cls(name=name, func=func, decoders=tuple(decoder_for(t) for t in param_types))

    @property
    def arity(self) -> int:
        return len(self.decoders)

    def accepts(self, data: Sequence[Any]) -> bool:
        return len(data) == self.arity

    def decode(self, data: Sequence[Any]) -> list[Any]:
        """Decode wire arguments into parameter values, positionally."""
        return [decode(value) for decode, value in zip(self.decoders, data)]

    def __call__(self, data: Sequence[Any]) -> Any:
        return self.func(*self.decode(data))


class ApiTable:
    """Mapping from wire method name to ApiHandler."""

    def __init__(self) -> None:
        self._handlers: dict[str, ApiHandler] = {}

    @classmethod
    def from_object(cls, api: Any) -> ApiTable:
        """Build the table for an api object.

        A mapping of name to callable is registered entry by entry. For any
        other object, methods marked with @api_method are registered under
        their wire name; if none is marked, every public callable attribute
        is registered under its own name.

        Args:
            api: The module's api object

        Returns:
            The populated table
        """
        table = cls()
        if isinstance(api, Mapping):
            for name, func in api.items():
                table.register(name, func)
            return table

        members = _public_callables(api)
        marked = {
            getattr(func, API_METHOD_ATTR): func
            for func in members.values()
            if hasattr(func, API_METHOD_ATTR)
        }
        for name, func in (marked or members).items():
            try:
                table.register(name, func)
            except (TypeError, ValueError) as e:
                logger.debug("Skipping %s on %s: %s", name, type(api).__name__, e)
        return table

    def register(
        self,
        name: str,
        func: Callable[..., Any],
        param_types: Optional[Sequence[Any]] = None,
    ) -> ApiHandler:
        """Register a callable under a wire name, replacing any previous one."""
        handler = ApiHandler.from_callable(name, func, param_types)
        self._handlers[name] = handler
        return handler

    def get(self, name: str) -> ApiHandler | None:
        return self._handlers.get(name)

    def names(self) -> list[str]:
        return list(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)


def _public_callables(api: Any) -> dict[str, Callable[..., Any]]:
    members: dict[str, Callable[..., Any]] = {}
    for name in dir(api):
        if name.startswith("_"):
            continue
        # Avoid evaluating properties while collecting methods
        if isinstance(inspect.getattr_static(api, name, None), property):
            continue
        value = getattr(api, name, None)
        if callable(value) and not isinstance(value, type):
            members[name] = value
    return members
