"""Bind decoded request bodies onto dataclass shapes.

``bind(shape, data)`` populates a dataclass instance from a decoded JSON
object, a ``FormData``, or an XML dict. Field names are looked up as-is
unless the field declares ``metadata={"alias": "..."}``.

Supported field types: ``str``, ``int``, ``float``, ``bool``, their
``X | None`` forms, and ``list[...]`` of those. Missing keys fall back to
the field default; a missing required field or a failed conversion
raises ``DecodeError``.

Text values (form fields, XML) are parsed into the field type. Values
that arrive already typed (JSON) must match it: an integral float may
fill an ``int`` field and an int a ``float`` field, nothing else converts.
"""

from __future__ import annotations

import dataclasses
import types
from collections.abc import Mapping
from typing import Any, Union, get_args, get_origin, get_type_hints

from wren.errors import DecodeError

_TRUE = frozenset({"true", "1", "yes", "on"})
_FALSE = frozenset({"false", "0", "no", "off", ""})
_SCALARS = (str, int, float, bool)


def bind[T](shape: type[T], data: Any) -> T:
    """Create a *shape* instance from decoded body *data*.

    A ``dict`` (or other mapping type) shape returns a plain dict copy.
    """
    if isinstance(shape, type) and issubclass(shape, Mapping):
        if not isinstance(data, Mapping):
            raise DecodeError(f"Expected an object body, got {type(data).__name__}")
        return shape(data)  # type: ignore[call-arg]

    if not (isinstance(shape, type) and dataclasses.is_dataclass(shape)):
        msg = f"Cannot bind a request body to {shape!r}; use a dataclass or dict."
        raise TypeError(msg)

    if not isinstance(data, Mapping):
        raise DecodeError(f"Expected an object body, got {type(data).__name__}")

    hints = get_type_hints(shape)
    kwargs: dict[str, Any] = {}
    missing: list[str] = []

    for f in dataclasses.fields(shape):
        if not f.init:
            continue
        key = f.metadata.get("alias", f.name)
        if key not in data:
            if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
                missing.append(key)
            continue
        target = hints.get(f.name, Any)
        kwargs[f.name] = _convert(key, _values(data, key, target), target)

    if missing:
        raise DecodeError(f"Missing required field(s): {', '.join(missing)}")
    return shape(**kwargs)


def _values(data: Mapping[str, Any], key: str, target: Any) -> Any:
    """The value for *key*; multi-valued mappings give a list only to list fields."""
    get_list = getattr(data, "get_list", None)
    if get_list is None:
        return data[key]
    values = get_list(key)
    if get_origin(_unwrap_optional(target)) is list:
        return values
    # Scalar field fed a repeated key: first value wins
    return values[0]


def _convert(name: str, value: Any, target: Any) -> Any:
    target = _unwrap_optional(target)
    if value is None:
        return None

    if get_origin(target) is list:
        (item_type,) = get_args(target) or (Any,)
        if isinstance(value, str):
            # A lone XML element for a repeated tag
            value = [value]
        if not isinstance(value, list):
            raise _invalid(name, list)
        return [_convert(name, item, item_type) for item in value]

    if target not in _SCALARS:
        return value

    # Form and XML values are text and get parsed
    if isinstance(value, str):
        try:
            return _parse_text(value, target)
        except ValueError as exc:
            raise _invalid(name, target) from exc

    # JSON values are already typed; only lossless widening is allowed
    if isinstance(value, bool):
        if target is bool:
            return value
    elif isinstance(value, int):
        if target is int:
            return value
        if target is float:
            return float(value)
    elif isinstance(value, float):
        if target is float:
            return value
        if target is int and value.is_integer():
            return int(value)
    raise _invalid(name, target)


def _parse_text(text: str, target: type) -> Any:
    if target is str:
        return text
    if target is bool:
        return _to_bool(text)
    return target(text)


def _invalid(name: str, target: type) -> DecodeError:
    return DecodeError(f"Invalid value for {name}: expected {target.__name__}")


def _to_bool(text: str) -> bool:
    value = text.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(text)


def _unwrap_optional(hint: Any) -> Any:
    """Extract the base type from ``X | None``."""
    if isinstance(hint, types.UnionType) or get_origin(hint) is Union:
        args = [a for a in get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint
