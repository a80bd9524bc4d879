"""Binding of plain YAML data onto model classes.

Two strategies are provided and they are intentionally not identical:

* :func:`bind_model` creates the model with no arguments and assigns every
  known key through ``setattr``.  Scalars keep the type YAML gave them.
* :func:`convert_value` validates the data with pydantic, which builds
  dataclass models through their constructor and coerces scalars in lax mode
  (``"30"`` becomes ``30`` for an ``int`` field).

In both, keys that do not name a model attribute are ignored and nested
mappings are bound into the model type found in the type hints.
"""

from __future__ import annotations

import dataclasses
import inspect
import logging
import types
import typing
from collections.abc import Mapping, Sequence
from typing import Any, Callable, TypeVar, Union

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError

M = TypeVar("M")

_LIST_ORIGINS = (list, Sequence, typing.List)
_SCALARS = (str, int, float, bool)


def _class_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError):
        logging.debug("Cannot resolve type hints of %s; binding without them", cls.__qualname__)
        hints: dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            hints.update(getattr(klass, "__annotations__", {}))
        return hints


def writable_attributes(cls: type) -> dict[str, Any]:
    """Return the assignable public attributes of *cls* with their type hints.

    Annotated attributes, dataclass fields, public class attributes and
    properties with a setter count.  Methods, ``ClassVar`` names, read-only
    properties and names starting with ``_`` do not.
    """
    attrs: dict[str, Any] = {}
    for name, hint in _class_hints(cls).items():
        if name.startswith("_") or typing.get_origin(hint) is typing.ClassVar:
            continue
        attrs[name] = hint
    if dataclasses.is_dataclass(cls):
        for field in dataclasses.fields(cls):
            attrs.setdefault(field.name, field.type)
    for klass in cls.__mro__:
        if klass is object:
            continue
        for name, member in vars(klass).items():
            if name.startswith("_") or name in attrs:
                continue
            if isinstance(member, property):
                if member.fset is not None:
                    attrs[name] = None
                continue
            if isinstance(member, (staticmethod, classmethod)) or callable(member):
                continue
            attrs[name] = None
    for klass in cls.__mro__:
        for name, member in vars(klass).items():
            if isinstance(member, property) and member.fset is None:
                attrs.pop(name, None)
    return attrs


def _unwrap_optional(hint: Any) -> Any:
    origin = typing.get_origin(hint)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def is_model_class(hint: Any) -> bool:
    """Return whether *hint* is a class that mappings can be bound into."""
    if not inspect.isclass(hint) or hint in _SCALARS:
        return False
    if issubclass(hint, (Mapping, Sequence, set, bytes)):
        return False
    return dataclasses.is_dataclass(hint) or bool(writable_attributes(hint))


def _nested(hint: Any, raw: Any, binder: Callable[[type, Any], Any]) -> Any:
    hint = _unwrap_optional(hint)
    if isinstance(raw, Mapping) and is_model_class(hint):
        return binder(hint, raw)
    if isinstance(raw, list) and typing.get_origin(hint) in _LIST_ORIGINS:
        args = typing.get_args(hint)
        item_hint = args[0] if args else None
        return [_nested(item_hint, item, binder) for item in raw]
    return raw


def bind_model(cls: type[M], data: Mapping[str, Any]) -> M:
    """Create ``cls()`` and assign every known key of *data* onto it."""
    try:
        instance = cls()
    except TypeError as exc:
        raise RuntimeError(f"Model {cls.__qualname__} must be constructible without arguments") from exc

    attrs = writable_attributes(cls)
    for key, raw in data.items():
        name = str(key)
        if name not in attrs:
            logging.debug("Ignore key %s: %s has no setter for it", name, cls.__qualname__)
            continue
        try:
            setattr(instance, name, _nested(attrs[name], raw, bind_model))
        except AttributeError as exc:
            raise RuntimeError(f"Cannot set {cls.__qualname__}.{name}") from exc
    return instance


def _validate(hint: Any, raw: Any, owner: type) -> Any:
    try:
        return TypeAdapter(hint).validate_python(raw)
    except ValidationError as exc:
        raise RuntimeError(f"Cannot convert value to {owner.__qualname__}: {exc}") from exc
    except PydanticSchemaGenerationError as exc:
        raise RuntimeError(f"Cannot build a converter for {owner.__qualname__}: {exc}") from exc


def convert_value(raw: Any, cls: type[M]) -> M:
    """Convert one plain YAML value into an instance of *cls*.

    Dataclasses and pydantic models are validated as a whole by pydantic,
    which ignores unknown keys and coerces scalars in lax mode.  Other
    classes are created with no arguments and each annotated attribute is
    validated against its own hint.
    """
    if dataclasses.is_dataclass(cls) or issubclass(cls, BaseModel):
        return _validate(cls, raw, cls)
    if isinstance(raw, cls):
        return raw
    if not isinstance(raw, Mapping):
        raise RuntimeError(f"Cannot convert {type(raw).__name__} to {cls.__qualname__}")

    try:
        instance = cls()
    except TypeError as exc:
        raise RuntimeError(f"Model {cls.__qualname__} must be constructible without arguments") from exc
    attrs = writable_attributes(cls)
    for key, item in raw.items():
        name = str(key)
        if name not in attrs:
            logging.debug("Ignore key %s: %s has no setter for it", name, cls.__qualname__)
            continue
        hint = attrs[name]
        value = item if hint is None else _validate(hint, item, cls)
        try:
            setattr(instance, name, value)
        except AttributeError as exc:
            raise RuntimeError(f"Cannot set {cls.__qualname__}.{name}") from exc
    return instance
