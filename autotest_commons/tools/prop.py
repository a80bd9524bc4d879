"""Typed access to process-wide properties.

A :class:`Prop` names one key in ``os.environ`` and converts its text into a
declared Python type each time it is read.  Typical use in test setup::

    HEADLESS = Prop.boolean("browser.headless", False)
    if HEADLESS.get_value():
        ...
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable, Generic, TypeVar
from urllib.parse import ParseResult, urlparse

from autotest_commons.util.constants import TRUTHY_VALUES

T = TypeVar("T")

URL = ParseResult

_UNSET: Any = object()


def _coerce_bool(text: str) -> bool:
    return text.strip().lower() in TRUTHY_VALUES


def _coerce_url(text: str) -> ParseResult:
    url = urlparse(text.strip())
    if not url.scheme or not (url.netloc or url.path):
        raise ValueError(f"no protocol or location: {text!r}")
    return url


_COERCERS: dict[type, Callable[[str], Any]] = {
    str: lambda text: text,
    bool: _coerce_bool,
    int: lambda text: int(text.strip()),
    float: lambda text: float(text.strip()),
    ParseResult: _coerce_url,
    Path: Path,
}


def coerce(text: str, target: type[T]) -> T:
    """Convert *text* into an instance of *target*.

    Raises ``RuntimeError`` for unsupported types and for text that does not
    parse as *target*.
    """
    converter = _COERCERS.get(target)
    if converter is None:
        raise RuntimeError(f"Type {getattr(target, '__name__', target)} cannot be parsed")
    try:
        return converter(text)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"Cannot parse {text!r} as {target.__name__}: {exc}") from exc


def to_text(value: Any) -> str:
    """Return the canonical text form of *value* as stored in the property store."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, ParseResult):
        return value.geturl()
    return str(value)


class Prop(Generic[T]):
    """A named, typed entry of the process-wide property store.

    Parameters:
        name (str): Key in ``os.environ``.
        type (type): Target type of the stored text.  Supported: ``str``,
            ``bool``, ``int``, ``float``, :data:`URL` and ``pathlib.Path``.
        default: Value returned while the key is absent.  When omitted the
            default is the value resolvable at construction time.
    """

    def __init__(self, name: str, type: type[T] = str, default: T = _UNSET):
        self._name = name
        self._type = type
        self._default: T | None = None
        self._value: T | None = self.get_value()
        self._default = self._value if default is _UNSET else default

    @classmethod
    def string(cls, name: str, default: str = _UNSET) -> "Prop[str]":
        return cls(name, str, default)

    @classmethod
    def boolean(cls, name: str, default: bool = _UNSET) -> "Prop[bool]":
        return cls(name, bool, default)

    @classmethod
    def integer(cls, name: str, default: int = _UNSET) -> "Prop[int]":
        return cls(name, int, default)

    @classmethod
    def number(cls, name: str, default: float = _UNSET) -> "Prop[float]":
        return cls(name, float, default)

    @property
    def name(self) -> str:
        return self._name

    @property
    def type(self) -> type[T]:
        return self._type

    @property
    def default(self) -> T | None:
        return self._default

    @property
    def value(self) -> T | None:
        """Value cached at construction or by the last :meth:`set_value`."""
        return self._value

    def get_value(self) -> T | None:
        """Resolve the current value from the store, falling back to the default."""
        raw = os.environ.get(self._name)
        if raw is None:
            return self._default
        return coerce(raw, self._type)

    def set_value(self, value: T | None) -> None:
        """Cache *value* and publish its text form; ``None`` removes the key."""
        self._value = value
        if value is None:
            self.clear_value()
            return
        os.environ[self._name] = to_text(value)

    def clear_value(self) -> None:
        os.environ.pop(self._name, None)

    def __repr__(self) -> str:
        return f"Prop({self._name!r}, {self._type.__name__}, default={self._default!r})"
