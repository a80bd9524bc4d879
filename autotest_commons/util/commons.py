"""Common helpers for files, properties and attribute access.

The helpers raise ``RuntimeError`` for I/O problems after logging the failed
action, so callers in test setup only need to handle one exception type.
"""

from __future__ import annotations

import inspect
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, TypeVar

import javaproperties
from chardet.universaldetector import UniversalDetector

from autotest_commons.tools.resource import get_resource_path
from autotest_commons.util.constants import DEFAULT_PROPS_CHARSET, NO_OVERRIDE_ATTR, TIMESTAMP_FORMAT

PathT = TypeVar("PathT", str, Path)


def timestamp() -> str:
    """Return the current time as ``yyyyMMdd.HHmmss.SSS``."""
    now = datetime.now()
    return f"{now.strftime(TIMESTAMP_FORMAT)}.{now.microsecond // 1000:03d}"


def create_dir(path: PathT) -> PathT:
    """Create *path* and every missing parent.  Existing directories are left alone."""
    try:
        Path(path).mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        msg = f"Create directory {path}"
        logging.error(msg)
        raise RuntimeError(msg) from exc
    return path


def get_relative(path: PathT) -> PathT:
    """Return *path* relative to the current working directory.

    Relative inputs, and paths that have no relative form (another drive on
    Windows), are returned unchanged.
    """
    target = Path(path)
    if not target.is_absolute():
        return path
    try:
        relative = os.path.relpath(target, os.getcwd())
    except ValueError:
        return path
    return Path(relative) if isinstance(path, Path) else relative


def write_props(props: Mapping[Any, Any], file: PathT) -> PathT:
    """Store *props* as a ``.properties`` file and return *file*."""
    target = Path(file)
    create_dir(target.parent)
    msg = f"Write Properties to {get_relative(target)}"
    payload = {str(key): str(value) for key, value in props.items()}

    try:
        with target.open("w", encoding="latin-1", newline="\n") as handle:
            javaproperties.dump(payload, handle)
    except OSError as exc:
        logging.error(msg)
        raise RuntimeError(msg) from exc
    logging.debug(msg)
    return file


def read_props(file: str | os.PathLike[str], charset: str = DEFAULT_PROPS_CHARSET) -> dict[str, str]:
    """Load a ``.properties`` file decoded with *charset*."""
    target = Path(file)
    msg = f"Read Properties from {get_relative(target)}"

    try:
        with target.open("r", encoding=charset) as handle:
            props = dict(javaproperties.load(handle))
    except (OSError, UnicodeDecodeError, LookupError) as exc:
        logging.error(msg)
        raise RuntimeError(msg) from exc
    logging.debug(msg)
    return props


def read_resource_props(resource_name: str) -> dict[str, str]:
    """Load a ``.properties`` resource, see :mod:`autotest_commons.tools.resource`."""
    return read_props(get_resource_path(resource_name), DEFAULT_PROPS_CHARSET)


def detect_charset(file: str | os.PathLike[str]) -> str | None:
    """Guess the charset of *file*; ``None`` when it cannot be determined."""
    detector = UniversalDetector()
    try:
        with Path(file).open("rb") as handle:
            for chunk in handle:
                detector.feed(chunk)
                if detector.done:
                    break
    except OSError as exc:
        msg = f"Detect charset of {file}"
        logging.error(msg)
        raise RuntimeError(msg) from exc
    detector.close()
    return detector.result.get("encoding")


# ----------------------------------------------------------------------------
# Attribute access
# ----------------------------------------------------------------------------

def _field_access_msg(owner: type, name: str, action: str) -> str:
    return f"{action} field {owner.__module__}.{owner.__qualname__}.{name}"


def _candidate_names(owner: type, name: str) -> list[str]:
    """*name* plus its name-mangled forms for every class in the MRO."""
    names = [name]
    if name.startswith("__") and not name.endswith("__"):
        for klass in owner.__mro__:
            names.append(f"_{klass.__name__.lstrip('_')}{name}")
    return names


def _locate(target: Any, owner: type, name: str) -> str | None:
    sentinel = object()
    for candidate in _candidate_names(owner, name):
        if inspect.getattr_static(target, candidate, sentinel) is not sentinel:
            return candidate
    return None


def _declaring_class(owner: type, attr: str) -> type:
    for klass in owner.__mro__:
        if attr in vars(klass):
            return klass
    return owner


def _same_value(current: Any, value: Any) -> bool:
    if type(current) is not type(value):
        return False
    try:
        if hash(current) != hash(value):
            return False
    except TypeError:
        pass
    return current == value


def read_field(target: Any, name: str) -> Any:
    """Read attribute *name* of an instance or class, private names included."""
    owner = target if isinstance(target, type) else type(target)
    msg = _field_access_msg(owner, name, "Read")
    attr = _locate(target, owner, name)
    if attr is None:
        logging.error(msg)
        raise RuntimeError(msg)
    try:
        return getattr(target, attr)
    except AttributeError as exc:
        logging.error(msg)
        raise RuntimeError(msg) from exc


def write_field(target: Any, name: str, value: Any) -> None:
    """Write attribute *name* of an instance or class, bypassing immutability.

    For a class target the attribute is replaced on the class that declares
    it.  For an instance target the write is skipped when the class lists
    *name* in :func:`~autotest_commons.util.decorators.no_override` or when
    the current value has the same type, hash and value as *value*.
    """
    is_class = isinstance(target, type)
    owner = target if is_class else type(target)
    msg = _field_access_msg(owner, name, "Write")
    attr = _locate(target, owner, name)
    if attr is None:
        logging.error(msg)
        raise RuntimeError(msg)

    if is_class:
        type.__setattr__(_declaring_class(owner, attr), attr, value)
        return

    marked = getattr(owner, NO_OVERRIDE_ATTR, ())
    if name in marked or attr in marked:
        logging.debug("%s skipped: marked no_override", msg)
        return

    member = inspect.getattr_static(owner, attr, None)
    instance_dict = getattr(target, "__dict__", {})
    try:
        if isinstance(member, property):
            if member.fset is None:
                raise AttributeError(f"property {attr!r} has no setter")
            if not _same_value(getattr(target, attr), value):
                member.fset(target, value)
        elif attr in instance_dict or inspect.ismemberdescriptor(member):
            if not _same_value(getattr(target, attr), value):
                object.__setattr__(target, attr, value)
        else:
            type.__setattr__(_declaring_class(owner, attr), attr, value)
    except AttributeError as exc:
        logging.error(msg)
        raise RuntimeError(msg) from exc
