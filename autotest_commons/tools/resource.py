"""Lookup of bundled resources by name.

A resource name is a ``/`` separated path such as ``com/example/users.yml``.
It is resolved against an ordered list of root directories, the first match
wins.  The roots are, in order:

1. directories listed in ``AUTOTEST_RESOURCE_PATH`` (``os.pathsep`` separated),
2. ``./resources`` under the working directory,
3. the working directory itself,
4. every directory on ``sys.path``, so files shipped inside installed
   packages resolve by their package path.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import BinaryIO, Iterable

from autotest_commons.tools.prop import Prop
from autotest_commons.util.constants import RESOURCE_DIR_NAME, RESOURCE_PATH_ENV

_RESOURCE_PATH = Prop.string(RESOURCE_PATH_ENV, "")


class ResourceNotFound(FileNotFoundError):
    """Raised when a resource name cannot be resolved."""


def get_resource_roots() -> list[Path]:
    """Return the directories searched by :func:`get_resource_path`."""
    roots: list[Path] = []
    extra = _RESOURCE_PATH.get_value() or ""
    roots.extend(Path(entry) for entry in extra.split(os.pathsep) if entry.strip())
    cwd = Path.cwd()
    roots.append(cwd / RESOURCE_DIR_NAME)
    roots.append(cwd)
    roots.extend(Path(entry) for entry in sys.path if entry)

    unique: list[Path] = []
    seen: set[Path] = set()
    for root in roots:
        if root in seen:
            continue
        seen.add(root)
        unique.append(root)
    return unique


def get_resource_path(resource_name: str | os.PathLike[str]) -> Path:
    """Resolve *resource_name* to an existing file.

    Absolute paths are accepted as is.  Relative names are looked up in
    :func:`get_resource_roots`.
    """
    candidate = Path(resource_name)
    if candidate.is_absolute():
        if candidate.is_file():
            return candidate
        raise ResourceNotFound(f"Resource not found: {resource_name}")

    relative = str(resource_name).lstrip("/")
    for root in get_resource_roots():
        resolved = root / relative
        if resolved.is_file():
            logging.debug("Resolved resource %s to %s", resource_name, resolved)
            return resolved
    raise ResourceNotFound(f"Resource not found: {resource_name}")


def open_resource(resource_name: str | os.PathLike[str]) -> BinaryIO:
    """Open *resource_name* for binary reading.  The caller closes the stream."""
    return get_resource_path(resource_name).open("rb")


def read_resource_text(
    resource_name: str | os.PathLike[str],
    encodings: Iterable[str] = ("utf-8",),
) -> str:
    """Return the content of *resource_name* decoded with the first working encoding."""
    with open_resource(resource_name) as stream:
        payload = stream.read()
    tried: list[str] = []
    for encoding in encodings:
        try:
            return payload.decode(encoding)
        except UnicodeDecodeError:
            tried.append(encoding)
            continue
    raise RuntimeError(f"Cannot decode resource {resource_name} with {', '.join(tried)}")
