"""Class decorators that attach declarative markers to model classes."""

from __future__ import annotations

from .constants import NO_OVERRIDE_ATTR, RESOURCE_NAME_ATTR


def from_resource(resource_name: str):
    """Bind a default resource name to a :class:`YamlData` subclass.

    ``YamlData.from_resource()`` still takes precedence at runtime.
    """

    def decorate(cls):
        setattr(cls, RESOURCE_NAME_ATTR, resource_name)
        return cls

    return decorate


def no_override(*names: str):
    """Mark attributes that ``write_field`` must leave untouched on instances."""

    def decorate(cls):
        inherited = getattr(cls, NO_OVERRIDE_ATTR, frozenset())
        setattr(cls, NO_OVERRIDE_ATTR, frozenset(inherited) | frozenset(names))
        return cls

    return decorate
