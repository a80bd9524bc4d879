"""YAML resources as maps, models and lists of models.

A model is usually declared by subclassing :class:`YamlData` itself, so the
loader and the model are one class::

    @from_resource("com/example/user.yml")
    @dataclass
    class User(YamlData["User"]):
        name: str = ""
        age: int = 0

    user = User().to_model()
    users = User().from_resource("com/example/users.yml").to_models()

A separate model type works as well, either as the generic argument of a
subclass (``class Users(YamlData[User])``) or passed explicitly
(``YamlData(User)``).
"""

from __future__ import annotations

import logging
import sys
import typing
from typing import Any, ForwardRef, Generic, TypeVar

import yaml

from autotest_commons.tools.model_binder import bind_model, convert_value
from autotest_commons.tools.resource import ResourceNotFound, read_resource_text
from autotest_commons.util.constants import RESOURCE_NAME_ATTR, YAML_ENCODINGS

Model = TypeVar("Model")


def _read_yaml(resource_name: str) -> str:
    return read_resource_text(resource_name, YAML_ENCODINGS)


def _load_first_document(resource_name: str) -> Any:
    """Return the first document of *resource_name*, raising when there is none."""
    content = _read_yaml(resource_name)
    try:
        for document in yaml.safe_load_all(content):
            return document
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Failed to parse YAML resource {resource_name}: {exc}") from exc
    raise RuntimeError("Yaml content is empty")


def _load_single_document(resource_name: str) -> Any:
    content = _read_yaml(resource_name)
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Failed to parse YAML resource {resource_name}: {exc}") from exc
    if data is None:
        raise RuntimeError("Yaml content is empty")
    return data


class YamlData(Generic[Model]):
    """Load YAML resources into ``dict`` objects or instances of ``Model``.

    Parameters:
        model (type | None): Model class.  When omitted it is resolved from
            the generic argument of the subclass, or is the subclass itself.
        resource_name (str | None): Resource to read.  When omitted the
            name given to :func:`from_resource` (decorator) is used.
    """

    _resource_name: str | None = None
    _model_class: type | None = None

    def __init__(self, model: type[Model] | None = None, resource_name: str | None = None):
        if model is not None:
            self._model_class = model
        if resource_name is not None:
            self._resource_name = resource_name

    @staticmethod
    def to_map(resource_name: str) -> dict[str, Any]:
        """Read the resource as one mapping.

        Raises ``RuntimeError`` when the document is a list; use
        :meth:`to_maps` for those.
        """
        result = _load_first_document(resource_name)
        if isinstance(result, dict):
            return result
        if isinstance(result, list):
            raise RuntimeError("It's list, use to_maps() instead")
        raise RuntimeError(f"Yaml content of {resource_name} is not a mapping: {type(result).__name__}")

    @staticmethod
    def to_maps(resource_name: str) -> list[dict[str, Any]]:
        """Read the resource as a list of mappings; a single mapping becomes a one-element list."""
        result = _load_first_document(resource_name)
        if isinstance(result, list):
            return result
        if isinstance(result, dict):
            return [result]
        raise RuntimeError(f"Yaml content of {resource_name} is not a mapping: {type(result).__name__}")

    def from_resource(self, resource_name: str):
        """Set the resource to read and return ``self`` for chaining."""
        self._resource_name = resource_name
        return self

    def to_model(self) -> Model:
        """Read the resource and bind it into one ``Model``."""
        resource_name = self._get_resource_name()
        data = _load_single_document(resource_name)
        if isinstance(data, list):
            raise RuntimeError("It's list, use to_models() instead")
        if not isinstance(data, dict):
            raise RuntimeError(f"Yaml content of {resource_name} is not a mapping: {type(data).__name__}")
        return bind_model(self.model_class, data)

    def to_models(self) -> list[Model]:
        """Read the resource as a list and convert every element into a ``Model``."""
        resource_name = self._get_resource_name()
        objects = _load_single_document(resource_name)
        if not isinstance(objects, list):
            raise RuntimeError("It's single object, use to_model() instead")
        model_class = self.model_class
        return [convert_value(item, model_class) for item in objects]

    @property
    def model_class(self) -> type:
        """The resolved ``Model`` class, looked up once per instance."""
        if self._model_class is None:
            self._model_class = self._resolve_model_class()
            logging.debug("Resolved model of %s to %s", type(self).__qualname__, self._model_class)
        return self._model_class

    def _get_resource_name(self) -> str:
        if self._resource_name is None:
            self._resource_name = getattr(type(self), RESOURCE_NAME_ATTR, None)
        if self._resource_name is None:
            raise ResourceNotFound("Use @from_resource or call from_resource()")
        return self._resource_name

    def _resolve_model_class(self) -> type:
        cls = type(self)
        if cls is YamlData:
            raise RuntimeError("Could not read YamlData without model")
        found = _generic_argument(cls)
        if found is None:
            return cls
        return _resolve_type_argument(*found)


def _generic_argument(cls: type) -> tuple[Any, type] | None:
    """Return the argument bound to ``Model`` as seen from *cls*, with its declaring class.

    Type variables of intermediate generic subclasses are substituted, so
    ``class Items(Base[Item])`` over ``class Base(YamlData[M])`` yields ``Item``.
    """
    for base in cls.__dict__.get("__orig_bases__", ()):
        origin = typing.get_origin(base)
        if origin is YamlData:
            return typing.get_args(base)[0], cls
        if not (isinstance(origin, type) and issubclass(origin, YamlData)):
            continue
        found = _generic_argument(origin)
        if found is None:
            continue
        argument, declaring = found
        parameters = getattr(origin, "__parameters__", ())
        if isinstance(argument, TypeVar) and argument in parameters:
            return typing.get_args(base)[parameters.index(argument)], cls
        return found
    for base in cls.__bases__:
        if base is not YamlData and issubclass(base, YamlData):
            found = _generic_argument(base)
            if found is not None:
                return found
    return None


def _resolve_forward(ref: Any, declaring: type) -> type:
    name = ref.__forward_arg__ if isinstance(ref, ForwardRef) else ref
    if name == declaring.__name__:
        return declaring
    module = sys.modules.get(declaring.__module__)
    resolved = getattr(module, name, None) if module is not None else None
    if not isinstance(resolved, type):
        raise RuntimeError(f"Could not find model class {name}")
    return resolved


def _resolve_type_argument(argument: Any, declaring: type) -> type:
    """Turn the generic argument of ``YamlData[...]`` into a class."""
    if isinstance(argument, TypeVar):
        bound = argument.__bound__
        if bound is None:
            return declaring
        return _resolve_type_argument(bound, declaring)
    if isinstance(argument, (ForwardRef, str)):
        return _resolve_forward(argument, declaring)
    if isinstance(argument, type):
        return argument
    raise RuntimeError(f"Could not find model class for {argument!r}")
