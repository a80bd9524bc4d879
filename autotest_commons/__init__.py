"""Helpers for test-automation configuration: typed properties, YAML models and file utilities."""

from autotest_commons.tools.prop import URL, Prop
from autotest_commons.tools.resource import ResourceNotFound, get_resource_path
from autotest_commons.tools.yaml_data import YamlData
from autotest_commons.util.commons import (
    create_dir,
    detect_charset,
    get_relative,
    read_field,
    read_props,
    read_resource_props,
    timestamp,
    write_field,
    write_props,
)
from autotest_commons.util.decorators import from_resource, no_override

__all__ = [
    "Prop",
    "URL",
    "ResourceNotFound",
    "YamlData",
    "create_dir",
    "detect_charset",
    "from_resource",
    "get_relative",
    "get_resource_path",
    "no_override",
    "read_field",
    "read_props",
    "read_resource_props",
    "timestamp",
    "write_field",
    "write_props",
]

__version__ = "1.0.0"
