"""Shared constants for the helper modules.

Values here are plain ``Final`` constants so callers and tests can refer to
them without importing the heavier modules.
"""

from __future__ import annotations

from typing import Final

# Format used by :func:`autotest_commons.util.commons.timestamp`.
# Milliseconds are appended separately (``yyyyMMdd.HHmmss.SSS``).
TIMESTAMP_FORMAT: Final[str] = "%Y%m%d.%H%M%S"

# Charset used when reading .properties files unless the caller overrides it.
DEFAULT_PROPS_CHARSET: Final[str] = "utf-8"

# YAML resources are decoded with the first encoding that succeeds.
YAML_ENCODINGS: Final[tuple[str, ...]] = ("utf-8", "gbk")

# Extra resource roots, separated by ``os.pathsep``.
RESOURCE_PATH_ENV: Final[str] = "AUTOTEST_RESOURCE_PATH"
RESOURCE_DIR_NAME: Final[str] = "resources"

# Class attributes written by the decorators in ``util.decorators``.
RESOURCE_NAME_ATTR: Final[str] = "_yaml_resource_name"
NO_OVERRIDE_ATTR: Final[str] = "_no_override_fields"

# Text values treated as ``True`` when coercing to bool.
TRUTHY_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
