# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Class schema registry for data model taxonomy classes.

A registry maps a taxonomy class name (``Service``, ``Host``, ...) to its
canonical :class:`ClassSchema`. Schemas are read from disk on every lookup;
nothing is cached so a changed registry is observed by the next assertion.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple, Union

import yaml
from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError

from ..config import DATA_MODEL_VERSION, DEFAULT_SCHEMA_DIR, load_settings
from ..exceptions import FormatVersionError, SchemaRegistryError, UnknownClassError
from ..utils.format_version import parse_available_versions, parse_format_version, select_version

logger = logging.getLogger(__name__)

SCHEMA_FILE_SUFFIXES = (".json", ".yaml", ".yml")


@dataclass(frozen=True)
class ClassSchema:
    """Schema fragment owned by exactly one taxonomy class.

    A class-level ``additionalProperties`` is not kept: the merged schema is
    closed unless the caller's override opens it.
    """

    name: str
    properties: Dict[str, Any] = field(default_factory=dict)
    required: Tuple[str, ...] = ()
    bases: Tuple[str, ...] = ()
    version: Optional[str] = None


class SchemaRegistry(Protocol):
    def lookup(self, class_name: str) -> ClassSchema:
        """Return the schema for *class_name* or raise UnknownClassError."""
        ...


def _ref_to_class_name(ref: str) -> str:
    # "#Entity", "Entity.json" and "#/Entity" all name the Entity class
    name = ref.split("/")[-1].lstrip("#")
    for suffix in SCHEMA_FILE_SUFFIXES:
        if name.endswith(suffix):
            name = name[: -len(suffix)]
    return name


def class_schema_from_dict(name: str, data: Mapping[str, Any], version: Optional[str] = None) -> ClassSchema:
    """Build a :class:`ClassSchema` from a JSON Schema fragment.

    Top-level ``properties``/``required`` are taken as is. ``allOf`` members
    are flattened: ``{"$ref": "#Parent"}`` members become bases, inline
    members contribute their properties and required fields.

    Raises:
        SchemaRegistryError: If *data* is not a valid Draft 7 schema.
    """
    if not isinstance(data, Mapping):
        raise SchemaRegistryError(f"Schema for class '{name}' must be a mapping, got {type(data).__name__}")
    try:
        Draft7Validator.check_schema(data)
    except SchemaError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise SchemaRegistryError(f"Invalid schema for class '{name}' at {location}: {e.message}") from e

    properties: Dict[str, Any] = dict(data.get("properties") or {})
    required: List[str] = list(data.get("required") or [])
    bases: List[str] = []

    for member in data.get("allOf") or []:
        if not isinstance(member, Mapping):
            continue
        if "$ref" in member:
            bases.append(_ref_to_class_name(member["$ref"]))
            continue
        for key, descriptor in (member.get("properties") or {}).items():
            properties.setdefault(key, descriptor)
        for key in member.get("required") or []:
            if key not in required:
                required.append(key)

    return ClassSchema(
        name=name,
        properties=properties,
        required=tuple(required),
        bases=tuple(bases),
        version=version,
    )


class InMemoryRegistry:
    """Registry backed by a mapping of class name to schema dict or ClassSchema."""

    def __init__(self, schemas: Mapping[str, Union[ClassSchema, Mapping[str, Any]]], version: Optional[str] = None):
        self._schemas = dict(schemas)
        self.version = version

    def lookup(self, class_name: str) -> ClassSchema:
        schema = self._schemas.get(class_name)
        if schema is None:
            raise UnknownClassError(class_name)
        if isinstance(schema, ClassSchema):
            return schema
        return class_schema_from_dict(class_name, schema, self.version)

    def available_classes(self) -> List[str]:
        return sorted(self._schemas)


class DataModelRegistry:
    """Registry reading one schema file per class from a versioned directory.

    Layout::

        <schema_dir>/<version>/<ClassName>.json   (or .yaml / .yml)
    """

    def __init__(self, version: Optional[str] = None, schema_dir: Union[str, Path, None] = None):
        settings = load_settings()
        self.schema_dir = Path(schema_dir) if schema_dir is not None else settings.schema_dir
        self.requested_version = version or settings.data_model_version
        if self.requested_version is None and self.schema_dir == DEFAULT_SCHEMA_DIR:
            self.requested_version = DATA_MODEL_VERSION

    def resolve_version(self) -> str:
        """Resolve the version directory to serve schemas from.

        Raises:
            SchemaRegistryError: If no compatible version directory exists.
        """
        if not self.schema_dir.is_dir():
            raise SchemaRegistryError(f"Schema directory not found: {self.schema_dir}")

        available = parse_available_versions(p.name for p in self.schema_dir.iterdir() if p.is_dir())
        try:
            requested = parse_format_version(self.requested_version) if self.requested_version else None
        except FormatVersionError as e:
            raise SchemaRegistryError(str(e)) from e

        selected = select_version(requested, available)
        if selected is None:
            raise SchemaRegistryError(
                f"No data model schemas compatible with version {self.requested_version} "
                f"in {self.schema_dir} (available: {[str(v) for v in available]})"
            )
        if requested is not None and selected != requested:
            logger.debug(f"Data model version {requested} resolved to {selected}")
        return str(selected)

    def lookup(self, class_name: str) -> ClassSchema:
        if not isinstance(class_name, str) or not class_name or "/" in class_name or "\\" in class_name:
            raise UnknownClassError(str(class_name))

        version = self.resolve_version()
        version_dir = self.schema_dir / version
        for suffix in SCHEMA_FILE_SUFFIXES:
            schema_path = version_dir / f"{class_name}{suffix}"
            if schema_path.is_file():
                logger.debug(f"Loading class schema '{class_name}' from {schema_path}")
                return class_schema_from_dict(class_name, _load_document(schema_path), version)

        raise UnknownClassError(class_name)

    def available_classes(self) -> List[str]:
        version_dir = self.schema_dir / self.resolve_version()
        return sorted({p.stem for p in version_dir.iterdir() if p.suffix in SCHEMA_FILE_SUFFIXES})


def _load_document(schema_path: Path) -> Any:
    try:
        with open(schema_path, "r", encoding="utf-8") as f:
            if schema_path.suffix == ".json":
                return json.load(f)
            return yaml.safe_load(f)
    except json.JSONDecodeError as e:
        raise SchemaRegistryError(f"Invalid JSON in schema file {schema_path}: {e.msg}") from e
    except yaml.YAMLError as e:
        raise SchemaRegistryError(f"Invalid YAML in schema file {schema_path}: {e}") from e
