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

"""Merge per-class schemas into the one schema enforced by a validation call.

Merge rules:
  * ``required`` is the union over all classes, first-seen order.
  * ``properties`` keep the first declaration of each key; a later class that
    declares the same key only widens its ``type`` set.
  * An override schema replaces ``additionalProperties`` and any property it
    declares, and appends its ``required`` entries.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set, Union

from ..exceptions import SchemaRegistryError, SchemaResolutionError, UnknownClassError
from .registry import ClassSchema, SchemaRegistry

logger = logging.getLogger(__name__)

DOC_FOOTER = (
    "Find out more about JupiterOne schemas: "
    "https://github.com/JupiterOne/data-model/tree/master/src/schemas\n"
)

SCALAR_TYPES = ("boolean", "integer", "null", "number", "string")

RELATIONSHIP_REQUIRED_FIELDS = ("_class", "_type", "_key", "_toEntityKey", "_fromEntityKey")

_OVERRIDE_MERGED_KEYS = ("properties", "required", "additionalProperties")

ClassSpec = Union[str, Sequence[str]]


def normalize_class_spec(class_spec: ClassSpec) -> List[str]:
    """Return the ordered class name list for a single class or a class list."""
    if isinstance(class_spec, str):
        names = [class_spec]
    elif isinstance(class_spec, (list, tuple)):
        names = list(class_spec)
    else:
        raise TypeError(f"_class must be a string or a list of strings, got {type(class_spec).__name__}")

    if not names:
        raise ValueError("_class must name at least one class")
    for name in names:
        if not isinstance(name, str):
            raise TypeError(f"_class entries must be strings, got {name!r}")
    return names


def relationship_base_schema() -> Dict[str, Any]:
    """Fixed schema for direct relationships.

    Additional properties may only hold scalar JSON values.
    """
    return {
        "type": "object",
        "properties": {name: {"type": "string"} for name in RELATIONSHIP_REQUIRED_FIELDS},
        "required": list(RELATIONSHIP_REQUIRED_FIELDS),
        "additionalProperties": {"anyOf": [{"type": t} for t in SCALAR_TYPES]},
    }


def _unknown_class_message(assertion_name: str, class_name: str) -> str:
    return f'Invalid _class passed in schema for "{assertion_name}" (_class=#{class_name})\n\n{DOC_FOOTER}'


def collect_class_schemas(
    class_names: Sequence[str],
    registry: SchemaRegistry,
    *,
    assertion_name: str,
) -> List[ClassSchema]:
    """Look up each class and its base chain, bases first.

    Raises:
        SchemaResolutionError: On the first class the registry cannot serve.
    """
    collected: List[ClassSchema] = []
    seen: Set[str] = set()

    def _collect(name: str) -> None:
        if name in seen:
            return
        try:
            class_schema = registry.lookup(name)
        except UnknownClassError as e:
            raise SchemaResolutionError(
                name, _unknown_class_message(assertion_name, name), assertion_name
            ) from e
        except SchemaRegistryError as e:
            raise SchemaResolutionError(
                name,
                f'Failed to load schema for "{assertion_name}" (_class=#{name}): {e}\n\n{DOC_FOOTER}',
                assertion_name,
            ) from e

        seen.add(name)
        for base in class_schema.bases:
            _collect(base)
        collected.append(class_schema)

    for class_name in class_names:
        _collect(class_name)
    return collected


def _type_list(declared: Any) -> List[str]:
    if declared is None:
        return []
    if isinstance(declared, str):
        return [declared]
    return list(declared)


def _merge_property(existing: Any, incoming: Any) -> Any:
    if not isinstance(existing, dict) or not isinstance(incoming, dict):
        return existing
    # no "type" on the first declaration means any type is already allowed
    if "type" not in existing or "type" not in incoming:
        return existing

    types = _type_list(existing["type"])
    for t in _type_list(incoming["type"]):
        if t not in types:
            types.append(t)

    merged = dict(existing)
    merged["type"] = types[0] if len(types) == 1 else types
    return merged


def apply_override(base: Mapping[str, Any], override: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Return a copy of *base* with *override* applied on top."""
    schema = copy.deepcopy(dict(base))
    schema.setdefault("properties", {})
    schema.setdefault("required", [])
    if override is None:
        return schema
    if not isinstance(override, Mapping):
        raise TypeError(f"schema override must be a mapping, got {type(override).__name__}")

    if "additionalProperties" in override:
        schema["additionalProperties"] = copy.deepcopy(override["additionalProperties"])

    for key, descriptor in (override.get("properties") or {}).items():
        schema["properties"][key] = copy.deepcopy(descriptor)

    for key in override.get("required") or []:
        if key not in schema["required"]:
            schema["required"].append(key)

    for key, value in override.items():
        if key not in _OVERRIDE_MERGED_KEYS:
            schema[key] = copy.deepcopy(value)

    return schema


def merge_schemas(
    class_schemas: Sequence[ClassSchema],
    override: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Combine resolved class schemas and an optional override."""
    required: List[str] = []
    properties: Dict[str, Any] = {}

    for class_schema in class_schemas:
        for key in class_schema.required:
            if key not in required:
                required.append(key)

        for key, descriptor in class_schema.properties.items():
            if key not in properties:
                properties[key] = copy.deepcopy(descriptor)
            else:
                properties[key] = _merge_property(properties[key], descriptor)

    merged = {
        "type": "object",
        "properties": properties,
        "required": required,
        "additionalProperties": False,
    }
    return apply_override(merged, override)


def merge_class_schemas(
    class_spec: ClassSpec,
    override: Optional[Mapping[str, Any]] = None,
    *,
    registry: SchemaRegistry,
    assertion_name: str = "toMatchGraphObjectSchema",
) -> Dict[str, Any]:
    """Resolve *class_spec* against *registry* and merge it into one schema.

    Raises:
        SchemaResolutionError: If any class (or one of its bases) is unknown.
    """
    class_names = normalize_class_spec(class_spec)
    class_schemas = collect_class_schemas(class_names, registry, assertion_name=assertion_name)
    merged = merge_schemas(class_schemas, override)
    logger.debug(
        f"Merged schema for {class_names} from {[c.name for c in class_schemas]}: "
        f"{len(merged['properties'])} properties, required={merged['required']}"
    )
    return merged
