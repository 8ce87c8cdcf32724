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

"""Graph object validation against merged class schemas.

Checks run in order and stop at the first failure:
  1. every ``_key`` in the submitted collection is unique
  2. the ``_class`` list resolves to one merged schema
  3. each object conforms to the merged schema
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Sequence, Union

from ..exceptions import SchemaResolutionError
from ..schema.merger import (
    DOC_FOOTER,
    ClassSpec,
    apply_override,
    merge_class_schemas,
    relationship_base_schema,
)
from ..schema.registry import DataModelRegistry, SchemaRegistry
from ..utils.json_format import pretty_json
from .diagnostics import ValidationErrorRecord, create_validator, validate_instance
from .result import MatcherResult

logger = logging.getLogger(__name__)

ENTITY_ASSERTION = "toMatchGraphObjectSchema"
RELATIONSHIP_ASSERTION = "toMatchDirectRelationshipSchema"

GraphObject = Mapping[str, Any]
Received = Union[GraphObject, Sequence[GraphObject]]


def as_object_list(received: Received) -> List[GraphObject]:
    """Accept a single graph object or an ordered sequence of them."""
    if isinstance(received, Mapping):
        return [received]
    if isinstance(received, (list, tuple)):
        return list(received)
    raise TypeError(f"Expected a graph object or a list of graph objects, got {type(received).__name__}")


def _js_string(value: Any) -> str:
    # how the keys read when an array is interpolated into a message
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _key_identity(value: Any) -> Any:
    # equality of a JS Set: 1 and 1.0 collide, objects compare by identity
    if isinstance(value, bool):
        return ("boolean", value)
    if isinstance(value, (int, float)):
        return ("number", "NaN" if value != value else value)
    if value is None or isinstance(value, str):
        return (type(value).__name__, value)
    return ("object", id(value))


def check_unique_keys(objects: Sequence[GraphObject]) -> Optional[MatcherResult]:
    """Fail when any ``_key`` repeats within the collection."""
    keys = [obj.get("_key") if isinstance(obj, Mapping) else None for obj in objects]
    identities = {_key_identity(k) for k in keys}
    if len(identities) == len(keys):
        return None

    message = f"Object `_key` properties array is not unique: [{','.join(_js_string(k) for k in keys)}]"
    logger.debug(message)
    return MatcherResult.failure(lambda: message)


def format_validation_failure(data: Any, records: Sequence[ValidationErrorRecord], index: int) -> str:
    errors = pretty_json([r.to_dict() for r in records])
    return (
        f"Error validating graph object against schema "
        f"(data={pretty_json(data)}, errors={errors}, index={index})\n\n{DOC_FOOTER}"
    )


def validate_graph_objects(objects: Sequence[GraphObject], schema: Mapping[str, Any]) -> MatcherResult:
    """Validate *objects* in order against *schema*, stopping at the first failure."""
    validator = create_validator(schema)
    for index, obj in enumerate(objects):
        records = validate_instance(validator, obj)
        if records:
            logger.debug(f"Graph object at index {index} failed with {len(records)} schema error(s)")
            return MatcherResult.failure(
                lambda data=obj, records=records, index=index: format_validation_failure(data, records, index)
            )
    return MatcherResult.success()


def _options_value(options: Optional[Mapping[str, Any]], key: str, explicit: Any) -> Any:
    if explicit is not None:
        return explicit
    if options is None:
        return None
    if not isinstance(options, Mapping):
        raise TypeError(f"matcher options must be a mapping, got {type(options).__name__}")
    return options.get(key)


def to_match_graph_object_schema(
    received: Received,
    options: Optional[Mapping[str, Any]] = None,
    *,
    _class: Optional[ClassSpec] = None,
    schema: Optional[Mapping[str, Any]] = None,
    registry: Optional[SchemaRegistry] = None,
) -> MatcherResult:
    """Assert that entities match the merged schema of their data model classes.

    Args:
        received: An entity or a list of entities
        options: ``{"_class": ..., "schema": ...}``, an alternative to the keywords
        _class: A class name or an ordered list of class names
        schema: Optional override schema applied on top of the class schemas
        registry: Class schema registry (defaults to the bundled data model)

    Returns:
        MatcherResult
    """
    class_spec = _options_value(options, "_class", _class)
    override = _options_value(options, "schema", schema)
    if class_spec is None:
        raise TypeError(f'"{ENTITY_ASSERTION}" requires a _class')

    objects = as_object_list(received)
    duplicate = check_unique_keys(objects)
    if duplicate is not None:
        return duplicate

    try:
        merged = merge_class_schemas(
            class_spec,
            override,
            registry=registry if registry is not None else DataModelRegistry(),
            assertion_name=ENTITY_ASSERTION,
        )
    except SchemaResolutionError as e:
        message = f"Error loading schemas for class (err={e})"
        logger.debug(f"Schema resolution failed for _class={class_spec}: {e.class_name}")
        return MatcherResult.failure(lambda: message)

    return validate_graph_objects(objects, merged)


def to_match_direct_relationship_schema(
    received: Received,
    options: Optional[Mapping[str, Any]] = None,
    *,
    schema: Optional[Mapping[str, Any]] = None,
) -> MatcherResult:
    """Assert that direct relationships match the fixed relationship schema.

    Additional relationship properties may only hold scalar values unless
    *schema* overrides the policy.
    """
    override = _options_value(options, "schema", schema)

    objects = as_object_list(received)
    duplicate = check_unique_keys(objects)
    if duplicate is not None:
        return duplicate

    return validate_graph_objects(objects, apply_override(relationship_base_schema(), override))
