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

"""Resolution of mapped relationship targets against collected entities."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Sequence, Union

from ..utils.json_format import pretty_json
from .result import MatcherResult

logger = logging.getLogger(__name__)

NEGATED_MESSAGE = "Expected mapped relationships not to target entities"


@dataclass(frozen=True)
class TargetEntitiesOptions:
    enforce_single_target: bool = False

    @classmethod
    def from_value(cls, value: Union["TargetEntitiesOptions", Mapping[str, Any], None]) -> "TargetEntitiesOptions":
        if value is None:
            return cls()
        if isinstance(value, TargetEntitiesOptions):
            return value
        if not isinstance(value, Mapping):
            raise TypeError(f"toTargetEntities options must be a mapping, got {type(value).__name__}")

        unknown = set(value) - {"enforceSingleTarget", "enforce_single_target"}
        if unknown:
            raise TypeError(f"Unknown toTargetEntities option(s): {sorted(unknown)}")

        enforce = value.get("enforceSingleTarget", value.get("enforce_single_target", False))
        if not isinstance(enforce, bool):
            raise TypeError(f"enforceSingleTarget must be a boolean, got {enforce!r}")
        return cls(enforce_single_target=enforce)


def mapped_target(relationship: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return the ``{_type, _key}`` target descriptor of a mapped relationship."""
    mapping = relationship.get("_mapping")
    if isinstance(mapping, Mapping) and isinstance(mapping.get("targetEntity"), Mapping):
        return mapping["targetEntity"]
    target = relationship.get("target")
    if isinstance(target, Mapping):
        return target
    return {}


def find_target_entities(
    relationship: Mapping[str, Any],
    entities: Sequence[Mapping[str, Any]],
) -> List[Mapping[str, Any]]:
    target = mapped_target(relationship)
    if "_type" not in target or "_key" not in target:
        return []
    return [
        entity for entity in entities
        if entity.get("_type") == target["_type"] and entity.get("_key") == target["_key"]
    ]


def to_target_entities(
    mapped_relationships: Sequence[Mapping[str, Any]],
    entities: Sequence[Mapping[str, Any]],
    options: Union[TargetEntitiesOptions, Mapping[str, Any], None] = None,
) -> MatcherResult:
    """Assert that every mapped relationship targets a collected entity.

    Duplicate entities in *entities* count as separate matches. With
    ``enforceSingleTarget`` a relationship matching more than one entity fails.
    The first failing relationship decides the verdict.
    """
    resolved = TargetEntitiesOptions.from_value(options)

    for relationship in mapped_relationships:
        matches = find_target_entities(relationship, entities)

        if not matches:
            message = f"No target entity found for mapped relationship: {pretty_json(relationship)}"
            logger.debug(message)
            return MatcherResult.failure(lambda message=message: message)

        if resolved.enforce_single_target and len(matches) > 1:
            message = (
                "Multiple target entities found for mapped relationship, "
                f"expected exactly one: {pretty_json(relationship)}"
            )
            logger.debug(message)
            return MatcherResult.failure(lambda message=message: message)

    return MatcherResult.success(NEGATED_MESSAGE)
