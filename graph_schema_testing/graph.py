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

"""Builders for entities and relationships used as matcher input."""

from __future__ import annotations

import copy
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .exceptions import IntegrationError


class RelationshipClass(str, Enum):
    ALLOWS = "ALLOWS"
    ASSIGNED = "ASSIGNED"
    CONNECTS = "CONNECTS"
    CONTAINS = "CONTAINS"
    HAS = "HAS"
    IS = "IS"
    MANAGES = "MANAGES"
    OWNS = "OWNS"
    PROTECTS = "PROTECTS"
    TRUSTS = "TRUSTS"
    USES = "USES"


class RelationshipDirection(str, Enum):
    FORWARD = "FORWARD"
    REVERSE = "REVERSE"


_REQUIRED_ENTITY_FIELDS = ("_class", "_type", "_key")


def _class_name(_class: Any) -> str:
    return _class.value if isinstance(_class, Enum) else str(_class)


def _relationship_identity(_class: str, from_key: str, from_type: str, to_key: str, to_type: str) -> Dict[str, str]:
    verb = _class.lower()
    return {
        "_key": f"{from_key}|{verb}|{to_key}",
        "_type": f"{from_type}_{verb}_{to_type}",
    }


def create_integration_entity(
    assign: Mapping[str, Any],
    source: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Create an entity from assigned properties and an optional raw source.

    Raises:
        IntegrationError: If ``_class``, ``_type`` or ``_key`` is missing.
    """
    missing = [name for name in _REQUIRED_ENTITY_FIELDS if not assign.get(name)]
    if missing:
        raise IntegrationError("INVALID_ENTITY", f"Entity is missing required field(s): {missing}")

    entity = copy.deepcopy(dict(assign))
    if source is not None:
        entity["_rawData"] = [{"name": "default", "rawData": copy.deepcopy(dict(source))}]
    return entity


def create_direct_relationship(
    _class: Any,
    from_entity: Mapping[str, Any],
    to_entity: Mapping[str, Any],
    properties: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Create an explicit relationship between two materialized entities."""
    class_name = _class_name(_class)
    relationship: Dict[str, Any] = {
        "_class": class_name,
        **_relationship_identity(
            class_name, from_entity["_key"], from_entity["_type"], to_entity["_key"], to_entity["_type"]
        ),
        "_fromEntityKey": from_entity["_key"],
        "_toEntityKey": to_entity["_key"],
        "displayName": class_name,
    }
    relationship.update(properties or {})
    return relationship


def create_mapped_relationship(
    _class: Any,
    source: Mapping[str, Any],
    target: Mapping[str, Any],
    relationship_direction: RelationshipDirection = RelationshipDirection.FORWARD,
    properties: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Create a relationship from *source* to an abstract ``{_type, _key}`` target.

    The target is not looked up here; ``to_target_entities`` resolves it later.
    """
    if "_type" not in target or "_key" not in target:
        raise IntegrationError("INVALID_MAPPED_RELATIONSHIP", "Mapped relationship target requires _type and _key")

    class_name = _class_name(_class)
    relationship: Dict[str, Any] = {
        "_class": class_name,
        **_relationship_identity(class_name, source["_key"], source["_type"], target["_key"], target["_type"]),
        "_mapping": {
            "relationshipDirection": RelationshipDirection(relationship_direction).value,
            "sourceEntityKey": source["_key"],
            "targetFilterKeys": [["_type", "_key"]],
            "targetEntity": copy.deepcopy(dict(target)),
        },
        "displayName": class_name,
    }
    relationship.update(properties or {})
    return relationship
