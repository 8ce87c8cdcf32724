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

"""Assertion matchers for collected graph objects."""

from typing import Any, Callable, Dict, Protocol

from .result import MatcherResult, SUCCESS_MESSAGE
from .diagnostics import ValidationErrorRecord
from .targets import TargetEntitiesOptions, to_target_entities
from .validator import to_match_direct_relationship_schema, to_match_graph_object_schema

__all__ = [
    'MATCHERS',
    'MatcherResult',
    'SUCCESS_MESSAGE',
    'TargetEntitiesOptions',
    'ValidationErrorRecord',
    'register_matchers',
    'toMatchDirectRelationshipSchema',
    'toMatchGraphObjectSchema',
    'toTargetEntities',
    'to_match_direct_relationship_schema',
    'to_match_graph_object_schema',
    'to_target_entities',
]

toMatchGraphObjectSchema = to_match_graph_object_schema
toMatchDirectRelationshipSchema = to_match_direct_relationship_schema
toTargetEntities = to_target_entities

MATCHERS: Dict[str, Callable[..., MatcherResult]] = {
    'toMatchGraphObjectSchema': to_match_graph_object_schema,
    'toMatchDirectRelationshipSchema': to_match_direct_relationship_schema,
    'toTargetEntities': to_target_entities,
}


class AssertionRegistry(Protocol):
    def extend(self, matchers: Dict[str, Callable[..., MatcherResult]]) -> Any:
        ...


def register_matchers(expect: AssertionRegistry) -> None:
    """Register all matchers with an assertion framework in one call.

    Args:
        expect: Object exposing ``extend(mapping)``, the framework's extension point
    """
    expect.extend(dict(MATCHERS))
