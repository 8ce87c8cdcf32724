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

"""Schema assertions for graph objects collected by integrations."""

__version__ = "0.1.0"

from .config import DATA_MODEL_VERSION  # noqa: E402
from .exceptions import (  # noqa: E402
    GraphSchemaError,
    IntegrationError,
    SchemaRegistryError,
    SchemaResolutionError,
    UnknownClassError,
)
from .graph import (  # noqa: E402
    RelationshipClass,
    RelationshipDirection,
    create_direct_relationship,
    create_integration_entity,
    create_mapped_relationship,
)
from .matchers import (  # noqa: E402
    MATCHERS,
    MatcherResult,
    TargetEntitiesOptions,
    register_matchers,
    toMatchDirectRelationshipSchema,
    toMatchGraphObjectSchema,
    toTargetEntities,
    to_match_direct_relationship_schema,
    to_match_graph_object_schema,
    to_target_entities,
)
from .schema import DataModelRegistry, InMemoryRegistry  # noqa: E402
