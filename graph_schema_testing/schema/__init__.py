"""Class schema registry and schema merging.

Nothing here imports from the matchers; schema resolution does not know
how verdicts are reported.
"""

from .registry import (
    ClassSchema,
    DataModelRegistry,
    InMemoryRegistry,
    SchemaRegistry,
    class_schema_from_dict,
)
from .merger import (
    DOC_FOOTER,
    SCALAR_TYPES,
    apply_override,
    merge_class_schemas,
    merge_schemas,
    relationship_base_schema,
)
