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

"""Turn ``jsonschema`` errors into flat validation error records.

Each record carries ``instancePath``, ``schemaPath``, ``keyword``, ``params``
and ``message``. ``anyOf``/``oneOf`` failures expand into one record per
failing alternative followed by a summary record. Records are ordered by the
position of the offending property in the validated object.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

import jsonschema
from jsonschema.protocols import Validator
from jsonschema.exceptions import ValidationError


JsonPointer = str


@dataclass(frozen=True)
class ValidationErrorRecord:
    """One violated constraint, shaped like the records integration authors already know."""

    instance_path: JsonPointer
    schema_path: str
    keyword: str
    params: Dict[str, Any] = field(default_factory=dict)
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "instancePath": self.instance_path,
            "schemaPath": self.schema_path,
            "keyword": self.keyword,
            "params": dict(self.params),
            "message": self.message,
        }


def _jp_escape(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def _instance_pointer(tokens: Iterable[Any]) -> JsonPointer:
    return "".join(f"/{_jp_escape(str(t))}" for t in tokens)


def _schema_pointer(tokens: Iterable[Any]) -> str:
    return "#" + "".join(f"/{_jp_escape(str(t))}" for t in tokens)


def _js_number(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _record(error: ValidationError, params: Dict[str, Any], message: str, **overrides: Any) -> ValidationErrorRecord:
    return ValidationErrorRecord(
        instance_path=overrides.get("instance_path", _instance_pointer(error.absolute_path)),
        schema_path=overrides.get("schema_path", _schema_pointer(error.absolute_schema_path)),
        keyword=overrides.get("keyword", error.validator),
        params=params,
        message=message,
    )


def _type_records(error: ValidationError) -> List[ValidationErrorRecord]:
    declared = error.validator_value
    type_name = ",".join(declared) if isinstance(declared, (list, tuple)) else declared
    return [_record(error, {"type": type_name}, f"must be {type_name}")]


def _required_records(error: ValidationError) -> List[ValidationErrorRecord]:
    instance = error.instance if isinstance(error.instance, Mapping) else {}
    return [
        _record(error, {"missingProperty": name}, f"must have required property '{name}'")
        for name in error.validator_value
        if name not in instance
    ]


def _additional_properties_records(error: ValidationError) -> List[ValidationErrorRecord]:
    instance = error.instance if isinstance(error.instance, Mapping) else {}
    schema = error.schema if isinstance(error.schema, Mapping) else {}
    declared = schema.get("properties") or {}
    patterns = list((schema.get("patternProperties") or {}).keys())
    extras = [
        key for key in instance
        if key not in declared and not any(re.search(p, key) for p in patterns)
    ]
    return [
        _record(error, {"additionalProperty": key}, "must NOT have additional properties")
        for key in extras
    ]


def _duplicate_items(items: Sequence[Any]) -> Optional[Dict[str, int]]:
    seen: Dict[str, int] = {}
    for i, item in enumerate(items):
        marker = json.dumps(item, sort_keys=True, default=str)
        if marker in seen:
            return {"i": i, "j": seen[marker]}
        seen[marker] = i
    return None


def _unique_items_records(error: ValidationError) -> List[ValidationErrorRecord]:
    pair = _duplicate_items(error.instance) or {"i": 0, "j": 0}
    return [
        _record(
            error,
            pair,
            f"must NOT have duplicate items (items ## {pair['j']} and {pair['i']} are identical)",
        )
    ]


def _comparison_records(comparison: str) -> Callable[[ValidationError], List[ValidationErrorRecord]]:
    def _records(error: ValidationError) -> List[ValidationErrorRecord]:
        limit = _js_number(error.validator_value)
        return [_record(error, {"comparison": comparison, "limit": limit}, f"must be {comparison} {limit}")]

    return _records


def _limit_records(bound: str, unit: str) -> Callable[[ValidationError], List[ValidationErrorRecord]]:
    def _records(error: ValidationError) -> List[ValidationErrorRecord]:
        limit = _js_number(error.validator_value)
        return [_record(error, {"limit": limit}, f"must NOT have {bound} than {limit} {unit}")]

    return _records


def _alternative_records(error: ValidationError) -> List[ValidationErrorRecord]:
    """Records of every failing alternative, in alternative order."""
    records: List[ValidationErrorRecord] = []
    for index in range(len(error.validator_value)):
        for sub_error in error.context:
            if sub_error.relative_schema_path and sub_error.relative_schema_path[0] == index:
                records.extend(error_to_records(sub_error))
    return records


def _any_of_records(error: ValidationError) -> List[ValidationErrorRecord]:
    return _alternative_records(error) + [_record(error, {}, "must match a schema in anyOf")]


def _one_of_records(error: ValidationError) -> List[ValidationErrorRecord]:
    summary = _record(error, {"passingSchemas": None}, "must match exactly one schema in oneOf")
    return _alternative_records(error) + [summary]


_KEYWORD_RECORDS: Dict[str, Callable[[ValidationError], List[ValidationErrorRecord]]] = {
    "type": _type_records,
    "required": _required_records,
    "additionalProperties": _additional_properties_records,
    "enum": lambda e: [_record(e, {"allowedValues": e.validator_value}, "must be equal to one of the allowed values")],
    "const": lambda e: [_record(e, {"allowedValue": e.validator_value}, "must be equal to constant")],
    "format": lambda e: [_record(e, {"format": e.validator_value}, f'must match format "{e.validator_value}"')],
    "pattern": lambda e: [_record(e, {"pattern": e.validator_value}, f'must match pattern "{e.validator_value}"')],
    "minimum": _comparison_records(">="),
    "maximum": _comparison_records("<="),
    "exclusiveMinimum": _comparison_records(">"),
    "exclusiveMaximum": _comparison_records("<"),
    "minLength": _limit_records("fewer", "characters"),
    "maxLength": _limit_records("more", "characters"),
    "minItems": _limit_records("fewer", "items"),
    "maxItems": _limit_records("more", "items"),
    "minProperties": _limit_records("fewer", "properties"),
    "maxProperties": _limit_records("more", "properties"),
    "uniqueItems": _unique_items_records,
    "anyOf": _any_of_records,
    "oneOf": _one_of_records,
    "not": lambda e: [_record(e, {}, "must NOT be valid")],
}


def error_to_records(error: ValidationError) -> List[ValidationErrorRecord]:
    """Translate one jsonschema error into one record per violated constraint."""
    if error.schema is False:
        return [_record(error, {}, "boolean schema is false", keyword="false schema")]

    handler = _KEYWORD_RECORDS.get(error.validator)
    if handler is None:
        return [_record(error, {}, error.message)]
    return handler(error)


def _dedupe(records: Iterable[ValidationErrorRecord]) -> List[ValidationErrorRecord]:
    # jsonschema reports required/additionalProperties once per property
    # while each handler already expands the full set
    unique: List[ValidationErrorRecord] = []
    seen = set()
    for record in records:
        marker = json.dumps(record.to_dict(), sort_keys=True, default=str)
        if marker in seen:
            continue
        seen.add(marker)
        unique.append(record)
    return unique


def create_validator(schema: Mapping[str, Any]) -> Validator:
    """Draft 7 validator with format checking enabled.

    Raises:
        jsonschema.exceptions.SchemaError: If *schema* itself is malformed.
    """
    validator_cls = jsonschema.Draft7Validator
    validator_cls.check_schema(schema)
    return validator_cls(schema, format_checker=validator_cls.FORMAT_CHECKER)


def validate_instance(validator: Validator, instance: Any) -> List[ValidationErrorRecord]:
    """Validate *instance*, ordering records by the offending property's position.

    Root-level records come first; records for the same property keep the
    schema keyword order.
    """
    keys = list(instance.keys()) if isinstance(instance, Mapping) else []

    def _position(error: ValidationError) -> int:
        if not error.path:
            return -1
        first = error.path[0]
        return keys.index(first) if first in keys else len(keys)

    errors = sorted(validator.iter_errors(instance), key=_position)
    records: List[ValidationErrorRecord] = []
    for error in errors:
        records.extend(error_to_records(error))
    return _dedupe(records)
