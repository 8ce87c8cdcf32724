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

"""Integration events, metrics and error event descriptions."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..exceptions import (
    PROVIDER_AUTH_ERROR_DESCRIPTION,
    UNEXPECTED_ERROR_CODE,
    UNEXPECTED_ERROR_REASON,
    IntegrationError,
    IntegrationProviderAuthenticationError,
    IntegrationProviderAuthorizationError,
)
from ..utils.json_format import compact_json


@dataclass(frozen=True)
class IntegrationEvent:
    name: str
    description: str


@dataclass(frozen=True)
class Metric:
    name: str
    value: float
    unit: Optional[str] = None
    dimensions: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=lambda: time.time() * 1000)


@dataclass(frozen=True)
class StepMetadata:
    id: str
    name: str


@dataclass(frozen=True)
class SynchronizationJob:
    id: str


def is_provider_auth_error(err: BaseException) -> bool:
    return isinstance(err, (IntegrationProviderAuthorizationError, IntegrationProviderAuthenticationError))


def create_error_event_description(
    err: BaseException,
    message: str,
    event_data: Optional[Mapping[str, Any]] = None,
) -> Tuple[str, str]:
    """Build the description published for an error event.

    Args:
        err: The error being reported
        message: Human readable summary
        event_data: Extra name/value pairs appended to the description

    Returns:
        (error_id, description) where description reads
        ``<message> (errorCode="..", errorId="..", reason=".."[, name=value...])``
    """
    error_id = str(uuid.uuid4())

    if isinstance(err, IntegrationError):
        error_code = err.code
        error_reason = str(err)
    else:
        error_code = UNEXPECTED_ERROR_CODE
        error_reason = UNEXPECTED_ERROR_REASON

    if is_provider_auth_error(err):
        message += PROVIDER_AUTH_ERROR_DESCRIPTION

    name_value_pairs: List[Tuple[str, Any]] = [
        ("errorCode", error_code),
        ("errorId", error_id),
        ("reason", error_reason),
    ]
    if event_data:
        name_value_pairs.extend(event_data.items())

    error_details = ", ".join(f"{name}={compact_json(value)}" for name, value in name_value_pairs)
    return error_id, f"{message} ({error_details})"
