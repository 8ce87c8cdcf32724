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

"""Environment-driven settings.

Settings are read on every call to :func:`load_settings` so that a change in
the environment is observed by the next assertion or logger.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional


DEFAULT_SCHEMA_DIR = Path(__file__).parent / "schema" / "data_model"

# version served from DEFAULT_SCHEMA_DIR when DATA_MODEL_VERSION is unset
DATA_MODEL_VERSION = "0.1.0"

# below DEBUG, used for verbose trace output
TRACE_LEVEL = 5


@dataclass(frozen=True)
class Settings:
    log_level: int = logging.INFO
    disable_event_logging: bool = False
    schema_dir: Path = DEFAULT_SCHEMA_DIR
    data_model_version: Optional[str] = None


def _parse_log_level(raw: Optional[str]) -> int:
    if not raw:
        return logging.INFO
    name = raw.strip().upper()
    if name == "TRACE":
        return TRACE_LEVEL
    level = logging.getLevelName(name)
    if isinstance(level, int):
        return level
    if raw.strip().lower() == "fatal":
        return logging.CRITICAL
    return logging.INFO


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from environment variables.

    Recognized variables:
        LOG_LEVEL: logging level name (default INFO)
        JUPITERONE_DISABLE_EVENT_LOGGING: "true" disables event publication
        GRAPH_SCHEMA_DIR: directory holding versioned data model schemas
        DATA_MODEL_VERSION: data model version to serve schemas from
    """
    env = os.environ if environ is None else environ

    schema_dir = env.get("GRAPH_SCHEMA_DIR")
    return Settings(
        log_level=_parse_log_level(env.get("LOG_LEVEL")),
        disable_event_logging=env.get("JUPITERONE_DISABLE_EVENT_LOGGING", "").strip().lower() == "true",
        schema_dir=Path(schema_dir) if schema_dir else DEFAULT_SCHEMA_DIR,
        data_model_version=env.get("DATA_MODEL_VERSION") or None,
    )
