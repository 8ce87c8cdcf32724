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

"""Structured logger for integration runs.

Every logger created from the same root shares one :class:`LoggerContext`,
which holds the set of errors already logged and the event/metric listeners.
Child loggers only add bound fields; the shared context is passed to them at
construction time.
"""

from __future__ import annotations

import logging
import traceback
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Set, Union

from ..config import TRACE_LEVEL, load_settings
from .events import (
    IntegrationEvent,
    Metric,
    StepMetadata,
    SynchronizationJob,
    create_error_event_description,
)
from .formatters import JsonFormatter, PrettyFormatter
from .handlers import attach_split_stream_handlers

logging.addLevelName(TRACE_LEVEL, "TRACE")

OnPublishEventListener = Callable[[IntegrationEvent], None]
OnPublishMetricListener = Callable[[Metric], None]
Serializer = Callable[[Any], Any]


# ---- log input -------------------------------------------------------------


@dataclass(frozen=True)
class ErrorPayload:
    err: BaseException
    message: str


@dataclass(frozen=True)
class FieldsPayload:
    fields: Dict[str, Any]
    message: str


@dataclass(frozen=True)
class PlainMessage:
    message: str


LogInput = Union[ErrorPayload, FieldsPayload, PlainMessage]


def _format_message(parts: tuple) -> str:
    if not parts:
        return ""
    template, *args = parts
    if args and isinstance(template, str) and "%" in template:
        try:
            return template % tuple(args)
        except (TypeError, ValueError):
            pass
    return " ".join(str(p) for p in parts)


def classify_log_input(*args: Any) -> LogInput:
    """Decide once what a log call was given.

    ``logger.error(err, "msg")``, ``logger.info({"field": 1}, "msg")`` and
    ``logger.info("msg %s", value)`` are all accepted.
    """
    if not args:
        return PlainMessage("")

    first, rest = args[0], args[1:]
    if isinstance(first, BaseException):
        return ErrorPayload(err=first, message=_format_message(rest) or str(first))
    if isinstance(first, Mapping):
        return FieldsPayload(fields=dict(first), message=_format_message(rest))
    return PlainMessage(message=_format_message(args))


# ---- serializers -----------------------------------------------------------


def serialize_error(err: Any) -> Any:
    if not isinstance(err, BaseException):
        return err
    serialized = {
        "message": str(err),
        "name": type(err).__name__,
        "stack": "".join(traceback.format_exception(type(err), err, err.__traceback__)),
    }
    code = getattr(err, "code", None)
    if code is not None:
        serialized["code"] = code
    return serialized


def _field_is_masked(field_definition: Any) -> bool:
    if isinstance(field_definition, Mapping):
        return bool(field_definition.get("mask"))
    return bool(getattr(field_definition, "mask", False))


def create_instance_config_serializer(fields: Optional[Mapping[str, Any]] = None) -> Serializer:
    """Serializer hiding instance config values.

    Declared masked fields render as ``****`` plus their last 4 characters,
    declared unmasked fields render as is, undeclared fields render ``***``.
    """

    def serialize(config: Any) -> Any:
        if not config:
            return config
        serialized = {}
        for key, value in config.items():
            field_definition = fields.get(key) if fields else None
            if field_definition:
                serialized[key] = f"****{str(value)[-4:]}" if _field_is_masked(field_definition) else value
            else:
                serialized[key] = "***"
        return serialized

    return serialize


# ---- logger ----------------------------------------------------------------


@dataclass(frozen=True)
class LoggerContext:
    """State shared by a root logger and all of its children."""

    error_set: Set[BaseException] = field(default_factory=set)
    on_publish_event: Optional[OnPublishEventListener] = None
    on_publish_metric: Optional[OnPublishMetricListener] = None
    serializers: Dict[str, Serializer] = field(default_factory=dict)

    def serialize(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        return {
            key: self.serializers[key](value) if key in self.serializers else value
            for key, value in fields.items()
        }

    def track_error(self, log_input: LogInput) -> None:
        if isinstance(log_input, ErrorPayload):
            self.error_set.add(log_input.err)
        elif isinstance(log_input, FieldsPayload) and isinstance(log_input.fields.get("err"), BaseException):
            self.error_set.add(log_input.fields["err"])


class IntegrationLogger:
    """Logger with bound fields, error tracking and event publication."""

    def __init__(self, logger: logging.Logger, context: LoggerContext, fields: Optional[Mapping[str, Any]] = None):
        self._logger = logger
        self._context = context
        self.fields: Dict[str, Any] = dict(fields or {})

    @property
    def context(self) -> LoggerContext:
        return self._context

    def child(self, **fields: Any) -> "IntegrationLogger":
        return IntegrationLogger(self._logger, self._context, {**self.fields, **fields})

    def _emit(self, level: int, log_input: LogInput, defaults: Optional[Mapping[str, Any]] = None) -> None:
        if not self._logger.isEnabledFor(level):
            return

        fields = {**self.fields, **(defaults or {})}
        if isinstance(log_input, ErrorPayload):
            fields["err"] = log_input.err
        elif isinstance(log_input, FieldsPayload):
            fields.update(log_input.fields)

        self._logger.log(level, log_input.message, extra={"fields": self._context.serialize(fields)})

    def trace(self, *args: Any) -> None:
        self._emit(TRACE_LEVEL, classify_log_input(*args), {"verbose": True})

    def debug(self, *args: Any) -> None:
        self._emit(logging.DEBUG, classify_log_input(*args))

    def info(self, *args: Any) -> None:
        self._emit(logging.INFO, classify_log_input(*args))

    def warn(self, *args: Any) -> None:
        self._emit(logging.WARNING, classify_log_input(*args))

    def error(self, *args: Any) -> None:
        log_input = classify_log_input(*args)
        self._context.track_error(log_input)
        self._emit(logging.ERROR, log_input)

    def is_handled_error(self, err: BaseException) -> bool:
        return err in self._context.error_set

    # ---- events and metrics ----

    def publish_event(self, name: str, description: str) -> None:
        if load_settings().disable_event_logging:
            return
        if self._context.on_publish_event is not None:
            self._context.on_publish_event(IntegrationEvent(name=name, description=description))

    def publish_metric(self, metric: Metric) -> None:
        if self._context.on_publish_metric is not None:
            self._context.on_publish_metric(metric)

    def publish_error_event(
        self,
        name: str,
        message: str,
        err: BaseException,
        log_data: Optional[Mapping[str, Any]] = None,
        event_data: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Log *err* and publish it as an event.

        ``log_data`` is only logged (troubleshooting details not shown to
        customers); ``event_data`` is only added to the event description.
        """
        error_id, description = create_error_event_description(err, message, event_data)
        self.error({**(log_data or {}), "errorId": error_id, "err": err}, description)
        self.publish_event(name, description)

    def step_start(self, step: StepMetadata) -> None:
        description = f'Starting step "{step.name}"...'
        self.info({"step": step.id}, description)
        self.publish_event("step_start", description)

    def step_success(self, step: StepMetadata) -> None:
        description = f'Completed step "{step.name}".'
        self.info({"step": step.id}, description)
        self.publish_event("step_end", description)

    def step_failure(self, step: StepMetadata, err: BaseException) -> None:
        error_id, description = create_error_event_description(
            err, f'Step "{step.name}" failed to complete due to error.'
        )
        self.error({"errorId": error_id, "err": err, "step": step.id}, description)
        self.publish_event("step_failure", description)

    def synchronization_upload_start(self, job: SynchronizationJob) -> None:
        description = "Uploading collected data for synchronization..."
        self.info({"synchronizationJobId": job.id}, description)
        self.publish_event("sync_upload_start", description)

    def synchronization_upload_end(self, job: SynchronizationJob) -> None:
        description = "Upload complete."
        self.info({"synchronizationJobId": job.id}, description)
        self.publish_event("sync_upload_end", description)

    def validation_failure(self, err: BaseException) -> None:
        error_id, description = create_error_event_description(
            err, "Error occurred while validating integration configuration."
        )
        self.error({"errorId": error_id, "err": err}, description)
        self.publish_event("validation_failure", description)


def create_logger(
    name: str,
    pretty: bool = False,
    serializers: Optional[Mapping[str, Serializer]] = None,
    on_publish_event: Optional[OnPublishEventListener] = None,
    on_publish_metric: Optional[OnPublishMetricListener] = None,
) -> IntegrationLogger:
    settings = load_settings()

    base = attach_split_stream_handlers(
        logging.getLogger(name),
        PrettyFormatter() if pretty else JsonFormatter(),
        level=settings.log_level,
    )

    context = LoggerContext(
        on_publish_event=on_publish_event,
        on_publish_metric=on_publish_metric,
        serializers={"err": serialize_error, **(serializers or {})},
    )
    return IntegrationLogger(base, context)


def _instance_config_fields(invocation_config: Any) -> Optional[Mapping[str, Any]]:
    if invocation_config is None:
        return None
    if isinstance(invocation_config, Mapping):
        return invocation_config.get("instanceConfigFields") or invocation_config.get("instance_config_fields")
    return getattr(invocation_config, "instance_config_fields", None)


def create_integration_logger(
    name: str,
    invocation_config: Any = None,
    pretty: bool = False,
    serializers: Optional[Mapping[str, Serializer]] = None,
    on_publish_event: Optional[OnPublishEventListener] = None,
    on_publish_metric: Optional[OnPublishMetricListener] = None,
) -> IntegrationLogger:
    """Create a logger that hides integration instance configuration values."""
    serialize_instance_config = create_instance_config_serializer(_instance_config_fields(invocation_config))

    def serialize_instance(instance: Any) -> Any:
        if not isinstance(instance, Mapping):
            return instance
        serialized = dict(instance)
        if serialized.get("config"):
            serialized["config"] = serialize_instance_config(serialized["config"])
        else:
            serialized.pop("config", None)
        return serialized

    return create_logger(
        name,
        pretty=pretty,
        serializers={
            "integrationInstanceConfig": serialize_instance_config,
            "instance": serialize_instance,
            **(serializers or {}),
        },
        on_publish_event=on_publish_event,
        on_publish_metric=on_publish_metric,
    )
