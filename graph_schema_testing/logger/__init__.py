"""Structured logging for integration runs."""

from .events import (
    IntegrationEvent,
    Metric,
    StepMetadata,
    SynchronizationJob,
    create_error_event_description,
    is_provider_auth_error,
)
from .integration_logger import (
    ErrorPayload,
    FieldsPayload,
    IntegrationLogger,
    LogInput,
    LoggerContext,
    PlainMessage,
    classify_log_input,
    create_instance_config_serializer,
    create_integration_logger,
    create_logger,
    serialize_error,
)
