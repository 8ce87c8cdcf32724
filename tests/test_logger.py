"""Tests for the integration logger."""

import json
import logging
import uuid

import pytest

from graph_schema_testing.exceptions import (
    PROVIDER_AUTH_ERROR_DESCRIPTION,
    IntegrationError,
    IntegrationProviderAuthenticationError,
    IntegrationValidationError,
)
from graph_schema_testing.logger import (
    ErrorPayload,
    FieldsPayload,
    IntegrationEvent,
    Metric,
    PlainMessage,
    StepMetadata,
    SynchronizationJob,
    classify_log_input,
    create_error_event_description,
    create_instance_config_serializer,
    create_integration_logger,
    create_logger,
)


@pytest.fixture
def events():
    return []


@pytest.fixture
def logger_name():
    return f"test-integration-{uuid.uuid4()}"


def _lines(stream):
    return [json.loads(line) for line in stream.splitlines() if line.strip()]


def test_classify_log_input():
    err = ValueError("boom")

    assert classify_log_input(err) == ErrorPayload(err=err, message="boom")
    assert classify_log_input(err, "failed %s", "step") == ErrorPayload(err=err, message="failed step")
    assert classify_log_input({"a": 1}, "with fields") == FieldsPayload(fields={"a": 1}, message="with fields")
    assert classify_log_input("count=%d", 3) == PlainMessage(message="count=3")
    assert classify_log_input() == PlainMessage(message="")


def test_info_goes_to_stdout_as_json(capsys, logger_name):
    logger = create_logger(logger_name)

    logger.child(step="fetch-users").info({"count": 2}, "Fetched %s users", 2)

    out, err = capsys.readouterr()
    (line,) = _lines(out)
    assert err == ""
    assert line["name"] == logger_name
    assert line["level"] == "INFO"
    assert line["msg"] == "Fetched 2 users"
    assert line["step"] == "fetch-users"
    assert line["count"] == 2


def test_errors_go_to_stderr_with_serialized_error(capsys, logger_name):
    logger = create_logger(logger_name)

    logger.error(IntegrationError("BAD_THING", "bad thing happened"), "Something failed")

    out, err = capsys.readouterr()
    (line,) = _lines(err)
    assert out == ""
    assert line["msg"] == "Something failed"
    assert line["err"]["message"] == "bad thing happened"
    assert line["err"]["name"] == "IntegrationError"
    assert line["err"]["code"] == "BAD_THING"


def test_child_shares_handled_error_set(logger_name):
    parent = create_logger(logger_name)
    child = parent.child(step="a").child(page=2)
    logged = RuntimeError("logged")
    field_logged = RuntimeError("logged as field")

    child.error(logged)
    child.error({"err": field_logged}, "field error")

    assert parent.is_handled_error(logged)
    assert parent.is_handled_error(field_logged)
    assert child.context is parent.context
    assert not parent.is_handled_error(RuntimeError("other"))


def test_trace_adds_verbose_and_respects_level(capsys, logger_name, monkeypatch):
    create_logger(logger_name).trace("hidden")
    assert capsys.readouterr().out == ""

    monkeypatch.setenv("LOG_LEVEL", "trace")
    create_logger(logger_name).trace({"page": 1}, "visible")

    (line,) = _lines(capsys.readouterr().out)
    assert line["verbose"] is True
    assert line["page"] == 1
    assert line["level"] == "TRACE"


def test_step_lifecycle_events(events, logger_name):
    logger = create_logger(logger_name, on_publish_event=events.append)
    step = StepMetadata(id="fetch-users", name="Fetch Users")

    logger.step_start(step)
    logger.step_success(step)
    logger.synchronization_upload_start(SynchronizationJob(id="job-1"))
    logger.synchronization_upload_end(SynchronizationJob(id="job-1"))

    assert events == [
        IntegrationEvent("step_start", 'Starting step "Fetch Users"...'),
        IntegrationEvent("step_end", 'Completed step "Fetch Users".'),
        IntegrationEvent("sync_upload_start", "Uploading collected data for synchronization..."),
        IntegrationEvent("sync_upload_end", "Upload complete."),
    ]


def test_step_failure_event(events, logger_name):
    logger = create_logger(logger_name, on_publish_event=events.append)
    err = IntegrationError("FETCH_FAILED", "could not fetch")

    logger.step_failure(StepMetadata(id="fetch-users", name="Fetch Users"), err)

    (event,) = events
    assert event.name == "step_failure"
    assert event.description.startswith('Step "Fetch Users" failed to complete due to error. (errorCode="FETCH_FAILED"')
    assert event.description.endswith('reason="could not fetch")')
    assert logger.is_handled_error(err)


def test_validation_failure_event(events, logger_name):
    logger = create_logger(logger_name, on_publish_event=events.append)

    logger.validation_failure(IntegrationValidationError("missing apiKey"))

    (event,) = events
    assert event.name == "validation_failure"
    assert event.description.startswith(
        'Error occurred while validating integration configuration. (errorCode="CONFIG_VALIDATION_ERROR"'
    )


def test_events_can_be_disabled(events, logger_name, monkeypatch):
    monkeypatch.setenv("JUPITERONE_DISABLE_EVENT_LOGGING", "true")
    logger = create_logger(logger_name, on_publish_event=events.append)

    logger.publish_event("custom", "ignored")
    logger.step_start(StepMetadata(id="s", name="S"))

    assert events == []


def test_publish_error_event(events, logger_name, capsys):
    logger = create_logger(logger_name, on_publish_event=events.append)
    err = ValueError("unexpected")

    logger.publish_error_event("custom_error", "Custom failure", err, log_data={"secret": "x"}, event_data={"page": 3})

    (event,) = events
    assert event.name == "custom_error"
    assert event.description.startswith('Custom failure (errorCode="UNEXPECTED_ERROR", errorId="')
    assert event.description.endswith(", page=3)")
    assert "secret" not in event.description

    (line,) = _lines(capsys.readouterr().err)
    assert line["secret"] == "x"
    assert line["errorId"] in event.description


def test_publish_metric(logger_name):
    metrics = []
    logger = create_logger(logger_name, on_publish_metric=metrics.append)
    metric = Metric(name="duration", value=12.5, unit="Milliseconds")

    logger.child(step="a").publish_metric(metric)

    assert metrics == [metric]


def test_provider_auth_error_description():
    err = IntegrationProviderAuthenticationError("https://api.example.com/users", 401, "Unauthorized")

    error_id, description = create_error_event_description(err, "Step failed.")

    assert PROVIDER_AUTH_ERROR_DESCRIPTION in description
    assert f'errorId="{error_id}"' in description
    assert 'errorCode="PROVIDER_AUTHENTICATION_ERROR"' in description


def test_instance_config_serializer():
    serialize = create_instance_config_serializer(
        {"apiKey": {"type": "string", "mask": True}, "org": {"type": "string"}}
    )

    assert serialize({"apiKey": "abcdefgh1234", "org": "acme", "other": "value"}) == {
        "apiKey": "****1234",
        "org": "acme",
        "other": "***",
    }
    assert serialize(None) is None


def test_integration_logger_masks_instance_config(capsys, logger_name):
    logger = create_integration_logger(
        logger_name,
        invocation_config={"instanceConfigFields": {"apiKey": {"mask": True}}},
    )

    logger.info(
        {
            "integrationInstanceConfig": {"apiKey": "secret-value-9876"},
            "instance": {"id": "instance-1", "config": {"apiKey": "secret-value-9876", "org": "acme"}},
        },
        "Starting",
    )

    (line,) = _lines(capsys.readouterr().out)
    assert line["integrationInstanceConfig"] == {"apiKey": "****9876"}
    assert line["instance"] == {"id": "instance-1", "config": {"apiKey": "****9876", "org": "***"}}


def test_integration_logger_drops_empty_instance_config(capsys, logger_name):
    logger = create_integration_logger(logger_name)

    logger.info({"instance": {"id": "instance-1", "config": {}}}, "Starting")

    (line,) = _lines(capsys.readouterr().out)
    assert line["instance"] == {"id": "instance-1"}


def test_pretty_output(capsys, logger_name):
    logger = create_logger(logger_name, pretty=True)

    logger.info({"count": 1}, "Hello")

    out = capsys.readouterr().out
    assert "INFO" in out
    assert "Hello" in out
    assert "count=1" in out


def test_logger_does_not_propagate(logger_name):
    create_logger(logger_name)

    assert logging.getLogger(logger_name).propagate is False
