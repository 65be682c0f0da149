"""Tests for domain exceptions (error_code, message, details)."""

from caseflow.domain.exceptions import (
    CaseflowException,
    ChannelDeliveryException,
    ChannelTimeoutException,
    ResourceNotFoundException,
    SqlNotConfiguredException,
    ValidationException,
    WorkflowConfigurationException,
)


def test_caseflow_exception_default_error_code() -> None:
    """Base CaseflowException uses class name as error_code when not provided."""
    exc = CaseflowException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "CaseflowException"
    assert exc.details == {}


def test_caseflow_exception_custom_error_code_and_details() -> None:
    exc = CaseflowException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.error_code == "CUSTOM"
    assert exc.details == {"key": "value"}
    assert str(exc) == "Oops"


def test_validation_exception() -> None:
    """ValidationException sets VALIDATION_ERROR and optional field in details."""
    exc = ValidationException("Unknown trigger kind", field="trigger")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "trigger"}


def test_validation_exception_without_field() -> None:
    exc = ValidationException("Invalid")
    assert exc.details == {}


def test_resource_not_found_exception() -> None:
    exc = ResourceNotFoundException("workflow", "wf1")
    assert exc.message == "workflow not found: wf1"
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert exc.details == {"resource_type": "workflow", "resource_id": "wf1"}


def test_workflow_configuration_exception() -> None:
    exc = WorkflowConfigurationException("Unknown action kind: 'x'", step_id="s1")
    assert exc.error_code == "WORKFLOW_CONFIGURATION_ERROR"
    assert exc.details == {"step_id": "s1"}
    assert WorkflowConfigurationException("bad").details == {}


def test_channel_delivery_exception() -> None:
    exc = ChannelDeliveryException("email", "HTTP 401", recipient="a@b.test")
    assert exc.message == "email delivery failed: HTTP 401"
    assert exc.error_code == "CHANNEL_DELIVERY_ERROR"
    assert exc.details == {
        "channel": "email",
        "reason": "HTTP 401",
        "recipient": "a@b.test",
    }


def test_channel_timeout_is_a_delivery_failure() -> None:
    exc = ChannelTimeoutException("slack", 2.5)
    assert isinstance(exc, ChannelDeliveryException)
    assert exc.error_code == "CHANNEL_TIMEOUT"
    assert exc.message == "slack delivery failed: timed out after 2.5s"
    assert exc.details["timeout_seconds"] == 2.5


def test_sql_not_configured_exception() -> None:
    exc = SqlNotConfiguredException()
    assert exc.error_code == "SERVICE_UNAVAILABLE"
    assert "SQL database" in exc.message
