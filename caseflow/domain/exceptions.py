"""Domain exceptions for the workflow engine.

Two families matter to the runner: configuration errors (engine-level, they
mark the execution failed) and channel errors (step-level, the execution
still completes). Persistence errors are SQLAlchemy's own and are not wrapped.
"""

from typing import Any


class CaseflowException(Exception):
    """Base exception for all caseflow errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. step_id, provider).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(CaseflowException):
    """Raised when input validation fails (e.g. unknown trigger kind)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(CaseflowException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'workflow', 'step').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class WorkflowConfigurationException(CaseflowException):
    """Raised for unknown action kinds, malformed step config or condition operators."""

    def __init__(self, message: str, step_id: str | None = None) -> None:
        details = {"step_id": step_id} if step_id else {}
        super().__init__(message, "WORKFLOW_CONFIGURATION_ERROR", details)


class ChannelDeliveryException(CaseflowException):
    """Raised when an external channel (email, SMS, chat) rejects or fails a send."""

    def __init__(
        self,
        channel: str,
        reason: str,
        recipient: str | None = None,
    ) -> None:
        """Initialize with channel name and failure reason.

        Args:
            channel: Channel identifier (e.g. 'email', 'slack').
            reason: Provider error or HTTP status text.
            recipient: Optional recipient address or channel.
        """
        details: dict[str, Any] = {"channel": channel, "reason": reason}
        if recipient:
            details["recipient"] = recipient
        super().__init__(
            f"{channel} delivery failed: {reason}", "CHANNEL_DELIVERY_ERROR", details
        )


class ChannelTimeoutException(ChannelDeliveryException):
    """Raised when a channel call exceeds channel_timeout_seconds."""

    def __init__(self, channel: str, timeout_seconds: float) -> None:
        super().__init__(channel, f"timed out after {timeout_seconds:g}s")
        self.error_code = "CHANNEL_TIMEOUT"
        self.details["timeout_seconds"] = timeout_seconds


class SqlNotConfiguredException(CaseflowException):
    """Raised when an operation requires a database but DATABASE_URL is not set."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
