"""Problem Details (RFC 7807) response models.

https://tools.ietf.org/html/rfc7807
"""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """One form field that failed validation.

    Examples:
        >>> ErrorDetail(
        ...     field="external_account_id",
        ...     code="invalid_account_id",
        ...     message="Account ID must be exactly 12 digits",
        ... )
    """

    field: str = Field(..., description="Request field", examples=["external_account_id"])
    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Text shown next to the field")


class ProblemDetails(BaseModel):
    """Error body returned by every failed workflow request.

    ``trace_id`` matches the ``X-Trace-Id`` response header and the
    ``trace_id`` bound into the server's log lines for the request.
    """

    type: str = Field(
        ...,
        description="Problem type URI",
        examples=["http://localhost:8000/errors/conflict"],
    )
    title: str = Field(..., description="Problem type summary", examples=["Invalid Workflow Transition"])
    status: int = Field(..., description="HTTP status code", examples=[409])
    detail: str = Field(
        ...,
        description="What went wrong for this request",
        examples=["Cannot start polling while the workflow is error"],
    )
    instance: str = Field(
        ...,
        description="Request path",
        examples=["/api/v1/cloud-connections/0192f3c4-5d6e-7f80-9a1b-2c3d4e5f6a7b/polling"],
    )
    errors: list[ErrorDetail] | None = Field(None, description="Field errors for invalid input")
    trace_id: str | None = Field(None, description="Request trace ID")
