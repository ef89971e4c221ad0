"""Shared HTTP plumbing for the cost-dashboard backend.

Every backend call ends in Success, carrying the decoded JSON object where
the caller needs one, or in a BackendError. Network failures, 429 and 5xx
answers are worth retrying. Other 4xx answers keep the backend's own
explanation because the verification step shows it to the user.

CloudConnectionAPIClient builds paths and request bodies on top of this.
"""

from typing import Any

import httpx
import structlog

from src.core.constants import (
    BACKEND_TIMEOUT_DEFAULT,
    BEARER_PREFIX,
    RESPONSE_BODY_MAX_LENGTH,
)
from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.errors import (
    BackendAuthenticationError,
    BackendError,
    BackendInvalidResponseError,
    BackendRateLimitError,
    BackendRejectedError,
    BackendUnavailableError,
)


class BaseBackendAPIClient:
    """Turns httpx calls against the backend into Result values.

    Attributes:
        _base_url: Backend API base URL (without trailing slash).
        _api_token: Optional bearer token.
        _timeout: HTTP request timeout in seconds.
        _logger: Structured logger.
    """

    def __init__(
        self,
        *,
        base_url: str,
        api_token: str | None = None,
        timeout: float = BACKEND_TIMEOUT_DEFAULT,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_token = api_token
        self._timeout = timeout
        self._logger = structlog.get_logger("backend_api")

    def _build_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_token:
            headers["Authorization"] = f"{BEARER_PREFIX}{self._api_token}"
        return headers

    async def _execute_request(
        self,
        *,
        method: str,
        path: str,
        json_data: dict[str, Any] | None = None,
        operation: str,
    ) -> Result[httpx.Response, BackendError]:
        """Send one request; only transport failures become errors here.

        Any HTTP status, 5xx included, comes back as Success(response) and is
        judged by _check_error_response.

        Returns:
            Success(httpx.Response) or a transient Failure(BackendUnavailableError).
        """
        url = f"{self._base_url}{path}"

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=self._build_headers(),
                    json=json_data,
                )
            return Success(value=response)

        except httpx.TimeoutException as e:
            self._logger.warning(
                "backend_api_timeout",
                operation=operation,
                error=str(e),
            )
            return Failure(
                error=BackendUnavailableError(
                    code=ErrorCode.BACKEND_UNAVAILABLE,
                    message="Backend request timed out",
                    operation=operation,
                    is_transient=True,
                )
            )

        except httpx.RequestError as e:
            self._logger.warning(
                "backend_api_connection_error",
                operation=operation,
                error=str(e),
            )
            return Failure(
                error=BackendUnavailableError(
                    code=ErrorCode.BACKEND_UNAVAILABLE,
                    message=f"Failed to connect to backend: {e}",
                    operation=operation,
                    is_transient=True,
                )
            )

    @staticmethod
    def _extract_error_message(response: httpx.Response) -> str | None:
        """Pull the backend's ``error``/``message`` text out of a response body."""
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict):
            for key in ("error", "message"):
                value = body.get(key)
                if isinstance(value, str) and value:
                    return value
        return None

    def _check_error_response(
        self,
        response: httpx.Response,
        operation: str,
    ) -> Failure[BackendError] | None:
        """Classify a non-2xx response.

        Returns:
            None for 2xx, otherwise the Failure the caller should return.
        """
        status = response.status_code

        if 200 <= status < 300:
            return None

        # Retry-After is honoured only in its delay-seconds form
        if status == 429:
            retry_after = response.headers.get("Retry-After")
            retry_seconds = int(retry_after) if retry_after and retry_after.isdigit() else None
            self._logger.warning(
                "backend_api_rate_limited",
                operation=operation,
                retry_after=retry_seconds,
            )
            return Failure(
                error=BackendRateLimitError(
                    code=ErrorCode.RATE_LIMITED,
                    message="Backend rate limit exceeded",
                    operation=operation,
                    retry_after=retry_seconds,
                )
            )

        if status in (401, 403):
            self._logger.warning(
                "backend_api_auth_failed",
                operation=operation,
                status_code=status,
            )
            return Failure(
                error=BackendAuthenticationError(
                    code=ErrorCode.BACKEND_AUTHENTICATION_FAILED,
                    message="Backend rejected the API credentials",
                    operation=operation,
                    details={"status_code": status},
                )
            )

        if status >= 500:
            backend_message = self._extract_error_message(response)
            self._logger.warning(
                "backend_api_server_error",
                operation=operation,
                status_code=status,
                backend_message=backend_message,
            )
            return Failure(
                error=BackendUnavailableError(
                    code=ErrorCode.BACKEND_UNAVAILABLE,
                    message=backend_message or f"Backend server error: {status}",
                    operation=operation,
                    is_transient=True,
                    details={"status_code": status},
                )
            )

        # 4xx: the backend explains why, e.g. the role cannot be assumed yet
        backend_message = self._extract_error_message(response)
        self._logger.info(
            "backend_api_request_rejected",
            operation=operation,
            status_code=status,
            backend_message=backend_message,
        )
        return Failure(
            error=BackendRejectedError(
                code=ErrorCode.BACKEND_REQUEST_REJECTED,
                message=backend_message or f"Backend rejected request: {status}",
                operation=operation,
                status_code=status,
                details={"response_body": response.text[:RESPONSE_BODY_MAX_LENGTH]},
            )
        )

    def _parse_json_object(
        self,
        response: httpx.Response,
        operation: str,
    ) -> Result[dict[str, Any], BackendError]:
        """Decode a successful response whose body must be a JSON object."""
        error_result = self._check_error_response(response, operation)
        if error_result is not None:
            return error_result

        try:
            data = response.json()
        except ValueError as e:
            self._logger.error(
                "backend_api_invalid_json",
                operation=operation,
                error=str(e),
            )
            return Failure(
                error=BackendInvalidResponseError(
                    code=ErrorCode.BACKEND_INVALID_RESPONSE,
                    message="Invalid JSON response from backend",
                    operation=operation,
                    response_body=response.text[:RESPONSE_BODY_MAX_LENGTH],
                )
            )

        if not isinstance(data, dict):
            self._logger.warning(
                "backend_api_unexpected_format",
                operation=operation,
                data_type=type(data).__name__,
            )
            return Failure(
                error=BackendInvalidResponseError(
                    code=ErrorCode.BACKEND_INVALID_RESPONSE,
                    message="Expected object response from backend",
                    operation=operation,
                    response_body=response.text[:RESPONSE_BODY_MAX_LENGTH],
                )
            )

        self._logger.debug("backend_api_succeeded", operation=operation)
        return Success(value=data)

    async def _execute_and_parse_object(
        self,
        *,
        method: str,
        path: str,
        json_data: dict[str, Any] | None = None,
        operation: str,
    ) -> Result[dict[str, Any], BackendError]:
        """Request that returns a JSON object (initiate, status, verify)."""
        result = await self._execute_request(
            method=method,
            path=path,
            json_data=json_data,
            operation=operation,
        )

        if isinstance(result, Failure):
            return result

        return self._parse_json_object(result.value, operation)

    async def _execute_and_check(
        self,
        *,
        method: str,
        path: str,
        json_data: dict[str, Any] | None = None,
        operation: str,
    ) -> Result[None, BackendError]:
        """Request whose body is ignored (cleanup, data sync)."""
        result = await self._execute_request(
            method=method,
            path=path,
            json_data=json_data,
            operation=operation,
        )

        if isinstance(result, Failure):
            return result

        error_result = self._check_error_response(result.value, operation)
        if error_result is not None:
            return error_result

        self._logger.debug("backend_api_succeeded", operation=operation)
        return Success(value=None)
