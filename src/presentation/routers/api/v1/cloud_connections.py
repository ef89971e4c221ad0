"""Cloud connection workflow handlers.

Handler functions for the automated cloud-account connection workflow.
Workflows are in-process session state held by the WorkflowRegistry.

Handlers:
    create_cloud_connection   - Validate the form and initiate a connection
    get_cloud_connection      - Current workflow snapshot
    start_polling             - User opened the provisioning console
    verify_cloud_connection   - Manual verification
    reset_cloud_connection    - Leave ERROR/CONNECTED for a new attempt
    delete_cloud_connection   - Cancel and discard the workflow
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Request, status
from fastapi.responses import JSONResponse, Response

from src.application.dtos.connection_dtos import WorkflowSnapshot
from src.application.errors import to_application_error
from src.application.services.workflow_registry import WorkflowRegistry
from src.core.container import get_workflow_registry
from src.core.errors import DomainError
from src.core.result import Failure, Result
from src.presentation.routers.api.middleware.trace_middleware import get_trace_id
from src.presentation.routers.api.v1.errors import ErrorResponseBuilder
from src.schemas.cloud_connection_schemas import (
    CloudConnectionWorkflowResponse,
    CreateCloudConnectionRequest,
)

router = APIRouter(prefix="/cloud-connections", tags=["Cloud Connections"])

WorkflowId = Annotated[UUID, Path(description="Connection workflow UUID")]


def _error_response(error: DomainError, request: Request) -> JSONResponse:
    return ErrorResponseBuilder.from_application_error(
        error=to_application_error(error),
        request=request,
        trace_id=get_trace_id() or "",
    )


def _snapshot_response(
    result: Result[WorkflowSnapshot, DomainError],
    request: Request,
) -> CloudConnectionWorkflowResponse | JSONResponse:
    if isinstance(result, Failure):
        return _error_response(result.error, request)
    return CloudConnectionWorkflowResponse.from_dto(result.value)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=CloudConnectionWorkflowResponse,
    summary="Start an automated cloud connection",
)
async def create_cloud_connection(
    request: Request,
    data: CreateCloudConnectionRequest,
    registry: WorkflowRegistry = Depends(get_workflow_registry),
) -> CloudConnectionWorkflowResponse | JSONResponse:
    """Validate the form and initiate a connection.

    POST /api/v1/cloud-connections → 201 Created

    The workflow is created even when initiation fails; its snapshot is then
    in the error state. Invalid input is rejected with 400 and no workflow
    is kept.

    Returns:
        CloudConnectionWorkflowResponse in awaiting_external_step or error.
        JSONResponse with RFC 7807 error on validation failure.
    """
    controller = await registry.create()
    result = await controller.submit(data.display_name, data.external_account_id)

    if isinstance(result, Failure):
        await registry.discard(controller.workflow_id)
        return _error_response(result.error, request)

    return CloudConnectionWorkflowResponse.from_dto(result.value)


@router.get(
    "/{workflow_id}",
    response_model=CloudConnectionWorkflowResponse,
    summary="Get connection workflow",
)
async def get_cloud_connection(
    request: Request,
    workflow_id: WorkflowId,
    registry: WorkflowRegistry = Depends(get_workflow_registry),
) -> CloudConnectionWorkflowResponse | JSONResponse:
    """Current workflow snapshot.

    GET /api/v1/cloud-connections/{id} → 200 OK
    """
    lookup = registry.get(workflow_id)
    if isinstance(lookup, Failure):
        return _error_response(lookup.error, request)

    return CloudConnectionWorkflowResponse.from_dto(lookup.value.snapshot())


@router.post(
    "/{workflow_id}/polling",
    response_model=CloudConnectionWorkflowResponse,
    summary="Start automatic detection",
)
async def start_polling(
    request: Request,
    workflow_id: WorkflowId,
    registry: WorkflowRegistry = Depends(get_workflow_registry),
) -> CloudConnectionWorkflowResponse | JSONResponse:
    """User opened the provisioning console.

    POST /api/v1/cloud-connections/{id}/polling → 200 OK
    """
    lookup = registry.get(workflow_id)
    if isinstance(lookup, Failure):
        return _error_response(lookup.error, request)

    return _snapshot_response(lookup.value.mark_external_step_opened(), request)


@router.post(
    "/{workflow_id}/verifications",
    response_model=CloudConnectionWorkflowResponse,
    summary="Verify connection now",
)
async def verify_cloud_connection(
    request: Request,
    workflow_id: WorkflowId,
    registry: WorkflowRegistry = Depends(get_workflow_registry),
) -> CloudConnectionWorkflowResponse | JSONResponse:
    """Run the authoritative verification.

    POST /api/v1/cloud-connections/{id}/verifications → 200 OK

    A "not ready yet" answer is not an error: the snapshot comes back in the
    state the workflow was in, with a message asking to retry.
    """
    lookup = registry.get(workflow_id)
    if isinstance(lookup, Failure):
        return _error_response(lookup.error, request)

    return _snapshot_response(await lookup.value.verify_manually(), request)


@router.post(
    "/{workflow_id}/reset",
    response_model=CloudConnectionWorkflowResponse,
    summary="Reset finished workflow",
)
async def reset_cloud_connection(
    request: Request,
    workflow_id: WorkflowId,
    registry: WorkflowRegistry = Depends(get_workflow_registry),
) -> CloudConnectionWorkflowResponse | JSONResponse:
    """POST /api/v1/cloud-connections/{id}/reset → 200 OK"""
    lookup = registry.get(workflow_id)
    if isinstance(lookup, Failure):
        return _error_response(lookup.error, request)

    return _snapshot_response(lookup.value.reset(), request)


@router.delete(
    "/{workflow_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_model=None,
    summary="Cancel connection workflow",
)
async def delete_cloud_connection(
    request: Request,
    workflow_id: WorkflowId,
    registry: WorkflowRegistry = Depends(get_workflow_registry),
) -> Response:
    """Cancel the workflow and forget it.

    DELETE /api/v1/cloud-connections/{id} → 204 No Content
    """
    result = await registry.discard(workflow_id)
    if isinstance(result, Failure):
        return _error_response(result.error, request)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
