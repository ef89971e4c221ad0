"""Workflow registry.

In-process store of running connection workflows keyed by workflow id.
Workflows are transient session state: nothing is persisted, and all of
them are torn down when the application shuts down so no polling timer
outlives the process.

Clients often walk away from a workflow without deleting it. The registry
therefore evicts workflows nobody has looked at for ``idle_ttl_seconds``
and, once ``max_workflows`` are live, the least recently used one. Both
checks run when a new workflow is created.
"""

import time
from collections import OrderedDict
from collections.abc import Callable
from uuid import UUID

from src.application.services.connection_lifecycle_controller import (
    ConnectionLifecycleController,
)
from src.core.enums import ErrorCode
from src.core.errors import NotFoundError
from src.core.result import Failure, Result, Success
from src.domain.protocols.logger_protocol import LoggerProtocol

ControllerFactory = Callable[[], ConnectionLifecycleController]


def _not_found(workflow_id: UUID) -> Failure[NotFoundError]:
    return Failure(
        error=NotFoundError(
            code=ErrorCode.WORKFLOW_NOT_FOUND,
            message=f"Connection workflow {workflow_id} not found",
            resource_type="ConnectionWorkflow",
            resource_id=str(workflow_id),
        )
    )


class WorkflowRegistry:
    """Creates, looks up and discards connection workflows.

    Attributes:
        _factory: Builds a fresh controller (with its own poller).
        _workflows: Live workflows by id, least recently used first.
        _last_seen: Clock reading of each workflow's last create or get.
        _logger: Structured logger.
    """

    def __init__(
        self,
        factory: ControllerFactory,
        logger: LoggerProtocol,
        *,
        idle_ttl_seconds: float = 1800.0,
        max_workflows: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if idle_ttl_seconds <= 0:
            raise ValueError("idle_ttl_seconds must be greater than 0")
        if max_workflows < 1:
            raise ValueError("max_workflows must be at least 1")
        self._factory = factory
        self._workflows: OrderedDict[UUID, ConnectionLifecycleController] = OrderedDict()
        self._last_seen: dict[UUID, float] = {}
        self._idle_ttl_seconds = idle_ttl_seconds
        self._max_workflows = max_workflows
        self._clock = clock
        self._logger = logger

    def __len__(self) -> int:
        return len(self._workflows)

    async def create(self) -> ConnectionLifecycleController:
        """Create and register a new IDLE workflow.

        Expired workflows are evicted first. When the registry is still
        full, the least recently used workflow makes room.
        """
        await self.evict_expired()
        while len(self._workflows) >= self._max_workflows:
            oldest_id = next(iter(self._workflows))
            await self._evict(oldest_id, reason="capacity")

        controller = self._factory()
        self._workflows[controller.workflow_id] = controller
        self._last_seen[controller.workflow_id] = self._clock()
        self._logger.debug("workflow_created", workflow_id=str(controller.workflow_id))
        return controller

    def get(self, workflow_id: UUID) -> Result[ConnectionLifecycleController, NotFoundError]:
        """Look up a workflow and mark it as recently used.

        Returns:
            Success(controller) or Failure(NotFoundError).
        """
        controller = self._workflows.get(workflow_id)
        if controller is None:
            return _not_found(workflow_id)
        self._workflows.move_to_end(workflow_id)
        self._last_seen[workflow_id] = self._clock()
        return Success(value=controller)

    async def discard(self, workflow_id: UUID) -> Result[None, NotFoundError]:
        """Cancel and forget a workflow."""
        controller = self._workflows.pop(workflow_id, None)
        if controller is None:
            return _not_found(workflow_id)
        self._last_seen.pop(workflow_id, None)
        await controller.aclose()
        self._logger.debug("workflow_discarded", workflow_id=str(workflow_id))
        return Success(value=None)

    async def evict_expired(self) -> int:
        """Close workflows idle for longer than the TTL.

        Returns:
            Number of workflows evicted.
        """
        cutoff = self._clock() - self._idle_ttl_seconds
        expired = []
        # Oldest first; stop at the first workflow still in use.
        for workflow_id in self._workflows:
            if self._last_seen[workflow_id] > cutoff:
                break
            expired.append(workflow_id)

        for workflow_id in expired:
            await self._evict(workflow_id, reason="idle")
        return len(expired)

    async def aclose_all(self) -> None:
        """Tear down every workflow (application shutdown)."""
        controllers = list(self._workflows.values())
        self._workflows.clear()
        self._last_seen.clear()
        for controller in controllers:
            await controller.aclose()
        if controllers:
            self._logger.info("workflows_closed", count=len(controllers))

    async def _evict(self, workflow_id: UUID, *, reason: str) -> None:
        controller = self._workflows.pop(workflow_id)
        self._last_seen.pop(workflow_id, None)
        await controller.aclose()
        self._logger.info(
            "workflow_evicted",
            workflow_id=str(workflow_id),
            state=controller.state.value,
            reason=reason,
        )
