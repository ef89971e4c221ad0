"""Application layer - Use cases and orchestration.

Structure:
- services/: Workflow services (request builder, initiation, polling,
  verification, lifecycle controller, registry)
- dtos/: ConnectionRequest, WorkflowSnapshot
- errors/: ApplicationError for the presentation layer

The application layer orchestrates domain logic and talks to the backend only
through domain protocols.
"""
