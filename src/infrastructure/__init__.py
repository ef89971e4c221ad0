"""Infrastructure layer - Adapters and external integrations.

This layer contains implementations of domain protocols (ports):
- Backend API client (httpx) for the cloud-connection endpoints
- Structured logging (structlog)
- In-memory event bus and its handlers

Structure:
- backend/: HTTP client for the backend REST API
- logging/: Logger adapters
- events/: Event bus and event handlers

The infrastructure layer depends on the domain layer (implements protocols)
but the domain layer does NOT depend on infrastructure.
"""
