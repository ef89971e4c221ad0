"""Domain layer - Pure business logic.

Entities, enums, errors, domain events and protocols (ports) of the automated
cloud-account connection workflow. The domain layer has NO dependencies on
any framework or infrastructure.

Structure:
- entities/: ConnectionIntent, ConnectionRecord, PollingSession
- enums/: WorkflowState, ConnectionCheckStatus, ConnectionKind
- errors/: Workflow and backend error values
- events/: Things that happened (CloudProvidersChanged)
- protocols/: Ports implemented by infrastructure adapters
"""
