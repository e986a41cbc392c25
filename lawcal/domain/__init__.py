"""Domain layer - 外部依存なしのドメインモデルとインターフェース定義"""

from lawcal.domain.errors import (
    AuthMissing,
    ConfigError,
    LawCalError,
    NetworkError,
    RequestFailed,
    ValidationFailed,
)
from lawcal.domain.models import (
    CaseSummary,
    CreateEventData,
    DayCell,
    Event,
    EventFilters,
    EventStats,
    EventStatus,
    EventType,
    Priority,
    UpdateEventData,
    ViewMode,
)
from lawcal.domain.ports import (
    CaseDirectory,
    CredentialProvider,
    EventStore,
)

__all__ = [
    # Models
    "EventType",
    "EventStatus",
    "Priority",
    "ViewMode",
    "Event",
    "CreateEventData",
    "UpdateEventData",
    "EventFilters",
    "CaseSummary",
    "EventStats",
    "DayCell",
    # Errors
    "LawCalError",
    "ConfigError",
    "AuthMissing",
    "ValidationFailed",
    "RequestFailed",
    "NetworkError",
    # Ports
    "CredentialProvider",
    "EventStore",
    "CaseDirectory",
]
