"""
Application services layer.

Services orchestrate draft operations using the draft store and domain services.
"""

# Result type for consistent error handling
from services.result import Result

# Service interfaces (ABCs)
from services.interfaces import (
    IAnnouncer,
    ICaptainService,
    IDraftService,
    IMatchHistory,
    IPersistedSessionReader,
)

from services.draft_state_manager import DraftStateManager
from services.captain_service import CaptainService
from services.draft_service import DraftService

__all__ = [
    # Concrete services
    "DraftStateManager",
    "CaptainService",
    "DraftService",
    # Result type
    "Result",
    # Interfaces
    "IPersistedSessionReader",
    "IAnnouncer",
    "IMatchHistory",
    "ICaptainService",
    "IDraftService",
]
