"""
Enums for models.
"""
from enum import Enum


class SessionStatus(str, Enum):
    """Study session lifecycle. COMPLETED and CANCELLED are terminal."""
    CREATED = "created"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
