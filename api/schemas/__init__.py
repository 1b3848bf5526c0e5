"""
API Schemas
Pydantic models for request/response validation
"""

from api.schemas.alert import (
    AlertErrorResponse,
    CheckMissedMedsResponse,
    ProcessedDose,
)

__all__ = [
    "AlertErrorResponse",
    "CheckMissedMedsResponse",
    "ProcessedDose",
]
