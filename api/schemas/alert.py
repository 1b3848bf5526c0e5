"""
Alert Schemas
Pydantic models for the missed-medication check responses
"""

from typing import List, Literal
from pydantic import BaseModel, Field


class ProcessedDose(BaseModel):
    """One dose attempted during a run"""
    patient: int
    medication: str
    medication_id: int
    action: Literal["create", "update"]
    status: Literal["sent", "skipped_no_config", "failed"]
    logged: bool = False


class CheckMissedMedsResponse(BaseModel):
    """Result of one alerting pass"""
    success: bool = True
    processed: List[ProcessedDose] = Field(default_factory=list)
    time_ms: float = Field(..., ge=0)


class AlertErrorResponse(BaseModel):
    """Fatal job failure"""
    error: str
