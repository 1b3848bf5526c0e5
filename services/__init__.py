"""
Services Module
Business logic layer for the MedAlert application
"""

from services.patient_service import PatientService, patient_service
from services.medication_service import MedicationService, medication_service
from services.log_service import MedicationLogService, LogReconcileError, medication_log_service
from services.missed_dose_service import (
    MissedDoseService,
    AlertJobError,
    AlertRunReport,
    DoseOutcome,
    check_missed_medications,
)


__all__ = [
    # Service classes
    "PatientService",
    "MedicationService",
    "MedicationLogService",
    "MissedDoseService",
    # Results and errors
    "AlertRunReport",
    "DoseOutcome",
    "AlertJobError",
    "LogReconcileError",
    # Singleton instances
    "patient_service",
    "medication_service",
    "medication_log_service",
    "check_missed_medications",
]
