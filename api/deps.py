"""
API Dependencies
Common dependencies for FastAPI endpoints
"""


class ServiceDependency:
    """
    Dependency injection for services
    """

    @staticmethod
    def get_missed_dose_service():
        from services.missed_dose_service import MissedDoseService
        return MissedDoseService()


# Service dependency instances
services = ServiceDependency()


def get_missed_dose_service():
    """Alerting job with the configured email transport and database"""
    return services.get_missed_dose_service()


__all__ = [
    "services",
    "get_missed_dose_service",
]
