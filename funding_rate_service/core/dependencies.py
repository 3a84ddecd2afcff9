"""
Dependency Injection for FastAPI

Manages service instances and provides them to route handlers.
"""

from typing import Optional

from fastapi import HTTPException

from funding_rate_service.core.comparison_service import FundingComparisonService


class ServiceContainer:
    """Container for all service instances"""

    def __init__(self):
        self.comparison_service: Optional[FundingComparisonService] = None

    def set_comparison_service(self, service: FundingComparisonService):
        """Set the comparison service instance"""
        self.comparison_service = service

    def get_comparison_service(self) -> FundingComparisonService:
        """Get the comparison service instance"""
        if self.comparison_service is None:
            raise HTTPException(
                status_code=503,
                detail="Comparison service not initialized. Service may still be starting up."
            )
        return self.comparison_service


# Global container instance
services = ServiceContainer()


def get_comparison_service() -> FundingComparisonService:
    """FastAPI dependency to get the comparison service"""
    return services.get_comparison_service()
