"""
API routes
"""

from funding_rate_service.api.routes import funding_rates, health

__all__ = [
    "funding_rates",
    "health",
]
