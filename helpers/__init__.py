"""
Helper modules for the funding rate comparison service.
"""

from .unified_logger import get_logger, get_exchange_logger, get_service_logger

__all__ = [
    'get_logger',
    'get_exchange_logger',
    'get_service_logger',
]
