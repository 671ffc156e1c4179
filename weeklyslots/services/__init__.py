"""
Service layer helpers that orchestrate store adapters and domain logic.
"""

from .availability_service import AvailabilityService, AvailabilityStoreProtocol

__all__ = ["AvailabilityService", "AvailabilityStoreProtocol"]
