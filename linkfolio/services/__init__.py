"""Service layer: database operations behind the API routes."""

from linkfolio.services import link as link_service
from linkfolio.services import profile as profile_service

__all__ = ["link_service", "profile_service"]
