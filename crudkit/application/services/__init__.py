"""Application services: generic BaseService and entity-specific services."""

from crudkit.application.services.base_service import BaseService
from crudkit.application.services.user_service import UserService, user_to_result

__all__ = ["BaseService", "UserService", "user_to_result"]
