"""Domain layer: entity capability and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from crudkit.domain.entity import Entity
from crudkit.domain.exceptions import (
    BusinessRuleException,
    CacheException,
    CrudKitException,
    PersistenceException,
    ResourceNotFoundException,
    ValidationException,
)

__all__ = [
    "BusinessRuleException",
    "CacheException",
    "CrudKitException",
    "Entity",
    "PersistenceException",
    "ResourceNotFoundException",
    "ValidationException",
]
