"""Application interfaces (ports). Infrastructure implements these (DIP)."""

from crudkit.application.interfaces.repositories import IRepository, IUserRepository
from crudkit.application.interfaces.services import IPasswordHasher, IService, IUserService

__all__ = [
    "IPasswordHasher",
    "IRepository",
    "IService",
    "IUserRepository",
    "IUserService",
]
