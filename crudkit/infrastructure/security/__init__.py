"""Security helpers (password hashing)."""

from crudkit.infrastructure.security.password import BcryptPasswordHasher

__all__ = ["BcryptPasswordHasher"]
