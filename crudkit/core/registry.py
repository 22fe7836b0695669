"""Composition registry: explicit contract -> implementation wiring.

Every repository and service is registered by build_registry() at startup.
register() checks that the implementation satisfies the contract protocol,
so a missing method fails when the app is built, not on the first request.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar, cast

from sqlalchemy.ext.asyncio import AsyncSession

from crudkit.application.interfaces import IPasswordHasher, IUserRepository, IUserService
from crudkit.application.services.user_service import UserService
from crudkit.core.config import Settings
from crudkit.infrastructure.cache.cache_protocol import CacheProtocol
from crudkit.infrastructure.persistence.repositories.user_repo import UserRepository
from crudkit.infrastructure.security.password import BcryptPasswordHasher

logger = logging.getLogger(__name__)

C = TypeVar("C")


@dataclass(frozen=True)
class Scope:
    """Per-request resources handed to factories."""

    db: AsyncSession
    cache: CacheProtocol


Factory = Callable[["ServiceRegistry", Scope], Any]


class ServiceRegistry:
    """Maps contract protocols to factories building their implementation."""

    def __init__(self) -> None:
        self._factories: dict[type, Factory] = {}
        self._implementations: dict[type, type] = {}

    def register(self, contract: type, implementation: type, factory: Factory) -> None:
        """Register implementation for contract.

        Raises:
            TypeError: If implementation does not satisfy the contract protocol.
            ValueError: If contract is already registered.
        """
        if contract in self._factories:
            raise ValueError(f"{contract.__name__} is already registered")
        if not issubclass(implementation, contract):
            raise TypeError(
                f"{implementation.__name__} does not implement {contract.__name__}"
            )
        self._factories[contract] = factory
        self._implementations[contract] = implementation
        logger.debug("Registered %s -> %s", contract.__name__, implementation.__name__)

    def resolve(self, contract: type[C], scope: Scope) -> C:
        """Build the implementation registered for contract.

        Raises:
            LookupError: If nothing is registered for contract.
        """
        try:
            factory = self._factories[contract]
        except KeyError:
            raise LookupError(f"No implementation registered for {contract.__name__}") from None
        return cast(C, factory(self, scope))

    def implementation_of(self, contract: type) -> type:
        return self._implementations[contract]

    def __contains__(self, contract: object) -> bool:
        return contract in self._factories


def build_registry(settings: Settings) -> ServiceRegistry:
    """Register every repository and service. Called once from create_app()."""
    registry = ServiceRegistry()
    database = settings.database
    password_hasher = BcryptPasswordHasher(rounds=settings.bcrypt_rounds)

    registry.register(
        IUserRepository,
        UserRepository,
        lambda reg, scope: UserRepository(
            scope.db,
            retry_attempts=database.retry_attempts,
            retry_max_wait=database.retry_max_wait,
        ),
    )
    registry.register(
        IPasswordHasher,
        BcryptPasswordHasher,
        lambda reg, scope: password_hasher,
    )
    registry.register(
        IUserService,
        UserService,
        lambda reg, scope: UserService(
            reg.resolve(IUserRepository, scope),
            scope.cache,
            password_hasher=reg.resolve(IPasswordHasher, scope),
            cache_ttl=settings.redis.default_ttl,
        ),
    )
    return registry
