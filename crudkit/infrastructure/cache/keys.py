"""Cache key builders. Single place for key format (DRY).

Key components must not contain CACHE_KEY_SEP to avoid ambiguous or
colliding keys.
"""

from crudkit.core.constants import CACHE_KEY_SEP, CACHE_PREFIX_USER


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value is empty or contains the cache key separator."""
    if not value:
        raise ValueError(f"Cache key component {name!r} must not be empty")
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def entity_key(namespace: str, entity_id: int | str) -> str:
    """Cache key for an entity by ID within namespace (e.g. 'user:id:42')."""
    _validate_key_component(namespace, "namespace")
    _validate_key_component(str(entity_id), "entity_id")
    return f"{namespace}{CACHE_KEY_SEP}id{CACHE_KEY_SEP}{entity_id}"


def user_key(user_id: int | str) -> str:
    """Cache key for user by ID."""
    return entity_key(CACHE_PREFIX_USER, user_id)
