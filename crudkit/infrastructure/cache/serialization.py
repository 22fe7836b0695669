"""Entity <-> cache payload conversion.

Payloads are plain JSON objects keyed by column attribute name; datetimes
are ISO-8601 strings. A model lists columns that must never reach the
cache in ``__cache_exclude__`` (e.g. password hashes); those are left
unset on the decoded instance and every other column survives the round
trip.
"""

from datetime import datetime
from typing import Any, TypeVar

from sqlalchemy import DateTime, inspect as sa_inspect

from crudkit.shared.datetime import from_iso, to_iso

T = TypeVar("T")


def cache_excluded_columns(model: type) -> frozenset[str]:
    """Column keys never written to the cache for model."""
    return frozenset(getattr(model, "__cache_exclude__", ()))


def entity_to_cache(entity: Any) -> dict[str, Any]:
    """Return a JSON-safe dict of the cacheable columns of a mapped entity."""
    mapper = sa_inspect(type(entity))
    excluded = cache_excluded_columns(type(entity))
    data: dict[str, Any] = {}
    for attr in mapper.column_attrs:
        if attr.key in excluded:
            continue
        value = getattr(entity, attr.key)
        if isinstance(value, datetime):
            value = to_iso(value)
        data[attr.key] = value
    return data


def entity_from_cache(model: type[T], data: Any) -> T:
    """Build a transient model instance from entity_to_cache() output.

    Excluded columns are not required and stay unset on the result.

    Raises:
        ValueError: If data is not a dict, lacks a cacheable column, or holds a bad datetime.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Cached {model.__name__} payload must be an object")
    mapper = sa_inspect(model)
    excluded = cache_excluded_columns(model)
    kwargs: dict[str, Any] = {}
    for attr in mapper.column_attrs:
        if attr.key in excluded:
            continue
        if attr.key not in data:
            raise ValueError(f"Cached {model.__name__} payload is missing {attr.key!r}")
        value = data[attr.key]
        if value is not None and isinstance(attr.columns[0].type, DateTime):
            if not isinstance(value, str):
                raise ValueError(f"Cached {model.__name__}.{attr.key} is not an ISO datetime")
            value = from_iso(value)
        kwargs[attr.key] = value
    return model(**kwargs)
