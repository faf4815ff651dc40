# src/admin_service/infrastructure/database/records.py
"""Conversion of loaded entities into plain dictionaries."""
from typing import Any, Iterable

from sqlmodel import SQLModel


def to_record(
    entity: SQLModel | None,
    include: Iterable[str] = (),
    exclude: Iterable[str] = (),
) -> dict[str, Any] | None:
    """
    Dump an entity's columns plus any eager-loaded relationships.

    Args:
        entity: Loaded entity (``None`` passes through)
        include: Relationship names to dump alongside the columns
        exclude: Keys to drop from the result

    Example:
        >>> to_record(church, include=["field"], exclude=["deleted"])
        {'id': ..., 'name': 'Igreja', 'field': {'id': ..., 'designation': ...}}
    """
    if entity is None:
        return None

    exclude = set(exclude)
    record = entity.model_dump(exclude=exclude)

    for name in include:
        if name in exclude:
            continue
        related = getattr(entity, name, None)
        if isinstance(related, list):
            record[name] = [to_record(item) for item in related]
        else:
            record[name] = to_record(related)

    return record


def exclude_keys(records: list[SQLModel], keys: Iterable[str], include: Iterable[str] = ()) -> list[dict[str, Any]]:
    """Dump every entity dropping ``keys``."""
    keys = tuple(keys)
    include = tuple(include)
    return [to_record(entity, include=include, exclude=keys) for entity in records]
