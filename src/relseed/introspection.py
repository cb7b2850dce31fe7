"""Entity class introspection (fields, annotations, construction)."""

import dataclasses
import types
import typing
from typing import Any


def unwrap_optional(annotation: Any) -> Any:
    """
    Strip None from an Optional / ``X | None`` annotation.

    Returns:
        The single non-None member, or the annotation unchanged
    """
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        members = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(members) == 1:
            return members[0]
    return annotation


def field_types(entity_type: type) -> dict[str, Any]:
    """
    Get declared fields and their (Optional-stripped) annotations.

    Dataclass fields keep declaration order; plain classes fall back to their
    class annotations.
    """
    try:
        hints = typing.get_type_hints(entity_type)
    except (NameError, TypeError):
        hints = dict(getattr(entity_type, "__annotations__", {}))

    if dataclasses.is_dataclass(entity_type):
        names = [f.name for f in dataclasses.fields(entity_type) if f.init]
    else:
        names = [n for n in hints if not n.startswith("_")]

    return {name: unwrap_optional(hints.get(name, Any)) for name in names}


def fields_with_defaults(entity_type: type) -> set[str]:
    """Names of fields that fill themselves when left out of the constructor."""
    if dataclasses.is_dataclass(entity_type):
        return {
            f.name
            for f in dataclasses.fields(entity_type)
            if f.default is not dataclasses.MISSING
            or f.default_factory is not dataclasses.MISSING
        }
    return {n for n in field_types(entity_type) if hasattr(entity_type, n)}


def build_instance(entity_type: type, values: dict[str, Any]) -> Any:
    """
    Construct an entity from field values.

    Dataclasses receive the values as keyword arguments; other classes are
    created without arguments and populated attribute by attribute.
    """
    if dataclasses.is_dataclass(entity_type):
        return entity_type(**values)

    instance = entity_type()
    for name, value in values.items():
        setattr(instance, name, value)
    return instance
