"""
Response shaping — keep only allow-listed fields of an outgoing payload.

Routes call ``shape(UserDto, payload)`` right before returning, so nothing
outside the DTO (credential strings in particular) reaches the client.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, FrozenSet, Iterable, List, Type, Union

from pydantic import BaseModel

Descriptor = Union[Type[BaseModel], Iterable[str]]


def allowed_fields(descriptor: Descriptor) -> FrozenSet[str]:
    """Return the field allow-list described by *descriptor*."""
    if isinstance(descriptor, type) and issubclass(descriptor, BaseModel):
        return frozenset(descriptor.model_fields)
    if isinstance(descriptor, str):
        return frozenset([descriptor])
    return frozenset(descriptor)


def _shape_one(fields: FrozenSet[str], item: Any) -> Dict[str, Any]:
    if isinstance(item, BaseModel):
        item = item.model_dump()
    if isinstance(item, Mapping):
        return {key: value for key, value in item.items() if key in fields}
    # Plain objects: read only allowed names, so slots and properties work.
    return {name: getattr(item, name) for name in sorted(fields) if hasattr(item, name)}


def shape(descriptor: Descriptor, payload: Any) -> Union[Dict[str, Any], List[Dict[str, Any]], None]:
    """
    Filter *payload* down to the fields allowed by *descriptor*.

    *payload* may be a single object (mapping, pydantic model or plain
    object) or a list/tuple of them; collections keep their order.
    Allowed fields missing from the source are left out, not defaulted.
    """
    if payload is None:
        return None
    fields = allowed_fields(descriptor)
    if isinstance(payload, (list, tuple)):
        return [_shape_one(fields, item) for item in payload]
    return _shape_one(fields, payload)
