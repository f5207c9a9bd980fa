"""
Data shaping: project a DTO down to the fields a client asked for.

Field tables are built once per type from the declared fields and cached, so
requests never walk the type's attributes.
"""

import dataclasses
import threading
from operator import attrgetter
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional

from pydantic import BaseModel

from errors import UnknownFieldError


class FieldDescriptor(NamedTuple):
    name: str
    accessor: Callable[[Any], Any]


_descriptor_tables: Dict[type, Dict[str, FieldDescriptor]] = {}
_descriptor_lock = threading.Lock()


def _declared_fields(type_: type) -> List[str]:
    if isinstance(type_, type) and issubclass(type_, BaseModel):
        return list(type_.model_fields)
    if dataclasses.is_dataclass(type_):
        return [field.name for field in dataclasses.fields(type_)]
    raise TypeError(f"Cannot shape values of type {type_.__name__}")


def field_descriptors(type_: type) -> Dict[str, FieldDescriptor]:
    """Lower-cased field name -> descriptor, in declaration order."""
    table = _descriptor_tables.get(type_)
    if table is not None:
        return table
    with _descriptor_lock:
        table = _descriptor_tables.get(type_)
        if table is None:
            table = {
                name.lower(): FieldDescriptor(name, attrgetter(name))
                for name in _declared_fields(type_)
            }
            _descriptor_tables[type_] = table
    return table


def _requested(fields: Optional[str]) -> List[str]:
    if not fields or not fields.strip():
        return []
    return [field.strip() for field in fields.split(",") if field.strip()]


def resolve_fields(type_: type, fields: Optional[str]) -> List[FieldDescriptor]:
    """
    Descriptors for the requested fields, in request order.

    A field named more than once (in any casing) keeps the position of its
    first mention.
    """
    table = field_descriptors(type_)
    requested = _requested(fields)
    if not requested:
        return list(table.values())
    descriptors: Dict[str, FieldDescriptor] = {}
    for name in requested:
        descriptor = table.get(name.lower())
        if descriptor is None:
            raise UnknownFieldError(name, type_)
        descriptors.setdefault(descriptor.name, descriptor)
    return list(descriptors.values())


def has_fields(type_: type, fields: Optional[str]) -> bool:
    table = field_descriptors(type_)
    return all(name.lower() in table for name in _requested(fields))


def check_fields(type_: type, fields: Optional[str]) -> None:
    resolve_fields(type_, fields)


def _shape_with(item: Any, descriptors: List[FieldDescriptor]) -> Dict[str, Any]:
    return {descriptor.name: descriptor.accessor(item) for descriptor in descriptors}


def shape(item: Any, fields: Optional[str] = None) -> Dict[str, Any]:
    if item is None:
        raise ValueError("the source to shape can't be None")
    return _shape_with(item, resolve_fields(type(item), fields))


def shape_many(items: Iterable[Any], fields: Optional[str] = None, type_: Optional[type] = None) -> List[Dict[str, Any]]:
    items = list(items)
    if not items:
        if type_ is not None:
            check_fields(type_, fields)
        return []
    descriptors = resolve_fields(type_ or type(items[0]), fields)
    return [_shape_with(item, descriptors) for item in items]
