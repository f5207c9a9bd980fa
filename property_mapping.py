"""
Client field name -> storage field name(s) tables used for sorting.

Tables are registered once per (DTO, storage model) pair and are read-only
afterwards, so request handlers share them without locking.
"""

import logging
import threading
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Iterator, Mapping, Optional, Tuple

from errors import MappingNotFoundError

logger = logging.getLogger(__name__)


class PropertyMappingValue:
    __slots__ = ("destination_properties",)

    def __init__(self, destination_properties: Iterable[str]):
        destination_properties = tuple(destination_properties)
        if not destination_properties:
            raise ValueError("A property mapping needs at least one destination property")
        self.destination_properties = destination_properties

    def __repr__(self):
        return f"PropertyMappingValue({list(self.destination_properties)!r})"


class PropertyMapping(Mapping[str, PropertyMappingValue]):
    """Case-insensitive, read-only mapping table."""

    def __init__(self, entries: Mapping[str, Iterable[str]]):
        names: Dict[str, str] = {}
        values: Dict[str, PropertyMappingValue] = {}
        for name, destinations in entries.items():
            value = destinations if isinstance(destinations, PropertyMappingValue) else PropertyMappingValue(destinations)
            names[name.lower()] = name
            values[name.lower()] = value
        self._names = MappingProxyType(names)
        self._values = MappingProxyType(values)

    def __getitem__(self, name: str) -> PropertyMappingValue:
        return self._values[name.strip().lower()]

    def __contains__(self, name) -> bool:
        return isinstance(name, str) and name.strip().lower() in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._names.values())

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self):
        return f"PropertyMapping({dict(zip(self._names.values(), self._values.values()))!r})"


MappingKey = Tuple[type, type]


class PropertyMappingRegistry:
    def __init__(self, initializer: Optional[Callable[["PropertyMappingRegistry"], None]] = None):
        self._mappings: Dict[MappingKey, PropertyMapping] = {}
        self._initializer = initializer
        self._initialized = initializer is None
        self._lock = threading.Lock()

    def initialize(self) -> None:
        if self._initialized:
            return
        with self._lock:
            if self._initialized:
                return
            logger.info("Registering property mappings")
            self._initializer(self)
            self._initialized = True

    def register(self, wire_type: type, storage_type: type, mapping: Mapping[str, Iterable[str]]) -> PropertyMapping:
        table = mapping if isinstance(mapping, PropertyMapping) else PropertyMapping(mapping)
        key = (wire_type, storage_type)
        if key in self._mappings:
            logger.debug("Replacing property mapping %s -> %s", wire_type.__name__, storage_type.__name__)
        self._mappings[key] = table
        return table

    def lookup(self, wire_type: type, storage_type: type) -> PropertyMapping:
        self.initialize()
        try:
            return self._mappings[(wire_type, storage_type)]
        except KeyError:
            raise MappingNotFoundError(wire_type, storage_type) from None

    @staticmethod
    def validate(mapping: PropertyMapping, fields: Optional[str]) -> bool:
        if not fields or not fields.strip():
            return True
        for clause in fields.split(","):
            clause = clause.strip()
            if not clause:
                continue
            # "name desc" validates on "name"
            if clause.split()[0] not in mapping:
                return False
        return True


def _register_defaults(registry: PropertyMappingRegistry) -> None:
    from mappings import register_default_mappings

    register_default_mappings(registry)


property_mappings = PropertyMappingRegistry(_register_defaults)
