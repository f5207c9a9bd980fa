import logging
from operator import itemgetter
from typing import Any, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from pymongo import ASCENDING, DESCENDING

from errors import UnknownSortFieldError
from property_mapping import PropertyMapping

logger = logging.getLogger(__name__)


class SortKey(NamedTuple):
    field: str
    descending: bool = False


def compile_order_by(order_by: Optional[str], mapping: PropertyMapping, default: str = "id") -> List[SortKey]:
    """
    Turn an order-by string like "price desc,id" into storage sort keys.

    A client field mapped to several storage fields expands to all of them,
    in mapping order, each with the clause's direction.
    """
    if not order_by or not order_by.strip():
        order_by = default

    keys: List[SortKey] = []
    for clause in order_by.split(","):
        parts = clause.split()
        if not parts:
            continue
        field = parts[0]
        descending = len(parts) > 1 and parts[1].lower() == "desc"
        if field not in mapping:
            raise UnknownSortFieldError(field)
        for destination in mapping[field].destination_properties:
            keys.append(SortKey(destination, descending))

    logger.debug("Compiled order by %r into %s", order_by, keys)
    return keys


def _value(item: Any, field: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(field)
    return getattr(item, field, None)


def _with_tiebreaker(sort_keys: Sequence[SortKey], tiebreaker: Optional[str]) -> List[SortKey]:
    keys = list(sort_keys)
    if tiebreaker and all(key.field != tiebreaker for key in keys):
        keys.append(SortKey(tiebreaker))
    return keys


def apply_sort(items: Iterable[Any], sort_keys: Sequence[SortKey], tiebreaker: Optional[str] = None) -> List[Any]:
    """Stable multi-key sort of mappings or objects, returned as a new list."""
    result = list(items)
    # sort by the least significant key first, Python's sort is stable
    for key in reversed(_with_tiebreaker(sort_keys, tiebreaker)):
        decorated = [((_value(item, key.field) is not None, _value(item, key.field)), item) for item in result]
        decorated.sort(key=itemgetter(0), reverse=key.descending)
        result = [item for _, item in decorated]
    return result


def to_mongo_sort(sort_keys: Sequence[SortKey], tiebreaker: str = "_id") -> List[Tuple[str, int]]:
    return [
        (key.field, DESCENDING if key.descending else ASCENDING)
        for key in _with_tiebreaker(sort_keys, tiebreaker)
    ]
