"""
Query/Filter Engine
Shared substring/attribute filtering behind peer search, resource search and discovery
"""
from collections.abc import Mapping
from typing import Any, Callable, Iterable, Iterator, List, Optional, Sequence, Union

Accessor = Union[str, Callable[[Any], Any]]


def _getter(field: Accessor) -> Callable[[Any], Any]:
    if callable(field):
        return field

    def get(item):
        if isinstance(item, Mapping):
            return item.get(field)
        return getattr(item, field)
    return get


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class TextPredicate:
    """Case-insensitive substring containment on any of the given fields"""

    def __init__(self, needle: Optional[str], *fields: Accessor):
        self.needle = '' if _is_blank(needle) else needle.strip().casefold()
        self.getters = [_getter(f) for f in fields]

    @property
    def is_wildcard(self) -> bool:
        return not self.needle

    def __call__(self, item) -> bool:
        if self.is_wildcard:
            return True
        for get in self.getters:
            value = get(item)
            if value is not None and self.needle in str(value).casefold():
                return True
        return False


class AttributePredicate:
    """Exact equality on one field; a missing value matches everything"""

    def __init__(self, field: Accessor, value: Any):
        self.value = value
        self.get = _getter(field)

    @property
    def is_wildcard(self) -> bool:
        return _is_blank(self.value)

    def __call__(self, item) -> bool:
        if self.is_wildcard:
            return True
        return self.get(item) == self.value


Predicate = Union[TextPredicate, AttributePredicate, Callable[[Any], bool]]


def filter_items(items: Iterable, predicates: Sequence[Predicate] = ()) -> Iterator:
    """Yield items satisfying every predicate, in input order."""
    active = [p for p in predicates if not getattr(p, 'is_wildcard', False)]
    for item in items:
        if all(p(item) for p in active):
            yield item


def build_predicates(query: Optional[str], text_fields: Sequence[Accessor], filters: Optional[Mapping] = None) -> List[Predicate]:
    predicates: List[Predicate] = [TextPredicate(query, *text_fields)]
    for field, value in (filters or {}).items():
        predicates.append(AttributePredicate(field, value))
    return predicates


class Results:
    """
    Lazy, finite and restartable view over a snapshot.
    Each iteration re-runs the filter from the start; ordering uses a stable sort.
    """

    def __init__(self, items: Iterable, predicates: Sequence[Predicate] = (), key: Callable = None):
        self._items = list(items)
        self._predicates = list(predicates)
        self._key = key

    def __iter__(self) -> Iterator:
        ordered = sorted(self._items, key=self._key) if self._key else self._items
        return filter_items(ordered, self._predicates)

    def all(self) -> list:
        return list(self)

    def first(self):
        return next(iter(self), None)
