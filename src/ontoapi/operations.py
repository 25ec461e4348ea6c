"""
Registry of the operations that may be exposed for a class.

The registry is built once at import time and indexed by HTTP method, by
cardinality and by the ``<verb>_<name>`` label used in configuration files.
Lookups with an unknown key return None (or an empty set) instead of raising.
"""

from enum import Enum


class HttpMethod(Enum):
    DELETE = "delete"
    GET = "get"
    POST = "post"
    PUT = "put"
    SEARCH = "search"


class CardinalityType(Enum):
    SINGULAR = "singular"
    PLURAL = "plural"


class OperationType(Enum):
    DELETE_BY_KEY = ("delete_by_key", HttpMethod.DELETE, CardinalityType.SINGULAR)
    GET_ALL = ("get_all", HttpMethod.GET, CardinalityType.PLURAL)
    GET_BY_KEY = ("get_by_key", HttpMethod.GET, CardinalityType.SINGULAR)
    POST_BULK = ("post_bulk", HttpMethod.POST, CardinalityType.PLURAL)
    POST_SINGLE = ("post_single", HttpMethod.POST, CardinalityType.SINGULAR)
    PUT_BULK = ("put_bulk", HttpMethod.PUT, CardinalityType.PLURAL)
    PUT_BY_KEY = ("put_by_key", HttpMethod.PUT, CardinalityType.SINGULAR)
    SEARCH_BY_POST = ("search_by_post", HttpMethod.SEARCH, CardinalityType.PLURAL)

    def __init__(self, label: str, method: HttpMethod, cardinality: CardinalityType):
        self.label = label
        self.method = method
        self.cardinality = cardinality

    @property
    def is_keyed(self) -> bool:
        """Operations addressing one resource through a path key."""
        return self in (OperationType.GET_BY_KEY, OperationType.PUT_BY_KEY, OperationType.DELETE_BY_KEY)

    def __str__(self) -> str:
        return self.label


class PathKeyType(Enum):
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"

    @classmethod
    def from_label(cls, label) -> "PathKeyType | None":
        if isinstance(label, cls):
            return label
        for member in cls:
            if member.value == str(label).strip().lower():
                return member
        return None


_BY_METHOD: dict[HttpMethod, frozenset] = {}
_BY_CARDINALITY: dict[CardinalityType, frozenset] = {}
_BY_LABEL: dict[str, OperationType] = {}

for _op in OperationType:
    _BY_METHOD[_op.method] = _BY_METHOD.get(_op.method, frozenset()) | {_op}
    _BY_CARDINALITY[_op.cardinality] = _BY_CARDINALITY.get(_op.cardinality, frozenset()) | {_op}
    _BY_LABEL[_op.label] = _op
del _op


def _as_method(method) -> HttpMethod | None:
    if isinstance(method, HttpMethod):
        return method
    try:
        return HttpMethod(str(method).strip().lower())
    except ValueError:
        return None


def _as_cardinality(cardinality) -> CardinalityType | None:
    if isinstance(cardinality, CardinalityType):
        return cardinality
    try:
        return CardinalityType(str(cardinality).strip().lower())
    except ValueError:
        return None


def operations_for_method(method) -> frozenset:
    """Operation types using ``method`` (HttpMethod or its name)."""
    key = _as_method(method)
    return _BY_METHOD.get(key, frozenset()) if key else frozenset()


def operations_for_cardinality(cardinality) -> frozenset:
    key = _as_cardinality(cardinality)
    return _BY_CARDINALITY.get(key, frozenset()) if key else frozenset()


def operation_for_label(label) -> OperationType | None:
    if label is None:
        return None
    return _BY_LABEL.get(str(label).strip().lower())


def all_labels() -> list[str]:
    return sorted(_BY_LABEL)
