"""Schema tree data model.

A schema tree describes the inferred shape of a family of sample documents.
Each node is one of a closed set of immutable variants:

- Empty: nothing observed yet (identity element for merging)
- Optional: the value was absent or null in at least one sample
- Bool, Number, Text: primitive leaves
- Object, Array: records and homogeneous sequences, named after their key
- Url, DateLeaf: semantic leaves produced by the upgrade pass

Trees are never mutated. Merging and upgrading always build new trees.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple, Union

from modelize.common import type_name_of


class NumberKind(Enum):
    """Numeric width observed for a number leaf."""
    INT = 'int'
    DOUBLE = 'double'


class DateKind(Enum):
    """Date format recognized for a date leaf."""
    ISO8601 = 'iso8601'
    DATE_ONLY = 'dateOnly'


@dataclass(frozen=True)
class Empty:
    """No sample observed."""


@dataclass(frozen=True)
class Optional:
    """Absent in at least one sample; inner is the shape where present."""
    inner: 'SchemaNode | None' = None


@dataclass(frozen=True)
class Bool:
    value: bool


@dataclass(frozen=True)
class Number:
    kind: NumberKind = NumberKind.INT


@dataclass(frozen=True)
class Text:
    value: str = ''


@dataclass(frozen=True)
class Object:
    """A record. The name is the raw key until the upgrade pass assigns a type name."""
    name: str
    dictionary: Mapping[str, 'SchemaNode'] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'dictionary', MappingProxyType(dict(self.dictionary)))

    def __hash__(self):
        # key order does not take part in equality
        return hash((self.name, frozenset(self.dictionary.items())))


@dataclass(frozen=True)
class Array:
    """A sequence. After a merge, values holds one representative element or none."""
    name: str
    values: Tuple['SchemaNode', ...] = ()


@dataclass(frozen=True)
class Url:
    value: str


@dataclass(frozen=True)
class DateLeaf:
    kind: DateKind


SchemaNode = Union[Empty, Optional, Bool, Number, Text, Object, Array, Url, DateLeaf]


def make_optional(node: SchemaNode) -> Optional:
    """Wrap a node in Optional without nesting wrappers or wrapping Empty."""
    if isinstance(node, Optional):
        return node
    if isinstance(node, Empty):
        return Optional(None)
    return Optional(node)


def descriptor_of(node: SchemaNode) -> str:
    """
    Render the type descriptor of a node, e.g. 'String', '[Int]', 'Pet?'.

    Args:
        node: The schema tree node.

    Returns:
        str: The type annotation to use in generated code.
    """
    if isinstance(node, Empty):
        return 'Any'
    if isinstance(node, Optional):
        if node.inner is None:
            return 'Any?'
        return descriptor_of(node.inner) + '?'
    if isinstance(node, Bool):
        return 'Bool'
    if isinstance(node, Number):
        return 'Double' if node.kind == NumberKind.DOUBLE else 'Int'
    if isinstance(node, Text):
        return 'String'
    if isinstance(node, Object):
        return type_name_of(node.name)
    if isinstance(node, Array):
        if not node.values:
            return '[Any]'
        return '[' + descriptor_of(node.values[0]) + ']'
    if isinstance(node, Url):
        return 'URL'
    if isinstance(node, DateLeaf):
        return 'Date'
    raise TypeError(f"Not a schema tree node: {node!r}")


def tree_to_json(node: SchemaNode) -> Dict[str, Any]:
    """
    Dump a schema tree as a JSON-serializable dictionary.

    Every entry carries its 'kind' and its 'type' descriptor. Objects list
    their 'properties', arrays their 'items', optionals their 'inner' node.
    Leaves that keep a sample literal expose it as 'example'.
    """
    result: Dict[str, Any] = {'kind': _kind_of(node), 'type': descriptor_of(node)}
    if isinstance(node, Optional):
        result['inner'] = tree_to_json(node.inner) if node.inner is not None else None
    elif isinstance(node, (Bool, Text, Url)):
        result['example'] = node.value
    elif isinstance(node, DateLeaf):
        result['format'] = node.kind.value
    elif isinstance(node, Object):
        result['name'] = node.name
        result['properties'] = {key: tree_to_json(value) for key, value in node.dictionary.items()}
    elif isinstance(node, Array):
        result['name'] = node.name
        result['items'] = tree_to_json(node.values[0]) if node.values else None
    return result


def _kind_of(node: SchemaNode) -> str:
    if isinstance(node, DateLeaf):
        return 'date'
    return type(node).__name__.lower()
