"""Unification of sample schema trees.

Reduces the seed trees of several samples describing the same entity into
one generalized tree. Keys missing from some samples become Optional,
numbers widen from int to double, and arrays collapse to one element shape.
"""

import logging
from functools import reduce
from typing import Iterable

from modelize.schema_tree import (
    Array,
    Bool,
    DateLeaf,
    Empty,
    Number,
    NumberKind,
    Object,
    Optional,
    SchemaNode,
    Text,
    Url,
    make_optional,
)

logger = logging.getLogger(__name__)


class SchemaMergeError(Exception):
    """
    Exception raised when two schema trees cannot be unified.

    Attributes:
        message: Human-readable error description
        sample_index: Index of the sample whose merge failed, if known
    """

    def __init__(self, message: str, sample_index: int | None = None) -> None:
        self.message = message
        self.sample_index = sample_index
        super().__init__(message)

    def __str__(self) -> str:
        if self.sample_index is not None:
            return f"{self.message} (sample: {self.sample_index})"
        return self.message


class NameMismatchError(SchemaMergeError):
    """
    Exception raised when two objects or two arrays with different names are merged.

    Attributes:
        left_name: Name of the node merged into
        right_name: Name of the node being merged
    """

    def __init__(self, kind: str, left_name: str, right_name: str) -> None:
        self.left_name = left_name
        self.right_name = right_name
        super().__init__(f"Cannot merge {kind} '{left_name}' with {kind} '{right_name}'")


class UnsupportedMergeError(SchemaMergeError):
    """
    Exception raised when two nodes of incompatible kinds are merged.

    Attributes:
        left_kind: Variant name of the node merged into
        right_kind: Variant name of the node being merged
    """

    def __init__(self, left: SchemaNode, right: SchemaNode) -> None:
        self.left_kind = type(left).__name__
        self.right_kind = type(right).__name__
        super().__init__(f"Unsupported merge of {self.left_kind} with {self.right_kind}")


def merge(a: SchemaNode, b: SchemaNode) -> SchemaNode:
    """
    Merge two schema trees into one generalized tree.

    Args:
        a: The tree merged into; its literals win where a choice is made
        b: The tree being merged

    Returns:
        The unified tree.

    Raises:
        NameMismatchError: Two objects or arrays carry different names
        UnsupportedMergeError: The two nodes have no combination rule
    """
    if isinstance(a, Empty):
        return b
    if isinstance(b, Empty):
        return a

    if isinstance(a, Optional) and isinstance(b, Optional):
        if a.inner is not None and b.inner is not None:
            return Optional(merge(a.inner, b.inner))
        return Optional(a.inner if a.inner is not None else b.inner)
    if isinstance(a, Optional):
        return make_optional(merge(a.inner, b) if a.inner is not None else b)
    if isinstance(b, Optional):
        return make_optional(merge(b.inner, a) if b.inner is not None else a)

    if isinstance(a, Bool) and isinstance(b, Bool):
        # keeps the sample literal, true only if every sample was true
        return Bool(a.value and b.value)
    if isinstance(a, Number) and isinstance(b, Number):
        if NumberKind.DOUBLE in (a.kind, b.kind):
            return Number(NumberKind.DOUBLE)
        return Number(NumberKind.INT)
    if isinstance(a, Text) and isinstance(b, Text):
        return Text(a.value if a.value else b.value)
    if isinstance(a, Object) and isinstance(b, Object):
        return _merge_objects(a, b)
    if isinstance(a, Array) and isinstance(b, Array):
        if a.name != b.name:
            raise NameMismatchError('array', a.name, b.name)
        values = a.values + b.values
        if not values:
            return Array(a.name, ())
        return Array(a.name, (merge_all(values),))
    if isinstance(a, Url) and isinstance(b, Url):
        return Url(a.value)
    if isinstance(a, DateLeaf) and isinstance(b, DateLeaf) and a.kind == b.kind:
        return DateLeaf(a.kind)
    raise UnsupportedMergeError(a, b)


def _merge_objects(a: Object, b: Object) -> Object:
    if a.name != b.name:
        raise NameMismatchError('object', a.name, b.name)
    dictionary = {}
    for key, value in a.dictionary.items():
        if key in b.dictionary:
            dictionary[key] = merge(value, b.dictionary[key])
        else:
            dictionary[key] = make_optional(value)
    for key, value in b.dictionary.items():
        if key not in a.dictionary:
            dictionary[key] = make_optional(value)
    return Object(a.name, dictionary)


def reduce_values(samples: Iterable[SchemaNode]) -> SchemaNode:
    """
    Reduce an ordered sequence of sample trees into one tree.

    The samples are folded from the left starting with Empty, so an empty
    sequence yields Empty and a single sample is returned as is. Sample
    order decides which literals are kept, never the inferred shape.

    Args:
        samples: Seed trees, one per sample document

    Returns:
        The unified tree.

    Raises:
        SchemaMergeError: A sample could not be merged; sample_index names it
    """
    result: SchemaNode = Empty()
    for index, sample in enumerate(samples):
        try:
            result = merge(result, sample)
        except SchemaMergeError as e:
            if e.sample_index is None:
                e.sample_index = index
            logger.debug("Merge failed at sample %d: %s", index, e.message)
            raise
    return result


def merge_all(values: Iterable[SchemaNode]) -> SchemaNode:
    """Fold nodes into one with merge, without tagging errors with a sample index."""
    return reduce(merge, values, Empty())
