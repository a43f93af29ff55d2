"""Upgrade pass over a unified schema tree.

Assigns type names to objects and arrays, derived from the keys of the
document, and promotes string leaves to URL and date leaves where the
sample literal is recognized.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict
from urllib.parse import urlparse

from modelize.common import singular_form_of, type_name_of
from modelize.schema_tree import Array, DateKind, DateLeaf, Object, SchemaNode, Text, Url
from modelize.unifier import merge_all

logger = logging.getLogger(__name__)

# yyyy-MM-dd'T'HH:mm:ss.SSSSSSZ
ISO8601_FORMAT = '%Y-%m-%dT%H:%M:%S.%f%z'
# yyyy-MM-dd
DATE_ONLY_FORMAT = '%Y-%m-%d'

DATE_FORMATS = (
    (DateKind.ISO8601, ISO8601_FORMAT),
    (DateKind.DATE_ONLY, DATE_ONLY_FORMAT),
)

# scheme:// followed only by RFC 3986 unreserved, reserved and percent characters
URL_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9+.-]*://[A-Za-z0-9\-._~%!$&'()*+,;=:@/?#\[\]]+")


@dataclass(frozen=True)
class NamingStrategy:
    """
    Name derivation used by the upgrade pass.

    Attributes:
        type_name: Turns a key into the type name of an object or array
        singular_form: Turns the key of an array into the key of its elements
    """
    type_name: Callable[[str], str] = type_name_of
    singular_form: Callable[[str], str] = singular_form_of

    def with_singulars(self, singulars: Dict[str, str]) -> 'NamingStrategy':
        """Returns a strategy that looks up irregular singulars before falling back."""
        fallback = self.singular_form

        def singular_form(name: str) -> str:
            if name in singulars:
                return singulars[name]
            return fallback(name)

        return NamingStrategy(type_name=self.type_name, singular_form=singular_form)


DEFAULT_NAMING = NamingStrategy()


def is_url(value: str) -> bool:
    """True if the value is an absolute URL with a host and no characters a URL cannot hold."""
    if not URL_PATTERN.fullmatch(value):
        return False
    try:
        parsed = urlparse(value)
        return bool(parsed.scheme) and bool(parsed.hostname)
    except ValueError:
        return False


def date_kind_of(value: str) -> DateKind | None:
    """Returns the first date format the value matches, or None."""
    for kind, date_format in DATE_FORMATS:
        try:
            datetime.strptime(value, date_format)
        except ValueError:
            continue
        return kind
    return None


def upgrade(node: SchemaNode, assigned_name: str, naming: NamingStrategy = DEFAULT_NAMING) -> SchemaNode:
    """
    Upgrade a unified tree into a named, semantically refined tree.

    Objects and arrays are renamed to the type name of assigned_name. Object
    fields are upgraded with their own key as name; array elements with the
    singular form of the array's name and then unified again, since an
    upgrade may change the kind of a leaf.

    Args:
        node: The unified tree
        assigned_name: The key (or root name) the node was found under
        naming: Name derivation to use

    Returns:
        The upgraded tree. The input tree is left untouched.

    Raises:
        SchemaMergeError: Upgraded array elements cannot be unified
    """
    if isinstance(node, Text):
        return _upgrade_text(node, assigned_name)
    if isinstance(node, Object):
        dictionary = {key: upgrade(value, key, naming) for key, value in node.dictionary.items()}
        return Object(naming.type_name(assigned_name), dictionary)
    if isinstance(node, Array):
        type_name = naming.type_name(assigned_name)
        if not node.values:
            return Array(type_name, ())
        element_name = naming.singular_form(assigned_name)
        values = [upgrade(value, element_name, naming) for value in node.values]
        return Array(type_name, (merge_all(values),))
    return node


def _upgrade_text(node: Text, assigned_name: str) -> SchemaNode:
    if is_url(node.value):
        logger.debug("'%s' holds a URL", assigned_name)
        return Url(node.value)
    kind = date_kind_of(node.value)
    if kind is not None:
        logger.debug("'%s' holds a date (%s)", assigned_name, kind.value)
        return DateLeaf(kind)
    return node
