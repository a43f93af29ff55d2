# pylint: disable=line-too-long

"""Renders an upgraded schema tree as Swift model source."""

import logging
from typing import Dict, List, Tuple

from modelize.common import process_template, property_name_of, render_template, type_name_of
from modelize.jsontotree import infer_schema_tree, load_json_values
from modelize.schema_tree import Array, Object, Optional, SchemaNode, descriptor_of

logger = logging.getLogger(__name__)

STRUCT_TEMPLATE = "treetoswift/struct.swift.jinja"
TYPEALIAS_TEMPLATE = "treetoswift/typealias.swift.jinja"


def is_swift_reserved_word(word: str) -> bool:
    """Check if word is a Swift reserved word."""
    reserved_words = [
        'associatedtype', 'class', 'deinit', 'enum', 'extension', 'fileprivate',
        'func', 'import', 'init', 'inout', 'internal', 'let', 'open', 'operator',
        'private', 'protocol', 'public', 'rethrows', 'static', 'struct',
        'subscript', 'typealias', 'var', 'break', 'case', 'continue', 'default',
        'defer', 'do', 'else', 'fallthrough', 'for', 'guard', 'if', 'in', 'repeat',
        'return', 'switch', 'where', 'while', 'as', 'catch', 'false', 'is', 'nil',
        'super', 'self', 'Self', 'throw', 'throws', 'true', 'try',
    ]
    return word in reserved_words


class TreeToSwift:
    """Converts an upgraded schema tree to Swift Codable structs."""

    def safe_name(self, name: str) -> str:
        """Converts a name to a safe Swift identifier."""
        if is_swift_reserved_word(name):
            return f'`{name}`'
        return name

    def nested_objects(self, node: SchemaNode) -> List[Object]:
        """Finds the objects a field type refers to, looking through optionals and arrays."""
        if isinstance(node, Object):
            return [node]
        if isinstance(node, Optional) and node.inner is not None:
            return self.nested_objects(node.inner)
        if isinstance(node, Array) and node.values:
            return self.nested_objects(node.values[0])
        return []

    def generate_nested_types(self, nodes: List[SchemaNode]) -> List[str]:
        """Generates the structs for the objects referenced by the given nodes, once per type name."""
        nested_types: Dict[str, str] = {}
        for node in nodes:
            for nested in self.nested_objects(node):
                nested_name = type_name_of(nested.name)
                if nested_name in nested_types:
                    logger.debug("Struct %s is already generated in this scope", nested_name)
                    continue
                nested_types[nested_name] = self.generate_struct(nested).rstrip()
        return list(nested_types.values())

    def struct_arguments(self, node: Object) -> dict:
        """Collects the template arguments of the struct for an object node."""
        properties = []
        keys_by_property: Dict[str, str] = {}
        for key in sorted(node.dictionary):
            bare_name = property_name_of(key)
            if bare_name in keys_by_property:
                raise ValueError(
                    f"Keys '{keys_by_property[bare_name]}' and '{key}' of {type_name_of(node.name)} "
                    f"both map to the Swift property '{bare_name}'")
            keys_by_property[bare_name] = key
            properties.append({
                'name': self.safe_name(bare_name),
                'bare_name': bare_name,
                'key': key,
                'type': descriptor_of(node.dictionary[key]),
            })
        return {
            'name': node.name,
            'properties': properties,
            'nested_types': self.generate_nested_types([node.dictionary[key] for key in sorted(node.dictionary)]),
            'coding_keys': any(p['key'] != p['bare_name'] for p in properties),
        }

    def generate_struct(self, node: Object) -> str:
        """Generates a Swift struct from an object node."""
        return process_template(STRUCT_TEMPLATE, **self.struct_arguments(node))

    def template_for(self, tree: SchemaNode, root_name: str) -> Tuple[str, dict]:
        """Picks the template and its arguments for a root. Non-object roots become a typealias."""
        if isinstance(tree, Object):
            return STRUCT_TEMPLATE, self.struct_arguments(tree)
        return TYPEALIAS_TEMPLATE, {
            'name': root_name,
            'type': descriptor_of(tree),
            'nested_types': self.generate_nested_types([tree]),
        }

    def convert(self, tree: SchemaNode, root_name: str = 'Root') -> str:
        """Converts a schema tree to Swift source."""
        template, arguments = self.template_for(tree, root_name)
        return process_template(template, **arguments)

    def convert_to_file(self, tree: SchemaNode, swift_file: str, root_name: str = 'Root') -> None:
        """Converts a schema tree to Swift source and writes it to a file."""
        template, arguments = self.template_for(tree, root_name)
        render_template(template, swift_file, **arguments)


def convert_tree_to_swift(tree: SchemaNode, root_name: str = 'Root') -> str:
    """Converts an upgraded schema tree to Swift source.

    Args:
        tree: The merged and upgraded schema tree
        root_name: Name of the root type, used when the root is not an object

    Returns:
        The Swift source
    """
    return TreeToSwift().convert(tree, root_name)


def convert_json_to_swift(
    input_files: List[str],
    swift_file: str,
    type_name: str = 'Root',
    sample_size: int = 0
) -> None:
    """Infers Swift models from JSON files.

    Args:
        input_files: List of JSON file paths to analyze
        swift_file: Output path for the Swift source
        type_name: Name for the root type
        sample_size: Maximum number of records to sample (0 = all)
    """
    tree = infer_schema_tree(load_json_values(input_files, sample_size), type_name)
    TreeToSwift().convert_to_file(tree, swift_file, type_name)
