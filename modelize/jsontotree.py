"""Infers a schema tree from JSON files.

This module provides:
- json_to_tree: Build the seed tree of one parsed JSON value
- infer_schema_tree: Merge and upgrade the seed trees of many values
- convert_json_to_tree: Infer from files and write the tree as JSON
"""

import json
import logging
import os
from typing import Any, List

from modelize.schema_tree import (
    Array,
    Bool,
    Number,
    NumberKind,
    Object,
    Optional,
    SchemaNode,
    Text,
    tree_to_json,
)
from modelize.unifier import reduce_values
from modelize.upgrader import DEFAULT_NAMING, NamingStrategy, upgrade

logger = logging.getLogger(__name__)


def json_to_tree(name: str, value: Any) -> SchemaNode:
    """Builds the seed tree of a parsed JSON value found under the given key.

    Arrays keep one seed per element; merging reduces them to one shape.

    Raises:
        TypeError: The value is not a JSON value
    """
    if isinstance(value, dict):
        return Object(name, {key: json_to_tree(key, item) for key, item in value.items()})
    if isinstance(value, list):
        return Array(name, tuple(json_to_tree(name, item) for item in value))
    if value is None:
        return Optional(None)
    # bool before int, bool is a subclass of int
    if isinstance(value, bool):
        return Bool(value)
    if isinstance(value, int):
        return Number(NumberKind.INT)
    if isinstance(value, float):
        return Number(NumberKind.DOUBLE)
    if isinstance(value, str):
        return Text(value)
    raise TypeError(f"Unsupported JSON value of type {type(value).__name__} under '{name}'")


def infer_schema_tree(values: List[Any], type_name: str = 'Root',
                      naming: NamingStrategy = DEFAULT_NAMING) -> SchemaNode:
    """Infers one upgraded schema tree from sample JSON values.

    Args:
        values: Parsed JSON values, one per sample document
        type_name: Name of the root type
        naming: Name derivation for nested types

    Returns:
        The merged and upgraded schema tree

    Raises:
        SchemaMergeError: The samples do not describe the same entity
    """
    seeds = [json_to_tree(type_name, value) for value in values]
    return upgrade(reduce_values(seeds), type_name, naming)


def convert_json_to_tree(
    input_files: List[str],
    tree_file: str,
    type_name: str = 'Root',
    sample_size: int = 0
) -> None:
    """Infers a schema tree from JSON files and writes it as JSON.

    Args:
        input_files: List of JSON file paths to analyze
        tree_file: Output path for the schema tree
        type_name: Name for the root type
        sample_size: Maximum number of records to sample (0 = all)
    """
    tree = infer_schema_tree(load_json_values(input_files, sample_size), type_name)

    output_dir = os.path.dirname(tree_file)
    if output_dir and not os.path.exists(output_dir):
        os.makedirs(output_dir)

    with open(tree_file, 'w', encoding='utf-8') as f:
        json.dump(tree_to_json(tree), f, indent=2)


def load_json_values(input_files: List[str], sample_size: int = 0) -> List[Any]:
    """Loads JSON values from files.

    Handles both single JSON documents and JSON Lines (JSONL) files.
    Arrays at the root level are flattened into individual values.

    Args:
        input_files: List of file paths
        sample_size: Maximum values to load (0 = all)

    Returns:
        List of parsed JSON values

    Raises:
        ValueError: No input files were given or none held JSON data
    """
    if not input_files:
        raise ValueError("At least one input file is required")

    values: List[Any] = []

    for file_path in input_files:
        if sample_size > 0 and len(values) >= sample_size:
            break

        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read().strip()

        if not content:
            continue

        try:
            data = json.loads(content)
            if isinstance(data, list):
                for item in data:
                    values.append(item)
                    if sample_size > 0 and len(values) >= sample_size:
                        break
            else:
                values.append(data)
            continue
        except json.JSONDecodeError:
            pass

        # JSON Lines
        for line in content.split('\n'):
            line = line.strip()
            if not line:
                continue
            try:
                data = json.loads(line)
            except json.JSONDecodeError:
                logger.warning("Skipping line that is not JSON in %s", file_path)
                continue
            values.append(data)
            if sample_size > 0 and len(values) >= sample_size:
                break

    if not values:
        raise ValueError("No valid JSON data found in input files")

    logger.info("Loaded %d JSON samples from %d files", len(values), len(input_files))
    return values
