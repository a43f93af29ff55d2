"""Tests for rendering schema trees as Swift models."""

import json
import os
import sys
import tempfile
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from modelize.jsontotree import infer_schema_tree
from modelize.schema_tree import Array, Number, NumberKind, Object, Optional, Text
from modelize.treetoswift import (
    TreeToSwift,
    convert_json_to_swift,
    convert_tree_to_swift,
    is_swift_reserved_word,
)


class TestTreeToSwift(unittest.TestCase):
    """Test cases for Swift struct generation."""

    def test_flat_struct_with_coding_keys(self):
        tree = infer_schema_tree([{"name": "Rex", "age": 3, "owner_name": "Ann"}], type_name='Pet')
        expected = (
            'struct Pet: Codable {\n'
            '    let age: Int\n'
            '    let name: String\n'
            '    let ownerName: String\n'
            '\n'
            '    enum CodingKeys: String, CodingKey {\n'
            '        case age\n'
            '        case name\n'
            '        case ownerName = "owner_name"\n'
            '    }\n'
            '}\n'
        )
        self.assertEqual(convert_tree_to_swift(tree, 'Pet'), expected)

    def test_struct_without_coding_keys(self):
        tree = Object('Point', {'x': Number(NumberKind.DOUBLE), 'y': Optional(Number(NumberKind.DOUBLE))})
        expected = (
            'struct Point: Codable {\n'
            '    let x: Double\n'
            '    let y: Double?\n'
            '}\n'
        )
        self.assertEqual(convert_tree_to_swift(tree), expected)

    def test_struct_name_from_raw_key(self):
        swift = convert_tree_to_swift(Object('pet_owner', {'id': Number()}))
        self.assertEqual(swift, 'struct PetOwner: Codable {\n    let id: Int\n}\n')

    def test_nested_structs(self):
        tree = infer_schema_tree([
            {"owner": {"first_name": "Ann"}, "toys": [{"id": 1}], "link": "https://example.com"}
        ], type_name='Pet')
        swift = convert_tree_to_swift(tree, 'Pet')
        self.assertTrue(swift.startswith('struct Pet: Codable {\n    struct Owner: Codable {\n'))
        self.assertIn('        let firstName: String\n', swift)
        self.assertIn('            case firstName = "first_name"\n', swift)
        self.assertIn('    struct Toy: Codable {\n        let id: Int\n    }\n', swift)
        self.assertIn('    let link: URL\n', swift)
        self.assertIn('    let owner: Owner\n', swift)
        self.assertIn('    let toys: [Toy]\n', swift)
        self.assertTrue(swift.endswith('}\n'))

    def test_nested_type_generated_once(self):
        tree = Object('Route', {
            'start': Object('point', {'x': Number()}),
            'end': Optional(Object('point', {'x': Number()})),
        })
        swift = convert_tree_to_swift(tree)
        self.assertEqual(swift.count('struct Point: Codable'), 1)
        self.assertIn('    let end: Point?\n', swift)
        self.assertIn('    let start: Point\n', swift)

    def test_reserved_words_are_escaped(self):
        tree = Object('Rule', {'default': Text('x')})
        swift = convert_tree_to_swift(tree)
        self.assertIn('    let `default`: String\n', swift)
        self.assertNotIn('CodingKeys', swift)
        self.assertTrue(is_swift_reserved_word('struct'))
        self.assertFalse(is_swift_reserved_word('name'))

    def test_keys_with_the_same_property_name(self):
        tree = infer_schema_tree([{"owner_name": "Ann", "ownerName": "Bob"}], type_name='Pet')
        with self.assertRaises(ValueError) as context:
            convert_tree_to_swift(tree)
        self.assertEqual(str(context.exception),
                         "Keys 'ownerName' and 'owner_name' of Pet both map to the Swift property 'ownerName'")
        nested = Object('Pet', {'owner': Object('owner', {'first_name': Text('a'), 'firstName': Text('b')})})
        with self.assertRaises(ValueError):
            convert_tree_to_swift(nested)

    def test_non_object_root(self):
        tree = Array('Items', (Object('Item', {'id': Number(NumberKind.INT)}),))
        expected = (
            'struct Item: Codable {\n'
            '    let id: Int\n'
            '}\n'
            '\n'
            'typealias Items = [Item]\n'
        )
        self.assertEqual(TreeToSwift().convert(tree, 'items'), expected)
        self.assertEqual(convert_tree_to_swift(Text('x'), 'name'), 'typealias Name = String\n')

    def test_convert_json_to_swift_file(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            json_file = os.path.join(temp_dir, 'pets.json')
            with open(json_file, 'w', encoding='utf-8') as f:
                json.dump([
                    {"name": "Rex", "born": "2015-04-01"},
                    {"name": "Tom", "born": "2018-10-12", "weight": 4.5}
                ], f)
            swift_file = os.path.join(temp_dir, 'out', 'Pet.swift')

            convert_json_to_swift([json_file], swift_file, type_name='Pet')

            with open(swift_file, 'r', encoding='utf-8') as f:
                swift = f.read()
            self.assertTrue(swift.startswith('struct Pet: Codable {\n'))
            self.assertIn('    let born: Date\n', swift)
            self.assertIn('    let weight: Double?\n', swift)


if __name__ == '__main__':
    unittest.main()
