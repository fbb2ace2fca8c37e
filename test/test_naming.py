import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from jsons2avro.common import avro_name, avro_namespace, hyphen_to_pascal, json_pointer, md5_hex, nested_record_name
from jsons2avro.jsonstoavro import (ConversionContext, InvalidIdentifierError, JsonSchemaToAvroConverter,
                                    MissingIdentifierError, NodeKind, classify_node)


class TestIdentifierNaming(unittest.TestCase):

    def setUp(self):
        self.converter = JsonSchemaToAvroConverter()

    def test_namespace_from_host(self):
        self.assertEqual(self.converter.id_to_avro_namespace("https://api.example.com/v1/create-order.json"), "com.example.api")

    def test_namespace_without_path(self):
        self.assertEqual(self.converter.id_to_avro_namespace("https://api.example.com"), "com.example.api")
        self.assertEqual(self.converter.id_to_avro_namespace("https://api.example.com/"), "com.example.api")

    def test_namespace_keeps_path_before_version(self):
        self.assertEqual(self.converter.id_to_avro_namespace("https://example.com/schemas/sales-orders/v3/order.json"),
                         "com.example.schemas.sales.orders")

    def test_namespace_uses_last_version_segment(self):
        self.assertEqual(self.converter.id_to_avro_namespace("https://example.com/v1/legacy/v2/order.json"),
                         "com.example.v1.legacy")

    def test_namespace_without_version(self):
        self.assertEqual(self.converter.id_to_avro_namespace("https://example.com/schemas/order.json"),
                         "com.example.schemas.order.json")

    def test_namespace_segments_are_avro_names(self):
        self.assertEqual(self.converter.id_to_avro_namespace("https://my-api.example.com/2024/v1/order.json"),
                         "com.example.my_api._2024")

    def test_name_from_file(self):
        self.assertEqual(self.converter.id_to_avro_name("https://api.example.com/v1/create-order.json"), "CreateOrder")
        self.assertEqual(self.converter.id_to_avro_name("https://api.example.com/V2/order.json"), "Order")

    def test_name_without_version(self):
        self.assertEqual(self.converter.id_to_avro_name("https://api.example.com/schemas/order-line.json"), "OrderLine")

    def test_name_without_path(self):
        self.assertEqual(self.converter.id_to_avro_name("https://api.example.com"), "Document")
        self.converter.root_class_name = "Root"
        self.assertEqual(self.converter.id_to_avro_name("https://api.example.com/"), "Root")

    def test_missing_identifier(self):
        with self.assertRaises(MissingIdentifierError):
            self.converter.id_to_avro_namespace("")
        with self.assertRaises(MissingIdentifierError):
            self.converter.id_to_avro_name(None)

    def test_invalid_identifier(self):
        for schema_id in ("not-a-uri", "/v1/create-order.json", "urn:example:order", 42):
            with self.assertRaises(InvalidIdentifierError):
                self.converter.id_to_avro_namespace(schema_id)


class TestNameHelpers(unittest.TestCase):

    def test_hyphen_to_pascal(self):
        self.assertEqual(hyphen_to_pascal("create-order"), "CreateOrder")
        self.assertEqual(hyphen_to_pascal("order"), "Order")
        self.assertEqual(hyphen_to_pascal("get--HTTPStatus"), "GetHTTPStatus")
        self.assertEqual(hyphen_to_pascal(""), "")

    def test_avro_name(self):
        self.assertEqual(avro_name("my-api"), "my_api")
        self.assertEqual(avro_name("2024"), "_2024")
        self.assertEqual(avro_name(7), "_7")

    def test_avro_namespace_skips_empty(self):
        self.assertEqual(avro_namespace("com", "", "example", None), "com.example")

    def test_nested_record_name(self):
        self.assertEqual(nested_record_name("address", ""), "address_record")
        self.assertEqual(nested_record_name("address", "customer_record"), "address_" + md5_hex("customer_record"))
        self.assertEqual(md5_hex("customer_record"), "d4c678e6241dd553c31f4f71821368cf")

    def test_json_pointer(self):
        self.assertEqual(json_pointer([]), "#")
        self.assertEqual(json_pointer(["properties", "a/b", "items"]), "#/properties/a~1b/items")


class TestClassification(unittest.TestCase):

    def test_classify(self):
        self.assertIs(classify_node({"type": "object"}), NodeKind.OBJECT)
        self.assertIs(classify_node({"properties": {}}), NodeKind.OBJECT)
        self.assertIs(classify_node({"type": "array", "items": {}}), NodeKind.ARRAY)
        self.assertIs(classify_node({"type": "string", "enum": ["A"]}), NodeKind.ENUM)
        self.assertIs(classify_node({"enum": ["A"]}), NodeKind.ENUM)
        self.assertIs(classify_node({"type": "string"}), NodeKind.SCALAR)
        self.assertIs(classify_node({"type": ["string", "null"]}), NodeKind.SCALAR)

    def test_object_wins_over_enum(self):
        self.assertIs(classify_node({"type": "object", "enum": ["A"]}), NodeKind.OBJECT)
        self.assertIs(classify_node({"type": "array", "enum": ["A"]}), NodeKind.ARRAY)

    def test_context(self):
        context = ConversionContext()
        self.assertEqual(context.parent, "")
        self.assertEqual(context.location, "#")
        nested = context.enter("properties", "customer").enter_record("customer_record").enter("properties", "name")
        self.assertEqual(nested.parent, "customer_record")
        self.assertEqual(nested.location, "#/properties/customer/properties/name")
        self.assertEqual(context, ConversionContext())


if __name__ == '__main__':
    unittest.main()
