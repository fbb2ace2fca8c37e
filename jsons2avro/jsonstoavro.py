""" JSON schema to Avro schema converter. """

# pylint: disable=line-too-long, too-many-arguments

import copy
import json
import logging
import os
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Tuple
from urllib.parse import ParseResult, unquote, urlparse

import requests

from jsons2avro.common import avro_name, avro_namespace, hyphen_to_pascal, json_pointer, nested_record_name
from jsons2avro.constants import (AVRO_ARRAY, AVRO_ENUM, AVRO_NULL, AVRO_RECORD, FORMAT_TO_AVRO_LOGICAL_TYPES,
                                  JSON_TO_AVRO_TYPES, RE_ESCAPE, RE_FILENAME, RE_NAMESPACE, RE_SYMBOL)

logger = logging.getLogger(__name__)

# marks an absent 'default' keyword; None is a legitimate JSON default
NO_DEFAULT: Any = object()


class JsonSchemaToAvroError(Exception):
    """
    Exception raised when a JSON schema cannot be converted to Avro.

    Attributes:
        message: Human-readable error description
        path: JSON Pointer of the schema node that caused the error
    """

    def __init__(self, message: str, path: str = '#'):
        self.message = message
        self.path = path
        super().__init__(message if path == '#' else f'{message} at {path}')


class MissingSchemaError(JsonSchemaToAvroError):
    """No schema document was given."""


class MissingIdentifierError(JsonSchemaToAvroError):
    """The schema document has no $id."""


class InvalidIdentifierError(JsonSchemaToAvroError):
    """The schema's $id is not an absolute URI with a host."""


class UnsupportedTypeError(JsonSchemaToAvroError):
    """A scalar schema node declares a type that has no Avro counterpart."""


class NodeKind(Enum):
    """Shape of a JSON schema node, as far as the conversion is concerned."""
    OBJECT = 'object'
    ARRAY = 'array'
    ENUM = 'enum'
    SCALAR = 'scalar'


def classify_node(json_object: dict) -> NodeKind:
    """
    Classify a JSON schema node. Object beats array beats enum; everything
    else is treated as a scalar.
    """
    json_type = json_object.get('type')
    if json_type == 'object' or (json_type is None and 'properties' in json_object):
        return NodeKind.OBJECT
    if json_type == 'array':
        return NodeKind.ARRAY
    if 'enum' in json_object:
        return NodeKind.ENUM
    return NodeKind.SCALAR


class ConversionContext(NamedTuple):
    """
    Position of the converter inside the schema tree.

    records holds the names of the enclosing generated records, outermost
    first. pointer holds the JSON Pointer parts of the current node.
    """
    records: Tuple[str, ...] = ()
    pointer: Tuple[str, ...] = ()

    @property
    def parent(self) -> str:
        """Name of the nearest enclosing generated record, or ''."""
        return self.records[-1] if self.records else ''

    @property
    def location(self) -> str:
        """JSON Pointer of the current node."""
        return json_pointer(self.pointer)

    def enter(self, *parts: str) -> 'ConversionContext':
        """Descend into a child node."""
        return self._replace(pointer=self.pointer + parts)

    def enter_record(self, name: str) -> 'ConversionContext':
        """Descend into the fields of a generated record."""
        return self._replace(records=self.records + (name,))


def resolve_required_type(avro_type: str | list | dict, is_required: bool, default: Any = NO_DEFAULT) -> Dict[str, Any]:
    """
    Apply the required/default policy to a field type.

    Required fields keep their type as is. Optional fields become a union with
    'null': listed last when the field has a default (so that the default
    matches the first branch), listed first otherwise. A union that starts
    with 'null' always gets a null default.

    Args:
        avro_type: The candidate Avro type.
        is_required: Whether the field is listed in 'required'.
        default: The field's default value, or NO_DEFAULT.

    Returns:
        dict: 'type' and, where one applies, 'default'.
    """
    # a null default can only be honored with null listed first
    is_defaulted = default is not NO_DEFAULT and default is not None
    if is_required:
        resolved_type = avro_type
    else:
        alternatives = [t for t in avro_type if t != AVRO_NULL] if isinstance(avro_type, list) else [avro_type]
        if is_defaulted:
            resolved_type = alternatives + [AVRO_NULL]
        else:
            resolved_type = [AVRO_NULL] + alternatives

    if isinstance(resolved_type, list) and resolved_type and resolved_type[0] == AVRO_NULL:
        return {'type': resolved_type, 'default': None}
    if default is not NO_DEFAULT:
        return {'type': resolved_type, 'default': default}
    return {'type': resolved_type}


class JsonSchemaToAvroConverter:
    """
    Converts JSON schema to Avro schema.

    Attributes:
    namespace: Namespace to use instead of the one derived from $id.
    root_class_name: Record name used when $id does not name a file.
    logical_types: Whether 'format' maps to Avro logical types.
    """

    def __init__(self) -> None:
        self.namespace = ''
        self.root_class_name = 'Document'
        self.logical_types = False

    def parse_id(self, id: str) -> ParseResult:
        """Parse a schema $id, which must be an absolute URI."""
        if not id:
            raise MissingIdentifierError(
                'No $id provided for schema: https://json-schema.org/understanding-json-schema/basics.html#declaring-a-unique-identifier')
        parsed_url = urlparse(id) if isinstance(id, str) else None
        if not parsed_url or not parsed_url.hostname:
            raise InvalidIdentifierError(
                f'Every top-level schema should set $id to an absolute URI, got {id!r}: https://json-schema.org/understanding-json-schema/structuring.html#id')
        return parsed_url

    def id_to_avro_namespace(self, id: str) -> str:
        """
        Convert a schema $id to an Avro namespace.

        The host is reversed ('api.example.com' becomes 'com.example.api') and
        the path up to the version segment is appended, one namespace segment
        per run of alphanumerics.
        """
        parsed_url = self.parse_id(id)
        prefix = reversed(parsed_url.hostname.split('.'))
        path = parsed_url.path
        match = RE_NAMESPACE.match(path)
        if match:
            path = match.group(1)
        suffix = RE_ESCAPE.sub('.', path).split('.')
        return avro_namespace(*prefix, *suffix)

    def id_to_avro_name(self, id: str) -> str:
        """
        Convert a schema $id to an Avro record name.

        'https://api.example.com/v1/create-order.json' gives 'CreateOrder'.
        Without a version segment the last path segment is used.
        """
        parsed_url = self.parse_id(id)
        match = RE_FILENAME.match(parsed_url.path)
        if match:
            file_name = match.group(1)
        else:
            file_name = parsed_url.path.rstrip('/').rsplit('/', 1)[-1].split('.')[0]
        name = hyphen_to_pascal(file_name)
        return avro_name(name if name else self.root_class_name)

    def json_schema_primitive_to_avro_type(self, json_primitive: str | list | None, format: str | None, context: ConversionContext) -> str | dict | list:
        """
        Convert a JSON-schema primitive type (or a list of them) to Avro.

        Args:
            json_primitive: The JSON-schema type name(s).
            format: The node's 'format', if any.
            context: Where the node sits in the schema.

        Returns:
            str | dict | list: The Avro type. Lists keep their order.
        """
        if isinstance(json_primitive, list):
            return [self.json_schema_primitive_to_avro_type(t, format, context) for t in json_primitive]

        avro_primitive = JSON_TO_AVRO_TYPES.get(json_primitive) if isinstance(json_primitive, str) else None
        if avro_primitive is None:
            raise UnsupportedTypeError(f'Unsupported JSON schema type {json_primitive!r}', context.location)

        if self.logical_types and isinstance(format, str):
            if json_primitive == 'integer' and format == 'int64':
                return 'long'
            if json_primitive == 'string' and format in FORMAT_TO_AVRO_LOGICAL_TYPES:
                return copy.deepcopy(FORMAT_TO_AVRO_LOGICAL_TYPES[format])
        return avro_primitive

    def classify(self, json_object: Any, context: ConversionContext) -> NodeKind:
        """Classify a schema node, rejecting nodes that are not JSON objects."""
        if not isinstance(json_object, dict):
            raise UnsupportedTypeError(f'Expected a schema object, got {json_object!r}', context.location)
        return classify_node(json_object)

    def create_complex_type(self, name: str, json_object: dict, context: ConversionContext) -> dict:
        """Create the Avro record for an anonymous nested object."""
        record_name = nested_record_name(name, context.parent)
        return {
            'type': AVRO_RECORD,
            'name': record_name,
            'fields': self.convert_properties(json_object.get('properties') or {}, json_object.get('required'), context.enter_record(record_name))
        }

    def create_enum_type(self, name: str, json_object: dict, context: ConversionContext) -> str | dict:
        """Create an Avro enum type, or 'string' if a symbol is not a valid Avro name."""
        symbols = json_object['enum']
        if isinstance(symbols, list) and all(isinstance(s, str) and RE_SYMBOL.fullmatch(s) for s in symbols):
            return {
                'type': AVRO_ENUM,
                'name': f'{name}_enum',
                'symbols': list(symbols)
            }
        logger.warning('Enum at %s has symbols that are not valid Avro names, converting it to string', context.location)
        return JSON_TO_AVRO_TYPES['string']

    def create_array_type(self, name: str, json_object: dict, context: ConversionContext) -> dict:
        """Create an Avro array type. Items are never nullable on their own."""
        items_context = context.enter('items')
        items = json_object.get('items')
        kind = self.classify(items, items_context)
        if kind is NodeKind.OBJECT:
            items_type = self.create_complex_type(name, items, items_context)
        elif kind is NodeKind.ARRAY:
            items_type = self.create_array_type(name, items, items_context)
        elif kind is NodeKind.ENUM:
            items_type = self.create_enum_type(name, items, items_context)
        else:
            items_type = self.json_schema_primitive_to_avro_type(items.get('type'), items.get('format'), items_context)
        return {
            'type': AVRO_ARRAY,
            'items': items_type
        }

    def create_field(self, name: str, json_object: dict, avro_type: str | list | dict, is_required: bool, with_default: bool) -> dict:
        """Create an Avro field, applying the required/default policy."""
        default = copy.deepcopy(json_object['default']) if with_default and 'default' in json_object else NO_DEFAULT
        field = {
            'name': name,
            'doc': json_object.get('description') or '',
            **resolve_required_type(avro_type, is_required, default)
        }
        # an explicit default always wins
        if default is not NO_DEFAULT:
            field['default'] = default
        return field

    def convert_complex_property(self, name: str, json_object: dict, is_required: bool, context: ConversionContext) -> dict:
        """Convert an object property to a field holding a nested record."""
        avro_type = self.create_complex_type(name, json_object, context)
        return self.create_field(name, json_object, avro_type, is_required, with_default=False)

    def convert_array_property(self, name: str, json_object: dict, is_required: bool, context: ConversionContext) -> dict:
        """Convert an array property."""
        avro_type = self.create_array_type(name, json_object, context)
        return self.create_field(name, json_object, avro_type, is_required, with_default=False)

    def convert_enum_property(self, name: str, json_object: dict, is_required: bool, context: ConversionContext) -> dict:
        """Convert an enum property."""
        avro_type = self.create_enum_type(name, json_object, context)
        return self.create_field(name, json_object, avro_type, is_required, with_default=True)

    def convert_scalar_property(self, name: str, json_object: dict, is_required: bool, context: ConversionContext) -> dict:
        """Convert a property with a primitive type or a union of primitive types."""
        avro_type = self.json_schema_primitive_to_avro_type(json_object.get('type'), json_object.get('format'), context)
        return self.create_field(name, json_object, avro_type, is_required, with_default=True)

    def convert_property(self, name: str, json_object: dict, is_required: bool, context: ConversionContext) -> dict:
        """Convert a single property to an Avro field."""
        kind = self.classify(json_object, context)
        if kind is NodeKind.OBJECT:
            return self.convert_complex_property(name, json_object, is_required, context)
        if kind is NodeKind.ARRAY:
            return self.convert_array_property(name, json_object, is_required, context)
        if kind is NodeKind.ENUM:
            return self.convert_enum_property(name, json_object, is_required, context)
        return self.convert_scalar_property(name, json_object, is_required, context)

    def convert_properties(self, properties: dict, required: List[str] | None, context: ConversionContext) -> List[dict]:
        """Convert a 'properties' map to a list of Avro fields, keeping its order."""
        required = required or []
        return [self.convert_property(name, json_object, name in required, context.enter('properties', name))
                for name, json_object in properties.items()]

    def jsons_to_avro(self, json_schema: dict, additional_fields: List[dict] | None = None) -> dict:
        """
        Convert a JSON-schema document to an Avro record schema.

        Args:
            json_schema: The JSON schema document.
            additional_fields: Avro fields appended as is after the converted ones.

        Returns:
            dict: The Avro record schema.
        """
        if not json_schema and not isinstance(json_schema, dict):
            raise MissingSchemaError('No schema given')
        if not isinstance(json_schema, dict):
            raise JsonSchemaToAvroError(f'The schema document must be a JSON object, got {type(json_schema).__name__}')

        schema_id = json_schema.get('$id')
        namespace = self.id_to_avro_namespace(schema_id)
        name = self.id_to_avro_name(schema_id)
        logger.debug('Converting JSON schema %s to Avro record %s.%s', schema_id, self.namespace or namespace, name)

        avro_schema: Dict[str, Any] = {
            'namespace': self.namespace or namespace,
            'name': name,
            'type': AVRO_RECORD,
        }
        if json_schema.get('description') is not None:
            avro_schema['doc'] = json_schema['description']
        fields = self.convert_properties(json_schema.get('properties') or {}, json_schema.get('required'), ConversionContext())
        fields.extend(copy.deepcopy(additional_fields or []))
        avro_schema['fields'] = fields
        return avro_schema

    def fetch_content(self, url: str) -> str:
        """
        Fetches the content from a local path, a file URI or an HTTP(S) URL.

        Raises:
            requests.RequestException: If there is an error while making the HTTP request.
            OSError: If there is an error while reading the file.
        """
        parsed_url = urlparse(url)
        if parsed_url.scheme in ['http', 'https']:
            response = requests.get(url, timeout=30)
            # Raises an HTTPError if the response status code is 4XX/5XX
            response.raise_for_status()
            return response.text

        file_path = url
        if parsed_url.scheme == 'file':
            file_path = unquote(parsed_url.netloc + parsed_url.path)
            # On Windows, a file URL might start with a '/' but it's not part of the actual path
            if os.name == 'nt' and file_path.startswith('/'):
                file_path = file_path[1:]
        with open(file_path, 'r', encoding='utf-8') as file:
            return file.read()

    def convert_jsons_file_to_avro(self, json_schema_file_path: str, avro_schema_path: str, additional_fields: List[dict] | None = None) -> dict:
        """Convert JSON schema file to Avro schema file."""
        content = self.fetch_content(json_schema_file_path)
        avro_schema = self.jsons_to_avro(json.loads(content), additional_fields)

        # create the directory for the Avro schema file if it doesn't exist
        dir = os.path.dirname(avro_schema_path)
        if dir != '' and not os.path.exists(dir):
            os.makedirs(dir, exist_ok=True)
        with open(avro_schema_path, 'w', encoding='utf-8') as avro_file:
            json.dump(avro_schema, avro_file, indent=4)
        return avro_schema


def create_converter(namespace: str = '', root_class_name: str = '', logical_types: bool = False) -> JsonSchemaToAvroConverter:
    """Create a configured converter."""
    converter = JsonSchemaToAvroConverter()
    converter.namespace = namespace
    if root_class_name:
        converter.root_class_name = root_class_name
    converter.logical_types = logical_types
    return converter


def convert_jsons_to_avro(json_schema: dict, additional_fields: List[dict] | None = None, namespace: str = '', root_class_name: str = '', logical_types: bool = False) -> dict:
    """Convert a JSON schema document to an Avro record schema."""
    converter = create_converter(namespace, root_class_name, logical_types)
    return converter.jsons_to_avro(json_schema, additional_fields)


def convert_jsons_file_to_avro(json_schema_file_path: str, avro_schema_path: str, additional_fields: List[dict] | None = None, namespace: str = '', root_class_name: str = '', logical_types: bool = False) -> dict:
    """Convert JSON schema file to Avro schema file."""

    if not json_schema_file_path:
        raise ValueError('JSON schema file path is required')
    if not json_schema_file_path.startswith('http') and not json_schema_file_path.startswith('file:'):
        if not os.path.exists(json_schema_file_path):
            raise FileNotFoundError(f'JSON schema file {json_schema_file_path} not found')

    converter = create_converter(namespace, root_class_name, logical_types)
    return converter.convert_jsons_file_to_avro(json_schema_file_path, avro_schema_path, additional_fields)
