"""

Command line utility to convert a JSON schema document to an Avro schema.

"""


import argparse
import json
import logging
import os
import sys
import tempfile
from jsons2avro import _version
from jsons2avro.jsonstoavro import convert_jsons_file_to_avro, create_converter


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(description='Convert a JSON schema document to an Avro schema.')
    parser.add_argument('--version', action='store_true', help='Print the version of jsons2avro.')
    parser.add_argument('--input', type=str, help='Path or URL of the JSON schema file. Reads stdin if omitted.')
    parser.add_argument('--out', type=str, help='Path of the Avro schema file to write. Writes to stdout if omitted.')
    parser.add_argument('--namespace', type=str, default='', help='Avro namespace to use instead of the one derived from $id.')
    parser.add_argument('--root-class-name', dest='root_class_name', type=str, default='', help='Record name to use when $id does not name a file.')
    parser.add_argument('--additional-fields', dest='additional_fields', type=str, help='Path of a JSON file holding a list of Avro fields to append to the record.')
    parser.add_argument('--logical-types', dest='logical_types', action='store_true', help='Map JSON schema formats to Avro logical types.')
    parser.add_argument('--verbose', action='store_true', help='Log debug output to stderr.')
    return parser


def load_additional_fields(additional_fields_path: str | None) -> list | None:
    """Load the list of additional Avro fields from a JSON file."""
    if not additional_fields_path:
        return None
    with open(additional_fields_path, 'r', encoding='utf-8') as f:
        additional_fields = json.load(f)
    if not isinstance(additional_fields, list):
        raise ValueError(f'{additional_fields_path} must hold a JSON array of Avro fields')
    return additional_fields


def main():
    """Main function for the command line utility."""
    parser = create_parser()
    args = parser.parse_args()

    if getattr(args, 'version', False):
        print(f'jsons2avro {_version.version}')
        return

    logging.basicConfig(level=logging.DEBUG if getattr(args, 'verbose', False) else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    temp_input = None
    try:
        input_file_path = getattr(args, 'input', None)
        if input_file_path is None:
            temp_input = tempfile.NamedTemporaryFile(delete=False, mode='w', encoding='utf-8')
            input_file_path = temp_input.name
            # read to EOF
            s = sys.stdin.read()
            while s:
                temp_input.write(s)
                s = sys.stdin.read()
            temp_input.flush()
            temp_input.close()

        additional_fields = load_additional_fields(getattr(args, 'additional_fields', None))
        namespace = getattr(args, 'namespace', '') or ''
        root_class_name = getattr(args, 'root_class_name', '') or ''
        logical_types = getattr(args, 'logical_types', False)

        output_file_path = getattr(args, 'out', None)
        if output_file_path:
            print(f'Converting JSON schema {input_file_path} to Avro schema {output_file_path}')
            convert_jsons_file_to_avro(input_file_path, output_file_path, additional_fields,
                                       namespace=namespace, root_class_name=root_class_name, logical_types=logical_types)
        else:
            converter = create_converter(namespace, root_class_name, logical_types)
            json_schema = json.loads(converter.fetch_content(input_file_path))
            avro_schema = converter.jsons_to_avro(json_schema, additional_fields)
            sys.stdout.write(json.dumps(avro_schema, indent=4) + '\n')

    except Exception as e:
        print("Error: ", str(e))
        sys.exit(1)
    finally:
        if temp_input:
            try:
                os.remove(temp_input.name)
            except OSError as e:
                print(f"Error: Could not delete temporary input file {temp_input.name}. {e}")

if __name__ == "__main__":
    main()
