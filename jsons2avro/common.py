"""
Common utility functions for jsons2avro.
"""

# pylint: disable=line-too-long

import re
import hashlib
from typing import Iterable

from jsonpointer import JsonPointer


def avro_name(name):
    """Convert a name into an Avro name."""
    if isinstance(name, int):
        name = '_'+str(name)
    val = re.sub(r'[^a-zA-Z0-9_]', '_', name)
    if re.match(r'^[0-9]', val):
        val = '_' + val
    return val


def avro_namespace(*names) -> str:
    """Compose an Avro namespace from a list of names, skipping empty ones."""
    return '.'.join(avro_name(n) for n in names if n)


def hyphen_to_pascal(string: str) -> str:
    """
    Convert a hyphen-case string to PascalCase.

    Only the first character of each piece is upper-cased; the rest of the
    piece is kept as is, so 'create-order' becomes 'CreateOrder' and
    'get-HTTPStatus' becomes 'GetHTTPStatus'. Empty pieces are skipped.

    Args:
        string (str): The string to convert.

    Returns:
        str: The string in PascalCase.
    """
    return ''.join(piece[0].upper() + piece[1:] for piece in string.split('-') if piece)


def md5_hex(value: str) -> str:
    """Return the hex MD5 digest of a string."""
    return hashlib.md5(value.encode('utf-8')).hexdigest()


def nested_record_name(field_name: str, parent: str) -> str:
    """
    Name an anonymous nested record.

    Records declared directly under the root are named '<field>_record'.
    Deeper records carry the hash of the enclosing record's name, so two
    properties with the same name in different branches never collide.
    """
    if parent:
        return f'{field_name}_{md5_hex(parent)}'
    return f'{field_name}_record'


def json_pointer(parts: Iterable[str]) -> str:
    """Build a URI fragment JSON Pointer ('#/properties/a') from path parts."""
    return '#' + JsonPointer.from_parts(list(parts)).path
