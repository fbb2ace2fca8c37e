"""Constants for the jsons2avro package.

These tables are built once at import time and are never modified afterwards.
"""

import re

AVRO_NULL = 'null'
AVRO_RECORD = 'record'
AVRO_ENUM = 'enum'
AVRO_ARRAY = 'array'

# JSON schema on the left, Avro on the right
JSON_TO_AVRO_TYPES = {
    'string': 'string',
    'null': AVRO_NULL,
    'boolean': 'boolean',
    'integer': 'int',
    'number': 'float',
}

# only applied when the converter runs with logical types enabled
FORMAT_TO_AVRO_LOGICAL_TYPES = {
    'date-time': {'type': 'long', 'logicalType': 'timestamp-millis'},
    'date': {'type': 'int', 'logicalType': 'date'},
    'time': {'type': 'int', 'logicalType': 'time-millis'},
    'uuid': {'type': 'string', 'logicalType': 'uuid'},
}

RE_SYMBOL = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')
RE_NAMESPACE = re.compile(r'(.*)/(v\d)/.*', re.IGNORECASE)
RE_ESCAPE = re.compile(r'[^a-z0-9]+', re.IGNORECASE)
RE_FILENAME = re.compile(r'.*/v\d/([a-z0-9_-]*)\.json', re.IGNORECASE)
