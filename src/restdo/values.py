"""Core type definitions for parsed sections.

This module defines the value types produced by the parser and a few
helpers working on composed YAML nodes. Values are fully resolved: they
are plain Python objects constructed by the YAML loader or the JSON decoder.
"""

from collections.abc import Mapping, Sequence
from datetime import date, datetime
from typing import Any

from yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

#: Scalars are atomic values that a YAML or JSON document may produce.
type Scalar = date | datetime | str | bytes | int | float | bool

#: A value is any scalar or nested container of values.
type Value = Scalar | Sequence['Value'] | Mapping[str, 'Value'] | None

#: A single request body document.
type Document = dict[str, Value]

#: A value received from a loader prior to shape checks.
type RuntimeValue = Any

MAPPINGS = (dict,)
SCALARS = (date, datetime, str, bytes, int, float, bool)
SEQUENCES = (list, tuple)

NULL_TAG = 'tag:yaml.org,2002:null'
STR_TAG = 'tag:yaml.org,2002:str'
BOOL_TAG = 'tag:yaml.org,2002:bool'
TIMESTAMP_TAG = 'tag:yaml.org,2002:timestamp'
MAP_TAG = 'tag:yaml.org,2002:map'
SEQ_TAG = 'tag:yaml.org,2002:seq'

#: Boolean spellings shared by YAML 1.2 and JSON.
#: Other YAML 1.1 spellings (`yes`, `on`, ...) are kept as text.
CORE_BOOLEANS = frozenset(('true', 'True', 'TRUE', 'false', 'False', 'FALSE'))


def _normalize_key(value: RuntimeValue) -> str:
    """Validate and normalize a mapping key.

    Args:
        value: Candidate mapping key.

    Returns:
        The validated key as a string.

    Raises:
        TypeError: If the provided key is not a string.
    """
    if not isinstance(value, str):
        raise TypeError(f'Can not use {value!r} as mapping key')

    return value


def normalize(value: RuntimeValue) -> Value:
    """Recursively normalize a loaded value into a `Value`.

    Mappings keep their insertion order, tuples and sets produced by
    custom loader tags become lists.

    Args:
        value: Loaded value to normalize.

    Returns:
        A normalized value.

    Raises:
        TypeError: If the value or one of its mapping keys has
            an unsupported type.
    """
    if value is None or isinstance(value, SCALARS):
        return value

    if isinstance(value, MAPPINGS):
        return {
            _normalize_key(key): normalize(item)
            for key, item in value.items()
        }

    if isinstance(value, (*SEQUENCES, set)):
        return [
            normalize(item)
            for item in value
        ]

    raise TypeError(f'{value!r} has unsupported type')


def is_null(node: Node) -> bool:
    """Check whether a node is a YAML null scalar."""
    return isinstance(node, ScalarNode) and node.tag == NULL_TAG


def is_string(node: Node) -> bool:
    """Check whether a node is a YAML string scalar."""
    return isinstance(node, ScalarNode) and node.tag == STR_TAG


def scalar_text(node: ScalarNode) -> str | None:
    """Return the source text of a scalar node.

    The text is taken as written in the document, so `1` stays `'1'` and
    `true` stays `'true'` regardless of the implicit type resolved by the
    loader. Null scalars produce `None`.

    Args:
        node: Scalar node to read.

    Returns:
        Source text or `None` for a null scalar.
    """
    if node.tag == NULL_TAG:
        return None

    return str(node.value)


def is_plain_text(node: ScalarNode) -> bool:
    """Check whether a plain scalar only looks typed under YAML 1.1 rules.

    Unquoted dates and booleans such as `on` or `no` are resolved to
    typed values by YAML 1.1 loaders but are plain strings in JSON and
    YAML 1.2 documents.
    """
    if node.style is not None:
        return False

    if node.tag == TIMESTAMP_TAG:
        return True

    return node.tag == BOOL_TAG and node.value not in CORE_BOOLEANS


def describe_node(node: Node) -> str:
    """Human-readable shape name of a node for error messages."""
    if isinstance(node, MappingNode):
        return 'a map'

    if isinstance(node, SequenceNode):
        return 'a sequence'

    if is_null(node):
        return 'null'

    return 'a scalar'
