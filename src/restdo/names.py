"""Section names primitive types and validation rules.

This module defines strongly-typed aliases for identifiers that appear in
do sections. The rules are intentionally loose: an operation name is only
required to be non-empty, checking it against an API catalogue is a caller
concern.
"""

from re import ASCII
from re import compile as regexp
from typing import Annotated

from pydantic import Field

#: Reserved field names of a do section.
CATCH_FIELD = 'catch'
HEADERS_FIELD = 'headers'
WARNINGS_FIELD = 'warnings'

#: Reserved field name of an API call.
BODY_FIELD = 'body'

#: Separator used for sequence-valued parameters.
PARAMS_SEPARATOR = ','

#: Compiled pattern for dotted operation names ("get", "indices.get_warmer").
OPERATION_PATTERN = regexp(
    r'^(?P<namespace>([^\s.]+\.)*)(?P<name>[^\s.]+)$',
    flags=ASCII,
)


Operation = Annotated[
    str, Field(
        min_length=1,
        title='Operation identifier',
        description=(
            'Dotted-path name of the API call performed by a do section. '
            'The last path component is the call name, leading components '
            'form its namespace (for example, `indices.get_warmer`).'
        ),
        examples=[
            'get',
            'cluster.node_info',
            'indices.get_warmer',
        ],
    ),
]


def split_operation(operation: str) -> tuple[str | None, str]:
    """Split an operation name into its namespace and call name.

    Args:
        operation: Operation name.

    Returns:
        A tuple of the namespace (or `None` for a top-level call)
        and the call name. Names not matching the dotted-path
        pattern are returned as a top-level call.
    """
    match = OPERATION_PATTERN.match(operation)
    if not match or not match['namespace']:
        return None, operation

    return match['namespace'][:-1], match['name']
