"""API call section composition.

This module defines a mixin consuming the value of an operation field
and composing an `ApiCallSection` from it. The value is a map whose
`body` fields hold request documents and whose other fields are call
parameters.
"""

from typing import TYPE_CHECKING
from warnings import warn

from pydantic import ValidationError
from yaml.nodes import ScalarNode, SequenceNode

from restdo.errors import ParseWarning, StructureError
from restdo.names import BODY_FIELD, PARAMS_SEPARATOR
from restdo.sections import ApiCallSection
from restdo.values import describe_node, scalar_text

if TYPE_CHECKING:
    from yaml.nodes import Node

    from restdo.values import Document

    from .body import BodyNormalizer
    from .cursor import DocumentCursor


class ApiCallBuilderMixin:
    """Mixin providing API call section composition.

    Implementers provide a body normalizer and the strict mode flag.

    Attributes:
        strict_mode: If True, suspicious input raises an error.
            If False, it is reported as a warning and parsing continues.
    """

    strict_mode: bool = False

    normalizer: 'BodyNormalizer'

    def build_api_call(self, operation: str,
                       cursor: 'DocumentCursor') -> ApiCallSection:
        """Build an API call section from an operation map.

        Body fields are normalized and accumulated in encounter order,
        so a body repeated within the map adds documents instead of
        replacing them. Every other field is a parameter.

        Args:
            operation: Operation name.
            cursor: Cursor over the operation map.

        Returns:
            The API call section without headers.

        Raises:
            StructureError: If a parameter or a body has an unsupported shape.
            ContentParseError: If a stringified body can not be decoded.
        """
        params: dict[str, str] = {}
        bodies: list[Document] = []

        while cursor.next_field():
            name = cursor.field_name
            if name == BODY_FIELD:
                bodies.extend(self.normalizer.normalize(cursor.read_node()))
                continue

            if name in params and (error := self.emit_parse_issue(
                f'Parameter {name!r} of {operation!r} is repeated, keeping the last value',
                cursor.value_node,
                field=name,
            )):
                raise error

            params[name] = self.build_param(name, cursor.read_node())

        try:
            return ApiCallSection(
                operation=operation,
                params=params,
                bodies=tuple(bodies),
            )

        except ValidationError as base:
            raise StructureError.from_yaml_node(
                f'Invalid API call {operation!r}',
                cursor.node,
                field=operation,
                error=base,
            ) from base

    @staticmethod
    def build_param(name: str, node: 'Node') -> str:
        """Convert a parameter value into its string form.

        Scalars are kept as written in the document, nulls become an empty
        string, and sequences of scalars are joined with a comma.

        Args:
            name: Parameter name.
            node: Parameter value node.

        Returns:
            The parameter value as a string.

        Raises:
            StructureError: If the value is neither a scalar nor
                a sequence of scalars.
        """
        if isinstance(node, ScalarNode):
            return scalar_text(node) or ''

        if isinstance(node, SequenceNode):
            items = []
            for item in node.value:
                if not isinstance(item, ScalarNode):
                    raise StructureError.from_yaml_node(
                        f'Parameter {name!r} must be a sequence of scalars, '
                        f'found {describe_node(item)}',
                        item,
                        field=name,
                    )
                items.append(scalar_text(item) or '')
            return PARAMS_SEPARATOR.join(items)

        raise StructureError.from_yaml_node(
            f'Parameter {name!r} must be a scalar or a sequence, found {describe_node(node)}',
            node,
            field=name,
        )

    def emit_parse_issue(self, message: str, node: 'Node | None' = None, *,
                         field: str | None = None) -> StructureError | None:
        """Emit a parse warning or return the exception.

        Args:
            message: Warning message to emit.
            node: Node associated with the issue, if any.
            field: Name of the field associated with the issue, if any.

        Returns:
            StructureError on strict mode, otherwise `None`
                with producing a ParseWarning.
        """
        if self.strict_mode:
            if node is None:
                return StructureError(message)
            return StructureError.from_yaml_node(message, node, field=field)

        warn(message, category=ParseWarning, stacklevel=3)

        return None
