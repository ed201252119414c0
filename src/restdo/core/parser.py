"""Do section parser.

This module defines the top-level parser turning a do section document
into a `DoSection`. The parser scans the fields of the section, handles
the reserved control fields (`catch`, `headers`, `warnings`) itself and
delegates the single remaining field, the operation, to the API call
builder.
"""

from typing import TYPE_CHECKING

from pydantic import ValidationError
from yaml import SafeLoader

from restdo.errors import StructureError
from restdo.names import CATCH_FIELD, HEADERS_FIELD, WARNINGS_FIELD
from restdo.sections import ApiCallSection, DoSection
from restdo.settings import ParserSettings

from .body import BodyNormalizer
from .builder import ApiCallBuilderMixin
from .cursor import DocumentCursor

if TYPE_CHECKING:
    from io import TextIOBase

if TYPE_CHECKING:
    from yaml import BaseLoader
    from yaml.nodes import Node

#: Message of the error raised for a section without an API call.
MISSING_API_CALL = 'client call section is mandatory within a do section'


class DoSectionParser(ApiCallBuilderMixin):
    """Parser of do sections.

    The parser holds configuration only, so a single instance may be
    reused for any number of sections. Each call to `parse` owns the
    cursor it receives until it returns.
    """

    def __init__(self, loader: type['BaseLoader'] = SafeLoader, *,
                 strict: bool | None = None,
                 settings: ParserSettings | None = None) -> None:
        """Initialize the do section parser.

        Args:
            loader: YAML loader class used to compose documents, construct
                body maps, and decode YAML strings.
            strict: Whether repeated keys are rejected. Overrides
                the `strict_duplicate_keys` setting when given.
            settings: Parser settings. Resolved from the environment
                when not given.
        """
        if settings is None:
            settings = ParserSettings()

        self.loader = loader
        self.settings = settings
        self.strict_mode = settings.strict_duplicate_keys if strict is None else strict

        self.normalizer = BodyNormalizer(
            loader,
            strict_duplicate_keys=self.strict_mode,
        )

    def parse(self, cursor: DocumentCursor) -> DoSection:
        """Parse a do section from a cursor over its fields.

        The cursor is consumed up to the end of the section.

        Args:
            cursor: Cursor positioned before the first field of the section.

        Returns:
            The parsed do section.

        Raises:
            StructureError: If the section has no API call, more than one
                API call, or a reserved field of the wrong shape.
            ContentParseError: If a stringified body can not be decoded.
        """
        catch: str | None = None
        headers: dict[str, str] = {}
        warnings: list[str] = []
        api_call: ApiCallSection | None = None

        while cursor.next_field():
            name = cursor.field_name
            if name == CATCH_FIELD:
                catch = cursor.read_scalar()
            elif name == HEADERS_FIELD:
                headers = cursor.read_map()
            elif name == WARNINGS_FIELD:
                warnings = cursor.read_sequence()
            elif api_call is not None:
                raise StructureError.from_yaml_node(
                    f'Only one client call is allowed within a do section, '
                    f'found {name!r} after {api_call.operation!r}',
                    cursor.value_node,
                    field=name,
                )
            else:
                api_call = self.build_api_call(name, cursor.child())

        if api_call is None:
            raise StructureError.from_yaml_node(MISSING_API_CALL, cursor.node)

        try:
            return DoSection(
                catch=catch,
                api_call=api_call.model_copy(update={'headers': headers}),
                expected_warnings=tuple(warnings),
            )

        except ValidationError as base:
            messages = (item['msg'] for item in base.errors(include_url=False))
            raise StructureError.from_yaml_node(
                next(messages, 'Invalid do section'),
                cursor.node,
                field=CATCH_FIELD,
                error=base,
            ) from base

    def parse_node(self, node: 'Node') -> DoSection:
        """Parse a do section from a composed YAML node.

        Args:
            node: Mapping node holding the section fields.

        Returns:
            The parsed do section.
        """
        return self.parse(self.make_cursor(node))

    def parse_string(self, content: 'TextIOBase | str') -> DoSection:
        """Parse a do section from a YAML document.

        Args:
            content: YAML content as a string or file-like object.

        Returns:
            The parsed do section.

        Raises:
            ContentParseError: If the content is not valid YAML.
        """
        return self.parse(DocumentCursor.from_string(
            content,
            self.loader,
            strict_duplicate_keys=self.strict_mode,
        ))

    def make_cursor(self, node: 'Node') -> DocumentCursor:
        """Wrap a node in a cursor configured like this parser."""
        return DocumentCursor(
            node,
            self.loader,
            strict_duplicate_keys=self.strict_mode,
        )
