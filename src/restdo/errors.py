"""Core exception hierarchy.

This module defines base error and warning types used across the library
to report structural problems of do sections, failures to decode
stringified bodies, and misuse of the document cursor in a structured
and extensible way.
"""

from os import linesep
from typing import TYPE_CHECKING, TypedDict

from yaml.error import MarkedYAMLError

if TYPE_CHECKING:
    from json import JSONDecodeError
    from typing import Self

if TYPE_CHECKING:
    from yaml.error import Mark
    from yaml.nodes import Node

FORMAT_FILENAME = '<unicode string>'
FORMAT_INDENT = 4


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter adapts output based on
    provided values.
    """

    #: Name of the source file where the error occurred.
    filename: str | None

    #: Line number in the source file (zero-based).
    line_num: int | None
    #: Column number in the source file (zero-based).
    column_num: int | None

    #: Name of the field being read when the error occurred.
    field: str | None

    #: Underlying exception that triggered formatting.
    error: Exception | None

    #: Source snippet pointing to the failing node.
    snippet: str | None


class ErrorFormatter:
    """Utility class for formatting section errors.

    This formatter is responsible for producing human-readable
    error messages with optional source location and source
    snippets.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context with location and data.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        message += linesep
        message += cls.get_location_string(context, indent=FORMAT_INDENT)
        message += cls.get_snippet_string(context, indent=FORMAT_INDENT * 2)

        return message

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format source location information.

        Args:
            context: Error context containing location metadata.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted location string including filename, line,
            column and field name when available.
        """
        indent = cls._ensure_indent(indent)

        filename = context.get('filename')
        if not filename:
            filename = FORMAT_FILENAME

        message = f'{indent}in "{filename}"'
        if (line_num := context.get('line_num')) is not None:
            line_num += 1
            message += f', line {line_num}'
            if (column_num := context.get('column_num')) is not None:
                column_num += 1
                message += f', column {column_num}'
        message += linesep

        if field := context.get('field'):
            message += f'{indent}on field {field!r}{linesep}'

        return message

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Generate a formatted snippet illustrating the error context.

        Args:
            context: Error context containing the source snippet.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted multi-line snippet string, or an empty string
            if no snippet data is available.
        """
        indent = cls._ensure_indent(indent)

        if snippet := context.get('snippet'):
            return cls._make_indent(snippet, indent)

        return ''

    @staticmethod
    def _make_indent(value: str, indent: str) -> str:
        """Apply indentation to a multi-line string.

        Empty or whitespace-only lines are omitted.
        """
        if not indent:
            return value

        return linesep.join(
            f'{indent}{line}'
            for line in value.splitlines()
            if line.strip()
        )

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Normalize indentation input to a string."""
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''


class ParseWarning(UserWarning):
    """Warning emitted for non-fatal parsing issues.

    This warning is used when a document is accepted in non-strict mode
    but contains something the author probably did not intend, such as
    a parameter repeated within one API call.
    """


class RestDoError(Exception, ErrorFormatter):
    """Base exception for all restdo errors.

    All custom exceptions raised by the library inherit from this class
    to allow unified error handling by callers.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context containing optional location values.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String representation."""
        return self.format(self.message, self.context)

    @staticmethod
    def _mark_context(mark: 'Mark | None', field: str | None = None,
                      error: Exception | None = None) -> ErrorContext:
        """Build an error context from a YAML mark."""
        if mark is None:
            return ErrorContext(field=field, error=error)

        return ErrorContext(
            filename=mark.name,
            line_num=mark.line,
            column_num=mark.column,
            field=field,
            error=error,
            snippet=mark.get_snippet(indent=0),
        )

    @classmethod
    def from_yaml_node(cls, message: str, node: 'Node', *,
                       field: str | None = None,
                       error: Exception | None = None) -> 'Self':
        """Create an error instance from a YAML node.

        This helper extracts positional information from a PyYAML
        node and attaches it to the resulting error context.

        Args:
            message: Human-readable error message.
            node: YAML node associated with the error.
            field: Name of the field holding the node, if known.
            error: Optional underlying exception.

        Returns:
            An initialized error instance with location context.
        """
        return cls(message, context=cls._mark_context(node.start_mark, field, error))


class StructureError(RestDoError):
    """Error raised when a document does not match the do section grammar.

    This covers a missing API call, more than one API call in a section,
    and reserved fields holding a value of the wrong shape.
    """


class ContentParseError(RestDoError):
    """Error raised when a stringified body can not be decoded.

    The original decoder error is kept as `error` in the context and is
    always chained as the cause of this exception. Its message and its
    position inside the string are repeated in the error message.
    """

    @classmethod
    def from_yaml_error(cls, error: MarkedYAMLError,
                        node: 'Node | None' = None) -> 'Self':
        """Create a content error from a YAML parsing failure.

        Args:
            error: Exception raised by the YAML parser.
            node: Node holding the decoded string, if the YAML text was
                embedded in another document.

        Returns:
            ContentParseError representing the YAML parsing failure.
        """
        message = 'Invalid YAML'
        if error.problem:
            message += f'{linesep}{' ' * FORMAT_INDENT}{error.problem}'

        if node is None:
            return cls(message, context=cls._mark_context(error.problem_mark, error=error))

        if (mark := error.problem_mark) is not None:
            message += f' (line {mark.line + 1}, column {mark.column + 1} of the body)'

        return cls(message, context=cls._mark_context(node.start_mark, error=error))

    @classmethod
    def from_json_error(cls, error: 'JSONDecodeError',
                        node: 'Node | None' = None) -> 'Self':
        """Create a content error from a JSON decoding failure.

        Args:
            error: Exception raised by the JSON decoder.
            node: Node holding the decoded string, if known.

        Returns:
            ContentParseError representing the JSON decoding failure.
        """
        message = f'Invalid JSON{linesep}{' ' * FORMAT_INDENT}{error}'
        if node is None:
            return cls(message, context=ErrorContext(
                line_num=error.lineno - 1,
                column_num=error.colno - 1,
                error=error,
            ))

        return cls(message, context=cls._mark_context(node.start_mark, error=error))


class CursorError(RestDoError):
    """Error raised when the document cursor is used out of order.

    Reading a value before positioning on a field, or reading the same
    value twice, breaks the forward-only contract of the cursor.
    """
