"""Request body normalization.

A body field may hold a map, a pre-serialized string, or a sequence mixing
both. This module turns any of these shapes into an ordered tuple of
documents, each a mapping of string keys to values.

Stringified bodies are decoded by content sniffing: text starting with
`{` or `[` is JSON and may hold several newline-delimited documents (the
bulk convention), any other text is decoded as a YAML document stream.
All three shapes produce the same documents for the same content: keys
are kept as written and plain YAML scalars are typed like JSON values.
"""

from json import JSONDecodeError, JSONDecoder
from typing import TYPE_CHECKING

from yaml import SafeLoader, compose_all
from yaml.error import MarkedYAMLError
from yaml.nodes import MappingNode, SequenceNode

from restdo.errors import ContentParseError, StructureError
from restdo.names import BODY_FIELD
from restdo.values import describe_node, is_string, normalize

from .cursor import DocumentCursor, construct_node

if TYPE_CHECKING:
    from collections.abc import Iterator

if TYPE_CHECKING:
    from yaml import BaseLoader
    from yaml.nodes import Node

    from restdo.values import Document, RuntimeValue

#: Leading characters of JSON encoded bodies.
JSON_MARKERS = ('{', '[')


class BodyNormalizer:
    """Convert raw body values into documents.

    Attributes:
        loader: YAML loader class used to construct maps and decode
            YAML strings.
        strict_duplicate_keys: Whether documents decoded from strings
            are rejected when they repeat a key.
    """

    def __init__(self, loader: type['BaseLoader'] = SafeLoader, *,
                 strict_duplicate_keys: bool = False) -> None:
        """Initialize a normalizer.

        Args:
            loader: YAML loader class used to construct values.
            strict_duplicate_keys: Whether repeated keys within
                stringified bodies are rejected.
        """
        self.loader = loader
        self.strict_duplicate_keys = strict_duplicate_keys
        self._json = JSONDecoder(object_pairs_hook=self._json_object)

    def normalize(self, node: 'Node') -> tuple['Document', ...]:
        """Normalize a body node into one or more documents.

        Args:
            node: Node of the body value.

        Returns:
            Documents in source order.

        Raises:
            StructureError: If the body or one of its elements has an
                unsupported shape, or decodes to something other than a map.
            ContentParseError: If a stringified body can not be decoded.
        """
        if isinstance(node, MappingNode):
            return (self._document(self._construct(node), node),)

        if is_string(node):
            return self.decode(node.value, node)  # type: ignore[attr-defined]

        if isinstance(node, SequenceNode):
            return tuple(
                document
                for item in node.value
                for document in self.normalize(item)
            )

        raise StructureError.from_yaml_node(
            f'Body must be a map, a string or a sequence, found {describe_node(node)}',
            node,
            field=BODY_FIELD,
        )

    def decode(self, content: str, node: 'Node | None' = None) -> tuple['Document', ...]:
        """Decode a stringified body.

        Args:
            content: Serialized body.
            node: Node holding the string, used for error locations.

        Returns:
            Decoded documents in order.

        Raises:
            StructureError: If the string holds no document, a decoded
                document is not a map, or, in strict mode, a decoded
                document repeats a key.
            ContentParseError: If the string can not be decoded.
        """
        if content.lstrip().startswith(JSON_MARKERS):
            values = list(self._decode_json(content, node))
        else:
            values = self._decode_yaml(content, node)

        if not values:
            raise self._error('Body string does not contain a document', node)

        return tuple(
            self._document(value, node)
            for value in values
        )

    def _decode_json(self, content: str,
                     node: 'Node | None') -> 'Iterator[RuntimeValue]':
        """Decode whitespace separated JSON documents one after another."""
        position, end = 0, len(content)

        while True:
            while position < end and content[position].isspace():
                position += 1
            if position >= end:
                return

            try:
                value, position = self._json.raw_decode(content, position)

            except JSONDecodeError as base:
                raise ContentParseError.from_json_error(base, node) from base

            except StructureError as base:
                raise self._error(base.message, node) from base

            yield value

    def _json_object(self, pairs: list[tuple[str, 'RuntimeValue']]) -> dict[str, 'RuntimeValue']:
        if self.strict_duplicate_keys:
            seen = set()
            for key, _ in pairs:
                if key in seen:
                    raise StructureError(f'Duplicate field {key!r}')
                seen.add(key)

        return dict(pairs)

    def _decode_yaml(self, content: str,
                     node: 'Node | None') -> list['RuntimeValue']:
        """Decode a YAML document stream, skipping empty documents."""
        constructor = self.loader('')

        try:
            values = []
            for document in compose_all(content, Loader=self.loader):
                if self.strict_duplicate_keys:
                    DocumentCursor.check_duplicates(document)
                if (value := construct_node(constructor, document)) is not None:
                    values.append(value)

        except MarkedYAMLError as base:
            raise ContentParseError.from_yaml_error(base, node) from base

        except StructureError as base:
            raise self._error(base.message, node) from base

        return values

    def _construct(self, node: 'Node') -> 'RuntimeValue':
        try:
            return construct_node(self.loader(''), node)

        except MarkedYAMLError as base:
            raise ContentParseError.from_yaml_error(base) from base

    def _document(self, value: 'RuntimeValue', node: 'Node | None') -> 'Document':
        """Check that a decoded value is a map and normalize it."""
        if not isinstance(value, dict):
            raise self._error(
                f'Body document must be a map, found {type(value).__name__}',
                node,
            )

        try:
            return normalize(value)  # type: ignore[return-value]

        except TypeError as base:
            raise self._error(f'Invalid body document: {base}', node) from base

    @staticmethod
    def _error(message: str, node: 'Node | None') -> StructureError:
        if node is None:
            return StructureError(message)

        return StructureError.from_yaml_node(message, node, field=BODY_FIELD)
