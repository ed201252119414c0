"""Forward-only reader over a composed YAML mapping.

The cursor walks the fields of one mapping node in document order. It is
built on top of the PyYAML node graph rather than on constructed Python
objects so that repeated keys survive loading and every problem can be
reported with its source position.
"""

from typing import TYPE_CHECKING, Self

from yaml import SafeLoader, compose
from yaml.error import MarkedYAMLError
from yaml.nodes import MappingNode, ScalarNode, SequenceNode

from restdo.errors import ContentParseError, CursorError, StructureError
from restdo.values import MAP_TAG, SEQ_TAG, describe_node, is_plain_text, scalar_text

if TYPE_CHECKING:
    from io import TextIOBase

if TYPE_CHECKING:
    from yaml import BaseLoader
    from yaml.nodes import Node

    from restdo.values import RuntimeValue


def construct_node(constructor: 'BaseLoader', node: 'Node') -> 'RuntimeValue':
    """Construct a Python object from a node with JSON compatible typing.

    Plain maps and sequences are built here so that mapping keys are
    always their source text (`on`, `1` or `2015-01-01` as written).
    Plain scalars that YAML 1.1 alone resolves to dates or booleans
    stay strings. Everything else, custom tags included, is delegated
    to the constructor.

    Args:
        constructor: Loader instance used for delegated nodes.
        node: Node to construct.

    Returns:
        The constructed value.

    Raises:
        StructureError: If a mapping key is not a non-null scalar.
        MarkedYAMLError: If the constructor rejects a node.
    """
    if isinstance(node, MappingNode) and node.tag == MAP_TAG:
        if flatten := getattr(constructor, 'flatten_mapping', None):
            flatten(node)

        result = {}
        for key_node, value_node in node.value:
            key = scalar_text(key_node) if isinstance(key_node, ScalarNode) else None
            if key is None:
                raise StructureError.from_yaml_node(
                    f'Expected a field name, found {describe_node(key_node)}',
                    key_node,
                )
            result[key] = construct_node(constructor, value_node)

        return result

    if isinstance(node, SequenceNode) and node.tag == SEQ_TAG:
        return [
            construct_node(constructor, item)
            for item in node.value
        ]

    if isinstance(node, ScalarNode) and is_plain_text(node):
        return node.value

    return constructor.construct_document(node)


class DocumentCursor:
    """Forward-only cursor over the fields of a YAML mapping node.

    Typical usage::

        while cursor.next_field():
            if cursor.field_name == 'catch':
                catch = cursor.read_scalar()

    Every field value must be read at most once, and only after
    `next_field()` positioned the cursor on it. Values that are not read
    are skipped when the cursor advances, so the cursor always ends right
    after the mapping it was created for.

    Attributes:
        node: Mapping node being read.
        loader: YAML loader class used to construct values.
        strict_duplicate_keys: Whether repeated keys are rejected.
    """

    def __init__(self, node: 'Node', loader: type['BaseLoader'] = SafeLoader, *,
                 strict_duplicate_keys: bool = False,
                 field: str | None = None) -> None:
        """Initialize a cursor positioned before the first field.

        Args:
            node: Mapping node to read.
            loader: YAML loader class used to construct values.
            strict_duplicate_keys: Whether repeated keys are rejected.
            field: Name of the field holding the mapping, for diagnostics.

        Raises:
            StructureError: If the node is not a mapping or, in strict mode,
                repeats a key.
        """
        if not isinstance(node, MappingNode):
            raise StructureError.from_yaml_node(
                f'Expected a map, found {describe_node(node)}',
                node,
                field=field,
            )

        self.node = node
        self.loader = loader
        self.strict_duplicate_keys = strict_duplicate_keys

        self._constructor: BaseLoader | None = None
        self._fields = iter(node.value)
        self._current: tuple[str, Node] | None = None
        self._consumed = False
        self._closed = False

        if strict_duplicate_keys:
            self.check_duplicates(node, recursive=False)

    @classmethod
    def from_string(cls, content: 'TextIOBase | str',
                    loader: type['BaseLoader'] = SafeLoader, *,
                    strict_duplicate_keys: bool = False) -> Self:
        """Compose a single YAML document and wrap its root mapping.

        Args:
            content: YAML content as a string or file-like object.
            loader: YAML loader class used to compose and construct values.
            strict_duplicate_keys: Whether repeated keys are rejected.

        Returns:
            A cursor over the root mapping of the document.

        Raises:
            ContentParseError: If the content is not valid YAML.
            StructureError: If the document is empty or its root is not a map.
        """
        try:
            node = compose(content, Loader=loader)

        except MarkedYAMLError as base:
            raise ContentParseError.from_yaml_error(base) from base

        if node is None:
            raise StructureError('Expected a map, found an empty document')

        return cls(node, loader, strict_duplicate_keys=strict_duplicate_keys)

    @property
    def field_name(self) -> str:
        """Name of the field the cursor is positioned on."""
        return self._position()[0]

    @property
    def value_node(self) -> 'Node':
        """Node of the current field value, without consuming it."""
        return self._position()[1]

    @property
    def closed(self) -> bool:
        """Whether all fields of the mapping have been visited."""
        return self._closed

    def next_field(self) -> bool:
        """Advance to the next field of the mapping.

        Returns:
            `True` if the cursor is positioned on a field,
            `False` once the mapping is exhausted.

        Raises:
            StructureError: If the next key is not a string scalar.
        """
        if self._closed:
            return False

        try:
            key_node, value_node = next(self._fields)

        except StopIteration:
            self._current = None
            self._closed = True
            return False

        if not isinstance(key_node, ScalarNode) or (name := scalar_text(key_node)) is None:
            raise StructureError.from_yaml_node(
                f'Expected a field name, found {describe_node(key_node)}',
                key_node,
            )

        self._current = name, value_node
        self._consumed = False

        return True

    def read_node(self) -> 'Node':
        """Consume the current value as a raw node.

        In strict mode the node is checked for repeated keys at any depth.

        Returns:
            The node of the current field value.
        """
        _, node = self._consume()
        if self.strict_duplicate_keys:
            self.check_duplicates(node)

        return node

    def read_scalar(self) -> str | None:
        """Consume the current value as scalar text.

        Returns:
            Source text of the scalar, or `None` for a YAML null.

        Raises:
            StructureError: If the value is not a scalar.
        """
        name, node = self._consume()
        if not isinstance(node, ScalarNode):
            raise StructureError.from_yaml_node(
                f'Field {name!r} must be a scalar, found {describe_node(node)}',
                node,
                field=name,
            )

        return scalar_text(node)

    def read_map(self) -> dict[str, str]:
        """Consume the current value as a flat map of scalar texts.

        Null values are read as empty strings.

        Returns:
            Mapping of keys to scalar texts in document order.

        Raises:
            StructureError: If the value is not a map of scalars.
        """
        name, node = self._consume()
        if not isinstance(node, MappingNode):
            raise StructureError.from_yaml_node(
                f'Field {name!r} must be a map, found {describe_node(node)}',
                node,
                field=name,
            )

        if self.strict_duplicate_keys:
            self.check_duplicates(node, recursive=False)

        result = {}
        for key_node, value_node in node.value:
            key = scalar_text(key_node) if isinstance(key_node, ScalarNode) else None
            if key is None or not isinstance(value_node, ScalarNode):
                raise StructureError.from_yaml_node(
                    f'Field {name!r} must be a map of scalars',
                    value_node if key is not None else key_node,
                    field=name,
                )
            result[key] = scalar_text(value_node) or ''

        return result

    def read_sequence(self) -> list[str]:
        """Consume the current value as a sequence of scalar texts.

        Returns:
            Scalar texts in document order.

        Raises:
            StructureError: If the value is not a sequence of non-null scalars.
        """
        name, node = self._consume()
        if not isinstance(node, SequenceNode):
            raise StructureError.from_yaml_node(
                f'Field {name!r} must be a sequence, found {describe_node(node)}',
                node,
                field=name,
            )

        result = []
        for item in node.value:
            text = scalar_text(item) if isinstance(item, ScalarNode) else None
            if text is None:
                raise StructureError.from_yaml_node(
                    f'Field {name!r} must be a sequence of scalars, found {describe_node(item)}',
                    item,
                    field=name,
                )
            result.append(text)

        return result

    def read_value(self) -> 'RuntimeValue':
        """Consume the current value and construct it as a Python object.

        Returns:
            The value constructed by the configured loader.
        """
        return self.construct(self.read_node())

    def child(self) -> 'DocumentCursor':
        """Consume the current value as a nested cursor.

        Returns:
            A cursor over the mapping held by the current field.

        Raises:
            StructureError: If the value is not a map.
        """
        name, node = self._consume()

        cursor = type(self)(
            node,
            self.loader,
            strict_duplicate_keys=self.strict_duplicate_keys,
            field=name,
        )
        cursor._constructor = self._constructor

        return cursor

    def construct(self, node: 'Node') -> 'RuntimeValue':
        """Construct a Python object from a node with the configured loader."""
        if self._constructor is None:
            self._constructor = self.loader('')

        return construct_node(self._constructor, node)

    @classmethod
    def check_duplicates(cls, node: 'Node', *, recursive: bool = True) -> None:
        """Reject mappings repeating a key.

        Args:
            node: Node to check.
            recursive: Whether nested collections are checked too.

        Raises:
            StructureError: If a mapping repeats a key.
        """
        if isinstance(node, MappingNode):
            seen = set()
            for key_node, value_node in node.value:
                if isinstance(key_node, ScalarNode):
                    key = (key_node.tag, key_node.value)
                    if key in seen:
                        raise StructureError.from_yaml_node(
                            f'Duplicate field {key_node.value!r}',
                            key_node,
                            field=key_node.value,
                        )
                    seen.add(key)
                if recursive:
                    cls.check_duplicates(value_node)

        elif isinstance(node, SequenceNode) and recursive:
            for item in node.value:
                cls.check_duplicates(item)

    def _position(self) -> tuple[str, 'Node']:
        if self._current is None:
            raise CursorError('Cursor is not positioned on a field')

        return self._current

    def _consume(self) -> tuple[str, 'Node']:
        current = self._position()
        if self._consumed:
            raise CursorError(f'Value of field {current[0]!r} has already been read')

        self._consumed = True

        return current
