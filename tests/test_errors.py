"""Tests for error formatting."""

from io import StringIO

import pytest
import yaml

from restdo.core import DoSectionParser
from restdo.errors import ContentParseError, ErrorContext, ParseWarning, RestDoError, StructureError


def test_error_without_context() -> None:
    """Verify plain errors render their message only."""
    error = StructureError('Something is wrong')

    assert str(error) == 'Something is wrong'
    assert isinstance(error, RestDoError)


def test_error_location() -> None:
    """Verify location and field rendering."""
    error = StructureError('Something is wrong', context=ErrorContext(
        filename='suite.yml',
        line_num=2,
        column_num=4,
        field='body',
    ))

    message = str(error)

    assert message.startswith('Something is wrong')
    assert 'in "suite.yml", line 3, column 5' in message
    assert "on field 'body'" in message


def test_error_default_filename() -> None:
    """Verify a missing filename is replaced with a placeholder."""
    error = StructureError('Something is wrong', context=ErrorContext(line_num=0))

    assert 'in "<unicode string>", line 1' in str(error)


def test_error_snippet_indent() -> None:
    """Verify snippets are indented and blank lines are dropped."""
    error = StructureError('Something is wrong', context=ErrorContext(
        line_num=0,
        snippet='body: {size: 10}\n\n      ^',
    ))

    lines = str(error).splitlines()

    assert lines[-2] == '        body: {size: 10}'
    assert lines[-1] == '              ^'


def test_error_from_yaml_node(loader: type[yaml.SafeLoader]) -> None:
    """Verify node errors carry the node position and a source snippet."""
    node = yaml.compose('get:\n  index: [a]\n', Loader=loader)
    _, value = node.value[0]
    _, index = value.value[0]

    error = StructureError.from_yaml_node('Bad index', index, field='index')

    assert error.context is not None
    assert error.context.get('line_num') == 1
    assert error.context.get('column_num') == 9
    assert 'index: [a]' in str(error)


def test_missing_api_call_location(loader: type[yaml.SafeLoader]) -> None:
    """Verify the missing call error points to the section."""
    parser = DoSectionParser(loader, strict=False)

    with pytest.raises(StructureError) as error:
        parser.parse_string('catch: missing\n')

    assert 'line 1, column 1' in str(error.value)


def test_error_location_stream_name(loader: type[yaml.SafeLoader]) -> None:
    """Verify errors name the stream a section was read from."""
    parser = DoSectionParser(loader, strict=False)

    stream = StringIO('catch: missing\n')
    stream.name = 'suite.yml'

    with pytest.raises(StructureError) as error:
        parser.parse_string(stream)

    assert error.value.context is not None
    assert error.value.context.get('filename') == 'suite.yml'
    assert 'in "suite.yml", line 1, column 1' in str(error.value)


def test_content_error_from_yaml(loader: type[yaml.SafeLoader]) -> None:
    """Verify YAML errors keep their problem description."""
    try:
        yaml.load('a: [b', Loader=loader)  # noqa: S506
    except yaml.MarkedYAMLError as base:
        error = ContentParseError.from_yaml_error(base)
    else:  # pragma: no cover
        pytest.fail('YAML error expected')

    assert error.message.startswith('Invalid YAML')
    assert base.problem is not None
    assert base.problem in error.message
    assert error.context is not None
    assert error.context.get('error') is base


def test_parse_warning_category() -> None:
    """Verify parse warnings are user warnings."""
    assert issubclass(ParseWarning, UserWarning)


def test_emit_parse_issue(loader: type[yaml.SafeLoader]) -> None:
    """Verify issues warn in lenient mode and fail in strict mode."""
    lenient = DoSectionParser(loader, strict=False)
    strict = DoSectionParser(loader, strict=True)

    with pytest.warns(ParseWarning, match=r'^Suspicious input$'):
        assert lenient.emit_parse_issue('Suspicious input') is None

    error = strict.emit_parse_issue('Suspicious input')

    assert isinstance(error, StructureError)
    assert error.message == 'Suspicious input'
