"""Tests for section models and names."""

import pydantic
import pytest

from restdo.names import split_operation
from restdo.sections import ApiCallSection, DoSection


@pytest.mark.parametrize('operation, expected', (
    pytest.param('get', (None, 'get'), id='top-level'),
    pytest.param('indices.get_warmer', ('indices', 'get_warmer'), id='namespaced'),
    pytest.param('a.b.c', ('a.b', 'c'), id='nested namespace'),
    pytest.param('broken.', (None, 'broken.'), id='trailing dot'),
))
def test_split_operation(operation: str, expected: tuple[str | None, str]) -> None:
    """Verify operation names are split into namespace and name."""
    assert split_operation(operation) == expected


def test_api_call_defaults() -> None:
    """Verify an API call without parameters, bodies and headers."""
    api_call = ApiCallSection(operation='cluster.node_info')

    assert api_call.params == {}
    assert api_call.bodies == ()
    assert api_call.headers == {}
    assert api_call.has_body is False
    assert api_call.namespace == 'cluster'
    assert api_call.name == 'node_info'


def test_api_call_requires_operation() -> None:
    """Ensure the operation name is not empty."""
    with pytest.raises(pydantic.ValidationError, match=r'^1 validation error'):
        ApiCallSection(operation='')


def test_sections_are_immutable() -> None:
    """Ensure parsed sections can not be modified."""
    section = DoSection(api_call=ApiCallSection(operation='get'))

    with pytest.raises(pydantic.ValidationError):
        section.catch = 'missing'  # type: ignore[misc]

    with pytest.raises(pydantic.ValidationError):
        section.api_call.operation = 'search'  # type: ignore[misc]


def test_sections_reject_extra_fields() -> None:
    """Ensure unknown fields are rejected."""
    with pytest.raises(pydantic.ValidationError, match=r'Extra inputs are not permitted'):
        ApiCallSection(operation='get', api='get')  # type: ignore[call-arg]


@pytest.mark.parametrize('catch, is_regex, token', (
    pytest.param(None, False, None, id='none'),
    pytest.param('missing', False, 'missing', id='token'),
    pytest.param('/', False, '/', id='single slash'),
    pytest.param('/foo.*bar/', True, None, id='regex'),
))
def test_catch_kinds(catch: str | None, is_regex: bool, token: str | None) -> None:
    """Verify catch values are classified as tokens or regular expressions."""
    section = DoSection(catch=catch, api_call=ApiCallSection(operation='get'))

    assert section.is_catch_regex is is_regex
    assert section.catch_token == token
    assert (section.catch_pattern is not None) is is_regex


def test_catch_pattern_matches() -> None:
    """Verify the catch regular expression is compiled without slashes."""
    section = DoSection(catch='/foo.*bar/', api_call=ApiCallSection(operation='get'))

    assert section.catch_pattern is not None
    assert section.catch_pattern.pattern == 'foo.*bar'
    assert section.catch_pattern.search('a foo and a bar')


def test_catch_invalid_pattern() -> None:
    """Ensure invalid catch regular expressions are rejected."""
    with pytest.raises(pydantic.ValidationError, match=r'Invalid catch pattern'):
        DoSection(catch='/(/', api_call=ApiCallSection(operation='get'))
