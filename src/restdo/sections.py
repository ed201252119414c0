"""Parsed do section models.

Defines immutable models returned by the parser. A `DoSection` describes a
single test step: exactly one API call plus the outcome expectations
attached to it. These models are declarative: issuing the call and matching
its outcome belongs to the test runner consuming them.
"""

from functools import cached_property
from re import Pattern
from re import compile as regexp
from re import error as RegexError  # noqa: N812
from typing import Any

from pydantic import Field, field_validator

from restdo.models import SchemaModel
from restdo.names import Operation, split_operation

#: Catch patterns wrapped in this delimiter are regular expressions.
REGEX_DELIMITER = '/'


class ApiCallSection(SchemaModel):
    """A single API call described by a do section."""

    operation: Operation

    params: dict[str, str] = Field(
        default_factory=dict,
        title='Call parameters',
        description=(
            'Parameters of the call. Sequence values from the document '
            'are joined with a comma.'
        ),
    )

    bodies: tuple[dict[str, Any], ...] = Field(
        default=(),
        title='Request bodies',
        description=(
            'Documents sent with the call, in source order. '
            'Empty when no body field was present.'
        ),
    )

    headers: dict[str, str] = Field(
        default_factory=dict,
        title='Request headers',
        description='Headers sent with the call.',
    )

    @property
    def has_body(self) -> bool:
        """Whether the call carries at least one body document."""
        return bool(self.bodies)

    @property
    def namespace(self) -> str | None:
        """Namespace of the operation (`indices` for `indices.get_warmer`)."""
        return split_operation(self.operation)[0]

    @property
    def name(self) -> str:
        """Call name of the operation without its namespace."""
        return split_operation(self.operation)[1]


class DoSection(SchemaModel):
    """A test step performing one API call with expectations.

    The `catch` value is either a bare token naming an expected error
    kind (for example, `missing`) or a regular expression wrapped in
    slashes (for example, `/index_not_found/`) matched against the
    error reported by the call.
    """

    catch: str | None = Field(
        default=None,
        title='Expected error',
        description=(
            'Error expectation of the call: an error kind token or '
            'a regular expression wrapped in slashes.'
        ),
    )

    api_call: ApiCallSection = Field(
        title='API call',
        description='The call performed by the step.',
    )

    expected_warnings: tuple[str, ...] = Field(
        default=(),
        title='Expected warnings',
        description='Warning headers the call is expected to return, in order.',
    )

    @field_validator('catch')
    @classmethod
    def validate_catch(cls, value: str | None) -> str | None:
        """Ensure a slash-wrapped catch value is a valid regular expression."""
        if value is not None and cls._is_regex(value):
            try:
                regexp(value[1:-1])
            except RegexError as base:
                raise ValueError(f'Invalid catch pattern {value!r}: {base}') from base

        return value

    @staticmethod
    def _is_regex(value: str) -> bool:
        return (
            len(value) > 1
            and value.startswith(REGEX_DELIMITER)
            and value.endswith(REGEX_DELIMITER)
        )

    @property
    def is_catch_regex(self) -> bool:
        """Whether the catch value is a regular expression."""
        return self.catch is not None and self._is_regex(self.catch)

    @cached_property
    def catch_pattern(self) -> Pattern[str] | None:
        """Compiled catch regular expression, if the catch is one."""
        if not self.is_catch_regex:
            return None

        return regexp(self.catch[1:-1])  # type: ignore[index]

    @property
    def catch_token(self) -> str | None:
        """Bare catch token, if the catch is not a regular expression."""
        if self.is_catch_regex:
            return None

        return self.catch
