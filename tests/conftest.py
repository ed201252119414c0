"""Tests configurations and fixtures."""

import os
from typing import TYPE_CHECKING

import pytest
import yaml

from restdo import DoSectionParser, ParserSettings

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from pytest_mock import MockerFixture, MockType


@pytest.fixture
def loader() -> type[yaml.SafeLoader]:
    """Provide an isolated YAML SafeLoader class for tests.

    Creates a dedicated subclass of `yaml.SafeLoader` to ensure that
    YAML constructors registered during a test do not leak into other
    tests or affect global loader state.

    Returns:
        A subclass of `yaml.SafeLoader` suitable for isolated parsing.
    """
    class Loader(yaml.SafeLoader):
        pass

    return Loader


@pytest.fixture
def parser(loader: type[yaml.SafeLoader]) -> DoSectionParser:
    """Provide a non-strict parser independent of the environment."""
    return DoSectionParser(loader, settings=ParserSettings(strict_duplicate_keys=False))


@pytest.fixture
def patch_environ(mocker: 'MockerFixture') -> 'Callable[..., MockType]':
    """Provide a factory patching `os.environ` for settings tests.

    The returned factory replaces every `RESTDO_*` variable with the
    given values for the duration of the test.
    """
    def patch(**values: str) -> 'MockType':
        """Patch the environment with a controlled configuration.

        Args:
            values: Environment variables to expose.

        Returns:
            A mock patch object produced by `mocker.patch.dict`.
        """
        environ = {
            key: value
            for key, value in os.environ.items()
            if not key.upper().startswith('RESTDO_')
        }

        return mocker.patch.dict('os.environ', {**environ, **values}, clear=True)

    return patch
