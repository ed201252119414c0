"""Base Pydantic models for parsed sections and settings.

This module defines the foundational model classes used by all section
structures. It enforces immutability and strict schema validation so that
parsed sections can be handed to any number of readers safely.
"""

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

#: Prefix of environment variables read by settings models.
ENV_PREFIX = 'RESTDO_'


class SchemaModel(BaseModel):
    """Base immutable model for all parsed sections.

    Design principles enforced by this model:
        - Immutability: sections cannot be modified after creation.
          A section is built once per parse call and then only read.
        - Strict schema validation: unknown or extra fields are rejected
          to avoid silent errors caused by typos in section construction.

    All section models must inherit from this class.
    """

    model_config = ConfigDict(
        frozen=True,
        extra='forbid',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for parser runtime settings.

    This class serves as the root for all settings models responsible for
    resolving runtime configuration from environment variables or explicit
    overrides.

    Design principles enforced by this model:
        - Immutability: resolved settings cannot be modified after creation.
        - Tolerant schema handling: unknown or extra variables are ignored.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        frozen=True,
        extra='ignore',
    )
