"""Base Pydantic models and runtime settings.

This module defines the foundational model classes used by the library.
It enforces immutability and strict schema validation so that actions
and classified groups cannot drift after they are built.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Base immutable model for library elements.

    Design principles enforced by this model:
        - Immutability: elements cannot be modified after creation.
        - Strict schema validation: unknown or extra fields are rejected
          to avoid silent errors caused by typos.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
    )


class DescribedMixin(SchemaModel):
    """Mixin providing element self-documentation.

    The fields defined in this model do not affect execution semantics
    and are used for reporting and error messages.
    """

    title: str | None = Field(
        default=None,
        title='Title',
        description='Short human-readable title of the element.',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for runtime settings.

    Design principles enforced by this model:
        - Immutability: resolved settings cannot be modified after creation.
        - Tolerant schema handling: unknown or extra fields are ignored.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )


class TastySettings(SettingsModel):
    """Settings resolved from `TASTY_*` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix='TASTY_',
        frozen=True,
        extra='ignore',
    )

    strict: bool = Field(
        default=False,
        title='Strict mode',
        description=(
            'Treat declared but unsupported hooks (per-test setup and '
            'teardown, one-time teardown) as collection errors instead '
            'of warnings.'
        ),
    )

    swap_suite_assertions: bool = Field(
        default=False,
        title='Swapped suite assertions',
        description=(
            'Apply sequential parameterized suite assertions by calling '
            'the capability named by the rendered expected value with '
            'the assertion kind as its argument.'
        ),
    )
