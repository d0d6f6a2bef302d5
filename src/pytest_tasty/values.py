"""Core type definitions for context values.

This module defines the value types flowing through action chains and
the normalization applied to every context fragment produced by an
action before it is merged into the running context.
"""

from collections.abc import Mapping
from datetime import date, datetime, timedelta
from typing import Any

from pydantic import SecretStr

#: A value in runtime represents any Python object received from
#: actions or resources prior to merging.
type RuntimeValue = Any

MAPPINGS = (dict, Mapping)
SCALARS = (date, datetime, timedelta, str, bytes, int, float, bool, SecretStr)
SEQUENCES = (list, tuple, set)


def _normalize_key(value: RuntimeValue) -> str:
    """Validate a context key.

    Args:
        value: Candidate mapping key.

    Returns:
        The validated key as a string.

    Raises:
        TypeError: If the provided key is not a string.
    """
    if not isinstance(value, str):
        raise TypeError(f'Can not use {value!r} as context key')

    return value


def normalize_fragment(value: RuntimeValue) -> dict[str, RuntimeValue]:
    """Normalize an action result into a context fragment.

    Only the top-level keys are validated; nested values are kept by
    reference.

    Args:
        value: Result returned by an action (or a resource snapshot).

    Returns:
        A new plain dictionary, empty if the value is `None`.

    Raises:
        TypeError: If the value is not a mapping or has non-string keys.
    """
    if value is None:
        return {}

    if not isinstance(value, MAPPINGS):
        raise TypeError(f'{value!r} is not a context mapping')

    return {
        _normalize_key(key): item
        for key, item in value.items()
    }
