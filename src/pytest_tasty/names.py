"""Action kinds, reserved names, and identifier patterns.

This module defines the explicit tags carried by every action and the
reserved callable names used to infer a tag for plain functions.

The rules defined here are relied upon by the classifier, the composers,
and the template evaluator.
"""

from enum import StrEnum
from re import ASCII
from re import compile as regexp

#: Base pattern for all identifiers.
#: Identifiers must start with a letter and may contain letters, digits, or underscores
_NAME_PATTERN = r'[a-zA-Z][\w]*'

#: Compiled pattern for variable identifiers
VARIABLE_PATTERN = regexp(
    rf'^(?P<name>{_NAME_PATTERN})$',
    flags=ASCII,
)

#: Compiled pattern for template placeholders.
#: Supports plain ("{{ suite }}") and dotted ("{{ suite.user.0 }}") paths.
PLACEHOLDER_PATTERN = regexp(
    rf'\{{\{{\s*(?P<path>{_NAME_PATTERN}(\.\w+)*)\s*\}}\}}',
    flags=ASCII,
)


class ActionKind(StrEnum):
    """Explicit tag describing how an action participates in a case."""

    #: Returns a context fragment merged as is.
    CONTEXT = 'context'
    #: Returns a resource; only its snapshot is merged.
    REQUEST = 'request'
    #: Registers test bodies with the host runner.
    TEST = 'test'


#: Callable names inferred as test-body builders.
TEST_NAMES = frozenset({'test', 'tests'})

#: Callable names inferred as request actions.
REQUEST_NAMES = frozenset({'request'})


def infer_kind(name: str | None) -> ActionKind:
    """Infer an action kind from a callable name.

    Args:
        name: The `__name__` of a plain callable, if any.

    Returns:
        The inferred kind, `ActionKind.CONTEXT` for unknown names.
    """
    if name in TEST_NAMES:
        return ActionKind.TEST

    if name in REQUEST_NAMES:
        return ActionKind.REQUEST

    return ActionKind.CONTEXT
