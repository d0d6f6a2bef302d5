"""Template evaluation for titles and expected values.

Placeholders use double braces around a dotted path, for example
`"variant {{ suite }}"` or `"user {{ suite.name }}"`. Unresolved paths
render as an empty string.
"""

from typing import TYPE_CHECKING

from pytest_tasty.lookups import VariableLookup
from pytest_tasty.names import PLACEHOLDER_PATTERN

if TYPE_CHECKING:
    from collections.abc import Mapping
    from re import Match

if TYPE_CHECKING:
    from pytest_tasty.values import RuntimeValue


def render(template: str, bindings: 'Mapping[str, RuntimeValue]') -> str:
    """Substitute placeholders with values from bindings.

    Args:
        template: Template string.
        bindings: Values available to placeholders.

    Returns:
        The rendered string.
    """
    def substitute(found: 'Match[str]') -> str:
        value = VariableLookup(found.group('path')).resolve(bindings)
        if value is None:
            return ''
        return f'{value}'

    return PLACEHOLDER_PATTERN.sub(substitute, template)
