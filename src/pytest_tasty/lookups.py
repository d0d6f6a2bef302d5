"""Dotted-path variable lookup.

Used by the template evaluator to resolve placeholders such as
`{{ suite.user.0 }}` against a bindings mapping.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING

from pytest_tasty.errors import TastyBuildError
from pytest_tasty.names import VARIABLE_PATTERN

if TYPE_CHECKING:
    from pytest_tasty.values import RuntimeValue


class VariableLookup:
    """Resolver for dotted-path variable access.

    Resolves values from nested data structures (mappings, lists, and
    plain objects) using a dot-separated path notation.

    The resolver is intentionally tolerant: any missing key, invalid
    index, or type mismatch results in `None` instead of raising
    an exception.
    """

    def __init__(self, path: str) -> None:
        """Initialize the resolver with a dotted path.

        Args:
            path: Dot-separated path. Each segment is a mapping key,
                a list index (if the segment is numeric), or an
                attribute name.

        Raises:
            TastyBuildError: If the provided path is not valid.
        """
        self.path = path.strip().split('.')

        if not VARIABLE_PATTERN.match(self.path[0]):
            raise TastyBuildError(f'Invalid variable path {path!r}')

    def __call__(self, context: 'Mapping[str, RuntimeValue]') -> 'RuntimeValue':
        """Resolve the variable path against a context."""
        return self.resolve(context)

    def resolve(self, val: 'RuntimeValue', depth: int = 1) -> 'RuntimeValue':
        """Resolve the variable path against a value.

        Args:
            val: Current value being resolved.
            depth: Current depth of traversal (used internally).

        Returns:
            The resolved value if the full path is valid, otherwise `None`.
        """
        if val is None or depth > len(self.path):
            return val

        key = self.path[depth - 1]
        if not key:
            return None

        next_val = None
        if key.isdecimal() and isinstance(val, (list, tuple)):
            index = int(key)
            if 0 <= index < len(val):
                next_val = val[index]
        elif isinstance(val, Mapping):
            next_val = val.get(key)
        elif not key.startswith('_'):
            next_val = getattr(val, key, None)

        return self.resolve(next_val, depth + 1)
