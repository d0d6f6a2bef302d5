"""Execution context containers.

A `ContextDict` is the value threaded through action chains: every
composition step produces a new one and never mutates the previous.

A `ContextHandle` is the by-reference cell shared between a case's
one-time setup hook (the single writer) and its test bodies (readers).
"""

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING

from pytest_tasty.values import normalize_fragment

if TYPE_CHECKING:
    from pytest_tasty.values import RuntimeValue


class ContextDict(dict[str, 'RuntimeValue']):
    """Accumulated key/value state of a test case.

    Context instances are expected to be immutable in practice, although
    this is not strictly enforced at the type level.
    """

    def merge(self, *fragments: 'Mapping[str, RuntimeValue] | None') -> 'ContextDict':
        """Build a new context with fragments merged on top.

        Fragments are applied left to right, so keys of a later fragment
        override the same keys of earlier ones and of this context.

        Args:
            *fragments: Context fragments, `None` counts as empty.

        Returns:
            A new context; this instance is left untouched.

        Raises:
            TypeError: If a fragment is not a mapping with string keys.
        """
        merged = ContextDict(self)
        for fragment in fragments:
            merged.update(normalize_fragment(fragment))

        return merged


class ContextHandle(Mapping[str, 'RuntimeValue']):
    """Shared reference to the latest context of a case.

    Test bodies capture the handle when they are registered and read
    `value` when they run, so they observe whatever the setup hook
    stored in between.
    """

    def __init__(self, value: 'Mapping[str, RuntimeValue] | None' = None) -> None:
        """Initialize a handle.

        Args:
            value: Initial context, empty when omitted.
        """
        self.value = ContextDict().merge(value)

    def replace(self, value: 'Mapping[str, RuntimeValue] | None') -> None:
        """Swap the held context in a single assignment."""
        self.value = ContextDict().merge(value)

    def __getitem__(self, key: str) -> 'RuntimeValue':
        return self.value[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.value)

    def __len__(self) -> int:
        return len(self.value)

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.value!r})'
