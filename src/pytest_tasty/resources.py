"""Resource contract and a ready-made snapshot resource.

A resource is the value returned by a request action. It carries a
`snapshot` (the only part merged into the context) and one capability
method per assertion kind, each called as `method(expected, context)`
and signalling a mismatch by raising `AssertionError`.
"""

# ruff: noqa: S101

from collections.abc import Callable, Mapping
from contextlib import suppress
from inspect import isawaitable
from re import IGNORECASE, UNICODE, search
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pydantic import Field

from pytest_tasty.errors import ErrorContext, TastyRuntimeError
from pytest_tasty.models import SchemaModel
from pytest_tasty.values import MAPPINGS, SCALARS, SEQUENCES

if TYPE_CHECKING:
    from pytest_tasty.values import RuntimeValue


@runtime_checkable
class Resource(Protocol):
    """Structural type of values returned by request actions."""

    snapshot: Mapping[str, Any]


def snapshot_of(resource: 'RuntimeValue', *, action: str | None = None) -> 'RuntimeValue':
    """Return the context fragment carried by a resource.

    Args:
        resource: Value returned by a request action.
        action: Name of the action, for error reporting.

    Returns:
        The resource snapshot.

    Raises:
        TastyRuntimeError: If the value has no `snapshot`.
    """
    if not hasattr(resource, 'snapshot'):
        raise TastyRuntimeError(
            f'Request returned {type(resource).__name__!r} without a snapshot',
            context=ErrorContext(action=action),
        )

    return resource.snapshot


async def check_resource(resource: 'RuntimeValue', kind: 'RuntimeValue',
                         expected: 'RuntimeValue',
                         context: Mapping[str, 'RuntimeValue']) -> None:
    """Apply a single assertion through a resource capability.

    Synchronous and asynchronous capability methods are both supported.
    Assertion failures raised by the capability are not intercepted.

    Args:
        resource: Resource to check.
        kind: Name of the capability method.
        expected: Expected value handed to the capability.
        context: Context handed to the capability.

    Raises:
        TastyRuntimeError: If the resource has no such capability.
    """
    capability = getattr(resource, kind, None) if isinstance(kind, str) else None
    if not callable(capability):
        raise TastyRuntimeError(
            f'Resource {type(resource).__name__!r} has no capability {kind!r}',
            context=ErrorContext(context=dict(context)),
        )

    result = capability(expected, context)
    if isawaitable(result):
        await result


def _exact_match(actual: 'RuntimeValue', expected: 'RuntimeValue') -> bool:
    """Perform strict equality comparison.

    Raises:
        AssertionError: If values differ or types do not match.
    """
    assert isinstance(actual, type(expected)), (
        f'{type(actual).__name__!r} is not {type(expected).__name__!r}'
    )
    assert actual == expected, f'{actual!r} != {expected!r}'

    return True


def _seq_partial_match(actual: 'RuntimeValue', expected: 'RuntimeValue') -> bool:
    """Each expected element matches at least one actual element."""
    assert isinstance(actual, SEQUENCES), f'{actual!r} is not a sequence'
    assert isinstance(expected, SEQUENCES), f'{expected!r} is not a sequence'

    matches = 0
    for expected_item in expected:
        for actual_item in actual:
            with suppress(AssertionError):
                if _partial_match(actual_item, expected_item):
                    matches += 1
                    break

    assert matches >= len(expected), f'{actual!r} does not contain {expected!r}'

    return True


def _map_partial_match(actual: 'RuntimeValue', expected: 'RuntimeValue') -> bool:
    """All expected keys exist and their values match recursively."""
    assert isinstance(actual, MAPPINGS), f'{actual!r} is not a mapping'
    assert isinstance(expected, MAPPINGS), f'{expected!r} is not a mapping'

    for key, value in expected.items():
        assert key in actual, f'{key!r} is missing in {actual!r}'
        _partial_match(actual[key], value)

    return True


def _partial_match(actual: 'RuntimeValue', expected: 'RuntimeValue') -> bool:
    """Recursively perform partial matching."""
    if expected is None or isinstance(expected, SCALARS):
        return _exact_match(actual, expected)

    if isinstance(expected, SEQUENCES):
        return _seq_partial_match(actual, expected)

    if isinstance(expected, MAPPINGS):
        return _map_partial_match(actual, expected)

    raise TastyRuntimeError(f'Unsupported type {expected.__class__!r}')  # pragma: no cover


def _cmp(actual: 'RuntimeValue', expected: 'RuntimeValue',
         swap: bool = False, inclusive: bool = False) -> bool:
    """Base implementation for ordering comparisons."""
    assert actual is not None and expected is not None, (
        f'Can not compare {actual!r} with {expected!r}'
    )
    assert isinstance(actual, type(expected)), (
        f'{type(actual).__name__!r} is not {type(expected).__name__!r}'
    )

    if swap:
        actual, expected = expected, actual

    assert actual < expected or (inclusive and actual == expected), (
        f'{actual!r} {"<=" if inclusive else "<"} {expected!r} is false'
    )

    return True


class SnapshotResource(SchemaModel):
    """Resource wrapping a plain request result.

    Capability methods compare `value` against the expected value; the
    context argument is accepted for contract compatibility.
    """

    value: Any = Field(
        default=None,
        title='Request result',
        description='Raw value produced by the request.',
    )

    snapshot: dict[str, Any] = Field(
        default_factory=dict,
        title='Context snapshot',
        description='Context fragment merged after the request.',
    )

    def match(self, expected: 'RuntimeValue', context: Mapping[str, 'RuntimeValue']) -> None:  # noqa: ARG002
        """Strict equality."""
        _exact_match(self.value, expected)

    equals = match
    eq = match

    def not_match(self, expected: 'RuntimeValue', context: Mapping[str, 'RuntimeValue']) -> None:  # noqa: ARG002
        """Strict inequality."""
        try:
            _exact_match(self.value, expected)
        except AssertionError:
            return

        raise AssertionError(f'{self.value!r} == {expected!r}')

    def partial_match(self, expected: 'RuntimeValue', context: Mapping[str, 'RuntimeValue']) -> None:  # noqa: ARG002
        """Recursive partial matching of sequences and mappings."""
        _partial_match(self.value, expected)

    def less_than(self, expected: 'RuntimeValue', context: Mapping[str, 'RuntimeValue']) -> None:  # noqa: ARG002
        """Less-than comparison."""
        _cmp(self.value, expected)

    def less_than_or_equal(self, expected: 'RuntimeValue', context: Mapping[str, 'RuntimeValue']) -> None:  # noqa: ARG002
        """Less-than-or-equal comparison."""
        _cmp(self.value, expected, inclusive=True)

    def greater_than(self, expected: 'RuntimeValue', context: Mapping[str, 'RuntimeValue']) -> None:  # noqa: ARG002
        """Greater-than comparison."""
        _cmp(self.value, expected, swap=True)

    def greater_than_or_equal(self, expected: 'RuntimeValue', context: Mapping[str, 'RuntimeValue']) -> None:  # noqa: ARG002
        """Greater-than-or-equal comparison."""
        _cmp(self.value, expected, swap=True, inclusive=True)

    def regex(self, expected: 'RuntimeValue', context: Mapping[str, 'RuntimeValue']) -> None:  # noqa: ARG002
        """Search a pattern in the string value, case-insensitive."""
        assert isinstance(self.value, str), f'{self.value!r} is not a string'
        assert search(expected, self.value, UNICODE | IGNORECASE), (
            f'{expected!r} not found in {self.value!r}'
        )

    def satisfies(self, expected: Callable[..., Any], context: Mapping[str, 'RuntimeValue']) -> None:
        """Predicate called with the value and the context."""
        assert expected(self.value, context), f'{self.value!r} does not satisfy {expected!r}'

    def contains(self, expected: 'RuntimeValue', context: Mapping[str, 'RuntimeValue']) -> None:  # noqa: ARG002
        """Membership of the expected value in the result."""
        assert expected in self.value, f'{expected!r} not in {self.value!r}'
