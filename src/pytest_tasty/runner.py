"""Host runner contract and the recording registry.

The builder only talks to the host runner through three BDD-style
primitives: describe a group, register a one-time setup hook for the
current group, and register a test in the current group.

`Registry` implements them by recording a tree of groups. Group bodies
run immediately, so nested registrations land in the right group. The
pytest plugin later turns the recorded tree into collectors and items.
"""

from typing import TYPE_CHECKING, Any, Protocol

from pytest_tasty.errors import ErrorContext, TastyBuildError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterator

#: One-time setup hook or test body: a zero-argument coroutine function.
type AsyncBody = Callable[[], Awaitable[Any]]


class Hook:
    """One-time setup hook of a group."""

    def __init__(self, runner: AsyncBody, title: str = 'before all') -> None:
        self.runner = runner
        self.title = title


class Test:
    """Registered test of a group."""

    __test__ = False

    def __init__(self, title: str, body: AsyncBody) -> None:
        self.title = title
        self.body = body


class Group:
    """Named group of hooks, tests, and nested groups.

    Attributes:
        title: Group title.
        parent: Enclosing group, if any.
        hooks: One-time setup hooks in registration order.
        tests: Tests in registration order.
        groups: Nested groups in registration order.
        deferred: Declared hook groups that are not wired to the runner,
            mapped to the number of declared entries.
    """

    def __init__(self, title: str, parent: 'Group | None' = None) -> None:
        self.title = title
        self.parent = parent

        self.hooks: list[Hook] = []
        self.tests: list[Test] = []
        self.groups: list[Group] = []

        self.deferred: dict[str, int] = {}

    @property
    def path(self) -> tuple[str, ...]:
        """Titles from the outermost group down to this one."""
        if self.parent is None:
            return (self.title,)

        return (*self.parent.path, self.title)

    def walk(self) -> 'Iterator[Group]':
        """Iterate over this group and all nested groups, depth first."""
        yield self
        for group in self.groups:
            yield from group.walk()

    def as_dict(self) -> dict[str, Any]:
        """Describe the group as plain data."""
        data: dict[str, Any] = {
            'title': self.title,
            'hooks': len(self.hooks),
            'tests': [test.title for test in self.tests],
        }
        if self.deferred:
            data['deferred'] = dict(self.deferred)
        if self.groups:
            data['groups'] = [group.as_dict() for group in self.groups]

        return data


class HostRunner(Protocol):
    """Registration primitives consumed by the case builder."""

    def describe(self, title: str, body: 'Callable[[], None]') -> Group:
        """Register a named group and run its body to fill it."""
        ...  # pragma: no cover

    def before(self, hook: AsyncBody) -> None:
        """Register a one-time setup hook for the current group."""
        ...  # pragma: no cover

    def it(self, title: str, body: AsyncBody) -> None:
        """Register a test in the current group."""
        ...  # pragma: no cover


class Registry:
    """Recording host runner."""

    def __init__(self) -> None:
        self.groups: list[Group] = []
        self._stack: list[Group] = []

    @property
    def current(self) -> Group:
        """Group whose body is being executed.

        Raises:
            TastyBuildError: If called outside of any group body.
        """
        if not self._stack:
            raise TastyBuildError('Hooks and tests must be registered inside a group')

        return self._stack[-1]

    def describe(self, title: str, body: 'Callable[[], None]') -> Group:
        """Register a named group and run its body to fill it.

        Args:
            title: Group title.
            body: Callable registering hooks, tests, and nested groups.

        Returns:
            The registered group.
        """
        parent = self._stack[-1] if self._stack else None
        group = Group(title, parent)

        if parent is None:
            self.groups.append(group)
        else:
            parent.groups.append(group)

        self._stack.append(group)
        try:
            body()
        except TastyBuildError as error:
            if error.context is None:
                error.context = ErrorContext(case=title)
            raise
        finally:
            self._stack.pop()

        return group

    def before(self, hook: AsyncBody) -> None:
        """Register a one-time setup hook for the current group."""
        self.current.hooks.append(Hook(hook))

    def it(self, title: str, body: AsyncBody) -> None:
        """Register a test in the current group."""
        self.current.tests.append(Test(title, body))

    def walk(self) -> 'Iterator[Group]':
        """Iterate over all recorded groups, depth first."""
        for group in self.groups:
            yield from group.walk()
