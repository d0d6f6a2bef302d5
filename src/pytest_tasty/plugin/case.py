"""Runtime execution layer for recorded groups.

Each recorded group becomes a pytest collector. Its `setup` creates an
event loop and runs the group's one-time hooks in registration order,
so hooks settle before any test of the group runs. Each recorded test
becomes a pytest item executed on the loop of its group.
"""

import asyncio
import logging
from collections import Counter
from typing import TYPE_CHECKING
from warnings import warn

import pytest

from pytest_tasty.errors import ErrorContext, TastyBuildError, TastyError, TastyWarning

if TYPE_CHECKING:
    from collections.abc import Coroutine, Iterable, Sequence
    from typing import Any

if TYPE_CHECKING:
    from _pytest._code.code import ExceptionInfo, TerminalRepr

if TYPE_CHECKING:
    from pytest_tasty.runner import Group, Test

logger = logging.getLogger(__name__)


def unique_names(titles: 'Sequence[str]') -> list[str]:
    """Make sibling node names unique.

    Repeated titles get their occurrence index appended, for example
    `variant 1[0]` and `variant 1[1]`; unique titles are kept as is.
    """
    counts = Counter(titles)
    seen: Counter[str] = Counter()

    names = []
    for title in titles:
        if counts[title] > 1:
            names.append(f'{title}[{seen[title]}]')
            seen[title] += 1
        else:
            names.append(title)

    return names


class TestGroup(pytest.Collector):
    """Pytest collector for a recorded group."""

    __test__ = False

    def __init__(self, *, group: 'Group', strict: bool = False, **kwargs: 'Any') -> None:
        """Initialize a group collector.

        Args:
            group: Recorded group.
            strict: Fail collection on declared but unsupported hooks.
            **kwargs: Keyword pytest.Collector arguments.
        """
        super().__init__(**kwargs)

        self.group = group
        self.strict = strict
        self.loop: asyncio.Runner | None = None

    def collect(self) -> 'Iterable[pytest.Item | pytest.Collector]':
        """Collect tests first, then nested groups.

        Raises:
            TastyBuildError: If unsupported hooks are declared in strict mode.
        """
        self.check_deferred()

        names = iter(unique_names([
            *(test.title for test in self.group.tests),
            *(group.title for group in self.group.groups),
        ]))

        for test in self.group.tests:
            yield TestCase.from_parent(self, name=next(names), test=test)

        for group in self.group.groups:
            yield TestGroup.from_parent(self, name=next(names), group=group, strict=self.strict)

    def check_deferred(self) -> None:
        """Report hook groups the builder does not register."""
        if not self.group.deferred:
            return

        names = ', '.join(
            f'{name} ({count})'
            for name, count in self.group.deferred.items()
        )
        message = f'Hooks are declared but not supported yet: {names}'

        if self.strict:
            raise TastyBuildError(message, context=ErrorContext(case=self.group.title))

        warn(f'{message} in case {self.group.title!r}', category=TastyWarning, stacklevel=2)

    def setup(self) -> None:
        """Run one-time hooks of the group."""
        self.loop = asyncio.Runner()

        for num, hook in enumerate(self.group.hooks, start=1):
            logger.debug('Running hook %d/%d of %r', num, len(self.group.hooks), self.group.title)
            self.loop.run(hook.runner())

    def teardown(self) -> None:
        """Close the event loop of the group."""
        if self.loop is not None:
            self.loop.close()
            self.loop = None

    def repr_failure(self, excinfo: 'ExceptionInfo[BaseException]') -> 'str | TerminalRepr':
        """Render library errors without a traceback."""
        if isinstance(excinfo.value, TastyError):
            return str(excinfo.value)

        return super().repr_failure(excinfo)

    def run[T](self, coroutine: 'Coroutine[Any, Any, T]') -> T:
        """Run a coroutine on the event loop of the group."""
        if self.loop is None:
            coroutine.close()
            raise TastyError(f'Group {self.group.title!r} is not set up')

        return self.loop.run(coroutine)

    def reportinfo(self) -> tuple['Any', int | None, str]:
        return self.path, None, ' > '.join(self.group.path)


class TestCase(pytest.Item):
    """Pytest item executing a single recorded test."""

    __test__ = False

    def __init__(self, *, test: 'Test', **kwargs: 'Any') -> None:
        """Initialize a pytest item backed by a recorded test.

        Args:
            test: Recorded test.
            **kwargs: Keyword pytest.Item arguments.
        """
        super().__init__(**kwargs)

        self.test = test

    def runtest(self) -> None:
        """Execute the test body on the loop of the parent group."""
        self.parent.run(self.test.body())  # type: ignore[union-attr]

    def repr_failure(self, excinfo: 'ExceptionInfo[BaseException]',
                     style: 'Any' = None) -> 'str | TerminalRepr':
        """Render library errors without a traceback."""
        if isinstance(excinfo.value, TastyError):
            return str(excinfo.value)

        return super().repr_failure(excinfo, style=style)

    def reportinfo(self) -> tuple['Any', int | None, str]:
        return self.path, None, ' > '.join((*self.parent.group.path, self.name))  # type: ignore[union-attr]
