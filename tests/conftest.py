"""Tests configurations and fixtures."""

from typing import TYPE_CHECKING

import pytest

from pytest_tasty import Registry, Tasty, TastySettings

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

if TYPE_CHECKING:
    from pytest_tasty import Group

pytest_plugins = ('pytester',)


@pytest.fixture
def tasty() -> Tasty:
    """Provide a builder bound to a fresh recording registry.

    Settings are passed explicitly so `TASTY_*` variables of the
    surrounding environment do not leak into tests.
    """
    return Tasty(Registry(), settings=TastySettings(strict=False, swap_suite_assertions=False))


@pytest.fixture
def execute() -> 'Callable[[Group], Awaitable[dict[str, BaseException | None]]]':
    """Provide a minimal executor for recorded groups.

    Runs one-time hooks of the group in registration order, then every
    test, mirroring the ordering contract the pytest plugin relies on.
    A failing hook is propagated; test failures are collected.

    Returns:
        A coroutine function mapping test titles to their failure
        (or `None` when the test passed).
    """
    async def run(group: 'Group') -> dict[str, BaseException | None]:
        for hook in group.hooks:
            await hook.runner()

        outcomes: dict[str, BaseException | None] = {}
        for test in group.tests:
            try:
                await test.body()
            except Exception as error:  # noqa: BLE001
                outcomes[test.title] = error
            else:
                outcomes[test.title] = None

        return outcomes

    return run
