"""Tests for case building and group registration."""

from typing import TYPE_CHECKING

import pytest

from pytest_tasty import Registry, Tasty, TastyBuildError, test_action

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

if TYPE_CHECKING:
    from pytest_tasty import Group


async def login(context: dict) -> dict:
    return {'token': 'abc'}


async def profile(context: dict) -> dict:
    return {'user': f'{context["token"]}-user'}


def reading(tasty: Tasty, key: str, seen: list) -> 'Callable[[], None]':
    """Build a test action recording a context value at run time."""
    def tests() -> None:
        handle = tasty.context

        async def body() -> None:
            seen.append(handle[key])

        tasty.runner.it(f'reads {key}', body)

    return tests


@pytest.mark.asyncio
async def test_case_setup_fills_context(
    tasty: Tasty,
    execute: 'Callable[[Group], Awaitable[dict]]',
) -> None:
    """Tests read the context produced by the one-time hook."""
    seen: list = []

    group = tasty.case('Auth', login, profile, reading(tasty, 'user', seen))

    assert seen == []
    assert len(group.hooks) == 1
    assert [test.title for test in group.tests] == ['reads user']

    outcomes = await execute(group)

    assert outcomes == {'reads user': None}
    assert seen == ['abc-user']


@pytest.mark.asyncio
async def test_cases_do_not_share_context(
    tasty: Tasty,
    execute: 'Callable[[Group], Awaitable[dict]]',
) -> None:
    """Each case reads its own context, even after later cases are built."""
    seen: list = []

    first = tasty.case('First', lambda: {'token': 'first'}, reading(tasty, 'token', seen))
    second = tasty.case('Second', lambda: {'token': 'second'}, reading(tasty, 'token', seen))

    await execute(first)
    await execute(second)

    assert seen == ['first', 'second']


def test_case_without_setup(tasty: Tasty) -> None:
    """No hook is registered when there are no setup actions."""
    group = tasty.case('Plain', test_action(lambda: None))

    assert group.hooks == []
    assert group.tests == []


def test_case_without_tests(tasty: Tasty) -> None:
    """Setup-only cases register a hook and no tests."""
    group = tasty.case('Setup only', login)

    assert len(group.hooks) == 1
    assert group.tests == []


@pytest.mark.asyncio
async def test_case_setup_failure_propagates(
    tasty: Tasty,
    execute: 'Callable[[Group], Awaitable[dict]]',
) -> None:
    """Failing setup actions reach the runner unchanged."""
    async def broken(context: dict) -> dict:
        raise ConnectionError('refused')

    group = tasty.case('Broken', broken, reading(tasty, 'token', []))

    with pytest.raises(ConnectionError, match=r'^refused$'):
        await execute(group)


def test_case_records_deferred_hooks(tasty: Tasty) -> None:
    """Declared hooks that are not registered are recorded on the group."""
    group = tasty.case(
        'Hooks',
        login,
        [login, profile],
        reading(tasty, 'token', []),
        [profile],
        profile,
    )

    assert len(group.hooks) == 1
    assert group.deferred == {'before_each': 1, 'after_each': 1, 'after': 1}
    assert Tasty.supports_per_test_hooks is False


def test_case_build_error_carries_title(tasty: Tasty) -> None:
    """Build errors inside a case body are located by the case title."""
    def tests() -> None:
        raise TastyBuildError('bad registration')

    with pytest.raises(TastyBuildError) as excinfo:
        tasty.case('Broken', tests)

    assert excinfo.value.context == {'case': 'Broken'}
    assert "in case 'Broken'" in str(excinfo.value)
    assert tasty.runner.groups[0].title == 'Broken'


def test_case_rejects_invalid_entries(tasty: Tasty) -> None:
    """Non-callable entries are rejected before anything is registered."""
    with pytest.raises(TastyBuildError, match=r'is not an action$'):
        tasty.case('Invalid', login, 'not an action')

    assert tasty.runner.groups == []


def test_registry_requires_group() -> None:
    """Hooks and tests can only be registered inside a group body."""
    registry = Registry()

    async def body() -> None:
        return None

    with pytest.raises(TastyBuildError, match=r'inside a group$'):
        registry.it('orphan', body)

    with pytest.raises(TastyBuildError, match=r'inside a group$'):
        registry.before(body)


def test_registry_nests_groups() -> None:
    """Groups described inside a body are nested under it."""
    registry = Registry()

    async def body() -> None:
        return None

    def outer() -> None:
        registry.it('outer test', body)
        registry.describe('inner', lambda: registry.it('inner test', body))

    registry.describe('outer', outer)

    inner = registry.groups[0].groups[0]

    assert inner.path == ('outer', 'inner')
    assert [group.title for group in registry.walk()] == ['outer', 'inner']
    assert registry.groups[0].as_dict() == {
        'title': 'outer',
        'hooks': 0,
        'tests': ['outer test'],
        'groups': [{'title': 'inner', 'hooks': 0, 'tests': ['inner test']}],
    }


def test_group_as_dict_reports_deferred(tasty: Tasty) -> None:
    """Plans include declared but unsupported hooks."""
    group = tasty.case('Hooks', login, reading(tasty, 'token', []), profile)

    assert group.as_dict() == {
        'title': 'Hooks',
        'hooks': 1,
        'tests': ['reads token'],
        'deferred': {'after': 1},
    }


def test_default_runner() -> None:
    """Builders record into a fresh registry by default."""
    assert isinstance(Tasty().runner, Registry)


@pytest.mark.asyncio
async def test_shared_context_follows_running_case(
    tasty: Tasty,
    execute: 'Callable[[Group], Awaitable[dict]]',
) -> None:
    """Test bodies reading the builder context see the case being run."""
    seen: list = []

    def tests() -> None:
        async def body() -> None:
            seen.append(tasty.context.get('token'))

        tasty.runner.it('reads token', body)

    first = tasty.case('First', lambda: {'token': 'abc'}, tests)
    tasty.case('Second', lambda: {'other': 1})

    await execute(first)

    assert seen == ['abc']
