"""Tests for action classification."""

from typing import TYPE_CHECKING

import pytest

from pytest_tasty import Action, ActionKind, TastyBuildError, split_actions, test_action

if TYPE_CHECKING:
    from collections.abc import Callable


def _named(name: str) -> 'Callable[..., None]':
    def builder() -> None:
        return None

    builder.__name__ = name
    return builder


async def prepare(context: dict) -> dict:
    return {'ready': True}


async def cleanup(context: dict) -> dict:
    return {}


tests = _named('tests')
tests.__test__ = False  # type: ignore[attr-defined]

single = _named('test')


def test_empty_input() -> None:
    """Empty input yields empty groups."""
    groups = split_actions([])

    assert groups.before == ()
    assert groups.before_each == ()
    assert groups.tests == ()
    assert groups.after_each == ()
    assert groups.after == ()
    assert len(groups) == 0


def test_positional_classification() -> None:
    """Entries are classified by position relative to the first test."""
    groups = split_actions([
        prepare,
        [prepare, prepare],
        tests,
        cleanup,
        (cleanup,),
        single,
    ])

    assert [action.runner for action in groups.before] == [prepare]
    assert [[action.runner for action in array] for array in groups.before_each] == [[prepare, prepare]]
    assert [action.runner for action in groups.tests] == [tests, single]
    assert [[action.runner for action in array] for array in groups.after_each] == [[cleanup]]
    assert [action.runner for action in groups.after] == [cleanup]


def test_without_tests_stays_pre_test() -> None:
    """Without test actions, everything lands in the setup groups."""
    groups = split_actions([prepare, [prepare], cleanup, (cleanup, prepare)])

    assert len(groups.before) == 2
    assert len(groups.before_each) == 2
    assert groups.tests == groups.after == groups.after_each == ()


@pytest.mark.parametrize('actions', (
    pytest.param([], id='empty'),
    pytest.param([prepare, tests, cleanup], id='scalars'),
    pytest.param([[prepare], prepare, single, [cleanup], cleanup, tests], id='mixed'),
    pytest.param([tests, tests, [prepare, prepare], prepare], id='tests first'),
))
def test_classification_is_a_partition(actions: list) -> None:
    """Classification neither drops nor duplicates entries."""
    assert len(split_actions(actions)) == len(actions)


def test_order_is_preserved() -> None:
    """Entries keep input order inside their group."""
    first = Action(runner=prepare, title='first')
    second = Action(runner=prepare, title='second')
    third = Action(runner=prepare, title='third')

    groups = split_actions([first, second, third])

    assert [action.title for action in groups.before] == ['first', 'second', 'third']


def test_explicit_kind_wins_over_name() -> None:
    """Explicit tags classify actions regardless of callable names."""
    registered = test_action(prepare, title='registers tests')
    plain = Action(kind=ActionKind.CONTEXT, runner=tests)

    groups = split_actions([plain, registered, plain])

    assert groups.before == (plain,)
    assert groups.tests == (registered,)
    assert groups.after == (plain,)


def test_invalid_entry() -> None:
    """Non-callable entries are rejected."""
    with pytest.raises(TastyBuildError, match=r'is not an action$'):
        split_actions([prepare, 42])
