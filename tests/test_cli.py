"""Tests for the command-line interface."""

from typing import TYPE_CHECKING

from click.testing import CliRunner
from yaml import safe_load

from pytest_tasty.__main__ import cli

if TYPE_CHECKING:
    from pathlib import Path

MODULE = """
from pytest_tasty import SnapshotResource, Tasty

tasty = Tasty()


def login():
    return {'token': 'abc'}


async def request(context):
    return SnapshotResource(value=1)


tasty.case(
    'Users',
    login,
    tasty.suite('reads a user', request, {'match': 1}),
    tasty.suites('variant {{ suite }}', ['a', 'b'], request, {'match': 1}),
    [login],
)
"""


def test_plan(tmp_path: 'Path') -> None:
    """The plan lists groups, hooks, and tests of every instance."""
    module = tmp_path / 'test_users.py'
    module.write_text(MODULE)

    result = CliRunner().invoke(cli, ['plan', str(module)])

    assert result.exit_code == 0, result.output
    assert safe_load(result.output) == {
        'tasty': [{
            'title': 'Users',
            'hooks': 1,
            'tests': ['reads a user', 'variant a', 'variant b'],
            'deferred': {'after_each': 1},
        }],
    }


def test_plan_without_instances(tmp_path: 'Path') -> None:
    """Modules without builders are reported as errors."""
    module = tmp_path / 'test_empty.py'
    module.write_text('VALUE = 1\n')

    result = CliRunner().invoke(cli, ['plan', str(module)])

    assert result.exit_code == 1
    assert 'No Tasty instances found in' in result.output


def test_plan_missing_file(tmp_path: 'Path') -> None:
    """Missing modules are rejected by argument validation."""
    result = CliRunner().invoke(cli, ['plan', str(tmp_path / 'missing.py')])

    assert result.exit_code == 2
    assert 'does not exist' in result.output
