"""Pytest plugin collecting declarative `Tasty` cases.

This module integrates `pytest_tasty` with pytest by:
- registering custom command-line options;
- collecting module-level `Tasty` instances of test modules as
  collectors whose groups and tests become pytest nodes.
"""

from typing import TYPE_CHECKING

from .spec import TestSpec

if TYPE_CHECKING:
    from _pytest.config.argparsing import Parser
    from _pytest.python import PyCollector


def pytest_addoption(parser: 'Parser') -> None:
    """Register pytest command-line options for pytest-tasty.

    Args:
        parser: Pytest argument parser.
    """
    group = parser.getgroup('tasty')
    group.addoption(
        '--tasty-strict',
        action='store_true',
        dest='tasty_strict',
        default=False,
        help=(
            'Fail collection of cases declaring hooks that are not '
            'supported yet (per-test setup and teardown, one-time teardown) '
            'instead of emitting a warning.'
        ),
    )


def pytest_pycollect_makeitem(collector: 'PyCollector', name: str, obj: object) -> TestSpec | None:
    """Collect `Tasty` instances defined in test modules.

    Args:
        collector: Module or class collector being populated.
        name: Attribute name.
        obj: Attribute value.

    Returns:
        A `TestSpec` collector for `Tasty` instances, otherwise ``None``.
    """
    from pytest_tasty.tasty import Tasty  # noqa: PLC0415

    if isinstance(obj, Tasty):
        return TestSpec.from_parent(collector, name=name, tasty=obj)

    return None
