"""Pytest integration for `Tasty` instances.

This module defines a collector wrapping a module-level `Tasty`
instance. The instance's recording registry already holds every group
built while the module was imported; the collector exposes each
top-level group as a `TestGroup`.
"""

from typing import TYPE_CHECKING

import pytest

from pytest_tasty.errors import TastyBuildError

from .case import TestGroup, unique_names

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import Any

if TYPE_CHECKING:
    from pytest_tasty.tasty import Tasty


class TestSpec(pytest.Collector):
    """Pytest collector for a `Tasty` instance found in a test module."""

    __test__ = False

    def __init__(self, *, tasty: 'Tasty', **kwargs: 'Any') -> None:
        """Initialize a collector.

        Args:
            tasty: Builder whose registered groups are collected.
            **kwargs: Keyword pytest.Collector arguments.
        """
        super().__init__(**kwargs)

        self.tasty = tasty

    @property
    def strict(self) -> bool:
        """Strict mode from the command line or `TASTY_STRICT`."""
        return bool(self.config.getoption('tasty_strict', default=False)) or self.tasty.settings.strict

    def collect(self) -> 'Iterable[TestGroup]':
        """Collect top-level groups of the builder.

        Raises:
            TastyBuildError: If the builder does not record its groups.
        """
        groups = getattr(self.tasty.runner, 'groups', None)
        if groups is None:
            raise TastyBuildError(
                f'Runner {type(self.tasty.runner).__name__!r} does not record groups',
            )

        names = unique_names([group.title for group in groups])
        for name, group in zip(names, groups, strict=True):
            yield TestGroup.from_parent(
                self,
                name=name,
                group=group,
                strict=self.strict,
            )
