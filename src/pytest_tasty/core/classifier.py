"""Action classification into lifecycle groups."""

from collections.abc import Iterable
from typing import TYPE_CHECKING

from pydantic import Field

from pytest_tasty.actions import Action, as_action
from pytest_tasty.models import SchemaModel
from pytest_tasty.names import ActionKind

if TYPE_CHECKING:
    from pytest_tasty.actions import ActionEntry

#: Array-shaped entries hold several actions meant to run together.
type ActionArray = tuple[Action, ...]


class ActionGroups(SchemaModel):
    """Five-way partition of a case's actions.

    Groups keep the input order of their entries. Array-shaped entries
    (lists or tuples of actions) only ever land in `before_each` and
    `after_each`.
    """

    before: tuple[Action, ...] = Field(
        default=(),
        title='One-time setup',
        description='Scalar actions declared before the first test action.',
    )
    before_each: tuple[ActionArray, ...] = Field(
        default=(),
        title='Per-test setup',
        description='Array-shaped entries declared before the first test action.',
    )
    tests: tuple[Action, ...] = Field(
        default=(),
        title='Test bodies',
        description='Test-body builders in declaration order.',
    )
    after_each: tuple[ActionArray, ...] = Field(
        default=(),
        title='Per-test teardown',
        description='Array-shaped entries declared after the first test action.',
    )
    after: tuple[Action, ...] = Field(
        default=(),
        title='One-time teardown',
        description='Scalar actions declared after the first test action.',
    )

    def __len__(self) -> int:
        return sum(len(group) for group in (
            self.before,
            self.before_each,
            self.tests,
            self.after_each,
            self.after,
        ))


def _is_array(entry: 'ActionEntry') -> bool:
    return isinstance(entry, (list, tuple))


def split_actions(actions: 'Iterable[ActionEntry]') -> ActionGroups:
    """Split case entries into lifecycle groups.

    Entries are scanned left to right. Test actions go to `tests` and
    switch the scan into the post-test state; any other entry goes to
    `before`/`before_each` before that switch and to `after`/`after_each`
    after it, depending on whether it is array-shaped.

    Args:
        actions: Case entries: actions, plain callables, or lists of them.

    Returns:
        Classified groups. No entry is dropped or reordered.

    Raises:
        TastyBuildError: If an entry is not an action.
    """
    groups: dict[str, list] = {
        'before': [],
        'before_each': [],
        'tests': [],
        'after_each': [],
        'after': [],
    }
    seen_tests = False

    for entry in actions:
        if _is_array(entry):
            array = tuple(as_action(item) for item in entry)
            groups['after_each' if seen_tests else 'before_each'].append(array)
            continue

        action = as_action(entry)
        if action.kind is ActionKind.TEST:
            groups['tests'].append(action)
            seen_tests = True
        else:
            groups['after' if seen_tests else 'before'].append(action)

    return ActionGroups(**{
        name: tuple(items)
        for name, items in groups.items()
    })
