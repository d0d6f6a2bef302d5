"""Declarative end-to-end test cases composed from asynchronous actions.

The `pytest_tasty` package describes test cases as pipelines of actions
that accumulate a shared context, and runs them under pytest.

Key features:
- classification of case entries into setup, test, and teardown groups;
- sequential and concurrent composition of actions with last-write-wins
  context merging;
- suites and parameterized suites asserting through resource capabilities;
- collection of module-level `Tasty` instances as pytest tests.
"""

from .actions import Action, as_action, request_action, test_action
from .context import ContextDict, ContextHandle
from .core import ActionGroups, gather_all, parallel, render, series, split_actions
from .errors import TastyBuildError, TastyError, TastyRuntimeError, TastyWarning
from .models import TastySettings
from .names import ActionKind
from .resources import Resource, SnapshotResource
from .runner import Group, HostRunner, Registry
from .tasty import Tasty

__all__ = (
    'Action',
    'ActionGroups',
    'ActionKind',
    'ContextDict',
    'ContextHandle',
    'Group',
    'HostRunner',
    'Registry',
    'Resource',
    'SnapshotResource',
    'Tasty',
    'TastyBuildError',
    'TastyError',
    'TastyRuntimeError',
    'TastySettings',
    'TastyWarning',
    'as_action',
    'gather_all',
    'parallel',
    'render',
    'request_action',
    'series',
    'split_actions',
    'test_action',
)
