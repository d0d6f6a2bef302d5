"""Action classification and context composition engine.

It provides:
- partitioning of case entries into lifecycle groups;
- sequential and concurrent composition of actions over a context;
- template rendering for parameterized titles and expectations.
"""

from .classifier import ActionGroups, split_actions
from .composers import gather_all, parallel, series
from .templates import render

__all__ = (
    'ActionGroups',
    'gather_all',
    'parallel',
    'render',
    'series',
    'split_actions',
)
