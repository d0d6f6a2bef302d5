"""Sequential and concurrent action composition.

Both composers return a regular context action, so compositions can be
nested in each other and used directly as case entries.

Merge rules shared by both composers:
- a request action contributes only its resource `snapshot`;
- any other action contributes its return value (`None` is empty);
- fragments are merged in declaration order, the last one wins.
"""

import asyncio
import logging
from typing import TYPE_CHECKING

from pytest_tasty.actions import Action, as_action
from pytest_tasty.context import ContextDict
from pytest_tasty.names import ActionKind

if TYPE_CHECKING:
    from collections.abc import Awaitable, Mapping

if TYPE_CHECKING:
    from pytest_tasty.actions import ActionLike
    from pytest_tasty.values import RuntimeValue

logger = logging.getLogger(__name__)


async def gather_all[T](*awaitables: 'Awaitable[T]') -> list[T]:
    """Await all awaitables concurrently and fail on the first error.

    Every awaitable is allowed to settle before anything is raised, so
    no sibling is left running in the background. The raised error is
    the first failure in argument order, not in completion order.

    Args:
        *awaitables: Awaitables to run on the current event loop.

    Returns:
        Results in argument order.

    Raises:
        BaseException: The first failure in argument order.
    """
    results = await asyncio.gather(*awaitables, return_exceptions=True)
    errors = [result for result in results if isinstance(result, BaseException)]

    if not errors:
        return results

    for error in errors[1:]:
        logger.warning('Discarding concurrent failure: %r', error)

    raise errors[0]


def series(*actions: 'ActionLike') -> Action:
    """Compose actions to run one after another.

    Each action receives the context produced by the previous one; the
    first one receives the context given to the composition (or an
    empty context). If an action fails, later actions do not run and
    the error propagates unchanged.

    Args:
        *actions: Actions or plain callables.

    Returns:
        A context action returning the merged context.
    """
    steps = tuple(as_action(action) for action in actions)

    async def requests(context: 'Mapping[str, RuntimeValue] | None' = None) -> ContextDict:
        current = ContextDict().merge(context)

        for num, step in enumerate(steps, start=1):
            logger.debug('Series step %d/%d: %s', num, len(steps), step.name)
            current = current.merge(await step.produce(current))

        return current

    return Action(kind=ActionKind.CONTEXT, runner=requests, title='series')


def parallel(*actions: 'ActionLike') -> Action:
    """Compose actions to run concurrently.

    Actions are not chained: zero-argument actions get nothing and unary
    actions all get the same starting context. Their fragments are merged
    in declaration order (regardless of completion order) on top of the
    starting context.

    Args:
        *actions: Actions or plain callables.

    Returns:
        A context action returning the merged context.
    """
    steps = tuple(as_action(action) for action in actions)

    async def requests(context: 'Mapping[str, RuntimeValue] | None' = None) -> ContextDict:
        initial = ContextDict().merge(context)

        logger.debug('Parallel steps: %s', ', '.join(step.name for step in steps))
        fragments = await gather_all(*(
            step.produce(initial)
            for step in steps
        ))

        return initial.merge(*fragments)

    return Action(kind=ActionKind.CONTEXT, runner=requests, title='parallel')
