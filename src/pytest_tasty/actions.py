"""Tagged action wrapper and coercion helpers.

Every step of a case is an `Action`: a callable carrying an explicit
`ActionKind`. Plain callables are coerced into actions, inferring their
kind from the callable name (`test`/`tests`, `request`), so both styles
can be mixed in a single case.
"""

from collections.abc import Callable, Mapping
from functools import wraps
from inspect import Parameter, isawaitable, signature
from typing import TYPE_CHECKING, Any

from pydantic import Field, PrivateAttr

from pytest_tasty.errors import ErrorContext, TastyBuildError, TastyRuntimeError
from pytest_tasty.models import DescribedMixin, SchemaModel
from pytest_tasty.names import ActionKind, infer_kind
from pytest_tasty.resources import SnapshotResource, snapshot_of
from pytest_tasty.values import normalize_fragment

if TYPE_CHECKING:
    from collections.abc import Sequence

if TYPE_CHECKING:
    from pytest_tasty.values import RuntimeValue

#: The runner receives the current context (or nothing, if it declares
#: no positional parameters) and returns a context fragment, a resource,
#: or a test registration result. It may be a coroutine function.
type ActionRunner = Callable[..., Any]

#: Anything accepted where an action is expected.
type ActionLike = Action | ActionRunner

#: A single case entry: a scalar action or an array-shaped group.
type ActionEntry = ActionLike | Sequence[ActionLike]

_POSITIONAL = (
    Parameter.POSITIONAL_ONLY,
    Parameter.POSITIONAL_OR_KEYWORD,
    Parameter.VAR_POSITIONAL,
)


def accepts_context(runner: ActionRunner) -> bool:
    """Check whether a callable takes a positional context argument.

    Callables whose signature can not be inspected are assumed unary.
    """
    try:
        parameters = signature(runner).parameters.values()
    except (TypeError, ValueError):
        return True

    return any(param.kind in _POSITIONAL for param in parameters)


class Action(DescribedMixin, SchemaModel):
    """Executable step with an explicit kind.

    Calling an action directly is transparent: arguments are forwarded
    to the runner and its result is returned as is. Composers use `run`
    and `produce`, which also await coroutines and unwrap resources.
    """

    kind: ActionKind = Field(
        default=ActionKind.CONTEXT,
        title='Action kind',
        description=(
            'Determines classification and merging: request results are '
            'unwrapped to their snapshot, test actions register test bodies.'
        ),
    )

    runner: ActionRunner = Field(
        title='Action function',
        description='Callable implementing the step.',
    )

    _unary: bool = PrivateAttr(default=True)

    def model_post_init(self, context: Any) -> None:  # noqa: ANN401
        """Inspect the runner signature once."""
        self._unary = accepts_context(self.runner)

    @property
    def name(self) -> str:
        """Human-readable action name for logs and errors."""
        return self.title or getattr(self.runner, '__name__', None) or repr(self.runner)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:  # noqa: ANN401
        """Invoke the runner as is."""
        return self.runner(*args, **kwargs)

    async def run(self, context: 'Mapping[str, RuntimeValue] | None' = None) -> 'RuntimeValue':
        """Execute the runner and await its result if needed.

        Args:
            context: Context passed to unary runners; zero-argument
                runners are called without it.

        Returns:
            Raw result of the runner.
        """
        result = self.runner(context) if self._unary else self.runner()
        if isawaitable(result):
            result = await result

        return result

    async def produce(self, context: 'Mapping[str, RuntimeValue] | None' = None) -> dict[str, 'RuntimeValue']:
        """Execute the action and return its context fragment.

        Request results are reduced to their `snapshot`; any other result
        is expected to be a context fragment itself.

        Args:
            context: Context passed to the runner.

        Returns:
            A normalized context fragment.

        Raises:
            TastyRuntimeError: If the result breaks the fragment contract.
        """
        result = await self.run(context)
        if self.kind is ActionKind.REQUEST:
            result = snapshot_of(result, action=self.name)

        try:
            return normalize_fragment(result)
        except TypeError as error:
            raise TastyRuntimeError(
                f'Action returned an invalid context fragment: {error}',
                context=ErrorContext(
                    action=self.name,
                    context=dict(context) if context else None,
                ),
            ) from error


def as_action(value: 'RuntimeValue') -> Action:
    """Coerce a value into an action.

    Args:
        value: An `Action` or a plain callable.

    Returns:
        The same action, or a new one with the kind inferred from the
        callable name.

    Raises:
        TastyBuildError: If the value is not callable.
    """
    if isinstance(value, Action):
        return value

    if callable(value):
        return Action(
            kind=infer_kind(getattr(value, '__name__', None)),
            runner=value,
        )

    raise TastyBuildError(f'{value!r} is not an action')


def request_action(runner: ActionRunner | None = None, *,
                   title: str | None = None,
                   output: str | None = None) -> 'Action | Callable[[ActionRunner], Action]':
    """Tag a callable as a request action.

    Usable bare (`@request_action`) or with arguments
    (`@request_action(output='user')`). When `output` is set, results
    without a snapshot are wrapped into a `SnapshotResource` that stores
    the raw result in the context under that name.

    Args:
        runner: Callable performing the request.
        title: Optional action title.
        output: Context key for raw results.

    Returns:
        A request action, or a decorator producing one.
    """
    def decorate(func: ActionRunner) -> Action:
        if output is None:
            return Action(kind=ActionKind.REQUEST, runner=func, title=title)

        unary = accepts_context(func)

        @wraps(func)
        async def wrapper(context: 'Mapping[str, RuntimeValue] | None' = None) -> 'RuntimeValue':
            result = func(context) if unary else func()
            if isawaitable(result):
                result = await result
            if hasattr(result, 'snapshot'):
                return result
            return SnapshotResource(value=result, snapshot={output: result})

        return Action(kind=ActionKind.REQUEST, runner=wrapper, title=title)

    if runner is None:
        return decorate

    return decorate(runner)


def test_action(runner: ActionRunner, *, title: str | None = None) -> Action:
    """Tag a zero-argument callable as a test-body builder."""
    return Action(kind=ActionKind.TEST, runner=runner, title=title)


test_action.__test__ = False  # type: ignore[attr-defined]
