"""Declarative test case builder.

`Tasty` turns a flat list of actions into a group registered with the
host runner: setup actions become a one-time hook that fills the case
context, and test actions register test bodies which read that context
when they run.

Example:
    tasty = Tasty()

    tasty.case(
        'Users API',
        login,
        tasty.suite('reads a user', get_user, {'match': {'id': 1}}),
        tasty.suites('reads user {{ suite }}', [1, 2], get_user, {'status': 200}),
    )
"""

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from pytest_tasty.actions import as_action, test_action
from pytest_tasty.context import ContextDict, ContextHandle
from pytest_tasty.core import gather_all, parallel, render, series, split_actions
from pytest_tasty.errors import TastyBuildError
from pytest_tasty.models import TastySettings
from pytest_tasty.resources import check_resource
from pytest_tasty.runner import Registry

if TYPE_CHECKING:
    from collections.abc import Iterable

if TYPE_CHECKING:
    from pytest_tasty.actions import Action, ActionEntry, ActionLike
    from pytest_tasty.runner import AsyncBody, Group, HostRunner
    from pytest_tasty.values import RuntimeValue

logger = logging.getLogger(__name__)

#: Binding name of the current variant in parameterized suites.
SUITE_BINDING = 'suite'


def _ensure_assertions(assertions: Any) -> Mapping[str, Any]:  # noqa: ANN401
    if not isinstance(assertions, Mapping):
        raise TastyBuildError(f'Assertions must be a mapping, got {assertions!r}')

    return assertions


class Tasty:
    """Case builder bound to a host runner.

    Attributes:
        runner: Host runner receiving groups, hooks, and tests.
        settings: Resolved runtime settings.
        swap_suite_assertions: Apply sequential parameterized suite
            assertions as `resource.<expected>(kind, bindings)`.
        context: Context handle of the case being built, or of the case
            whose setup hook ran last.
    """

    #: Per-test setup and teardown groups, as well as one-time teardown,
    #: are classified but never registered with the host runner.
    supports_per_test_hooks: ClassVar[bool] = False

    def __init__(self, runner: 'HostRunner | None' = None, *,
                 settings: TastySettings | None = None,
                 swap_suite_assertions: bool | None = None) -> None:
        """Initialize a builder.

        Args:
            runner: Host runner, a new `Registry` by default.
            settings: Runtime settings, read from the environment by default.
            swap_suite_assertions: Overrides the settings value.
        """
        self.runner = runner if runner is not None else Registry()
        self.settings = settings if settings is not None else TastySettings()

        if swap_suite_assertions is None:
            swap_suite_assertions = self.settings.swap_suite_assertions
        self.swap_suite_assertions = swap_suite_assertions

        self.context = ContextHandle()

    def case(self, title: str, *actions: 'ActionEntry') -> 'Group':
        """Describe a test case.

        Args:
            title: Case title.
            *actions: Setup actions, test actions, and hook groups.

        Returns:
            The group registered with the host runner.
        """
        self.context = handle = ContextHandle()
        sets = split_actions(actions)

        def body() -> None:
            if sets.before:
                prepare = series(*sets.before)

                async def setup() -> None:
                    handle.replace(await prepare(handle.value))
                    self.context = handle

                self.runner.before(setup)

            for test in sets.tests:
                test()

        group = self.runner.describe(title, body)
        group.deferred.update({
            name: len(items)
            for name, items in (
                ('before_each', sets.before_each),
                ('after_each', sets.after_each),
                ('after', sets.after),
            )
            if items
        })

        logger.debug(
            'Registered case %r: %d setup actions, %d test actions',
            title, len(sets.before), len(sets.tests),
        )

        return group

    def series(self, *actions: 'ActionLike') -> 'Action':
        """Compose actions to run one after another."""
        return series(*actions)

    def parallel(self, *actions: 'ActionLike') -> 'Action':
        """Compose actions to run concurrently."""
        return parallel(*actions)

    def suite(self, title: str, request: 'ActionLike',
              assertions: Mapping[str, 'RuntimeValue']) -> 'Action':
        """Describe a test suite.

        Args:
            title: Test title.
            request: Action returning the resource under test.
            assertions: Capability names mapped to expected values.

        Returns:
            Test action registering a single test.
        """
        request = as_action(request)
        assertions = _ensure_assertions(assertions)

        def test() -> None:
            handle = self.context

            async def body() -> None:
                context = handle.value
                resource = await request.run(context)
                for kind, expected in assertions.items():
                    await check_resource(resource, kind, expected, context)

            self.runner.it(title, body)

        return test_action(test, title=title)

    def suites(self, title: str, suites: 'Iterable[RuntimeValue]', request: 'ActionLike',
               assertions: Mapping[str, 'RuntimeValue'], is_parallel: bool = False) -> 'Action':
        """Describe a suite of tests repeated over variants.

        Args:
            title: Title template, rendered with the current variant.
            suites: Variant values.
            request: Action returning the resource under test; receives
                the case context with the variant bound to `suite`.
            assertions: Capability names mapped to expected values;
                string values are rendered with the current variant.
            is_parallel: Request all variants concurrently in a one-time
                hook before asserting.

        Returns:
            Test action registering one test per variant.
        """
        request = as_action(request)
        assertions = _ensure_assertions(assertions)
        variants = tuple(suites)

        def tests() -> None:
            handle = self.context

            if is_parallel:
                responses: list[RuntimeValue] = []

                async def prefetch() -> None:
                    responses[:] = await gather_all(*(
                        request.run(handle.value.merge({SUITE_BINDING: variant}))
                        for variant in variants
                    ))

                self.runner.before(prefetch)

                for index, variant in enumerate(variants):
                    self.runner.it(
                        render(title, {SUITE_BINDING: variant}),
                        self._cached_body(responses, index, variant, assertions),
                    )
            else:
                for variant in variants:
                    self.runner.it(
                        render(title, {SUITE_BINDING: variant}),
                        self._request_body(handle, request, variant, assertions),
                    )

        return test_action(tests, title=title)

    def _request_body(self, handle: ContextHandle, request: 'Action',
                      variant: 'RuntimeValue',
                      assertions: Mapping[str, 'RuntimeValue']) -> 'AsyncBody':
        async def body() -> None:
            resource = await request.run(handle.value.merge({SUITE_BINDING: variant}))
            await self._check_variant(
                resource,
                variant,
                assertions,
                swapped=self.swap_suite_assertions,
            )

        return body

    def _cached_body(self, responses: list['RuntimeValue'], index: int,
                     variant: 'RuntimeValue',
                     assertions: Mapping[str, 'RuntimeValue']) -> 'AsyncBody':
        async def body() -> None:
            await self._check_variant(responses[index], variant, assertions)

        return body

    @staticmethod
    async def _check_variant(resource: 'RuntimeValue', variant: 'RuntimeValue',
                             assertions: Mapping[str, 'RuntimeValue'], *,
                             swapped: bool = False) -> None:
        """Apply assertions of a parameterized suite to one resource.

        Args:
            resource: Resource of the variant.
            variant: Variant value, bound to `suite`.
            assertions: Capability names mapped to expected values.
            swapped: Call the capability named by the expected value
                with the assertion kind instead.
        """
        bindings = ContextDict({SUITE_BINDING: variant})

        for key, value in assertions.items():
            expected = render(value, bindings) if isinstance(value, str) else value
            if swapped:
                await check_resource(resource, expected, key, bindings)
            else:
                await check_resource(resource, key, expected, bindings)
