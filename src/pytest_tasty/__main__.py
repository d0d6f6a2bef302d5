"""CLI utilities for inspecting declarative cases.

The `plan` command imports a test module and prints, as YAML, every
group registered by its module-level `Tasty` instances: titles, number
of one-time hooks, test titles, and hooks declared but not supported.
"""

from importlib.util import module_from_spec, spec_from_file_location
from pathlib import Path
from typing import TYPE_CHECKING

from click import ClickException, argument, echo, group
from click import Path as PathParam
from yaml import safe_dump

from pytest_tasty.tasty import Tasty

if TYPE_CHECKING:
    from types import ModuleType

InputFilepath = PathParam(
    exists=True,
    dir_okay=False,
    readable=True,
    path_type=Path,
)


@group(help='Command-line utilities for pytest-tasty cases.')
def cli() -> None:
    """Root CLI group for pytest-tasty tools."""
    return None


def _load_module(path: Path) -> 'ModuleType':
    """Import a Python file as a standalone module.

    Args:
        path: Path to the module file.

    Returns:
        The executed module.

    Raises:
        ClickException: If the file can not be imported.
    """
    spec = spec_from_file_location(path.stem, path)
    if spec is None or spec.loader is None:
        raise ClickException(f'Can not import {path}')

    module = module_from_spec(spec)
    spec.loader.exec_module(module)

    return module


@cli.command(
    name='plan',
    help='Print groups, hooks, and tests registered by a test module.',
)
@argument('module', type=InputFilepath)
def print_plan(module: Path) -> None:
    """Print the registration tree of a module as YAML.

    Args:
        module: Path to a test module.
    """
    loaded = _load_module(module)

    plan = {
        name: [group.as_dict() for group in value.runner.groups]
        for name, value in vars(loaded).items()
        if isinstance(value, Tasty) and hasattr(value.runner, 'groups')
    }
    if not plan:
        raise ClickException(f'No Tasty instances found in {module}')

    echo(safe_dump(plan, sort_keys=False, allow_unicode=True), nl=False)


if __name__ == '__main__':
    cli()
