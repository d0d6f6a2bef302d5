"""Core exception hierarchy.

This module defines base error and warning types used across the library
to report case construction failures, action contract violations at
runtime, and non-fatal issues such as declared but unsupported hooks.

Action failures and assertion failures are never wrapped: they reach the
caller (and the host runner) unchanged.
"""

from os import linesep
from typing import Any, TypedDict

from yaml import dump

from pytest_tasty.values import MAPPINGS, SCALARS, SEQUENCES

SNIPPET_ELLIPSIS = f' ...{linesep}'
SNIPPET_INDENT = 2

FORMAT_REPLACER = '<runtime object>'
FORMAT_INDENT = 4


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter adapts output based on
    provided values.
    """

    #: Title of the case being built or run.
    case: str | None
    #: Title of the test being run.
    test: str | None
    #: Title (or name) of the failing action.
    action: str | None

    #: Context values available at the moment of failure.
    context: dict[str, Any] | None


class ErrorFormatter:
    """Utility class for formatting errors.

    This formatter is responsible for producing human-readable
    error messages with optional location and a YAML snippet of the
    context at the moment of failure.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context with location and data.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        message += linesep
        message += cls.get_location_string(context, indent=FORMAT_INDENT)
        message += cls.get_snippet_string(context, indent=FORMAT_INDENT * 2)

        return message

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format case, test, and action location information.

        Args:
            context: Error context containing location metadata.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted location string, or an empty string if no
            location is known.
        """
        indent = cls._ensure_indent(indent)

        parts = [
            f'{label} {value!r}'
            for label, value in (
                ('in case', context.get('case')),
                ('test', context.get('test')),
                ('on action', context.get('action')),
            )
            if value
        ]
        if not parts:
            return ''

        return f'{indent}{", ".join(parts)}{linesep}'

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Generate a YAML snippet of the context values.

        Args:
            context: Error context containing runtime values.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted multi-line snippet string, or an empty string
            if no values are available.
        """
        indent = cls._ensure_indent(indent)

        if not (values := context.get('context')):
            return ''

        snippet = f'{indent}{SNIPPET_ELLIPSIS}'
        snippet += cls._make_yaml({'context': {**values}}, indent)
        snippet += linesep

        return snippet

    @classmethod
    def _filter_unsafe(cls, value: Any) -> Any:  # noqa: ANN401
        """Recursively sanitize values for safe YAML serialization.

        Non-scalar and non-container objects (clients, resources,
        secrets) are replaced with a placeholder.

        Args:
            value: Arbitrary value to sanitize.

        Returns:
            A YAML-safe representation of the value.
        """
        if value is None or (isinstance(value, SCALARS) and not hasattr(value, 'get_secret_value')):
            return value

        if isinstance(value, MAPPINGS):
            return {
                f'{key}': cls._filter_unsafe(item)
                for key, item in value.items()
            }

        if isinstance(value, SEQUENCES):
            return [
                cls._filter_unsafe(item)
                for item in value
            ]

        return FORMAT_REPLACER

    @classmethod
    def _make_yaml(cls, value: Any, indent: str = '') -> str:  # noqa: ANN401
        """Serialize a sanitized value to a YAML-formatted string."""
        data = dump(
            cls._filter_unsafe(value),
            indent=SNIPPET_INDENT,
            sort_keys=False,
        )

        return cls._make_indent(data, indent)

    @staticmethod
    def _make_indent(value: str, indent: str) -> str:
        """Apply indentation to a multi-line string.

        Empty or whitespace-only lines are omitted.
        """
        if not indent:
            return value

        return linesep.join(
            f'{indent}{line}'
            for line in value.splitlines()
            if line.strip()
        )

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Normalize indentation input."""
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''


class TastyWarning(UserWarning):
    """Warning emitted for non-fatal case construction issues.

    This warning is used when a case declares something the builder
    accepts but does not act upon (for example, per-test hooks),
    unless strict mode turns it into an error.
    """


class TastyError(Exception, ErrorFormatter):
    """Base exception for all pytest-tasty errors.

    All custom exceptions raised by the library inherit from this class
    to allow unified error handling by callers.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context containing optional runtime values.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String represenatation."""
        return self.format(self.message, self.context)


class TastyBuildError(TastyError):
    """Error raised while building cases.

    This exception indicates an invalid action list, a registration
    outside of any group, or (in strict mode) an unsupported hook.
    """


class TastyRuntimeError(TastyError):
    """Error raised when an action or resource breaks its contract.

    For example, an action returning something other than a context
    mapping, a request without a `snapshot`, or a resource without the
    capability named by an assertion.
    """
