"""Tests for context containers."""

import pytest

from pytest_tasty import ContextDict, ContextHandle


def test_merge_last_write_wins() -> None:
    """Later fragments override earlier keys."""
    context = ContextDict({'a': 1, 'b': 1})

    merged = context.merge({'b': 2}, None, {'b': 3, 'c': 3})

    assert merged == {'a': 1, 'b': 3, 'c': 3}
    assert isinstance(merged, ContextDict)


def test_merge_returns_new_context() -> None:
    """Merging never mutates the receiver."""
    context = ContextDict({'a': 1})

    merged = context.merge({'a': 2})

    assert context == {'a': 1}
    assert merged is not context


def test_merge_keeps_values_by_reference() -> None:
    """Nested values are not copied."""
    payload = {'items': [1, 2]}

    merged = ContextDict().merge({'payload': payload})

    assert merged['payload'] is payload


@pytest.mark.parametrize('fragment', (
    pytest.param([('a', 1)], id='list'),
    pytest.param('value', id='string'),
    pytest.param(42, id='int'),
))
def test_merge_rejects_non_mappings(fragment: object) -> None:
    """Fragments must be mappings."""
    with pytest.raises(TypeError, match=r'is not a context mapping$'):
        ContextDict().merge(fragment)  # type: ignore[arg-type]


def test_merge_rejects_non_string_keys() -> None:
    """Context keys must be strings."""
    with pytest.raises(TypeError, match=r'^Can not use 42 as context key$'):
        ContextDict().merge({42: 'value'})


def test_handle_reads_latest_value() -> None:
    """Readers holding a handle observe later replacements."""
    handle = ContextHandle()
    reader = handle

    handle.replace({'token': 'abc'})

    assert reader['token'] == 'abc'
    assert dict(reader) == {'token': 'abc'}
    assert len(reader) == 1


def test_handle_replace_copies_input() -> None:
    """Replacing stores a new context, not the given mapping."""
    source = {'a': 1}
    handle = ContextHandle(source)

    source['a'] = 2

    assert handle['a'] == 1
    assert isinstance(handle.value, ContextDict)
