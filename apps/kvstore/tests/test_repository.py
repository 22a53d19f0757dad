"""
Tests for the key-value store implementations.

Both implementations must honour the same contract, so the contract tests
are parametrized over them.
"""
import pytest
from apps.kvstore.repository import KeyValueStoreDjango, InMemoryKeyValueStore
from apps.kvstore.exceptions import ValueNotSerializableError
from apps.kvstore.models import KeyValue


@pytest.fixture(params=['django', 'memory'])
def store(request):
    if request.param == 'django':
        request.getfixturevalue('db')
        return KeyValueStoreDjango()
    return InMemoryKeyValueStore()


class TestKeyValueContract:
    """Contract shared by every store implementation."""

    def test_get_missing_returns_none(self, store):
        assert store.get('file:missing') is None

    def test_put_then_get(self, store):
        store.put('file:abc', {'id': 'abc', 'tags': ['a', 'b']})

        assert store.get('file:abc') == {'id': 'abc', 'tags': ['a', 'b']}

    def test_put_replaces_previous_value(self, store):
        store.put('session:1', {'state': 'idle', 'data': {'x': 1}})
        store.put('session:1', {'state': 'idle', 'data': {}})

        assert store.get('session:1') == {'state': 'idle', 'data': {}}

    def test_delete_removes_key(self, store):
        store.put('file:abc', {'id': 'abc'})
        store.delete('file:abc')

        assert store.get('file:abc') is None

    def test_delete_missing_key_is_noop(self, store):
        store.delete('file:never-existed')

        assert store.list_keys_by_prefix('file:') == []

    def test_list_keys_by_prefix_sorted_and_filtered(self, store):
        store.put('file:b', {})
        store.put('file:a', {})
        store.put('index:owner:1', [])

        assert store.list_keys_by_prefix('file:') == ['file:a', 'file:b']
        assert store.list_keys_by_prefix('index:') == ['index:owner:1']

    def test_get_many_skips_missing_keys(self, store):
        store.put('file:a', {'id': 'a'})
        store.put('file:b', {'id': 'b'})

        result = store.get_many(['file:a', 'file:missing', 'file:b'])

        assert result == {'file:a': {'id': 'a'}, 'file:b': {'id': 'b'}}

    def test_get_many_empty(self, store):
        assert store.get_many([]) == {}

    def test_non_serializable_value_rejected(self, store):
        with pytest.raises(ValueNotSerializableError):
            store.put('file:bad', {'value': object()})

        assert store.get('file:bad') is None


@pytest.mark.django_db
class TestKeyValueStoreDjango:
    """Django-specific behaviour."""

    def test_put_creates_single_row(self):
        store = KeyValueStoreDjango()
        store.put('usage:totals', {'actions': 1})
        store.put('usage:totals', {'actions': 2})

        assert KeyValue.objects.filter(key='usage:totals').count() == 1
        assert KeyValue.objects.get(key='usage:totals').value == {'actions': 2}

    def test_str_is_key(self):
        entry = KeyValue.objects.create(key='file:xyz', value={})

        assert str(entry) == 'file:xyz'


@pytest.mark.unit
class TestInMemoryKeyValueStore:
    """In-memory specific behaviour."""

    def test_returned_documents_are_copies(self):
        store = InMemoryKeyValueStore()
        store.put('index:owner:1', ['a'])

        listing = store.get('index:owner:1')
        listing.append('b')

        assert store.get('index:owner:1') == ['a']

    def test_initial_data(self):
        store = InMemoryKeyValueStore({'file:a': {'id': 'a'}})

        assert store.get('file:a') == {'id': 'a'}
