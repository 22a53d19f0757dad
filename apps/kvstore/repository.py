import copy
import json
import logging
from abc import ABC, abstractmethod

from .exceptions import ValueNotSerializableError
from .models import KeyValue

logger = logging.getLogger(__name__)


def _ensure_serializable(key, value):
    try:
        json.dumps(value)
    except (TypeError, ValueError) as e:
        raise ValueNotSerializableError(f"Value for key '{key}' is not JSON-serializable: {e}") from e


class BaseKeyValueStore(ABC):
    """
    Abstract base class for key-value store implementations.
    Defines the contract the registry, session and usage services rely on.
    Values are JSON-serializable documents. No operation spans more than one
    key atomically.
    """

    @abstractmethod
    def get(self, key):
        """
        Returns the document stored under key, or None if absent.
        """
        pass

    @abstractmethod
    def get_many(self, keys):
        """
        Returns a dict {key: document} for the keys that exist.
        Missing keys are simply left out.
        """
        pass

    @abstractmethod
    def put(self, key, value):
        """
        Stores value under key, replacing any previous document.
        """
        pass

    @abstractmethod
    def delete(self, key):
        """
        Removes key. Deleting an absent key is not an error.
        """
        pass

    @abstractmethod
    def list_keys_by_prefix(self, prefix):
        """
        Returns the sorted list of keys starting with prefix.
        """
        pass


class KeyValueStoreDjango(BaseKeyValueStore):
    """
    Django ORM implementation of the BaseKeyValueStore.
    Encapsulates all database interactions for the KeyValue table.
    """

    def __init__(self):
        self.model = KeyValue

    def get(self, key):
        entry = self.model.objects.filter(pk=key).first()
        if entry is None:
            logger.debug(f"Key not found: {key}")
            return None
        return entry.value

    def get_many(self, keys):
        keys = list(keys)
        if not keys:
            return {}
        entries = self.model.objects.filter(pk__in=keys)
        return {entry.key: entry.value for entry in entries}

    def put(self, key, value):
        _ensure_serializable(key, value)
        self.model.objects.update_or_create(key=key, defaults={'value': value})
        logger.debug(f"Stored key: {key}")

    def delete(self, key):
        deleted, _ = self.model.objects.filter(pk=key).delete()
        logger.debug(f"Deleted key: {key} (existed: {bool(deleted)})")

    def list_keys_by_prefix(self, prefix):
        return list(
            self.model.objects.filter(key__startswith=prefix)
            .order_by('key')
            .values_list('key', flat=True)
        )


class InMemoryKeyValueStore(BaseKeyValueStore):
    """
    Process-local implementation backed by a dict.
    Documents are deep-copied on the way in and out so callers can never
    mutate stored state by accident.
    """

    def __init__(self, initial=None):
        self._data = {}
        for key, value in (initial or {}).items():
            self.put(key, value)

    def get(self, key):
        value = self._data.get(key)
        return copy.deepcopy(value)

    def get_many(self, keys):
        return {key: copy.deepcopy(self._data[key]) for key in keys if key in self._data}

    def put(self, key, value):
        _ensure_serializable(key, value)
        self._data[key] = copy.deepcopy(value)

    def delete(self, key):
        self._data.pop(key, None)

    def list_keys_by_prefix(self, prefix):
        return sorted(key for key in self._data if key.startswith(prefix))
