import logging
from abc import ABC, abstractmethod

from apps.kvstore.repository import BaseKeyValueStore
from .exceptions import FileIntegrityError
from .structures import FileRecord

logger = logging.getLogger(__name__)

FILE_PREFIX = "file:"
OWNER_INDEX_PREFIX = "index:owner:"
CATEGORY_INDEX_PREFIX = "index:category:"


def owner_index(owner_id):
    return f"{OWNER_INDEX_PREFIX}{owner_id}"


def category_index(category):
    return f"{CATEGORY_INDEX_PREFIX}{category}"


class BaseFileRepository(ABC):
    """
    Abstract base class for file repository implementations.
    Defines the contract for managing FileRecord documents and the
    secondary indexes (ordered lists of ids) that point at them.
    """

    @abstractmethod
    def create_file(self, record: FileRecord):
        """
        Stores a new FileRecord. Index maintenance is separate.
        """
        pass

    @abstractmethod
    def get_file(self, file_id):
        """
        Returns the FileRecord with the given id, or None.
        """
        pass

    @abstractmethod
    def get_files(self, file_ids):
        """
        Returns {id: FileRecord} for the ids that exist and can be read, in
        one read. Unreadable documents are left out.
        """
        pass

    @abstractmethod
    def list_file_ids(self):
        """
        Returns the ids of every stored FileRecord.
        """
        pass

    @abstractmethod
    def update_file(self, record: FileRecord):
        """
        Replaces the stored document of an existing FileRecord.
        """
        pass

    @abstractmethod
    def delete_file(self, file_id):
        """
        Deletes a FileRecord by its ID.
        """
        pass

    @abstractmethod
    def get_index(self, index_key):
        """
        Returns the ordered list of ids stored in an index.
        """
        pass

    @abstractmethod
    def add_to_index(self, index_key, file_id):
        """
        Appends file_id to an index unless it is already present.
        """
        pass

    @abstractmethod
    def remove_from_index(self, index_key, file_ids):
        """
        Removes the given ids from an index, dropping the index once empty.
        """
        pass


class FileRepositoryKV(BaseFileRepository):
    """
    Key-value store implementation of the BaseFileRepository.
    Records live under `file:<id>`, indexes under `index:owner:<owner>` and
    `index:category:<category>`. Index updates are read-modify-write and not
    atomic with the record write.
    """

    def __init__(self, store: BaseKeyValueStore):
        if not isinstance(store, BaseKeyValueStore):
            raise TypeError("store must be an instance of BaseKeyValueStore")
        self.store = store

    def create_file(self, record):
        self.store.put(f"{FILE_PREFIX}{record.id}", record.to_dict())
        logger.debug(f"Created file record: {record.id}")
        return record

    def get_file(self, file_id):
        data = self.store.get(f"{FILE_PREFIX}{file_id}")
        if data is None:
            return None
        return FileRecord.from_dict(data)

    def get_files(self, file_ids):
        keys = [f"{FILE_PREFIX}{file_id}" for file_id in file_ids]
        records = {}
        for key, data in self.store.get_many(keys).items():
            file_id = key[len(FILE_PREFIX):]
            try:
                records[file_id] = FileRecord.from_dict(data)
            except FileIntegrityError as e:
                logger.error(f"Skipping unreadable file record {file_id}: {str(e)}")
        return records

    def list_file_ids(self):
        return [key[len(FILE_PREFIX):] for key in self.store.list_keys_by_prefix(FILE_PREFIX)]

    def update_file(self, record):
        self.store.put(f"{FILE_PREFIX}{record.id}", record.to_dict())
        logger.debug(f"Updated file record: {record.id}")

    def delete_file(self, file_id):
        self.store.delete(f"{FILE_PREFIX}{file_id}")
        logger.debug(f"Deleted file record: {file_id}")

    def get_index(self, index_key):
        return list(self.store.get(index_key) or [])

    def add_to_index(self, index_key, file_id):
        ids = self.get_index(index_key)
        if file_id in ids:
            return
        ids.append(file_id)
        self.store.put(index_key, ids)

    def remove_from_index(self, index_key, file_ids):
        to_remove = set(file_ids)
        ids = self.get_index(index_key)
        remaining = [file_id for file_id in ids if file_id not in to_remove]
        if len(remaining) == len(ids):
            return
        if remaining:
            self.store.put(index_key, remaining)
        else:
            self.store.delete(index_key)
