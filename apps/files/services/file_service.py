import logging
import secrets

from apps.bot.config import BotConfig
from apps.kvstore.utils import now_ms
from apps.files.attachments import Attachment
from apps.files.repository import BaseFileRepository, owner_index, category_index
from apps.files.structures import FileRecord, DEFAULT_CATEGORY

logger = logging.getLogger(__name__)


def generate_file_id():
    """128 random bits, hex-encoded."""
    return secrets.token_hex(16)


class FileService:
    """
    The file registry: saves, resolves, counts and deletes FileRecords and
    keeps the owner and category indexes in step with them.

    The store has no transactions, so a record and its two index entries are
    written separately. Writers order their steps so that the only possible
    leftover is an index entry whose record is gone; readers drop such
    entries and prune them from the index.
    """

    def __init__(self, file_repository: BaseFileRepository, config: BotConfig):
        if not file_repository:
            raise ValueError("file_repository is required")
        if not isinstance(file_repository, BaseFileRepository):
            raise TypeError("file_repository must be an instance of BaseFileRepository")
        if config is None:
            raise ValueError("config is required")
        self.file_repository = file_repository
        self.config = config

    def save(self, attachment: Attachment, owner_id, category=DEFAULT_CATEGORY) -> str:
        """
        Orchestrates: new id -> write record -> owner index -> category index
        """
        category = category or DEFAULT_CATEGORY
        record = FileRecord(
            id=generate_file_id(),
            file_handle=attachment.file_handle,
            kind=attachment.kind.value,
            owner_id=str(owner_id),
            created_at=now_ms(),
            caption=attachment.caption or "",
            category=category,
            file_name=getattr(attachment, 'file_name', None),
        )

        self.file_repository.create_file(record)
        self.file_repository.add_to_index(owner_index(record.owner_id), record.id)
        self.file_repository.add_to_index(category_index(category), record.id)

        logger.info(f"Saved {record.kind} file {record.id} for owner {record.owner_id} in category '{category}'")
        return record.id

    def get(self, file_id) -> FileRecord | None:
        if not file_id:
            return None
        return self.file_repository.get_file(file_id)

    def record_access(self, file_id):
        """
        Bumps the access counter of a record. Absent records are ignored.
        """
        record = self.get(file_id)
        if record is None:
            logger.debug(f"record_access on missing file {file_id}, ignoring")
            return None

        previous = record.last_accessed_at or 0
        record.access_count += 1
        record.last_accessed_at = max(now_ms(), previous)
        self.file_repository.update_file(record)
        logger.debug(f"File {file_id} accessed {record.access_count} time(s)")
        return record

    def can_manage(self, record: FileRecord, actor_id) -> bool:
        """An actor may administer a file they own, or any file when they are an admin."""
        return str(actor_id) == record.owner_id or self.config.is_admin(actor_id)

    def delete(self, file_id, requester_id) -> bool:
        """
        Orchestrates: permission check -> delete record -> prune both indexes.
        Returns False, changing nothing, when the record is absent or the
        requester may not manage it.
        """
        record = self.get(file_id)
        if record is None:
            logger.warning(f"Delete requested for missing file {file_id} by {requester_id}")
            return False
        if not self.can_manage(record, requester_id):
            logger.warning(f"User {requester_id} is not allowed to delete file {file_id}")
            return False

        self.file_repository.delete_file(record.id)
        self.file_repository.remove_from_index(owner_index(record.owner_id), [record.id])
        self.file_repository.remove_from_index(category_index(record.category), [record.id])

        logger.info(f"Deleted file {record.id} (owner {record.owner_id}) on request of {requester_id}")
        return True

    def list_by_owner(self, owner_id):
        return self._resolve_index(owner_index(owner_id))

    def list_by_category(self, category):
        return self._resolve_index(category_index(category))

    def list_all(self):
        ids = self.file_repository.list_file_ids()
        records = self.file_repository.get_files(ids)
        return [records[file_id] for file_id in ids if file_id in records]

    def top_accessed(self, limit=5):
        """
        Most-accessed records first; ties keep the oldest record first.
        """
        records = sorted(self.list_all(), key=lambda r: (-r.access_count, r.created_at, r.id))
        return records[:limit]

    def share_link(self, file_id):
        return self.config.share_link(file_id)

    def _resolve_index(self, index_key):
        ids = self.file_repository.get_index(index_key)
        if not ids:
            return []

        records = self.file_repository.get_files(ids)
        stale = [file_id for file_id in ids if file_id not in records]
        if stale:
            logger.warning(f"Index {index_key} points at {len(stale)} missing record(s), pruning")
            try:
                self.file_repository.remove_from_index(index_key, stale)
            except Exception as e:
                logger.error(f"Failed to prune index {index_key}: {str(e)}", exc_info=True)

        return [records[file_id] for file_id in ids if file_id in records]
