from dataclasses import asdict, dataclass

from .exceptions import FileIntegrityError

DEFAULT_CATEGORY = "general"


@dataclass
class FileRecord:
    """
    Metadata for one stored file. The bytes stay on the messaging platform;
    only its file handle is kept here.
    """
    id: str
    file_handle: str
    kind: str
    owner_id: str
    created_at: int
    caption: str = ""
    category: str = DEFAULT_CATEGORY
    access_count: int = 0
    last_accessed_at: int | None = None
    file_name: str | None = None

    @property
    def display_name(self):
        return self.file_name or self.caption or f"{self.kind} {self.id[:8]}"

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data):
        """
        Builds a record from a stored document.
        Raises FileIntegrityError if required fields are missing.
        """
        try:
            return cls(
                id=data['id'],
                file_handle=data['file_handle'],
                kind=data['kind'],
                owner_id=str(data['owner_id']),
                created_at=int(data['created_at']),
                caption=data.get('caption') or "",
                category=data.get('category') or DEFAULT_CATEGORY,
                access_count=int(data.get('access_count') or 0),
                last_accessed_at=data.get('last_accessed_at'),
                file_name=data.get('file_name'),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise FileIntegrityError(f"Malformed file record: {e}") from e
