"""
Attachment kinds the bot can store, as one dataclass per kind.

`extract_attachment` reads a platform message into the matching variant and
`attachment_from_dict` rebuilds one from a stored document. Both go through
ATTACHMENT_TYPES, which must cover every AttachmentKind.
"""
import logging
from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import ClassVar

from django.core.exceptions import ImproperlyConfigured

from .exceptions import UnsupportedAttachmentError

logger = logging.getLogger(__name__)


class AttachmentKind(str, Enum):
    DOCUMENT = "document"
    PHOTO = "photo"
    VIDEO = "video"
    AUDIO = "audio"
    VOICE = "voice"
    ANIMATION = "animation"


@dataclass(frozen=True)
class Attachment:
    """
    A file reference issued by the messaging platform.
    `file_handle` is opaque and only meaningful to that platform.
    """
    kind: ClassVar[AttachmentKind]

    file_handle: str
    caption: str = ""

    @classmethod
    def from_payload(cls, payload: dict, caption: str = "") -> "Attachment":
        """Builds the attachment from the platform's per-kind object."""
        raise NotImplementedError

    @property
    def display_name(self) -> str:
        return getattr(self, 'file_name', None) or self.kind.value

    def to_dict(self) -> dict:
        data = asdict(self)
        data['kind'] = self.kind.value
        return data


@dataclass(frozen=True)
class DocumentAttachment(Attachment):
    kind: ClassVar[AttachmentKind] = AttachmentKind.DOCUMENT

    file_name: str | None = None
    mime_type: str | None = None

    @classmethod
    def from_payload(cls, payload, caption=""):
        return cls(
            file_handle=payload['file_id'],
            caption=caption,
            file_name=payload.get('file_name'),
            mime_type=payload.get('mime_type'),
        )


@dataclass(frozen=True)
class PhotoAttachment(Attachment):
    kind: ClassVar[AttachmentKind] = AttachmentKind.PHOTO

    width: int | None = None
    height: int | None = None

    @classmethod
    def from_payload(cls, payload, caption=""):
        # Photos arrive as a list of sizes, smallest first
        largest = payload[-1]
        return cls(
            file_handle=largest['file_id'],
            caption=caption,
            width=largest.get('width'),
            height=largest.get('height'),
        )


@dataclass(frozen=True)
class VideoAttachment(Attachment):
    kind: ClassVar[AttachmentKind] = AttachmentKind.VIDEO

    duration: int | None = None
    file_name: str | None = None

    @classmethod
    def from_payload(cls, payload, caption=""):
        return cls(
            file_handle=payload['file_id'],
            caption=caption,
            duration=payload.get('duration'),
            file_name=payload.get('file_name'),
        )


@dataclass(frozen=True)
class AudioAttachment(Attachment):
    kind: ClassVar[AttachmentKind] = AttachmentKind.AUDIO

    duration: int | None = None
    title: str | None = None
    performer: str | None = None
    file_name: str | None = None

    @classmethod
    def from_payload(cls, payload, caption=""):
        return cls(
            file_handle=payload['file_id'],
            caption=caption,
            duration=payload.get('duration'),
            title=payload.get('title'),
            performer=payload.get('performer'),
            file_name=payload.get('file_name'),
        )


@dataclass(frozen=True)
class VoiceAttachment(Attachment):
    kind: ClassVar[AttachmentKind] = AttachmentKind.VOICE

    duration: int | None = None

    @classmethod
    def from_payload(cls, payload, caption=""):
        return cls(
            file_handle=payload['file_id'],
            caption=caption,
            duration=payload.get('duration'),
        )


@dataclass(frozen=True)
class AnimationAttachment(Attachment):
    kind: ClassVar[AttachmentKind] = AttachmentKind.ANIMATION

    duration: int | None = None
    file_name: str | None = None

    @classmethod
    def from_payload(cls, payload, caption=""):
        return cls(
            file_handle=payload['file_id'],
            caption=caption,
            duration=payload.get('duration'),
            file_name=payload.get('file_name'),
        )


ATTACHMENT_TYPES = {
    AttachmentKind.DOCUMENT: DocumentAttachment,
    AttachmentKind.PHOTO: PhotoAttachment,
    AttachmentKind.VIDEO: VideoAttachment,
    AttachmentKind.AUDIO: AudioAttachment,
    AttachmentKind.VOICE: VoiceAttachment,
    AttachmentKind.ANIMATION: AnimationAttachment,
}

_missing_kinds = set(AttachmentKind) - set(ATTACHMENT_TYPES)
if _missing_kinds:
    raise ImproperlyConfigured(f"No attachment type registered for: {sorted(k.value for k in _missing_kinds)}")


def parse_kind(value) -> AttachmentKind:
    """
    Converts a stored kind string to an AttachmentKind.
    Raises UnsupportedAttachmentError for anything else.
    """
    try:
        return AttachmentKind(value)
    except ValueError as e:
        raise UnsupportedAttachmentError(f"Unsupported attachment kind: {value!r}") from e


def extract_attachment(message: dict) -> Attachment | None:
    """
    Returns the attachment carried by a platform message, or None when the
    message carries no recognized kind.

    The platform sends animations together with a `document` copy of the
    same file; the animation wins. Any other combination of several kinds is
    ambiguous and raises UnsupportedAttachmentError.
    """
    present = [kind for kind in AttachmentKind if message.get(kind.value)]
    if AttachmentKind.ANIMATION in present and AttachmentKind.DOCUMENT in present:
        present.remove(AttachmentKind.DOCUMENT)

    if not present:
        return None
    if len(present) > 1:
        raise UnsupportedAttachmentError(
            f"Message carries several attachment kinds: {[k.value for k in present]}"
        )

    kind = present[0]
    caption = message.get('caption') or ""
    try:
        attachment = ATTACHMENT_TYPES[kind].from_payload(message[kind.value], caption=caption)
    except (KeyError, IndexError, TypeError) as e:
        raise UnsupportedAttachmentError(f"Malformed {kind.value} payload: {e}") from e

    logger.debug(f"Extracted {kind.value} attachment: {attachment.file_handle}")
    return attachment


def attachment_from_dict(data: dict) -> Attachment:
    """
    Rebuilds an attachment from the output of Attachment.to_dict.
    Unknown keys are ignored.
    """
    if not isinstance(data, dict) or not data.get('file_handle'):
        raise UnsupportedAttachmentError("Stored attachment is missing its file handle")

    attachment_class = ATTACHMENT_TYPES[parse_kind(data.get('kind'))]
    known = {f.name for f in fields(attachment_class)}
    return attachment_class(**{key: value for key, value in data.items() if key in known})
