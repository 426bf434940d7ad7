import enum
import logging
from dataclasses import dataclass
from docchat.errors import BlobNotFound
from docchat.extract.text import extract_text
from docchat.files.blob_store import BlobStore
from docchat.files.registry import FileRegistry
from docchat.models.uploaded_file import UploadedFile

logger = logging.getLogger(__name__)

CONTEXT_MAX_CHARS = 6000


class ContextStatus(enum.Enum):
    READY = "ready"
    NO_DOCUMENT = "no_document"
    NO_READABLE_TEXT = "no_readable_text"
    BLOB_MISSING = "blob_missing"


DIAGNOSTICS = {
    ContextStatus.NO_DOCUMENT: "Please upload a document first.",
    ContextStatus.BLOB_MISSING: "Uploaded file is missing on the server. Please upload it again.",
    ContextStatus.NO_READABLE_TEXT: "No readable text found in the document.",
}


@dataclass(frozen=True)
class ChatContext:
    status: ContextStatus
    text: str = ""
    document: UploadedFile | None = None

    @property
    def ready(self) -> bool:
        return self.status is ContextStatus.READY

    @property
    def diagnostic(self) -> str | None:
        return DIAGNOSTICS.get(self.status)


def build_context(registry: FileRegistry, blobs: BlobStore, owner_id: int,
                  max_chars: int = CONTEXT_MAX_CHARS) -> ChatContext:
    document = registry.most_recent(owner_id)
    if document is None:
        return ChatContext(ContextStatus.NO_DOCUMENT)

    try:
        data = blobs.read(document.stored_name)
    except BlobNotFound:
        logger.warning("blob missing for file id=%s stored_name=%s", document.id, document.stored_name)
        return ChatContext(ContextStatus.BLOB_MISSING, document=document)

    text = extract_text(data, document.content_type)
    if not text.strip():
        return ChatContext(ContextStatus.NO_READABLE_TEXT, document=document)

    return ChatContext(ContextStatus.READY, text=text[:max_chars], document=document)
