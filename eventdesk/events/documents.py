"""
Event document attachments.

Uploads are checked for size and type, written to the object store under
an owner-scoped key, then recorded in documentos_evento. If the database
write fails the stored object is removed again.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.errors import DocumentRejectedError, PersistenceError, StorageError
from eventdesk.models import EventDocument
from eventdesk.services.ownership import require_owned_document, require_owned_event
from eventdesk.services.text import sanitize_string
from eventdesk.storage import ObjectStore

logger = logging.getLogger(__name__)

MAX_DOCUMENT_BYTES = 5 * 1024 * 1024
ALLOWED_MIME_TYPES = frozenset({
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "image/png",
    "image/jpeg",
})
DEFAULT_MIME_TYPE = "application/octet-stream"
DEFAULT_DOCUMENT_TYPE = "Outro"


def check_upload(size: int, content_type: Optional[str]) -> None:
    """Reject files over 5MB and declared types outside the allowlist."""
    if size > MAX_DOCUMENT_BYTES:
        raise DocumentRejectedError("Arquivo excede 5MB")
    if content_type and content_type not in ALLOWED_MIME_TYPES:
        raise DocumentRejectedError("Tipo de arquivo não permitido")


def _key_part(value) -> str:
    return str(value).replace("/", "_").replace("\\", "_")


def storage_key(owner_id: str, event_id: int, filename: str, now: Optional[datetime] = None) -> str:
    stamp = int((now or datetime.now(timezone.utc)).timestamp() * 1000)
    return f"users/{_key_part(owner_id)}/eventos/{event_id}/{stamp}_{_key_part(filename)}"


async def list_documents(db: AsyncSession, event_id: int, owner_id: str) -> List[EventDocument]:
    result = await db.execute(
        select(EventDocument)
        .where(EventDocument.evento_id == event_id, EventDocument.user_id == owner_id)
        .order_by(EventDocument.created_at.desc(), EventDocument.id.desc())
    )
    return list(result.scalars().all())


async def store_document(
    db: AsyncSession,
    store: ObjectStore,
    event_id: int,
    owner_id: str,
    filename: Optional[str],
    content_type: Optional[str],
    data: bytes,
    tipo_documento: Optional[str] = None,
) -> EventDocument:
    """
    Attach a file to an event.

    Raises:
        NotFoundError: event missing or owned by someone else
        DocumentRejectedError: no file name, over 5MB or type not allowed
        StorageError: the object store rejected the write
        PersistenceError: the metadata insert failed and was rolled back
    """
    event = await require_owned_event(db, event_id, owner_id)

    name = sanitize_string(filename or "")
    if not name:
        raise DocumentRejectedError("Arquivo inválido")
    check_upload(len(data), content_type)

    key = storage_key(owner_id, event.id, name)
    mime_type = content_type or DEFAULT_MIME_TYPE
    await store.put(key, data, mime_type)

    document = EventDocument(
        evento_id=event.id,
        user_id=owner_id,
        nome_arquivo=name,
        tipo_documento=sanitize_string(tipo_documento or "") or DEFAULT_DOCUMENT_TYPE,
        mime_type=mime_type,
        tamanho=len(data),
        storage_key=key,
    )
    try:
        db.add(document)
        await db.commit()
        await db.refresh(document)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to record document for event {event.id}: {e}")
        await store.delete(key)
        raise PersistenceError("Erro ao fazer upload do documento") from e

    logger.info(f"Stored document {document.id} ({document.tamanho} bytes) for event {event.id}")
    return document


async def read_document(
    db: AsyncSession, store: ObjectStore, document_id: int, event_id: int, owner_id: str
) -> Tuple[EventDocument, bytes]:
    """Metadata and bytes of a document. Raises ObjectNotFoundError if the bytes are gone."""
    document = await require_owned_document(db, document_id, event_id, owner_id)
    return document, await store.get(document.storage_key)


async def delete_document(
    db: AsyncSession, store: ObjectStore, document_id: int, event_id: int, owner_id: str
) -> None:
    """Remove a document. A failing object store does not block removing the row."""
    document = await require_owned_document(db, document_id, event_id, owner_id)

    try:
        await store.delete(document.storage_key)
    except StorageError as e:
        logger.warning(f"Could not delete object {document.storage_key}: {e}")

    try:
        await db.delete(document)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to delete document {document_id}: {e}")
        raise PersistenceError("Erro ao deletar documento") from e
