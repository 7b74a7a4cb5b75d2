"""
Pre-write existence and ownership checks.

Every helper returns the owned entity or raises NotFoundError. A row owned
by somebody else is reported exactly like a missing row so that existence
is never revealed across owners.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.errors import NotFoundError
from eventdesk.models import ChecklistTemplate, Client, Event, EventDocument, EventTask, Supplier


async def _require_owned(db: AsyncSession, model, entity: str, entity_id: int, owner_id: str):
    result = await db.execute(
        select(model).where(model.id == entity_id, model.user_id == owner_id)
    )
    instance = result.scalar_one_or_none()
    if instance is None:
        raise NotFoundError(entity, entity_id)
    return instance


async def require_owned_event(db: AsyncSession, event_id: int, owner_id: str) -> Event:
    return await _require_owned(db, Event, "Evento", event_id, owner_id)


async def require_owned_template(db: AsyncSession, template_id: int, owner_id: str) -> ChecklistTemplate:
    return await _require_owned(db, ChecklistTemplate, "Template", template_id, owner_id)


async def require_owned_client(db: AsyncSession, client_id: int, owner_id: str) -> Client:
    return await _require_owned(db, Client, "Contratante", client_id, owner_id)


async def require_owned_supplier(db: AsyncSession, supplier_id: int, owner_id: str) -> Supplier:
    return await _require_owned(db, Supplier, "Fornecedor", supplier_id, owner_id)


async def require_owned_event_task(
    db: AsyncSession, task_id: int, event_id: int, owner_id: str
) -> EventTask:
    """Task must belong to both the given event and the owner."""
    result = await db.execute(
        select(EventTask).where(
            EventTask.id == task_id,
            EventTask.evento_id == event_id,
            EventTask.user_id == owner_id,
        )
    )
    task = result.scalar_one_or_none()
    if task is None:
        raise NotFoundError("Tarefa", task_id, detail="Tarefa não encontrada")
    return task


async def require_owned_document(
    db: AsyncSession, document_id: int, event_id: int, owner_id: str
) -> EventDocument:
    result = await db.execute(
        select(EventDocument).where(
            EventDocument.id == document_id,
            EventDocument.evento_id == event_id,
            EventDocument.user_id == owner_id,
        )
    )
    document = result.scalar_one_or_none()
    if document is None:
        raise NotFoundError("Documento", document_id)
    return document
