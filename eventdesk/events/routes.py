"""Event, event task and event document API routes."""
import logging
from typing import List
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.auth.dependencies import get_current_owner_id
from eventdesk.database import get_db
from eventdesk.errors import (
    DocumentRejectedError,
    NotFoundError,
    ObjectNotFoundError,
    PersistenceError,
    StorageError,
)
from eventdesk.events.documents import (
    DEFAULT_DOCUMENT_TYPE,
    MAX_DOCUMENT_BYTES,
    delete_document,
    list_documents,
    read_document,
    store_document,
)
from eventdesk.events.schemas import (
    EventCreate,
    EventDocumentResponse,
    EventDetailResponse,
    EventResponse,
    EventTaskCreate,
    EventTaskResponse,
    EventTaskUpdate,
)
from eventdesk.models import Client, Event, EventTask
from eventdesk.schemas import CreatedResponse, SuccessResponse
from eventdesk.services.ownership import (
    require_owned_client,
    require_owned_event,
    require_owned_event_task,
)
from eventdesk.storage import ObjectStore, get_object_store

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[EventResponse])
async def list_events(
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """List the owner's events, most recent event date first."""
    result = await db.execute(
        select(Event, Client.nome)
        .outerjoin(Client, Event.contratante_id == Client.id)
        .where(Event.user_id == owner_id)
        .order_by(Event.data_evento.desc(), Event.id.desc())
    )
    return [
        EventResponse.model_validate(event).model_copy(update={"contratante_nome": client_name})
        for event, client_name in result.all()
    ]


@router.get("/{evento_id}", response_model=EventDetailResponse)
async def get_event(
    evento_id: int,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """Get one event with its client's contact details."""
    result = await db.execute(
        select(Event, Client.nome, Client.email, Client.telefone)
        .outerjoin(Client, Event.contratante_id == Client.id)
        .where(Event.id == evento_id, Event.user_id == owner_id)
    )
    row = result.one_or_none()
    if row is None:
        raise HTTPException(status_code=404, detail="Evento não encontrado")

    event, client_name, client_email, client_phone = row
    return EventDetailResponse.model_validate(event).model_copy(update={
        "contratante_nome": client_name,
        "contratante_email": client_email,
        "contratante_telefone": client_phone,
    })


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    data: EventCreate,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """Create an event, optionally linked to one of the owner's clients."""
    if data.contratante_id is not None:
        try:
            await require_owned_client(db, data.contratante_id, owner_id)
        except NotFoundError as e:
            raise HTTPException(status_code=404, detail=e.detail)

    event = Event(user_id=owner_id, **data.model_dump())
    try:
        db.add(event)
        await db.commit()
        await db.refresh(event)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Error creating event: {e}")
        raise HTTPException(status_code=500, detail="Erro ao criar evento")

    return CreatedResponse(id=event.id)


@router.get("/{evento_id}/tarefas", response_model=List[EventTaskResponse])
async def list_event_tasks(
    evento_id: int,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """List an event's tasks ordered by due date."""
    try:
        event = await require_owned_event(db, evento_id, owner_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.detail)

    result = await db.execute(
        select(EventTask)
        .where(EventTask.evento_id == event.id, EventTask.user_id == owner_id)
        .order_by(EventTask.data_vencimento.asc(), EventTask.id.asc())
    )
    return result.scalars().all()


@router.post(
    "/{evento_id}/tarefas",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_event_task(
    evento_id: int,
    data: EventTaskCreate,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """Add a manual task to an event."""
    try:
        event = await require_owned_event(db, evento_id, owner_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.detail)

    task = EventTask(
        evento_id=event.id,
        user_id=owner_id,
        descricao_tarefa=data.descricao_tarefa,
        data_vencimento=data.data_vencimento,
        is_concluida=data.is_concluida,
    )
    try:
        db.add(task)
        await db.commit()
        await db.refresh(task)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Error creating event task: {e}")
        raise HTTPException(status_code=500, detail="Erro ao criar tarefa")

    return CreatedResponse(id=task.id)


@router.patch("/{evento_id}/tarefas/{tarefa_id}", response_model=SuccessResponse)
async def update_event_task(
    evento_id: int,
    tarefa_id: int,
    data: EventTaskUpdate,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """Update description, due date or completion of a task. Omitted fields are kept."""
    try:
        task = await require_owned_event_task(db, tarefa_id, evento_id, owner_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.detail)

    for field, value in data.model_dump(exclude_none=True).items():
        setattr(task, field, value)

    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Error updating task {tarefa_id}: {e}")
        raise HTTPException(status_code=500, detail="Erro ao atualizar tarefa")

    return SuccessResponse()


def _content_disposition(filename: str) -> str:
    fallback = filename.encode("ascii", "ignore").decode().replace('"', "") or "documento"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


@router.get("/{evento_id}/documentos", response_model=List[EventDocumentResponse])
async def list_event_documents(
    evento_id: int,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """List an event's documents, newest first."""
    return await list_documents(db, evento_id, owner_id)


@router.post(
    "/{evento_id}/documentos",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_event_document(
    evento_id: int,
    file: UploadFile = File(...),
    tipo_documento: str = Form(DEFAULT_DOCUMENT_TYPE),
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
):
    """Attach a PDF, Word or image file (up to 5MB) to an event."""
    # One byte past the limit is enough to detect an oversized file
    data = await file.read(MAX_DOCUMENT_BYTES + 1)
    try:
        document = await store_document(
            db, store, evento_id, owner_id,
            filename=file.filename,
            content_type=file.content_type,
            data=data,
            tipo_documento=tipo_documento,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.detail)
    except DocumentRejectedError as e:
        raise HTTPException(status_code=400, detail=e.detail)
    except (StorageError, PersistenceError):
        raise HTTPException(status_code=500, detail="Erro ao fazer upload do documento")

    return CreatedResponse(id=document.id)


@router.get("/{evento_id}/documentos/{documento_id}/download")
async def download_event_document(
    evento_id: int,
    documento_id: int,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
):
    """Stream a document back as an attachment."""
    try:
        document, content = await read_document(db, store, documento_id, evento_id, owner_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.detail)
    except ObjectNotFoundError:
        raise HTTPException(status_code=404, detail="Documento não encontrado no armazenamento")
    except StorageError:
        raise HTTPException(status_code=500, detail="Erro ao baixar documento")

    return Response(
        content=content,
        media_type=document.mime_type,
        headers={"Content-Disposition": _content_disposition(document.nome_arquivo)},
    )


@router.delete("/{evento_id}/documentos/{documento_id}", response_model=SuccessResponse)
async def delete_event_document(
    evento_id: int,
    documento_id: int,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
):
    """Delete a document from the store and the database."""
    try:
        await delete_document(db, store, documento_id, evento_id, owner_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.detail)
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Erro ao deletar documento")

    return SuccessResponse()
