"""Checklist template API routes."""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.auth.dependencies import get_current_owner_id
from eventdesk.checklists.engine import apply_template, load_template_tasks
from eventdesk.checklists.schemas import (
    ApplyTemplateRequest,
    ApplyTemplateResponse,
    TemplateCreate,
    TemplateResponse,
    TemplateTaskCreate,
    TemplateTaskResponse,
)
from eventdesk.database import get_db
from eventdesk.errors import EmptyTemplateError, NotFoundError, PersistenceError
from eventdesk.models import ChecklistTemplate, TemplateTask
from eventdesk.schemas import CreatedResponse
from eventdesk.services.ownership import require_owned_template

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/templates", response_model=List[TemplateResponse])
async def list_templates(
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """List the owner's templates, newest first, with their task counts."""
    task_count = (
        select(func.count(TemplateTask.id))
        .where(TemplateTask.template_id == ChecklistTemplate.id)
        .correlate(ChecklistTemplate)
        .scalar_subquery()
    )
    result = await db.execute(
        select(ChecklistTemplate, task_count.label("total_tarefas"))
        .where(ChecklistTemplate.user_id == owner_id)
        .order_by(ChecklistTemplate.created_at.desc(), ChecklistTemplate.id.desc())
    )
    return [
        TemplateResponse(
            id=template.id,
            user_id=template.user_id,
            nome_template=template.nome_template,
            created_at=template.created_at,
            total_tarefas=total or 0,
        )
        for template, total in result.all()
    ]


@router.post("/templates", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_template(
    data: TemplateCreate,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """Create an empty checklist template."""
    template = ChecklistTemplate(user_id=owner_id, nome_template=data.nome_template)
    try:
        db.add(template)
        await db.commit()
        await db.refresh(template)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Error creating template: {e}")
        raise HTTPException(status_code=500, detail="Erro ao criar template")

    return CreatedResponse(id=template.id)


@router.get("/templates/{template_id}/tarefas", response_model=List[TemplateTaskResponse])
async def list_template_tasks(
    template_id: int,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """List the task blueprints of a template in creation order."""
    try:
        template = await require_owned_template(db, template_id, owner_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.detail)

    return await load_template_tasks(db, template.id)


@router.post(
    "/templates/{template_id}/tarefas",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_template_task(
    template_id: int,
    data: TemplateTaskCreate,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """Add a task blueprint to a template."""
    try:
        template = await require_owned_template(db, template_id, owner_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.detail)

    task = TemplateTask(
        template_id=template.id,
        descricao_tarefa=data.descricao_tarefa,
        prazo_relativo_dias=data.prazo_relativo_dias,
        tipo_prazo=data.tipo_prazo,
    )
    try:
        db.add(task)
        await db.commit()
        await db.refresh(task)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Error creating template task: {e}")
        raise HTTPException(status_code=500, detail="Erro ao criar tarefa do template")

    return CreatedResponse(id=task.id)


@router.post("/templates/{template_id}/aplicar", response_model=ApplyTemplateResponse)
async def apply_template_to_event(
    template_id: int,
    data: ApplyTemplateRequest,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Apply a checklist template to an event.

    Every task of the template becomes an event task dated relative to the
    event date. The tasks are written atomically.
    """
    try:
        generated = await apply_template(db, template_id, data.evento_id, owner_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.detail)
    except EmptyTemplateError as e:
        raise HTTPException(status_code=400, detail=e.detail)
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Erro ao aplicar template")

    return ApplyTemplateResponse(success=True, tarefas_geradas=generated)
