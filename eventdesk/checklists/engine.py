"""
Checklist Template Engine.

Materialises a reusable checklist template into concrete, dated tasks for
one event. Due dates are resolved against the event date through
shift_date, and the generated tasks are written in a single transaction:
either every task is stored or none is.
"""
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.errors import EmptyTemplateError, PersistenceError
from eventdesk.models import DeadlineDirection, Event, EventTask, TemplateTask
from eventdesk.services.dates import shift_date
from eventdesk.services.ownership import require_owned_event, require_owned_template

logger = logging.getLogger(__name__)


async def load_template_tasks(db: AsyncSession, template_id: int) -> List[TemplateTask]:
    """Template tasks in creation order."""
    result = await db.execute(
        select(TemplateTask)
        .where(TemplateTask.template_id == template_id)
        .order_by(TemplateTask.id)
    )
    return list(result.scalars().all())


def _direction(tipo_prazo) -> DeadlineDirection:
    if tipo_prazo == DeadlineDirection.DEPOIS:
        return DeadlineDirection.DEPOIS
    return DeadlineDirection.ANTES


def build_event_tasks(event: Event, template_tasks: List[TemplateTask], owner_id: str) -> List[EventTask]:
    """One incomplete EventTask per template task, dated relative to the event.

    A stored direction other than "depois" is applied as "antes".
    """
    return [
        EventTask(
            evento_id=event.id,
            user_id=owner_id,
            descricao_tarefa=task.descricao_tarefa,
            data_vencimento=shift_date(
                event.data_evento,
                task.prazo_relativo_dias,
                _direction(task.tipo_prazo),
            ),
            is_concluida=False,
        )
        for task in template_tasks
    ]


async def apply_template(
    db: AsyncSession,
    template_id: int,
    event_id: int,
    owner_id: str,
) -> int:
    """
    Generate the tasks of a checklist template for an event.

    Args:
        db: Database session
        template_id: Template to apply
        event_id: Target event
        owner_id: Owner of both template and event

    Returns:
        Number of tasks generated

    Raises:
        NotFoundError: template or event missing or owned by someone else
        EmptyTemplateError: template has no tasks
        PersistenceError: the batch insert failed and was rolled back

    Applying the same template twice appends a second full set of tasks.
    """
    template = await require_owned_template(db, template_id, owner_id)
    event = await require_owned_event(db, event_id, owner_id)

    template_tasks = await load_template_tasks(db, template.id)
    if not template_tasks:
        raise EmptyTemplateError(template.id)

    event_tasks = build_event_tasks(event, template_tasks, owner_id)

    try:
        db.add_all(event_tasks)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to apply template {template.id} to event {event.id}: {e}")
        raise PersistenceError("Erro ao aplicar template") from e

    logger.info(
        f"Applied template {template.id} to event {event.id}: {len(event_tasks)} tasks generated"
    )
    return len(event_tasks)
