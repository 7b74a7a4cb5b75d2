"""Receivable (recebível) and payable (pagável) status routes."""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.auth.dependencies import get_current_owner_id
from eventdesk.database import get_db
from eventdesk.models import Payable, Receivable
from eventdesk.payments.schemas import PaymentStatusUpdate
from eventdesk.schemas import SuccessResponse

logger = logging.getLogger(__name__)

router = APIRouter()


async def _set_status(db: AsyncSession, model, row_id: int, owner_id: str, new_status: str) -> int:
    """Conditional update scoped by owner; returns the number of rows changed."""
    try:
        result = await db.execute(
            update(model)
            .where(model.id == row_id, model.user_id == owner_id)
            .values(status_pagamento=new_status)
        )
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Error updating {model.__tablename__} {row_id}: {e}")
        raise HTTPException(status_code=500, detail="Erro ao atualizar status")
    return result.rowcount


@router.patch("/recebiveis/{recebivel_id}", response_model=SuccessResponse)
async def update_receivable_status(
    recebivel_id: int,
    data: PaymentStatusUpdate,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """Mark a receivable as Pendente, Pago or Cancelado."""
    if not await _set_status(db, Receivable, recebivel_id, owner_id, data.status_pagamento):
        raise HTTPException(status_code=404, detail="Recebível não encontrado")
    return SuccessResponse()


@router.patch("/pagaveis/{pagavel_id}", response_model=SuccessResponse)
async def update_payable_status(
    pagavel_id: int,
    data: PaymentStatusUpdate,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """Mark a payable as Pendente, Pago or Cancelado."""
    if not await _set_status(db, Payable, pagavel_id, owner_id, data.status_pagamento):
        raise HTTPException(status_code=404, detail="Pagável não encontrado")
    return SuccessResponse()
