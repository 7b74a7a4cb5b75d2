"""Pydantic schemas for payment status updates."""
from pydantic import BaseModel
from typing import Literal


class PaymentStatusUpdate(BaseModel):
    """New status for a receivable or payable."""
    status_pagamento: Literal["Pendente", "Pago", "Cancelado"]
