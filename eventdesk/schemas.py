"""Response schemas and types shared across routers."""
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, PlainSerializer

# Amounts stay Decimal in Python and are written as JSON numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CreatedResponse(BaseModel):
    """Id of a newly created row."""
    id: int


class SuccessResponse(BaseModel):
    success: bool = True
