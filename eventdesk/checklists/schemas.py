"""Pydantic schemas for checklist templates."""
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Literal, Optional

from eventdesk.services.text import sanitize_string


class TemplateCreate(BaseModel):
    """Schema for creating a checklist template."""
    nome_template: str = Field(..., min_length=1)

    @field_validator("nome_template")
    @classmethod
    def clean_name(cls, v: str) -> str:
        cleaned = sanitize_string(v)
        if not cleaned:
            raise ValueError("nome_template must not be blank")
        return cleaned


class TemplateResponse(BaseModel):
    """Schema for a template in the listing."""
    id: int
    user_id: str
    nome_template: str
    created_at: Optional[datetime] = None
    total_tarefas: int = 0

    model_config = {"from_attributes": True}


class TemplateTaskCreate(BaseModel):
    """Schema for adding a task blueprint to a template."""
    descricao_tarefa: str = Field(..., min_length=1)
    prazo_relativo_dias: int = Field(..., ge=0)
    tipo_prazo: Literal["antes", "depois"] = "antes"

    @field_validator("descricao_tarefa")
    @classmethod
    def clean_description(cls, v: str) -> str:
        cleaned = sanitize_string(v)
        if not cleaned:
            raise ValueError("descricao_tarefa must not be blank")
        return cleaned


class TemplateTaskResponse(BaseModel):
    """Schema for template task response."""
    id: int
    template_id: int
    descricao_tarefa: str
    prazo_relativo_dias: int
    tipo_prazo: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ApplyTemplateRequest(BaseModel):
    """Body of the apply-template endpoint."""
    evento_id: int = Field(..., strict=True)


class ApplyTemplateResponse(BaseModel):
    success: bool = True
    tarefas_geradas: int
