"""Event document metadata model."""
from sqlalchemy import Column, String, DateTime, Integer, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from eventdesk.database import Base


class EventDocument(Base):
    """File attached to an event. The bytes live in the object store under storage_key."""

    __tablename__ = "documentos_evento"

    id = Column(Integer, primary_key=True, autoincrement=True)
    evento_id = Column(Integer, ForeignKey("eventos.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)

    nome_arquivo = Column(String, nullable=False)
    tipo_documento = Column(String, nullable=False, default="Outro", server_default="Outro")
    mime_type = Column(String, nullable=False)
    tamanho = Column(Integer, nullable=False)  # bytes
    storage_key = Column(String, nullable=False, unique=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    event = relationship("Event", back_populates="documents")
