"""Status vocabularies shared by models, schemas and engines."""
import enum


class EventStatus(str, enum.Enum):
    PLANEJAMENTO = "Planejamento"
    CONFIRMADO = "Confirmado"
    CONCLUIDO = "Concluído"
    CANCELADO = "Cancelado"


class PaymentStatus(str, enum.Enum):
    PENDENTE = "Pendente"
    PAGO = "Pago"
    CANCELADO = "Cancelado"


class DeadlineDirection(str, enum.Enum):
    """Whether a template task falls before or after the event date."""
    ANTES = "antes"
    DEPOIS = "depois"
