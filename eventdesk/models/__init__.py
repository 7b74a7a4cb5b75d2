"""
Consolidated models package.

IMPORTANT: Explicit imports only - no wildcards to prevent circular imports.
Use string-based forward references in relationships: relationship("Event", ...)
"""

# Status vocabularies
from eventdesk.models.enums import EventStatus, PaymentStatus, DeadlineDirection

# Events, parties and payment schedules
from eventdesk.models.event import Client, Supplier, Event, Receivable, Payable

# Checklists
from eventdesk.models.checklist import ChecklistTemplate, TemplateTask, EventTask

# Documents
from eventdesk.models.document import EventDocument


__all__ = [
    # Enums
    "EventStatus",
    "PaymentStatus",
    "DeadlineDirection",
    # Events
    "Client",
    "Supplier",
    "Event",
    "Receivable",
    "Payable",
    # Checklists
    "ChecklistTemplate",
    "TemplateTask",
    "EventTask",
    # Documents
    "EventDocument",
]
