"""Domain errors raised by the engines and translated to HTTP by the routes."""


class EventDeskError(Exception):
    """Base class for all domain errors."""


class NotFoundError(EventDeskError):
    """Referenced entity does not exist or belongs to another owner."""

    def __init__(self, entity: str, entity_id=None, detail: str = None):
        self.entity = entity
        self.entity_id = entity_id
        self.detail = detail or f"{entity} não encontrado"
        super().__init__(f"{entity} {entity_id} not found")


class EmptyTemplateError(EventDeskError):
    """Template application attempted on a template with no tasks."""

    detail = "Template não possui tarefas"

    def __init__(self, template_id: int):
        self.template_id = template_id
        super().__init__(f"Template {template_id} has no tasks")


class InvalidDateError(EventDeskError, ValueError):
    """Value could not be parsed as a calendar date."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid date: {value!r}")


class PersistenceError(EventDeskError):
    """A write to the relational store failed and was rolled back."""


class DocumentRejectedError(EventDeskError):
    """Uploaded file is missing, too large or of a type that is not accepted."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class StorageError(EventDeskError):
    """The object store could not complete an operation."""


class ObjectNotFoundError(StorageError):
    """No object is stored under the requested key."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Object {key} not found")
