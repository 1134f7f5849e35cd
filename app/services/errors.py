class NotFoundError(LookupError):
    """Raised by store functions when a referenced row does not exist."""

    entity = "Record"

    def __init__(self, ident) -> None:
        self.ident = ident
        super().__init__(f"{self.entity} not found: {ident}")


class ProjectNotFound(NotFoundError):
    entity = "Project"


class ThreatNotFound(NotFoundError):
    entity = "Threat statement"


class ItemNotFound(NotFoundError):
    entity = "Table item"


class ControlNotFound(NotFoundError):
    entity = "Security control"
