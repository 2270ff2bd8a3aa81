"""Engine-level exceptions. The API layer maps these to HTTP errors."""


class CatalogEngineError(Exception):
    """Base class for engine errors."""


class InvalidActionError(CatalogEngineError):
    """Raised when a batch job is asked for an action it doesn't support."""

    def __init__(self, action: str | None):
        super().__init__('Invalid action. Use "preview" or "migrate".')
        self.action = action


class NotFoundError(CatalogEngineError):
    """Raised when a referenced row doesn't exist."""

    def __init__(self, entity: str, entity_id: object):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id
