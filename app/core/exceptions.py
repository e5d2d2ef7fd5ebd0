class EntityNotFound(Exception):
    def __init__(self, resource: str, entity_id):
        super().__init__(f"{resource} {entity_id} not found")
        self.resource = resource
        self.entity_id = entity_id


class ConflictError(Exception):
    """Raised when a row changed underneath an update and still exists."""

    def __init__(self, resource: str, entity_id):
        super().__init__(f"{resource} {entity_id} was modified by another request")
        self.resource = resource
        self.entity_id = entity_id
