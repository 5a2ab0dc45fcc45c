class ConstraintViolationError(Exception):
    """
    Raised by repositories when the storage layer rejects a write because of
    a unique or foreign-key constraint.

    Services translate it into a Conflict error code.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
