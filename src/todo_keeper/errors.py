"""Error types for Todo Keeper."""


class TodoKeeperError(Exception):
    """Base class for all Todo Keeper errors."""


class ValidationError(TodoKeeperError):
    """A task failed validation before it could be saved.

    The messages are meant to be shown to the user as they are.
    """

    def __init__(self, messages: list[str]) -> None:
        self.messages = list(messages)
        super().__init__("; ".join(self.messages))


class StorageError(TodoKeeperError):
    """A storage operation failed.

    Never raised past the database layer; it travels inside an ``Err`` result.
    """

    def __init__(self, operation: str, cause: BaseException | None = None) -> None:
        self.operation = operation
        self.cause = cause
        message = f"{operation} failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
