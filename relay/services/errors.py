"""Error taxonomy for reducers and bootstrap."""


class ReducerError(Exception):
    """
    A reducer refused the call. Surfaced to the caller as a reason string;
    the transaction is rolled back and nothing is committed.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UnknownCaller(ReducerError):
    """The caller has no User row."""


class UnauthorizedCaller(ReducerError):
    """The caller has a User row but is not authorized."""


class EmptyInput(ReducerError):
    """A proposed name or message text is empty."""


class BootstrapError(Exception):
    """Raised when the module cannot be initialized (deployment error)."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)
