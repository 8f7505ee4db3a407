class BuilderError(Exception):
    """Base class for exceptions in this module."""

    ...


class BuilderNotStartedError(BuilderError):
    """Raised when a combinator is applied to a builder that holds no specification yet."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Cannot apply {self.operation}() before the specification is started, call where() first")
