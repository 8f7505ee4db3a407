class SpecificationError(Exception):
    """Base class for exceptions in this module."""

    ...


class InvalidArgumentError(SpecificationError, ValueError):
    """Raised when a combinator is built from arguments it cannot accept."""

    ...


class EmptyOperandsError(InvalidArgumentError):
    """Raised when an n-ary combinator is built without operands."""

    def __init__(self, combinator: str):
        self.combinator = combinator
        super().__init__(f"{self.combinator} requires at least one specification")


class ThresholdOutOfRangeError(InvalidArgumentError):
    """
    Raised when the threshold of a counting combinator is outside ``[0, size]``.
    """

    def __init__(self, combinator: str, count: int, size: int):
        """
        Args:
            combinator: name of the counting combinator.
            count: requested threshold.
            size: number of operands.
        """
        self.combinator = combinator
        self.count = count
        self.size = size

        super().__init__(f"{self.combinator} threshold must be between 0 and {self.size}, got {self.count}")


class MissingOperandError(InvalidArgumentError):
    """Raised when an operand of a combinator is missing."""

    def __init__(self, argument: str):
        self.argument = argument
        super().__init__(f"Operand '{self.argument}' must not be None")
