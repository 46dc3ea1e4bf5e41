"""Exception types."""


class ChainrunError(RuntimeError):
    """Base class for errors."""


class DomainError(ChainrunError, ValueError):
    """Error raised when a checked value lies outside its valid domain.

    Attributes:
        context: Caller-supplied label, usually the function being evaluated.
        name: Label of the offending argument (with element index if any).
        value: The offending value as a float.
    """

    def __init__(self, context, name, value, requirement):
        self.context = context
        self.name = name
        self.value = value
        self.requirement = requirement
        super().__init__(f"{context}: {name} is {value}, but must be {requirement}")


class ChainCancelled(ChainrunError):
    """Error raised by a callback to stop a running chain."""


class CheckpointError(ChainrunError):
    """Error raised when a checkpoint artifact is missing or incompatible."""
