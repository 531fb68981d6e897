"""Custom exceptions for jobgraph."""


class JobGraphError(Exception):
    """Base exception for all jobgraph errors."""

    pass


class DuplicateIdentifierError(JobGraphError):
    """Raised when registering a job whose ID is already present."""

    pass


class JobNotFoundError(JobGraphError, KeyError):
    """Raised when an operation references a job ID absent from the registry."""

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0]) if self.args else ""


class InvalidTransitionError(JobGraphError):
    """Raised when a job is asked to move backwards or out of a terminal state."""

    pass


class QueueEmptyError(JobGraphError):
    """Raised when neither the ready nor the delayed queue holds any work."""

    pass


class ValidationError(JobGraphError):
    """Raised when validation fails."""

    pass


class CircularDependencyError(ValidationError):
    """Raised when a job would depend on itself."""

    pass


class MissingReferenceError(ValidationError):
    """Raised when a referenced job ID does not exist."""

    pass


class ParseError(JobGraphError):
    """Raised when a submission or config file cannot be read."""

    pass
