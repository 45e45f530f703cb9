"""Domain exceptions."""


class Peer360Error(Exception):
    """Base class for domain errors."""


class DomainValidationError(Peer360Error, ValueError):
    """An entity invariant or a use-case precondition was violated."""


class InvalidTransitionError(DomainValidationError):
    """Evaluation status change not allowed from the current status."""


class NotFoundError(Peer360Error):
    """A referenced record does not exist."""


class ResponseAlreadySubmittedError(Peer360Error):
    """The evaluator already rated this member in this evaluation."""

    def __init__(self, message: str = "Response already submitted"):
        super().__init__(message)


class AccessCodeConflictError(Peer360Error):
    """A generated access code was taken by a concurrent insert."""

    def __init__(self, message: str = "Access code already in use"):
        super().__init__(message)
