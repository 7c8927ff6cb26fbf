"""Workflow-layer exceptions shared by the request engine and user management.

Each exception carries an HTTP status and an error code so the application's
exception handler can render it without knowing which service raised it.
Authorization denials (auth.pipeline.AccessDenied) and business-rule denials
(users.guard.UserMutationDenied) are separate hierarchies.
"""


class DomainError(Exception):
    """Base class for workflow-layer failures.

    Attributes:
        message: Human readable explanation
        status_code: HTTP status the boundary renders
        code: Machine readable error code
    """

    status_code = 400
    code = "domain_error"
    layer = "workflow"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(DomainError):
    """Target resource, tenant, user or request does not exist."""

    status_code = 404
    code = "not_found"


class InvalidInputError(DomainError):
    """A length or format invariant was violated."""

    status_code = 422
    code = "invalid_input"


class ConflictError(DomainError):
    """Uniqueness conflict (for example a duplicate email)."""

    status_code = 409
    code = "conflict"


class InvalidStateError(DomainError):
    """Transition attempted from a status that does not allow it."""

    status_code = 409
    code = "invalid_state"


class AlreadyProcessedError(InvalidStateError):
    """A response was already recorded for this request."""

    code = "already_processed"


class ForbiddenError(DomainError):
    """The acting tenant is not a party allowed to perform this operation."""

    status_code = 403
    code = "forbidden"
