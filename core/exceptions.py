"""
Failure conditions raised by the SMIS core and its service layer.

Validation failures (``ValidationError`` and its subclasses) come from the
pure grade and payment rules and are always recoverable: views turn them
into a message for the user. Transport failures (``PersistenceError``,
``GatewayError``) belong to the collaborators around the core and are
never raised from inside it.
"""


class SMISError(Exception):
    """Base class for every SMIS failure."""


class ValidationError(SMISError):
    """Raised when input to a rule is invalid."""


class InvalidAmount(ValidationError):
    """Payment or charge amount is non-positive, over a ceiling, or below a gateway minimum."""


class AlreadyEnrolled(ValidationError):
    """Student already holds a course with the same identity."""


class DuplicateSubject(ValidationError):
    """Course already carries a subject with that name."""


class InvalidGradeComponent(ValidationError):
    """Grade component key cannot be written (e.g. the derived ``final``)."""


class RecordNotFound(SMISError):
    """A course, subject or notification named by the caller does not exist."""


class PermissionDenied(SMISError):
    """Actor's role is not allowed to perform the action."""


class PersistenceError(SMISError):
    """A transition was computed but could not be saved."""


class GatewayError(SMISError):
    """The exchange-rate / payment gateway could not be reached."""
