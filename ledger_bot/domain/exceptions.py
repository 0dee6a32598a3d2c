"""Domain-specific exceptions.

Every exception carries a user-facing message; the command router renders it
verbatim as the reply.
"""


class DomainException(Exception):
    """Base exception for domain layer"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidTypeError(DomainException):
    """Transaction type word is not in the type map"""

    pass


class InvalidFormatError(DomainException):
    """Command arguments do not match the expected grammar"""

    pass


class FilterValidationError(DomainException):
    """A filter token failed validation"""

    pass


class InvalidMonthError(FilterValidationError):
    """Month token is not a month name or a number between 1 and 12"""

    pass


class InvalidYearError(FilterValidationError):
    """Year token is outside the accepted range"""

    pass


class PersistenceError(DomainException):
    """The store rejected a write or could not be read"""

    pass
