"""Custom exceptions for Doxadoc."""


class DoxadocError(Exception):
    """Base exception for all Doxadoc errors."""

    pass


class ParseError(DoxadocError):
    """Raised when an input document cannot be read or parsed."""

    pass


class UnknownKindError(ParseError):
    """Raised when a compound, section or member kind is not handled."""

    pass


class ValidationError(DoxadocError):
    """Raised when validation fails."""

    pass


class MissingReferenceError(ValidationError):
    """Raised when a referenced group name does not exist."""

    pass


class CircularReferenceError(ValidationError):
    """Raised when a group hierarchy or composite type expansion loops back on itself."""

    pass
