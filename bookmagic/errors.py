"""
Exception types raised past a stage boundary.

MIT License - Copyright (c) 2025 BookMagic
"""


class BookMagicError(Exception):
    """Base class for failures reported to the caller."""


class InvalidProjectIdError(BookMagicError, ValueError):
    """Project identifier cannot be used to name files."""


class InputMissingError(BookMagicError):
    """No uploaded source document exists for the project."""


class TemplateNotSelectedError(BookMagicError):
    """A preview was requested without a template."""


class UploadValidationError(BookMagicError, ValueError):
    """Uploaded file was rejected before being written."""


class ConversionError(BookMagicError):
    """An artifact could not be rendered."""


class PackagingError(BookMagicError):
    """The export bundle could not be written."""
