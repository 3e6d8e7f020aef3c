"""Exceptions raised by the DentalCare store."""
# dentalcare/errors.py


class DentalCareError(Exception):
    """Base class for all DentalCare errors."""


class StorageError(DentalCareError):
    """Raised when the local store cannot be written to disk."""


class FileReadError(DentalCareError):
    """Raised when an uploaded file cannot be read.

    Attributes:
        name (str): Display name of the file that failed.
    """

    def __init__(self, name, message=None):
        self.name = name
        super().__init__(message or f"Could not read file '{name}'.")
