"""Exception hierarchy shared by the vCard/QR pipeline."""
from __future__ import annotations


class VCardQRError(RuntimeError):
    """Base class for failures that abort a pipeline run."""


class ReadError(VCardQRError):
    """Raised when an input file is missing or cannot be read."""


class FormatError(VCardQRError):
    """Raised when the contact list is structurally malformed."""


class WriteError(VCardQRError):
    """Raised when an output file cannot be written."""


class EmptyInputError(VCardQRError):
    """Raised when a vCard file has no content to encode."""


class EncodeError(VCardQRError):
    """Raised when the QR library cannot encode a payload."""


class CustomFileMissingError(VCardQRError):
    """Raised when a contact marked as custom has no vCard on disk."""


__all__ = [
    "VCardQRError",
    "ReadError",
    "FormatError",
    "WriteError",
    "EmptyInputError",
    "EncodeError",
    "CustomFileMissingError",
]
