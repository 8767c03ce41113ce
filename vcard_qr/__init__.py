"""Generate vCard files and QR code images from a contact list."""

__version__ = "0.1.0"

from . import models  # noqa: E402,F401
from .errors import (  # noqa: E402
    CustomFileMissingError,
    EmptyInputError,
    EncodeError,
    FormatError,
    ReadError,
    VCardQRError,
    WriteError,
)
from .models import Contact, ResponseStatus  # noqa: E402

__all__ = [
    "Contact",
    "ResponseStatus",
    "VCardQRError",
    "ReadError",
    "FormatError",
    "WriteError",
    "EmptyInputError",
    "EncodeError",
    "CustomFileMissingError",
    "ingestion",
    "orchestrator",
]
