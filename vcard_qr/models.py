"""Data models shared by the parser, formatters and spreadsheet builder."""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path


VCF_EXTENSION = ".vcf"
PNG_EXTENSION = ".png"


class ResponseStatus(IntEnum):
    """Invitation response recorded in the last column of the contact list."""

    CANCELLED = -1
    DECLINED = 0
    ACCEPTED = 1
    CUSTOM = 2

    @classmethod
    def from_code(cls, code: int) -> "ResponseStatus":
        """Map the integer stored in the list to a status.

        Any negative code means the invitation was cancelled. Unknown
        non-negative codes raise :class:`ValueError`.
        """

        if code < 0:
            return cls.CANCELLED
        return cls(code)


@dataclass(slots=True)
class Contact:
    """One row of the contact list."""

    sequence: int
    class_label: str
    full_name: str
    vcf_path: Path
    cell_phone: str = ""
    email: str = ""
    response_status: ResponseStatus = ResponseStatus.DECLINED

    @property
    def png_path(self) -> Path:
        return self.vcf_path.with_suffix(PNG_EXTENSION)

    @property
    def given_name(self) -> str:
        return self.full_name[:1]

    @property
    def family_remainder(self) -> str:
        return self.full_name[1:]

    @property
    def caption(self) -> str:
        """Label printed above the QR image in the spreadsheet grid."""

        return f"{self.class_label} {self.full_name}"

    @property
    def shares_details(self) -> bool:
        """Whether phone and e-mail belong in the generated vCard."""

        status = self.response_status
        if status is ResponseStatus.ACCEPTED:
            return True
        if status in (ResponseStatus.DECLINED, ResponseStatus.CUSTOM, ResponseStatus.CANCELLED):
            return False
        raise ValueError(f"Unhandled response status: {status!r}")


__all__ = ["Contact", "ResponseStatus", "VCF_EXTENSION", "PNG_EXTENSION"]
