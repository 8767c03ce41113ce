"""Rendering of contacts into vCard 3.0 text files."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional

from .config import DEFAULT_NOTE_TEMPLATE, TRACE
from .errors import WriteError
from .models import Contact

LOGGER = logging.getLogger(__name__)

_MOBILE_PREFIX = "09"
_MOBILE_LENGTH = 10
_COUNTRY_CODE = "+886"


def format_cell_phone(raw: str) -> str:
    """Rewrite a domestic mobile number such as ``0912345678`` as ``+886 912-345-678``.

    Anything that is not exactly ten digits starting with ``09`` is
    returned unchanged.
    """

    if len(raw) != _MOBILE_LENGTH or not raw.isdigit() or not raw.startswith(_MOBILE_PREFIX):
        return raw
    return f"{_COUNTRY_CODE} {raw[1:4]}-{raw[4:7]}-{raw[7:]}"


def render_vcard(contact: Contact, *, note_template: str = DEFAULT_NOTE_TEMPLATE) -> str:
    lines: List[str] = [
        "BEGIN:VCARD",
        "VERSION:3.0",
        f"FN:{contact.full_name}",
        f"N:{contact.given_name};{contact.family_remainder};;;",
    ]
    if contact.shares_details:
        if contact.email:
            lines.append(f"EMAIL;TYPE=INTERNET;TYPE=WORK:{contact.email}")
        if contact.cell_phone:
            lines.append(f"TEL;TYPE=CELL:{contact.cell_phone}")
    lines.append(f"NOTE:{note_template.format(class_label=contact.class_label)}")
    lines.append("END:VCARD")
    return "\n".join(lines) + "\n"


def write_vcard(
    contact: Contact,
    *,
    note_template: str = DEFAULT_NOTE_TEMPLATE,
    logger: Optional[logging.Logger] = None,
) -> Path:
    """Write the contact's vCard to :attr:`Contact.vcf_path`, replacing any existing file."""

    logger = logger or LOGGER
    payload = render_vcard(contact, note_template=note_template).encode("utf-8")
    try:
        fd = os.open(contact.vcf_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o666)
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
    except OSError as exc:
        raise WriteError(f"Unable to write vCard '{contact.vcf_path}': {exc}") from exc

    logger.log(TRACE, "vCard generated for %s at %s", contact.full_name, contact.vcf_path)
    return contact.vcf_path


__all__ = ["format_cell_phone", "render_vcard", "write_vcard"]
