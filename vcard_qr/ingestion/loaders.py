"""Utilities for loading contacts from delimiter-separated lists."""
from __future__ import annotations

import codecs
import io
import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

import pandas as pd

from ..errors import FormatError, ReadError
from ..models import VCF_EXTENSION, Contact, ResponseStatus
from ..vcard import format_cell_phone

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]

COLUMNS: Sequence[str] = (
    "sequence",
    "class_label",
    "full_name",
    "file_base_name",
    "cell_phone",
    "email",
    "response_status",
)

_TAB_SUFFIXES = {".tsv", ".tab", ".txt"}
_UTF16_ALIASES = {"utf-16", "utf16", "utf-16le", "utf-16-le", "utf_16_le"}


def load_contacts(
    folder: PathLike,
    filename: PathLike,
    *,
    delimiter: Optional[str] = None,
    encoding: str = "auto",
    logger: Optional[logging.Logger] = None,
) -> List[Contact]:
    """Load the contact list ``folder/filename``.

    Parameters
    ----------
    folder:
        Data folder holding the list; generated vCard paths point into it.
    filename:
        Name of the list file inside ``folder``.
    delimiter:
        Column separator. ``None`` infers tab for ``.tsv``/``.tab``/``.txt``
        files and comma otherwise.
    encoding:
        ``"auto"`` sniffs the byte-order mark, ``"utf-16"`` forces UTF-16LE
        with an optional BOM, any other value is used as given.

    Rows with a zero or non-numeric sequence number, a negative response
    status or an unparsable response status are skipped. Structural problems
    abort the whole parse with :class:`FormatError`.
    """

    logger = logger or LOGGER
    folder_path = Path(folder)
    list_path = folder_path / filename
    separator = delimiter or _infer_delimiter(list_path)

    text = _read_text(list_path, encoding)
    dataframe = _read_dataframe(text, separator, list_path)
    if dataframe.empty:
        logger.warning("Contact list %s is empty", list_path)
        return []
    if dataframe.shape[1] < len(COLUMNS):
        raise FormatError(
            f"Contact list '{list_path}' has {dataframe.shape[1]} columns, expected {len(COLUMNS)}"
        )

    contacts: List[Contact] = []
    for line_no, row in enumerate(dataframe.itertuples(index=False, name=None), start=1):
        contact = _row_to_contact(row, folder_path, list_path, line_no, logger)
        if contact is not None:
            contacts.append(contact)
    return contacts


def _infer_delimiter(path: Path) -> str:
    return "\t" if path.suffix.lower() in _TAB_SUFFIXES else ","


def _resolve_encoding(raw: bytes, encoding: str) -> str:
    if encoding.lower() in _UTF16_ALIASES:
        return "utf-16-le"
    if encoding.lower() != "auto":
        return encoding
    if raw.startswith(codecs.BOM_UTF16_LE):
        return "utf-16-le"
    if raw.startswith(codecs.BOM_UTF16_BE):
        return "utf-16-be"
    return "utf-8-sig"


def _read_text(path: Path, encoding: str) -> str:
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ReadError(f"Unable to read contact list '{path}': {exc}") from exc

    codec = _resolve_encoding(raw, encoding)
    try:
        text = raw.decode(codec)
    except LookupError as exc:
        raise ReadError(f"Unknown encoding '{encoding}' for '{path}'") from exc
    except UnicodeDecodeError as exc:
        raise FormatError(f"Contact list '{path}' is not valid {codec}: {exc}") from exc
    return text.lstrip("\ufeff")


def _read_dataframe(text: str, separator: str, path: Path) -> pd.DataFrame:
    try:
        return pd.read_csv(
            io.StringIO(text),
            sep=separator,
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        return pd.DataFrame()
    except pd.errors.ParserError as exc:
        raise FormatError(f"Contact list '{path}' is malformed: {exc}") from exc


def _row_to_contact(
    row: Sequence[Any],
    folder: Path,
    list_path: Path,
    line_no: int,
    logger: logging.Logger,
) -> Optional[Contact]:
    sequence_text = _clean_text(row[0])
    try:
        sequence = int(sequence_text or "")
    except ValueError:
        logger.debug("Skipping row %s of %s: non-numeric sequence %r", line_no, list_path, sequence_text)
        return None
    if sequence == 0:
        return None

    cells = [_clean_text(value) for value in row[: len(COLUMNS)]]
    if any(cell is None for cell in cells):
        present = sum(cell is not None for cell in cells)
        raise FormatError(
            f"Row {line_no} of '{list_path}' has {present} columns, expected {len(COLUMNS)}"
        )
    _, class_label, full_name, base_name, cell_phone, email, status_text = cells

    try:
        status = ResponseStatus.from_code(int(status_text))
    except ValueError:
        logger.warning("Skipping row %s of %s: invalid response status %r", line_no, list_path, status_text)
        return None
    if status is ResponseStatus.CANCELLED:
        logger.debug("Skipping row %s of %s: invitation cancelled", line_no, list_path)
        return None

    if not full_name:
        raise FormatError(f"Row {line_no} of '{list_path}' has an empty name")
    if not base_name:
        raise FormatError(f"Row {line_no} of '{list_path}' has an empty file name")

    return Contact(
        sequence=sequence,
        class_label=class_label,
        full_name=full_name,
        vcf_path=folder / f"{base_name}{VCF_EXTENSION}",
        cell_phone=format_cell_phone(cell_phone),
        email=email,
        response_status=status,
    )


def _clean_text(value: Any) -> Optional[str]:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    return str(value).strip()


__all__ = ["load_contacts", "COLUMNS"]
