"""Export of processed contacts into a printable workbook."""
from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

import pandas as pd
from openpyxl.drawing.image import Image as SheetImage
from openpyxl.drawing.spreadsheet_drawing import AnchorMarker, OneCellAnchor
from openpyxl.drawing.xdr import XDRPositiveSize2D
from openpyxl.styles import Alignment, Border, Font, Side
from openpyxl.utils import get_column_letter
from openpyxl.utils.units import pixels_to_EMU
from openpyxl.worksheet.page import PageMargins
from openpyxl.worksheet.worksheet import Worksheet

from ..config import DEFAULT_IMAGE_SIZE
from ..errors import ReadError, WriteError
from ..models import Contact

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]

LISTING_SHEET = "listing"
GRID_SHEET = "QR grid"
LISTING_COLUMNS = ["class", "name"]
GRID_COLUMNS = 2

_THIN = Side(style="thin")
_MEDIUM = Side(style="medium")
_CENTERED = Alignment(horizontal="center", vertical="center", wrap_text=True)

CAPTION_BORDER = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)
CAPTION_FONT = Font(bold=True, size=12)
IMAGE_BORDER = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_MEDIUM)


@dataclass(slots=True)
class GridLayout:
    """Geometry of the QR grid sheet.

    Sizes are in pixels except ``column_width`` (characters) and the row
    heights (points), which is what the spreadsheet format stores.
    """

    image_size: int = DEFAULT_IMAGE_SIZE
    image_offset_x: int = 17
    image_offset_y: int = 6
    column_width: float = 30.0
    caption_row_height: float = 24.0
    image_row_height: float = 144.0
    margin_left: float = 0.4
    margin_right: float = 0.4
    margin_top: float = 0.5
    margin_bottom: float = 0.5


def grid_position(index: int) -> tuple[int, int]:
    """Return the 1-based ``(row, column)`` of the caption cell for contact ``index``."""

    return 2 * (index // GRID_COLUMNS) + 1, index % GRID_COLUMNS + 1


def listing_dataframe(contacts: Iterable[Contact]) -> pd.DataFrame:
    rows = [{"class": contact.class_label, "name": contact.full_name} for contact in contacts]
    return pd.DataFrame(rows, columns=LISTING_COLUMNS)


def export_workbook(
    contacts: Iterable[Contact],
    path: PathLike,
    *,
    layout: Optional[GridLayout] = None,
    logger: Optional[logging.Logger] = None,
) -> Path:
    """Write the listing and QR grid sheets to ``path``.

    The workbook is saved to a temporary file beside ``path`` and only moved
    into place once every cell and image has been written, so a failed build
    leaves any previous file untouched.
    """

    logger = logger or LOGGER
    layout = layout or GridLayout()
    contacts = list(contacts)
    output_path = Path(path)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        handle, temp_name = tempfile.mkstemp(
            prefix=f".{output_path.stem}-", suffix=output_path.suffix, dir=output_path.parent
        )
        os.close(handle)
    except OSError as exc:
        raise WriteError(f"Unable to prepare workbook '{output_path}': {exc}") from exc

    temp_path = Path(temp_name)
    try:
        with pd.ExcelWriter(temp_path, engine="openpyxl") as writer:
            listing_dataframe(contacts).to_excel(writer, sheet_name=LISTING_SHEET, index=False)
            sheet = writer.book.create_sheet(GRID_SHEET)
            _configure_grid_sheet(sheet, len(contacts), layout)
            for index, contact in enumerate(contacts):
                _place_contact(sheet, index, contact, layout)
                logger.debug("Placed %s in the QR grid", contact.caption)
        os.chmod(temp_path, 0o666 & ~_current_umask())
        os.replace(temp_path, output_path)
    except OSError as exc:
        temp_path.unlink(missing_ok=True)
        raise WriteError(f"Unable to write workbook '{output_path}': {exc}") from exc
    except Exception:
        temp_path.unlink(missing_ok=True)
        raise

    logger.info("Workbook with %s contacts written to %s", len(contacts), output_path)
    return output_path


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def _configure_grid_sheet(sheet: Worksheet, count: int, layout: GridLayout) -> None:
    sheet.page_margins = PageMargins(
        left=layout.margin_left,
        right=layout.margin_right,
        top=layout.margin_top,
        bottom=layout.margin_bottom,
    )
    sheet.print_options.horizontalCentered = True
    sheet.print_options.verticalCentered = True
    sheet.page_setup.orientation = sheet.ORIENTATION_PORTRAIT
    sheet.page_setup.paperSize = sheet.PAPERSIZE_A4

    for column in range(1, GRID_COLUMNS + 1):
        sheet.column_dimensions[get_column_letter(column)].width = layout.column_width

    pairs = (count + GRID_COLUMNS - 1) // GRID_COLUMNS
    for pair in range(pairs):
        sheet.row_dimensions[2 * pair + 1].height = layout.caption_row_height
        sheet.row_dimensions[2 * pair + 2].height = layout.image_row_height


def _place_contact(sheet: Worksheet, index: int, contact: Contact, layout: GridLayout) -> None:
    row, column = grid_position(index)

    caption = sheet.cell(row=row, column=column, value=contact.caption)
    caption.font = CAPTION_FONT
    caption.border = CAPTION_BORDER
    caption.alignment = _CENTERED

    image_cell = sheet.cell(row=row + 1, column=column)
    image_cell.border = IMAGE_BORDER
    image_cell.alignment = _CENTERED

    if not contact.png_path.is_file():
        raise ReadError(f"QR image '{contact.png_path}' for {contact.full_name} was not found")
    image = SheetImage(str(contact.png_path))
    image.width = layout.image_size
    image.height = layout.image_size
    marker = AnchorMarker(
        col=column - 1,
        colOff=pixels_to_EMU(layout.image_offset_x),
        row=row,
        rowOff=pixels_to_EMU(layout.image_offset_y),
    )
    extent = XDRPositiveSize2D(pixels_to_EMU(layout.image_size), pixels_to_EMU(layout.image_size))
    sheet.add_image(image, OneCellAnchor(_from=marker, ext=extent))


__all__: List[str] = [
    "GridLayout",
    "export_workbook",
    "grid_position",
    "listing_dataframe",
    "LISTING_SHEET",
    "GRID_SHEET",
]
