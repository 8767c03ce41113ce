"""QR code rendering of vCard files."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import qrcode
from PIL import Image
from qrcode.exceptions import DataOverflowError
from qrcode.image.pil import PilImage

from .config import DEFAULT_QR_SIZE
from .errors import EmptyInputError, EncodeError, ReadError, WriteError
from .models import PNG_EXTENSION, VCF_EXTENSION

LOGGER = logging.getLogger(__name__)


def png_path_for(vcf_path: str | Path) -> Path:
    """Return the sibling ``.png`` path for a vCard file."""

    path = Path(vcf_path)
    stem = path.stem if path.suffix else path.name
    if stem.lower().endswith(VCF_EXTENSION):
        stem = stem[: -len(VCF_EXTENSION)]
    if not stem or stem == ".":
        raise ReadError(f"Invalid vCard file name: {vcf_path}")
    return path.with_suffix(PNG_EXTENSION)


def encode_qr_file(
    vcf_path: str | Path,
    *,
    size: int = DEFAULT_QR_SIZE,
    logger: Optional[logging.Logger] = None,
) -> Path:
    """Render the contents of ``vcf_path`` as a ``size`` x ``size`` PNG QR code.

    The raw bytes are encoded as-is, whatever their text encoding. The image
    is written next to the vCard with the extension replaced by ``.png``; an
    existing image is overwritten.
    """

    logger = logger or LOGGER
    source = Path(vcf_path)
    output_path = png_path_for(source)

    try:
        content = source.read_bytes()
    except OSError as exc:
        raise ReadError(f"Unable to read vCard '{source}': {exc}") from exc
    if not content:
        raise EmptyInputError(f"Empty vCard file: {source}")

    qr = qrcode.QRCode(error_correction=qrcode.constants.ERROR_CORRECT_M, border=4, image_factory=PilImage)
    qr.add_data(content)
    try:
        qr.make(fit=True)
    except DataOverflowError as exc:
        raise EncodeError(f"vCard '{source}' is too large for a QR code") from exc

    image = qr.make_image(fill_color="black", back_color="white").get_image()
    image = image.convert("L").resize((size, size), Image.Resampling.NEAREST)
    try:
        image.save(output_path, format="PNG")
    except OSError as exc:
        raise WriteError(f"Unable to write QR image '{output_path}': {exc}") from exc

    logger.debug("QR code version %s written to %s", qr.version, output_path)
    return output_path


__all__ = ["encode_qr_file", "png_path_for"]
