"""Pipeline that turns a contact list into vCards, QR codes and a workbook."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from ..config import PipelineSettings
from ..errors import CustomFileMissingError
from ..ingestion.exporters import GridLayout, export_workbook
from ..ingestion.loaders import load_contacts
from ..models import Contact, ResponseStatus
from ..qr import encode_qr_file
from ..vcard import write_vcard

LOGGER = logging.getLogger(__name__)


class ContactPipeline:
    """Runs the list → vCard → QR → workbook steps for one invocation.

    Every step raises on the first failure; nothing is retried and later
    steps never run after an error.
    """

    def __init__(self, settings: Optional[PipelineSettings] = None, *, logger: Optional[logging.Logger] = None) -> None:
        self._settings = settings or PipelineSettings()
        self._logger = logger or LOGGER

    @property
    def settings(self) -> PipelineSettings:
        return self._settings

    def encode_files(self, vcf_paths: Iterable[str | Path]) -> List[Path]:
        """Render QR codes for vCard files given directly on the command line."""

        outputs: List[Path] = []
        for vcf_path in vcf_paths:
            outputs.append(encode_qr_file(vcf_path, size=self._settings.qr_size, logger=self._logger))
            self._logger.info("QR code written for %s", vcf_path)
        return outputs

    def process_list(self, list_filename: str | Path) -> List[Contact]:
        contacts = load_contacts(
            self._settings.folder,
            list_filename,
            delimiter=self._settings.delimiter,
            encoding=self._settings.encoding,
            logger=self._logger,
        )
        self._logger.info("Read %s contacts", len(contacts))

        for position, contact in enumerate(contacts, start=1):
            self._logger.debug("%s: %s", position, contact)
            self._prepare_vcard(contact)
            encode_qr_file(contact.vcf_path, size=self._settings.qr_size, logger=self._logger)
        return contacts

    def build_workbook(self, contacts: Sequence[Contact], workbook_filename: str | Path) -> Path:
        layout = GridLayout(image_size=self._settings.image_size)
        return export_workbook(
            contacts,
            self._settings.folder / workbook_filename,
            layout=layout,
            logger=self._logger,
        )

    def run(
        self,
        vcf_paths: Sequence[str | Path] = (),
        list_filename: Optional[str | Path] = None,
        workbook_filename: Optional[str | Path] = None,
    ) -> List[Contact]:
        """Execute every requested step in order and return the processed contacts."""

        if vcf_paths:
            self.encode_files(vcf_paths)

        contacts: List[Contact] = []
        if list_filename:
            contacts = self.process_list(list_filename)

        if workbook_filename:
            if list_filename:
                self.build_workbook(contacts, workbook_filename)
            else:
                self._logger.warning("Ignoring workbook %s because no contact list was given", workbook_filename)
        return contacts

    def _prepare_vcard(self, contact: Contact) -> None:
        status = contact.response_status
        if status is ResponseStatus.CUSTOM:
            if not contact.vcf_path.is_file():
                raise CustomFileMissingError(
                    f"Custom vCard '{contact.vcf_path}' for {contact.full_name} does not exist"
                )
            self._logger.debug("Using custom vCard %s", contact.vcf_path)
        elif status in (ResponseStatus.ACCEPTED, ResponseStatus.DECLINED):
            write_vcard(contact, note_template=self._settings.note_template, logger=self._logger)
        elif status is ResponseStatus.CANCELLED:
            raise ValueError(f"Cancelled contact {contact.full_name} reached the pipeline")
        else:  # pragma: no cover - exhaustive over ResponseStatus
            raise ValueError(f"Unhandled response status: {status!r}")
