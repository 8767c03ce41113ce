"""Command line interface for generating vCard QR codes from a contact list."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

from . import __version__
from .config import TRACE, ConfigurationError, PipelineSettings, load_configuration
from .errors import VCardQRError
from .orchestrator import ContactPipeline

LOGGER = logging.getLogger("vcard_qr")

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY


def build_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description="Generate vCard QR codes from a list of contacts",
        usage="%(prog)s [options] [contact.vcf ...]",
    )
    parser.add_argument("vcf", nargs="*", help="vCard files to convert directly into QR images")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        default=_env_flag("DEBUG_MODE"),
        help="Show debug information (env: DEBUG_MODE)",
    )
    parser.add_argument(
        "-t",
        "--trace",
        action="store_true",
        default=_env_flag("TRACE_MODE"),
        help="Show even more debug information; --debug takes precedence (env: TRACE_MODE)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level when neither --debug nor --trace is set (e.g. INFO, WARNING)",
    )
    parser.add_argument(
        "-f",
        "--folder",
        default=None,
        help="Data folder holding the input list and the generated vcf/png files (default: testdata)",
    )
    parser.add_argument("-l", "--list", dest="list_filename", default=None, help="Contact list inside the data folder")
    parser.add_argument(
        "-x",
        "--xlsx",
        dest="workbook_filename",
        default=None,
        help="Workbook to write into the data folder after processing the list",
    )
    parser.add_argument(
        "--delimiter",
        choices=["tab", "comma"],
        default=None,
        help="Column separator of the contact list (default: inferred from the file extension)",
    )
    parser.add_argument(
        "--encoding",
        default=None,
        help="Encoding of the contact list: auto, utf-16 or any codec name (default: auto)",
    )
    parser.add_argument("--config", default=None, help="Optional JSON or YAML file with pipeline settings")
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def configure_logging(args: argparse.Namespace) -> logging.Logger:
    """Set up console logging once and return the logger handed to the pipeline."""

    logging.addLevelName(TRACE, "TRACE")
    if args.debug:
        level = logging.DEBUG
    elif args.trace:
        level = TRACE
    else:
        level = getattr(logging, str(args.log_level).upper(), logging.INFO)
    logging.basicConfig(level=level, format=_LOG_FORMAT, datefmt="%H:%M:%S", stream=sys.stderr)
    LOGGER.setLevel(level)
    return LOGGER


def build_settings(args: argparse.Namespace) -> PipelineSettings:
    settings = PipelineSettings()
    if args.config:
        settings = PipelineSettings.from_mapping(load_configuration(args.config))
    return settings.merged(folder=args.folder, delimiter=args.delimiter, encoding=args.encoding)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logger = configure_logging(args)

    try:
        settings = build_settings(args)
    except ConfigurationError as exc:
        logger.error("Loading configuration failed: %s", exc)
        return 1

    if not args.vcf and not args.list_filename:
        logger.warning("No vCard files or contact list given - nothing to do")
        return 0

    pipeline = ContactPipeline(settings, logger=logger)
    try:
        contacts = pipeline.run(args.vcf, args.list_filename, args.workbook_filename)
    except VCardQRError as exc:
        logger.error("%s failed: %s", type(exc).__name__, exc)
        return 1

    logger.info("Processed %s files and %s contacts", len(args.vcf), len(contacts))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
