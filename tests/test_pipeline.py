import codecs

import pytest
from openpyxl import load_workbook

from vcard_qr.config import PipelineSettings
from vcard_qr.errors import CustomFileMissingError, EmptyInputError
from vcard_qr.ingestion.exporters import GRID_SHEET, LISTING_SHEET
from vcard_qr.orchestrator import ContactPipeline


def test_list_run_generates_vcards_qr_codes_and_workbook(tmp_path, sample_rows, write_list):
    write_list(tmp_path, sample_rows)
    pipeline = ContactPipeline(PipelineSettings(folder=tmp_path))

    contacts = pipeline.run(list_filename="contacts.csv", workbook_filename="contacts.xlsx")

    assert [contact.full_name for contact in contacts] == ["王小明", "李大華", "陳美麗"]
    for base in ("wang", "lee", "chen"):
        assert (tmp_path / f"{base}.vcf").is_file()
        assert (tmp_path / f"{base}.png").stat().st_size > 0
    assert not (tmp_path / "lin.vcf").exists()

    declined = (tmp_path / "lee.vcf").read_text(encoding="utf-8")
    assert "TEL" not in declined and "EMAIL" not in declined
    accepted = (tmp_path / "wang.vcf").read_text(encoding="utf-8")
    assert "TEL;TYPE=CELL:+886 912-345-678" in accepted

    workbook = load_workbook(tmp_path / "contacts.xlsx")
    assert workbook[LISTING_SHEET].max_row == 4
    grid = workbook[GRID_SHEET]
    assert [grid["A1"].value, grid["B1"].value, grid["A3"].value, grid["B3"].value] == [
        "301 王小明",
        "302 李大華",
        "303 陳美麗",
        None,
    ]


def test_custom_vcard_is_used_as_is(tmp_path, write_list):
    custom = "BEGIN:VCARD\nVERSION:3.0\nFN:Custom\nEND:VCARD\n"
    (tmp_path / "chang.vcf").write_text(custom, encoding="utf-8")
    write_list(tmp_path, [("1", "305", "張三", "chang", "0912345678", "c@example.com", "2")])

    ContactPipeline(PipelineSettings(folder=tmp_path)).run(list_filename="contacts.csv")

    assert (tmp_path / "chang.vcf").read_text(encoding="utf-8") == custom
    assert (tmp_path / "chang.png").is_file()


def test_missing_custom_vcard_aborts_run(tmp_path, write_list):
    write_list(
        tmp_path,
        [
            ("1", "305", "張三", "chang", "", "", "2"),
            ("2", "301", "王小明", "wang", "", "", "1"),
        ],
    )

    with pytest.raises(CustomFileMissingError):
        ContactPipeline(PipelineSettings(folder=tmp_path)).run(list_filename="contacts.csv")

    assert not (tmp_path / "wang.vcf").exists()


def test_direct_files_are_encoded_in_order_and_stop_on_error(tmp_path):
    good = tmp_path / "good.vcf"
    good.write_text("BEGIN:VCARD\nVERSION:3.0\nFN:A\nEND:VCARD\n", encoding="utf-8")
    empty = tmp_path / "empty.vcf"
    empty.write_text("", encoding="utf-8")
    later = tmp_path / "later.vcf"
    later.write_text("BEGIN:VCARD\nVERSION:3.0\nFN:B\nEND:VCARD\n", encoding="utf-8")

    with pytest.raises(EmptyInputError):
        ContactPipeline(PipelineSettings(folder=tmp_path)).run(vcf_paths=[good, empty, later])

    assert (tmp_path / "good.png").is_file()
    assert not (tmp_path / "later.png").exists()


def test_workbook_without_list_is_skipped(tmp_path, caplog):
    contacts = ContactPipeline(PipelineSettings(folder=tmp_path)).run(workbook_filename="contacts.xlsx")

    assert contacts == []
    assert not (tmp_path / "contacts.xlsx").exists()
    assert "no contact list" in caplog.text


def test_utf16_custom_vcard_runs_through_the_list(tmp_path, write_list):
    custom = "BEGIN:VCARD\nVERSION:3.0\nFN:張三\nEND:VCARD\n"
    (tmp_path / "chang.vcf").write_bytes(codecs.BOM_UTF16_LE + custom.encode("utf-16-le"))
    write_list(tmp_path, [("1", "305", "張三", "chang", "", "", "2")])

    ContactPipeline(PipelineSettings(folder=tmp_path)).run(list_filename="contacts.csv")

    assert (tmp_path / "chang.png").stat().st_size > 0
