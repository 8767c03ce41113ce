from pathlib import Path

import pytest

from vcard_qr.errors import WriteError
from vcard_qr.models import Contact, ResponseStatus
from vcard_qr.vcard import format_cell_phone, render_vcard, write_vcard


def _contact(tmp_path: Path, status: ResponseStatus = ResponseStatus.ACCEPTED, **overrides) -> Contact:
    values = dict(
        sequence=1,
        class_label="301",
        full_name="王小明",
        vcf_path=tmp_path / "wang.vcf",
        cell_phone="+886 912-345-678",
        email="wang@example.com",
        response_status=status,
    )
    values.update(overrides)
    return Contact(**values)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("0912345678", "+886 912-345-678"),
        ("0223456789", "0223456789"),
        ("091234567", "091234567"),
        ("0912-34567", "0912-34567"),
        ("+886 912-345-678", "+886 912-345-678"),
        ("", ""),
    ],
)
def test_format_cell_phone(raw, expected):
    assert format_cell_phone(raw) == expected


def test_accepted_contact_includes_details(tmp_path):
    text = render_vcard(_contact(tmp_path))

    assert text == (
        "BEGIN:VCARD\n"
        "VERSION:3.0\n"
        "FN:王小明\n"
        "N:王;小明;;;\n"
        "EMAIL;TYPE=INTERNET;TYPE=WORK:wang@example.com\n"
        "TEL;TYPE=CELL:+886 912-345-678\n"
        "NOTE:建中42屆301班同學\n"
        "END:VCARD\n"
    )


@pytest.mark.parametrize("status", [ResponseStatus.DECLINED, ResponseStatus.CUSTOM])
def test_other_statuses_omit_details(tmp_path, status):
    text = render_vcard(_contact(tmp_path, status))

    assert "EMAIL" not in text
    assert "TEL" not in text
    assert "FN:王小明\n" in text


def test_accepted_contact_skips_empty_fields(tmp_path):
    text = render_vcard(_contact(tmp_path, email="", cell_phone="+886 912-345-678"))

    assert "EMAIL" not in text
    assert "TEL;TYPE=CELL:+886 912-345-678\n" in text


def test_note_template_is_configurable(tmp_path):
    text = render_vcard(_contact(tmp_path), note_template="Class of {class_label}")

    assert "NOTE:Class of 301\n" in text


def test_write_vcard_overwrites_existing_file(tmp_path):
    contact = _contact(tmp_path)
    contact.vcf_path.write_text("stale", encoding="utf-8")

    written = write_vcard(contact)

    assert written == contact.vcf_path
    assert written.read_text(encoding="utf-8") == render_vcard(contact)


def test_write_vcard_reports_io_failure(tmp_path):
    contact = _contact(tmp_path, vcf_path=tmp_path / "missing" / "wang.vcf")

    with pytest.raises(WriteError):
        write_vcard(contact)
