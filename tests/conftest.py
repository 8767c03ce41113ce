from __future__ import annotations

import codecs
from pathlib import Path
from typing import Callable, Sequence

import pytest

HEADER = ("序號", "班級", "姓名", "檔名", "手機", "Email", "回覆")

ListWriter = Callable[..., Path]


@pytest.fixture()
def sample_rows() -> list[tuple[str, ...]]:
    return [
        HEADER,
        ("1", "301", "王小明", "wang", "0912345678", "wang@example.com", "1"),
        ("2", "302", "李大華", "lee", "0223456789", "lee@example.com", "0"),
        ("0", "", "", "", "", "", ""),
        ("3", "303", "陳美麗", "chen", "0987654321", "", "1"),
        ("4", "304", "林志明", "lin", "0911222333", "lin@example.com", "-1"),
    ]


@pytest.fixture()
def write_list() -> ListWriter:
    def _write(
        folder: Path,
        rows: Sequence[Sequence[str]],
        name: str = "contacts.csv",
        *,
        delimiter: str = ",",
        encoding: str = "utf-8",
        bom: bytes = b"",
    ) -> Path:
        text = "".join(delimiter.join(row) + "\n" for row in rows)
        path = folder / name
        path.write_bytes(bom + text.encode(encoding))
        return path

    return _write


@pytest.fixture()
def utf16_bom() -> bytes:
    return codecs.BOM_UTF16_LE
