import plistlib
from io import BytesIO
from zipfile import ZipFile

import pytest

from gridbook import (
    ContainerReadError,
    ContainerWriteError,
    FileFormatError,
    Font,
    Style,
    UnknownStyleReference,
    UnsupportedValueType,
    Workbook,
)
from gridbook.codec import WorkbookEncoder
from gridbook.constants import PROPERTIES_PART, WORKBOOK_PART, WORKSHEET_PART
from gridbook.file import write_workbook_file
from gridbook.partfile import PartFile

SHEET_PART = WORKSHEET_PART.format(1)


def simple_workbook():
    wb = Workbook()
    ws = wb.add_worksheet("Sheet 1")
    ws.write("A1", "Hello, World!", style=Style(font=Font(bold=True)))
    ws.write("B1", 1234.5)
    return wb


def write_corrupted(path, mutate):
    file_store = WorkbookEncoder(simple_workbook()).encode()
    mutate(file_store)
    write_workbook_file(path, file_store)


def first_cell(file_store):
    return file_store[SHEET_PART].message["rows"][0]["cells"][0]


def test_document_parts(tmp_path):
    filename = tmp_path / "test.gridbook"
    simple_workbook().save(filename)
    with ZipFile(filename) as zipf:
        names = zipf.namelist()
        properties = plistlib.loads(zipf.read(PROPERTIES_PART))

    assert names == [
        PROPERTIES_PART,
        WORKBOOK_PART,
        "Index/Styles.iwa",
        "Index/SharedStrings.iwa",
        SHEET_PART,
    ]
    assert properties["fileFormatVersion"] == "1.0"
    assert properties["creator"] == "gridbook"


def test_save_to_buffer():
    buffer = BytesIO()
    simple_workbook().save(buffer)
    wb = Workbook(BytesIO(buffer.getvalue()))
    assert wb.worksheets[0].cell("A1").value == "Hello, World!"
    assert wb.worksheets[0].cell("A1").font.bold
    assert wb.worksheets[0].cell("B1").value == 1234.5


def test_read_errors(tmp_path):
    with pytest.raises(ContainerReadError, match="no such file or directory"):
        Workbook(tmp_path / "missing.gridbook")

    filename = tmp_path / "not-a-zip.gridbook"
    filename.write_bytes(b"This is not a zip file")
    with pytest.raises(FileFormatError, match="invalid workbook document"):
        Workbook(filename)

    filename = tmp_path / "empty.gridbook"
    with ZipFile(filename, "w") as zipf:
        zipf.writestr("README", "no workbook here")
    with pytest.raises(FileFormatError, match="missing files"):
        Workbook(filename)

    filename = tmp_path / "bad-properties.gridbook"
    write_corrupted(filename, lambda fs: fs.update({PROPERTIES_PART: b"not a plist"}))
    with pytest.raises(FileFormatError, match="invalid document properties"):
        Workbook(filename)


def test_missing_parts(tmp_path):
    filename = tmp_path / "missing-workbook.gridbook"
    write_corrupted(filename, lambda fs: fs.pop(WORKBOOK_PART))
    with pytest.raises(FileFormatError, match="missing Index/Workbook.iwa"):
        Workbook(filename)

    filename = tmp_path / "missing-sheet.gridbook"
    write_corrupted(filename, lambda fs: fs.pop(SHEET_PART))
    with pytest.raises(FileFormatError, match="missing Index/Worksheets/Sheet-1.iwa"):
        Workbook(filename)


def test_invalid_part(tmp_path):
    filename = tmp_path / "invalid-part.gridbook"
    write_corrupted(filename, lambda fs: fs.update({"Index/Extra.iwa": b"junk data"}))
    with pytest.raises(FileFormatError, match="Index/Extra.iwa: invalid part file"):
        Workbook(filename)


def test_unknown_style_reference(tmp_path):
    filename = tmp_path / "unknown-style.gridbook"
    write_corrupted(filename, lambda fs: first_cell(fs).update({"s": 99}))
    with pytest.raises(UnknownStyleReference, match="no cell style with id 99"):
        Workbook(filename)


def test_unknown_value_type(tmp_path):
    filename = tmp_path / "unknown-type.gridbook"
    write_corrupted(filename, lambda fs: first_cell(fs).update({"t": "x"}))
    with pytest.raises(UnsupportedValueType, match="unsupported cell type 'x'"):
        Workbook(filename)


def test_invalid_shared_string(tmp_path):
    filename = tmp_path / "bad-string.gridbook"
    write_corrupted(filename, lambda fs: first_cell(fs).update({"v": 42}))
    with pytest.raises(FileFormatError, match="no shared string with index 42"):
        Workbook(filename)


def test_invalid_record(tmp_path):
    filename = tmp_path / "bad-record.gridbook"
    write_corrupted(filename, lambda fs: first_cell(fs).pop("c"))
    with pytest.raises(FileFormatError, match="invalid workbook document"):
        Workbook(filename)


def test_unsupported_version(tmp_path):
    def mutate(file_store):
        properties = plistlib.loads(file_store[PROPERTIES_PART])
        properties["fileFormatVersion"] = "99.0"
        file_store[PROPERTIES_PART] = plistlib.dumps(properties)

    filename = tmp_path / "new-version.gridbook"
    write_corrupted(filename, mutate)
    with pytest.warns(RuntimeWarning, match="unsupported version 99.0"):
        wb = Workbook(filename)
    assert wb.worksheets[0].cell("B1").value == 1234.5


def test_write_errors(tmp_path):
    with pytest.raises(ContainerWriteError, match="failed to write"):
        simple_workbook().save(tmp_path / "missing" / "test.gridbook")


def test_atomic_save(tmp_path, monkeypatch):
    filename = tmp_path / "test.gridbook"
    simple_workbook().save(filename)
    original = filename.read_bytes()

    def fail_to_buffer(self):
        raise ValueError("encoding failed")

    wb = simple_workbook()
    wb.worksheets[0].write("C1", "not saved")
    monkeypatch.setattr(PartFile, "to_buffer", fail_to_buffer)
    with pytest.raises(ContainerWriteError, match="encoding failed"):
        wb.save(filename)
    monkeypatch.undo()

    assert filename.read_bytes() == original
    assert [x.name for x in tmp_path.iterdir()] == ["test.gridbook"]
    assert Workbook(filename).worksheets[0].find_cell("C1") is None

    buffer = BytesIO()
    monkeypatch.setattr(PartFile, "to_buffer", fail_to_buffer)
    with pytest.raises(ContainerWriteError, match="encoding failed"):
        wb.save(buffer)
    assert buffer.getvalue() == b""
