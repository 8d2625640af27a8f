import pytest
import pytest_check as check

from gridbook import RGB, CellType, Fill, Font, UnsupportedWarning, Workbook

FILL = Fill("solid", RGB(200, 200, 200))


@pytest.fixture(name="sheet")
def sheet_fixture():
    ws = Workbook().add_worksheet()
    ws.write("B2", "master")
    ws.write("C2", "gone")
    ws.write("C3", "also gone")
    ws.write("D2", "outside")
    ws.merge_cells("B2:C3")
    return ws


def test_merge_cells(sheet):
    check.equal(sheet.merge_ranges, ["B2:C3"])
    check.is_none(sheet.find_cell("C2"))
    check.is_none(sheet.find_cell("C3"))
    check.equal(sheet.find_cell("D2").value, "outside")

    check.equal(sheet.cell("C3").value, "master")
    check.equal(sheet.cell("C3").type, CellType.MERGED)
    check.equal(sheet.cell("B2").type, CellType.TEXT)
    check.is_true(sheet.cell("C3").is_merged)
    check.is_true(sheet.cell("B2").is_merged)
    check.is_false(sheet.cell("D2").is_merged)
    check.is_true(sheet.cell("B2").is_merge_master)
    check.is_false(sheet.cell("C3").is_merge_master)
    check.equal(sheet.cell("C3").master.address, "B2")
    check.is_(sheet.cell("B2").master, sheet.find_cell("B2"))
    check.equal(sheet.cell("C2").merge_range, "B2:C3")
    check.is_none(sheet.cell("D2").merge_range)


def test_merged_away_writes(sheet):
    sheet.cell("C3").value = "new"
    assert sheet.cell("B2").value == "new"
    assert sheet.find_cell("C3") is None

    with pytest.warns(UnsupportedWarning) as record:
        sheet.cell("C2").font = Font(bold=True)
    assert "C2 is merged into B2" in str(record[0].message)
    assert sheet.cell("B2").font == Font(bold=True)
    assert sheet.cell("C2").font == Font(bold=True)
    assert sheet.find_cell("C2") is None


def test_broadcast_skips_merged_away_cells(sheet):
    sheet.row(2).fill = FILL
    assert sheet.cell("B2").fill == FILL
    assert sheet.cell("D2").fill == FILL
    assert sheet.find_cell("C2") is None
    assert [cell.address for cell in sheet.row(2)] == ["B2", "D2"]


def test_stale_merged_cell(sheet):
    ws = Workbook().add_worksheet()
    cell = ws.write("F6", "value")
    ws.merge_cells("E5:F6")
    assert not cell.is_materialized
    assert cell.value is None
    assert cell.master.address == "E5"


def test_invalid_merges(sheet):
    with pytest.raises(ValueError) as e:
        sheet.merge_cells("C3:D4")
    assert "overlaps merged range B2:C3" in str(e)
    with pytest.raises(ValueError):
        sheet.merge_cells("A1:E5")

    sheet.merge_cells(["E5:D4", "F1:G1"])
    assert sheet.merge_ranges == ["F1:G1", "B2:C3", "D4:E5"]

    with pytest.warns(UnsupportedWarning):
        sheet.merge_cells("H8")
    assert len(sheet.merge_ranges) == 3


def test_unmerge_cells(sheet):
    sheet.unmerge_cells("C3")
    assert sheet.merge_ranges == []
    assert sheet.cell("C3").value is None
    assert sheet.cell("C3").type == CellType.EMPTY
    assert sheet.cell("B2").value == "master"

    sheet.merge_cells("B2:C3")
    sheet.unmerge_cells("B2:C3")
    assert sheet.merge_ranges == []

    sheet.merge_cells("B2:C3")
    with pytest.warns(UnsupportedWarning):
        sheet.unmerge_cells("B2:C2")
    with pytest.warns(UnsupportedWarning):
        sheet.unmerge_cells("H8")
    assert sheet.merge_ranges == ["B2:C3"]


def test_merge_list_is_all_or_nothing():
    ws = Workbook().add_worksheet()
    ws.write("A1", "master")
    ws.write("B1", "keep")
    ws.write("D1", "keep too")

    with pytest.raises(ValueError, match="A1:A2 overlaps merged range A1:B1"):
        ws.merge_cells(["A1:B1", "A1:A2"])
    with pytest.raises(ValueError, match="overlaps merged range"):
        ws.merge_cells(["C1:D1", "F1:G2", "G2:H3"])

    check.equal(ws.merge_ranges, [])
    check.equal(ws.cell("B1").value, "keep")
    check.equal(ws.cell("D1").value, "keep too")

    ws.merge_cells(["A1:B1", "A2:B2"])
    check.equal(ws.merge_ranges, ["A1:B1", "A2:B2"])
    check.is_none(ws.find_cell("B1"))
