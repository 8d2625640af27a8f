import pytest

from gridbook import (
    AddressParseError,
    xl_cell_to_rowcol,
    xl_col_to_name,
    xl_name_to_col,
    xl_range,
    xl_range_to_rowcols,
    xl_rowcol_to_cell,
)
from gridbook.utils import cell_ref_args, column_ref, row_ref


def test_cell_refs():
    assert xl_cell_to_rowcol("A1") == (1, 1)
    assert xl_cell_to_rowcol("b2") == (2, 2)
    assert xl_cell_to_rowcol("$AB$10") == (10, 28)
    assert xl_cell_to_rowcol("XFD1048576") == (1048576, 16384)
    assert xl_rowcol_to_cell(2, 2) == "B2"
    assert xl_rowcol_to_cell(10, 28, row_abs=True, col_abs=True) == "$AB$10"


def test_col_names():
    assert xl_col_to_name(1) == "A"
    assert xl_col_to_name(26) == "Z"
    assert xl_col_to_name(27) == "AA"
    assert xl_col_to_name(702) == "ZZ"
    assert xl_col_to_name(703) == "AAA"
    assert xl_col_to_name(16384) == "XFD"
    assert xl_name_to_col("zz") == 702
    assert column_ref("C") == 3
    assert column_ref(3) == 3


def test_refs_are_inverses():
    for col in [1, 26, 27, 52, 702, 703, 16384]:
        for row in [1, 100, 1048576]:
            assert xl_cell_to_rowcol(xl_rowcol_to_cell(row, col)) == (row, col)


def test_ranges():
    assert xl_range(1, 1, 3, 3) == "A1:C3"
    assert xl_range(2, 2, 2, 2) == "B2"
    assert xl_range_to_rowcols("A1:C3") == (1, 1, 3, 3)
    assert xl_range_to_rowcols("C3:A1") == (1, 1, 3, 3)
    assert xl_range_to_rowcols("B2") == (2, 2, 2, 2)


@pytest.mark.parametrize(
    "ref", ["", "A", "1", "A0", "XFE1", "A1048577", "AAAA1", "A1B", "A-1", None, 12]
)
def test_invalid_cell_refs(ref):
    with pytest.raises(AddressParseError):
        xl_cell_to_rowcol(ref)


def test_invalid_refs():
    with pytest.raises(AddressParseError):
        xl_range_to_rowcols("A1:B2:C3")
    with pytest.raises(AddressParseError):
        xl_rowcol_to_cell(0, 1)
    with pytest.raises(AddressParseError):
        xl_col_to_name(16385)
    with pytest.raises(AddressParseError):
        row_ref(1048577)
    with pytest.raises(ValueError):
        xl_name_to_col("A1")


def test_cell_ref_args():
    assert cell_ref_args("B2", 5) == (2, 2, (5,))
    assert cell_ref_args(2, 3, "x") == (2, 3, ("x",))
    with pytest.raises(AddressParseError):
        cell_ref_args(0, 1)
    with pytest.raises(AddressParseError):
        cell_ref_args(1)
    with pytest.raises(AddressParseError):
        cell_ref_args()
