import re
from typing import Tuple, Union

from gridbook.constants import MAX_COL_COUNT, MAX_ROW_COUNT
from gridbook.exceptions import AddressParseError

__all__ = [
    "xl_cell_to_rowcol",
    "xl_col_to_name",
    "xl_name_to_col",
    "xl_range",
    "xl_range_to_rowcols",
    "xl_rowcol_to_cell",
]

# Cell reference conversion from  https://github.com/jmcnamara/XlsxWriter
# Copyright (c) 2013-2021, John McNamara <jmcnamara@cpan.org>
range_parts = re.compile(r"^(\$?)([A-Za-z]{1,3})(\$?)(\d+)$")
col_parts = re.compile(r"^\$?([A-Za-z]{1,3})$")


def _check_row(row: int) -> None:
    if not isinstance(row, int) or isinstance(row, bool):
        msg = f"row reference {row!r} is not an integer"
        raise AddressParseError(msg)
    if row < 1 or row > MAX_ROW_COUNT:
        msg = f"row reference {row} out of range 1-{MAX_ROW_COUNT}"
        raise AddressParseError(msg)


def _check_col(col: int) -> None:
    if not isinstance(col, int) or isinstance(col, bool):
        msg = f"column reference {col!r} is not an integer"
        raise AddressParseError(msg)
    if col < 1 or col > MAX_COL_COUNT:
        msg = f"column reference {col} out of range 1-{MAX_COL_COUNT}"
        raise AddressParseError(msg)


def xl_name_to_col(col_str: str) -> int:
    """Convert a column name such as ``"AB"`` to a column number (one indexed).

    Raises
    ------
    AddressParseError:
        If the name is not a valid column name.
    """
    if not isinstance(col_str, str):
        msg = f"invalid column reference {col_str!r}"
        raise AddressParseError(msg)
    match = col_parts.match(col_str)
    if not match:
        msg = f"invalid column reference {col_str}"
        raise AddressParseError(msg)

    # Convert base26 column string to number.
    expn = 0
    col = 0
    for char in reversed(match.group(1).upper()):
        col += (ord(char) - ord("A") + 1) * (26**expn)
        expn += 1

    _check_col(col)
    return col


def xl_cell_to_rowcol(cell_str: str) -> Tuple[int, int]:
    """Convert a cell reference in A1 notation to a one indexed row and column.

    Parameters
    ----------
    cell_str:  str
        A1 notation cell reference

    Returns
    -------
    row, col: int, int
        Cell row and column numbers (one indexed).

    Raises
    ------
    AddressParseError:
        If the reference is malformed or outside the worksheet limits.
    """
    if not isinstance(cell_str, str):
        msg = f"invalid cell reference {cell_str!r}"
        raise AddressParseError(msg)

    match = range_parts.match(cell_str.strip())
    if not match:
        msg = f"invalid cell reference {cell_str}"
        raise AddressParseError(msg)

    col = xl_name_to_col(match.group(2))
    row = int(match.group(4))
    _check_row(row)
    return row, col


def xl_rowcol_to_cell(row: int, col: int, row_abs: bool = False, col_abs: bool = False) -> str:
    """Convert a one indexed row and column cell reference to a A1 style string.

    Parameters
    ----------
    row: int
         The cell row.
    col: int
        The cell column.
    row_abs: bool
        If ``True``, make the row absolute.
    col_abs: bool
        If ``True``, make the column absolute.

    Returns
    -------
    str:
        A1 style string.
    """
    _check_row(row)
    row_abs = "$" if row_abs else ""
    col_str = xl_col_to_name(col, col_abs)
    return col_str + row_abs + str(row)


def xl_col_to_name(col: int, col_abs: bool = False) -> str:
    """Convert a one indexed column number to a string.

    Parameters
    ----------
    col: int
        The column number (one indexed).
    col_abs: bool, default: False
        If ``True``, make the column absolute.

    Returns
    -------
        str:
            Column in A1 notation.
    """
    _check_col(col)
    col_str = ""
    col_abs = "$" if col_abs else ""

    while col:
        # Set remainder from 1 .. 26
        remainder = col % 26

        if remainder == 0:
            remainder = 26

        # Convert the remainder to a character.
        col_letter = chr(ord("A") + remainder - 1)

        # Accumulate the column letters, right to left.
        col_str = col_letter + col_str

        # Get the next order of magnitude.
        col = int((col - 1) / 26)

    return col_abs + col_str


def xl_range(first_row: int, first_col: int, last_row: int, last_col: int) -> str:
    """Convert one indexed row and col cell references to a A1:B1 range string.

    Returns
    -------
    str:
        A1:B1 style range string, or a single reference for a one cell range.
    """
    range1 = xl_rowcol_to_cell(first_row, first_col)
    range2 = xl_rowcol_to_cell(last_row, last_col)

    if range1 == range2:
        return range1
    else:
        return range1 + ":" + range2


def xl_range_to_rowcols(range_str: str) -> Tuple[int, int, int, int]:
    """Convert a range in A1:B2 notation to a normalised rectangle.

    Returns
    -------
    first_row, first_col, last_row, last_col: int, int, int, int
        The top-left and bottom-right corners (one indexed).
    """
    if not isinstance(range_str, str) or range_str.count(":") > 1:
        msg = f"invalid cell range {range_str!r}"
        raise AddressParseError(msg)

    if ":" in range_str:
        (start_ref, end_ref) = range_str.split(":")
    else:
        start_ref = end_ref = range_str
    (row_start, col_start) = xl_cell_to_rowcol(start_ref)
    (row_end, col_end) = xl_cell_to_rowcol(end_ref)
    return (
        min(row_start, row_end),
        min(col_start, col_end),
        max(row_start, row_end),
        max(col_start, col_end),
    )


def cell_ref_args(*args) -> Tuple[int, int, tuple]:
    """Split a cell reference from positional arguments.

    Accepts either ``("B2", ...)`` or ``(2, 2, ...)`` and returns the one
    indexed row and column together with the remaining arguments.
    """
    if len(args) == 0:
        raise AddressParseError("invalid cell reference ()")
    if isinstance(args[0], str):
        (row, col) = xl_cell_to_rowcol(args[0])
        return row, col, args[1:]
    if len(args) < 2:
        raise AddressParseError("invalid cell reference " + str(args))
    (row, col) = args[0:2]
    _check_row(row)
    _check_col(col)
    return row, col, args[2:]


def column_ref(col: Union[int, str]) -> int:
    """Return a column number for a column number or letter reference."""
    if isinstance(col, str):
        return xl_name_to_col(col)
    _check_col(col)
    return col


def row_ref(row: int) -> int:
    """Return a row number after checking it is in range."""
    _check_row(row)
    return row
