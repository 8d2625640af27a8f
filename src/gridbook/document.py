import logging
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Tuple, Union
from warnings import warn

import pendulum
from pendulum import DateTime

from gridbook.cell import Cell
from gridbook.codec import WorkbookDecoder, WorkbookEncoder, build_style_table
from gridbook.constants import (
    DEFAULT_CREATOR,
    DEFAULT_SHEET_NAME,
    INVALID_SHEET_NAME_CHARS,
    MAX_OUTLINE_LEVEL,
    MAX_SHEET_NAME_LENGTH,
    SheetState,
    StylePrecedence,
)
from gridbook.containers import ItemsList
from gridbook.exceptions import DuplicateWorksheetName, UnsupportedWarning
from gridbook.resolver import StyleResolver
from gridbook.style_table import StyleTable
from gridbook.styles import Style, check_facet, enum_member, facet_property
from gridbook.utils import (
    cell_ref_args,
    column_ref,
    row_ref,
    xl_cell_to_rowcol,
    xl_col_to_name,
    xl_range,
    xl_range_to_rowcols,
    xl_rowcol_to_cell,
)
from gridbook.values import normalize_value

logger = logging.getLogger(__name__)
debug = logger.debug

__all__ = ["Column", "Row", "Workbook", "Worksheet"]

COLUMN_DEFINITION_KEYS = {"header", "key", "width", "style", "hidden", "outline_level"}


def _check_outline_level(level: int) -> int:
    if not isinstance(level, int) or isinstance(level, bool):
        raise TypeError("outline level must be an integer")
    if level < 0 or level > MAX_OUTLINE_LEVEL:
        raise ValueError(f"outline level must be between 0 and {MAX_OUTLINE_LEVEL}")
    return level


def _check_size(value, label: str) -> Optional[float]:
    if value is None:
        return None
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise TypeError(f"{label} must be a number or None")
    if value <= 0:
        raise ValueError(f"{label} must be positive")
    return float(value)


class _StyledLine:
    """Default style and metadata shared by rows and columns."""

    def __init__(self, worksheet, number: int):
        self._worksheet = worksheet
        self._number = number
        self._style = None
        self._hidden = False
        self._outline_level = 0

    @property
    def number(self) -> int:
        """int: The row or column number (one indexed)."""
        return self._number

    @property
    def hidden(self) -> bool:
        return self._hidden

    @hidden.setter
    def hidden(self, value: bool):
        if not isinstance(value, bool):
            raise TypeError("hidden must be a boolean")
        self._hidden = value

    @property
    def outline_level(self) -> int:
        return self._outline_level

    @outline_level.setter
    def outline_level(self, value: int):
        self._outline_level = _check_outline_level(value)

    @property
    def style(self) -> Optional[Style]:
        """Style: The default style, or ``None`` if no facet is defined.

        Assigning a style replaces the default and the whole style of every
        cell that already exists in the row or column.
        """
        return self._style

    @style.setter
    def style(self, style: Optional[Style]):
        if style is not None and not isinstance(style, Style):
            raise TypeError("style must be a Style object or None")
        self._style = None if style is None or style.is_empty else style
        self._worksheet._resolver.broadcast_style(self._broadcast_cells(), style)

    def _get_facet(self, facet: str):
        return None if self._style is None else getattr(self._style, facet)

    def _set_facet(self, facet: str, value):
        value = check_facet(facet, value)
        resolver = self._worksheet._resolver
        self._style = resolver.set_default(self._style, facet, value)
        resolver.broadcast(
            self._broadcast_cells(), facet, value, self._worksheet._inherited_style_of
        )

    def _broadcast_cells(self) -> List[Cell]:
        return list(self)

    def _is_default(self) -> bool:
        return self._style is None and not self._hidden and self._outline_level == 0

    num_fmt = facet_property("num_fmt", "str: The default number format code, or ``None``.")
    font = facet_property("font", "Font: The default font, or ``None``.")
    fill = facet_property("fill", "Fill: The default fill, or ``None``.")
    border = facet_property("border", "Border: The default border, or ``None``.")
    alignment = facet_property("alignment", "Alignment: The default alignment, or ``None``.")
    protection = facet_property("protection", "Protection: The default protection, or ``None``.")


class Row(_StyledLine):
    """A worksheet row.

    .. NOTE::
       Do not instantiate directly. Rows are returned by :py:meth:`Worksheet.row`.

    Iterating a row yields its materialized cells in column order. Setting
    a style facet on a row stores it as the row default and also overwrites
    that facet on every cell already in the row:

    .. code-block:: python

        >>> sheet.cell("A1").value = 5
        >>> sheet.row(1).font = Font(bold=True)
        >>> sheet.cell("A1").font.bold
        True
        >>> sheet.cell("B1").font.bold
        True
    """

    def __init__(self, worksheet, number: int):
        super().__init__(worksheet, number)
        self._cells: Dict[int, Cell] = {}
        self._height = None

    def __repr__(self) -> str:
        return f"<Row {self._worksheet.name}!{self._number} cells={len(self._cells)}>"

    def __iter__(self) -> Iterator[Cell]:
        for col in sorted(self._cells):
            yield self._cells[col]

    def __len__(self) -> int:
        return len(self._cells)

    @property
    def height(self) -> Optional[float]:
        """float: The row height in points, or ``None`` for the default height."""
        return self._height

    @height.setter
    def height(self, value: Optional[float]):
        self._height = _check_size(value, "row height")

    def cell(self, col: Union[int, str]) -> Cell:
        """Return the cell in a column of this row by number or letter."""
        return self._worksheet.cell(self._number, column_ref(col))

    @property
    def values(self) -> list:
        """list: The cell values of the row; ``values[0]`` is column A and gaps are ``None``."""
        if not self._cells:
            return []
        values = [None] * max(self._cells)
        for col, cell in self._cells.items():
            values[col - 1] = cell._value
        return values

    def _is_default(self) -> bool:
        return super()._is_default() and self._height is None


class Column(_StyledLine):
    """A worksheet column definition.

    .. NOTE::
       Do not instantiate directly. Columns are returned by :py:meth:`Worksheet.column`.

    A column definition exists independently of the cells in the column.
    Iterating a column yields the materialized cells in the column in row
    order.
    """

    def __init__(self, worksheet, number: int):
        super().__init__(worksheet, number)
        self._width = None
        self._header = None
        self._key = None

    def __repr__(self) -> str:
        return f"<Column {self._worksheet.name}!{self.letter}>"

    def __iter__(self) -> Iterator[Cell]:
        for row in self._worksheet.rows:
            cell = row._cells.get(self._number)
            if cell is not None:
                yield cell

    @property
    def letter(self) -> str:
        """str: The column name in A1 notation, for example ``"AB"``."""
        return xl_col_to_name(self._number)

    @property
    def width(self) -> Optional[float]:
        """float: The column width in characters, or ``None`` for the default width."""
        return self._width

    @width.setter
    def width(self, value: Optional[float]):
        self._width = _check_size(value, "column width")

    @property
    def header(self) -> Optional[str]:
        """str: The column header. Setting a header also writes it into row 1."""
        return self._header

    @header.setter
    def header(self, value: Optional[str]):
        if value is not None and not isinstance(value, str):
            raise TypeError("column header must be a string or None")
        self._header = value
        if value is not None:
            self._worksheet.cell(1, self._number).value = value

    @property
    def key(self) -> Optional[str]:
        """str: A name for the column used by :py:meth:`Worksheet.add_row`."""
        return self._key

    @key.setter
    def key(self, value: Optional[str]):
        if value is not None and not isinstance(value, str):
            raise TypeError("column key must be a string or None")
        self._key = value

    def _is_default(self) -> bool:
        return (
            super()._is_default()
            and self._width is None
            and self._header is None
            and self._key is None
        )


class Worksheet:
    """A worksheet of sparse rows and columns.

    .. NOTE::
       Do not instantiate directly. Worksheets are created by
       :py:meth:`Workbook.add_worksheet`.

    Cells are addressed either with A1 notation or with one indexed
    row and column numbers:

    .. code-block:: python

        ("B2")      # A1 notation.
        (2, 2)      # The same cell in row-column notation.
    """

    def __init__(self, workbook, name: str, state: SheetState = SheetState.VISIBLE):
        self._workbook = workbook
        self._name = name
        self._rows: Dict[int, Row] = {}
        self._columns: Dict[int, Column] = {}
        self._merges: Dict[Tuple[int, int], Tuple[int, int, int, int]] = {}
        self._freeze_panes = None
        self.state = state

    def __repr__(self) -> str:
        return f"<Worksheet '{self._name}'>"

    @property
    def _resolver(self) -> StyleResolver:
        return self._workbook._resolver

    @property
    def name(self) -> str:
        """str: The worksheet name; renaming checks that the name is unique."""
        return self._name

    @name.setter
    def name(self, value: str):
        self._workbook._check_worksheet_name(value, self)
        self._name = value

    @property
    def state(self) -> SheetState:
        """SheetState: Whether the worksheet is visible."""
        return self._state

    @state.setter
    def state(self, value: Union[SheetState, str]):
        self._state = enum_member(SheetState, value, "sheet state")

    # Cells

    def cell(self, *args) -> Cell:
        """Return a single cell in the worksheet.

        Reading a cell never creates it. A cell that has not been written is
        returned as a view that reports ``None`` and the style inherited from
        its row and column.

        Parameters
        ----------
        param1: str | int
            A cell reference in A1 notation, or the row number (one indexed).
        param2: int, optional
            The column number (one indexed).

        Returns
        -------
        Cell:
            The stored cell, or an unmaterialized view of the address.

        Raises
        ------
        AddressParseError:
            If the cell reference is invalid or out of range.

        Example
        -------

        .. code-block:: python

            >>> sheet.cell("B2").value
            1234.5
            >>> sheet.cell(2, 2).value
            1234.5
        """
        (row, col, _) = cell_ref_args(*args)
        stored = self._stored_cell(row, col)
        return stored if stored is not None else Cell(self, row, col)

    def find_cell(self, *args) -> Optional[Cell]:
        """Return the stored cell at an address, or ``None`` if it has not been created."""
        (row, col, _) = cell_ref_args(*args)
        return self._stored_cell(row, col)

    def write(self, *args, style: Optional[Style] = None) -> Cell:
        """Write a value, and optionally a whole style, to a cell.

        .. code:: python

            sheet.write(1, 1, "This is new text")
            sheet.write("B7", datetime(2020, 12, 25), style=Style(num_fmt="d-mmm-yy"))

        Parameters
        ----------
        row: int
            The row number (one indexed)
        col: int
            The column number (one indexed)
        value: str | int | float | bool | datetime | RichText | Formula | ErrorValue
            The value to write to the cell.
        style: Style, optional
            A style that replaces the cell's style.

        Raises
        ------
        UnsupportedValueType:
            If the cell type cannot be determined from the type of ``value``.
        TypeError:
            If the style parameter is not a :py:class:`Style`.
        """
        (row, col, values) = cell_ref_args(*args)
        if len(values) != 1:
            raise TypeError("write() requires a cell reference and a value")
        value = normalize_value(values[0])
        if style is not None and not isinstance(style, Style):
            raise TypeError("style must be a Style object or None")
        cell = self.cell(row, col)
        cell.value = value
        if style is not None:
            cell.style = style
        return cell.master

    def _stored_cell(self, row: int, col: int) -> Optional[Cell]:
        row_obj = self._rows.get(row)
        if row_obj is None:
            return None
        return row_obj._cells.get(col)

    def _materialize(self, cell: Cell) -> Cell:
        """Store a cell, snapshotting the style it inherits, unless the address
        already holds a stored cell in which case that cell is returned.
        """
        row = self.row(cell.row)
        stored = row._cells.get(cell.col)
        if stored is not None:
            return stored
        inherited = self._inherited_style(cell.row, cell.col)
        cell._style = None if inherited.is_empty else inherited
        cell._materialized = True
        row._cells[cell.col] = cell
        return cell

    def _discard_cell(self, row: int, col: int) -> None:
        row_obj = self._rows.get(row)
        if row_obj is None or col not in row_obj._cells:
            return
        cell = row_obj._cells.pop(col)
        cell._materialized = False
        cell._value = None
        cell._style = None

    def _inherited_style(self, row: int, col: int) -> Style:
        row_obj = self._rows.get(row)
        col_obj = self._columns.get(col)
        return self._resolver.inherited_style(
            None if row_obj is None else row_obj._style,
            None if col_obj is None else col_obj._style,
        )

    def _inherited_style_of(self, cell: Cell) -> Style:
        return self._inherited_style(cell.row, cell.col)

    def _effective_style(self, cell: Cell) -> Style:
        row_obj = self._rows.get(cell.row)
        col_obj = self._columns.get(cell.col)
        return self._resolver.effective_style(
            cell._style,
            None if row_obj is None else row_obj._style,
            None if col_obj is None else col_obj._style,
        )

    # Rows and columns

    def row(self, number: int) -> Row:
        """Return a row, creating it if necessary."""
        number = row_ref(number)
        if number not in self._rows:
            self._rows[number] = Row(self, number)
        return self._rows[number]

    def find_row(self, number: int) -> Optional[Row]:
        """Return a row if it exists, otherwise ``None``."""
        return self._rows.get(row_ref(number))

    @property
    def rows(self) -> List[Row]:
        """List[Row]: The rows that exist in the worksheet in ascending order."""
        return [self._rows[number] for number in sorted(self._rows)]

    def column(self, ref: Union[int, str]) -> Column:
        """Return a column definition by number or letter, creating it if necessary."""
        number = column_ref(ref)
        if number not in self._columns:
            self._columns[number] = Column(self, number)
        return self._columns[number]

    def find_column(self, ref: Union[int, str]) -> Optional[Column]:
        """Return a column definition if it exists, otherwise ``None``."""
        return self._columns.get(column_ref(ref))

    @property
    def columns(self) -> List[Column]:
        """List[Column]: The column definitions in ascending order.

        Assigning a list of definitions replaces all column definitions.
        Each definition is a dict that may contain ``header``, ``key``,
        ``width``, ``style``, ``hidden`` and ``outline_level``; headers are
        written into row 1.

        .. code-block:: python

            sheet.columns = [
                {"header": "Id", "key": "id", "width": 10},
                {"header": "Name", "key": "name", "width": 32},
            ]
            sheet.add_row({"id": 1, "name": "John Doe"})
        """
        return [self._columns[number] for number in sorted(self._columns)]

    @columns.setter
    def columns(self, definitions: List[dict]):
        columns = {}
        for number, definition in enumerate(definitions, start=1):
            if not isinstance(definition, dict):
                raise TypeError("column definitions must be dicts")
            unknown = set(definition.keys()) - COLUMN_DEFINITION_KEYS
            if unknown:
                raise KeyError(f"unknown column definition keys {sorted(unknown)}")
            style = definition.get("style")
            if style is not None and not isinstance(style, Style):
                raise TypeError("style must be a Style object or None")
            header = definition.get("header")
            if header is not None and not isinstance(header, str):
                raise TypeError("column header must be a string or None")

            column = Column(self, column_ref(number))
            column.width = definition.get("width")
            column.hidden = definition.get("hidden", False)
            column.outline_level = definition.get("outline_level", 0)
            column.key = definition.get("key")
            columns[number] = column

        # Every definition is valid from here on
        self._columns = columns
        for number, definition in enumerate(definitions, start=1):
            if definition.get("style") is not None:
                columns[number].style = definition["style"]
            columns[number].header = definition.get("header")

    def column_by_key(self, key: str) -> Column:
        """Return the column definition with a key.

        Raises
        ------
        KeyError:
            If no column has that key.
        """
        for column in self.columns:
            if column.key == key:
                return column
        raise KeyError(f"no column with key '{key}'")

    def add_row(self, values: Union[list, tuple, dict]) -> Row:
        """Append a row of values after the last row that contains cells.

        Parameters
        ----------
        values: list | tuple | dict
            Values laid out from column A, or a dict mapping column keys
            to values. ``None`` values are skipped.

        Returns
        -------
        Row:
            The new row.
        """
        if isinstance(values, dict):
            cells = {
                self.column_by_key(key).number: normalize_value(value)
                for key, value in values.items()
            }
        elif isinstance(values, (list, tuple)):
            cells = {col: normalize_value(value) for col, value in enumerate(values, start=1)}
        else:
            raise TypeError("row values must be a list, tuple or dict")

        row = self.row(self.row_count + 1)
        for col, value in cells.items():
            if value is not None:
                self.cell(row.number, col).value = value
        return row

    def iter_rows(  # noqa: PLR0913
        self,
        min_row: Optional[int] = None,
        max_row: Optional[int] = None,
        min_col: Optional[int] = None,
        max_col: Optional[int] = None,
        values_only: Optional[bool] = False,
    ) -> Iterator[Tuple]:
        """Produces cells from a worksheet, by row.

        Parameters
        ----------
        min_row: int, optional
            Starting row number (one indexed), or ``1`` if ``None``.
        max_row: int, optional
            End row number, or the last used row if ``None``.
        min_col: int, optional
            Starting column number, or ``1`` if ``None``.
        max_col: int, optional
            End column number, or the last used column if ``None``.
        values_only: bool, optional
            If ``True``, yield cell values rather than :class:`Cell` objects

        Yields
        ------
        Tuple[Cell] | Tuple:
            :class:`Cell` objects or values for the row
        """
        min_row = min_row or 1
        max_row = max_row or self.row_count
        min_col = min_col or 1
        max_col = max_col or self.column_count

        for row in range(min_row, max_row + 1):
            cells = tuple(self.cell(row, col) for col in range(min_col, max_col + 1))
            if values_only:
                yield tuple(cell.value for cell in cells)
            else:
                yield cells

    def _cells(self) -> Iterator[Cell]:
        for row in self.rows:
            yield from row

    @property
    def row_count(self) -> int:
        """int: The number of the last row that contains cells, or 0."""
        numbers = [number for number, row in self._rows.items() if row._cells]
        return max(numbers, default=0)

    @property
    def column_count(self) -> int:
        """int: The number of the last column that contains cells, or 0."""
        return max((max(row._cells) for row in self._rows.values() if row._cells), default=0)

    @property
    def dimensions(self) -> Optional[str]:
        """str: The range of cells that contain data, for example ``"A1:C4"``, or ``None``."""
        rows = [number for number, row in self._rows.items() if row._cells]
        if not rows:
            return None
        cols = [col for row in self._rows.values() for col in row._cells]
        return xl_range(min(rows), min(cols), max(rows), max(cols))

    # Merges

    def _merge_rect(self, row: int, col: int) -> Optional[Tuple[int, int, int, int]]:
        for rect in self._merges.values():
            if rect[0] <= row <= rect[2] and rect[1] <= col <= rect[3]:
                return rect
        return None

    def _merge_master(self, row: int, col: int) -> Optional[Tuple[int, int]]:
        """Return the master address for a merged-away cell, otherwise ``None``."""
        if not self._merges:
            return None
        rect = self._merge_rect(row, col)
        if rect is None or (rect[0], rect[1]) == (row, col):
            return None
        return (rect[0], rect[1])

    def merge_cells(self, cell_range: Union[str, List[str]]) -> None:
        """
        Merge a cell range or list of cell ranges.

        The top-left cell of a range is its master; values and styles of the
        other cells in the range are discarded.

        Parameters
        ----------
        cell_range: str | List[str]
            Cell range(s) to merge in A1 notation

        Raises
        ------
        ValueError:
            If a range overlaps an existing merge range or another range in
            the list, in which case no range is merged.

        Example
        --------
        .. code:: python

            >>> sheet.merge_cells("B2:C2")
            >>> sheet.cell("B2").is_merge_master
            True
            >>> sheet.cell("C2").master.address
            'B2'
        """
        ranges = cell_range if isinstance(cell_range, list) else [cell_range]
        rects = []
        for x in ranges:
            rect = xl_range_to_rowcols(x)
            (row_start, col_start, row_end, col_end) = rect
            if row_start == row_end and col_start == col_end:
                warn(f"ignoring merge of single cell {x}", UnsupportedWarning, stacklevel=2)
                continue
            for other in list(self._merges.values()) + rects:
                if not (
                    row_end < other[0]
                    or row_start > other[2]
                    or col_end < other[1]
                    or col_start > other[3]
                ):
                    raise ValueError(f"{x} overlaps merged range {xl_range(*other)}")
            rects.append(rect)

        for rect in rects:
            self._merge_rect_cells(rect)

    def _merge_rect_cells(self, rect: Tuple[int, int, int, int]) -> None:
        (row_start, col_start, row_end, col_end) = rect
        self._merges[(row_start, col_start)] = rect
        for number, row in list(self._rows.items()):
            if row_start <= number <= row_end:
                for col in list(row._cells):
                    if col_start <= col <= col_end and (number, col) != (row_start, col_start):
                        self._discard_cell(number, col)
        debug("merge_cells: %s!%s", self._name, xl_range(*rect))

    def unmerge_cells(self, cell_range: str) -> None:
        """Remove the merge range that contains a cell or matches a range.

        The cells that were merged away become empty.
        """
        if ":" in cell_range:
            rect = xl_range_to_rowcols(cell_range)
            found = self._merges.get((rect[0], rect[1]))
            if found != rect:
                found = None
        else:
            found = self._merge_rect(*xl_cell_to_rowcol(cell_range))
        if found is None:
            warn(f"{cell_range} is not a merged range", UnsupportedWarning, stacklevel=2)
            return
        del self._merges[(found[0], found[1])]
        debug("unmerge_cells: %s!%s", self._name, xl_range(*found))

    @property
    def merge_ranges(self) -> List[str]:
        """List[str]: The merge ranges of cells in A1 notation, sorted by master."""
        return [xl_range(*self._merges[master]) for master in sorted(self._merges)]

    # Views

    @property
    def freeze_panes(self) -> Optional[str]:
        """str: The top-left cell that is not frozen, or ``None`` if no panes are frozen."""
        if self._freeze_panes is None:
            return None
        return xl_rowcol_to_cell(*self._freeze_panes)

    @freeze_panes.setter
    def freeze_panes(self, ref: Optional[str]):
        if ref is None:
            self._freeze_panes = None
            return
        (row, col, _) = cell_ref_args(ref) if isinstance(ref, str) else cell_ref_args(*ref)
        self._freeze_panes = None if (row, col) == (1, 1) else (row, col)


class Workbook:
    """
    Create an instance of a new or existing workbook.

    If ``filename`` is ``None``, an empty workbook is created.

    Parameters
    ----------
    filename: str | Path | BinaryIO, optional
        Workbook document to read.
    style_precedence: StylePrecedence, optional, default: StylePrecedence.ROW
        Whether row or column defaults win when both define the same facet
        for a cell.
    creator: str, optional
        Document creator recorded in a new workbook.

    Raises
    ------
    ContainerReadError:
        If the document cannot be read.
    FileFormatError:
        If the document is not a valid workbook.
    UnknownStyleReference:
        If the document refers to a style that it does not define.
    """

    def __init__(
        self,
        filename=None,
        style_precedence: StylePrecedence = StylePrecedence.ROW,
        creator: str = DEFAULT_CREATOR,
    ):
        self._resolver = StyleResolver(style_precedence)
        self._worksheets = ItemsList(item_name="worksheet")
        now = pendulum.now("UTC")
        self.creator = creator
        self.last_modified_by = creator
        self.created = now
        self.modified = now
        if filename is not None:
            WorkbookDecoder(self).read(filename)

    def __repr__(self) -> str:
        return f"<Workbook worksheets={self._worksheets.names()}>"

    @property
    def worksheets(self) -> ItemsList:
        """ItemsList[:class:`Worksheet`]: The worksheets in display order,
        indexable by position or name.
        """
        return self._worksheets

    @property
    def style_precedence(self) -> StylePrecedence:
        """StylePrecedence: Whether row or column defaults win for the same facet."""
        return self._resolver.precedence

    @style_precedence.setter
    def style_precedence(self, value: StylePrecedence):
        self._resolver.precedence = value

    @property
    def creator(self) -> str:
        return self._creator

    @creator.setter
    def creator(self, value: str):
        if not isinstance(value, str):
            raise TypeError("creator must be a string")
        self._creator = value

    @property
    def last_modified_by(self) -> str:
        return self._last_modified_by

    @last_modified_by.setter
    def last_modified_by(self, value: str):
        if not isinstance(value, str):
            raise TypeError("last modified by must be a string")
        self._last_modified_by = value

    @property
    def created(self) -> DateTime:
        """DateTime: When the document was created."""
        return self._created

    @created.setter
    def created(self, value: datetime):
        if not isinstance(value, datetime):
            raise TypeError("created must be a datetime")
        self._created = pendulum.instance(value)

    @property
    def modified(self) -> DateTime:
        """DateTime: When the document was last modified."""
        return self._modified

    @modified.setter
    def modified(self, value: datetime):
        if not isinstance(value, datetime):
            raise TypeError("modified must be a datetime")
        self._modified = pendulum.instance(value)

    def _check_worksheet_name(self, name: str, worksheet: Optional[Worksheet] = None) -> None:
        if not isinstance(name, str) or not name:
            raise ValueError("worksheet name must be a non-empty string")
        if len(name) > MAX_SHEET_NAME_LENGTH:
            raise ValueError(f"worksheet name must be at most {MAX_SHEET_NAME_LENGTH} characters")
        if any(c in INVALID_SHEET_NAME_CHARS for c in name):
            raise ValueError(f"worksheet name '{name}' contains invalid characters")
        for other in self._worksheets:
            if other is not worksheet and other.name.lower() == name.lower():
                raise DuplicateWorksheetName(f"worksheet '{name}' already exists")

    def add_worksheet(
        self, name: Optional[str] = None, state: SheetState = SheetState.VISIBLE
    ) -> Worksheet:
        """
        Add a new worksheet after the existing worksheets.

        If no name is provided, the next available numbered name will be
        generated in the series ``Sheet1``, ``Sheet2``, etc.

        Parameters
        ----------
        name: str, optional
            The name of the worksheet.
        state: SheetState, optional, default: SheetState.VISIBLE

        Returns
        -------
        Worksheet:
            The new worksheet.

        Raises
        ------
        DuplicateWorksheetName:
            If the name already exists in the workbook, ignoring case.
        ValueError:
            If the name is too long or contains invalid characters.
        """
        if name is None:
            num = 1
            while DEFAULT_SHEET_NAME.format(num) in self._worksheets:
                num += 1
            name = DEFAULT_SHEET_NAME.format(num)
        self._check_worksheet_name(name)
        worksheet = Worksheet(self, name, state)
        self._worksheets.append(worksheet)
        debug("add_worksheet: '%s'", name)
        return worksheet

    def worksheet(self, key: Union[int, str]) -> Worksheet:
        """Return a worksheet by position (zero indexed) or name."""
        return self._worksheets[key]

    def remove_worksheet(self, key: Union[int, str, Worksheet]) -> None:
        """Remove a worksheet by position, name, or the worksheet itself."""
        worksheet = key if isinstance(key, Worksheet) else self._worksheets[key]
        self._worksheets.remove(worksheet)
        debug("remove_worksheet: '%s'", worksheet.name)

    def style_table(self) -> StyleTable:
        """Return a new :py:class:`StyleTable` interning every style in the workbook,
        with the identifiers a save would assign.
        """
        return build_style_table(self)

    def save(self, filename) -> None:
        """
        Save the workbook.

        Parameters
        ----------
        filename: str | Path | BinaryIO
            The path to save the document to. If the file already exists, it
            is replaced only once the new document has been completely written.

        Raises
        ------
        ContainerWriteError:
            If the document could not be written.
        """
        WorkbookEncoder(self).write(filename)
