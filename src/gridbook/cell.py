from typing import Optional
from warnings import warn

from gridbook.constants import CellType
from gridbook.exceptions import UnsupportedWarning
from gridbook.styles import Style, check_facet, facet_property
from gridbook.utils import xl_range, xl_rowcol_to_cell
from gridbook.values import Formula, normalize_value, value_text, value_type

__all__ = ["Cell"]


class Cell:
    """.. NOTE::
    Do not instantiate directly. Cells are returned by :py:meth:`Worksheet.cell`.

    A cell returned for an address that has never been written is a
    read-only view: reading it reports a ``None`` value and the style it
    would inherit from its row and column. Assigning a value, a style or
    any style facet materializes the cell in its worksheet.
    """

    def __init__(self, worksheet, row: int, col: int, value=None, style: Optional[Style] = None):
        self._worksheet = worksheet
        self.row = row
        self.col = col
        self._value = value
        self._style = style
        self._materialized = False

    def __repr__(self) -> str:
        return (
            f"<Cell {self._worksheet.name}!{self.address} type={self.type.name}, "
            + f"value={self._value!r}, materialized={self._materialized}>"
        )

    def _target(self) -> "Cell":
        """The cell that holds the value and style observed at this address."""
        master = self._worksheet._merge_master(self.row, self.col)
        if master is not None:
            return self._worksheet.cell(*master)
        if self._materialized:
            return self
        stored = self._worksheet._stored_cell(self.row, self.col)
        return stored if stored is not None else self

    def _writable(self, facet_write: bool = False) -> "Cell":
        """Materialize the cell for a write, redirecting merged-away cells."""
        master = self._worksheet._merge_master(self.row, self.col)
        if master is not None:
            if facet_write:
                warn(
                    f"{self.address} is merged into {xl_rowcol_to_cell(*master)}; "
                    + "style applied to the merge master",
                    UnsupportedWarning,
                    stacklevel=4,
                )
            return self._worksheet._materialize(Cell(self._worksheet, *master))
        return self._worksheet._materialize(self)

    @property
    def address(self) -> str:
        """str: The cell reference in A1 notation."""
        return xl_rowcol_to_cell(self.row, self.col)

    @property
    def value(self):
        """The value of the cell, or ``None`` if the cell is empty.

        Merged-away cells report the value of their merge master.
        """
        return self._target()._value

    @value.setter
    def value(self, value):
        value = normalize_value(value)
        if value is None:
            # A cell with no value and no style is not stored
            target = self._target()
            if target._materialized:
                style = target._style
            else:
                style = self._worksheet._inherited_style(target.row, target.col)
            if style is None or style.is_empty:
                self._worksheet._discard_cell(target.row, target.col)
                return
        self._writable()._value = value

    @property
    def type(self) -> CellType:
        """CellType: The type of the value, or ``CellType.MERGED`` for merged-away cells."""
        if self._worksheet._merge_master(self.row, self.col) is not None:
            return CellType.MERGED
        return value_type(self._target()._value)

    @property
    def text(self) -> str:
        """str: The plain text of the value; rich text is concatenated."""
        return value_text(self._target()._value)

    @property
    def formula(self) -> Optional[str]:
        """str: The formula expression without a leading ``=``, or ``None``."""
        value = self._target()._value
        if isinstance(value, Formula):
            return value.expression
        return None

    @property
    def is_materialized(self) -> bool:
        """bool: ``True`` if the cell is stored in its worksheet."""
        return self._target()._materialized

    @property
    def style(self) -> Style:
        """Style: The effective style of the cell.

        A materialized cell reports its own style. Any other cell reports the
        style inherited from its row and column defaults. Assigning a style
        replaces every facet; assigning ``None`` removes the cell's own style
        so that it inherits from its row and column again.
        """
        return self._worksheet._effective_style(self._target())

    @style.setter
    def style(self, style: Optional[Style]):
        if style is not None and not isinstance(style, Style):
            raise TypeError("style must be a Style object or None")
        self._writable(facet_write=True)._style = style

    def _get_facet(self, facet: str):
        return getattr(self.style, facet)

    def _set_facet(self, facet: str, value):
        value = check_facet(facet, value)
        cell = self._writable(facet_write=True)
        cell._style = self._worksheet._effective_style(cell).replace(**{facet: value})

    num_fmt = facet_property("num_fmt", "str: The number format code of the cell.")
    font = facet_property("font", "Font: The font of the cell, or ``None``.")
    fill = facet_property("fill", "Fill: The fill of the cell, or ``None``.")
    border = facet_property("border", "Border: The border of the cell, or ``None``.")
    alignment = facet_property("alignment", "Alignment: The alignment of the cell, or ``None``.")
    protection = facet_property(
        "protection", "Protection: The protection flags of the cell, or ``None``."
    )

    @property
    def is_merged(self) -> bool:
        """bool: ``True`` if the cell is part of any merge range."""
        return self._worksheet._merge_rect(self.row, self.col) is not None

    @property
    def is_merge_master(self) -> bool:
        """bool: ``True`` if the cell is the top-left cell of a merge range."""
        return (self.row, self.col) in self._worksheet._merges

    @property
    def master(self) -> "Cell":
        """Cell: The merge master for merged-away cells, otherwise the cell itself."""
        master = self._worksheet._merge_master(self.row, self.col)
        if master is None:
            return self
        return self._worksheet.cell(*master)

    @property
    def merge_range(self) -> Optional[str]:
        """str: The merge range containing the cell in A1 notation, or ``None``."""
        rect = self._worksheet._merge_rect(self.row, self.col)
        return None if rect is None else xl_range(*rect)
