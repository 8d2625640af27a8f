import logging
from typing import Iterable, Optional

from gridbook.constants import StylePrecedence
from gridbook.styles import Style, check_facet

logger = logging.getLogger(__name__)
debug = logger.debug

__all__ = ["StyleResolver"]


class StyleResolver:
    """Computes effective cell styles and applies row and column style writes.

    Cells hold no references to their row or column. A cell that has an
    explicit style reports exactly that style; any other cell inherits each
    facet independently from its row and column defaults. Writing a facet on
    a row or column updates the stored default and overwrites that facet on
    every cell that already exists in the row or column.

    Parameters
    ----------
    precedence: StylePrecedence, optional, default: StylePrecedence.ROW
        Which default wins when a row and a column define the same facet.
    """

    def __init__(self, precedence: StylePrecedence = StylePrecedence.ROW):
        self.precedence = precedence

    @property
    def precedence(self) -> StylePrecedence:
        return self._precedence

    @precedence.setter
    def precedence(self, value: StylePrecedence):
        if not isinstance(value, StylePrecedence):
            msg = "precedence must be a StylePrecedence"
            raise TypeError(msg)
        self._precedence = value

    def inherited_style(self, row_style: Optional[Style], col_style: Optional[Style]) -> Style:
        """Merge row and column defaults facet by facet."""
        if self._precedence == StylePrecedence.ROW:
            first, second = row_style, col_style
        else:
            first, second = col_style, row_style
        if first is None and second is None:
            return Style()
        elif first is None:
            return second
        return first.merge(second)

    def effective_style(
        self,
        cell_style: Optional[Style],
        row_style: Optional[Style],
        col_style: Optional[Style],
    ) -> Style:
        """Return the style observed when reading a cell."""
        if cell_style is not None:
            return cell_style
        return self.inherited_style(row_style, col_style)

    def set_default(self, default: Optional[Style], facet: str, value) -> Optional[Style]:
        """Return a row or column default with one facet replaced.

        An empty default is returned as ``None``.
        """
        value = check_facet(facet, value)
        style = (default or Style()).replace(**{facet: value})
        return None if style.is_empty else style

    def broadcast(self, cells: Iterable, facet: str, value, inherited) -> int:
        """Overwrite one facet on every cell in ``cells``.

        ``inherited`` is called with a cell that has no explicit style and
        returns the style it currently inherits, so that facets not being
        written are kept as the cell sees them.

        Returns
        -------
        int:
            The number of cells updated.
        """
        value = check_facet(facet, value)
        count = 0
        for cell in cells:
            base = cell._style if cell._style is not None else inherited(cell)
            cell._style = base.replace(**{facet: value})
            count += 1
        debug("broadcast: facet=%s, cells=%d", facet, count)
        return count

    def broadcast_style(self, cells: Iterable, style: Optional[Style]) -> int:
        """Replace the whole explicit style of every cell in ``cells``."""
        count = 0
        for cell in cells:
            cell._style = style if style is not None else Style()
            count += 1
        debug("broadcast_style: cells=%d", count)
        return count
