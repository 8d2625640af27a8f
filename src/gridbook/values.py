import math
from dataclasses import dataclass
from datetime import date as builtin_date
from datetime import datetime as builtin_datetime
from typing import Optional, Tuple

import pendulum
from pendulum import DateTime

from gridbook.constants import ERROR_CODES, CellType
from gridbook.exceptions import UnsupportedValueType
from gridbook.styles import Font

__all__ = ["ErrorValue", "Formula", "RichText", "TextRun"]


@dataclass(frozen=True)
class TextRun:
    """A fragment of rich text with an optional font override."""

    text: str
    font: Optional[Font] = None

    def __post_init__(self):
        if not isinstance(self.text, str):
            msg = "text run must be a string"
            raise TypeError(msg)
        if self.font is not None and not isinstance(self.font, Font):
            msg = "text run font must be a Font object or None"
            raise TypeError(msg)


def text_run(value) -> TextRun:
    if isinstance(value, TextRun):
        return value
    if isinstance(value, str):
        return TextRun(value)
    if isinstance(value, tuple) and len(value) == 2:
        return TextRun(*value)
    msg = "rich text runs must be TextRun objects, strings or (text, font) tuples"
    raise TypeError(msg)


class RichText:
    """An ordered sequence of text runs.

    .. code-block:: python

        >>> value = RichText([("Bold ", Font(bold=True)), "plain"])
        >>> value.text
        'Bold plain'

    Two rich text values are equal when their runs are equal, in order and
    including fonts. Rich text is immutable.
    """

    __slots__ = ("_runs",)

    def __init__(self, runs) -> None:
        if isinstance(runs, (str, TextRun)):
            runs = [runs]
        object.__setattr__(self, "_runs", tuple(text_run(run) for run in runs))

    def __setattr__(self, name, value):
        msg = "RichText is immutable"
        raise AttributeError(msg)

    @property
    def runs(self) -> Tuple[TextRun, ...]:
        """Tuple[TextRun]: the runs in order."""
        return self._runs

    @property
    def text(self) -> str:
        """str: the plain text of all runs concatenated."""
        return "".join(run.text for run in self._runs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RichText):
            return NotImplemented
        return self._runs == other._runs

    def __hash__(self) -> int:
        return hash(self._runs)

    def __len__(self) -> int:
        return len(self._runs)

    def __iter__(self):
        return iter(self._runs)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"RichText({list(self._runs)!r})"


@dataclass(frozen=True)
class ErrorValue:
    """A spreadsheet error such as ``#DIV/0!``."""

    code: str

    def __post_init__(self):
        if self.code not in ERROR_CODES:
            msg = f"invalid error code '{self.code}'"
            raise UnsupportedValueType(msg)

    def __str__(self) -> str:
        return self.code


@dataclass(frozen=True)
class Formula:
    """A formula expression and its optional cached result.

    Formulas are stored and round-tripped but never evaluated.
    """

    expression: str
    result: object = None

    def __post_init__(self):
        if not isinstance(self.expression, str):
            msg = "formula expression must be a string"
            raise TypeError(msg)
        if self.expression.startswith("="):
            object.__setattr__(self, "expression", self.expression[1:])
        if isinstance(self.result, Formula):
            msg = "formula result cannot be a formula"
            raise UnsupportedValueType(msg)
        object.__setattr__(self, "result", normalize_value(self.result))

    def __str__(self) -> str:
        return "=" + self.expression


def normalize_value(value):
    """Return a value in the form it is stored in a cell.

    Raises
    ------
    UnsupportedValueType:
        If the type of ``value`` cannot be stored in a cell.
    """
    if value is None or isinstance(value, (bool, str, RichText, Formula, ErrorValue)):
        return value
    elif isinstance(value, (int, float)):
        return value
    elif isinstance(value, (DateTime, builtin_datetime)):
        return pendulum.instance(value)
    elif isinstance(value, builtin_date):
        return pendulum.datetime(value.year, value.month, value.day)
    msg = "can't determine cell type from type " + type(value).__name__
    raise UnsupportedValueType(msg)


def value_type(value) -> CellType:
    if value is None:
        return CellType.EMPTY
    elif isinstance(value, bool):
        return CellType.BOOL
    elif isinstance(value, (int, float)):
        return CellType.NUMBER
    elif isinstance(value, str):
        return CellType.TEXT
    elif isinstance(value, RichText):
        return CellType.RICH_TEXT
    elif isinstance(value, builtin_datetime):
        return CellType.DATE
    elif isinstance(value, Formula):
        return CellType.FORMULA
    elif isinstance(value, ErrorValue):
        return CellType.ERROR
    msg = "can't determine cell type from type " + type(value).__name__
    raise UnsupportedValueType(msg)


def value_text(value) -> str:
    """Return the display text for a stored value."""
    if value is None:
        return ""
    elif isinstance(value, Formula):
        return value_text(value.result)
    elif isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    elif isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)
