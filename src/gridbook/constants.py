from enum import IntEnum

import enum_tools.documentation

__all__ = [
    "BorderStyle",
    "CellType",
    "FillPattern",
    "HorizontalAlignment",
    "SheetState",
    "StylePrecedence",
    "UnderlineType",
    "VerticalAlignment",
]

# Worksheet limits
MAX_ROW_COUNT = 1048576
MAX_COL_COUNT = 16384
MAX_OUTLINE_LEVEL = 7
MAX_SHEET_NAME_LENGTH = 31
INVALID_SHEET_NAME_CHARS = "[]:*?/\\"

# New document defaults
DEFAULT_CREATOR = "gridbook"
DEFAULT_SHEET_NAME = "Sheet{}"

# Style defaults
DEFAULT_BORDER_COLOR = (0, 0, 0)
STYLE_FACETS = ("num_fmt", "font", "fill", "border", "alignment", "protection")
INTERNED_FACETS = ("num_fmt", "font", "fill", "border")

# Number formats with reserved identifiers. Anything else is a custom
# format and is numbered from FIRST_CUSTOM_NUM_FMT_ID upwards.
BUILTIN_NUM_FMTS = {
    0: "General",
    1: "0",
    2: "0.00",
    3: "#,##0",
    4: "#,##0.00",
    9: "0%",
    10: "0.00%",
    11: "0.00E+00",
    12: "# ?/?",
    13: "# ??/??",
    14: "mm-dd-yy",
    15: "d-mmm-yy",
    16: "d-mmm",
    17: "mmm-yy",
    18: "h:mm AM/PM",
    19: "h:mm:ss AM/PM",
    20: "h:mm",
    21: "h:mm:ss",
    22: "m/d/yy h:mm",
    37: "#,##0 ;(#,##0)",
    38: "#,##0 ;[Red](#,##0)",
    39: "#,##0.00;(#,##0.00)",
    40: "#,##0.00;[Red](#,##0.00)",
    45: "mm:ss",
    46: "[h]:mm:ss",
    47: "mmss.0",
    48: "##0.0E+0",
    49: "@",
}
BUILTIN_NUM_FMT_IDS = {code: num_fmt_id for num_fmt_id, code in BUILTIN_NUM_FMTS.items()}
FIRST_CUSTOM_NUM_FMT_ID = 164

ERROR_CODES = ("#NULL!", "#DIV/0!", "#VALUE!", "#REF!", "#NAME?", "#NUM!", "#N/A")

# File format
FILE_FORMAT_VERSION = "1.0"
SUPPORTED_FILE_FORMAT_VERSIONS = ["1.0"]
PROPERTIES_PART = "Metadata/Properties.plist"
WORKBOOK_PART = "Index/Workbook.iwa"
STYLES_PART = "Index/Styles.iwa"
SHARED_STRINGS_PART = "Index/SharedStrings.iwa"
WORKSHEET_PART = "Index/Worksheets/Sheet-{}.iwa"
MAX_CHUNK_SIZE = 65536


@enum_tools.documentation.document_enum
class StylePrecedence(IntEnum):
    """Which default wins when a Row and a Column both define the same facet."""

    ROW = 1  # doc: Row defaults override Column defaults
    COLUMN = 2  # doc: Column defaults override Row defaults


class CellType(IntEnum):
    EMPTY = 1
    NUMBER = 2
    TEXT = 3
    DATE = 4
    BOOL = 5
    RICH_TEXT = 6
    FORMULA = 7
    ERROR = 8
    MERGED = 9


@enum_tools.documentation.document_enum
class SheetState(IntEnum):
    VISIBLE = 0  # doc: shown in the sheet tabs
    HIDDEN = 1  # doc: hidden, can be unhidden by the user
    VERY_HIDDEN = 2  # doc: hidden, can only be unhidden programmatically


@enum_tools.documentation.document_enum
class UnderlineType(IntEnum):
    NONE = 0  # doc: no underline
    SINGLE = 1  # doc: single underline
    DOUBLE = 2  # doc: double underline
    SINGLE_ACCOUNTING = 3  # doc: single accounting underline
    DOUBLE_ACCOUNTING = 4  # doc: double accounting underline


@enum_tools.documentation.document_enum
class FillPattern(IntEnum):
    NONE = 0  # doc: no fill
    SOLID = 1  # doc: solid foreground color
    DARK_GRAY = 2
    MEDIUM_GRAY = 3
    LIGHT_GRAY = 4
    GRAY_125 = 5
    GRAY_0625 = 6
    DARK_HORIZONTAL = 7
    DARK_VERTICAL = 8
    DARK_DOWN = 9
    DARK_UP = 10
    DARK_GRID = 11
    DARK_TRELLIS = 12
    LIGHT_HORIZONTAL = 13
    LIGHT_VERTICAL = 14
    LIGHT_DOWN = 15
    LIGHT_UP = 16
    LIGHT_GRID = 17
    LIGHT_TRELLIS = 18


@enum_tools.documentation.document_enum
class BorderStyle(IntEnum):
    NONE = 0  # doc: no line
    THIN = 1
    MEDIUM = 2
    DASHED = 3
    DOTTED = 4
    THICK = 5
    DOUBLE = 6
    HAIR = 7
    MEDIUM_DASHED = 8
    DASH_DOT = 9
    MEDIUM_DASH_DOT = 10
    DASH_DOT_DOT = 11
    MEDIUM_DASH_DOT_DOT = 12
    SLANT_DASH_DOT = 13


@enum_tools.documentation.document_enum
class HorizontalAlignment(IntEnum):
    GENERAL = 0  # doc: text left, numbers right
    LEFT = 1
    CENTER = 2
    RIGHT = 3
    FILL = 4
    JUSTIFY = 5
    CENTER_CONTINUOUS = 6
    DISTRIBUTED = 7


@enum_tools.documentation.document_enum
class VerticalAlignment(IntEnum):
    TOP = 0
    MIDDLE = 1
    BOTTOM = 2
    JUSTIFY = 3
    DISTRIBUTED = 4
