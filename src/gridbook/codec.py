import logging
import math
import plistlib
from typing import Dict, List, Optional

import pendulum
from pendulum import DateTime

from gridbook.cell import Cell
from gridbook.constants import (
    FILE_FORMAT_VERSION,
    PROPERTIES_PART,
    SHARED_STRINGS_PART,
    STYLES_PART,
    WORKBOOK_PART,
    WORKSHEET_PART,
)
from gridbook.exceptions import FileFormatError, GridbookError, UnsupportedValueType
from gridbook.file import FileStore, read_properties, read_workbook_file, write_workbook_file
from gridbook.partfile import PartFile
from gridbook.shared_strings import SharedStrings
from gridbook.style_table import StyleTable
from gridbook.styles import Style, enum_name
from gridbook.utils import column_ref, row_ref
from gridbook.values import ErrorValue, Formula, RichText

logger = logging.getLogger(__name__)
debug = logger.debug

# Integers beyond this are stored as text so that they survive the
# double precision numbers of the part encoding.
MAX_EXACT_INTEGER = 2**53


def encode_value(value, strings: SharedStrings) -> dict:
    """Return the value descriptor for a cell value."""
    if isinstance(value, bool):
        return {"t": "b", "v": value}
    elif isinstance(value, int):
        return {"t": "n", "v": value if abs(value) <= MAX_EXACT_INTEGER else str(value)}
    elif isinstance(value, float):
        return {"t": "n", "v": value if math.isfinite(value) else str(value)}
    elif isinstance(value, (str, RichText)):
        return {"t": "s", "v": strings.lookup_key(value)}
    elif isinstance(value, DateTime):
        return {"t": "d", "v": value.isoformat()}
    elif isinstance(value, Formula):
        descriptor = {"t": "f", "f": value.expression}
        if value.result is not None:
            descriptor["r"] = encode_value(value.result, strings)
        return descriptor
    elif isinstance(value, ErrorValue):
        return {"t": "e", "v": value.code}
    msg = "can't determine cell type from type " + type(value).__name__
    raise UnsupportedValueType(msg)


def decode_value(descriptor: dict, strings: SharedStrings):
    """Return the cell value for a value descriptor.

    Numbers are stored as doubles, so an integral number such as ``5.0``
    is returned as the ``int`` 5.

    Raises
    ------
    UnsupportedValueType:
        If the descriptor has an unknown type code.
    """
    value_type = descriptor.get("t")
    if value_type is None:
        return None
    elif value_type == "n":
        value = descriptor["v"]
        if isinstance(value, str):
            try:
                return int(value)
            except ValueError:
                return float(value)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"invalid number {value!r}")
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value
    elif value_type == "b":
        if not isinstance(descriptor["v"], bool):
            raise TypeError(f"invalid boolean {descriptor['v']!r}")
        return descriptor["v"]
    elif value_type == "d":
        return pendulum.parse(descriptor["v"])
    elif value_type == "s":
        return strings.lookup_value(int(descriptor["v"]))
    elif value_type == "f":
        result = descriptor.get("r")
        return Formula(
            descriptor["f"],
            None if result is None else decode_value(result, strings),
        )
    elif value_type == "e":
        return ErrorValue(descriptor["v"])
    raise UnsupportedValueType(f"unsupported cell type '{value_type}'")


def _drop_none(archive: dict) -> dict:
    return {k: v for k, v in archive.items() if v is not None}


class WorkbookEncoder:
    """Translates a workbook into document parts.

    Each encoder builds its own style table and shared strings, so an
    encoder is used for a single save.
    """

    def __init__(self, workbook):
        self._workbook = workbook
        self._styles = StyleTable()
        self._strings = SharedStrings()

    @property
    def style_table(self) -> StyleTable:
        return self._styles

    def _style_id(self, style: Optional[Style]) -> Optional[int]:
        return None if style is None else self._styles.intern_composite(style)

    def encode(self) -> FileStore:
        sheets = []
        sheet_parts = {}
        for index, sheet in enumerate(self._workbook.worksheets, start=1):
            part_name = WORKSHEET_PART.format(index)
            sheet_parts[part_name] = PartFile([self.encode_worksheet(sheet)], part_name)
            sheets.append({"name": sheet.name, "state": enum_name(sheet.state), "part": part_name})

        workbook = self._workbook
        properties = {
            "fileFormatVersion": FILE_FORMAT_VERSION,
            "creator": workbook.creator,
            "lastModifiedBy": workbook.last_modified_by,
            "created": workbook.created.isoformat(),
            "modified": workbook.modified.isoformat(),
        }
        file_store = {
            PROPERTIES_PART: plistlib.dumps(properties),
            WORKBOOK_PART: PartFile([{"sheets": sheets}], WORKBOOK_PART),
            STYLES_PART: PartFile([self._styles.to_archive()], STYLES_PART),
            SHARED_STRINGS_PART: PartFile([self._strings.to_archive()], SHARED_STRINGS_PART),
        }
        file_store.update(sheet_parts)
        debug(
            "encode: sheets=%d, cell_styles=%d, shared_strings=%d",
            len(sheets),
            len(self._styles),
            len(self._strings),
        )
        return file_store

    def encode_worksheet(self, sheet) -> dict:
        views = []
        if sheet.freeze_panes is not None:
            views.append({"state": "frozen", "topLeftCell": sheet.freeze_panes})
        return {
            "name": sheet.name,
            "views": views,
            "columns": self.encode_columns(sheet),
            "rows": [
                self.encode_row(row) for row in sheet.rows if len(row) or not row._is_default()
            ],
            "mergeCells": sheet.merge_ranges,
        }

    def encode_columns(self, sheet) -> List[dict]:
        records = []
        for column in sheet.columns:
            if column._is_default():
                continue
            record = _drop_none(
                {
                    "width": column.width,
                    "hidden": column.hidden or None,
                    "outlineLevel": column.outline_level or None,
                    "styleId": self._style_id(column.style),
                    "header": column.header,
                    "key": column.key,
                }
            )
            previous = records[-1] if records else None
            if (
                previous is not None
                and previous["max"] == column.number - 1
                and "header" not in record
                and "key" not in record
                and {k: v for k, v in previous.items() if k not in ("min", "max")} == record
            ):
                previous["max"] = column.number
            else:
                records.append({"min": column.number, "max": column.number, **record})
        return records

    def encode_row(self, row) -> dict:
        record = _drop_none(
            {
                "r": row.number,
                "height": row.height,
                "hidden": row.hidden or None,
                "outlineLevel": row.outline_level or None,
                "styleId": self._style_id(row.style),
            }
        )
        cells = []
        for cell in row:
            if cell._value is None and cell._style is None:
                continue
            cell_record = {"c": cell.col}
            if cell._value is not None:
                cell_record.update(encode_value(cell._value, self._strings))
            style_id = self._style_id(cell._style)
            if style_id is not None:
                cell_record["s"] = style_id
            cells.append(cell_record)
        record["cells"] = cells
        return record

    def write(self, filepath) -> None:
        write_workbook_file(filepath, self.encode())


def build_style_table(workbook) -> StyleTable:
    """Return the style table a save of ``workbook`` would write."""
    encoder = WorkbookEncoder(workbook)
    encoder.encode()
    return encoder.style_table


class WorkbookDecoder:
    """Populates an empty workbook from document parts.

    Any inconsistency in the document is fatal: the decoder raises rather
    than substituting defaults.
    """

    def __init__(self, workbook):
        self._workbook = workbook
        self._styles = None
        self._strings = None

    def read(self, filepath) -> None:
        self.decode(read_workbook_file(filepath))

    def decode(self, file_store: FileStore) -> None:
        try:
            self._decode(file_store)
        except GridbookError:
            raise
        except (KeyError, ValueError, TypeError, AttributeError, IndexError) as e:
            raise FileFormatError(f"invalid workbook document: {e!r}") from e

    def _part(self, file_store: FileStore, name: str) -> dict:
        part = file_store.get(name)
        if not isinstance(part, PartFile):
            raise FileFormatError(f"invalid workbook document (missing {name})")
        return part.message

    def _style(self, style_id) -> Optional[Style]:
        return None if style_id is None else self._styles.resolve(int(style_id))

    def _decode(self, file_store: FileStore) -> None:
        workbook = self._workbook
        properties = read_properties(file_store[PROPERTIES_PART])
        for attr, key in [("creator", "creator"), ("last_modified_by", "lastModifiedBy")]:
            if key in properties:
                setattr(workbook, attr, properties[key])
        for attr in ["created", "modified"]:
            if attr in properties:
                setattr(workbook, attr, pendulum.parse(properties[attr]))

        # Every cross-reference list is loaded before any cell
        self._styles = StyleTable.from_archive(self._part(file_store, STYLES_PART))
        self._strings = SharedStrings.from_archive(self._part(file_store, SHARED_STRINGS_PART))

        for entry in self._part(file_store, WORKBOOK_PART)["sheets"]:
            sheet = workbook.add_worksheet(entry["name"], entry.get("state", "visible"))
            self.decode_worksheet(sheet, self._part(file_store, entry["part"]))
        debug(
            "decode: sheets=%d, cell_styles=%d, shared_strings=%d",
            len(workbook.worksheets),
            len(self._styles),
            len(self._strings),
        )

    def decode_worksheet(self, sheet, archive: Dict) -> None:
        for record in archive.get("columns", []):
            for number in range(int(record["min"]), int(record["max"]) + 1):
                column = sheet.column(number)
                column.width = record.get("width")
                column.hidden = record.get("hidden", False)
                column.outline_level = int(record.get("outlineLevel", 0))
                column.key = record.get("key")
                column._header = record.get("header")
                column._style = self._style(record.get("styleId"))

        for record in archive.get("rows", []):
            row = sheet.row(row_ref(int(record["r"])))
            row.height = record.get("height")
            row.hidden = record.get("hidden", False)
            row.outline_level = int(record.get("outlineLevel", 0))
            row._style = self._style(record.get("styleId"))
            for cell_record in record.get("cells", []):
                col = column_ref(int(cell_record["c"]))
                cell = Cell(
                    sheet,
                    row.number,
                    col,
                    decode_value(cell_record, self._strings),
                    self._style(cell_record.get("s")),
                )
                cell._materialized = True
                row._cells[col] = cell

        for cell_range in archive.get("mergeCells", []):
            sheet.merge_cells(cell_range)

        for view in archive.get("views", []):
            if view.get("state") == "frozen":
                sheet.freeze_panes = view["topLeftCell"]
