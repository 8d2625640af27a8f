import logging
from typing import Dict, Iterator, Tuple

from gridbook.constants import (
    BUILTIN_NUM_FMT_IDS,
    BUILTIN_NUM_FMTS,
    FIRST_CUSTOM_NUM_FMT_ID,
    INTERNED_FACETS,
)
from gridbook.exceptions import UnknownStyleReference
from gridbook.styles import Alignment, Border, Fill, Font, Protection, Style, num_fmt_code

logger = logging.getLogger(__name__)
debug = logger.debug

__all__ = ["StyleTable"]


class FacetList:
    """Interning list for one kind of value with append-only key generation."""

    def __init__(self, name: str, first_key: int = 0):
        self._name = name
        self._by_key = {}
        self._by_value = {}
        self._next_key = first_key

    def lookup_key(self, value) -> int:
        """Return the key associated with a value. If the value has not
        been seen before, allocate a new entry with the next available key.
        """
        if value not in self._by_value:
            key = self._next_key
            self._next_key += 1
            self._by_key[key] = value
            self._by_value[value] = key
        return self._by_value[value]

    def lookup_value(self, key: int):
        """Return the value stored with a key."""
        try:
            return self._by_key[key]
        except (KeyError, TypeError):
            msg = f"no {self._name} with id {key}"
            raise UnknownStyleReference(msg) from None

    def add(self, key: int, value) -> None:
        """Store a value with a known key, as read from a document."""
        self._by_key[key] = value
        self._by_value.setdefault(value, key)
        self._next_key = max(self._next_key, key + 1)

    def items(self) -> Iterator[Tuple[int, object]]:
        return iter(sorted(self._by_key.items()))

    def __contains__(self, key: int) -> bool:
        return key in self._by_key

    def __len__(self) -> int:
        return len(self._by_key)


class NumFmtList(FacetList):
    """Number formats: built-in codes resolve to reserved ids and are never stored."""

    def __init__(self):
        super().__init__("number format", FIRST_CUSTOM_NUM_FMT_ID)

    def lookup_key(self, value: str) -> int:
        if value in BUILTIN_NUM_FMT_IDS:
            return BUILTIN_NUM_FMT_IDS[value]
        return super().lookup_key(value)

    def lookup_value(self, key: int) -> str:
        if key in BUILTIN_NUM_FMTS:
            return BUILTIN_NUM_FMTS[key]
        return super().lookup_value(key)


class StyleTable:
    """Deduplicates styles into compact identifiers for persistence.

    Each facet that is shared by reference in a saved document (number
    format, font, fill and border) has its own sub-table; a composite
    cell style is the tuple of those facet ids plus the alignment and
    protection values. Deep-equal styles always receive the same id from
    one table, and ids are allocated in first-seen order.

    A table belongs to a single save or load and is not reused across
    documents.
    """

    def __init__(self):
        self._facets = {
            "num_fmt": NumFmtList(),
            "font": FacetList("font"),
            "fill": FacetList("fill"),
            "border": FacetList("border"),
        }
        self._composites = FacetList("cell style")
        self._styles = {}

    @property
    def num_fmts(self) -> FacetList:
        return self._facets["num_fmt"]

    @property
    def fonts(self) -> FacetList:
        return self._facets["font"]

    @property
    def fills(self) -> FacetList:
        return self._facets["fill"]

    @property
    def borders(self) -> FacetList:
        return self._facets["border"]

    def intern_facet(self, facet: str, value) -> int:
        """Return the id for a number format, font, fill or border value."""
        if facet not in self._facets:
            msg = f"'{facet}' is not an interned style facet"
            raise KeyError(msg)
        if value is None:
            return None
        return self._facets[facet].lookup_key(value)

    def resolve_facet(self, facet: str, facet_id: int):
        if facet_id is None:
            return None
        return self._facets[facet].lookup_value(facet_id)

    def intern_composite(self, style: Style) -> int:
        """Return the composite id for a style."""
        record = tuple(self.intern_facet(facet, getattr(style, facet)) for facet in INTERNED_FACETS)
        record += (style.alignment, style.protection)
        style_id = self._composites.lookup_key(record)
        self._styles.setdefault(style_id, style)
        return style_id

    def resolve(self, style_id: int) -> Style:
        """Return the style for a composite id.

        Raises
        ------
        UnknownStyleReference:
            If there is no style with that id.
        """
        if style_id not in self._styles:
            record = self._composites.lookup_value(style_id)
            facets = {
                facet: self.resolve_facet(facet, facet_id)
                for facet, facet_id in zip(INTERNED_FACETS, record[0:4])
            }
            self._styles[style_id] = Style(
                **facets,
                alignment=record[4],
                protection=record[5],
            )
        return self._styles[style_id]

    def __len__(self) -> int:
        return len(self._composites)

    def to_archive(self) -> Dict[str, list]:
        """Return the persisted cross-reference lists for the table."""
        cell_styles = []
        for _, record in self._composites.items():
            (num_fmt_id, font_id, fill_id, border_id, alignment, protection) = record
            cell_styles.append(
                {
                    "numFmtId": num_fmt_id,
                    "fontId": font_id,
                    "fillId": fill_id,
                    "borderId": border_id,
                    "alignment": None if alignment is None else alignment.to_archive(),
                    "protection": None if protection is None else protection.to_archive(),
                }
            )
        return {
            "numFmts": [
                {"id": num_fmt_id, "formatCode": code} for num_fmt_id, code in self.num_fmts.items()
            ],
            "fonts": [font.to_archive() for _, font in self.fonts.items()],
            "fills": [fill.to_archive() for _, fill in self.fills.items()],
            "borders": [border.to_archive() for _, border in self.borders.items()],
            "cellStyles": cell_styles,
        }

    @classmethod
    def from_archive(cls, archive: dict):
        """Rebuild a table from persisted lists, checking every cross-reference.

        Raises
        ------
        UnknownStyleReference:
            If a cell style refers to a facet id that is not defined.
        """
        table = cls()
        for entry in archive.get("numFmts", []):
            table.num_fmts.add(int(entry["id"]), num_fmt_code(entry["formatCode"]))
        for facet_list, facet_class, name in [
            (table.fonts, Font, "fonts"),
            (table.fills, Fill, "fills"),
            (table.borders, Border, "borders"),
        ]:
            for key, entry in enumerate(archive.get(name, [])):
                facet_list.add(key, facet_class.from_archive(entry))

        for key, entry in enumerate(archive.get("cellStyles", [])):
            facet_ids = []
            for facet, field in zip(INTERNED_FACETS, ["numFmtId", "fontId", "fillId", "borderId"]):
                facet_id = entry.get(field)
                if facet_id is not None:
                    facet_id = int(facet_id)
                    # Fail now rather than when a cell is reconstructed
                    table.resolve_facet(facet, facet_id)
                facet_ids.append(facet_id)
            alignment = entry.get("alignment")
            protection = entry.get("protection")
            record = (
                *facet_ids,
                None if alignment is None else Alignment.from_archive(alignment),
                None if protection is None else Protection.from_archive(protection),
            )
            table._composites.add(key, record)

        debug(
            "from_archive: num_fmts=%d, fonts=%d, fills=%d, borders=%d, cell_styles=%d",
            len(table.num_fmts),
            len(table.fonts),
            len(table.fills),
            len(table.borders),
            len(table),
        )
        return table
