import re
from collections import namedtuple
from dataclasses import dataclass, fields
from dataclasses import replace as dataclass_replace
from typing import Dict, Optional, Union

from gridbook.constants import (
    BUILTIN_NUM_FMTS,
    DEFAULT_BORDER_COLOR,
    STYLE_FACETS,
    BorderStyle,
    FillPattern,
    HorizontalAlignment,
    UnderlineType,
    VerticalAlignment,
)

__all__ = [
    "RGB",
    "Alignment",
    "Border",
    "BorderEdge",
    "Fill",
    "Font",
    "Protection",
    "Style",
]

RGB = namedtuple("RGB", ["r", "g", "b"])

hex_color = re.compile(r"^#?(?:[0-9A-Fa-f]{2})?([0-9A-Fa-f]{6})$")


def rgb_color(color) -> RGB:
    """Raise a TypeError if a color is not a valid RGB value."""
    if color is None:
        return None
    if isinstance(color, RGB):
        return color
    if isinstance(color, tuple):
        if not (len(color) == 3 and all(isinstance(x, int) and 0 <= x <= 255 for x in color)):
            msg = "RGB color must be an RGB or a tuple of 3 integers"
            raise TypeError(msg)
        return RGB(*color)
    if isinstance(color, str):
        match = hex_color.match(color)
        if not match:
            msg = f"invalid hex color '{color}'"
            raise TypeError(msg)
        value = int(match.group(1), 16)
        return RGB((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)
    msg = "RGB color must be an RGB or a tuple of 3 integers"
    raise TypeError(msg)


def color_to_hex(color: RGB) -> str:
    if color is None:
        return None
    return "#{:02X}{:02X}{:02X}".format(*color)


def enum_member(enum_class, value, label: str):
    """Convert an enum member, value or name (any case, or camelCase) to a member."""
    if isinstance(value, enum_class):
        return value
    if isinstance(value, str):
        name = value.upper()
        if name not in enum_class.__members__:
            name = re.sub(r"(?<!^)(?=[A-Z])", "_", value).upper()
        if name not in enum_class.__members__:
            msg = f"invalid {label} '{value}'"
            raise TypeError(msg)
        return enum_class[name]
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return enum_class(value)
        except ValueError:
            msg = f"invalid {label} {value}"
            raise TypeError(msg) from None
    msg = f"{label} must be a {enum_class.__name__} or a name"
    raise TypeError(msg)


def enum_name(value) -> str:
    return None if value is None else value.name.lower()


def _check_bools(obj, *attrs):
    for attr in attrs:
        if not isinstance(getattr(obj, attr), bool):
            msg = f"{attr} argument must be boolean"
            raise TypeError(msg)


def _drop_none(archive: dict) -> dict:
    return {k: v for k, v in archive.items() if v is not None}


@dataclass(frozen=True)
class Font:
    """A font facet.

    Parameters
    ----------
    name: str, optional
        Font name, for example ``"Arial"``.
    size: float, optional
        Font size in points.
    bold: bool, optional, default: False
    italic: bool, optional, default: False
    underline: UnderlineType | str | bool, optional, default: UnderlineType.NONE
        ``True`` is a single underline.
    strikethrough: bool, optional, default: False
    outline: bool, optional, default: False
    color: RGB, optional
        Font color.
    family: int, optional
        Font family code.

    Raises
    ------
    TypeError:
        If arguments do not match the specified type.
    """

    name: Optional[str] = None
    size: Optional[float] = None
    bold: bool = False
    italic: bool = False
    underline: UnderlineType = UnderlineType.NONE
    strikethrough: bool = False
    outline: bool = False
    color: Optional[RGB] = None
    family: Optional[int] = None

    def __post_init__(self):
        if self.name is not None and not isinstance(self.name, str):
            msg = "font name must be a string"
            raise TypeError(msg)
        if self.size is not None:
            if not isinstance(self.size, (int, float)) or isinstance(self.size, bool):
                msg = "size must be a float number of points"
                raise TypeError(msg)
            object.__setattr__(self, "size", float(self.size))
        if self.family is not None and (
            not isinstance(self.family, int) or isinstance(self.family, bool)
        ):
            msg = "font family must be an integer"
            raise TypeError(msg)
        _check_bools(self, "bold", "italic", "strikethrough", "outline")
        underline = self.underline
        if isinstance(underline, bool):
            underline = UnderlineType.SINGLE if underline else UnderlineType.NONE
        object.__setattr__(self, "underline", enum_member(UnderlineType, underline, "underline"))
        object.__setattr__(self, "color", rgb_color(self.color))

    def to_archive(self) -> dict:
        return _drop_none(
            {
                "name": self.name,
                "size": self.size,
                "bold": self.bold,
                "italic": self.italic,
                "underline": enum_name(self.underline),
                "strike": self.strikethrough,
                "outline": self.outline,
                "color": color_to_hex(self.color),
                "family": self.family,
            }
        )

    @classmethod
    def from_archive(cls, archive: dict):
        family = archive.get("family")
        return cls(
            name=archive.get("name"),
            size=archive.get("size"),
            bold=archive.get("bold", False),
            italic=archive.get("italic", False),
            underline=archive.get("underline", "none"),
            strikethrough=archive.get("strike", False),
            outline=archive.get("outline", False),
            color=archive.get("color"),
            family=None if family is None else int(family),
        )


@dataclass(frozen=True)
class Fill:
    """A pattern fill facet.

    .. code-block:: python

        red_stripes = Fill("dark_vertical", fg_color=RGB(255, 0, 0))
    """

    pattern: FillPattern = FillPattern.NONE
    fg_color: Optional[RGB] = None
    bg_color: Optional[RGB] = None

    def __post_init__(self):
        object.__setattr__(self, "pattern", enum_member(FillPattern, self.pattern, "fill pattern"))
        object.__setattr__(self, "fg_color", rgb_color(self.fg_color))
        object.__setattr__(self, "bg_color", rgb_color(self.bg_color))

    def to_archive(self) -> dict:
        return _drop_none(
            {
                "pattern": enum_name(self.pattern),
                "fgColor": color_to_hex(self.fg_color),
                "bgColor": color_to_hex(self.bg_color),
            }
        )

    @classmethod
    def from_archive(cls, archive: dict):
        return cls(
            pattern=archive.get("pattern", "none"),
            fg_color=archive.get("fgColor"),
            bg_color=archive.get("bgColor"),
        )


@dataclass(frozen=True)
class BorderEdge:
    """The line style and color for one edge of a cell border."""

    style: BorderStyle = BorderStyle.THIN
    color: Optional[RGB] = None

    def __post_init__(self):
        object.__setattr__(self, "style", enum_member(BorderStyle, self.style, "border style"))
        color = self.color
        if color is None and self.style != BorderStyle.NONE:
            color = RGB(*DEFAULT_BORDER_COLOR)
        object.__setattr__(self, "color", rgb_color(color))

    def __str__(self) -> str:
        return f"BorderEdge(style={enum_name(self.style)}, color={self.color})"

    def to_archive(self) -> dict:
        return _drop_none({"style": enum_name(self.style), "color": color_to_hex(self.color)})

    @classmethod
    def from_archive(cls, archive: dict):
        return cls(style=archive["style"], color=archive.get("color"))


def border_edge(value) -> Optional[BorderEdge]:
    if value is None or isinstance(value, BorderEdge):
        return value
    if isinstance(value, (str, BorderStyle)):
        return BorderEdge(value)
    if isinstance(value, tuple) and len(value) == 2:
        return BorderEdge(*value)
    msg = "border edge must be a BorderEdge, a border style or a (style, color) tuple"
    raise TypeError(msg)


@dataclass(frozen=True)
class Border:
    """A cell border facet made of up to five edges.

    .. code-block:: python

        double_red = Border(*[BorderEdge("double", RGB(255, 0, 0))] * 4)
        thin = Border.all("thin")
    """

    top: Optional[BorderEdge] = None
    right: Optional[BorderEdge] = None
    bottom: Optional[BorderEdge] = None
    left: Optional[BorderEdge] = None
    diagonal: Optional[BorderEdge] = None
    diagonal_up: bool = False
    diagonal_down: bool = False

    def __post_init__(self):
        for side in ["top", "right", "bottom", "left", "diagonal"]:
            object.__setattr__(self, side, border_edge(getattr(self, side)))
        _check_bools(self, "diagonal_up", "diagonal_down")

    @classmethod
    def all(cls, style: Union[BorderStyle, str], color: Optional[RGB] = None):
        """Return a border with the same edge on all four sides."""
        edge = BorderEdge(style, color)
        return cls(top=edge, right=edge, bottom=edge, left=edge)

    def to_archive(self) -> dict:
        archive = {}
        for side in ["top", "right", "bottom", "left", "diagonal"]:
            edge = getattr(self, side)
            if edge is not None:
                archive[side] = edge.to_archive()
        if self.diagonal_up:
            archive["diagonalUp"] = True
        if self.diagonal_down:
            archive["diagonalDown"] = True
        return archive

    @classmethod
    def from_archive(cls, archive: dict):
        edges = {
            side: BorderEdge.from_archive(archive[side])
            for side in ["top", "right", "bottom", "left", "diagonal"]
            if archive.get(side) is not None
        }
        return cls(
            **edges,
            diagonal_up=archive.get("diagonalUp", False),
            diagonal_down=archive.get("diagonalDown", False),
        )


@dataclass(frozen=True)
class Alignment:
    """Horizontal and vertical alignment and text control for a cell."""

    horizontal: Optional[HorizontalAlignment] = None
    vertical: Optional[VerticalAlignment] = None
    wrap_text: bool = False
    indent: int = 0
    text_rotation: int = 0
    shrink_to_fit: bool = False

    def __post_init__(self):
        if self.horizontal is not None:
            object.__setattr__(
                self,
                "horizontal",
                enum_member(HorizontalAlignment, self.horizontal, "horizontal alignment"),
            )
        if self.vertical is not None:
            vertical = self.vertical
            if isinstance(vertical, str) and vertical.lower() == "center":
                vertical = VerticalAlignment.MIDDLE
            object.__setattr__(
                self, "vertical", enum_member(VerticalAlignment, vertical, "vertical alignment")
            )
        _check_bools(self, "wrap_text", "shrink_to_fit")
        if not isinstance(self.indent, int) or self.indent < 0:
            msg = "indent must be a positive integer"
            raise TypeError(msg)
        if not isinstance(self.text_rotation, int) or not -90 <= self.text_rotation <= 255:
            msg = "text rotation must be an integer number of degrees"
            raise TypeError(msg)

    def to_archive(self) -> dict:
        return _drop_none(
            {
                "horizontal": enum_name(self.horizontal),
                "vertical": enum_name(self.vertical),
                "wrapText": self.wrap_text,
                "indent": self.indent,
                "textRotation": self.text_rotation,
                "shrinkToFit": self.shrink_to_fit,
            }
        )

    @classmethod
    def from_archive(cls, archive: dict):
        return cls(
            horizontal=archive.get("horizontal"),
            vertical=archive.get("vertical"),
            wrap_text=archive.get("wrapText", False),
            indent=int(archive.get("indent", 0)),
            text_rotation=int(archive.get("textRotation", 0)),
            shrink_to_fit=archive.get("shrinkToFit", False),
        )


@dataclass(frozen=True)
class Protection:
    locked: bool = True
    hidden: bool = False

    def __post_init__(self):
        _check_bools(self, "locked", "hidden")

    def to_archive(self) -> dict:
        return {"locked": self.locked, "hidden": self.hidden}

    @classmethod
    def from_archive(cls, archive: dict):
        return cls(locked=archive.get("locked", True), hidden=archive.get("hidden", False))


FACET_TYPES = {
    "font": Font,
    "fill": Fill,
    "border": Border,
    "alignment": Alignment,
    "protection": Protection,
}


def num_fmt_code(value) -> Optional[str]:
    """Normalise a number format to its format code; built-in ids map to their codes."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        if value not in BUILTIN_NUM_FMTS:
            msg = f"{value} is not a built-in number format id"
            raise TypeError(msg)
        return BUILTIN_NUM_FMTS[value]
    msg = "number format must be a format code or a built-in format id"
    raise TypeError(msg)


def check_facet(facet: str, value):
    """Validate a single facet value and return it in normal form."""
    if facet not in STYLE_FACETS:
        msg = f"'{facet}' is not a style facet"
        raise AttributeError(msg)
    if facet == "num_fmt":
        return num_fmt_code(value)
    if value is not None and not isinstance(value, FACET_TYPES[facet]):
        type_name = FACET_TYPES[facet].__name__
        msg = f"{facet} must be a {type_name} object or None"
        raise TypeError(msg)
    return value


@dataclass(frozen=True)
class Style:
    """A cell style made of six independent facets.

    Styles are immutable values: two styles are equal when all their facets
    are equal, and changing a facet with :py:meth:`replace` returns a new
    style. A facet set to ``None`` is absent and can be inherited from row
    and column defaults.

    .. code-block:: python

        heading = Style(
            num_fmt="0.00%",
            font=Font("Arial", 14.0, bold=True),
            alignment=Alignment("center", "middle"),
        )
        sheet.cell("A1").style = heading

    Parameters
    ----------
    num_fmt: str | int, optional
        Number format code or a built-in number format id.
    font: Font, optional
    fill: Fill, optional
    border: Border, optional
    alignment: Alignment, optional
    protection: Protection, optional

    Raises
    ------
    TypeError:
        If a facet is not of the expected type.
    """

    num_fmt: Optional[str] = None
    font: Optional[Font] = None
    fill: Optional[Fill] = None
    border: Optional[Border] = None
    alignment: Optional[Alignment] = None
    protection: Optional[Protection] = None

    def __post_init__(self):
        for facet in STYLE_FACETS:
            object.__setattr__(self, facet, check_facet(facet, getattr(self, facet)))

    @property
    def is_empty(self) -> bool:
        """bool: ``True`` if no facet is defined."""
        return all(getattr(self, facet) is None for facet in STYLE_FACETS)

    def facets(self) -> Dict[str, object]:
        """Return a dict of the defined facets."""
        return {
            f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None
        }

    def replace(self, **facets):
        """Return a new style with the named facets replaced."""
        for facet in facets:
            if facet not in STYLE_FACETS:
                msg = f"'{facet}' is not a style facet"
                raise AttributeError(msg)
        return dataclass_replace(self, **facets)

    def merge(self, other: Optional["Style"]):
        """Return a new style with absent facets taken from ``other``."""
        if other is None:
            return self
        return Style(
            **{
                facet: getattr(self, facet)
                if getattr(self, facet) is not None
                else getattr(other, facet)
                for facet in STYLE_FACETS
            }
        )


def facet_property(facet: str, doc: str) -> property:
    """Create a property that reads and writes one style facet through the
    owner's ``_get_facet`` and ``_set_facet`` methods.
    """

    def getter(self):
        return self._get_facet(facet)

    def setter(self, value):
        self._set_facet(facet, value)

    return property(getter, setter, doc=doc)
