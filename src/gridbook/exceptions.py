__all__ = [
    "AddressParseError",
    "ContainerReadError",
    "ContainerWriteError",
    "DuplicateWorksheetName",
    "FileFormatError",
    "GridbookError",
    "UnknownStyleReference",
    "UnsupportedValueType",
    "UnsupportedWarning",
]


class GridbookError(Exception):
    """Base class for other exceptions."""


class AddressParseError(GridbookError, ValueError):
    """Raised for malformed cell addresses and ranges."""


class DuplicateWorksheetName(GridbookError, IndexError):
    """Raised when a worksheet name is already used in the workbook."""


class UnsupportedValueType(GridbookError, TypeError):
    """Raised for cell values or value descriptors that cannot be classified."""


class UnknownStyleReference(GridbookError):
    """Raised when a style identifier has no entry in the style table."""


class ContainerReadError(GridbookError):
    """Raised for IO and other OS errors while reading a document."""


class FileFormatError(ContainerReadError):
    """Raised for parsing errors during file load."""


class ContainerWriteError(GridbookError):
    """Raised for IO and other OS errors while saving a document."""


class UnsupportedWarning(Warning):
    """Raised for operations that are ignored or redirected."""
