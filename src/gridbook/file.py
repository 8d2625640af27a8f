import logging
import os
import plistlib
import tempfile
import warnings
from io import BytesIO
from pathlib import Path
from sys import version_info
from typing import Dict, Union
from zipfile import ZIP_DEFLATED, BadZipFile, ZipFile

from gridbook.constants import PROPERTIES_PART, SUPPORTED_FILE_FORMAT_VERSIONS
from gridbook.exceptions import ContainerReadError, ContainerWriteError, FileFormatError
from gridbook.partfile import PartFile, is_part_file

logger = logging.getLogger(__name__)
debug = logger.debug

FileStore = Dict[str, Union[PartFile, bytes]]


def open_zipfile(source):
    """Open Zip file with the correct filename encoding supported by current python"""
    # Coverage is python version dependent, so one path with always fail coverage
    if version_info.minor >= 11:  # pragma: no cover
        return ZipFile(source, metadata_encoding="utf-8")
    else:  # pragma: no cover
        return ZipFile(source)


def read_properties(blob: bytes) -> dict:
    """Parse the document properties and warn about unknown format versions."""
    try:
        properties = plistlib.loads(blob)
    except (plistlib.InvalidFileException, ValueError) as e:
        raise FileFormatError("invalid document properties") from e
    if not isinstance(properties, dict) or "fileFormatVersion" not in properties:
        raise FileFormatError("invalid document properties (missing fileFormatVersion)")
    doc_version = properties["fileFormatVersion"]
    if doc_version not in SUPPORTED_FILE_FORMAT_VERSIONS:
        warnings.warn(f"unsupported version {doc_version}", RuntimeWarning, stacklevel=2)
    return properties


def read_workbook_file(filepath) -> FileStore:
    """
    Read every part of a workbook document.

    Parameters
    ----------
    filepath: str | Path | BinaryIO
        The document path or a binary file object.

    Returns
    -------
    Dict[str, PartFile | bytes]:
        Parts keyed by their name in the archive; ``.iwa`` parts are decoded.

    Raises
    ------
    ContainerReadError:
        If the document cannot be opened.
    FileFormatError:
        If the document is not a valid archive or a part cannot be decoded.
    """
    if isinstance(filepath, str):
        filepath = Path(filepath)
    debug("read_workbook_file: path=%s", filepath)
    try:
        zipf = open_zipfile(filepath)
    except BadZipFile:
        raise FileFormatError("invalid workbook document") from None
    except FileNotFoundError:
        raise ContainerReadError("no such file or directory") from None
    except OSError as e:
        raise ContainerReadError(str(e)) from e

    file_store = {}
    with zipf:
        try:
            for filename in zipf.namelist():
                blob = zipf.read(filename)
                if filename.endswith(".iwa"):
                    file_store[filename] = extract_part(blob, filename)
                else:
                    file_store[filename] = blob
        except BadZipFile as e:
            raise FileFormatError("invalid workbook document") from e
        except OSError as e:
            raise ContainerReadError(str(e)) from e

    if PROPERTIES_PART not in file_store:
        raise FileFormatError("invalid workbook document (missing files)")
    return file_store


def extract_part(blob: bytes, filename: str) -> PartFile:
    if not is_part_file(blob):
        raise FileFormatError(f"{filename}: invalid part file")
    try:
        debug("extract_part: filename=%s", filename)
        return PartFile.from_buffer(blob, filename)
    except ValueError as e:
        raise FileFormatError(f"{filename}: invalid part file") from e


def _write_archive(fh, file_store: FileStore) -> None:
    with ZipFile(fh, "w", ZIP_DEFLATED) as zipf:
        for filename, blob in file_store.items():
            if isinstance(blob, PartFile):
                zipf.writestr(filename, blob.to_buffer())
            else:
                zipf.writestr(filename, blob)


def write_workbook_file(filepath, file_store: FileStore) -> None:
    """
    Write a workbook document.

    A path is written through a temporary file in the same directory which
    replaces the destination only once the archive is complete. A file
    object receives the archive in a single write after it is complete.

    Raises
    ------
    ContainerWriteError:
        If any part cannot be encoded or the archive cannot be written.
    """
    debug("write_workbook_file: path=%s, parts=%d", filepath, len(file_store))
    if hasattr(filepath, "write"):
        buffer = BytesIO()
        try:
            _write_archive(buffer, file_store)
            filepath.write(buffer.getvalue())
        except (OSError, ValueError, TypeError) as e:
            raise ContainerWriteError(f"failed to write document: {e}") from e
        return

    filepath = Path(filepath)
    tmp_path = None
    try:
        (fd, tmp_path) = tempfile.mkstemp(
            prefix=f".{filepath.name}.", suffix=".tmp", dir=filepath.parent
        )
        with os.fdopen(fd, "wb") as fh:
            _write_archive(fh, file_store)
        os.replace(tmp_path, filepath)
        tmp_path = None
    except (OSError, ValueError, TypeError) as e:
        raise ContainerWriteError(f"failed to write {filepath}: {e}") from e
    finally:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
