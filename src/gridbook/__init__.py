"""Build, inspect and save spreadsheet workbooks with inherited cell styles."""

import importlib.metadata
import warnings

with warnings.catch_warnings():
    # Protobuf
    warnings.filterwarnings("ignore", category=DeprecationWarning)
    from gridbook.cell import *  # noqa: F403
    from gridbook.constants import *  # noqa: F403
    from gridbook.document import *  # noqa: F403
    from gridbook.exceptions import *  # noqa: F403
    from gridbook.resolver import *  # noqa: F403
    from gridbook.style_table import *  # noqa: F403
    from gridbook.styles import *  # noqa: F403
    from gridbook.utils import *  # noqa: F403
    from gridbook.values import *  # noqa: F403

__version__ = importlib.metadata.version("gridbook")


def _get_version() -> str:
    return __version__
