import importlib.metadata

from gridbook import __version__, _get_version


def test_version():
    version = _get_version()
    assert version.count(".") == 2
    assert version == __version__
    assert version == importlib.metadata.version("gridbook")
