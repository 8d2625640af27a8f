import pytest


def pytest_addoption(parser):
    parser.addoption("--save-file", action="store", default=None)
    parser.addoption(
        "--max-check-fails",
        default=False,
        type=int,
        help="maximum number of pytest.check failures",
    )


@pytest.fixture(name="configurable_save_file")
def configurable_save_file_fixture(request, tmp_path, pytestconfig):
    if pytestconfig.getoption("save_file") is not None:
        new_filename = pytestconfig.getoption("save_file")
    else:
        new_filename = tmp_path / "test-save-new.gridbook"

    yield new_filename
