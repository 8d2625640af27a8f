import json
import plistlib

import pytest

from gridbook import Workbook, __version__


@pytest.fixture(name="document")
def document_fixture(tmp_path):
    wb = Workbook(creator="Unpack Test")
    ws = wb.add_worksheet("Summary")
    ws.write("A1", "Item")
    ws.write("B1", 12)
    wb.add_worksheet("Notes")
    filename = tmp_path / "test.gridbook"
    wb.save(filename)
    return filename


@pytest.mark.script_launch_mode("subprocess")
def test_version(script_runner):
    ret = script_runner.run(["unpack-gridbook", "--version"], print_result=False)
    assert ret.stdout == __version__ + "\n"
    assert ret.stderr == ""
    assert ret.success


@pytest.mark.script_launch_mode("subprocess")
def test_help(script_runner):
    ret = script_runner.run(["unpack-gridbook", "--help"], print_result=False)
    assert "directory name to unpack into" in ret.stdout
    assert "document" in ret.stdout
    assert ret.stderr == ""
    assert ret.success

    ret = script_runner.run(["unpack-gridbook"], print_result=False)
    assert "directory name to unpack into" in ret.stdout
    assert ret.stderr == ""
    assert ret.success


@pytest.mark.script_launch_mode("subprocess")
def test_multi_doc_error(script_runner):
    ret = script_runner.run(["unpack-gridbook", "--output", "tmp", "foo", "bar"], print_result=False)
    assert not ret.success
    assert ret.stdout == ""
    assert "output directory only valid" in ret.stderr


@pytest.mark.script_launch_mode("subprocess")
def test_unpack_file(script_runner, tmp_path, document):
    output_dir = tmp_path / "unpacked"
    ret = script_runner.run(
        ["unpack-gridbook", "--output", str(output_dir), str(document)], print_result=False
    )
    assert ret.success
    assert ret.stdout == ""

    with open(output_dir / "Metadata/Properties.plist", "rb") as f:
        assert plistlib.load(f)["creator"] == "Unpack Test"
    with open(output_dir / "Index/Workbook.json") as f:
        data = json.load(f)
    sheets = data["messages"][0]["sheets"]
    assert [x["name"] for x in sheets] == ["Summary", "Notes"]
    assert sheets[0]["part"] == "Index/Worksheets/Sheet-1.iwa"
    with open(output_dir / "Index/SharedStrings.json") as f:
        data = json.load(f)
    assert data["messages"][0]["strings"] == [{"text": "Item"}]
    assert (output_dir / "Index/Worksheets/Sheet-2.json").exists()
    assert (output_dir / "Index/Styles.json").exists()


@pytest.mark.script_launch_mode("subprocess")
def test_unpack_default_dir(script_runner, tmp_path, document):
    ret = script_runner.run(["unpack-gridbook", "--compact-json", str(document)], print_result=False)
    assert ret.success
    with open(tmp_path / "test/Index/Worksheets/Sheet-1.json") as f:
        data = json.load(f)
    rows = data["messages"][0]["rows"]
    assert rows[0]["cells"][1] == {"c": 2.0, "t": "n", "v": 12.0}


@pytest.mark.script_launch_mode("subprocess")
def test_unpack_errors(script_runner, tmp_path):
    ret = script_runner.run(
        ["unpack-gridbook", "--output", str(tmp_path / "out"), str(tmp_path / "missing.gridbook")],
        print_result=False,
    )
    assert not ret.success
    assert "no such file or directory" in ret.stderr


@pytest.mark.script_launch_mode("subprocess")
def test_debug(script_runner, tmp_path, document):
    ret = script_runner.run(
        ["unpack-gridbook", "--debug", "--output", str(tmp_path / "out"), str(document)],
        print_result=False,
    )
    assert ret.success
    assert "DEBUG:gridbook.file:read_workbook_file" in ret.stderr
    assert "DEBUG:gridbook:store_file" in ret.stderr
