import pytest

from gridbook import Font, Formula, Style, Workbook, __version__


@pytest.fixture(name="document")
def document_fixture(tmp_path):
    wb = Workbook()
    ws = wb.add_worksheet("Summary")
    ws.write("A1", "Item", style=Style(font=Font(bold=True)))
    ws.write("B1", "Cost")
    ws.write("A2", "Apples")
    ws.write("B2", 3.5)
    ws.write("C2", True)
    ws = wb.add_worksheet("Notes")
    ws.write("A1", Formula("Summary!B2*2", 7))
    filename = str(tmp_path / "test.gridbook")
    wb.save(filename)
    return filename


@pytest.mark.script_launch_mode("subprocess")
def test_no_documents(script_runner):
    ret = script_runner.run(["cat-gridbook"], print_result=False)
    assert ret.success
    assert "usage: cat-gridbook" in ret.stdout
    assert ret.stderr == ""


@pytest.mark.script_launch_mode("subprocess")
def test_version(script_runner):
    ret = script_runner.run(["cat-gridbook", "--version"], print_result=False)
    assert ret.success
    assert ret.stdout == __version__ + "\n"
    assert ret.stderr == ""


@pytest.mark.script_launch_mode("subprocess")
def test_help(script_runner):
    ret = script_runner.run(["cat-gridbook", "--help"], print_result=False)
    assert ret.success
    assert "List the names of sheets" in ret.stdout
    assert "Names of sheet" in ret.stdout
    assert ret.stderr == ""


@pytest.mark.script_launch_mode("subprocess")
def test_full_contents(script_runner, document):
    ret = script_runner.run(["cat-gridbook", document], print_result=False)
    assert ret.success
    assert ret.stdout == (
        f"{document}: Summary: A1: Item\n"
        f"{document}: Summary: B1: Cost\n"
        f"{document}: Summary: A2: Apples\n"
        f"{document}: Summary: B2: 3.5\n"
        f"{document}: Summary: C2: TRUE\n"
        f"{document}: Notes: A1: 7\n"
    )
    assert ret.stderr == ""


@pytest.mark.script_launch_mode("subprocess")
def test_brief_and_sheets(script_runner, document):
    ret = script_runner.run(["cat-gridbook", "-b", "-s", "Notes", document], print_result=False)
    assert ret.success
    assert ret.stdout == "A1: 7\n"

    ret = script_runner.run(["cat-gridbook", "--list-sheets", document], print_result=False)
    assert ret.success
    assert ret.stdout == f"{document}: Summary\n{document}: Notes\n"

    ret = script_runner.run(["cat-gridbook", "-S", "-b", document], print_result=False)
    assert not ret.success
    assert "not allowed with argument" in ret.stderr


@pytest.mark.script_launch_mode("subprocess")
def test_styles(script_runner, document):
    ret = script_runner.run(
        ["cat-gridbook", "--brief", "--styles", "--sheet", "Summary", document], print_result=False
    )
    assert ret.success
    lines = ret.stdout.splitlines()
    assert len(lines) == 5
    assert lines[0].startswith("A1: Item [font=Font(")
    assert "bold=True" in lines[0]
    assert lines[1] == "B1: Cost []"


@pytest.mark.script_launch_mode("subprocess")
def test_errors(script_runner, tmp_path):
    filename = tmp_path / "invalid.gridbook"
    filename.write_bytes(b"This is not a zip file")
    ret = script_runner.run(["cat-gridbook", str(filename)], print_result=False)
    assert not ret.success
    assert ret.stdout == ""
    assert ret.stderr == f"{filename}: invalid workbook document\n"


@pytest.mark.script_launch_mode("subprocess")
def test_debug(script_runner, document):
    ret = script_runner.run(["cat-gridbook", "--debug", "-S", document], print_result=False)
    assert ret.success
    assert "DEBUG:gridbook.file:read_workbook_file" in ret.stderr
    assert "DEBUG:gridbook.codec:decode: sheets=2" in ret.stderr
