import argparse
import logging
import sys

from gridbook import Workbook, _get_version
from gridbook import __name__ as gridbook_name
from gridbook.exceptions import GridbookError

logger = logging.getLogger(gridbook_name)


def command_line_parser():
    parser = argparse.ArgumentParser(description="Export cells from gridbook workbooks")
    commands = parser.add_mutually_exclusive_group()
    commands.add_argument(
        "-S",
        "--list-sheets",
        action="store_true",
        help="List the names of sheets and exit",
    )
    commands.add_argument(
        "-b",
        "--brief",
        action="store_true",
        default=False,
        help="Don't prefix cells with the document and sheet name (default: false)",
    )
    parser.add_argument("-V", "--version", action="store_true")
    parser.add_argument(
        "--styles",
        action="store_true",
        help="Print the effective style of each cell",
    )
    parser.add_argument(
        "-s", "--sheet", action="append", help="Names of sheet(s) to include in export"
    )
    parser.add_argument("document", nargs="*", help="Document(s) to export")
    parser.add_argument("--debug", default=False, action="store_true", help="Enable debug logging")
    return parser


def print_sheet_names(filename):
    for sheet in Workbook(filename).worksheets:
        print(f"{filename}: {sheet.name}")


def style_as_string(style) -> str:
    return ", ".join(f"{facet}={value}" for facet, value in style.facets().items())


def print_cells(args, filename):
    for sheet in Workbook(filename).worksheets:
        if args.sheet is not None and sheet.name not in args.sheet:
            continue
        for row in sheet.rows:
            for cell in row:
                line = f"{cell.address}: {cell.text}"
                if args.styles:
                    line += f" [{style_as_string(cell.style)}]"
                if not args.brief:
                    line = f"{filename}: {sheet.name}: " + line
                print(line)


def main():
    parser = command_line_parser()
    args = parser.parse_args()

    if args.version:
        print(_get_version())
    elif len(args.document) == 0:
        parser.print_help()
    else:
        hdlr = logging.StreamHandler()
        hdlr.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))
        logger.addHandler(hdlr)
        if args.debug:
            logger.setLevel("DEBUG")
        else:
            logger.setLevel("ERROR")
        for filename in args.document:
            try:
                if args.list_sheets:
                    print_sheet_names(filename)
                else:
                    print_cells(args, filename)
            except GridbookError as e:
                print(f"{filename}:", str(e), file=sys.stderr)
                sys.exit(1)


if __name__ == "__main__":
    # execute only if run as a script
    main()  # pragma: no cover
