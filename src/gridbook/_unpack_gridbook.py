import contextlib
import json
import logging
import os
import sys
from argparse import ArgumentParser
from dataclasses import dataclass

from compact_json import Formatter

from gridbook import __name__ as gridbook_name
from gridbook import _get_version
from gridbook.exceptions import GridbookError
from gridbook.file import read_workbook_file
from gridbook.partfile import PartFile

logger = logging.getLogger(gridbook_name)


@dataclass
class GridbookUnpacker:
    compact_json: bool = False
    output_dir: str = None

    def store_file(self, filename: str, blob) -> None:
        """Write one document part; ``.iwa`` parts are written as JSON."""
        self.ensure_directory_exists(filename)
        target_path = os.path.join(self.output_dir, filename)
        if isinstance(blob, PartFile):
            target_path = target_path.replace(".iwa", "")
            target_path += ".json"
            with open(target_path, "w") as out:
                data = blob.to_dict()
                if self.compact_json:
                    formatter = Formatter()
                    formatter.indent_spaces = 2
                    formatter.max_inline_complexity = 100
                    formatter.max_inline_length = 160
                    formatter.max_compact_list_complexity = 2
                    formatter.simple_bracket_padding = True
                    formatter.nested_bracket_padding = False
                    formatter.always_expand_depth = 10
                    out.write(formatter.serialize(data))
                else:
                    json.dump(data, out, sort_keys=True, indent=2)
            logger.debug("store_file: %s", target_path)
        elif not filename.endswith("/"):
            with open(target_path, "wb") as out:
                out.write(blob)

    def ensure_directory_exists(self, path: str):
        """Ensure that a path's directory exists."""
        parts = os.path.split(path)
        with contextlib.suppress(OSError):
            os.makedirs(os.path.join(*([self.output_dir, *list(parts[:-1])])))

    def unpack(self, document: str) -> None:
        for filename, blob in read_workbook_file(document).items():
            self.store_file(filename, blob)


def main():
    parser = ArgumentParser(description="Unpack the parts of a gridbook workbook")
    parser.add_argument("document", help="Workbook file(s)", nargs="*")
    parser.add_argument("-V", "--version", action="store_true")
    parser.add_argument(
        "--compact-json",
        action="store_true",
        help="Format JSON compactly as possible",
    )
    parser.add_argument("--output", "-o", help="directory name to unpack into")
    parser.add_argument("--debug", default=False, action="store_true", help="Enable debug logging")
    args = parser.parse_args()
    if args.version:
        print(_get_version())
    elif args.output is not None and len(args.document) > 1:
        print(
            "unpack-gridbook: error: output directory only valid with a single document",
            file=sys.stderr,
        )
        sys.exit(1)
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
        for document in args.document:
            output_dir = args.output or os.path.splitext(document)[0]
            try:
                GridbookUnpacker(compact_json=args.compact_json, output_dir=output_dir).unpack(
                    document
                )
            except GridbookError as e:
                print(f"{document}:", str(e), file=sys.stderr)
                sys.exit(1)


if __name__ == "__main__":
    # execute only if run as a script
    main()
