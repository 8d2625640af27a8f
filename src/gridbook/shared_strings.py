from typing import List, Union

from gridbook.exceptions import FileFormatError
from gridbook.styles import Font
from gridbook.values import RichText, TextRun


class SharedStrings:
    """Deduplicates plain and rich text values into indexes for a saved document.

    A plain string and a rich text value are never shared with each other,
    even when the rich text has the same plain text.
    """

    def __init__(self):
        self._by_key = []
        self._by_value = {}

    def lookup_key(self, value: Union[str, RichText]) -> int:
        """Return the index for a value, allocating the next index if it is new."""
        if value not in self._by_value:
            self._by_value[value] = len(self._by_key)
            self._by_key.append(value)
        return self._by_value[value]

    def lookup_value(self, key: int) -> Union[str, RichText]:
        if not isinstance(key, int) or key < 0 or key >= len(self._by_key):
            raise FileFormatError(f"no shared string with index {key}")
        return self._by_key[key]

    def __len__(self) -> int:
        return len(self._by_key)

    def to_archive(self) -> dict:
        strings = []
        for value in self._by_key:
            if isinstance(value, RichText):
                strings.append(
                    {
                        "runs": [
                            {"text": run.text}
                            if run.font is None
                            else {"text": run.text, "font": run.font.to_archive()}
                            for run in value.runs
                        ]
                    }
                )
            else:
                strings.append({"text": value})
        return {"strings": strings}

    @classmethod
    def from_archive(cls, archive: dict):
        shared = cls()
        for entry in archive.get("strings", []):
            if "runs" in entry:
                runs: List[TextRun] = [
                    TextRun(
                        run["text"],
                        None if run.get("font") is None else Font.from_archive(run["font"]),
                    )
                    for run in entry["runs"]
                ]
                value = RichText(runs)
            else:
                value = entry["text"]
            shared._by_key.append(value)
            shared._by_value.setdefault(value, len(shared._by_key) - 1)
        return shared
