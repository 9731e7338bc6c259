"""CSV output that learns its column names from the first record."""

from __future__ import annotations

from typing import TextIO, Union

MAX_TMP_STR = 64
SINGLE_INDEX_LEN = 4


def is_name_too_long(base_name: str, num_indices: int) -> bool:
    """Whether a name with this many ``[n]`` suffixes may exceed the limit."""
    return len(base_name) + num_indices * SINGLE_INDEX_LEN > MAX_TMP_STR


class IndexedName:
    """A field name with one to three bracketed indices, e.g. ``bw[0][1]``."""

    def __init__(self, base_name: str, *args: int) -> None:
        if not 1 <= len(args) <= 3:
            raise TypeError("IndexedName takes one to three indices")
        if is_name_too_long(base_name, len(args)):
            raise ValueError(
                f"Your string {base_name} is too long for the max stats size "
                f"({MAX_TMP_STR}), increase MAX_TMP_STR"
            )
        text = base_name + "".join(f"[{int(index)}]" for index in args)
        self.name = text[: MAX_TMP_STR - 1]

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"IndexedName({self.name!r})"


def _format_value(value: object) -> str:
    if isinstance(value, float):
        return format(value, "g")
    return str(value)


class CSVWriter:
    """Writes CSV records whose header is captured from the first record.

    Until the first :meth:`finalize`, names are collected as column headers
    and values are ignored. After it, names are ignored and values are
    written, one record per :meth:`finalize`.
    """

    def __init__(self, output: TextIO) -> None:
        self.output = output
        self.field_names: list[str] = []
        self.finalized = False
        self.idx = 0

    def add_field(self, name: Union[str, IndexedName]) -> "CSVWriter":
        """Record a column name while the header is still being collected."""
        if not self.finalized:
            self.field_names.append(str(name))
        return self

    def add_value(self, value: Union[int, float]) -> "CSVWriter":
        """Write a value once the header has been written."""
        if self.finalized:
            self.output.write(f"{_format_value(value)},")
            self.idx += 1
        return self

    def __lshift__(self, item: object) -> "CSVWriter":
        if isinstance(item, (str, IndexedName)):
            return self.add_field(item)
        return self.add_value(item)

    def finalize(self) -> None:
        """Finish the header on first call, otherwise finish the current record."""
        if not self.finalized:
            self.output.write("".join(f"{name}," for name in self.field_names))
            self.output.write("\n")
            self.output.flush()
            self.finalized = True
            return
        if self.idx < len(self.field_names):
            print(
                f" Number of fields doesn't match values (fields={self.idx}, "
                f"values={len(self.field_names)}), "
                "check each value has a field name before it"
            )
        self.idx = 0
        self.output.write("\n")