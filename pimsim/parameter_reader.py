"""Reader for ``key = value`` parameter files with ``;`` comments."""

from __future__ import annotations

from typing import Iterable

_COMMENT = ";"
_EQUAL = "="


class ParameterReaderError(Exception):
    """Raised when a parameter file cannot be read or parsed."""

    def __init__(self, message: str, line: int = 0) -> None:
        self.line = line
        suffix = f", line: {line}" if line else ""
        super().__init__(message + suffix)


def parse_parameter_lines(
    lines: Iterable[str], filename: str = ""
) -> list[tuple[str, str]]:
    """Parse lines into ``(key, value)`` pairs.

    Spaces and tabs are removed, lines starting with ``;`` are comments and
    a ``;`` after the value starts a trailing comment. Line numbers count
    from zero.
    """
    params = []
    for number, raw in enumerate(lines):
        line = raw.removesuffix("\n")
        if not line:
            continue
        line = line.replace(" ", "").replace("\t", "")
        if line.startswith(_COMMENT):
            continue
        if line.count(_EQUAL) != 1:
            raise ParameterReaderError(f"{filename} has invalid parameter", number)

        eq = line.index(_EQUAL)
        key = line[:eq]
        comment = line.find(_COMMENT)
        if comment > eq:
            value = line[eq + 1 : comment]
        else:
            value = line[eq + 1 :]

        if not key or not value:
            raise ParameterReaderError("Cannot parse parameter", number)
        params.append((key, value))
    return params


class ParameterReader:
    """Reads the parameters of one file."""

    def __init__(self, filename, is_system_param: bool = False) -> None:
        self.filename = str(filename)
        self.is_system_param = is_system_param
        try:
            with open(filename, encoding="utf-8") as handle:
                self._text = handle.read()
        except UnicodeDecodeError as exc:
            raise ParameterReaderError(f"Failed to read {self.filename}") from exc
        except OSError as exc:
            raise ParameterReaderError(f"Failed to open {self.filename}") from exc

    def parameters(self) -> list[tuple[str, str]]:
        """Return the file's parameters as ``(key, value)`` pairs in order."""
        return parse_parameter_lines(self._text.split("\n"), self.filename)