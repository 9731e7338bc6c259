"""Reading and writing arrays in the NumPy ``.npy`` file format."""

from __future__ import annotations

import math
import re
import struct
import sys
from dataclasses import dataclass
from typing import BinaryIO, Iterable, Sequence

MAGIC = b"\x93NUMPY"

LITTLE_ENDIAN_CHAR = "<"
BIG_ENDIAN_CHAR = ">"
NO_ENDIAN_CHAR = "|"
HOST_ENDIAN_CHAR = BIG_ENDIAN_CHAR if sys.byteorder == "big" else LITTLE_ENDIAN_CHAR

HEADER_KEYS = ("descr", "fortran_order", "shape")

_TYPESTRING_RE = re.compile(r"'([<>|])([ifuc])(\d+)'")
_DIMENSION_RE = re.compile(r"[ \t\n\v\f\r]*\+?(\d+)")
_WHITESPACE = " \t"

# typecode -> (kind letter, struct element format, struct elements per item)
_TYPES: dict[str, tuple[str, str, int]] = {
    "f": ("f", "f", 1),
    "d": ("f", "d", 1),
    "b": ("i", "b", 1),
    "h": ("i", "h", 1),
    "i": ("i", "i", 1),
    "l": ("i", "l", 1),
    "q": ("i", "q", 1),
    "B": ("u", "B", 1),
    # unsigned 16-bit values carry raw half-precision floats
    "H": ("f", "H", 1),
    "I": ("u", "I", 1),
    "L": ("u", "L", 1),
    "Q": ("u", "Q", 1),
    "F": ("c", "f", 2),
    "D": ("c", "d", 2),
}


@dataclass(frozen=True)
class NpyHeader:
    """The contents of an ``.npy`` header dictionary."""

    descr: str
    fortran_order: bool
    shape: tuple[int, ...]


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if data is None or len(data) < size:
        raise OSError("io error: failed reading file")
    return data


def write_magic(stream: BinaryIO, major: int = 1, minor: int = 0) -> None:
    """Write the magic string followed by the format version."""
    stream.write(MAGIC)
    stream.write(bytes([major, minor]))


def read_magic(stream: BinaryIO) -> tuple[int, int]:
    """Read and check the magic string; return ``(major, minor)``."""
    buf = _read_exact(stream, len(MAGIC) + 2)
    if buf[: len(MAGIC)] != MAGIC:
        raise ValueError("this file does not have a valid npy format.")
    return buf[len(MAGIC)], buf[len(MAGIC) + 1]


def parse_typestring(typestring: str) -> tuple[str, str, int]:
    """Check a quoted typestring such as ``'<f8'``; return its parts."""
    match = _TYPESTRING_RE.fullmatch(typestring)
    if match is None:
        raise ValueError("invalid typestring")
    return match.group(1), match.group(2), int(match.group(3))


def trim(text: str) -> str:
    """Remove leading and trailing spaces and tabs."""
    return text.strip(_WHITESPACE)


def get_value_from_map(mapstr: str) -> str:
    """Return the trimmed text after the first colon, or ``""``."""
    _, sep, rest = mapstr.partition(":")
    if not sep:
        return ""
    return trim(rest)


def parse_dict(text: str, keys: Sequence[str]) -> dict[str, str]:
    """Split the text of a Python dict into raw values for known keys.

    The keys must not appear anywhere else in the text.
    """
    if not keys:
        return {}

    text = trim(text)
    if len(text) >= 2 and text[0] == "{" and text[-1] == "}":
        text = text[1:-1]
    else:
        raise ValueError("Not a Python dictionary.")

    positions = []
    for key in keys:
        pos = text.find(f"'{key}'")
        if pos == -1:
            raise ValueError(f"Missing '{key}' key.")
        positions.append((pos, key))
    positions.sort()

    bounds = [pos for pos, _ in positions[1:]] + [len(text)]
    result = {}
    for (begin, key), end in zip(positions, bounds):
        raw_value = trim(text[begin:end])
        if raw_value.endswith(","):
            raw_value = raw_value[:-1]
        result[key] = get_value_from_map(raw_value)
    return result


def parse_bool(text: str) -> bool:
    """Parse a Python boolean literal."""
    if text == "True":
        return True
    if text == "False":
        return False
    raise ValueError("Invalid python boolean.")


def parse_str(text: str) -> str:
    """Parse a single-quoted Python string literal."""
    if text and text[0] == "'" and text[-1] == "'":
        return text[1:-1]
    raise ValueError("Invalid python string.")


def parse_tuple(text: str) -> list[str]:
    """Split the text of a Python tuple into its raw items."""
    text = trim(text)
    if len(text) >= 2 and text[0] == "(" and text[-1] == ")":
        text = text[1:-1]
    else:
        raise ValueError("Invalid Python tuple.")
    items = text.split(",")
    if items[-1] == "":
        items.pop()
    return items


def write_tuple(values: Iterable[object]) -> str:
    """Render values as a Python tuple literal; empty input gives ``""``."""
    items = [str(v) for v in values]
    if not items:
        return ""
    if len(items) == 1:
        return f"({items[0]},)"
    return "(" + ", ".join(items) + ")"


def write_boolean(value: object) -> str:
    """Render the truth of ``value`` as a Python boolean literal."""
    return str(bool(value))


def _parse_dimension(item: str) -> int:
    match = _DIMENSION_RE.match(item)
    if match is None:
        raise ValueError(f"invalid shape dimension {item!r}")
    return int(match.group(1))


def parse_header(header: str) -> NpyHeader:
    """Parse the header dictionary text, including its trailing newline."""
    if not header.endswith("\n"):
        raise ValueError("invalid header")
    fields = parse_dict(header[:-1], HEADER_KEYS)
    if not fields:
        raise ValueError("invalid dictionary in header")

    descr_s = fields["descr"]
    parse_typestring(descr_s)
    descr = parse_str(descr_s)
    fortran_order = parse_bool(fields["fortran_order"])

    items = parse_tuple(fields["shape"])
    if not items:
        raise ValueError("invalid shape tuple in header")
    shape = tuple(_parse_dimension(item) for item in items)
    return NpyHeader(descr, fortran_order, shape)


def write_header_dict(descr: str, fortran_order: bool, shape: Iterable[int]) -> str:
    """Render the header dictionary text."""
    return (
        f"{{'descr': '{descr}', 'fortran_order': {write_boolean(fortran_order)}, "
        f"'shape': {write_tuple(shape)}, }}"
    )


def write_header(
    stream: BinaryIO, descr: str, fortran_order: bool, shape: Iterable[int]
) -> None:
    """Write magic, version, header length and the padded header."""
    header_dict = write_header_dict(descr, fortran_order, shape)

    length = len(MAGIC) + 2 + 2 + len(header_dict) + 1
    version = (1, 0)
    if length >= 255 * 255:
        length = len(MAGIC) + 2 + 4 + len(header_dict) + 1
        version = (2, 0)
    padding = " " * (16 - length % 16)

    write_magic(stream, *version)
    header_len = len(header_dict) + len(padding) + 1
    if version == (1, 0):
        stream.write(struct.pack("<H", header_len))
    else:
        stream.write(struct.pack("<I", header_len))
    stream.write((header_dict + padding + "\n").encode("latin-1"))


def read_header(stream: BinaryIO) -> str:
    """Read magic, version and length; return the raw header text."""
    version = read_magic(stream)
    if version == (1, 0):
        length_size = 2
    elif version == (2, 0):
        length_size = 4
    else:
        raise ValueError("unsupported file format version")
    header_length = int.from_bytes(_read_exact(stream, length_size), "little")
    return _read_exact(stream, header_length).decode("latin-1")


def comp_size(shape: Iterable[int]) -> int:
    """Number of elements of an array with this shape."""
    return math.prod(shape)


def _type_info(typecode: str) -> tuple[str, str, int]:
    try:
        return _TYPES[typecode]
    except KeyError:
        raise ValueError(f"unsupported typecode {typecode!r}") from None


def typestring_for(typecode: str) -> str:
    """The ``.npy`` typestring for a struct-style typecode on this host."""
    kind, fmt, count = _type_info(typecode)
    size = struct.calcsize(fmt) * count
    endian = NO_ENDIAN_CHAR if fmt in ("b", "B") else HOST_ENDIAN_CHAR
    return f"{endian}{kind}{size}"


def save_array(
    filename,
    fortran_order: bool,
    shape: Iterable[int],
    data: Iterable,
    typecode: str,
) -> None:
    """Write ``data`` as an ``.npy`` file of the given shape and element type."""
    typestring = typestring_for(typecode)
    _, fmt, count = _type_info(typecode)
    shape = list(shape)
    size = comp_size(shape)
    values = list(data)
    if len(values) < size:
        raise ValueError(f"data holds {len(values)} elements, shape needs {size}")
    values = values[:size]
    if count == 2:
        flat = [part for z in values for part in (complex(z).real, complex(z).imag)]
    else:
        flat = values
    payload = struct.pack(f"@{len(flat)}{fmt}", *flat)

    with open(filename, "wb") as stream:
        write_header(stream, typestring, fortran_order, shape)
        stream.write(payload)


def load_array(filename, typecode: str) -> tuple[list[int], list]:
    """Read an ``.npy`` file of the given element type; return ``(shape, data)``."""
    expected = typestring_for(typecode)
    _, fmt, count = _type_info(typecode)
    with open(filename, "rb") as stream:
        header = parse_header(read_header(stream))
        if header.descr != expected:
            raise ValueError("formatting error: typestrings not matching")
        n_items = comp_size(header.shape) * count
        layout = f"@{n_items}{fmt}"
        nbytes = struct.calcsize(layout)
        raw = stream.read(nbytes)
        if len(raw) < nbytes:
            raise ValueError("npy data is truncated")
    flat = struct.unpack(layout, raw)
    if count == 2:
        values = [complex(re_, im) for re_, im in zip(flat[0::2], flat[1::2])]
    else:
        values = list(flat)
    return list(header.shape), values