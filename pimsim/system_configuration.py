"""Simulator parameter store and the enumerated settings read from it."""

from __future__ import annotations

import re
import struct
from enum import Enum, IntEnum
from typing import Iterator, Mapping, Optional

from pimsim.parameter_reader import ParameterReader

_UINT32_MASK = 0xFFFFFFFF
_UINT64_LIMIT = 1 << 64

_INT_PREFIX = re.compile(r"[ \t\n\v\f\r]*([+-]?)(\d+)")
_FLOAT_PREFIX = re.compile(
    r"[ \t\n\v\f\r]*("
    r"[+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?"
    r"|inf(?:inity)?|nan)"
    r")",
    re.IGNORECASE,
)


class AddressMappingScheme(IntEnum):
    SCHEME1 = 1
    SCHEME2 = 2
    SCHEME3 = 3
    SCHEME4 = 4
    SCHEME5 = 5
    SCHEME6 = 6
    SCHEME7 = 7
    SCHEME8 = 8


class RowBufferPolicy(IntEnum):
    OPEN_PAGE = 0
    CLOSE_PAGE = 1


class QueuingStructure(IntEnum):
    PER_RANK = 0
    PER_RANK_PER_BANK = 1


class SchedulingPolicy(IntEnum):
    RANK_THEN_BANK_ROUND_ROBIN = 0
    BANK_THEN_RANK_ROUND_ROBIN = 1


class PIMMode(IntEnum):
    MAC_IN_BANKGROUP = 0
    MAC_IN_BANK = 1


class PIMPrecision(IntEnum):
    FP16 = 0
    INT8 = 1
    FP32 = 2


class DramMode(Enum):
    SB = 0
    HAB = 1
    HAB_PIM = 2


class PimBankType(Enum):
    EVEN_BANK = 0
    ODD_BANK = 1
    ALL_BANK = 2


def _parse_unsigned(text: str) -> int:
    """Parse a leading decimal integer the way an unsigned 64-bit parser does."""
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"invalid unsigned integer {text!r}")
    magnitude = int(match.group(2))
    if magnitude >= _UINT64_LIMIT:
        raise OverflowError(f"value {text!r} out of range")
    if match.group(1) == "-":
        return (-magnitude) % _UINT64_LIMIT
    return magnitude


def _parse_float32(text: str) -> float:
    """Parse a leading decimal float and round it to single precision."""
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"invalid float {text!r}")
    value = float(match.group(1))
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        raise OverflowError(f"value {text!r} out of range") from None


def _render(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ConfigStore:
    """Key/value store of simulator parameters, kept as text."""

    def __init__(self, values: Optional[Mapping[str, object]] = None) -> None:
        self._values: dict[str, str] = {}
        if values:
            for key, value in values.items():
                self.set(key, value)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def set(self, key: str, value: object) -> None:
        """Store a value; booleans are kept as ``true``/``false``."""
        self._values[key] = _render(value)

    def update_from_file(self, filename) -> None:
        """Add or replace every parameter found in a parameter file."""
        for key, value in ParameterReader(filename).parameters():
            self._values[key] = value

    def get_string(self, key: str) -> str:
        """The raw text of a parameter; a missing key raises ``KeyError``."""
        try:
            return self._values[key]
        except KeyError:
            raise KeyError(f"missing configuration parameter {key!r}") from None

    def get_uint(self, key: str) -> int:
        """A parameter as an unsigned 32-bit integer; 0 when missing."""
        return self.get_uint64(key) & _UINT32_MASK

    def get_uint64(self, key: str) -> int:
        """A parameter as an unsigned 64-bit integer; 0 when missing."""
        text = self._values.get(key)
        return 0 if text is None else _parse_unsigned(text)

    def get_float(self, key: str) -> float:
        """A parameter as a single-precision float; 0.0 when missing."""
        text = self._values.get(key)
        return 0.0 if text is None else _parse_float32(text)

    def get_bool(self, key: str) -> bool:
        """True only when the parameter is exactly ``true``."""
        return self._values.get(key) == "true"


def row_buffer_policy(store: ConfigStore) -> RowBufferPolicy:
    param = store.get_string("ROW_BUFFER_POLICY")
    if param == "open_page":
        return RowBufferPolicy.OPEN_PAGE
    if param == "close_page":
        return RowBufferPolicy.CLOSE_PAGE
    raise ValueError("Invalid row buffer policy")


def scheduling_policy(store: ConfigStore) -> SchedulingPolicy:
    param = store.get_string("SCHEDULING_POLICY")
    if param == "rank_then_bank_round_robin":
        return SchedulingPolicy.RANK_THEN_BANK_ROUND_ROBIN
    if param == "bank_then_rank_round_robin":
        return SchedulingPolicy.BANK_THEN_RANK_ROUND_ROBIN
    raise ValueError("Invalid scheduling policy")


def address_mapping_scheme(store: ConfigStore) -> AddressMappingScheme:
    param = store.get_string("ADDRESS_MAPPING_SCHEME").lower()
    for scheme in AddressMappingScheme:
        if param == f"scheme{scheme.value}":
            return scheme
    raise ValueError("Invalid address mapping scheme")


def queuing_structure(store: ConfigStore) -> QueuingStructure:
    param = store.get_string("QUEUING_STRUCTURE")
    if param == "per_rank_per_bank":
        return QueuingStructure.PER_RANK_PER_BANK
    if param == "per_rank":
        return QueuingStructure.PER_RANK
    raise ValueError("Invalid queueing structure")


def pim_mode(store: ConfigStore) -> PIMMode:
    param = store.get_string("PIM_MODE")
    if param == "mac_in_bankgroup":
        return PIMMode.MAC_IN_BANKGROUP
    if param == "mac_in_bank":
        return PIMMode.MAC_IN_BANK
    raise ValueError("Invalid PIM mode")


def pim_precision(store: ConfigStore) -> PIMPrecision:
    param = store.get_string("PIM_PRECISION")
    try:
        return PIMPrecision[param]
    except KeyError:
        raise ValueError("Invalid PIM precision") from None


_DATA_LENGTHS = {"FP16": 2, "INT8": 1, "FP32": 4}


def pim_data_length(store: ConfigStore) -> int:
    """Bytes per element for the configured PIM precision."""
    param = store.get_string("PIM_PRECISION")
    try:
        return _DATA_LENGTHS[param]
    except KeyError:
        raise ValueError("Invalid PIM data length") from None