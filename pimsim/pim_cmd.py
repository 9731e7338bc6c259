"""PIM instruction set: command encoding, decoding and disassembly."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

_WORD_MASK = 0xFFFFFFFF


class PIMCmdType(IntEnum):
    NOP = 0
    ADD = 1
    MUL = 2
    MAC = 3
    MAD = 4
    REV0 = 5
    REV1 = 6
    REV2 = 7
    MOV = 8
    FILL = 9
    REV3 = 10
    REV4 = 11
    REV5 = 12
    REV6 = 13
    JUMP = 14
    EXIT = 15


class PIMOpdType(IntEnum):
    A_OUT = 0
    M_OUT = 1
    EVEN_BANK = 2
    ODD_BANK = 3
    GRF_A = 4
    GRF_B = 5
    SRF_M = 6
    SRF_A = 7


class InvalidPIMCommand(ValueError):
    """Raised for a command that the instruction set does not allow."""


_NAMED_TYPES = {
    PIMCmdType.EXIT,
    PIMCmdType.NOP,
    PIMCmdType.JUMP,
    PIMCmdType.FILL,
    PIMCmdType.MOV,
    PIMCmdType.ADD,
    PIMCmdType.MUL,
    PIMCmdType.MAC,
    PIMCmdType.MAD,
}
_MOVES = (PIMCmdType.FILL, PIMCmdType.MOV)
_ARITHMETIC = (PIMCmdType.ADD, PIMCmdType.MUL, PIMCmdType.MAC, PIMCmdType.MAD)
_BANKS = (PIMOpdType.EVEN_BANK, PIMOpdType.ODD_BANK)
_GRFS = (PIMOpdType.GRF_A, PIMOpdType.GRF_B)
_INDEXED = (PIMOpdType.GRF_A, PIMOpdType.GRF_B, PIMOpdType.SRF_M, PIMOpdType.SRF_A)


def _bitmask(bit_len: int) -> int:
    return (1 << bit_len) - 1


def to_bit(val: int, bit_len: int, bit_pos: int) -> int:
    """Place the low ``bit_len`` bits of ``val`` at ``bit_pos`` in a 32-bit word."""
    return ((int(val) & _bitmask(bit_len)) << bit_pos) & _WORD_MASK


def from_bit(val: int, bit_len: int, bit_pos: int) -> int:
    """Extract ``bit_len`` bits starting at ``bit_pos``."""
    return (int(val) >> bit_pos) & _bitmask(bit_len)


def opd_to_str(opd: PIMOpdType, idx: int = 0) -> str:
    """Assembly text of an operand."""
    opd = PIMOpdType(opd)
    if opd in _INDEXED:
        return f"{opd.name}[{idx}]"
    return opd.name


@dataclass(eq=False)
class PIMCmd:
    """One PIM command word."""

    type: PIMCmdType = PIMCmdType.NOP
    dst: PIMOpdType = PIMOpdType.A_OUT
    src0: PIMOpdType = PIMOpdType.A_OUT
    src1: PIMOpdType = PIMOpdType.A_OUT
    src2: PIMOpdType = PIMOpdType.A_OUT
    loop_counter: int = 0
    loop_offset: int = 0
    is_auto: int = 0
    dst_idx: int = 0
    src0_idx: int = 0
    src1_idx: int = 0
    is_relu: int = 0

    def validate(self) -> None:
        """Reject moves from a general register file into a bank."""
        if self.type in _MOVES and self.dst in _BANKS:
            if any(src in _GRFS for src in (self.src0, self.src1, self.src2)):
                raise InvalidPIMCommand(f"Invalid in ISA 1.0 {self}")

    def to_int(self) -> int:
        """Encode the command as a 32-bit word."""
        self.validate()
        val = to_bit(self.type, 4, 28)
        if self.type == PIMCmdType.NOP:
            val |= to_bit(self.loop_counter, 11, 0)
        elif self.type == PIMCmdType.JUMP:
            val |= to_bit(self.loop_counter, 17, 11)
            val |= to_bit(self.loop_offset, 11, 0)
        elif self.type in _MOVES:
            val |= to_bit(self.dst, 3, 25)
            val |= to_bit(self.src0, 3, 22)
            val |= to_bit(self.dst_idx, 4, 8)
            val |= to_bit(self.src0_idx, 4, 4)
            val |= to_bit(self.src1_idx, 4, 0)
            val |= to_bit(self.is_relu, 1, 12)
        elif self.type in _ARITHMETIC:
            if self.type == PIMCmdType.MAD:
                val |= to_bit(self.src2, 3, 16)
            val |= to_bit(self.dst, 3, 25)
            val |= to_bit(self.src0, 3, 22)
            val |= to_bit(self.src1, 3, 19)
            val |= to_bit(self.is_auto, 1, 15)
            val |= to_bit(self.dst_idx, 4, 8)
            val |= to_bit(self.src0_idx, 4, 4)
            val |= to_bit(self.src1_idx, 4, 0)
        return val

    def __str__(self) -> str:
        name = self.type.name if self.type in _NAMED_TYPES else "NOT_DEFINED"
        text = f"{name} "
        if self.type == PIMCmdType.NOP:
            text += f"{self.loop_counter + 1}x"
        elif self.type == PIMCmdType.JUMP:
            text += f"{self.loop_counter}x [PC - {self.loop_offset}]"
        elif self.type in _MOVES:
            text += f"{opd_to_str(self.dst, self.dst_idx)}, "
            text += opd_to_str(self.src0, self.src0_idx)
            if self.is_relu:
                text += ", relu"
        elif self.type in (PIMCmdType.ADD, PIMCmdType.MUL, PIMCmdType.MAC):
            text += ", ".join(
                (
                    opd_to_str(self.dst, self.dst_idx),
                    opd_to_str(self.src0, self.src0_idx),
                    opd_to_str(self.src1, self.src1_idx),
                )
            )
        elif self.type == PIMCmdType.MAD:
            text += ", ".join(
                (
                    opd_to_str(self.dst, self.dst_idx),
                    opd_to_str(self.src0, self.src0_idx),
                    opd_to_str(self.src1, self.src1_idx),
                    opd_to_str(self.src2, self.src1_idx),
                )
            )
        if self.is_auto:
            text += ", auto"
        return text

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PIMCmd):
            return NotImplemented
        return self.to_int() == other.to_int()


def decode(value: int) -> PIMCmd:
    """Decode a 32-bit command word; fields the type does not carry keep defaults."""
    cmd = PIMCmd(type=PIMCmdType(from_bit(value, 4, 28)))
    if cmd.type == PIMCmdType.NOP:
        cmd.loop_counter = from_bit(value, 11, 0)
    elif cmd.type == PIMCmdType.JUMP:
        cmd.loop_counter = from_bit(value, 17, 11)
        cmd.loop_offset = from_bit(value, 11, 0)
    elif cmd.type in _MOVES:
        cmd.dst = PIMOpdType(from_bit(value, 3, 25))
        cmd.src0 = PIMOpdType(from_bit(value, 3, 22))
        cmd.is_relu = from_bit(value, 1, 12)
        cmd.dst_idx = from_bit(value, 4, 8)
        cmd.src0_idx = from_bit(value, 4, 4)
        cmd.src1_idx = from_bit(value, 4, 0)
    elif cmd.type in _ARITHMETIC:
        if cmd.type == PIMCmdType.MAD:
            cmd.src2 = PIMOpdType(from_bit(value, 3, 16))
        cmd.dst = PIMOpdType(from_bit(value, 3, 25))
        cmd.src0 = PIMOpdType(from_bit(value, 3, 22))
        cmd.src1 = PIMOpdType(from_bit(value, 3, 19))
        cmd.is_auto = from_bit(value, 1, 15)
        cmd.dst_idx = from_bit(value, 4, 8)
        cmd.src0_idx = from_bit(value, 4, 4)
        cmd.src1_idx = from_bit(value, 4, 0)
    return cmd