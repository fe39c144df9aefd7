"""Circular arena memory and the coding-byte helpers that read from it."""

from __future__ import annotations

from .op import DIR_SIZE, IND_SIZE, MEM_SIZE, ArgType, Op

_KIND_BY_BITS = {
    0b00: ArgType(0),
    0b01: ArgType.REG,
    0b10: ArgType.DIR,
    0b11: ArgType.IND,
}


def new_memory() -> bytearray:
    """Return a zeroed arena of MEM_SIZE bytes."""
    return bytearray(MEM_SIZE)


def read_int(memory: bytearray, index: int, size: int) -> int:
    """Read a signed big-endian integer of `size` bytes, wrapping around the arena."""
    if size <= 0:
        return 0
    raw = bytes(memory[(index + offset) % MEM_SIZE] for offset in range(size))
    return int.from_bytes(raw, "big", signed=True)


def write_int(memory: bytearray, index: int, value: int) -> None:
    """Write `value` as four big-endian bytes, wrapping around the arena."""
    data = (value & 0xFFFFFFFF).to_bytes(4, "big")
    for offset, byte in enumerate(data):
        memory[(index + offset) % MEM_SIZE] = byte


def load_program(memory: bytearray, program: bytes, address: int) -> None:
    """Copy a program body to `address`; bytes past the end of the arena are dropped."""
    room = max(0, MEM_SIZE - address)
    chunk = program[:room]
    memory[address:address + len(chunk)] = chunk


def format_dump(memory: bytearray) -> str:
    """Render memory as upper-case hex, 32 bytes per line."""
    lines = (
        " ".join(f"{byte:02X}" for byte in memory[start:start + 32])
        for start in range(0, len(memory), 32)
    )
    return "\n".join(lines) + "\n"


def decode_coding_byte(byte: int) -> tuple[ArgType, ...]:
    """Split a coding byte into its four argument kinds; an empty slot is ArgType(0)."""
    byte &= 0xFF
    return tuple(_KIND_BY_BITS[(byte >> shift) & 0b11] for shift in (6, 4, 2, 0))


def check_coding_byte(byte: int, op: Op) -> bool:
    """Tell whether the coding byte is acceptable for the instruction."""
    kinds = decode_coding_byte(byte)
    for kind, allowed in zip(kinds, op.types):
        if kind and not kind & allowed:
            return False
    return not any(kinds[op.nbr_args:])


def arg_size(kind: ArgType) -> int:
    """Number of bytes an argument of this kind takes in a plain instruction."""
    if kind == ArgType.REG:
        return 1
    if kind == ArgType.DIR:
        return DIR_SIZE
    if kind == ArgType.IND:
        return IND_SIZE
    return 0


def index_arg_size(kind: ArgType) -> int:
    """Number of bytes an argument of this kind takes in an index instruction."""
    if kind == ArgType.REG:
        return 1
    if kind in (ArgType.DIR, ArgType.IND):
        return 2
    return 0