"""Handlers for the sixteen instructions.

Each handler takes the machine and the process that executes the
instruction. The machine provides ``memory`` (the arena), ``champions``
(the top-level processes, one per player), ``nb_live`` (the count of
``live`` calls) and ``out`` (a text stream for messages).
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Sequence
from typing import Any

from .champion import Champion
from .memory import (
    arg_size,
    check_coding_byte,
    decode_coding_byte,
    index_arg_size,
    read_int,
    write_int,
)
from .op import DIR_SIZE, IDX_MOD, IND_SIZE, MEM_SIZE, REG_NUMBER, ArgType, op_by_code

_INVALID = object()


def _int32(value: int) -> int:
    """Wrap an integer to a signed 32-bit value."""
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def _cmod(value: int, modulus: int) -> int:
    """Remainder that keeps the sign of the dividend."""
    rest = abs(value) % modulus
    return -rest if value < 0 else rest


def _is_register(number: int) -> bool:
    return 1 <= number <= REG_NUMBER


def _decode(vm: Any, process: Champion, code: int) -> tuple[tuple[ArgType, ...], int] | None:
    """Check the coding byte after the opcode; return the kinds and the first argument position."""
    pos = (process.pc + 1) % MEM_SIZE
    byte = vm.memory[pos]
    if not check_coding_byte(byte, op_by_code(code)):
        return None
    return decode_coding_byte(byte), (pos + 1) % MEM_SIZE


def _fetch(memory: bytearray, pos: int, sizes: Sequence[int]) -> tuple[list[int], int]:
    """Read consecutive arguments of the given sizes."""
    args = []
    for size in sizes:
        args.append(read_int(memory, pos, size))
        pos = (pos + size) % MEM_SIZE
    return args, pos


def _advance(process: Champion, code: int, pos: int) -> None:
    process.cycle_instruction = op_by_code(code).nbr_cycles - 1
    process.pc = pos


def _fail(process: Champion, *, set_carry: bool) -> None:
    if set_carry:
        process.carry = 1
    process.pc = (process.pc + 1) % MEM_SIZE


def _store_result(process: Champion, register: int, value: int) -> None:
    value = _int32(value)
    process.registers[register - 1] = value
    process.carry = 1 if value == 0 else 0


def _resolve(process: Champion, value: int, kind: ArgType) -> Any:
    """Replace a register number by its content; other kinds pass through."""
    if kind != ArgType.REG:
        return value
    if not _is_register(value):
        return _INVALID
    return process.registers[value - 1]


def op_live(vm: Any, process: Champion) -> None:
    """Report the player whose number follows the opcode as alive."""
    player = read_int(vm.memory, (process.pc + 1) % MEM_SIZE, 4)
    vm.nb_live += 1
    process.cycle_instruction = op_by_code(1).nbr_cycles - 1
    process.pc = (process.pc + 1 + DIR_SIZE) % MEM_SIZE
    for champion in vm.champions:
        champion.last_live = False
        if champion.registers[0] == player:
            champion.live += 1
            champion.last_live = True
    name = process.header.prog_name if process.header else ""
    vm.out.write(f"The player {player}({name}) is alive.\n")


def _load(vm: Any, process: Champion, code: int, restricted: bool) -> None:
    decoded = _decode(vm, process, code)
    if decoded is None:
        return
    kinds, pos = decoded
    (offset, register), pos = _fetch(vm.memory, pos, (arg_size(kinds[0]), 1))
    if not _is_register(register):
        _fail(process, set_carry=True)
        return
    if restricted:
        offset = _cmod(offset, IDX_MOD)
    value = read_int(vm.memory, (process.pc + 2 + offset) % MEM_SIZE, 4)
    _store_result(process, register, value)
    _advance(process, code, pos)


def op_ld(vm: Any, process: Champion) -> None:
    """Load four bytes read at a restricted offset into a register."""
    _load(vm, process, 2, restricted=True)


def op_lld(vm: Any, process: Champion) -> None:
    """Load four bytes read at an unrestricted offset into a register."""
    _load(vm, process, 13, restricted=False)


def op_st(vm: Any, process: Champion) -> None:
    """Store a register into another register or into memory."""
    decoded = _decode(vm, process, 3)
    if decoded is None:
        return
    kinds, pos = decoded
    (source, target), pos = _fetch(vm.memory, pos, (1, arg_size(kinds[1])))
    if kinds[1] == ArgType.REG:
        if not (_is_register(source) and _is_register(target)):
            return
        process.registers[target - 1] = process.registers[source - 1]
    else:
        if not _is_register(source):
            return
        address = (process.pc + _cmod(target, IDX_MOD)) % MEM_SIZE
        write_int(vm.memory, address, process.registers[source - 1])
    _advance(process, 3, pos)


def _arithmetic(vm: Any, process: Champion, code: int, func: Callable[[int, int], int]) -> None:
    decoded = _decode(vm, process, code)
    if decoded is None:
        return
    _, pos = decoded
    (left, right, target), pos = _fetch(vm.memory, pos, (1, 1, 1))
    if not all(_is_register(number) for number in (left, right, target)):
        _fail(process, set_carry=True)
        return
    value = func(process.registers[left - 1], process.registers[right - 1])
    _store_result(process, target, value)
    _advance(process, code, pos)


def op_add(vm: Any, process: Champion) -> None:
    """Add two registers into a third."""
    _arithmetic(vm, process, 4, operator.add)


def op_sub(vm: Any, process: Champion) -> None:
    """Subtract two registers into a third."""
    _arithmetic(vm, process, 5, operator.sub)


def _bitwise(vm: Any, process: Champion, code: int, func: Callable[[int, int], int]) -> None:
    decoded = _decode(vm, process, code)
    if decoded is None:
        return
    kinds, pos = decoded
    (left, right, target), pos = _fetch(
        vm.memory, pos, (arg_size(kinds[0]), arg_size(kinds[1]), 1)
    )
    left = _resolve(process, left, kinds[0])
    right = _resolve(process, right, kinds[1])
    if left is _INVALID or right is _INVALID or not _is_register(target):
        _fail(process, set_carry=True)
        return
    _store_result(process, target, func(left, right))
    _advance(process, code, pos)


def op_and(vm: Any, process: Champion) -> None:
    """Bitwise and of two values into a register."""
    _bitwise(vm, process, 6, operator.and_)


def op_or(vm: Any, process: Champion) -> None:
    """Bitwise or of two values into a register."""
    _bitwise(vm, process, 7, operator.or_)


def op_xor(vm: Any, process: Champion) -> None:
    """Bitwise exclusive or of two values into a register."""
    _bitwise(vm, process, 8, operator.xor)


def op_zjmp(vm: Any, process: Champion) -> None:
    """Jump by a restricted offset when the carry is set."""
    process.cycle_instruction = 24
    if process.carry == 1:
        offset = read_int(vm.memory, process.pc + 1, IND_SIZE)
        process.pc = (process.pc + _cmod(offset, IDX_MOD)) % MEM_SIZE
    else:
        process.pc = (process.pc + 1 + IND_SIZE) % MEM_SIZE


def _load_index(vm: Any, process: Champion, code: int, restricted: bool) -> None:
    decoded = _decode(vm, process, code)
    if decoded is None:
        return
    kinds, pos = decoded
    (first, second, target), pos = _fetch(
        vm.memory, pos, (index_arg_size(kinds[0]), index_arg_size(kinds[1]), 1)
    )
    first = _resolve(process, first, kinds[0])
    if first is _INVALID:
        _fail(process, set_carry=True)
        return
    if kinds[1] == ArgType.REG and _is_register(second):
        second = process.registers[second - 1]
    elif kinds[1] == ArgType.REG and not restricted:
        _fail(process, set_carry=True)
        return
    # The restricted form keeps an out-of-range register number as a plain value.
    if not _is_register(target):
        _fail(process, set_carry=True)
        return

    def reach(offset: int) -> int:
        return _cmod(offset, IDX_MOD) if restricted else offset

    base = read_int(vm.memory, (process.pc + reach(first)) % MEM_SIZE, 2)
    total = _int32(base + second)
    value = read_int(vm.memory, (process.pc + reach(total)) % MEM_SIZE, 4)
    _store_result(process, target, value)
    _advance(process, code, pos)


def op_ldi(vm: Any, process: Champion) -> None:
    """Load through an index built from two values, with restricted reach."""
    _load_index(vm, process, 10, restricted=True)


def op_lldi(vm: Any, process: Champion) -> None:
    """Load through an index built from two values, with unrestricted reach."""
    _load_index(vm, process, 14, restricted=False)


def op_sti(vm: Any, process: Champion) -> None:
    """Store a register at an address built from two values."""
    decoded = _decode(vm, process, 11)
    if decoded is None:
        return
    kinds, pos = decoded
    (source, first, second), pos = _fetch(
        vm.memory, pos, (1, index_arg_size(kinds[1]), index_arg_size(kinds[2]))
    )
    if not _is_register(source):
        _fail(process, set_carry=False)
        return
    first = _resolve(process, first, kinds[1])
    second = _resolve(process, second, kinds[2])
    if first is _INVALID or second is _INVALID:
        _fail(process, set_carry=False)
        return
    offset = _cmod(_int32(first + second), IDX_MOD)
    write_int(vm.memory, (process.pc + offset) % MEM_SIZE, process.registers[source - 1])
    _advance(process, 11, pos)


def _spawn(vm: Any, process: Champion, code: int, restricted: bool) -> None:
    offset = read_int(vm.memory, (process.pc + 1) % MEM_SIZE, IND_SIZE)
    if restricted:
        offset = _cmod(offset, IDX_MOD)
    delay = op_by_code(code).nbr_cycles - 1
    process.cycle_instruction = delay
    process.fork((process.pc + offset) % MEM_SIZE, delay)


def op_fork(vm: Any, process: Champion) -> None:
    """Create a child process at a restricted offset."""
    _spawn(vm, process, 12, restricted=True)


def op_lfork(vm: Any, process: Champion) -> None:
    """Create a child process at an unrestricted offset."""
    _spawn(vm, process, 15, restricted=False)


def op_aff(vm: Any, process: Champion) -> None:
    """Write the low byte of a register as a character."""
    decoded = _decode(vm, process, 16)
    if decoded is None:
        return
    _, pos = decoded
    (register,), pos = _fetch(vm.memory, pos, (1,))
    if not _is_register(register):
        _fail(process, set_carry=False)
        return
    vm.out.write(chr(process.registers[register - 1] & 0xFF))
    _advance(process, 16, pos)


INSTRUCTIONS: dict[int, Callable[[Any, Champion], None]] = {
    1: op_live,
    2: op_ld,
    3: op_st,
    4: op_add,
    5: op_sub,
    6: op_and,
    7: op_or,
    8: op_xor,
    9: op_zjmp,
    10: op_ldi,
    11: op_sti,
    12: op_fork,
    13: op_lld,
    14: op_lldi,
    15: op_lfork,
    16: op_aff,
}